"""Print the records of one (host, tag) chain and check that it links up.

    SQLALCHEMY_DATABASE_URI=postgresql://... python scripts/inspect_chain.py <host> history
    SQLALCHEMY_DATABASE_URI=postgresql://... python scripts/inspect_chain.py --user 42
"""
import argparse
import json
import logging
import sys

from record_store.db.container import create_container
from record_store.db.exceptions import ChainIntegrityError, NotFoundError
from record_store.utilities import chain_inspector
from record_store.utilities.config import Settings
from record_store.utilities.log_constants import _DEFAULT_LOGGER_NAME


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="inspect a record chain")
    parser.add_argument("host", nargs="?", help="host uuid")
    parser.add_argument("tag", nargs="?", default="history")
    parser.add_argument("--user", type=int, help="list every chain of this user instead")
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level)
    logger = logging.getLogger(_DEFAULT_LOGGER_NAME)

    container = create_container(settings, modules=[chain_inspector])
    try:
        if args.user is not None:
            print(json.dumps(chain_inspector.describe_user(args.user), indent=2))
            return 0
        if not args.host:
            parser.error("host is required unless --user is given")

        for row in chain_inspector.describe_chain(args.host, args.tag):
            print("{idx:>6}  {id}  parent={parent}  {timestamp}  {version}  user={user_id}  {size}B".format(**row))
        chain_inspector.check_chain(args.host, args.tag)
        return 0
    except NotFoundError as e:
        logger.error(str(e))
        return 1
    except ChainIntegrityError as e:
        logger.error(f"integrity check failed: {e}")
        return 2
    finally:
        container.unwire()
        container.context().dispose()


if __name__ == "__main__":
    sys.exit(main())
