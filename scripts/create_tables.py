# scripts/create_tables.py
# dev shortcut, production schemas are provisioned with `alembic upgrade head`
import logging

from record_store.db.context import Context
from record_store.db import models  # noqa: F401  registers the tables on the metadata
from record_store.utilities.config import Settings
from record_store.utilities.log_constants import _DEFAULT_LOGGER_NAME

if __name__ == "__main__":
    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level)
    logger = logging.getLogger(_DEFAULT_LOGGER_NAME)

    ctx = Context()
    ctx.init_session(settings.database_uri)
    ctx.create_tables()
    logger.info(f"tables created/ensured on {ctx.engine.url.render_as_string(hide_password=True)}")
    ctx.dispose()
