import importlib.util
from pathlib import Path

import pytest
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import create_engine, inspect

from record_store.db.context import Context
from record_store.db import models  # noqa: F401

VERSIONS_DIR = Path(__file__).resolve().parent.parent / "db_versions" / "versions"


def load_revisions():
    revisions = []
    for path in sorted(VERSIONS_DIR.glob("*.py")):
        spec = importlib.util.spec_from_file_location(path.stem, path)
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        revisions.append(module)
    return revisions


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'migrations.db'}")
    yield engine
    engine.dispose()


def run(engine, step):
    with engine.begin() as connection:
        with Operations.context(MigrationContext.configure(connection)):
            step()


def test_single_base_revision():
    revisions = load_revisions()
    assert [r.down_revision for r in revisions] == [None]


def test_upgrade_matches_models(engine):
    (revision,) = load_revisions()
    run(engine, revision.upgrade)

    inspector = inspect(engine)
    metadata = Context().db_base.metadata
    for table in ("records", "record_tips"):
        migrated = {c["name"] for c in inspector.get_columns(table)}
        assert migrated == {c.name for c in metadata.tables[table].columns}

    assert inspector.get_pk_constraint("record_tips")["constrained_columns"] == ["host", "tag"]
    assert inspector.get_pk_constraint("records")["constrained_columns"] == ["id"]
    uniques = inspector.get_unique_constraints("records")
    assert [u["column_names"] for u in uniques] == [["host", "tag", "idx"]]
    assert {i["name"] for i in inspector.get_indexes("records")} >= {"ix_records_parent", "ix_records_user_id"}


def test_downgrade_drops_tables(engine):
    (revision,) = load_revisions()
    run(engine, revision.upgrade)
    run(engine, revision.downgrade)
    assert set(inspect(engine).get_table_names()) == set()
