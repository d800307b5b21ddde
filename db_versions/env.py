import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from record_store.db.context import Context
from record_store.db import models  # noqa: F401  registers the tables on the metadata

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

if os.getenv("SQLALCHEMY_DATABASE_URI"):
    config.set_main_option("sqlalchemy.url", os.environ["SQLALCHEMY_DATABASE_URI"])

target_metadata = Context().db_base.metadata


def run_migrations_offline():
    """emit the migration as SQL without connecting"""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
