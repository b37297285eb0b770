"""Alembic environment for the groupwork schema.

The URL comes from ``groupwork.config.settings``. A caller that already holds
a connection (the test suite, an embedding script) can pass it through
``config.attributes["connection"]`` and the migrations run on it directly.
"""
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from groupwork.config import settings
from groupwork.database import Base
import groupwork.models  # noqa: F401

config = context.config
target_metadata = Base.metadata


def _configure(**kwargs) -> None:
    context.configure(target_metadata=target_metadata, compare_type=True, **kwargs)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_offline() -> None:
    _configure(
        url=settings.DATABASE_URL,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=settings.DATABASE_URL.startswith("sqlite"),
    )


def run_migrations_online(connection) -> None:
    _configure(connection=connection, render_as_batch=connection.dialect.name == "sqlite")


def main() -> None:
    shared = config.attributes.get("connection")
    if shared is not None:
        run_migrations_online(shared)
        return

    # Only a standalone `alembic` run owns the logging setup
    if config.config_file_name is not None:
        fileConfig(config.config_file_name)
    if context.is_offline_mode():
        run_migrations_offline()
        return

    config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        run_migrations_online(connection)


main()
