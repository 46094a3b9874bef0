"""Alembic environment.

DATABASE_URL comes from accounts_service.core.config, the same place the
running service reads it, so migrations and app never disagree on target.
"""

from __future__ import annotations

from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from accounts_service.core.config import SETTINGS
from accounts_service.db.engine import Base
from alembic import context

config = context.config

if SETTINGS.database_url:
    # Migrations run synchronously; drop the asyncpg driver suffix (psycopg2).
    sync_url = SETTINGS.database_url.replace(
        "postgresql+asyncpg", "postgresql"
    )
    config.set_main_option("sqlalchemy.url", sync_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Registers the table classes on Base.metadata for autogenerate.
import accounts_service.db.tables  # noqa: E402, F401

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emit SQL to stdout without connecting."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
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
