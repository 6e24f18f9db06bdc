"""
alembic.env

Migration environment for the game-room schema (`Base.metadata` from
`gamesroom_persistence.db.models`).

The URL is `Settings.database_url` (env `GAMESROOM_DATABASE_URL`).
Alembic runs on a sync driver, so point it at e.g. `sqlite:///` rather than
`sqlite+aiosqlite:///`.
"""

from __future__ import annotations

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from gamesroom_persistence.db import models  # noqa: F401  # register models on Base.metadata
from gamesroom_persistence.db.base import Base
from gamesroom_persistence.settings import get_settings

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _database_url() -> str:
    # Settings read GAMESROOM_DATABASE_URL themselves.
    return get_settings().database_url


def run_migrations_offline() -> None:
    context.configure(
        url=_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = _database_url()
    connectable = engine_from_config(configuration, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

