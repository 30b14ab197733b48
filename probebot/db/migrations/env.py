"""Alembic environment for the probebot schema.

Migrations are hand-written SQL and run through SQLAlchemy's asyncpg
dialect against the same DSN the service uses.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

from probebot.db.pool import resolve_dsn

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def get_database_url() -> str:
    """Resolve the service DSN, falling back to alembic.ini, for the asyncpg dialect."""
    url = resolve_dsn() or config.get_main_option("sqlalchemy.url", "")
    # The service uses plain asyncpg DSNs; SQLAlchemy needs the driver named
    return url.replace("postgresql://", "postgresql+asyncpg://", 1)


def _run(**options) -> None:
    # No ORM models, so no autogenerate metadata
    context.configure(target_metadata=None, **options)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """Apply migrations over a short-lived asyncpg engine."""
    engine = create_async_engine(get_database_url(), poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(lambda sync_connection: _run(connection=sync_connection))
    finally:
        await engine.dispose()


if context.is_offline_mode():
    _run(url=get_database_url(), literal_binds=True, dialect_opts={"paramstyle": "named"})
else:
    asyncio.run(run_migrations_online())
