"""Alembic migration environment for the lead CRM.

Runs against the same async URL the app uses (``app.core.database.DATABASE_URL``,
with ``postgres://`` already normalized). SQLite URLs get batch mode so
column changes on ``status_hierarchy`` and ``leads`` can be migrated locally.
"""

import asyncio
import os
import sys
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context

# alembic may be invoked from outside the project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.database import DATABASE_URL, Base  # noqa: E402
from app.models import activity_log, lead, status_definition, user  # noqa: E402,F401

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=DATABASE_URL.startswith("sqlite"),
        **kwargs,
    )


def run_migrations_offline() -> None:
    _configure(url=DATABASE_URL, literal_binds=True, dialect_opts={"paramstyle": "named"})
    with context.begin_transaction():
        context.run_migrations()


def _run_sync_migrations(connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    migration_engine = create_async_engine(DATABASE_URL, poolclass=pool.NullPool)
    try:
        async with migration_engine.connect() as connection:
            await connection.run_sync(_run_sync_migrations)
    finally:
        await migration_engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
