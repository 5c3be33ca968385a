"""Alembic environment configuration (master database only)"""

from logging.config import fileConfig
from alembic import context
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool
import asyncio

from netcafe.core.config import get_settings
from netcafe.core.database import MASTER_TABLES
from sqlmodel import SQLModel

# this is the Alembic Config object
config = context.config

# Interpret the config file for Python logging
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Tenant tables share this metadata; include_object keeps them out
target_metadata = SQLModel.metadata
MASTER_TABLE_NAMES = {table.name for table in MASTER_TABLES}


def include_object(obj, name, type_, reflected, compare_to):
    if type_ == "table":
        return name in MASTER_TABLE_NAMES
    table = getattr(obj, "table", None)
    if table is not None:
        return table.name in MASTER_TABLE_NAMES
    return True


def get_url():
    """Database URL from application settings"""
    return get_settings().DATABASE_URL


def run_migrations_offline():
    """Run migrations in 'offline' mode"""
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        include_object=include_object,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection):
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        include_object=include_object,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online():
    """Run migrations in 'online' mode"""
    connectable = create_async_engine(get_url(), poolclass=NullPool)

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
