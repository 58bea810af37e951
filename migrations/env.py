# migrations/env.py

import asyncio
from logging.config import fileConfig
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import async_engine_from_config
from alembic import context

from oauth_clients.adapters.configuration.config import settings
from oauth_clients.adapters.outbound.persistence.models import Base

# Database URL, always with the asyncpg driver
DB_URL = str(settings.DATABASE_URL).replace("postgresql+psycopg2", "postgresql+asyncpg")

# Alembic config
alembic_config = context.config

# Default Alembic logging
if alembic_config.config_file_name is not None:
    fileConfig(alembic_config.config_file_name)

# Set the database URL in alembic.ini dynamically
alembic_config.set_main_option("sqlalchemy.url", DB_URL)

# Channel used by the notification trigger
alembic_config.attributes.setdefault("client_changes_channel", settings.CLIENT_CHANGES_CHANNEL)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Migrations offline"""
    url = alembic_config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """Migrations online"""
    connectable = async_engine_from_config(
        alembic_config.get_section(alembic_config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
