# oauth_clients/adapters/outbound/persistence/database.py

import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base

from oauth_clients.adapters.configuration.config import Settings

# Configure logger
logger = logging.getLogger(__name__)

# Parent class of every ORM model, holds the metadata used by the migrations
Base = declarative_base()


def create_engine(settings: Settings) -> AsyncEngine:
    """
    Build the async engine for the configured database.

    Args:
        settings: Application settings

    Returns:
        AsyncEngine bound to DATABASE_URL with the asyncpg driver
    """
    database_url = str(settings.DATABASE_URL).replace("postgresql+psycopg2", "postgresql+asyncpg")
    logger.info(f"Connecting to database: {database_url.split('@')[-1]}")

    return create_async_engine(
        database_url,
        echo=False,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=30,
        pool_recycle=1800,
        pool_pre_ping=True
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Create the async session factory bound to engine."""
    return async_sessionmaker(
        autoflush=False,
        bind=engine,
        expire_on_commit=False,
    )


@asynccontextmanager
async def get_db_context(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    """
    Provides an async context for database operations,
    committing on success and rolling back on error.

    Yields:
        AsyncSession: SQLAlchemy async session

    Example:
        ```python
        async with get_db_context(session_factory) as db:
            db.add(ClientModel(id="abc", secret=hashed))
        ```
    """
    session = session_factory()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()
