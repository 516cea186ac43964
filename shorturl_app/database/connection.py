"""
Database engine and session management.

Uses SQLAlchemy's asyncio extension so every store round trip suspends
the request coroutine instead of blocking the event loop.
"""

import logging
from typing import AsyncIterator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

from shorturl_app.config import settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def create_engine_for(database_url: str) -> AsyncEngine:
    """Create an async engine for the given database URL"""
    options = {}
    if make_url(database_url).get_backend_name() == "sqlite":
        # aiosqlite connections are bound to the event loop that opened them
        options["poolclass"] = NullPool
    return create_async_engine(database_url, **options)


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    # Committed rows stay readable without a lazy reload (no implicit IO in async)
    return async_sessionmaker(bind=bind, expire_on_commit=False, autoflush=False)


engine = create_engine_for(settings.database_url)
SessionLocal = create_session_factory(engine)


async def get_db() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency: one session per request"""
    async with SessionLocal() as session:
        yield session


async def init_db(bind: AsyncEngine = engine):
    """Create tables for all registered models"""
    # Import models to ensure they're registered with Base
    from shorturl_app import models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database ready (%s)", bind.url.get_backend_name())


async def drop_db(bind: AsyncEngine = engine):
    """Drop all tables (used by the test suite)"""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
