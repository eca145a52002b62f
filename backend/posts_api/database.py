"""
Posts API — Database Client Adapter
====================================

What:  A single shared handle to the hosted database: async SQLAlchemy engine,
       session factory, and the FastAPI session dependency.
Why:   Centralizes all database connection logic in one place.
How:   `Database` wraps an async engine built from the configured URL and
       access key. One instance is created at startup, stored on
       `app.state.database`, and reused by every request.
Who:   Route handlers receive sessions via `Depends(get_db_session)`.
When:  Engine is created once per app; sessions are created per request.

Why an injected adapter (not a module-level engine):
    Tests hand `create_app()` a Database pointed at in-memory SQLite;
    production builds one from Settings. Nothing imports a global engine.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, AsyncIterator, Dict, Optional

from fastapi import Request
from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from posts_api.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for ORM mappings. The schema itself is owned by the hosted database."""
    pass


def build_database_url(database_url: str, database_key: Optional[str] = None) -> URL:
    """
    Combine the database URL and access key into a connection URL.

    The key is applied as the connection password unless the URL already
    carries one. Plain `postgresql://` URLs are switched to the asyncpg driver.
    """
    url = make_url(database_url)
    if url.drivername in ("postgres", "postgresql"):
        url = url.set(drivername="postgresql+asyncpg")
    if database_key and not url.password and not url.drivername.startswith("sqlite"):
        url = url.set(password=database_key)
    return url


class Database:
    """
    Async engine plus session factory for one database.

    Attributes:
        engine:          The AsyncEngine (connection pool lives here)
        session_factory: Creates a new AsyncSession per request
    """

    def __init__(self, url: Any, **engine_kwargs: Any):
        url = make_url(url) if isinstance(url, str) else url
        options: Dict[str, Any] = {}
        if url.drivername.startswith("sqlite"):
            # In-memory SQLite must share one connection across sessions
            options.update(
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        options.update(engine_kwargs)

        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, **options)
        # expire_on_commit=False: rows stay readable after commit for serialization
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build the production adapter from configured credentials and pool knobs."""
        url = build_database_url(settings.database_url, settings.database_key)
        kwargs: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
        if not url.drivername.startswith("sqlite"):
            kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
            )
        logger.info("Database adapter configured for host %s", url.host or url.database)
        return cls(url, **kwargs)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Yield a session, rolling back on error and always closing.

        Services commit their own writes, so nothing is committed here.
        """
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def dispose(self) -> None:
        """Close all pooled connections. Called on application shutdown."""
        await self.engine.dispose()


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    Example usage in a route:
        @router.get("/posts")
        async def list_posts(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
