"""Async SQLAlchemy engine and session factory.

Learn: SQLAlchemy 2.0 async mode — create_async_engine for connection
pooling, AsyncSession for per-request database access, dependency
injection via FastAPI. The pool is the only state shared between
requests.
"""

from collections.abc import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from todoapp.config import settings
from todoapp.db.models import Base


def build_engine(url: str, echo: bool = False, **pool_options) -> AsyncEngine:
    """Create an async engine. Pool sizing only applies to server databases."""
    if url.startswith("sqlite"):
        pool_options = {}
    return create_async_engine(url, echo=echo, **pool_options)


# Connection pool: 5 steady, up to 20 under load.
# echo=True in debug to see SQL queries.
engine = build_engine(
    settings.database_url,
    echo=settings.debug,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
)

# Session factory — each request gets its own session.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency — yields a session per request, auto-closes."""
    async with async_session_factory() as session:
        yield session


async def create_schema(bind: AsyncEngine) -> None:
    """Create all five tables if they do not exist yet."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
