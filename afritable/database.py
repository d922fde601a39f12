"""Async SQLAlchemy engine, session factory, and Base declaration."""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import text

from afritable.config import settings


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""
    pass


def build_engine(database_url: str, **kwargs: Any) -> AsyncEngine:
    """
    Create an async engine for the given URL.

    Pool sizing only applies to server databases; SQLite (aiosqlite) uses
    SQLAlchemy's default pool unless the caller passes one.
    """
    options: dict[str, Any] = {
        "echo": (settings.app_env == "development" and settings.log_level.upper() == "DEBUG"),
        "pool_pre_ping": True,
    }
    if not database_url.startswith("sqlite") and "poolclass" not in kwargs:
        options.update(pool_size=10, max_overflow=20)
    options.update(kwargs)
    return create_async_engine(database_url, **options)


def build_sessionmaker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=bind, class_=AsyncSession, expire_on_commit=False)


# Process-wide engine for the web app. Maintenance jobs open their own
# via open_store() so the handle is scoped to one invocation.
engine = build_engine(settings.database_url)

AsyncSessionLocal = build_sessionmaker(engine)


async def get_db() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency: yields an async database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def open_store(
    database_url: Optional[str] = None,
    create_tables: bool = False,
    **engine_kwargs: Any,
) -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    """
    Acquire a session factory for one job invocation and dispose it on exit.

    Usage:
        async with open_store() as session_factory:
            report = await run_cleanup(session_factory, ...)
    """
    job_engine = build_engine(database_url or settings.database_url, **engine_kwargs)
    try:
        if create_tables:
            await create_all(job_engine)
        yield build_sessionmaker(job_engine)
    finally:
        await job_engine.dispose()


async def create_all(bind: AsyncEngine) -> None:
    """Create every mapped table (idempotent, IF NOT EXISTS)."""
    from afritable import models  # noqa: F401  registers models

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def check_db_connectivity(
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
) -> bool:
    """Return True if a simple SELECT 1 succeeds."""
    factory = session_factory or AsyncSessionLocal
    try:
        async with factory() as session:
            await session.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
