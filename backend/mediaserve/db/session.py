"""Engine and sessions for the asset metadata table.

This service only reads asset rows, so sessions never autoflush and
objects stay usable after the session closes.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from mediaserve.core.config import get_settings

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        # Connections can sit idle between requests; check before reuse.
        _engine = create_async_engine(get_settings().db_url, pool_pre_ping=True)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            get_engine(),
            autoflush=False,
            expire_on_commit=False,
        )
    return _session_factory


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one metadata session per request."""
    async with get_session_factory()() as session:
        yield session


def reset_session_factory() -> None:
    """Forget the engine without disposing it; tests call this after changing settings."""
    global _engine, _session_factory
    _engine = None
    _session_factory = None


async def dispose_engine() -> None:
    """Close pooled connections so a later lifespan builds a fresh engine."""
    engine = _engine
    reset_session_factory()
    if engine is not None:
        await engine.dispose()
