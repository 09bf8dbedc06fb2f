"""Database engine, session factory and declarative base."""

from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import settings


class Base(DeclarativeBase):
    """Declarative base for all models."""


def create_engine(url: str | None = None, **kwargs: Any) -> AsyncEngine:
    """Create an async engine with pool settings suited to the backend."""
    url = url or settings.database_url
    if url.startswith("postgresql"):
        kwargs.setdefault("pool_size", settings.db_pool_size)
        kwargs.setdefault("max_overflow", settings.db_max_overflow)
        kwargs.setdefault("pool_pre_ping", True)
    return create_async_engine(url, echo=False, **kwargs)


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to an engine."""
    return async_sessionmaker(bind, expire_on_commit=False, autoflush=False)


engine = create_engine()
async_session_maker = create_session_factory(engine)


async def init_db(bind: AsyncEngine | None = None) -> None:
    """Create all tables (development only; production uses Alembic)."""
    import app.models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Dispose of the engine connection pool."""
    await engine.dispose()
