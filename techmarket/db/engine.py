"""Async SQLAlchemy engine and session factory."""

from __future__ import annotations

from pathlib import Path
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from techmarket.config import get_settings
from techmarket.models import Base

_settings = get_settings()

_SQLITE_PREFIX = "sqlite+aiosqlite:///"


def enable_sqlite_foreign_keys(target) -> None:
    """SQLite leaves FOREIGN KEY constraints unenforced unless each connection opts in."""

    @event.listens_for(target.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


if _settings.database_url.startswith(_SQLITE_PREFIX) and ":memory:" not in _settings.database_url:
    _db_path = _settings.database_url.replace(_SQLITE_PREFIX, "")
    Path(_db_path).parent.mkdir(parents=True, exist_ok=True)

engine = create_async_engine(_settings.database_url, echo=False)
if engine.dialect.name == "sqlite":
    enable_sqlite_foreign_keys(engine)
async_session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db():
    """FastAPI dependency that yields an async DB session."""
    async with async_session_factory() as session:
        yield session


async def init_db() -> None:
    """Create all tables (idempotent)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
