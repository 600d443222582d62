from __future__ import annotations

from pathlib import Path

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from sensorlog.core.config import Settings


def _is_sqlite(url: str) -> bool:
    return make_url(url).get_backend_name() == "sqlite"


def _is_memory_sqlite(url: str) -> bool:
    database = make_url(url).database
    return not database or database == ":memory:"


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for ``settings.database_url``.

    SQLite connections get WAL journaling, foreign key enforcement and a busy
    timeout so readers never block on the single writer. In-memory databases
    share one connection through ``StaticPool``, otherwise every session would
    see its own empty database.
    """
    url = settings.database_url
    if not _is_sqlite(url):
        return create_async_engine(url)

    options: dict = {"connect_args": {"check_same_thread": False}}
    if _is_memory_sqlite(url):
        options["poolclass"] = StaticPool
    engine = create_async_engine(url, **options)

    journal_mode = settings.sqlite_journal_mode
    busy_timeout = settings.sqlite_busy_timeout_ms

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragmas(dbapi_connection, _connection_record):
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute(f"PRAGMA journal_mode={journal_mode}")
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute(f"PRAGMA busy_timeout={int(busy_timeout)}")
        finally:
            cursor.close()

    return engine


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


def ensure_database_directory(url: str) -> Path | None:
    """Create the parent directory of a file-backed SQLite database."""
    if not _is_sqlite(url) or _is_memory_sqlite(url):
        return None
    path = Path(make_url(url).database).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return path
