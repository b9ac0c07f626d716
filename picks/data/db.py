"""
Database access.

Sessions are request-scoped context managers over a cached SQLAlchemy engine
per URL:

    from picks.data.db import read_session_scope, write_session_scope

The URL comes from settings.database_url unless one is passed explicitly.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from picks.core.config import settings

_engine_cache: dict[str, tuple[Engine, sessionmaker]] = {}


SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS picks_table (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        model TEXT NOT NULL,
        product_type TEXT NOT NULL,
        resolution TEXT,
        bitrate REAL,
        framerate REAL,
        rm TEXT,
        mem TEXT,
        cpu TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS picks_model (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        model TEXT NOT NULL,
        pm TEXT NOT NULL,
        g4_pm REAL,
        max_support TEXT,
        ip TEXT,
        pci TEXT NOT NULL,
        u1 TEXT NOT NULL,
        u2 TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS api_user (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        api_key_sha256 TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS configuration (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        hardware TEXT NOT NULL,
        application TEXT NOT NULL,
        body TEXT NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS ix_configuration_user ON configuration (user_id, created_at)",
]


def _primary_url() -> str:
    return settings.database_url


def _get_sessionmaker(url: str) -> sessionmaker:
    cached = _engine_cache.get(url)
    if cached is not None:
        return cached[1]

    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    engine = create_engine(url, pool_pre_ping=True, future=True, connect_args=connect_args)
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True)
    _engine_cache[url] = (engine, factory)
    return factory


@contextmanager
def session_scope(url: str | None = None) -> Iterator[Session]:
    """Transactional scope: commit on success, rollback on error."""
    factory = _get_sessionmaker(url or _primary_url())
    db = factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def write_session_scope(url: str | None = None):
    return session_scope(url)


@contextmanager
def read_session_scope(url: str | None = None) -> Iterator[Session]:
    """Read-only scope. Nothing is committed."""
    factory = _get_sessionmaker(url or _primary_url())
    db = factory()
    try:
        yield db
    finally:
        db.rollback()
        db.close()


def init_schema(url: str | None = None) -> None:
    with session_scope(url) as db:
        for stmt in SCHEMA:
            db.execute(text(stmt))


def dispose_engines() -> None:
    for engine, _ in _engine_cache.values():
        engine.dispose()
    _engine_cache.clear()
