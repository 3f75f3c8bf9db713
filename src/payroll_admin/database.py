"""Database connection and state document persistence."""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from payroll_admin.config import get_settings
from payroll_admin.models.base import Base
from payroll_admin.models.storage import StoredState

logger = logging.getLogger(__name__)


def get_engine(database_url: str | None = None) -> Engine:
    """Create database engine.

    In-memory SQLite shares one connection so every session sees the same
    database.
    """
    url = database_url or get_settings().database_url
    if url == "sqlite://" or (url.startswith("sqlite") and ":memory:" in url):
        return create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if url.startswith("sqlite"):
        return create_engine(url, echo=False, connect_args={"check_same_thread": False})
    return create_engine(url, echo=False, pool_pre_ping=True)


def init_db(engine: Engine) -> sessionmaker[Session]:
    """Create tables and return a session factory."""
    Base.metadata.create_all(engine)
    return sessionmaker(engine, expire_on_commit=False, autoflush=False)


class StateRepository:
    """Key/value store of JSON documents.

    Plays the part of browser local storage: one opaque document per key,
    replaced wholesale on every save.
    """

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    @classmethod
    def from_url(cls, database_url: str | None = None) -> StateRepository:
        return cls(init_db(get_engine(database_url)))

    @contextmanager
    def _session(self) -> Generator[Session, None, None]:
        with self._session_factory() as session:
            try:
                yield session
                session.commit()
            except Exception:
                session.rollback()
                raise

    def ping(self) -> None:
        """Round-trip a trivial query; raises if the database is unreachable."""
        with self._session() as session:
            session.execute(text("SELECT 1"))

    def load(self, key: str) -> dict[str, Any] | None:
        """Return the document stored under key, or None."""
        with self._session() as session:
            record = session.get(StoredState, key)
            if record is None:
                return None
            return record.payload

    def save(self, key: str, payload: dict[str, Any]) -> None:
        with self._session() as session:
            record = session.get(StoredState, key)
            if record is None:
                session.add(StoredState(key=key, payload=payload))
            else:
                record.payload = payload
        logger.debug("Saved state document %s", key)

    def delete(self, key: str) -> bool:
        with self._session() as session:
            record = session.get(StoredState, key)
            if record is None:
                return False
            session.delete(record)
        logger.debug("Deleted state document %s", key)
        return True
