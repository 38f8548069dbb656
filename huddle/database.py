from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from huddle.config import Settings
from huddle.errors import DatabaseConnectionError

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


class Database:
    """Pooled engine and session factory for the relational store.

    One instance is built at startup and handed to the components that need
    storage; nothing in the package reaches for a module-level engine.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        if engine.dialect.name == "sqlite":
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        self.session_factory = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        url = make_url(settings.database_url)
        options: dict[str, Any] = {"echo": settings.debug, "future": True, "pool_pre_ping": True}
        if url.get_backend_name() != "sqlite":
            # pool_size: connections kept open; max_overflow: extra ones created on demand
            options.update(pool_size=10, max_overflow=20)
        return cls(create_engine(url, **options))

    def ping(self) -> None:
        """Verify that the store accepts connections."""

        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            raise DatabaseConnectionError(f"Database is unreachable: {exc}") from exc
        logger.info("Connected to %s database", self.engine.dialect.name)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Context manager for short-lived sessions outside request handling."""

        db = self.session_factory()
        try:
            yield db
        finally:
            db.close()

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Iterator[Session]:
    database: Database = request.app.state.database
    db = database.session_factory()
    try:
        yield db
    finally:
        db.close()
