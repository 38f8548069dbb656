"""Shared pytest fixtures for backend tests."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from huddle.config import Settings
from huddle.database import Database
from huddle.main import create_app
from huddle.provisioning import provision


@pytest.fixture()
def test_engine() -> Iterator[Engine]:
    """Provide an empty in-memory SQLite engine for isolated tests."""

    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture()
def database(test_engine) -> Database:
    """Wrap the test engine; foreign keys are enforced on SQLite connections."""

    return Database(test_engine)


@pytest.fixture()
def provisioned(database) -> Database:
    report = provision(database.engine)
    assert report.ok, report.failed
    return database


@pytest.fixture()
def db_session(provisioned) -> Iterator[Session]:
    """Yield a SQLAlchemy session bound to a fully provisioned store."""

    session = provisioned.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def settings() -> Settings:
    return Settings(_env_file=None, database_url_override="sqlite+pysqlite:///:memory:")


@pytest.fixture()
def client(settings, database) -> Iterator[TestClient]:
    """Yield a TestClient; startup provisions the schema on the test engine."""

    app = create_app(settings, database)
    with TestClient(app) as test_client:
        yield test_client
