from __future__ import annotations

from typing import Callable, List
from uuid import uuid4

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fakes import RecordingStore
from studyflow.db.base import Base
from studyflow.db import models  # noqa: F401  ensure models are loaded
from studyflow.observability import client as opik_client
from studyflow.services.auth.base import AuthUser


@pytest.fixture(autouse=True)
def _opik_disabled():
    opik_client.reset_opik_client()
    yield
    opik_client.reset_opik_client()


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):  # pragma: no cover - sqlite setup
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    engine.dispose()


@pytest.fixture()
def calls() -> List[str]:
    return []


@pytest.fixture()
def user() -> AuthUser:
    return AuthUser(id=uuid4(), email="ana@example.com", name="Ana")


@pytest.fixture()
def make_store(calls) -> Callable[..., RecordingStore]:
    def factory(**failures: Exception) -> RecordingStore:
        return RecordingStore(calls, failures)

    return factory
