"""FastAPI dependencies for database access."""
from __future__ import annotations

from typing import Iterator

from sqlalchemy.orm import Session, sessionmaker

from studyflow.db.session import SessionLocal


def get_session_factory() -> sessionmaker:
    """Return the factory used to open short-lived sessions."""
    return SessionLocal


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
