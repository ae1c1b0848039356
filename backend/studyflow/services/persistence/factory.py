"""Persistence store factory."""
from __future__ import annotations

from fastapi import Depends
from sqlalchemy.orm import sessionmaker

from studyflow.db.deps import get_session_factory
from studyflow.services.persistence.base import PersistenceStore
from studyflow.services.persistence.sql import SqlPersistenceStore


def get_persistence_store(session_factory: sessionmaker = Depends(get_session_factory)) -> PersistenceStore:
    return SqlPersistenceStore(session_factory)
