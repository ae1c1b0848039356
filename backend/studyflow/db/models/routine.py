"""Routine ORM model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, Index, Text, func
from sqlalchemy.dialects.postgresql import UUID

from studyflow.db.base import Base
from studyflow.db.types import TextArrayCompat


class Routine(Base):
    __tablename__ = "routines"
    __table_args__ = (Index("ix_routines_user_id", "user_id"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    wake_up_time = Column(Text, nullable=False)
    study_methods = Column(TextArrayCompat, nullable=False, default=list)
    daily_tasks = Column(TextArrayCompat, nullable=False, default=list)
    priorities = Column(TextArrayCompat, nullable=False, default=list)
    rest_time = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
