"""Study session ORM model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Index, Integer, Text, func, text as sa_text
from sqlalchemy.dialects.postgresql import UUID

from studyflow.db.base import Base

DEFAULT_MOTIVATION_SCORE = 75


class StudySession(Base):
    __tablename__ = "study_sessions"
    __table_args__ = (
        Index("ix_study_sessions_user_id", "user_id"),
        Index("ix_study_sessions_date", "date"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    routine_id = Column(UUID(as_uuid=True), ForeignKey("routines.id", ondelete="SET NULL"), nullable=True)
    date = Column(Date, nullable=False)
    hours_studied = Column(Float, nullable=False, server_default=sa_text("0"))
    tasks_completed = Column(Integer, nullable=False, server_default=sa_text("0"))
    motivation_score = Column(Integer, nullable=False, default=DEFAULT_MOTIVATION_SCORE)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
