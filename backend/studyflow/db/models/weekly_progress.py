"""Weekly progress ORM model (written by the backend, only read here)."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Index, Integer, UniqueConstraint, func, text as sa_text
from sqlalchemy.dialects.postgresql import UUID

from studyflow.db.base import Base


class WeeklyProgress(Base):
    __tablename__ = "weekly_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "week_start", name="uq_weekly_progress_user_week"),
        Index("ix_weekly_progress_user_id", "user_id"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    week_start = Column(Date, nullable=False)
    total_hours = Column(Float, nullable=False, server_default=sa_text("0"))
    days_completed = Column(Integer, nullable=False, server_default=sa_text("0"))
    progress_percentage = Column(Integer, nullable=False, server_default=sa_text("0"))
    average_motivation = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
