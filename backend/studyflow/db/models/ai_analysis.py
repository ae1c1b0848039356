"""AI analysis ORM model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Text, func
from sqlalchemy.dialects.postgresql import UUID

from studyflow.db.base import Base
from studyflow.db.types import JSONBCompat, TextArrayCompat

ANALYSIS_TYPES = ("routine", "progress", "motivation")


class AIAnalysis(Base):
    __tablename__ = "ai_analysis"
    __table_args__ = (
        CheckConstraint(
            "analysis_type IN (" + ", ".join(f"'{kind}'" for kind in ANALYSIS_TYPES) + ")",
            name="ck_ai_analysis_type",
        ),
        Index("ix_ai_analysis_user_id", "user_id"),
        Index("ix_ai_analysis_routine_id", "routine_id"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    routine_id = Column(UUID(as_uuid=True), ForeignKey("routines.id", ondelete="SET NULL"), nullable=True)
    analysis_type = Column(Text, nullable=False, default="routine")
    insights = Column(Text, nullable=False, default="")
    recommendations = Column(TextArrayCompat, nullable=False, default=list)
    # hours_studied, days_completed, weekly_progress, motivation_level
    metrics = Column(JSONBCompat, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
