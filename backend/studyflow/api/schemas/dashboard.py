"""Schemas for dashboard endpoint."""
from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel


class DashboardStatsPayload(BaseModel):
    total_hours_studied: float
    sessions_count: int
    total_tasks_completed: int
    average_motivation: int


class StudySessionItem(BaseModel):
    id: UUID
    routine_id: Optional[UUID]
    date: date
    hours_studied: float
    tasks_completed: int
    motivation_score: int
    notes: Optional[str]


class AnalysisItem(BaseModel):
    id: UUID
    routine_id: Optional[UUID]
    analysis_type: str
    insights: str
    recommendations: List[str]
    metrics: Dict[str, float]
    created_at: Optional[datetime]


class WeeklyProgressItem(BaseModel):
    week_start: date
    total_hours: float
    days_completed: int
    progress_percentage: int
    average_motivation: Optional[int]


class DashboardResponse(BaseModel):
    user_id: UUID
    stats: DashboardStatsPayload
    study_sessions: List[StudySessionItem]
    analyses: List[AnalysisItem]
    weekly_progress: List[WeeklyProgressItem]
    failed_sources: List[str]
    request_id: str
