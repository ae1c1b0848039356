"""Persistence store interface and the records it exchanges."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional
from uuid import UUID

from studyflow.services.auth.base import AuthUser


@dataclass
class NewRoutine:
    wake_up_time: str
    study_methods: List[str]
    daily_tasks: List[str]
    priorities: List[str]
    rest_time: str


@dataclass
class NewAnalysis:
    routine_id: Optional[UUID]
    insights: str
    recommendations: List[str]
    metrics: Dict[str, float | int]
    analysis_type: str = "routine"


@dataclass
class NewStudySession:
    routine_id: Optional[UUID]
    date: date
    hours_studied: float
    tasks_completed: int
    motivation_score: int
    notes: Optional[str] = None


@dataclass
class RoutineRecord:
    id: UUID
    user_id: UUID
    wake_up_time: str
    study_methods: List[str]
    daily_tasks: List[str]
    priorities: List[str]
    rest_time: str
    created_at: Optional[datetime] = None


@dataclass
class AnalysisRecord:
    id: UUID
    user_id: UUID
    routine_id: Optional[UUID]
    analysis_type: str
    insights: str
    recommendations: List[str] = field(default_factory=list)
    metrics: Dict[str, float | int] = field(default_factory=dict)
    created_at: Optional[datetime] = None


@dataclass
class StudySessionRecord:
    id: UUID
    user_id: UUID
    routine_id: Optional[UUID]
    date: date
    hours_studied: float
    tasks_completed: int
    motivation_score: int
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class WeeklyProgressRecord:
    id: UUID
    user_id: UUID
    week_start: date
    total_hours: float
    days_completed: int
    progress_percentage: int
    average_motivation: Optional[int] = None


class PersistenceStore:
    """Base interface for the hosted relational backend.

    Creates return the inserted row. Reads are always scoped to one user.
    """

    def ensure_profile(self, user: AuthUser) -> None:
        raise NotImplementedError

    def create_routine(self, user_id: UUID, routine: NewRoutine) -> RoutineRecord:
        raise NotImplementedError

    def create_analysis(self, user_id: UUID, analysis: NewAnalysis) -> AnalysisRecord:
        raise NotImplementedError

    def create_study_session(self, user_id: UUID, session: NewStudySession) -> StudySessionRecord:
        raise NotImplementedError

    def list_routines(self, user_id: UUID) -> List[RoutineRecord]:
        raise NotImplementedError

    def list_study_sessions(self, user_id: UUID, limit: int = 10) -> List[StudySessionRecord]:
        raise NotImplementedError

    def list_analyses(self, user_id: UUID, limit: int = 5) -> List[AnalysisRecord]:
        raise NotImplementedError

    def list_weekly_progress(self, user_id: UUID, limit: int = 4) -> List[WeeklyProgressRecord]:
        raise NotImplementedError
