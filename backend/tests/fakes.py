"""Recording fakes for the session store, persistence store and analyzer."""
from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional
from uuid import UUID, uuid4

from studyflow.api.schemas.analysis import RoutineAnalysisInput, RoutineAnalysisOutput
from studyflow.services.auth.base import AuthUser, SessionStore
from studyflow.services.persistence.base import (
    AnalysisRecord,
    NewAnalysis,
    NewRoutine,
    NewStudySession,
    PersistenceStore,
    RoutineRecord,
    StudySessionRecord,
    WeeklyProgressRecord,
)

FIXED_TODAY = date(2025, 3, 10)

ANALYSIS_PAYLOAD = {
    "hoursStudied": 5.5,
    "daysCompleted": 6,
    "weeklyProgress": 70,
    "motivationLevel": 85,
    "insights": "Solid morning block, overloaded evenings.",
    "recommendations": ["Move reviews to the morning", "Add a 10 minute break every hour"],
}


def routine_input(**overrides) -> RoutineAnalysisInput:
    payload = {
        "wakeUpTime": "06:30",
        "studyMethods": ["Pomodoro", "Flashcards"],
        "dailyTasks": ["Math exercises", "Read chapter 3", "Review notes"],
        "priorities": ["Calculus exam"],
        "restTime": "23:00",
    }
    payload.update(overrides)
    return RoutineAnalysisInput.model_validate(payload)


class RecordingStore(PersistenceStore):
    """In-memory store that logs every call into a shared list."""

    def __init__(self, calls: List[str], failures: Optional[Dict[str, Exception]] = None):
        self.calls = calls
        self.failures = failures or {}
        self.routines: List[RoutineRecord] = []
        self.analyses: List[AnalysisRecord] = []
        self.sessions: List[StudySessionRecord] = []
        self.weekly: List[WeeklyProgressRecord] = []
        self.profiles: List[AuthUser] = []

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if name in self.failures:
            raise self.failures[name]

    def ensure_profile(self, user: AuthUser) -> None:
        self._record("ensure_profile")
        self.profiles.append(user)

    def create_routine(self, user_id: UUID, routine: NewRoutine) -> RoutineRecord:
        self._record("create_routine")
        record = RoutineRecord(id=uuid4(), user_id=user_id, **vars(routine))
        self.routines.append(record)
        return record

    def create_analysis(self, user_id: UUID, analysis: NewAnalysis) -> AnalysisRecord:
        self._record("create_analysis")
        record = AnalysisRecord(id=uuid4(), user_id=user_id, **vars(analysis))
        self.analyses.append(record)
        return record

    def create_study_session(self, user_id: UUID, session: NewStudySession) -> StudySessionRecord:
        self._record("create_study_session")
        record = StudySessionRecord(id=uuid4(), user_id=user_id, **vars(session))
        self.sessions.append(record)
        return record

    def list_routines(self, user_id: UUID) -> List[RoutineRecord]:
        self._record("list_routines")
        return [r for r in self.routines if r.user_id == user_id]

    def list_study_sessions(self, user_id: UUID, limit: int = 10) -> List[StudySessionRecord]:
        self._record("list_study_sessions")
        return [s for s in self.sessions if s.user_id == user_id][:limit]

    def list_analyses(self, user_id: UUID, limit: int = 5) -> List[AnalysisRecord]:
        self._record("list_analyses")
        return [a for a in self.analyses if a.user_id == user_id][:limit]

    def list_weekly_progress(self, user_id: UUID, limit: int = 4) -> List[WeeklyProgressRecord]:
        self._record("list_weekly_progress")
        return [w for w in self.weekly if w.user_id == user_id][:limit]


class StubSessionStore(SessionStore):
    def __init__(self, calls: List[str], user: Optional[AuthUser] = None):
        super().__init__()
        self.calls = calls
        self.user = user

    def current_session(self):
        return None

    def get_user(self) -> Optional[AuthUser]:
        self.calls.append("get_user")
        return self.user


class StubAnalyzer:
    def __init__(self, calls: List[str], payload: Optional[dict] = None, error: Optional[Exception] = None):
        self.calls = calls
        self.payload = payload or ANALYSIS_PAYLOAD
        self.error = error
        self.seen: List[RoutineAnalysisInput] = []

    def analyze(self, routine: RoutineAnalysisInput) -> RoutineAnalysisOutput:
        self.calls.append("analyze")
        self.seen.append(routine)
        if self.error is not None:
            raise self.error
        return RoutineAnalysisOutput.model_validate(self.payload)


