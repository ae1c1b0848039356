"""Persistence store capability and its SQL implementation."""
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

__all__ = [
    "AnalysisRecord",
    "NewAnalysis",
    "NewRoutine",
    "NewStudySession",
    "PersistenceStore",
    "RoutineRecord",
    "StudySessionRecord",
    "WeeklyProgressRecord",
]
