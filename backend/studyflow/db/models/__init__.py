"""ORM models exposed for metadata discovery."""
from studyflow.db.models.ai_analysis import AIAnalysis
from studyflow.db.models.routine import Routine
from studyflow.db.models.study_session import StudySession
from studyflow.db.models.user import User
from studyflow.db.models.weekly_progress import WeeklyProgress

__all__ = [
    "AIAnalysis",
    "Routine",
    "StudySession",
    "User",
    "WeeklyProgress",
]
