"""SQLAlchemy implementation of the persistence store."""
from __future__ import annotations

import logging
from typing import Callable, List, TypeVar
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from studyflow.core.errors import (
    FOREIGN_KEY_VIOLATION,
    PERMISSION_DENIED,
    ForeignKeyViolationError,
    PermissionDeniedError,
    PersistenceError,
)
from studyflow.db.models.ai_analysis import AIAnalysis
from studyflow.db.models.routine import Routine
from studyflow.db.models.study_session import StudySession
from studyflow.db.models.user import User
from studyflow.db.models.weekly_progress import WeeklyProgress
from studyflow.services.auth.base import AuthUser
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

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SqlPersistenceStore(PersistenceStore):
    """Each call opens its own short-lived session, so calls may run on different threads."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def ensure_profile(self, user: AuthUser) -> None:
        def op(db: Session) -> None:
            profile = db.get(User, user.id)
            if profile is None:
                db.add(User(id=user.id, email=user.email, name=user.name))
            else:
                profile.email = user.email or profile.email
                profile.name = user.name or profile.name
            db.commit()

        self._run("save profile", op)

    def create_routine(self, user_id: UUID, routine: NewRoutine) -> RoutineRecord:
        def op(db: Session) -> RoutineRecord:
            row = Routine(
                user_id=user_id,
                wake_up_time=routine.wake_up_time,
                study_methods=list(routine.study_methods),
                daily_tasks=list(routine.daily_tasks),
                priorities=list(routine.priorities),
                rest_time=routine.rest_time,
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            return _routine_record(row)

        logger.info("Saving routine for user %s", user_id)
        return self._run("save routine", op)

    def create_analysis(self, user_id: UUID, analysis: NewAnalysis) -> AnalysisRecord:
        def op(db: Session) -> AnalysisRecord:
            row = AIAnalysis(
                user_id=user_id,
                routine_id=analysis.routine_id,
                analysis_type=analysis.analysis_type,
                insights=analysis.insights,
                recommendations=list(analysis.recommendations),
                metrics=dict(analysis.metrics),
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            return _analysis_record(row)

        return self._run("save analysis", op)

    def create_study_session(self, user_id: UUID, session: NewStudySession) -> StudySessionRecord:
        def op(db: Session) -> StudySessionRecord:
            row = StudySession(
                user_id=user_id,
                routine_id=session.routine_id,
                date=session.date,
                hours_studied=session.hours_studied,
                tasks_completed=session.tasks_completed,
                motivation_score=session.motivation_score,
                notes=session.notes,
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            return _session_record(row)

        return self._run("save session", op)

    def list_routines(self, user_id: UUID) -> List[RoutineRecord]:
        def op(db: Session) -> List[RoutineRecord]:
            rows = (
                db.query(Routine)
                .filter(Routine.user_id == user_id)
                .order_by(desc(Routine.created_at))
                .all()
            )
            return [_routine_record(row) for row in rows]

        return self._run("fetch routines", op)

    def list_study_sessions(self, user_id: UUID, limit: int = 10) -> List[StudySessionRecord]:
        def op(db: Session) -> List[StudySessionRecord]:
            rows = (
                db.query(StudySession)
                .filter(StudySession.user_id == user_id)
                .order_by(desc(StudySession.date), desc(StudySession.created_at))
                .limit(limit)
                .all()
            )
            return [_session_record(row) for row in rows]

        return self._run("fetch study sessions", op)

    def list_analyses(self, user_id: UUID, limit: int = 5) -> List[AnalysisRecord]:
        def op(db: Session) -> List[AnalysisRecord]:
            rows = (
                db.query(AIAnalysis)
                .filter(AIAnalysis.user_id == user_id)
                .order_by(desc(AIAnalysis.created_at))
                .limit(limit)
                .all()
            )
            return [_analysis_record(row) for row in rows]

        return self._run("fetch analyses", op)

    def list_weekly_progress(self, user_id: UUID, limit: int = 4) -> List[WeeklyProgressRecord]:
        def op(db: Session) -> List[WeeklyProgressRecord]:
            rows = (
                db.query(WeeklyProgress)
                .filter(WeeklyProgress.user_id == user_id)
                .order_by(desc(WeeklyProgress.week_start))
                .limit(limit)
                .all()
            )
            return [
                WeeklyProgressRecord(
                    id=row.id,
                    user_id=row.user_id,
                    week_start=row.week_start,
                    total_hours=row.total_hours,
                    days_completed=row.days_completed,
                    progress_percentage=row.progress_percentage,
                    average_motivation=row.average_motivation,
                )
                for row in rows
            ]

        return self._run("fetch weekly progress", op)

    def _run(self, action: str, op: Callable[[Session], T]) -> T:
        with self._session_factory() as db:
            try:
                return op(db)
            except SQLAlchemyError as exc:
                db.rollback()
                error = translate_store_error(exc, action)
                logger.error(
                    "Store error during %s: code=%s message=%s",
                    action,
                    error.code,
                    error.details.get("store_message", error.message),
                )
                raise error from exc


def translate_store_error(exc: SQLAlchemyError, action: str) -> PersistenceError:
    """Map a driver error onto the service's persistence error taxonomy."""
    orig = getattr(exc, "orig", None) if isinstance(exc, DBAPIError) else None
    code = _sqlstate(orig)
    store_message = _first_line(str(orig) if orig is not None else str(exc))

    if code == PERMISSION_DENIED:
        return PermissionDeniedError(store_message)
    if code == FOREIGN_KEY_VIOLATION or (
        isinstance(exc, IntegrityError) and "FOREIGN KEY" in store_message.upper()
    ):
        return ForeignKeyViolationError(store_message)
    return PersistenceError(
        f"Could not {action}: {store_message}",
        code=code,
        details={"store_message": store_message},
    )


def _sqlstate(orig: object) -> str | None:
    if orig is None:
        return None
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code:
        return str(code)
    diag = getattr(orig, "diag", None)
    sqlstate = getattr(diag, "sqlstate", None)
    return str(sqlstate) if sqlstate else None


def _first_line(message: str) -> str:
    stripped = message.strip()
    return stripped.splitlines()[0] if stripped else "unknown store error"


def _routine_record(row: Routine) -> RoutineRecord:
    return RoutineRecord(
        id=row.id,
        user_id=row.user_id,
        wake_up_time=row.wake_up_time,
        study_methods=list(row.study_methods or []),
        daily_tasks=list(row.daily_tasks or []),
        priorities=list(row.priorities or []),
        rest_time=row.rest_time,
        created_at=row.created_at,
    )


def _analysis_record(row: AIAnalysis) -> AnalysisRecord:
    return AnalysisRecord(
        id=row.id,
        user_id=row.user_id,
        routine_id=row.routine_id,
        analysis_type=row.analysis_type,
        insights=row.insights,
        recommendations=list(row.recommendations or []),
        metrics=dict(row.metrics or {}),
        created_at=row.created_at,
    )


def _session_record(row: StudySession) -> StudySessionRecord:
    return StudySessionRecord(
        id=row.id,
        user_id=row.user_id,
        routine_id=row.routine_id,
        date=row.date,
        hours_studied=row.hours_studied,
        tasks_completed=row.tasks_completed,
        motivation_score=row.motivation_score,
        notes=row.notes,
        created_at=row.created_at,
    )
