"""Aggregation helpers for dashboard endpoint."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List
from uuid import UUID

from studyflow.services.persistence.base import (
    AnalysisRecord,
    PersistenceStore,
    StudySessionRecord,
    WeeklyProgressRecord,
)

logger = logging.getLogger(__name__)


@dataclass
class DashboardStats:
    total_hours_studied: float
    sessions_count: int
    total_tasks_completed: int
    average_motivation: int


@dataclass
class DashboardData:
    study_sessions: List[StudySessionRecord] = field(default_factory=list)
    analyses: List[AnalysisRecord] = field(default_factory=list)
    weekly_progress: List[WeeklyProgressRecord] = field(default_factory=list)
    failed_sources: List[str] = field(default_factory=list)

    @property
    def stats(self) -> DashboardStats:
        return compute_stats(self.study_sessions)


def compute_stats(sessions: List[StudySessionRecord]) -> DashboardStats:
    total_hours = sum(session.hours_studied for session in sessions)
    total_tasks = sum(session.tasks_completed for session in sessions)
    average_motivation = 0
    if sessions:
        # half-up, so 72.5 reads as 73
        average_motivation = int(sum(session.motivation_score for session in sessions) / len(sessions) + 0.5)
    return DashboardStats(
        total_hours_studied=round(total_hours, 1),
        sessions_count=len(sessions),
        total_tasks_completed=total_tasks,
        average_motivation=average_motivation,
    )


async def load_dashboard(store: PersistenceStore, user_id: UUID) -> DashboardData:
    """Fetch sessions, analyses and weekly progress concurrently.

    The three reads are independent; whichever fails is logged and shows up
    empty while the others are still applied.
    """
    sources: List[tuple[str, Callable[[], Any]]] = [
        ("study_sessions", lambda: store.list_study_sessions(user_id, limit=10)),
        ("analyses", lambda: store.list_analyses(user_id, limit=5)),
        ("weekly_progress", lambda: store.list_weekly_progress(user_id, limit=4)),
    ]
    results = await asyncio.gather(
        *(asyncio.to_thread(fetch) for _, fetch in sources),
        return_exceptions=True,
    )

    data = DashboardData()
    for (name, _), outcome in zip(sources, results):
        if isinstance(outcome, BaseException):
            logger.error("Dashboard source %s failed: %s", name, outcome)
            data.failed_sources.append(name)
            continue
        setattr(data, name, list(outcome))
    return data
