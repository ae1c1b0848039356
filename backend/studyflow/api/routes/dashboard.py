"""Dashboard API routes."""
from __future__ import annotations

from time import perf_counter

from fastapi import APIRouter, Depends, Request

from studyflow.api.deps import require_user
from studyflow.api.schemas.dashboard import (
    AnalysisItem,
    DashboardResponse,
    DashboardStatsPayload,
    StudySessionItem,
    WeeklyProgressItem,
)
from studyflow.observability.metrics import log_metric
from studyflow.observability.tracing import annotate, trace
from studyflow.services.auth import AuthUser
from studyflow.services.dashboard_service import load_dashboard
from studyflow.services.persistence import PersistenceStore
from studyflow.services.persistence.factory import get_persistence_store

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse, tags=["dashboard"])
async def get_dashboard(
    http_request: Request,
    user: AuthUser = Depends(require_user),
    store: PersistenceStore = Depends(get_persistence_store),
) -> DashboardResponse:
    request_id = getattr(http_request.state, "request_id", None)
    start = perf_counter()

    with trace("dashboard.get", metadata={"route": "/dashboard"}, user_id=str(user.id), request_id=request_id) as span:
        data = await load_dashboard(store, user.id)
        annotate(span, failed_sources=data.failed_sources)

    stats = data.stats
    log_metric("dashboard.get.latency_ms", (perf_counter() - start) * 1000, metadata={"user_id": str(user.id)})
    log_metric("dashboard.get.sessions_count", stats.sessions_count, metadata={"user_id": str(user.id)})
    if data.failed_sources:
        log_metric("dashboard.get.partial", len(data.failed_sources), metadata={"sources": data.failed_sources})

    return DashboardResponse(
        user_id=user.id,
        stats=DashboardStatsPayload(
            total_hours_studied=stats.total_hours_studied,
            sessions_count=stats.sessions_count,
            total_tasks_completed=stats.total_tasks_completed,
            average_motivation=stats.average_motivation,
        ),
        study_sessions=[
            StudySessionItem(
                id=item.id,
                routine_id=item.routine_id,
                date=item.date,
                hours_studied=item.hours_studied,
                tasks_completed=item.tasks_completed,
                motivation_score=item.motivation_score,
                notes=item.notes,
            )
            for item in data.study_sessions
        ],
        analyses=[
            AnalysisItem(
                id=item.id,
                routine_id=item.routine_id,
                analysis_type=item.analysis_type,
                insights=item.insights,
                recommendations=item.recommendations,
                metrics=item.metrics,
                created_at=item.created_at,
            )
            for item in data.analyses
        ],
        weekly_progress=[
            WeeklyProgressItem(
                week_start=item.week_start,
                total_hours=item.total_hours,
                days_completed=item.days_completed,
                progress_percentage=item.progress_percentage,
                average_motivation=item.average_motivation,
            )
            for item in data.weekly_progress
        ],
        failed_sources=data.failed_sources,
        request_id=request_id or "",
    )
