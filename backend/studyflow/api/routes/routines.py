"""Routine submission and listing routes."""
from __future__ import annotations

from time import perf_counter

from fastapi import APIRouter, Depends, Request

from studyflow.api.deps import get_request_session_store, http_error, require_user
from studyflow.api.schemas.routine import (
    RoutineAnalyzeRequest,
    RoutineAnalyzeResponse,
    RoutineItem,
    RoutineListResponse,
    SecondaryWrite,
)
from studyflow.core.config import settings
from studyflow.core.errors import PersistenceError, RoutineValidationError
from studyflow.observability.metrics import log_metric
from studyflow.observability.tracing import trace
from studyflow.services.auth import AuthUser, SessionStore
from studyflow.services.guest_mode import resolve_mode
from studyflow.services.persistence import PersistenceStore
from studyflow.services.persistence.factory import get_persistence_store
from studyflow.services.routine_analyzer import RoutineAnalyzer, get_routine_analyzer
from studyflow.services.routine_submission import submit_routine

router = APIRouter()


@router.post("/routines/analyze", response_model=RoutineAnalyzeResponse, tags=["routines"])
def analyze_routine(
    http_request: Request,
    payload: RoutineAnalyzeRequest,
    store: PersistenceStore = Depends(get_persistence_store),
    session_store: SessionStore = Depends(get_request_session_store),
    analyzer: RoutineAnalyzer = Depends(get_routine_analyzer),
) -> RoutineAnalyzeResponse:
    request_id = getattr(http_request.state, "request_id", None)
    mode = resolve_mode(http_request, payload.mode)
    start = perf_counter()

    try:
        result = submit_routine(
            payload,
            mode=mode,
            store=store,
            session_store=session_store,
            analyzer=analyzer,
            max_image_bytes=settings.max_image_bytes,
        )
    except RoutineValidationError as exc:
        log_metric("routines.analyze.rejected", 1, metadata={"field": exc.field})
        raise http_error(exc) from exc

    log_metric("routines.analyze.latency_ms", (perf_counter() - start) * 1000, metadata={"mode": mode})

    if not result.success:
        failed = next((step.step for step in result.steps if not step.ok), None)
        raise http_error(
            result.error,
            failed_step=failed,
            routine_id=str(result.routine_id) if result.routine_id else None,
        )

    return RoutineAnalyzeResponse(
        mode=result.mode,
        message=result.message,
        saved=result.fully_saved,
        routine_id=result.routine_id,
        analysis=result.analysis,
        secondary_writes=[
            SecondaryWrite(step=step.step, ok=step.ok, error=step.error.message if step.error else None)
            for step in result.secondary_writes
        ],
        request_id=request_id or "",
    )


@router.get("/routines", response_model=RoutineListResponse, tags=["routines"])
def list_routines(
    http_request: Request,
    user: AuthUser = Depends(require_user),
    store: PersistenceStore = Depends(get_persistence_store),
) -> RoutineListResponse:
    request_id = getattr(http_request.state, "request_id", None)
    with trace("routines.list", metadata={"route": "/routines"}, user_id=str(user.id), request_id=request_id):
        try:
            routines = store.list_routines(user.id)
        except PersistenceError as exc:
            raise http_error(exc) from exc

    return RoutineListResponse(
        user_id=user.id,
        routines=[
            RoutineItem(
                id=routine.id,
                wake_up_time=routine.wake_up_time,
                study_methods=routine.study_methods,
                daily_tasks=routine.daily_tasks,
                priorities=routine.priorities,
                rest_time=routine.rest_time,
                created_at=routine.created_at,
            )
            for routine in routines
        ],
        request_id=request_id or "",
    )
