"""Operational endpoints for scheduler jobs."""
from __future__ import annotations

from time import perf_counter

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from studyflow.api.schemas.jobs import JobRunRequest, JobRunResponse
from studyflow.core.config import settings
from studyflow.db.deps import get_db
from studyflow.observability.metrics import log_metric
from studyflow.observability.tracing import trace
from studyflow.services.maintenance import sweep_orphaned_routines

router = APIRouter()


@router.get("/jobs", tags=["jobs"])
def get_jobs_config(request: Request) -> dict:
    request_id = getattr(request.state, "request_id", None)
    with trace("jobs.config", request_id=request_id):
        data = {
            "scheduler_enabled": settings.scheduler_enabled,
            "orphan_sweep": {
                "enabled": settings.orphan_sweep_enabled,
                "interval_minutes": settings.orphan_sweep_interval_minutes,
                "grace_hours": settings.orphan_grace_hours,
                "timezone": settings.scheduler_timezone,
            },
        }
    return {**data, "request_id": request_id or ""}


@router.post("/jobs/run-now", response_model=JobRunResponse, tags=["jobs"])
def run_job_now(
    request: Request,
    payload: JobRunRequest,
    db: Session = Depends(get_db),
) -> JobRunResponse:
    if not settings.debug:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Run-now only allowed in debug mode")

    request_id = getattr(request.state, "request_id", None)
    grace_hours = payload.grace_hours if payload.grace_hours is not None else settings.orphan_grace_hours
    start = perf_counter()
    with trace("jobs.run_now", metadata={"job": payload.job, "dry_run": payload.dry_run}, request_id=request_id):
        result = sweep_orphaned_routines(db, grace_hours=grace_hours, dry_run=payload.dry_run)

    log_metric("jobs.run_now.success", 1, metadata={"job": payload.job})
    log_metric("jobs.run_now.latency_ms", (perf_counter() - start) * 1000, metadata={"job": payload.job})

    return JobRunResponse(
        job=payload.job,
        routines_scanned=result.routines_scanned,
        routines_deleted=result.routines_deleted,
        deleted_ids=result.deleted_ids,
        request_id=request_id or "",
    )
