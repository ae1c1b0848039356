"""Dedicated APScheduler worker process for maintenance jobs."""
from __future__ import annotations

import logging
import signal
import threading

from apscheduler.schedulers.background import BackgroundScheduler

from studyflow.core.config import settings
from studyflow.core.logging import configure_logging
from studyflow.db.session import SessionLocal
from studyflow.services.maintenance import sweep_orphaned_routines

logger = logging.getLogger(__name__)

ORPHAN_SWEEP_JOB_ID = "orphan_sweep_job"


def main() -> None:
    configure_logging(log_level=settings.log_level)
    logger.info(
        "Scheduler worker starting (enabled=%s, orphan_sweep=%s)",
        settings.scheduler_enabled,
        settings.orphan_sweep_enabled,
    )

    scheduler = BackgroundScheduler(timezone=settings.scheduler_timezone)

    if settings.scheduler_enabled and register_jobs(scheduler):
        scheduler.start()
        if settings.jobs_run_on_startup:
            logger.info("Running orphan sweep once on startup")
            run_orphan_sweep_job()
    else:
        logger.warning("No scheduler jobs enabled via config; worker will idle")

    stop_event = threading.Event()

    def shutdown(signum, frame):  # pragma: no cover - signal handler
        logger.info("Scheduler worker shutting down (signal=%s)", signum)
        if scheduler.running:
            scheduler.shutdown(wait=False)
        stop_event.set()

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    try:
        stop_event.wait()
    except KeyboardInterrupt:  # pragma: no cover - manual stop
        shutdown(signal.SIGINT, None)


def register_jobs(scheduler: BackgroundScheduler) -> int:
    """Add the enabled jobs to `scheduler`; returns how many were registered."""
    if not settings.orphan_sweep_enabled:
        return 0
    scheduler.add_job(
        run_orphan_sweep_job,
        trigger="interval",
        minutes=settings.orphan_sweep_interval_minutes,
        id=ORPHAN_SWEEP_JOB_ID,
        replace_existing=True,
    )
    logger.info(
        "Registered orphan sweep (every %s min, grace %sh, %s)",
        settings.orphan_sweep_interval_minutes,
        settings.orphan_grace_hours,
        settings.scheduler_timezone,
    )
    return 1


def run_orphan_sweep_job() -> None:
    session = SessionLocal()
    try:
        result = sweep_orphaned_routines(session, grace_hours=settings.orphan_grace_hours)
        logger.info(
            "Orphan sweep complete: scanned=%s, deleted=%s",
            result.routines_scanned,
            result.routines_deleted,
        )
    except Exception:  # pragma: no cover - keep the worker alive
        logger.exception("Orphan sweep job failed")
    finally:
        session.close()


if __name__ == "__main__":  # pragma: no cover - manual launch
    main()
