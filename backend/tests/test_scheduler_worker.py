from __future__ import annotations

from apscheduler.schedulers.background import BackgroundScheduler

from studyflow.core.config import settings
from studyflow.worker import scheduler_main


def test_no_jobs_registered_when_sweep_disabled(monkeypatch) -> None:
    monkeypatch.setattr(settings, "orphan_sweep_enabled", False)
    scheduler = BackgroundScheduler(timezone="UTC")

    assert scheduler_main.register_jobs(scheduler) == 0
    assert scheduler.get_jobs() == []


def test_orphan_sweep_registered_on_interval(monkeypatch) -> None:
    monkeypatch.setattr(settings, "orphan_sweep_enabled", True)
    monkeypatch.setattr(settings, "orphan_sweep_interval_minutes", 15)
    scheduler = BackgroundScheduler(timezone="UTC")

    assert scheduler_main.register_jobs(scheduler) == 1
    job = scheduler.get_job(scheduler_main.ORPHAN_SWEEP_JOB_ID)
    assert job is not None
    assert job.trigger.interval.total_seconds() == 15 * 60


def test_sweep_job_uses_configured_grace(monkeypatch) -> None:
    seen = {}

    class _Session:
        closed = False

        def close(self):
            self.closed = True

    session = _Session()

    def fake_sweep(db, *, grace_hours):
        seen["db"] = db
        seen["grace_hours"] = grace_hours
        return type("Result", (), {"routines_scanned": 2, "routines_deleted": 2})()

    monkeypatch.setattr(settings, "orphan_grace_hours", 36)
    monkeypatch.setattr(scheduler_main, "SessionLocal", lambda: session)
    monkeypatch.setattr(scheduler_main, "sweep_orphaned_routines", fake_sweep)

    scheduler_main.run_orphan_sweep_job()

    assert seen == {"db": session, "grace_hours": 36}
    assert session.closed is True
