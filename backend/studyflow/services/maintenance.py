"""Maintenance jobs for records the submission workflow leaves behind."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy import exists, select
from sqlalchemy.orm import Session

from studyflow.db.models.ai_analysis import AIAnalysis
from studyflow.db.models.routine import Routine
from studyflow.db.models.study_session import StudySession

logger = logging.getLogger(__name__)


@dataclass
class SweepResult:
    routines_scanned: int
    routines_deleted: int
    deleted_ids: List[UUID] = field(default_factory=list)


def find_orphaned_routines(db: Session, *, older_than: datetime) -> List[Routine]:
    """Routines created before `older_than` with no analysis and no study session."""
    has_analysis = exists().where(AIAnalysis.routine_id == Routine.id)
    has_session = exists().where(StudySession.routine_id == Routine.id)
    stmt = (
        select(Routine)
        .where(Routine.created_at < older_than, ~has_analysis, ~has_session)
        .order_by(Routine.created_at.asc())
    )
    return list(db.scalars(stmt).all())


def sweep_orphaned_routines(
    db: Session,
    *,
    grace_hours: int,
    now: Optional[datetime] = None,
    dry_run: bool = False,
) -> SweepResult:
    """Delete routines whose analysis never got saved, once the grace period is over."""
    reference = now or datetime.now(timezone.utc)
    cutoff = reference - timedelta(hours=grace_hours)
    orphans = find_orphaned_routines(db, older_than=cutoff)
    deleted_ids = [routine.id for routine in orphans]

    if dry_run or not orphans:
        logger.info("Orphan sweep found %s routine(s) before %s (dry_run=%s)", len(orphans), cutoff.isoformat(), dry_run)
        return SweepResult(routines_scanned=len(orphans), routines_deleted=0)

    for routine in orphans:
        db.delete(routine)
    db.commit()
    logger.info("Orphan sweep deleted %s routine(s) created before %s", len(orphans), cutoff.isoformat())
    return SweepResult(routines_scanned=len(orphans), routines_deleted=len(orphans), deleted_ids=deleted_ids)
