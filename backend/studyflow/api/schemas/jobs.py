"""Schemas for job operations endpoints."""
from __future__ import annotations

from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class JobRunRequest(BaseModel):
    job: Literal["orphan_sweep"] = "orphan_sweep"
    grace_hours: Optional[int] = Field(None, ge=0)
    dry_run: bool = False


class JobRunResponse(BaseModel):
    job: str
    routines_scanned: int
    routines_deleted: int
    deleted_ids: List[UUID]
    request_id: str
