"""Schemas for routine submission and listing endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from studyflow.api.schemas.analysis import RoutineAnalysisInput, RoutineAnalysisOutput


class RoutineAnalyzeRequest(RoutineAnalysisInput):
    mode: Optional[Literal["guest", "authenticated"]] = Field(
        None, description="Overrides the guest-mode cookie when set"
    )


class SecondaryWrite(BaseModel):
    step: str
    ok: bool
    error: Optional[str] = None


class RoutineAnalyzeResponse(BaseModel):
    mode: Literal["guest", "authenticated"]
    message: str
    saved: bool
    routine_id: Optional[UUID] = None
    analysis: RoutineAnalysisOutput
    secondary_writes: List[SecondaryWrite] = Field(default_factory=list)
    request_id: str


class RoutineItem(BaseModel):
    id: UUID
    wake_up_time: str
    study_methods: List[str]
    daily_tasks: List[str]
    priorities: List[str]
    rest_time: str
    created_at: Optional[datetime]


class RoutineListResponse(BaseModel):
    user_id: UUID
    routines: List[RoutineItem]
    request_id: str
