"""Schemas for the short insight endpoints."""
from __future__ import annotations

from pydantic import BaseModel, Field


class MotivationRequest(BaseModel):
    progress: float = Field(..., ge=0, le=100)
    streak: int = Field(..., ge=0)


class PerformanceRequest(BaseModel):
    hours_studied: float = Field(..., ge=0)
    tasks_completed: int = Field(..., ge=0)
    motivation_score: int = Field(..., ge=0, le=100)


class InsightResponse(BaseModel):
    message: str
