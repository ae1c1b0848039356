"""Schemas for routine analysis payloads exchanged with the inference service."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class RoutineAnalysisInput(_CamelModel):
    wake_up_time: str = Field(..., alias="wakeUpTime")
    study_methods: List[str] = Field(default_factory=list, alias="studyMethods")
    daily_tasks: List[str] = Field(default_factory=list, alias="dailyTasks")
    priorities: List[str] = Field(default_factory=list)
    rest_time: str = Field(..., alias="restTime")
    image_url: Optional[str] = Field(None, alias="imageUrl", description="data: URL of a planner photo")


class ImageAnalysis(_CamelModel):
    visual_insights: str = Field("", alias="visualInsights")
    identified_patterns: List[str] = Field(default_factory=list, alias="identifiedPatterns")
    schedule_detected: Optional[str] = Field(None, alias="scheduleDetected")


class DetailedAnalysis(_CamelModel):
    time_management: str = Field("", alias="timeManagement")
    study_efficiency: str = Field("", alias="studyEfficiency")
    work_life_balance: str = Field("", alias="workLifeBalance")
    improvement_areas: List[str] = Field(default_factory=list, alias="improvementAreas")
    strengths: List[str] = Field(default_factory=list)


class RoutineAnalysisOutput(_CamelModel):
    """Model answer as parsed; values are kept as returned, unknown keys included."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    hours_studied: float = Field(0, alias="hoursStudied")
    days_completed: float = Field(0, alias="daysCompleted")
    weekly_progress: float = Field(0, alias="weeklyProgress")
    motivation_level: float = Field(0, alias="motivationLevel")
    insights: str = ""
    recommendations: List[str] = Field(default_factory=list)
    detailed_analysis: Optional[DetailedAnalysis] = Field(None, alias="detailedAnalysis")
    image_analysis: Optional[ImageAnalysis] = Field(None, alias="imageAnalysis")

    def metrics(self) -> dict:
        """Metrics bag persisted alongside the analysis."""
        return {
            "hours_studied": self.hours_studied,
            "days_completed": self.days_completed,
            "weekly_progress": self.weekly_progress,
            "motivation_level": self.motivation_level,
        }
