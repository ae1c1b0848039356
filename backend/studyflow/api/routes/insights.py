"""Short coaching messages generated on demand."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from studyflow.api.schemas.insights import InsightResponse, MotivationRequest, PerformanceRequest
from studyflow.observability.tracing import trace
from studyflow.services.routine_analyzer import RoutineAnalyzer, get_routine_analyzer

router = APIRouter(prefix="/insights", tags=["insights"])


@router.post("/motivation", response_model=InsightResponse)
def motivation(
    payload: MotivationRequest,
    analyzer: RoutineAnalyzer = Depends(get_routine_analyzer),
) -> InsightResponse:
    with trace("insights.motivation", metadata={"progress": payload.progress, "streak": payload.streak}):
        message = analyzer.motivational_message(payload.progress, payload.streak)
    return InsightResponse(message=message)


@router.post("/performance", response_model=InsightResponse)
def performance(
    payload: PerformanceRequest,
    analyzer: RoutineAnalyzer = Depends(get_routine_analyzer),
) -> InsightResponse:
    with trace("insights.performance"):
        message = analyzer.quick_performance_feedback(
            payload.hours_studied,
            payload.tasks_completed,
            payload.motivation_score,
        )
    return InsightResponse(message=message)
