"""Routine submission workflow.

A submission is validated up front, then either analyzed only (guest mode) or
run through an ordered pipeline of stages:

    save_routine  -> abort on failure
    analyze       -> abort on failure
    save_analysis -> recorded, pipeline continues
    save_session  -> recorded, pipeline continues

Nothing is ever compensated: a routine saved before a failed analysis stays
in the store (see services.maintenance for the opt-in sweep).
"""
from __future__ import annotations

import base64
import binascii
import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, List, Literal, Optional
from uuid import UUID

from studyflow.api.schemas.analysis import RoutineAnalysisInput, RoutineAnalysisOutput
from studyflow.core.context import bind_user_id
from studyflow.core.errors import (
    AuthenticationError,
    InferenceError,
    RoutineValidationError,
    StudyFlowError,
)
from studyflow.db.models.study_session import DEFAULT_MOTIVATION_SCORE
from studyflow.observability.metrics import log_metric, log_outcome
from studyflow.observability.tracing import annotate, trace
from studyflow.services.auth.base import AuthUser, SessionStore
from studyflow.services.persistence.base import NewAnalysis, NewRoutine, NewStudySession, PersistenceStore
from studyflow.services.routine_analyzer import RoutineAnalyzer

logger = logging.getLogger(__name__)

Mode = Literal["guest", "authenticated"]
GUEST: Mode = "guest"
AUTHENTICATED: Mode = "authenticated"

MAX_IMAGE_BYTES = 10 * 1024 * 1024
ROUTINE_SAVE_FAILED = "Could not save routine. Check that you are signed in."
ANALYSIS_FAILED = "Could not analyze routine. Try again."
INITIAL_SESSION_NOTE = "Initial session created by the AI analysis"

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[^;,]*)(?P<params>(;[^;,]*)*),(?P<data>.*)$", re.DOTALL)


@dataclass
class StepOutcome:
    step: str
    ok: bool
    error: Optional[StudyFlowError] = None


@dataclass
class SubmissionResult:
    mode: Mode
    analysis: Optional[RoutineAnalysisOutput] = None
    error: Optional[StudyFlowError] = None
    routine_id: Optional[UUID] = None
    steps: List[StepOutcome] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.analysis is not None and self.error is None

    @property
    def secondary_writes(self) -> List[StepOutcome]:
        return [step for step in self.steps if step.step in SECONDARY_STEPS]

    @property
    def fully_saved(self) -> bool:
        if self.mode == GUEST or not self.success:
            return False
        return all(step.ok for step in self.secondary_writes)

    @property
    def message(self) -> str:
        if self.error is not None:
            return self.error.message
        if self.mode == GUEST:
            return "Analysis complete! (Guest mode - data not saved)"
        if self.fully_saved:
            return "Routine saved and analysis complete!"
        return "Analysis complete, but some records could not be saved."


@dataclass
class _SubmissionContext:
    routine: RoutineAnalysisInput
    store: PersistenceStore
    session_store: SessionStore
    analyzer: RoutineAnalyzer
    today: date
    user: Optional[AuthUser] = None
    routine_id: Optional[UUID] = None
    analysis: Optional[RoutineAnalysisOutput] = None


@dataclass(frozen=True)
class PipelineStage:
    name: str
    run: Callable[[_SubmissionContext], None]
    abort_on_failure: bool


def _save_routine(ctx: _SubmissionContext) -> None:
    user = ctx.session_store.get_user()
    if user is None:
        raise AuthenticationError()
    ctx.user = user
    bind_user_id(user.id)
    ctx.store.ensure_profile(user)
    record = ctx.store.create_routine(
        user.id,
        NewRoutine(
            wake_up_time=ctx.routine.wake_up_time,
            study_methods=ctx.routine.study_methods,
            daily_tasks=ctx.routine.daily_tasks,
            priorities=ctx.routine.priorities,
            rest_time=ctx.routine.rest_time,
        ),
    )
    ctx.routine_id = record.id
    logger.info("Routine %s saved", record.id)


def _analyze(ctx: _SubmissionContext) -> None:
    ctx.analysis = ctx.analyzer.analyze(ctx.routine)


def _save_analysis(ctx: _SubmissionContext) -> None:
    analysis = _require_analysis(ctx)
    ctx.store.create_analysis(
        ctx.user.id,
        NewAnalysis(
            routine_id=ctx.routine_id,
            insights=analysis.insights,
            recommendations=list(analysis.recommendations),
            metrics=analysis.metrics(),
        ),
    )


def _save_session(ctx: _SubmissionContext) -> None:
    analysis = _require_analysis(ctx)
    ctx.store.create_study_session(
        ctx.user.id,
        NewStudySession(
            routine_id=ctx.routine_id,
            date=ctx.today,
            hours_studied=analysis.hours_studied,
            tasks_completed=len(ctx.routine.daily_tasks),
            motivation_score=DEFAULT_MOTIVATION_SCORE,
            notes=INITIAL_SESSION_NOTE,
        ),
    )


def _require_analysis(ctx: _SubmissionContext) -> RoutineAnalysisOutput:
    if ctx.analysis is None or ctx.user is None:  # pragma: no cover - guarded by stage order
        raise StudyFlowError("Pipeline stage ran before its inputs were available")
    return ctx.analysis


AUTHENTICATED_PIPELINE: List[PipelineStage] = [
    PipelineStage("save_routine", _save_routine, abort_on_failure=True),
    PipelineStage("analyze", _analyze, abort_on_failure=True),
    PipelineStage("save_analysis", _save_analysis, abort_on_failure=False),
    PipelineStage("save_session", _save_session, abort_on_failure=False),
]
SECONDARY_STEPS = frozenset(stage.name for stage in AUTHENTICATED_PIPELINE if not stage.abort_on_failure)


def submit_routine(
    routine: RoutineAnalysisInput,
    *,
    mode: Mode,
    store: PersistenceStore,
    session_store: SessionStore,
    analyzer: RoutineAnalyzer,
    today: Optional[date] = None,
    max_image_bytes: int = MAX_IMAGE_BYTES,
) -> SubmissionResult:
    """Validate a routine, then analyze it and (unless in guest mode) persist it.

    Raises RoutineValidationError before any external call when the input is
    unusable. Every other failure is reported on the returned result.
    """
    routine = validate_routine_input(routine, max_image_bytes=max_image_bytes)

    with trace(
        "routine.submission",
        metadata={
            "mode": mode,
            "study_methods": len(routine.study_methods),
            "daily_tasks": len(routine.daily_tasks),
            "priorities": len(routine.priorities),
            "with_image": bool(routine.image_url),
        },
    ) as span:
        if mode == GUEST:
            result = _run_guest(routine, analyzer)
        else:
            ctx = _SubmissionContext(
                routine=routine,
                store=store,
                session_store=session_store,
                analyzer=analyzer,
                today=today or date.today(),
            )
            result = _run_pipeline(ctx, AUTHENTICATED_PIPELINE)
        annotate(
            span,
            success=result.success,
            fully_saved=result.fully_saved,
            failed_steps=[step.step for step in result.steps if not step.ok],
        )

    log_outcome("routine.submission", result.success, metadata={"mode": mode})
    return result


def _run_guest(routine: RoutineAnalysisInput, analyzer: RoutineAnalyzer) -> SubmissionResult:
    result = SubmissionResult(mode=GUEST)
    try:
        result.analysis = analyzer.analyze(routine)
        result.steps.append(StepOutcome("analyze", True))
    except Exception as exc:
        error = _as_inference_error(exc)
        logger.error("Guest analysis failed: %s", exc)
        result.error = error
        result.steps.append(StepOutcome("analyze", False, error))
    return result


def _run_pipeline(ctx: _SubmissionContext, stages: List[PipelineStage]) -> SubmissionResult:
    result = SubmissionResult(mode=AUTHENTICATED)
    for stage in stages:
        with trace(f"routine.submission.{stage.name}", metadata={"routine_id": str(ctx.routine_id or "")}):
            try:
                stage.run(ctx)
            except Exception as exc:
                error = _stage_error(stage.name, exc)
                result.steps.append(StepOutcome(stage.name, False, error))
                log_metric(f"routine.submission.{stage.name}.failure", 1)
                if stage.abort_on_failure:
                    logger.error("Submission aborted at %s: %s", stage.name, error.message)
                    result.error = error
                    result.routine_id = ctx.routine_id
                    return result
                logger.warning("Submission step %s failed (analysis still returned): %s", stage.name, error.message)
                continue
        result.steps.append(StepOutcome(stage.name, True))

    result.routine_id = ctx.routine_id
    result.analysis = ctx.analysis
    return result


def _stage_error(stage: str, exc: Exception) -> StudyFlowError:
    if stage == "analyze":
        return _as_inference_error(exc)
    if isinstance(exc, StudyFlowError):
        if not exc.message and stage == "save_routine":
            return StudyFlowError(ROUTINE_SAVE_FAILED, exc.details)
        return exc
    logger.exception("Unexpected error in submission step %s", stage)
    if stage == "save_routine":
        return StudyFlowError(ROUTINE_SAVE_FAILED, {"reason": str(exc)})
    return StudyFlowError(f"Step {stage} failed: {exc}")


def _as_inference_error(exc: Exception) -> InferenceError:
    if isinstance(exc, InferenceError):
        return exc
    return InferenceError(ANALYSIS_FAILED, {"reason": str(exc)})


def validate_routine_input(routine: RoutineAnalysisInput, *, max_image_bytes: int = MAX_IMAGE_BYTES) -> RoutineAnalysisInput:
    """Return a normalized copy of the routine or raise RoutineValidationError."""
    wake_up_time = (routine.wake_up_time or "").strip()
    rest_time = (routine.rest_time or "").strip()
    if not wake_up_time:
        raise RoutineValidationError("wakeUpTime", "Wake-up time is required")
    if not rest_time:
        raise RoutineValidationError("restTime", "Rest time is required")

    study_methods = _clean_labels(routine.study_methods)
    daily_tasks = _clean_labels(routine.daily_tasks)
    priorities = _clean_labels(routine.priorities)
    if not study_methods:
        raise RoutineValidationError("studyMethods", "Add at least one study method")
    if not daily_tasks:
        raise RoutineValidationError("dailyTasks", "Add at least one daily task")
    if not priorities:
        raise RoutineValidationError("priorities", "Add at least one priority")

    if routine.image_url:
        validate_image_payload(routine.image_url, max_bytes=max_image_bytes)

    return RoutineAnalysisInput(
        wake_up_time=wake_up_time,
        study_methods=study_methods,
        daily_tasks=daily_tasks,
        priorities=priorities,
        rest_time=rest_time,
        image_url=routine.image_url or None,
    )


def validate_image_payload(image_url: str, *, max_bytes: int = MAX_IMAGE_BYTES) -> None:
    """Accept only image data URLs strictly smaller than `max_bytes` once decoded."""
    match = _DATA_URL_RE.match(image_url)
    if not match:
        raise RoutineValidationError("imageUrl", "Upload the image as a data URL")

    mime = match.group("mime").strip().lower()
    if not mime.startswith("image"):
        raise RoutineValidationError("imageUrl", "Please select image files only")

    data = match.group("data")
    if ";base64" in match.group("params").lower():
        try:
            size = len(base64.b64decode(data, validate=True))
        except (binascii.Error, ValueError) as exc:
            raise RoutineValidationError("imageUrl", "Image data is not valid base64") from exc
    else:
        size = len(data.encode("utf-8"))

    if size >= max_bytes:
        raise RoutineValidationError("imageUrl", f"Image too large. Maximum {max_bytes // (1024 * 1024)}MB")


def _clean_labels(labels: List[str]) -> List[str]:
    return [label.strip() for label in labels if label and label.strip()]
