"""Routine analysis backed by the OpenAI chat completions API."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

import openai
from pydantic import ValidationError

from studyflow.api.schemas.analysis import ImageAnalysis, RoutineAnalysisInput, RoutineAnalysisOutput
from studyflow.core.config import settings
from studyflow.core.errors import InferenceError
from studyflow.observability.metrics import log_outcome
from studyflow.observability.tracing import annotate, trace

logger = logging.getLogger(__name__)

ROUTINE_SYSTEM_PROMPT = (
    "You are Dr. Alexandre Martins, PhD in Educational Psychology with 15 years of experience coaching "
    "high-performance students for entrance exams, medical school and graduate programs. "
    "You produce deep, evidence-based and actionable analyses of study routines, combining cognitive "
    "neuroscience, motivation psychology, evidence-based time management, validated study techniques and "
    "burnout prevention. You also read photos of planners and schedules. "
    "Be direct, realistic, motivating and practical. Answer with a single JSON object."
)

IMAGE_SYSTEM_PROMPT = (
    "You are a study-routine analyst with advanced computer vision skills. Analyze photos of planners, "
    "agendas and study schedules with maximum precision: read every visible text, identify times, "
    "durations and breaks, recognize colors, symbols and markers, detect consistent or inconsistent "
    "patterns and judge the clarity of the layout.\n"
    "Answer with JSON shaped as:\n"
    "{\n"
    '  "visualInsights": "<150-200 words on organization, clarity, visual patterns, colors and time structure>",\n'
    '  "identifiedPatterns": ["<specific times and methods>", "<time distribution and breaks>", '
    '"<priorities and study focus>", "<organizational strengths>", "<areas needing attention>"],\n'
    '  "scheduleDetected": "<structured summary of the detected schedule, one line per item as \'HH:MM - Activity\'>"\n'
    "}"
)

IMAGE_USER_PROMPT = (
    "Analyze this study routine image with maximum precision. Identify every visible detail, pattern and "
    "time slot and give deep insights."
)

ANALYSIS_GUIDELINES = [
    "Be REALISTIC; do not overestimate human capacity.",
    "Account for MENTAL FATIGUE; productivity drops through the day.",
    "Value QUALITY over QUANTITY of hours.",
    "Flag UNSUSTAINABLE patterns that lead to burnout.",
    "Ground recommendations in COGNITIVE SCIENCE and NEUROSCIENCE.",
    "Be MOTIVATING but HONEST about challenges.",
    "Give PRECISE NUMBERS based on the analysis.",
    "Every recommendation needs a CLEAR ACTION and a JUSTIFICATION.",
]

MISSING_KEY_ANALYSIS: Dict[str, Any] = {
    "hoursStudied": 6,
    "daysCompleted": 5,
    "weeklyProgress": 75,
    "motivationLevel": 80,
    "insights": "Configure your OpenAI key to receive personalized AI analyses.",
    "recommendations": [
        "Add OPENAI_API_KEY to the service settings",
        "Keep a consistent study routine",
        "Balance study and rest properly",
    ],
}

FALLBACK_ANALYSIS: Dict[str, Any] = {
    "hoursStudied": 6,
    "daysCompleted": 5,
    "weeklyProgress": 75,
    "motivationLevel": 80,
    "insights": "Your routine is well structured! Keep balancing study and rest.",
    "recommendations": [
        "Keep a consistent study routine",
        "Take regular breaks every 50 minutes",
        "Review what you studied before going to bed",
        "Tackle the most important tasks in the morning",
    ],
}

FALLBACK_MOTIVATION = "Keep going! Every study day is a step towards your goal. 🚀"
FALLBACK_FEEDBACK = "Good work! Keep your focus and consistency."


class RoutineAnalyzer:
    """Turns a routine (and optionally a planner photo) into a structured analysis."""

    def __init__(self, api_key: str | None, *, model: str = "gpt-4o", language: str = "pt-BR") -> None:
        self.api_key = api_key
        self.model = model
        self.language = language

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    def analyze(self, routine: RoutineAnalysisInput) -> RoutineAnalysisOutput:
        """Analyze a routine; never raises for missing credentials or bad model output."""
        if not self.configured:
            logger.warning("OpenAI API key not configured; returning the setup payload")
            return RoutineAnalysisOutput.model_validate(MISSING_KEY_ANALYSIS)

        image_analysis: ImageAnalysis | None = None
        if routine.image_url:
            try:
                image_analysis = self.analyze_image(routine.image_url)
            except InferenceError as exc:
                logger.error("Image analysis failed, continuing without visual context: %s", exc)

        prompt = build_routine_prompt(routine, image_analysis, language=self.language)
        with trace(
            "inference.routine_analysis",
            metadata={
                "model": self.model,
                "with_image": image_analysis is not None,
                "llm_input_text": prompt[:500],
            },
        ) as span:
            try:
                payload = self._chat_json(
                    [
                        {"role": "system", "content": ROUTINE_SYSTEM_PROMPT},
                        {"role": "user", "content": prompt},
                    ],
                    temperature=0.8,
                    max_tokens=3000,
                )
            except Exception as exc:
                logger.error("Routine analysis failed, using fallback payload: %s", exc)
                log_outcome("inference.routine_analysis", False)
                annotate(span, fallback=True, error=str(exc)[:200])
                return RoutineAnalysisOutput.model_validate(FALLBACK_ANALYSIS)

            try:
                analysis = RoutineAnalysisOutput.model_validate(payload)
            except ValidationError as exc:
                # Only values that cannot be represented at all (e.g. "five" hours) land here.
                logger.error("Routine analysis payload has unusable values, using fallback payload: %s", exc)
                log_outcome("inference.routine_analysis", False)
                annotate(span, fallback=True, error=str(exc)[:200])
                return RoutineAnalysisOutput.model_validate(FALLBACK_ANALYSIS)

            if image_analysis is not None:
                analysis.image_analysis = image_analysis
            log_outcome("inference.routine_analysis", True)
            annotate(span, fallback=False, llm_output_text=analysis.insights[:500])
            return analysis

    def analyze_image(self, image_url: str) -> ImageAnalysis:
        """Read a planner photo; raises InferenceError on any failure."""
        if not self.configured:
            raise InferenceError("OpenAI API key not configured")

        with trace("inference.image_analysis", metadata={"model": self.model}):
            try:
                payload = self._chat_json(
                    [
                        {"role": "system", "content": IMAGE_SYSTEM_PROMPT},
                        {
                            "role": "user",
                            "content": [
                                {"type": "text", "text": IMAGE_USER_PROMPT},
                                {"type": "image_url", "image_url": {"url": image_url, "detail": "high"}},
                            ],
                        },
                    ],
                    temperature=0.3,
                    max_tokens=2000,
                )
                return ImageAnalysis.model_validate(payload)
            except Exception as exc:
                raise InferenceError(
                    "Image analysis failed. Check that the image is accessible.",
                    {"reason": str(exc)},
                ) from exc

    def motivational_message(self, progress: float, streak: int) -> str:
        if not self.configured:
            return FALLBACK_MOTIVATION
        try:
            text = self._chat_text(
                "You are a motivational coach for students. Write short, inspiring messages.",
                f"Write a short motivational message (max 2 sentences) for a student at {progress}% progress "
                f"with a {streak}-day streak. Write in {self.language}.",
                temperature=0.8,
                max_tokens=100,
            )
        except Exception as exc:
            logger.error("Motivational message failed: %s", exc)
            return FALLBACK_MOTIVATION
        return text or "Keep going with your studies!"

    def quick_performance_feedback(self, hours_studied: float, tasks_completed: int, motivation_score: int) -> str:
        if not self.configured:
            return FALLBACK_FEEDBACK
        try:
            text = self._chat_text(
                "You are an academic performance analyst. Give short, actionable feedback.",
                f"Quickly analyze: {hours_studied}h studied, {tasks_completed} tasks completed, "
                f"motivation {motivation_score}/100. Give feedback in 2-3 sentences, in {self.language}.",
                temperature=0.7,
                max_tokens=150,
            )
        except Exception as exc:
            logger.error("Quick performance feedback failed: %s", exc)
            return FALLBACK_FEEDBACK
        return text or "Keep it up!"

    def _chat_json(self, messages: List[Dict[str, Any]], *, temperature: float, max_tokens: int) -> Dict[str, Any]:
        client = openai.OpenAI(api_key=self.api_key)
        response = client.chat.completions.create(
            model=self.model,
            messages=messages,
            response_format={"type": "json_object"},
            temperature=temperature,
            max_tokens=max_tokens,
        )
        content = response.choices[0].message.content or "{}"
        payload = json.loads(content)
        if not isinstance(payload, dict):
            raise ValueError(f"expected a JSON object, got {type(payload).__name__}")
        return payload

    def _chat_text(self, system_prompt: str, user_prompt: str, *, temperature: float, max_tokens: int) -> str:
        client = openai.OpenAI(api_key=self.api_key)
        response = client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
        )
        return (response.choices[0].message.content or "").strip()


def build_routine_prompt(
    routine: RoutineAnalysisInput,
    image_analysis: ImageAnalysis | None = None,
    *,
    language: str = "pt-BR",
) -> str:
    """Assemble the user prompt, folding in the image analysis when present."""
    divider = "━" * 40
    lines = [
        "Analyze the following study routine in depth.",
        "",
        "ROUTINE DATA:",
        divider,
        f"Wake-up time: {routine.wake_up_time}",
        f"Study methods: {', '.join(routine.study_methods)}",
        f"Daily tasks: {', '.join(routine.daily_tasks)}",
        f"Priorities: {', '.join(routine.priorities)}",
        f"Rest time: {routine.rest_time}",
        divider,
    ]
    if image_analysis is not None:
        lines += [
            "",
            "VISUAL ANALYSIS OF THE IMAGE:",
            divider,
            image_analysis.visual_insights,
            "",
            "IDENTIFIED PATTERNS:",
            *[f"{idx}. {pattern}" for idx, pattern in enumerate(image_analysis.identified_patterns, start=1)],
            "",
            "DETECTED SCHEDULE:",
            image_analysis.schedule_detected or "Not detected",
            divider,
        ]

    insight_topics = [
        "chronobiology (ideal versus chosen times)",
        "effectiveness of the selected study methods",
        "cognitive load across the day",
        "productivity bottlenecks",
        "long-term sustainability",
        "strengths of the current routine",
        "burnout or overload risks",
        "immediate optimization opportunities",
    ]
    if image_analysis is not None:
        insight_topics.append("integration of the visual insights from the image")

    guidelines = list(ANALYSIS_GUIDELINES)
    if image_analysis is not None:
        guidelines.append("INTEGRATE the insights from the image analysis.")

    lines += [
        "",
        "Return a complete, detailed and actionable analysis as JSON with these keys:",
        '"hoursStudied": number 0-24, realistic hours of effective study accounting for breaks and fatigue;',
        '"daysCompleted": number 0-7, days per week this routine is sustainable without burnout;',
        '"weeklyProgress": number 0-100, expected weekly progress given efficiency and consistency;',
        '"motivationLevel": number 0-100, motivation given balance, method variety and realism;',
        '"insights": at least 200 words covering ' + "; ".join(insight_topics) + ";",
        '"recommendations": five specific, actionable recommendations, each with a scientific justification;',
        '"detailedAnalysis": object with "timeManagement", "studyEfficiency" and "workLifeBalance" '
        '(100-150 words each), "improvementAreas" (three measurable items) and "strengths" (three items).',
        "",
        "GUIDELINES:",
        *[f"{idx}. {rule}" for idx, rule in enumerate(guidelines, start=1)],
        "",
        "Ground the analysis in the Ebbinghaus forgetting curve, the Pomodoro technique and attention "
        "management, circadian cycles, cognitive load theory, self-determination theory and memory consolidation.",
        f"Write every text field in {language}.",
    ]
    return "\n".join(lines)


def get_routine_analyzer() -> RoutineAnalyzer:
    return RoutineAnalyzer(settings.openai_api_key, model=settings.openai_model, language=settings.analysis_language)
