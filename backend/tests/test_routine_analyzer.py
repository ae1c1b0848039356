from __future__ import annotations

import json

from fakes import ANALYSIS_PAYLOAD, routine_input
from studyflow.api.schemas.analysis import ImageAnalysis
from studyflow.services.routine_analyzer import (
    FALLBACK_ANALYSIS,
    FALLBACK_FEEDBACK,
    FALLBACK_MOTIVATION,
    MISSING_KEY_ANALYSIS,
    RoutineAnalyzer,
    build_routine_prompt,
)

IMAGE_PAYLOAD = {
    "visualInsights": "Color-coded weekly grid with long evening blocks.",
    "identifiedPatterns": ["07:00 - Math", "No breaks after 20:00"],
    "scheduleDetected": "07:00 - Math\n09:00 - Physics",
}


class DummyChoices:
    def __init__(self, content: str):
        self.message = type("obj", (), {"content": content})


class DummyCompletion:
    def __init__(self, content: str):
        self.choices = [DummyChoices(content)]


def _dummy_client(responder, requests: list):
    class DummyClient:
        def __init__(self, *args, **kwargs):
            self.api_key = kwargs.get("api_key")

        class chat:  # type: ignore[valid-type]
            class completions:  # type: ignore[valid-type]
                @staticmethod
                def create(*args, **kwargs):
                    requests.append(kwargs)
                    return DummyCompletion(responder(kwargs))

    return DummyClient


def _is_image_request(kwargs) -> bool:
    return isinstance(kwargs["messages"][1]["content"], list)


def test_missing_key_returns_setup_payload(monkeypatch) -> None:
    def explode(*args, **kwargs):
        raise AssertionError("client must not be created without a key")

    monkeypatch.setattr("openai.OpenAI", explode)
    analysis = RoutineAnalyzer("  ").analyze(routine_input())

    assert analysis.insights == MISSING_KEY_ANALYSIS["insights"]
    assert analysis.hours_studied == 6


def test_analysis_parsed_from_json_response(monkeypatch) -> None:
    requests: list = []
    monkeypatch.setattr("openai.OpenAI", _dummy_client(lambda kwargs: json.dumps(ANALYSIS_PAYLOAD), requests))

    analysis = RoutineAnalyzer("sk-test", model="gpt-4o", language="en").analyze(routine_input())

    assert analysis.hours_studied == 5.5
    assert analysis.recommendations[0] == "Move reviews to the morning"
    assert requests[0]["response_format"] == {"type": "json_object"}
    assert requests[0]["model"] == "gpt-4o"
    assert "Write every text field in en." in requests[0]["messages"][1]["content"]


def test_malformed_response_falls_back(monkeypatch) -> None:
    requests: list = []
    monkeypatch.setattr("openai.OpenAI", _dummy_client(lambda kwargs: "not json at all", requests))

    analysis = RoutineAnalyzer("sk-test").analyze(routine_input())

    assert analysis.insights == FALLBACK_ANALYSIS["insights"]
    assert analysis.weekly_progress == 75


def test_model_values_kept_as_returned(monkeypatch) -> None:
    payload = {**ANALYSIS_PAYLOAD, "hoursStudied": 30, "daysCompleted": 5.5, "weeklyProgress": 105}
    monkeypatch.setattr("openai.OpenAI", _dummy_client(lambda kwargs: json.dumps(payload), []))

    analysis = RoutineAnalyzer("sk-test").analyze(routine_input())

    assert analysis.insights == ANALYSIS_PAYLOAD["insights"]
    assert analysis.hours_studied == 30
    assert analysis.days_completed == 5.5
    assert analysis.weekly_progress == 105


def test_extra_and_missing_keys_do_not_trigger_fallback(monkeypatch) -> None:
    payload = {"insights": "Short answer.", "confidence": "high"}
    monkeypatch.setattr("openai.OpenAI", _dummy_client(lambda kwargs: json.dumps(payload), []))

    analysis = RoutineAnalyzer("sk-test").analyze(routine_input())

    assert analysis.insights == "Short answer."
    assert analysis.recommendations == []
    assert analysis.model_dump(by_alias=True)["confidence"] == "high"


def test_non_object_json_falls_back(monkeypatch) -> None:
    monkeypatch.setattr("openai.OpenAI", _dummy_client(lambda kwargs: json.dumps(["not", "an", "object"]), []))

    analysis = RoutineAnalyzer("sk-test").analyze(routine_input())

    assert analysis.insights == FALLBACK_ANALYSIS["insights"]


def test_image_analysis_feeds_the_routine_prompt(monkeypatch) -> None:
    requests: list = []

    def responder(kwargs):
        return json.dumps(IMAGE_PAYLOAD if _is_image_request(kwargs) else ANALYSIS_PAYLOAD)

    monkeypatch.setattr("openai.OpenAI", _dummy_client(responder, requests))
    routine = routine_input(imageUrl="data:image/png;base64,iVBORw0KGgo=")

    analysis = RoutineAnalyzer("sk-test").analyze(routine)

    assert len(requests) == 2
    image_part = requests[0]["messages"][1]["content"][1]
    assert image_part["image_url"]["detail"] == "high"
    assert requests[0]["temperature"] == 0.3
    assert "VISUAL ANALYSIS OF THE IMAGE" in requests[1]["messages"][1]["content"]
    assert analysis.image_analysis.identified_patterns == IMAGE_PAYLOAD["identifiedPatterns"]


def test_image_failure_is_not_fatal(monkeypatch) -> None:
    requests: list = []

    def responder(kwargs):
        if _is_image_request(kwargs):
            raise RuntimeError("image could not be downloaded")
        return json.dumps(ANALYSIS_PAYLOAD)

    monkeypatch.setattr("openai.OpenAI", _dummy_client(responder, requests))
    routine = routine_input(imageUrl="data:image/png;base64,iVBORw0KGgo=")

    analysis = RoutineAnalyzer("sk-test").analyze(routine)

    assert analysis.insights == ANALYSIS_PAYLOAD["insights"]
    assert analysis.image_analysis is None
    assert "VISUAL ANALYSIS" not in requests[-1]["messages"][1]["content"]


def test_prompt_lists_routine_fields() -> None:
    image = ImageAnalysis.model_validate(IMAGE_PAYLOAD)
    prompt = build_routine_prompt(routine_input(), image, language="pt-BR")

    assert "Wake-up time: 06:30" in prompt
    assert "Daily tasks: Math exercises, Read chapter 3, Review notes" in prompt
    assert "1. 07:00 - Math" in prompt
    assert "INTEGRATE the insights from the image analysis." in prompt
    assert prompt.endswith("Write every text field in pt-BR.")


def test_short_messages_fall_back_on_errors(monkeypatch) -> None:
    def responder(kwargs):
        raise RuntimeError("rate limited")

    monkeypatch.setattr("openai.OpenAI", _dummy_client(responder, []))
    analyzer = RoutineAnalyzer("sk-test")

    assert analyzer.motivational_message(40, 3) == FALLBACK_MOTIVATION
    assert analyzer.quick_performance_feedback(3.5, 4, 70) == FALLBACK_FEEDBACK


def test_short_messages_use_model_text(monkeypatch) -> None:
    requests: list = []
    monkeypatch.setattr("openai.OpenAI", _dummy_client(lambda kwargs: "  Great streak, keep it up!  ", requests))

    message = RoutineAnalyzer("sk-test").motivational_message(80, 12)

    assert message == "Great streak, keep it up!"
    assert "12-day streak" in requests[0]["messages"][1]["content"]
    assert "response_format" not in requests[0]
