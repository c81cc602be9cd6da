"""Tests for quiz generation."""

import asyncio

import pytest

from live_quiz.domain.errors import DependencyError, ValidationError
from live_quiz.services.quiz_generation import (
    FALLBACK_OPTIONS,
    QUIZ_SCHEMA,
    QuizGenerationService,
    fallback_quiz,
)
from tests.conftest import FailingQuizGenerationClient, FakeQuizGenerationClient

TRANSCRIPT = "Today we covered planetary geology and the surface of Mars."


def test_generate_returns_validated_draft() -> None:
    client = FakeQuizGenerationClient()
    service = QuizGenerationService(
        client=client, model="gpt-4o-mini", reasoning_effort="low"
    )

    draft = asyncio.run(service.generate(TRANSCRIPT))

    assert draft.question == "Which planet is known as the red planet?"
    assert draft.options == ["Venus", "Mars", "Jupiter", "Saturn"]
    assert draft.correct_answer == "Mars"
    (call,) = client.calls
    assert call["model"] == "gpt-4o-mini"
    assert call["reasoning_effort"] == "low"
    assert call["schema"] is QUIZ_SCHEMA
    assert TRANSCRIPT in call["prompt"]


def test_correct_answer_outside_options_falls_back_to_first_option() -> None:
    client = FakeQuizGenerationClient(
        payload={
            "question": "Pick one",
            "options": ["Alpha", "Beta", "Beta "],
            "correct_answer": "Gamma",
            "explanation": None,
        }
    )
    service = QuizGenerationService(client=client, model="gpt-4o-mini")

    draft = asyncio.run(service.generate(TRANSCRIPT))

    assert draft.options == ["Alpha", "Beta"]
    assert draft.correct_answer == "Alpha"


def test_client_failure_uses_fallback_quiz() -> None:
    service = QuizGenerationService(
        client=FailingQuizGenerationClient(), model="gpt-4o-mini"
    )

    draft = asyncio.run(service.generate(TRANSCRIPT))

    assert draft.question == "What was discussed about covered?"
    assert draft.options == FALLBACK_OPTIONS
    assert draft.correct_answer in draft.options


def test_malformed_payload_uses_fallback_quiz() -> None:
    client = FakeQuizGenerationClient(
        payload={"question": "Only one?", "options": ["Yes"]}
    )
    service = QuizGenerationService(client=client, model="gpt-4o-mini")

    draft = asyncio.run(service.generate(TRANSCRIPT))

    assert draft.options == FALLBACK_OPTIONS


def test_missing_client_uses_fallback_quiz() -> None:
    service = QuizGenerationService(client=None, model="gpt-4o-mini")

    draft = asyncio.run(service.generate("Short talk."))

    assert draft.question == "What was the main topic discussed in the transcript?"


def test_disabled_fallback_raises_dependency_error() -> None:
    service = QuizGenerationService(
        client=FailingQuizGenerationClient(),
        model="gpt-4o-mini",
        fallback_enabled=False,
    )

    with pytest.raises(DependencyError):
        asyncio.run(service.generate(TRANSCRIPT))


def test_empty_transcript_is_rejected() -> None:
    service = QuizGenerationService(
        client=FakeQuizGenerationClient(), model="gpt-4o-mini"
    )

    with pytest.raises(ValidationError):
        asyncio.run(service.generate("   "))


def test_fallback_quiz_strips_punctuation_from_topic() -> None:
    draft = fallback_quiz("Mitochondria, the powerhouse.")

    assert draft.question == "What was discussed about Mitochondria?"
    assert draft.correct_answer == "The transcript needs more context"
