"""Quiz generation from transcript text using LLMs."""

import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import BaseModel, Field

from live_quiz.domain.errors import DependencyError, ValidationError
from live_quiz.domain.quizzes import QuizDraft

logger = logging.getLogger(__name__)

QUIZ_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "question": {"type": "string"},
        "options": {
            "type": "array",
            "items": {"type": "string"},
        },
        "correct_answer": {"type": "string"},
        "explanation": {"anyOf": [{"type": "string"}, {"type": "null"}]},
    },
    "required": ["question", "options", "correct_answer", "explanation"],
    "additionalProperties": False,
}

SYSTEM_PROMPT = (
    "You are a quiz generator. Generate a multiple-choice question based on the "
    "given transcript. The question should be clear, concise, and test "
    "understanding of the key points. Include 4 options, with one correct answer "
    "and three plausible distractors. Also provide a brief explanation of why "
    "the correct answer is right."
)

FALLBACK_OPTIONS = [
    "The main topic was not clearly stated",
    "The transcript was unclear",
    "The content was too brief to determine",
    "The transcript needs more context",
]


class GeneratedQuiz(BaseModel):
    """Structured output for quiz generation."""

    question: str = Field(min_length=1)
    options: list[str] = Field(min_length=2)
    correct_answer: str | None = None
    explanation: str | None = None


class QuizGenerationClient(Protocol):
    """Interface for LLM quiz generation."""

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        system_prompt: str,
        prompt: str,
        schema: dict[str, object],
    ) -> dict[str, object]:
        """Return structured quiz data."""


@dataclass
class QuizGenerationService:
    """Builds quiz drafts from transcript text, degrading to a fallback quiz."""

    client: QuizGenerationClient | None
    model: str
    reasoning_effort: str | None = None
    store: bool = False
    fallback_enabled: bool = True

    async def generate(self, transcript: str) -> QuizDraft:
        """Generate a quiz draft for the given transcript text."""
        cleaned = transcript.strip()
        if not cleaned:
            raise ValidationError("No transcript available to generate a quiz")
        if self.client is None:
            logger.warning("No quiz generation client configured, using fallback")
            return self._fallback(cleaned, None)

        try:
            raw = await self.client.generate(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                system_prompt=SYSTEM_PROMPT,
                prompt=(
                    "Generate a quiz question based on this transcript:\n\n"
                    f"{cleaned}"
                ),
                schema=QUIZ_SCHEMA,
            )
            draft = _to_draft(GeneratedQuiz.model_validate(raw))
        except Exception as exc:
            logger.exception("Quiz generation failed", extra={"model": self.model})
            return self._fallback(cleaned, exc)
        return draft

    def _fallback(self, transcript: str, exc: Exception | None) -> QuizDraft:
        if not self.fallback_enabled:
            raise DependencyError("Failed to generate quiz") from exc
        return fallback_quiz(transcript)


def fallback_quiz(transcript: str) -> QuizDraft:
    """Return a deterministic quiz used when generation is unavailable."""
    topics = [word for word in transcript.split() if len(word) > 5]
    question = (
        f"What was discussed about {topics[0].strip('.,!?;:')}?"
        if topics
        else "What was the main topic discussed in the transcript?"
    )
    return QuizDraft(
        question=question,
        options=list(FALLBACK_OPTIONS),
        correct_answer="The transcript needs more context",
        explanation=(
            "The transcript was too short or unclear to generate a meaningful "
            "question."
        ),
    )


def _to_draft(generated: GeneratedQuiz) -> QuizDraft:
    options = []
    for option in generated.options:
        cleaned = option.strip()
        if cleaned and cleaned not in options:
            options.append(cleaned)
    if len(options) < 2:
        raise DependencyError("Generated quiz has too few distinct options")
    correct_answer = (generated.correct_answer or "").strip()
    if correct_answer not in options:
        correct_answer = options[0]
    return QuizDraft(
        question=generated.question.strip(),
        options=options,
        correct_answer=correct_answer,
        explanation=generated.explanation,
    )
