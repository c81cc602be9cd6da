"""Domain models for quizzes and their results."""

from dataclasses import dataclass, field
from datetime import datetime

from pydantic import BaseModel


class QuizDraft(BaseModel):
    """Quiz content before it is started within a session."""

    question: str
    options: list[str]
    correct_answer: str | None = None
    explanation: str | None = None
    id: str | None = None
    time_limit: float | None = None


@dataclass(frozen=True)
class AnswerRecord:
    """One participant's answer in a finalized tally."""

    user_id: str
    name: str
    answer: str
    is_correct: bool | None


@dataclass(frozen=True)
class QuizResult:
    """Tally of a quiz's answers."""

    quiz_id: str
    question: str
    correct_answer: str | None
    answers: list[AnswerRecord]
    option_counts: dict[str, int]

    @property
    def total_responses(self) -> int:
        return len(self.answers)


@dataclass
class Quiz:
    """A started quiz with its answer window.

    ``started_at`` is a monotonic clock reading and is only meaningful to
    the service that created the quiz; ``created_at`` is wall-clock time for
    clients.
    """

    id: str
    question: str
    options: list[str]
    correct_answer: str | None
    explanation: str | None
    time_limit: float
    created_at: datetime
    started_at: float
    answers: dict[str, str] = field(default_factory=dict)
    result: QuizResult | None = None

    @property
    def is_finalized(self) -> bool:
        return self.result is not None

    def window_elapsed(self, now: float) -> bool:
        """Return True once the answer window has closed at ``now``."""
        return now - self.started_at >= self.time_limit

    def is_correct(self, answer: str) -> bool | None:
        if self.correct_answer is None:
            return None
        return answer == self.correct_answer
