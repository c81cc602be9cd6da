"""Pydantic models for HTTP request bodies.

Fields are optional so that missing values reach the services, which
report them as validation errors with a consistent message.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from live_quiz.domain.quizzes import QuizDraft
from live_quiz.domain.sessions import Participant


class RequestModel(BaseModel):
    """Base request model accepting camelCase or snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserDetails(RequestModel):
    """Name and email of a host or participant."""

    name: str | None = None
    email: str | None = None

    def to_participant(self) -> Participant:
        return Participant(name=self.name or "", email=self.email or "")


class CreateSessionRequest(RequestModel):
    name: str | None = None
    host: UserDetails | None = None


class JoinSessionRequest(RequestModel):
    session_id: str | None = None
    participant: UserDetails | None = None


class LeaveSessionRequest(RequestModel):
    session_id: str | None = None
    user_id: str | None = None


class EndSessionRequest(RequestModel):
    session_id: str | None = None


class TranscriptionRequest(RequestModel):
    session_id: str | None = None
    text: str | None = None
    is_partial: bool = False


class QuizPayload(RequestModel):
    """Quiz content as sent by the host client."""

    id: str | None = None
    question: str | None = None
    options: list[str] | None = None
    correct_answer: str | None = None
    explanation: str | None = None
    time_limit: float | None = None

    def to_draft(self) -> QuizDraft:
        return QuizDraft(
            id=self.id,
            question=self.question or "",
            options=self.options or [],
            correct_answer=self.correct_answer,
            explanation=self.explanation,
            time_limit=self.time_limit,
        )


class StartQuizRequest(RequestModel):
    session_id: str | None = None
    quiz: QuizPayload | None = None
    time_limit: float | None = None


class GenerateQuizRequest(RequestModel):
    session_id: str | None = None
    time_limit: float | None = None


class SubmitAnswerRequest(RequestModel):
    session_id: str | None = None
    user_id: str | None = None
    answer: str | None = None
    question_id: str | None = None


class CloseQuizRequest(RequestModel):
    session_id: str | None = None
    quiz_id: str | None = None
