"""Real-time events published on a session channel.

Every event is a pydantic model with a literal ``type`` tag, so
``SessionEvent`` is a closed union that subscribers can match on
exhaustively. On the wire an event is ``{"event": type, "data": {...}}``
with camelCase field names.
"""

from datetime import UTC, datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from live_quiz.domain.quizzes import Quiz, QuizResult
from live_quiz.domain.sessions import Participant, Session


class WireModel(BaseModel):
    """Base for payloads serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ParticipantView(WireModel):
    name: str
    email: str

    @classmethod
    def from_participant(cls, participant: Participant) -> "ParticipantView":
        return cls(name=participant.name, email=participant.email)


class QuizView(WireModel):
    id: str
    question: str
    options: list[str]
    correct_answer: str | None
    explanation: str | None
    time_limit: float
    timestamp: int

    @classmethod
    def from_quiz(cls, quiz: Quiz) -> "QuizView":
        return cls(
            id=quiz.id,
            question=quiz.question,
            options=list(quiz.options),
            correct_answer=quiz.correct_answer,
            explanation=quiz.explanation,
            time_limit=quiz.time_limit,
            timestamp=epoch_millis(quiz.created_at),
        )


class AnswerView(WireModel):
    user_id: str
    name: str
    answer: str
    is_correct: bool | None


class QuizResultView(WireModel):
    quiz_id: str
    question: str
    correct_answer: str | None
    answers: list[AnswerView]
    option_counts: dict[str, int]
    total_responses: int

    @classmethod
    def from_result(cls, result: QuizResult) -> "QuizResultView":
        return cls(
            quiz_id=result.quiz_id,
            question=result.question,
            correct_answer=result.correct_answer,
            answers=[
                AnswerView(
                    user_id=record.user_id,
                    name=record.name,
                    answer=record.answer,
                    is_correct=record.is_correct,
                )
                for record in result.answers
            ],
            option_counts=dict(result.option_counts),
            total_responses=result.total_responses,
        )


class SessionView(WireModel):
    id: str
    name: str
    host: ParticipantView
    participants: list[ParticipantView]
    created_at: int
    status: str
    active_quiz: QuizView | None = None

    @classmethod
    def from_session(cls, session: Session) -> "SessionView":
        return cls(
            id=session.id,
            name=session.name,
            host=ParticipantView.from_participant(session.host),
            participants=[
                ParticipantView.from_participant(p) for p in session.participants
            ],
            created_at=epoch_millis(session.created_at),
            status=session.status,
            active_quiz=(
                QuizView.from_quiz(session.active_quiz)
                if session.active_quiz
                else None
            ),
        )


class SessionCreated(WireModel):
    type: Literal["session-created"] = "session-created"
    session: SessionView


class ParticipantJoined(WireModel):
    type: Literal["user-joined"] = "user-joined"
    user_id: str
    name: str


class ParticipantsUpdated(WireModel):
    type: Literal["participants-update"] = "participants-update"
    participants: list[ParticipantView]


class TranscriptChunkPublished(WireModel):
    type: Literal["new-transcription"] = "new-transcription"
    text: str
    is_partial: bool
    timestamp: int
    chunk_index: int
    total_chunks: int


class QuizStarted(WireModel):
    type: Literal["new-quiz"] = "new-quiz"
    quiz: QuizView


class AnswerSubmitted(WireModel):
    type: Literal["answer-submitted"] = "answer-submitted"
    user_id: str
    name: str
    answer: str
    question_id: str
    timestamp: int


class QuizEnded(WireModel):
    type: Literal["quiz-ended"] = "quiz-ended"
    quiz_id: str
    result: QuizResultView


class SessionEnded(WireModel):
    type: Literal["session-ended"] = "session-ended"
    session_id: str
    message: str = "Session has ended"


SessionEvent = Annotated[
    SessionCreated
    | ParticipantJoined
    | ParticipantsUpdated
    | TranscriptChunkPublished
    | QuizStarted
    | AnswerSubmitted
    | QuizEnded
    | SessionEnded,
    Field(discriminator="type"),
]


def to_wire(event: SessionEvent) -> dict[str, object]:
    """Serialize an event into the channel message format."""
    return {
        "event": event.type,
        "data": event.model_dump(by_alias=True, mode="json", exclude={"type"}),
    }


def epoch_millis(moment: datetime | None = None) -> int:
    """Return a wall-clock timestamp in epoch milliseconds."""
    resolved = moment or datetime.now(tz=UTC)
    return int(resolved.timestamp() * 1000)
