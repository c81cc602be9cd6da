"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest

from live_quiz.adapters.memory_session_repository import InMemorySessionRepository
from live_quiz.config import Settings
from live_quiz.containers import AppContainer
from live_quiz.domain.events import SessionEvent
from live_quiz.domain.quizzes import QuizDraft
from live_quiz.domain.sessions import Participant, Session
from live_quiz.services.broadcaster import EventBroadcaster, Subscriber
from live_quiz.services.quiz_generation import (
    QuizGenerationClient,
    QuizGenerationService,
)
from live_quiz.services.quizzes import QuizService
from live_quiz.services.sessions import SessionService

ALICE = Participant(name="Alice", email="a@x.com")
BOB = Participant(name="Bob", email="b@y.com")
CAROL = Participant(name="Carol", email="c@z.com")


def arithmetic_draft(**overrides: object) -> QuizDraft:
    """Return the 2+2 quiz used across tests."""
    values: dict[str, object] = {
        "question": "2+2=?",
        "options": ["3", "4", "5"],
        "correct_answer": "4",
        "explanation": "Basic addition.",
    }
    values.update(overrides)
    return QuizDraft(**values)


@dataclass
class ManualClock:
    """Monotonic clock that only moves when told to."""

    now: float = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass
class RecordingSubscriber(Subscriber):
    """Subscriber that keeps every delivered event."""

    events: list[SessionEvent] = field(default_factory=list)

    async def deliver(self, event: SessionEvent) -> None:
        self.events.append(event)

    def types(self) -> list[str]:
        return [event.type for event in self.events]

    def of_type(self, event_type: str) -> list[SessionEvent]:
        return [event for event in self.events if event.type == event_type]


class FailingSubscriber(Subscriber):
    """Subscriber whose transport always fails."""

    async def deliver(self, event: SessionEvent) -> None:
        raise RuntimeError("transport down")


@dataclass
class FakeQuizGenerationClient(QuizGenerationClient):
    """Fake generation client returning a fixed payload."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "question": "Which planet is known as the red planet?",
            "options": ["Venus", "Mars", "Jupiter", "Saturn"],
            "correct_answer": "Mars",
            "explanation": "Iron oxide dust gives Mars its color.",
        }
    )
    calls: list[dict[str, object]] = field(default_factory=list)

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
        self.calls.append(
            {
                "model": model,
                "reasoning_effort": reasoning_effort,
                "store": store,
                "system_prompt": system_prompt,
                "prompt": prompt,
                "schema": schema,
            }
        )
        return self.payload


class FailingQuizGenerationClient(QuizGenerationClient):
    """Generation client that always times out."""

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
        raise RuntimeError("timeout")


async def start_session(
    session_service: SessionService,
    host: Participant = ALICE,
    participants: tuple[Participant, ...] = (),
) -> Session:
    """Create a session and join the given participants."""
    session = await session_service.create_session("Lecture", host)
    for participant in participants:
        await session_service.join_session(session.id, participant)
    return session


@pytest.fixture
def settings() -> Settings:
    return Settings(
        openai_api_key="openai-key",
        quiz_default_time_limit_seconds=60,
        transcript_max_chunk_size=8000,
    )


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def repository() -> InMemorySessionRepository:
    return InMemorySessionRepository()


@pytest.fixture
def broadcaster() -> EventBroadcaster:
    return EventBroadcaster()


@pytest.fixture
def quiz_service(
    repository: InMemorySessionRepository,
    broadcaster: EventBroadcaster,
    clock: ManualClock,
) -> QuizService:
    return QuizService(repository=repository, broadcaster=broadcaster, clock=clock)


@pytest.fixture
def session_service(
    repository: InMemorySessionRepository,
    broadcaster: EventBroadcaster,
    quiz_service: QuizService,
) -> SessionService:
    return SessionService(
        repository=repository,
        broadcaster=broadcaster,
        quiz_service=quiz_service,
    )


@pytest.fixture
def generation_client() -> FakeQuizGenerationClient:
    return FakeQuizGenerationClient()


@pytest.fixture
def container(
    settings: Settings,
    broadcaster: EventBroadcaster,
    session_service: SessionService,
    quiz_service: QuizService,
    generation_client: FakeQuizGenerationClient,
) -> AppContainer:
    quiz_generation_service = QuizGenerationService(
        client=generation_client,
        model=settings.openai_model,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        broadcaster=broadcaster,
        session_service=session_service,
        quiz_service=quiz_service,
        quiz_generation_service=quiz_generation_service,
        close_resources=close_resources,
    )
