"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from live_quiz.adapters.memory_session_repository import InMemorySessionRepository
from live_quiz.adapters.openai_quiz_client import OpenAIQuizClient
from live_quiz.config import Settings
from live_quiz.services.broadcaster import EventBroadcaster
from live_quiz.services.quiz_generation import QuizGenerationService
from live_quiz.services.quizzes import QuizService
from live_quiz.services.sessions import SessionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    broadcaster: EventBroadcaster
    session_service: SessionService
    quiz_service: QuizService
    quiz_generation_service: QuizGenerationService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    repository = InMemorySessionRepository()
    broadcaster = EventBroadcaster()
    quiz_service = QuizService(
        repository=repository,
        broadcaster=broadcaster,
        default_time_limit=resolved_settings.quiz_default_time_limit_seconds,
    )
    session_service = SessionService(
        repository=repository,
        broadcaster=broadcaster,
        quiz_service=quiz_service,
        max_chunk_size=resolved_settings.transcript_max_chunk_size,
    )
    openai_client = (
        OpenAIQuizClient.create(
            api_key=resolved_settings.openai_api_key,
            base_url=resolved_settings.openai_base_url,
            timeout=resolved_settings.openai_timeout_seconds,
        )
        if resolved_settings.openai_api_key
        else None
    )
    quiz_generation_service = QuizGenerationService(
        client=openai_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
        fallback_enabled=resolved_settings.quiz_generation_fallback,
    )

    async def close_resources() -> None:
        if openai_client is not None:
            await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        broadcaster=broadcaster,
        session_service=session_service,
        quiz_service=quiz_service,
        quiz_generation_service=quiz_generation_service,
        close_resources=close_resources,
    )
