"""Quiz endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request

from live_quiz.api.models import (
    CloseQuizRequest,
    GenerateQuizRequest,
    StartQuizRequest,
    SubmitAnswerRequest,
)
from live_quiz.domain.errors import ValidationError
from live_quiz.domain.events import QuizResultView, QuizView

if TYPE_CHECKING:
    from live_quiz.containers import AppContainer

router = APIRouter(prefix="/api", tags=["quizzes"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.post("/quiz")
async def start_quiz(body: StartQuizRequest, request: Request) -> dict[str, object]:
    """Start a host-provided quiz and broadcast it."""
    if body.quiz is None:
        raise ValidationError("Missing sessionId or quiz")
    quiz = await _container(request).quiz_service.start_quiz(
        body.session_id or "", body.quiz.to_draft(), time_limit=body.time_limit
    )
    return {
        "success": True,
        "quiz": QuizView.from_quiz(quiz).model_dump(by_alias=True, mode="json"),
    }


@router.post("/quiz/generate")
async def generate_quiz(
    body: GenerateQuizRequest, request: Request
) -> dict[str, object]:
    """Generate a quiz from the session transcript and start it."""
    container = _container(request)
    session_id = body.session_id or ""
    transcript = container.session_service.transcript_text(
        session_id, max_chars=container.settings.quiz_transcript_window_chars
    )
    draft = await container.quiz_generation_service.generate(transcript)
    quiz = await container.quiz_service.start_quiz(
        session_id, draft, time_limit=body.time_limit
    )
    return {
        "success": True,
        "quiz": QuizView.from_quiz(quiz).model_dump(by_alias=True, mode="json"),
    }


@router.post("/quiz/answer")
async def submit_answer(
    body: SubmitAnswerRequest, request: Request
) -> dict[str, object]:
    """Record a participant's answer to the active quiz."""
    await _container(request).quiz_service.submit_answer(
        body.session_id or "",
        body.question_id or "",
        body.user_id or "",
        body.answer or "",
    )
    return {"success": True}


@router.post("/quiz/close")
async def close_quiz(body: CloseQuizRequest, request: Request) -> dict[str, object]:
    """Finalize a quiz before its window elapses."""
    result = await _container(request).quiz_service.finalize_quiz(
        body.session_id or "", body.quiz_id or ""
    )
    return {
        "success": True,
        "result": QuizResultView.from_result(result).model_dump(
            by_alias=True, mode="json"
        ),
    }


@router.get("/session/{session_id}/quiz/{quiz_id}/results")
async def quiz_results(
    session_id: str, quiz_id: str, request: Request
) -> dict[str, object]:
    """Return the tally for a quiz, live if it is still running."""
    result = _container(request).quiz_service.get_result(session_id, quiz_id)
    return QuizResultView.from_result(result).model_dump(by_alias=True, mode="json")
