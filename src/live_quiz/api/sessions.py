"""Session and transcription endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request

from live_quiz.api.models import (
    CreateSessionRequest,
    EndSessionRequest,
    JoinSessionRequest,
    LeaveSessionRequest,
    TranscriptionRequest,
)
from live_quiz.domain.errors import ValidationError
from live_quiz.domain.events import SessionView, epoch_millis
from live_quiz.domain.sessions import Session

if TYPE_CHECKING:
    from live_quiz.containers import AppContainer

router = APIRouter(prefix="/api", tags=["sessions"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.post("/session/create")
async def create_session(
    body: CreateSessionRequest, request: Request
) -> dict[str, object]:
    """Create a session for a host."""
    host = body.host.to_participant() if body.host else None
    session = await _container(request).session_service.create_session(
        body.name or "", host
    )
    return {
        "success": True,
        "sessionId": session.id,
        "session": _serialize_session(session),
    }


@router.post("/session/join")
async def join_session(body: JoinSessionRequest, request: Request) -> dict[str, object]:
    """Join a session as a participant; repeated joins are no-ops."""
    if body.participant is None:
        raise ValidationError("Missing required fields")
    await _container(request).session_service.join_session(
        body.session_id or "", body.participant.to_participant()
    )
    return {"success": True}


@router.post("/session/leave")
async def leave_session(
    body: LeaveSessionRequest, request: Request
) -> dict[str, object]:
    """Leave a session."""
    await _container(request).session_service.leave_session(
        body.session_id or "", body.user_id or ""
    )
    return {"success": True}


@router.post("/session/end")
async def end_session(body: EndSessionRequest, request: Request) -> dict[str, object]:
    """End a session for everyone."""
    await _container(request).session_service.end_session(body.session_id or "")
    return {"success": True}


@router.get("/session/{session_id}")
async def get_session(session_id: str, request: Request) -> dict[str, object]:
    """Return a session snapshot."""
    session = _container(request).session_service.get_session(session_id)
    return _serialize_session(session)


@router.get("/session/{session_id}/transcripts")
async def list_transcripts(session_id: str, request: Request) -> dict[str, object]:
    """Return the session's transcript segments in arrival order."""
    segments = _container(request).session_service.list_transcripts(session_id)
    return {
        "transcripts": [
            {
                "text": segment.text,
                "isPartial": segment.is_partial,
                "timestamp": epoch_millis(segment.timestamp),
            }
            for segment in segments
        ]
    }


@router.post("/transcription")
async def publish_transcription(
    body: TranscriptionRequest, request: Request
) -> dict[str, object]:
    """Store a transcript segment and broadcast it in chunks."""
    total_chunks = await _container(request).session_service.append_transcript(
        body.session_id or "", body.text or "", is_partial=body.is_partial
    )
    return {"success": True, "totalChunks": total_chunks}


def _serialize_session(session: Session) -> dict[str, object]:
    data = SessionView.from_session(session).model_dump(by_alias=True, mode="json")
    data["pastQuizIds"] = [quiz.id for quiz in session.quizzes]
    return data
