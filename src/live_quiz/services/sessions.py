"""Session lifecycle: create, join, leave, end and transcript publishing."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol
from uuid import uuid4

from live_quiz.domain.errors import InvalidStateError, NotFoundError, ValidationError
from live_quiz.domain.events import (
    ParticipantJoined,
    ParticipantsUpdated,
    ParticipantView,
    SessionCreated,
    SessionEnded,
    SessionEvent,
    SessionView,
    TranscriptChunkPublished,
    epoch_millis,
)
from live_quiz.domain.sessions import (
    STATUS_ENDED,
    Participant,
    Session,
    TranscriptSegment,
)
from live_quiz.services.broadcaster import EventBroadcaster
from live_quiz.services.chunker import DEFAULT_MAX_CHUNK_SIZE, chunk_transcript

if TYPE_CHECKING:
    from live_quiz.services.quizzes import QuizService

logger = logging.getLogger(__name__)

_SESSION_ID_LENGTH = 8


class SessionRepository(Protocol):
    """Storage interface for live sessions."""

    def add(self, session: Session) -> None:
        """Store a newly created session."""

    def get(self, session_id: str) -> Session | None:
        """Return a session by id, if present."""

    def exists(self, session_id: str) -> bool:
        """Return True if a session with this id was ever created."""

    def list_sessions(self) -> list[Session]:
        """Return all known sessions."""

    def save(self, session: Session) -> None:
        """Persist changes made to a session."""


def require_session(repository: SessionRepository, session_id: str) -> Session:
    """Return the session or raise ``NotFoundError``."""
    if not session_id:
        raise ValidationError("Missing session ID")
    session = repository.get(session_id)
    if session is None:
        raise NotFoundError("Session not found")
    return session


@dataclass
class SessionService:
    """Owns session state changes and the broadcasts that follow them."""

    repository: SessionRepository
    broadcaster: EventBroadcaster
    quiz_service: QuizService
    max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE

    async def create_session(self, name: str, host: Participant | None) -> Session:
        """Create an active session with no participants."""
        cleaned_name = (name or "").strip()
        if not cleaned_name or host is None:
            raise ValidationError("Missing required fields")
        resolved_host = _normalize_identity(host)
        session = Session(
            id=self._new_session_id(),
            name=cleaned_name,
            host=resolved_host,
            created_at=datetime.now(tz=UTC),
        )
        self.repository.add(session)
        logger.info("Created session", extra={"session_id": session.id})
        await self.broadcaster.publish(
            session.id, SessionCreated(session=SessionView.from_session(session))
        )
        return copy.deepcopy(session)

    async def join_session(self, session_id: str, participant: Participant) -> bool:
        """Add a participant; return False if the email had already joined."""
        resolved = _normalize_identity(participant)
        session = require_session(self.repository, session_id)
        if not session.is_active:
            raise InvalidStateError("Session has ended")
        if session.find_participant(resolved.email) is not None:
            return False
        session.participants.append(resolved)
        self.repository.save(session)
        logger.info("Participant joined", extra={"session_id": session.id})
        await self._publish_all(
            session.id,
            [
                ParticipantJoined(user_id=resolved.email, name=resolved.name),
                _participants_update(session),
            ],
        )
        return True

    async def leave_session(self, session_id: str, user_id: str) -> bool:
        """Remove a participant by email; return False if they were absent."""
        if not user_id:
            raise ValidationError("Missing required fields")
        session = require_session(self.repository, session_id)
        email = user_id.strip().lower()
        remaining = [p for p in session.participants if p.email != email]
        if len(remaining) == len(session.participants):
            return False
        session.participants = remaining
        self.repository.save(session)
        await self.broadcaster.publish(session.id, _participants_update(session))
        return True

    async def end_session(self, session_id: str) -> bool:
        """Mark a session ended; return False if it already was."""
        session = require_session(self.repository, session_id)
        if not session.is_active:
            return False
        events: list[SessionEvent] = []
        quiz_ended = self.quiz_service.conclude_active_quiz(session)
        if quiz_ended is not None:
            events.append(quiz_ended)
        session.status = STATUS_ENDED
        self.repository.save(session)
        events.append(SessionEnded(session_id=session.id))
        logger.info("Ended session", extra={"session_id": session.id})
        await self._publish_all(session.id, events)
        return True

    def get_session(self, session_id: str) -> Session:
        """Return a snapshot of the session."""
        return copy.deepcopy(require_session(self.repository, session_id))

    def list_transcripts(self, session_id: str) -> list[TranscriptSegment]:
        session = require_session(self.repository, session_id)
        return list(session.transcripts)

    async def append_transcript(
        self, session_id: str, text: str, is_partial: bool = False
    ) -> int:
        """Append a transcript segment and publish it in chunks.

        Returns the number of chunks published.
        """
        if not session_id or not text or not text.strip():
            raise ValidationError("Missing sessionId or text")
        session = require_session(self.repository, session_id)
        if not session.is_active:
            raise InvalidStateError("Session has ended")
        segment = TranscriptSegment(
            text=text, timestamp=datetime.now(tz=UTC), is_partial=is_partial
        )
        session.transcripts.append(segment)
        self.repository.save(session)

        timestamp = epoch_millis(segment.timestamp)
        chunks = list(chunk_transcript(text, self.max_chunk_size))
        await self._publish_all(
            session.id,
            [
                TranscriptChunkPublished(
                    text=chunk.text,
                    is_partial=is_partial or not chunk.is_last,
                    timestamp=timestamp,
                    chunk_index=chunk.index,
                    total_chunks=chunk.total,
                )
                for chunk in chunks
            ],
        )
        return len(chunks)

    def transcript_text(self, session_id: str, max_chars: int | None = None) -> str:
        """Return the accumulated final transcript, trimmed to the last chars."""
        session = require_session(self.repository, session_id)
        text = " ".join(
            segment.text.strip()
            for segment in session.transcripts
            if not segment.is_partial
        ).strip()
        if max_chars is not None and len(text) > max_chars:
            return text[-max_chars:]
        return text

    async def _publish_all(self, session_id: str, events: list[SessionEvent]) -> None:
        for event in events:
            await self.broadcaster.publish(session_id, event)

    def _new_session_id(self) -> str:
        while True:
            candidate = uuid4().hex[:_SESSION_ID_LENGTH]
            if not self.repository.exists(candidate):
                return candidate


def _normalize_identity(participant: Participant) -> Participant:
    name = (participant.name or "").strip()
    email = (participant.email or "").strip().lower()
    if not name or not email:
        raise ValidationError("Missing required fields")
    return Participant(name=name, email=email)


def _participants_update(session: Session) -> ParticipantsUpdated:
    return ParticipantsUpdated(
        participants=[
            ParticipantView.from_participant(p) for p in session.participants
        ]
    )
