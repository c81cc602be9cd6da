"""Quiz lifecycle: start, collect answers, finalize once."""

import logging
import math
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import uuid4

from live_quiz.domain.errors import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from live_quiz.domain.events import (
    AnswerSubmitted,
    QuizEnded,
    QuizResultView,
    QuizStarted,
    QuizView,
    SessionEvent,
    epoch_millis,
)
from live_quiz.domain.quizzes import AnswerRecord, Quiz, QuizDraft, QuizResult
from live_quiz.domain.sessions import Session
from live_quiz.services.broadcaster import EventBroadcaster
from live_quiz.services.sessions import SessionRepository, require_session

logger = logging.getLogger(__name__)

DEFAULT_TIME_LIMIT_SECONDS = 60.0


@dataclass
class QuizService:
    """Runs at most one active quiz per session.

    The answer window is judged by comparing ``clock()`` readings against the
    quiz start, so a late answer is rejected even when the sweeper has not yet
    finalized the quiz. State is mutated before any event is awaited.
    """

    repository: SessionRepository
    broadcaster: EventBroadcaster
    default_time_limit: float = DEFAULT_TIME_LIMIT_SECONDS
    clock: Callable[[], float] = time.monotonic

    async def start_quiz(
        self, session_id: str, draft: QuizDraft, time_limit: float | None = None
    ) -> Quiz:
        """Start a quiz in an active session and announce it."""
        session = require_session(self.repository, session_id)
        if not session.is_active:
            raise InvalidStateError("Session has ended")
        options, correct_answer = _validate_draft(draft)
        window = _resolve_time_limit(
            time_limit, draft.time_limit, self.default_time_limit
        )

        now = self.clock()
        active = session.active_quiz
        if active is not None and not active.window_elapsed(now):
            raise ConflictError("A quiz is already active in this session")
        quiz_id = (draft.id or "").strip() or uuid4().hex
        if session.find_quiz(quiz_id) is not None:
            raise ConflictError("Quiz id already used in this session")

        events: list[SessionEvent] = []
        if active is not None:
            events.append(self._close(session, active))

        quiz = Quiz(
            id=quiz_id,
            question=draft.question.strip(),
            options=options,
            correct_answer=correct_answer,
            explanation=draft.explanation,
            time_limit=window,
            created_at=datetime.now(tz=UTC),
            started_at=now,
        )
        session.active_quiz = quiz
        self.repository.save(session)
        events.append(QuizStarted(quiz=QuizView.from_quiz(quiz)))
        logger.info(
            "Started quiz",
            extra={"session_id": session.id, "quiz_id": quiz.id, "window": window},
        )
        await self._publish_all(session.id, events)
        return quiz

    async def submit_answer(
        self, session_id: str, quiz_id: str, user_id: str, answer: str
    ) -> None:
        """Record a participant's answer while the window is open."""
        if not session_id or not quiz_id or not user_id or not answer:
            raise ValidationError("Missing required fields")
        session = require_session(self.repository, session_id)
        quiz = session.find_quiz(quiz_id)
        if quiz is None:
            raise NotFoundError("Quiz not found")
        if quiz.is_finalized:
            raise InvalidStateError("Quiz is no longer active")
        if quiz.window_elapsed(self.clock()):
            ended = self._close(session, quiz)
            self.repository.save(session)
            await self.broadcaster.publish(session.id, ended)
            raise InvalidStateError("Quiz is no longer active")

        identity = user_id.strip().lower()
        quiz.answers[identity] = answer
        self.repository.save(session)
        await self.broadcaster.publish(
            session.id,
            AnswerSubmitted(
                user_id=identity,
                name=session.display_name(identity),
                answer=answer,
                question_id=quiz.id,
                timestamp=epoch_millis(),
            ),
        )

    async def finalize_quiz(self, session_id: str, quiz_id: str) -> QuizResult:
        """Close a quiz early or on expiry; repeated calls return the same tally."""
        session = require_session(self.repository, session_id)
        quiz = session.find_quiz(quiz_id)
        if quiz is None:
            raise NotFoundError("Quiz not found")
        if quiz.result is not None:
            return quiz.result
        ended = self._close(session, quiz)
        self.repository.save(session)
        await self.broadcaster.publish(session.id, ended)
        return quiz.result

    async def finalize_expired(self) -> int:
        """Finalize every active quiz whose window has elapsed."""
        now = self.clock()
        pending: list[tuple[str, QuizEnded]] = []
        for session in self.repository.list_sessions():
            quiz = session.active_quiz
            if quiz is not None and quiz.window_elapsed(now):
                pending.append((session.id, self._close(session, quiz)))
                self.repository.save(session)
        for session_id, ended in pending:
            await self.broadcaster.publish(session_id, ended)
        return len(pending)

    def conclude_active_quiz(self, session: Session) -> QuizEnded | None:
        """Finalize the session's active quiz and return its event unpublished."""
        if session.active_quiz is None:
            return None
        return self._close(session, session.active_quiz)

    def get_result(self, session_id: str, quiz_id: str) -> QuizResult:
        """Return the final tally, or a live tally for the active quiz."""
        session = require_session(self.repository, session_id)
        quiz = session.find_quiz(quiz_id)
        if quiz is None:
            raise NotFoundError("Quiz not found")
        return quiz.result or _tally(session, quiz)

    def _close(self, session: Session, quiz: Quiz) -> QuizEnded:
        result = _tally(session, quiz)
        quiz.result = result
        session.quizzes.append(quiz)
        if session.active_quiz is quiz:
            session.active_quiz = None
        logger.info(
            "Finalized quiz",
            extra={
                "session_id": session.id,
                "quiz_id": quiz.id,
                "responses": result.total_responses,
            },
        )
        return QuizEnded(quiz_id=quiz.id, result=QuizResultView.from_result(result))

    async def _publish_all(self, session_id: str, events: list[SessionEvent]) -> None:
        for event in events:
            await self.broadcaster.publish(session_id, event)


def _validate_draft(draft: QuizDraft) -> tuple[list[str], str | None]:
    if not draft.question or not draft.question.strip():
        raise ValidationError("Quiz question is required")
    options = [option.strip() for option in draft.options]
    if len(options) < 2 or any(not option for option in options):
        raise ValidationError("Quiz needs at least two non-empty options")
    if len(set(options)) != len(options):
        raise ValidationError("Quiz options must be unique")
    correct_answer = (draft.correct_answer or "").strip() or None
    if correct_answer is not None and correct_answer not in options:
        raise ValidationError("Correct answer must be one of the options")
    return options, correct_answer


def _resolve_time_limit(
    requested: float | None, from_draft: float | None, default: float
) -> float:
    for value in (requested, from_draft):
        if value is not None:
            if not math.isfinite(value) or value <= 0:
                raise ValidationError("timeLimit must be a positive number")
            return float(value)
    return default


def _tally(session: Session, quiz: Quiz) -> QuizResult:
    answers = [
        AnswerRecord(
            user_id=user_id,
            name=session.display_name(user_id),
            answer=answer,
            is_correct=quiz.is_correct(answer),
        )
        for user_id, answer in quiz.answers.items()
    ]
    option_counts = {option: 0 for option in quiz.options}
    for answer in quiz.answers.values():
        if answer in option_counts:
            option_counts[answer] += 1
    return QuizResult(
        quiz_id=quiz.id,
        question=quiz.question,
        correct_answer=quiz.correct_answer,
        answers=answers,
        option_counts=option_counts,
    )
