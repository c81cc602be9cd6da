"""Domain models for live sessions."""

from dataclasses import dataclass, field
from datetime import datetime

from live_quiz.domain.quizzes import Quiz

STATUS_ACTIVE = "active"
STATUS_ENDED = "ended"


@dataclass(frozen=True)
class Participant:
    """A host or participant identified by email."""

    name: str
    email: str


@dataclass(frozen=True)
class TranscriptSegment:
    """One unit of speech-to-text output."""

    text: str
    timestamp: datetime
    is_partial: bool = False


@dataclass
class Session:
    """Mutable state of a live session, owned by the session repository."""

    id: str
    name: str
    host: Participant
    created_at: datetime
    status: str = STATUS_ACTIVE
    participants: list[Participant] = field(default_factory=list)
    transcripts: list[TranscriptSegment] = field(default_factory=list)
    quizzes: list[Quiz] = field(default_factory=list)
    active_quiz: Quiz | None = None

    @property
    def is_active(self) -> bool:
        return self.status == STATUS_ACTIVE

    def find_participant(self, email: str) -> Participant | None:
        """Return the participant with the given email, if joined."""
        for participant in self.participants:
            if participant.email == email:
                return participant
        return None

    def display_name(self, email: str) -> str:
        """Resolve a display name for an identity, host included."""
        if self.host.email == email:
            return self.host.name
        participant = self.find_participant(email)
        return participant.name if participant else "Anonymous"

    def find_quiz(self, quiz_id: str) -> Quiz | None:
        """Return the active or a past quiz by id."""
        if self.active_quiz is not None and self.active_quiz.id == quiz_id:
            return self.active_quiz
        for quiz in self.quizzes:
            if quiz.id == quiz_id:
                return quiz
        return None
