"""Process-local session repository."""

from dataclasses import dataclass, field

from live_quiz.domain.sessions import Session
from live_quiz.services.sessions import SessionRepository


@dataclass
class InMemorySessionRepository(SessionRepository):
    """Dictionary-backed session storage; contents are lost on restart."""

    sessions: dict[str, Session] = field(default_factory=dict)

    def add(self, session: Session) -> None:
        """Store a newly created session."""
        self.sessions[session.id] = session

    def get(self, session_id: str) -> Session | None:
        """Return a session by id, if present."""
        return self.sessions.get(session_id)

    def exists(self, session_id: str) -> bool:
        return session_id in self.sessions

    def list_sessions(self) -> list[Session]:
        """Return all known sessions, ended ones included."""
        return list(self.sessions.values())

    def save(self, session: Session) -> None:
        """Replace the stored record for a session."""
        self.sessions[session.id] = session
