"""Best-effort fan-out of session events to subscribers."""

import logging
from dataclasses import dataclass, field
from typing import Protocol
from uuid import UUID, uuid4

from live_quiz.domain.events import SessionEvent

logger = logging.getLogger(__name__)


class Subscriber(Protocol):
    """Receiver of events published on a session channel."""

    async def deliver(self, event: SessionEvent) -> None:
        """Handle one published event."""


@dataclass(frozen=True)
class Subscription:
    """Handle returned by ``subscribe``; pass it back to unsubscribe."""

    session_id: str
    token: UUID


def channel_name(session_id: str) -> str:
    """Return the logical channel name for a session."""
    return f"session-{session_id}"


@dataclass
class EventBroadcaster:
    """In-memory subscriber registry keyed by session id.

    Delivery is unordered across subscribers, unacknowledged and never
    retried. A subscriber that joins after an event was published does not
    see it.
    """

    _channels: dict[str, dict[UUID, Subscriber]] = field(default_factory=dict)

    def subscribe(self, session_id: str, subscriber: Subscriber) -> Subscription:
        """Register a subscriber on a session channel."""
        subscription = Subscription(session_id=session_id, token=uuid4())
        self._channels.setdefault(session_id, {})[subscription.token] = subscriber
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove a subscriber; unknown or repeated handles are ignored."""
        subscribers = self._channels.get(subscription.session_id)
        if subscribers is None:
            return
        subscribers.pop(subscription.token, None)
        if not subscribers:
            self._channels.pop(subscription.session_id, None)

    def subscriber_count(self, session_id: str) -> int:
        return len(self._channels.get(session_id, {}))

    async def publish(self, session_id: str, event: SessionEvent) -> None:
        """Deliver an event to every current subscriber of the session."""
        subscribers = list(self._channels.get(session_id, {}).values())
        for subscriber in subscribers:
            try:
                await subscriber.deliver(event)
            except Exception:
                logger.exception(
                    "Failed to deliver event",
                    extra={
                        "channel": channel_name(session_id),
                        "event_type": event.type,
                    },
                )
