"""Queue-backed subscriber feeding a WebSocket connection."""

import asyncio
import logging
from dataclasses import dataclass, field

from live_quiz.domain.events import SessionEvent
from live_quiz.services.broadcaster import Subscriber

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 1000


@dataclass
class QueueSubscriber(Subscriber):
    """Buffers events for one client; a full buffer drops new events."""

    queue: asyncio.Queue[SessionEvent] = field(
        default_factory=lambda: asyncio.Queue(maxsize=DEFAULT_QUEUE_SIZE)
    )
    dropped: int = 0

    async def deliver(self, event: SessionEvent) -> None:
        try:
            self.queue.put_nowait(event)
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning(
                "Dropping event for slow subscriber",
                extra={"event_type": event.type, "dropped": self.dropped},
            )

    async def next_event(self) -> SessionEvent:
        return await self.queue.get()
