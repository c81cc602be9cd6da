"""WebSocket transport for session channels."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from live_quiz.adapters.websocket_subscriber import QueueSubscriber
from live_quiz.domain.events import to_wire

if TYPE_CHECKING:
    from live_quiz.containers import AppContainer

router = APIRouter(tags=["realtime"])
logger = logging.getLogger(__name__)

SESSION_NOT_FOUND_CLOSE_CODE = 4004


@router.websocket("/ws/session/{session_id}")
async def session_channel(websocket: WebSocket, session_id: str) -> None:
    """Stream a session's events to one client until it disconnects."""
    container: AppContainer = websocket.app.state.container
    await websocket.accept()
    if not container.session_service.repository.exists(session_id):
        await websocket.close(
            code=SESSION_NOT_FOUND_CLOSE_CODE, reason="Session not found"
        )
        return

    subscriber = QueueSubscriber()
    subscription = container.broadcaster.subscribe(session_id, subscriber)
    sender = asyncio.create_task(_forward_events(websocket, subscriber))
    receiver = asyncio.create_task(_drain_until_disconnect(websocket))
    try:
        done, pending = await asyncio.wait(
            {sender, receiver}, return_when=asyncio.FIRST_COMPLETED
        )
        for task in pending:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        for task in done:
            exc = task.exception()
            if exc is not None and not isinstance(exc, WebSocketDisconnect):
                logger.error(
                    "WebSocket channel failed",
                    exc_info=exc,
                    extra={"session_id": session_id},
                )
    finally:
        container.broadcaster.unsubscribe(subscription)


async def _forward_events(websocket: WebSocket, subscriber: QueueSubscriber) -> None:
    while True:
        event = await subscriber.next_event()
        await websocket.send_json(to_wire(event))


async def _drain_until_disconnect(websocket: WebSocket) -> None:
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return
