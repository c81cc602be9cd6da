"""Tests for the event broadcaster."""

import asyncio

from live_quiz.domain.events import (
    ParticipantJoined,
    SessionEnded,
    TranscriptChunkPublished,
    to_wire,
)
from live_quiz.services.broadcaster import EventBroadcaster, channel_name
from tests.conftest import FailingSubscriber, RecordingSubscriber


def test_publish_without_subscribers_is_noop() -> None:
    broadcaster = EventBroadcaster()

    asyncio.run(broadcaster.publish("abc", SessionEnded(session_id="abc")))

    assert broadcaster.subscriber_count("abc") == 0


def test_publish_reaches_only_subscribers_of_that_session() -> None:
    broadcaster = EventBroadcaster()
    first = RecordingSubscriber()
    second = RecordingSubscriber()
    other = RecordingSubscriber()
    broadcaster.subscribe("abc", first)
    broadcaster.subscribe("abc", second)
    broadcaster.subscribe("xyz", other)

    asyncio.run(
        broadcaster.publish("abc", ParticipantJoined(user_id="b@y.com", name="Bob"))
    )

    assert first.types() == ["user-joined"]
    assert second.types() == ["user-joined"]
    assert other.events == []


def test_unsubscribe_stops_delivery_and_is_idempotent() -> None:
    broadcaster = EventBroadcaster()
    subscriber = RecordingSubscriber()
    subscription = broadcaster.subscribe("abc", subscriber)

    broadcaster.unsubscribe(subscription)
    broadcaster.unsubscribe(subscription)
    asyncio.run(broadcaster.publish("abc", SessionEnded(session_id="abc")))

    assert subscriber.events == []
    assert broadcaster.subscriber_count("abc") == 0


def test_failing_subscriber_does_not_block_others() -> None:
    broadcaster = EventBroadcaster()
    healthy = RecordingSubscriber()
    broadcaster.subscribe("abc", FailingSubscriber())
    broadcaster.subscribe("abc", healthy)

    asyncio.run(broadcaster.publish("abc", SessionEnded(session_id="abc")))

    assert healthy.types() == ["session-ended"]


def test_wire_format_uses_event_name_and_camel_case() -> None:
    event = TranscriptChunkPublished(
        text="hello",
        is_partial=True,
        timestamp=1700000000000,
        chunk_index=0,
        total_chunks=2,
    )

    assert to_wire(event) == {
        "event": "new-transcription",
        "data": {
            "text": "hello",
            "isPartial": True,
            "timestamp": 1700000000000,
            "chunkIndex": 0,
            "totalChunks": 2,
        },
    }


def test_channel_name_is_prefixed() -> None:
    assert channel_name("abc123") == "session-abc123"
