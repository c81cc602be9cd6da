"""Tests for the WebSocket session channel."""

import pytest
from fastapi import WebSocketDisconnect
from fastapi.testclient import TestClient

from live_quiz.api.app import create_app
from live_quiz.containers import AppContainer


def test_unknown_session_is_rejected(container: AppContainer) -> None:
    with TestClient(create_app(container)) as client:
        with client.websocket_connect("/ws/session/nope") as websocket:
            with pytest.raises(WebSocketDisconnect) as excinfo:
                websocket.receive_json()

    assert excinfo.value.code == 4004


def test_channel_streams_session_events(container: AppContainer) -> None:
    with TestClient(create_app(container)) as client:
        session_id = client.post(
            "/api/session/create",
            json={"name": "Lecture", "host": {"name": "Alice", "email": "a@x.com"}},
        ).json()["sessionId"]

        with client.websocket_connect(f"/ws/session/{session_id}") as websocket:
            client.post(
                "/api/session/join",
                json={
                    "sessionId": session_id,
                    "participant": {"name": "Bob", "email": "B@y.com"},
                },
            )
            joined = websocket.receive_json()
            update = websocket.receive_json()

        assert joined == {
            "event": "user-joined",
            "data": {"userId": "b@y.com", "name": "Bob"},
        }
        assert update["event"] == "participants-update"
        assert update["data"]["participants"] == [{"name": "Bob", "email": "b@y.com"}]

    assert container.broadcaster.subscriber_count(session_id) == 0
