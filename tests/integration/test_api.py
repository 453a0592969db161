"""Integration tests for the HTTP and WebSocket surfaces (in-memory store injected)."""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from chat_relay.app import create_app
from chat_relay.application.dto.message import NewMessageDTO


@pytest.fixture
def app(uow_factory):
    return create_app(uow_factory=uow_factory)


@pytest.fixture
def client(app):
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


def test_healthz(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_readyz_without_engine(client):
    resp = client.get("/readyz")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ready"}


def test_history_endpoint_returns_camel_case(client, store):
    store.add(NewMessageDTO(username="ann", user_id="u1", message="one"))
    store.add(NewMessageDTO(username="root", user_id="u1", message="two", from_admin=True))
    store.add(NewMessageDTO(username="bob", user_id="u2", message="other"))

    resp = client.get("/api/v1/chat/users/u1/messages")

    assert resp.status_code == 200
    data = resp.json()
    assert [m["message"] for m in data] == ["one", "two"]
    assert data[1]["fromAdmin"] is True
    assert data[0]["userId"] == "u1"


def test_history_endpoint_store_failure(client, store):
    store.fail = True
    resp = client.get("/api/v1/chat/users/u1/messages")
    assert resp.status_code == 503


def test_online_users_endpoint(client, app):
    app.state.directory.join("c1", username="ann", user_id="u1")
    app.state.directory.join("c2", role="admin")

    resp = client.get("/api/v1/chat/online-users")

    assert resp.status_code == 200
    assert resp.json() == {"u1": {"username": "ann", "online": True}}


def test_ws_admin_join_receives_snapshot(client, app):
    app.state.directory.join("offline-conn", username="ann", user_id="u1")
    app.state.directory.disconnect("offline-conn")

    with client.websocket_connect("/ws/chat") as ws:
        ws.send_json({"type": "join", "data": {"role": "admin", "username": "root"}})
        frame = ws.receive_json()

    assert frame == {"type": "online-users", "data": {"u1": {"username": "ann", "online": False}}}


def test_ws_history(client, store):
    store.add(NewMessageDTO(username="ann", user_id="u1", message="hi"))

    with client.websocket_connect("/ws/chat") as ws:
        ws.send_json({"type": "get-chat-history", "data": {}})
        empty = ws.receive_json()
        ws.send_json({"type": "get-chat-history", "data": {"userId": "u1"}})
        full = ws.receive_json()

    assert empty == {"type": "chat-history", "data": []}
    assert full["type"] == "chat-history"
    assert [m["message"] for m in full["data"]] == ["hi"]
    assert store.queries == 1


def test_ws_send_message_echoes_to_own_thread(client, store):
    with client.websocket_connect("/ws/chat") as ws:
        ws.send_json({"type": "join", "data": {"userId": "u1", "username": "ann"}})
        ws.send_json({"type": "send-message", "data": {"message": "hi"}})
        frame = ws.receive_json()

    assert frame["type"] == "receive-message"
    assert frame["data"]["userId"] == "u1"
    assert frame["data"]["username"] == "ann"
    assert frame["data"]["fromAdmin"] is False
    assert len(store._messages) == 1


def test_ws_send_failure_returns_error_event(client, store):
    store.fail = True

    with client.websocket_connect("/ws/chat") as ws:
        ws.send_json({"type": "join", "data": {"userId": "u1"}})
        ws.send_json({"type": "send-message", "data": {"message": "hi"}})
        frame = ws.receive_json()

    assert frame["type"] == "error"
    assert frame["data"]["code"] == "send_failed"


def test_ws_history_failure_returns_error_event(client, store):
    store.fail = True

    with client.websocket_connect("/ws/chat") as ws:
        ws.send_json({"type": "get-chat-history", "data": {"userId": "u1"}})
        frame = ws.receive_json()

    assert frame["type"] == "error"
    assert frame["data"]["code"] == "history_failed"


def test_ws_protocol_errors_and_ping(client):
    with client.websocket_connect("/ws/chat") as ws:
        ws.send_text("not json")
        invalid = ws.receive_json()
        ws.send_json({"type": "shout", "data": {}})
        unknown = ws.receive_json()
        ws.send_json({"type": "send-message", "data": {"message": {"nested": True}}})
        bad_field = ws.receive_json()
        ws.send_json({"type": "ping"})
        pong = ws.receive_json()

    assert invalid["data"]["code"] == "invalid_payload"
    assert unknown["data"] == {"code": "unknown_type", "type": "shout"}
    assert bad_field["data"]["code"] == "invalid_data"
    assert pong == {"type": "pong", "data": {}}


def test_ws_user_and_admin_end_to_end(client, store):
    with client.websocket_connect("/ws/chat") as user_ws:
        user_ws.send_json({"type": "join", "data": {"userId": "u1", "username": "ann"}})

        with client.websocket_connect("/ws/chat") as admin_ws:
            admin_ws.send_json({"type": "join", "data": {"role": "admin"}})
            snapshot = admin_ws.receive_json()
            assert snapshot["data"] == {"u1": {"username": "ann", "online": True}}

            user_ws.send_json({"type": "send-message", "data": {"message": "hi"}})
            own = user_ws.receive_json()
            seen_by_admin = admin_ws.receive_json()

            user_ws.close()
            after_leave = admin_ws.receive_json()

    assert own["type"] == seen_by_admin["type"] == "receive-message"
    assert own["data"] == seen_by_admin["data"]
    assert store._messages[0].user_id == "u1"
    assert store._messages[0].from_admin is False
    assert after_leave == {
        "type": "online-users",
        "data": {"u1": {"username": "ann", "online": False}},
    }
