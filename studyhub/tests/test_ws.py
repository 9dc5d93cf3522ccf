import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from studyhub.file_storage import FileStorageManager
from studyhub.main import create_app
from studyhub.stores import build_stores

from .conftest import as_peer


# synchronous TestClient for websocket support
@pytest.fixture
def ws_client(tmp_path):
    app = create_app(build_stores(files=FileStorageManager(str(tmp_path / "resources"))), background=False)
    client = TestClient(app)
    for peer_id, name in (("nomsa", "Nomsa Dlamini"), ("khotso", "Khotso Mokoena")):
        res = client.post("/api/peers/", json={"id": peer_id, "display_name": name, "university_id": "ukzn"})
        assert res.status_code == 200
    return client


def test_unknown_peer_is_rejected(ws_client):
    with pytest.raises(WebSocketDisconnect) as exc:
        with ws_client.websocket_connect("/api/ws/presence?peer_id=ghost") as websocket:
            websocket.receive_json()
    assert exc.value.code == 1008


def test_connection_tracks_presence(ws_client):
    with ws_client.websocket_connect("/api/ws/presence?peer_id=khotso") as websocket:
        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}
        assert ws_client.get("/api/peers/khotso").json()["online"] is True

    assert ws_client.get("/api/peers/khotso").json()["online"] is False


def test_new_messages_are_pushed_to_the_other_participant(ws_client):
    conv = ws_client.post("/api/conversations/direct/khotso", headers=as_peer("nomsa")).json()
    with ws_client.websocket_connect("/api/ws/presence?peer_id=khotso") as websocket:
        res = ws_client.post(f"/api/conversations/{conv['id']}/messages", json={"body": "Hey Khotso!"},
                             headers=as_peer("nomsa"))
        assert res.status_code == 200
        event = websocket.receive_json()
        assert event["type"] == "message"
        assert event["message"]["body"] == "Hey Khotso!"
        assert event["message"]["sender_id"] == "nomsa"


def test_malformed_frame_does_not_leave_peer_online(ws_client):
    with ws_client.websocket_connect("/api/ws/presence?peer_id=khotso") as websocket:
        websocket.send_text("not json")
        assert websocket.receive_json()["type"] == "error"
        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

    assert ws_client.get("/api/peers/khotso").json()["online"] is False
    assert ws_client.app.state.presence.connections == {}


def test_deactivated_peer_cannot_come_back_online(ws_client):
    assert ws_client.delete("/api/peers/me", headers=as_peer("khotso")).status_code == 200
    with pytest.raises(WebSocketDisconnect) as exc:
        with ws_client.websocket_connect("/api/ws/presence?peer_id=khotso") as websocket:
            websocket.receive_json()
    assert exc.value.code == 1008
    assert ws_client.get("/api/peers/khotso").json()["online"] is False
