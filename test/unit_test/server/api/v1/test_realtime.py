"""Tests for the progress WebSocket."""

import pytest
from starlette.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

URL = "/api/v1/realtime/progress"


@pytest.fixture
def ws_client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def finished_job_id(ws_client) -> str:
    response = ws_client.post("/api/v1/generation", json={"prompt": "Realtime check", "provider": "test"})
    assert response.status_code == 201
    return response.json()["job_id"]


def test_job_id_is_required(ws_client):
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with ws_client.websocket_connect(URL) as websocket:
            websocket.receive_json()

    assert exc_info.value.code == 1008


def test_connection_ping_and_status(ws_client, finished_job_id, hub):
    with ws_client.websocket_connect(f"{URL}?job_id={finished_job_id}") as websocket:
        hello = websocket.receive_json()
        assert hello["type"] == "connection_established"
        assert hello["job_id"] == finished_job_id
        assert hub.is_connected(finished_job_id)

        websocket.send_json({"type": "ping"})
        assert websocket.receive_json()["type"] == "pong"

        websocket.send_text("not json")
        websocket.send_json({"type": "request_status"})
        status = websocket.receive_json()
        assert status["type"] == "status_update"
        assert (status["status"], status["progress"]) == ("completed", 100)


def test_status_of_unknown_job(ws_client):
    with ws_client.websocket_connect(f"{URL}?job_id=missing") as websocket:
        websocket.receive_json()
        websocket.send_json({"type": "request_status"})

        message = websocket.receive_json()

    assert message["type"] == "error"
    assert message["message"] == "Generation job missing not found"
