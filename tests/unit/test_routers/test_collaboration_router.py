"""Tests for the collaboration WebSocket control connection."""

import json
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi import FastAPI, WebSocketDisconnect
from fastapi.testclient import TestClient

from src.api.dependencies import get_session_registry
from src.api.routers import collaboration
from src.api.services.collaboration import SessionRegistry, TurnOrchestrator

START = {"type": "start", "task": "build X", "model_a": "model-a", "model_b": "model-b"}


@pytest.fixture
def created():
    return []


@pytest.fixture
def client(scripted_agent, created):
    def factory():
        orchestrator = TurnOrchestrator(
            agent_a=scripted_agent(),
            agent_b=scripted_agent(),
            max_iterations=2,
        )
        created.append(orchestrator)
        return orchestrator

    registry = SessionRegistry(factory)
    app = FastAPI()
    app.include_router(collaboration.router)
    app.dependency_overrides[get_session_registry] = lambda: registry
    return TestClient(app)


def _receive_until(ws, event_type):
    events = []
    while True:
        event = ws.receive_json()
        events.append(event)
        if event["type"] == event_type:
            return events


def test_start_streams_events_until_session_ended(client):
    with client.websocket_connect("/ws/collaboration") as ws:
        ws.send_json(START)
        events = _receive_until(ws, "session_ended")

    types = [event["type"] for event in events]
    assert types[0] == "session_started"
    assert types.count("round_output") == 4
    assert types.count("status_update") == 2
    assert events[0]["task"] == "build X"
    assert events[-1]["iteration"] == 2
    assert events[-1]["reason"] == "max_iterations"


def test_export_returns_last_session(client):
    with client.websocket_connect("/ws/collaboration") as ws:
        ws.send_json({"type": "export"})
        empty = ws.receive_json()

        ws.send_json(START)
        _receive_until(ws, "session_ended")
        ws.send_json({"type": "export"})
        exported = ws.receive_json()

    assert empty == {"type": "session_export", "session": None}
    assert exported["type"] == "session_export"
    assert exported["session"]["session"]["iterations"] == 2
    assert len(exported["session"]["history"]) == 4
    assert exported["session"]["statistics"]["agent_a_messages"] == 2


def test_invalid_start_keeps_connection_open(client):
    with client.websocket_connect("/ws/collaboration") as ws:
        ws.send_json({"type": "start", "task": "", "model_a": "model-a", "model_b": "model-b"})
        error = ws.receive_json()

        ws.send_json(START)
        started = ws.receive_json()
        _receive_until(ws, "session_ended")

    assert error["type"] == "error"
    assert error["kind"] == "validation"
    assert "task" in error["message"]
    assert started["type"] == "session_started"


def test_duplicate_start_rejected_in_step_mode(client, created):
    with client.websocket_connect("/ws/collaboration") as ws:
        ws.send_json({**START, "auto_run": False})
        _receive_until(ws, "waiting_for_continue")

        ws.send_json(START)
        conflict = ws.receive_json()

        ws.send_json({"type": "continue"})
        ended = _receive_until(ws, "session_ended")[-1]

        ws.send_json({"type": "stop"})
        ws.send_json({"type": "continue"})
        ws.send_json({"type": "export"})
        exported = ws.receive_json()

    assert conflict == {
        "type": "error",
        "message": "A session is already running. Please stop it first.",
        "kind": "session_conflict",
    }
    assert len(created) == 1
    assert ended["reason"] == "max_iterations"
    assert ended["iteration"] == 2
    assert exported["session"]["session"]["end_reason"] == "max_iterations"



def test_stop_while_waiting_ends_session(client):
    with client.websocket_connect("/ws/collaboration") as ws:
        ws.send_json({**START, "auto_run": False})
        _receive_until(ws, "waiting_for_continue")

        ws.send_json({"type": "stop"})
        ended = _receive_until(ws, "session_ended")[-1]

    assert ended["reason"] == "stopped"
    assert ended["iteration"] == 1


@pytest.mark.asyncio
async def test_disconnect_stops_active_session(scripted_agent):
    created = []

    def factory():
        orchestrator = TurnOrchestrator(agent_a=scripted_agent(), agent_b=scripted_agent())
        created.append(orchestrator)
        return orchestrator

    registry = SessionRegistry(factory)
    websocket = Mock()
    websocket.accept = AsyncMock()
    websocket.send_json = AsyncMock()
    websocket.receive_text = AsyncMock(side_effect=[
        json.dumps({**START, "auto_run": False}),
        WebSocketDisconnect(code=1001),
    ])

    await collaboration.collaboration_socket(websocket, registry)

    session = created[0].session
    assert session.active is False
    assert session.end_reason == "disconnected"
    sent = [call.args[0]["type"] for call in websocket.send_json.await_args_list]
    assert sent[0] == "session_started"
    assert sent[-1] == "session_ended"



def test_unknown_and_malformed_commands_are_reported(client):
    with client.websocket_connect("/ws/collaboration") as ws:
        ws.send_text("not json")
        malformed = ws.receive_json()
        ws.send_json({"type": "pause"})
        unknown = ws.receive_json()
        ws.send_json(["start"])
        not_object = ws.receive_json()
        ws.send_json({"type": "start", "task": "x", "model_a": "a", "model_b": "b", "auto_run": "sometimes"})
        bad_field = ws.receive_json()

    assert malformed["kind"] == "validation"
    assert unknown["message"] == "Unknown command: pause"
    assert not_object["message"] == "Commands must be JSON objects"
    assert bad_field["kind"] == "validation"
    assert bad_field["message"].startswith("Invalid start request")


def test_control_commands_ignore_extra_fields_and_require_type(client):
    with client.websocket_connect("/ws/collaboration") as ws:
        ws.send_json({"type": "export", "format": "json"})
        exported = ws.receive_json()
        ws.send_json({"task": "no type"})
        missing_type = ws.receive_json()

    assert exported == {"type": "session_export", "session": None}
    assert missing_type["kind"] == "validation"
    assert missing_type["message"] == "Unknown command: None"
