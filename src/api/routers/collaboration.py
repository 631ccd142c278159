"""
Collaboration WebSocket endpoint

One WebSocket connection controls at most one collaboration session at a time
and receives every event that session emits.
"""
import json
import logging
import uuid
from typing import Any, Dict

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError as PydanticValidationError

from ..dependencies import get_session_registry
from ..models.collaboration import ControlCommand, SessionExportMessage, StartCommand
from ..services.collaboration import (
    CollaborationError,
    CollaborationRequest,
    SessionRegistry,
    normalize_collaboration_event,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["collaboration"])


def _error_message(message: str, kind: str) -> Dict[str, Any]:
    return normalize_collaboration_event({"type": "error", "message": message, "kind": kind})


async def _handle_command(
    websocket: WebSocket,
    connection_id: str,
    registry: SessionRegistry,
    data: Any,
) -> None:
    """Dispatch one control command received on the connection."""

    async def sink(event: Dict[str, Any]) -> None:
        await websocket.send_json(event)

    if not isinstance(data, dict):
        await websocket.send_json(_error_message("Commands must be JSON objects", "validation"))
        return

    command_type = data.get("type")

    if command_type == "start":
        try:
            command = StartCommand.model_validate(data)
        except PydanticValidationError as e:
            await websocket.send_json(_error_message(f"Invalid start request: {e.errors()[0]['msg']}", "validation"))
            return
        request = CollaborationRequest(
            task=command.task,
            model_a=command.model_a,
            model_b=command.model_b,
            auto_run=command.auto_run,
            role_a=command.role_a,
            role_b=command.role_b,
            max_iterations=command.max_iterations,
        )
        try:
            await registry.start(connection_id, request, sink)
        except CollaborationError as e:
            # Registry already reported it to the connection
            logger.info(f"Start rejected on {connection_id[:8]}: {e}")
        return

    try:
        control = ControlCommand.model_validate(data)
    except PydanticValidationError:
        await websocket.send_json(_error_message(f"Unknown command: {command_type}", "validation"))
        return

    if control.type == "stop":
        if not registry.stop(connection_id):
            logger.debug(f"Stop ignored on {connection_id[:8]}: no active session")
    elif control.type == "continue":
        if not registry.continue_round(connection_id):
            logger.debug(f"Continue ignored on {connection_id[:8]}: not awaiting continue")
    else:
        message = SessionExportMessage(session=registry.export(connection_id))
        await websocket.send_json(message.model_dump())


@router.websocket("/ws/collaboration")
async def collaboration_socket(
    websocket: WebSocket,
    registry: SessionRegistry = Depends(get_session_registry),
):
    """
    Control connection for collaboration sessions

    Commands (JSON):
        {"type": "start", "task": ..., "model_a": ..., "model_b": ..., "auto_run": true}
        {"type": "stop"}
        {"type": "continue"}
        {"type": "export"}

    Closing the connection stops its active session.
    """
    await websocket.accept()
    connection_id = uuid.uuid4().hex
    logger.info(f"Collaboration connection opened: {connection_id[:8]}")

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                data = json.loads(raw)
            except ValueError:
                await websocket.send_json(_error_message("Commands must be valid JSON", "validation"))
                continue
            await _handle_command(websocket, connection_id, registry, data)
    except WebSocketDisconnect as e:
        logger.info(f"Collaboration connection closed: {connection_id[:8]} (code: {e.code})")
    finally:
        await registry.release(connection_id)
