"""Structured collaboration event models and validation helpers."""

from __future__ import annotations

from typing import Any, Dict, Literal, Mapping, Optional, Type, Union

from pydantic import BaseModel, ConfigDict


class _EventBase(BaseModel):
    """Common base for all collaboration events."""

    model_config = ConfigDict(extra="forbid")
    type: str


class SessionStartedEvent(_EventBase):
    type: Literal["session_started"] = "session_started"
    session_id: Optional[str] = None
    task: Optional[str] = None
    model_a: Optional[str] = None
    model_b: Optional[str] = None
    auto_run: Optional[bool] = None
    max_iterations: Optional[int] = None


class RoundOutputEvent(_EventBase):
    type: Literal["round_output"] = "round_output"
    agent: Literal["A", "B"]
    content: str
    tokens: Optional[int] = None
    elapsed_seconds: int
    round: Optional[int] = None
    model: Optional[str] = None


class StatusUpdateEvent(_EventBase):
    type: Literal["status_update"] = "status_update"
    iteration: int
    max_iterations: int
    time_left_seconds: int
    status: str


class WaitingForContinueEvent(_EventBase):
    type: Literal["waiting_for_continue"] = "waiting_for_continue"
    iteration: Optional[int] = None


class SessionEndedEvent(_EventBase):
    type: Literal["session_ended"] = "session_ended"
    iteration: int
    status: str
    total_tokens: int
    reason: Optional[str] = None


class ErrorEvent(_EventBase):
    type: Literal["error"] = "error"
    agent: Optional[Literal["A", "B"]] = None
    message: str
    kind: Optional[str] = None


CollaborationEventModel = Union[
    SessionStartedEvent,
    RoundOutputEvent,
    StatusUpdateEvent,
    WaitingForContinueEvent,
    SessionEndedEvent,
    ErrorEvent,
]

CollaborationEvent = Dict[str, Any]


_EVENT_MODEL_BY_TYPE: Dict[str, Type[_EventBase]] = {
    "session_started": SessionStartedEvent,
    "round_output": RoundOutputEvent,
    "status_update": StatusUpdateEvent,
    "waiting_for_continue": WaitingForContinueEvent,
    "session_ended": SessionEndedEvent,
    "error": ErrorEvent,
}


def normalize_collaboration_event(event: Union[_EventBase, Mapping[str, Any]]) -> CollaborationEvent:
    """Validate and normalize one event into plain dict payload."""
    if isinstance(event, _EventBase):
        return event.model_dump(exclude_none=True)

    payload = dict(event)
    event_type = payload.get("type")
    if not isinstance(event_type, str) or not event_type:
        raise ValueError("collaboration event must include non-empty string field 'type'")

    model_cls = _EVENT_MODEL_BY_TYPE.get(event_type)
    if model_cls is None:
        raise ValueError(f"unsupported collaboration event type: {event_type}")

    return model_cls.model_validate(payload).model_dump(exclude_none=True)
