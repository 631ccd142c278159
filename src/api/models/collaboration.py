"""
Collaboration control models

Commands accepted from the controlling connection and the messages sent back
besides orchestration events
"""
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Literal, Optional


class StartCommand(BaseModel):
    """Start a collaboration session"""
    type: Literal["start"] = "start"
    task: str = Field(default="", description="Task description shared by both agents")
    model_a: str = Field(default="", description="Model id for Agent A")
    model_b: str = Field(default="", description="Model id for Agent B")
    auto_run: bool = Field(default=True, description="False pauses after every round")
    role_a: Optional[str] = Field(default=None, description="Session role description for Agent A")
    role_b: Optional[str] = Field(default=None, description="Session role description for Agent B")
    max_iterations: Optional[int] = Field(default=None, description="Round budget override")


class ControlCommand(BaseModel):
    """Commands without payload"""
    type: Literal["stop", "continue", "export"]


class SessionExportMessage(BaseModel):
    """Export of the connection's current or last session"""
    type: Literal["session_export"] = "session_export"
    session: Optional[Dict[str, Any]] = None


class ModelListResponse(BaseModel):
    """Advisory model catalog for one agent"""
    agent_id: str
    provider_id: str
    models: List[str]
