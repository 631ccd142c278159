"""Base contracts shared by the turn orchestrator and its collaborators."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol, Sequence

from .events import CollaborationEvent


class OrchestratorState(str, Enum):
    """Lifecycle of one turn orchestrator."""

    IDLE = "idle"
    RUNNING = "running"
    AWAITING_CONTINUE = "awaiting_continue"
    STOPPED = "stopped"


@dataclass
class CollaborationCancelToken:
    """Cooperative cancellation token checked at every call boundary."""

    is_cancelled: bool = False
    reason: str = "stopped"

    def cancel(self, reason: Optional[str] = None) -> None:
        """Mark the token as cancelled with an optional reason."""
        self.is_cancelled = True
        if reason:
            self.reason = str(reason).strip() or self.reason


@dataclass(frozen=True)
class CollaborationRequest:
    """Normalized start request for one collaboration session."""

    task: str
    model_a: str
    model_b: str
    auto_run: bool = True
    role_a: Optional[str] = None
    role_b: Optional[str] = None
    max_iterations: Optional[int] = None


@dataclass(frozen=True)
class AgentReply:
    """Text and token usage returned by one agent call."""

    content: str
    tokens: Optional[int] = None


class AgentClient(Protocol):
    """Capability consumed by the orchestrator for each of the two agents."""

    async def send_message(
        self,
        prompt: str,
        history: Sequence[Dict[str, str]],
        model_id: str,
        *,
        role: Optional[str] = None,
        session_id: str = "",
    ) -> AgentReply:
        ...

    async def list_available_models(self) -> List[str]:
        ...


EventSink = Callable[[CollaborationEvent], Awaitable[Any]]
