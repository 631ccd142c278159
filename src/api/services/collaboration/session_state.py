"""Session state for one Agent A / Agent B collaboration run."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

AgentId = Literal["A", "B"]
HistoryRole = Literal["producer", "consumer"]

AGENT_ROLES: Dict[str, HistoryRole] = {"A": "producer", "B": "consumer"}


class SessionStatus(str, Enum):
    """Status declared by Agent A through its completion tag."""

    WORKING = "WORKING"
    COMPLETE = "COMPLETE"
    NEED_FEEDBACK = "NEED_FEEDBACK"


@dataclass(frozen=True)
class HistoryTurn:
    """One role-tagged entry of the shared conversation history."""

    role: HistoryRole
    content: str
    tokens: Optional[int] = None
    model: Optional[str] = None
    timestamp: float = field(default_factory=time.time)

    @property
    def agent_id(self) -> AgentId:
        return "A" if self.role == "producer" else "B"

    def to_message(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "role": self.role,
            "agent": self.agent_id,
            "content": self.content,
            "tokens": self.tokens,
            "model": self.model,
            "timestamp": datetime.fromtimestamp(self.timestamp, tz=timezone.utc).isoformat(),
        }


@dataclass
class SessionState:
    """Mutable record of one collaboration run, owned by its orchestrator.

    ``history`` is append-only and ``active`` only ever flips from True to
    False. The orchestrator is the sole writer.
    """

    task: str
    model_a: str
    model_b: str
    max_iterations: int = 8
    time_limit_seconds: float = 180.0
    auto_run: bool = True
    role_a: Optional[str] = None
    role_b: Optional[str] = None
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    history: List[HistoryTurn] = field(default_factory=list)
    iteration: int = 0
    status: SessionStatus = SessionStatus.WORKING
    total_tokens: int = 0
    active: bool = False
    start_time: Optional[float] = None
    end_time: Optional[float] = None
    end_reason: Optional[str] = None

    def activate(self, now: float) -> None:
        if self.active or self.end_time is not None:
            raise RuntimeError("session can only be activated once")
        self.active = True
        self.start_time = now

    def deactivate(self, now: float, reason: str) -> bool:
        """Mark the session inactive. Returns False if it already was."""
        if not self.active:
            return False
        self.active = False
        self.end_time = now
        self.end_reason = reason
        return True

    def append_turn(self, turn: HistoryTurn) -> None:
        self.history.append(turn)
        if turn.tokens:
            self.total_tokens += max(int(turn.tokens), 0)

    def complete_round(self) -> None:
        if self.iteration >= self.max_iterations:
            raise RuntimeError("iteration budget already exhausted")
        self.iteration += 1

    def elapsed_seconds(self, now: float) -> float:
        if self.start_time is None:
            return 0.0
        end = self.end_time if self.end_time is not None else now
        return max(end - self.start_time, 0.0)

    def time_left_seconds(self, now: float) -> int:
        return max(int(self.time_limit_seconds - self.elapsed_seconds(now)), 0)

    def latest_turn(self, role: HistoryRole) -> Optional[HistoryTurn]:
        for turn in reversed(self.history):
            if turn.role == role:
                return turn
        return None

    def to_export(self, now: Optional[float] = None) -> Dict[str, Any]:
        """Build a JSON-ready export of the session, including statistics."""
        now = time.time() if now is None else now
        a_turns = [t for t in self.history if t.role == "producer"]
        b_turns = [t for t in self.history if t.role == "consumer"]
        started_at = (
            datetime.fromtimestamp(self.start_time, tz=timezone.utc).isoformat()
            if self.start_time is not None
            else None
        )
        return {
            "metadata": {
                "export_time": datetime.now(timezone.utc).isoformat(),
                "session_id": self.session_id,
            },
            "session": {
                "task": self.task,
                "start_time": started_at,
                "duration_seconds": int(self.elapsed_seconds(now)),
                "iterations": self.iteration,
                "max_iterations": self.max_iterations,
                "status": self.status.value,
                "active": self.active,
                "end_reason": self.end_reason,
                "auto_run": self.auto_run,
                "total_tokens": self.total_tokens,
                "models": {"A": self.model_a, "B": self.model_b},
                "roles": {"A": self.role_a, "B": self.role_b},
            },
            "history": [turn.to_dict() for turn in self.history],
            "statistics": {
                "agent_a_messages": len(a_turns),
                "agent_b_messages": len(b_turns),
                "average_tokens_per_message": (
                    round(self.total_tokens / len(self.history)) if self.history else 0
                ),
            },
        }
