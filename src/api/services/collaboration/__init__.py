"""Collaboration orchestration primitives."""

from .base import (
    AgentClient,
    AgentReply,
    CollaborationCancelToken,
    CollaborationRequest,
    EventSink,
    OrchestratorState,
)
from .completion import (
    CompletionDetector,
    FinalLineCompletionDetector,
    TagCompletionDetector,
    build_completion_detector,
)
from .errors import (
    AgentCallError,
    AgentTimeoutError,
    CollaborationError,
    MalformedResponseError,
    ProviderError,
    SessionConflict,
    TransportError,
    ValidationError,
)
from .events import CollaborationEvent, normalize_collaboration_event
from .orchestrator import TurnOrchestrator
from .policy import CollaborationPolicy
from .registry import SessionRegistry
from .session_state import HistoryTurn, SessionState, SessionStatus

__all__ = [
    "AgentClient",
    "AgentReply",
    "CollaborationCancelToken",
    "CollaborationRequest",
    "EventSink",
    "OrchestratorState",
    "CompletionDetector",
    "FinalLineCompletionDetector",
    "TagCompletionDetector",
    "build_completion_detector",
    "AgentCallError",
    "AgentTimeoutError",
    "CollaborationError",
    "MalformedResponseError",
    "ProviderError",
    "SessionConflict",
    "TransportError",
    "ValidationError",
    "CollaborationEvent",
    "normalize_collaboration_event",
    "TurnOrchestrator",
    "CollaborationPolicy",
    "SessionRegistry",
    "HistoryTurn",
    "SessionState",
    "SessionStatus",
]
