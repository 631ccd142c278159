"""Error taxonomy for collaboration sessions."""

from __future__ import annotations

from typing import Optional


class CollaborationError(Exception):
    """Base error for collaboration session operations."""


class ValidationError(CollaborationError):
    """Raised when a start request is missing its task or model ids."""


class SessionConflict(CollaborationError):
    """Raised when a start request arrives while a session is already active."""


class AgentCallError(CollaborationError):
    """Base error for a failed call to one of the two agents."""

    def __init__(self, message: str, *, agent_id: Optional[str] = None):
        super().__init__(message)
        self.agent_id = agent_id

    @property
    def kind(self) -> str:
        return "agent_error"


class TransportError(AgentCallError):
    """Network failure while reaching the provider."""

    @property
    def kind(self) -> str:
        return "transport"


class AgentTimeoutError(TransportError):
    """Provider did not answer within the request timeout."""

    @property
    def kind(self) -> str:
        return "timeout"


class ProviderError(AgentCallError):
    """Provider answered with a rejection (bad status, quota, unknown model)."""

    def __init__(
        self,
        message: str,
        *,
        agent_id: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, agent_id=agent_id)
        self.status_code = status_code

    @property
    def kind(self) -> str:
        return "provider"


class MalformedResponseError(ProviderError):
    """Provider answered successfully but the payload carried no usable text."""

    @property
    def kind(self) -> str:
        return "malformed_response"
