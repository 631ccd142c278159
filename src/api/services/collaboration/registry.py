"""Process-local registry mapping one control connection to one session."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, Optional

from .base import CollaborationRequest, EventSink
from .errors import SessionConflict, ValidationError
from .events import ErrorEvent, normalize_collaboration_event
from .orchestrator import TurnOrchestrator
from .session_state import SessionState

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Owns at most one active TurnOrchestrator per connection id.

    Sessions on different connections share no state. The most recent session
    of a connection stays available for export after it stops, until the
    connection is released.
    """

    def __init__(self, orchestrator_factory: Callable[[], TurnOrchestrator]):
        self.orchestrator_factory = orchestrator_factory
        self._active: Dict[str, TurnOrchestrator] = {}
        self._tasks: Dict[str, asyncio.Task] = {}
        self._last_sessions: Dict[str, SessionState] = {}

    async def start(
        self,
        connection_id: str,
        request: CollaborationRequest,
        sink: EventSink,
    ) -> TurnOrchestrator:
        """Create and launch an orchestrator for the connection.

        Raises:
            SessionConflict: a session is already active on this connection
            ValidationError: task or model ids are missing
        """
        current = self._active.get(connection_id)
        if current is not None and current.is_active:
            message = "A session is already running. Please stop it first."
            await self._notify(sink, ErrorEvent(message=message, kind="session_conflict"))
            raise SessionConflict(message)

        orchestrator = self.orchestrator_factory()
        try:
            session = orchestrator.start(request)
        except ValidationError as exc:
            await self._notify(sink, ErrorEvent(message=f"Invalid start request: {exc}", kind="validation"))
            raise

        self._active[connection_id] = orchestrator
        self._last_sessions[connection_id] = session
        self._tasks[connection_id] = asyncio.create_task(
            self._pump(connection_id, orchestrator, sink),
            name=f"collaboration-{session.session_id}",
        )
        return orchestrator

    def stop(self, connection_id: str, reason: str = "stopped") -> bool:
        """Stop the connection's active session; no-op when none is active."""
        orchestrator = self._active.get(connection_id)
        if orchestrator is None:
            return False
        return orchestrator.stop(reason)

    def continue_round(self, connection_id: str) -> bool:
        orchestrator = self._active.get(connection_id)
        if orchestrator is None:
            return False
        return orchestrator.continue_round()

    def get_orchestrator(self, connection_id: str) -> Optional[TurnOrchestrator]:
        return self._active.get(connection_id)

    def get_session(self, connection_id: str) -> Optional[SessionState]:
        """Active session, or the most recently finished one."""
        return self._last_sessions.get(connection_id)

    def export(self, connection_id: str) -> Optional[Dict[str, Any]]:
        session = self.get_session(connection_id)
        if session is None:
            return None
        return session.to_export()

    async def wait(self, connection_id: str) -> None:
        """Wait until the connection's current loop (if any) has finished."""
        task = self._tasks.get(connection_id)
        if task is not None:
            await asyncio.shield(task)

    async def release(self, connection_id: str) -> None:
        """Connection closed: implicit stop, then forget the connection."""
        self.stop(connection_id, reason="disconnected")
        await self.wait(connection_id)
        self._last_sessions.pop(connection_id, None)

    async def shutdown(self) -> None:
        for connection_id in list(self._active):
            self.stop(connection_id, reason="shutdown")
        tasks = list(self._tasks.values())
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    @property
    def active_count(self) -> int:
        return sum(1 for orchestrator in self._active.values() if orchestrator.is_active)

    async def _pump(self, connection_id: str, orchestrator: TurnOrchestrator, sink: EventSink) -> None:
        try:
            await orchestrator.run(sink)
        except Exception:
            logger.error("Collaboration loop crashed for connection %s", connection_id, exc_info=True)
        finally:
            if self._active.get(connection_id) is orchestrator:
                del self._active[connection_id]
            task = self._tasks.get(connection_id)
            if task is asyncio.current_task():
                del self._tasks[connection_id]

    @staticmethod
    async def _notify(sink: EventSink, event: ErrorEvent) -> None:
        try:
            await sink(normalize_collaboration_event(event))
        except Exception as e:
            logger.warning("Event sink failed for error event: %s", e)
