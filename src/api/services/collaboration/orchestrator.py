"""Turn orchestrator: alternating Agent A / Agent B rounds for one session."""

import asyncio
import logging
import time
from typing import AsyncIterator, Callable, Dict, List, Optional

from .base import (
    AgentClient,
    AgentReply,
    CollaborationCancelToken,
    CollaborationRequest,
    EventSink,
    OrchestratorState,
)
from .completion import CompletionDetector, TagCompletionDetector
from .errors import AgentCallError, MalformedResponseError, ProviderError, SessionConflict, ValidationError
from .events import (
    CollaborationEvent,
    ErrorEvent,
    RoundOutputEvent,
    SessionEndedEvent,
    SessionStartedEvent,
    StatusUpdateEvent,
    WaitingForContinueEvent,
    normalize_collaboration_event,
)
from .log_utils import truncate_log_text
from .policy import CollaborationPolicy
from .session_state import AGENT_ROLES, AgentId, HistoryTurn, SessionState, SessionStatus

logger = logging.getLogger(__name__)


class TurnOrchestrator:
    """Drives one SessionState through Agent A -> Agent B rounds.

    ``start()`` validates and creates the session, ``stream()`` runs the loop
    and yields events until the session stops. ``stop()`` and
    ``continue_round()`` are idempotent signals that may arrive while a call is
    in flight or while the loop awaits a manual continue.
    """

    def __init__(
        self,
        *,
        agent_a: AgentClient,
        agent_b: AgentClient,
        completion_detector: Optional[CompletionDetector] = None,
        max_iterations: int = 8,
        max_iterations_cap: int = 20,
        time_limit_seconds: float = 180.0,
        clock: Callable[[], float] = time.time,
    ):
        self.agents: Dict[str, AgentClient] = {"A": agent_a, "B": agent_b}
        self.completion_detector = completion_detector or TagCompletionDetector()
        self.max_iterations = max_iterations
        self.max_iterations_cap = max_iterations_cap
        self.time_limit_seconds = time_limit_seconds
        self.clock = clock

        self.state = OrchestratorState.IDLE
        self.session: Optional[SessionState] = None
        self.cancel_token = CollaborationCancelToken()
        self._resume = asyncio.Event()
        self._streamed = False

    @property
    def is_active(self) -> bool:
        return self.state in (OrchestratorState.RUNNING, OrchestratorState.AWAITING_CONTINUE)

    # ------------------------------------------------------------------
    # Control API
    # ------------------------------------------------------------------

    def start(self, request: CollaborationRequest) -> SessionState:
        """Validate the request and move IDLE -> RUNNING."""
        if self.state != OrchestratorState.IDLE:
            raise SessionConflict("orchestrator already started")

        task = (request.task or "").strip()
        model_a = (request.model_a or "").strip()
        model_b = (request.model_b or "").strip()
        missing = [
            name
            for name, value in (("task", task), ("model_a", model_a), ("model_b", model_b))
            if not value
        ]
        if missing:
            raise ValidationError(f"missing required fields: {', '.join(missing)}")

        max_iterations = CollaborationPolicy.resolve_iteration_limit(
            request.max_iterations,
            fallback=self.max_iterations,
            hard_cap=self.max_iterations_cap,
        )
        self.session = SessionState(
            task=task,
            model_a=model_a,
            model_b=model_b,
            max_iterations=max_iterations,
            time_limit_seconds=self.time_limit_seconds,
            auto_run=bool(request.auto_run),
            role_a=(request.role_a or "").strip() or None,
            role_b=(request.role_b or "").strip() or None,
        )
        self.session.activate(self.clock())
        self.state = OrchestratorState.RUNNING
        logger.info(
            "Collaboration %s started: models=%s/%s max_iterations=%s auto_run=%s",
            self.session.session_id,
            model_a,
            model_b,
            max_iterations,
            self.session.auto_run,
        )
        return self.session

    def stop(self, reason: str = "stopped") -> bool:
        """Request a cooperative stop. Returns False when it has no effect."""
        if self.state in (OrchestratorState.IDLE, OrchestratorState.STOPPED):
            return False
        if self.cancel_token.is_cancelled:
            return False
        self.cancel_token.cancel(reason)
        self._resume.set()
        logger.info("Collaboration %s stop requested (%s)", self._session_id, reason)
        return True

    def continue_round(self) -> bool:
        """Resume after a manual-step pause. No-op unless awaiting continue."""
        if self.state != OrchestratorState.AWAITING_CONTINUE:
            return False
        if self._resume.is_set():
            return False
        self._resume.set()
        return True

    async def run(self, sink: Optional[EventSink] = None) -> SessionState:
        """Drive the loop to completion, publishing each event to ``sink``."""
        async for event in self.stream():
            if sink is None:
                continue
            try:
                await sink(event)
            except Exception as e:
                logger.warning("Event sink failed for %s event: %s", event.get("type"), e)
        return self.session

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    async def stream(self) -> AsyncIterator[CollaborationEvent]:
        """Run rounds until a stop condition fires, yielding events."""
        if self.session is None or self.state == OrchestratorState.IDLE:
            raise RuntimeError("start() must be called before stream()")
        if self._streamed:
            raise RuntimeError("stream() can only be consumed once")
        self._streamed = True
        session = self.session

        try:
            yield self._event(SessionStartedEvent(
                session_id=session.session_id,
                task=session.task,
                model_a=session.model_a,
                model_b=session.model_b,
                auto_run=session.auto_run,
                max_iterations=session.max_iterations,
            ))

            reason = None
            while reason is None:
                reason = self._boundary_stop_reason()
                if reason is not None:
                    break

                # Agent A works on the task with the shared history as context.
                try:
                    reply_a = await self._call_agent("A", session.task, self._history_snapshot())
                except AgentCallError as exc:
                    yield self._error_event(exc)
                    reason = "error"
                    break
                yield self._record_reply("A", reply_a)

                session.status = self.completion_detector.detect(reply_a.content)
                if session.status == SessionStatus.COMPLETE:
                    yield self._status_event()
                    reason = "complete"
                    break
                if self.cancel_token.is_cancelled:
                    reason = self.cancel_token.reason
                    break

                # Agent B reviews A's latest output; history excludes that output.
                try:
                    reply_b = await self._call_agent("B", reply_a.content, self._history_snapshot()[:-1])
                except AgentCallError as exc:
                    yield self._error_event(exc)
                    reason = "error"
                    break
                yield self._record_reply("B", reply_b)

                session.complete_round()
                yield self._status_event()

                if session.auto_run or self._boundary_stop_reason() is not None:
                    continue

                self._resume.clear()
                self.state = OrchestratorState.AWAITING_CONTINUE
                yield self._event(WaitingForContinueEvent(iteration=session.iteration))
                await self._resume.wait()
                if self.cancel_token.is_cancelled:
                    reason = self.cancel_token.reason
                    break
                self.state = OrchestratorState.RUNNING

            ended = self._enter_stopped(reason or "stopped")
            if ended is not None:
                yield ended
        finally:
            # Consumer closed the stream or the task was cancelled mid-loop.
            if self.state != OrchestratorState.STOPPED:
                self._enter_stopped(self.cancel_token.reason if self.cancel_token.is_cancelled else "aborted")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @property
    def _session_id(self) -> str:
        return self.session.session_id if self.session else "-"

    @staticmethod
    def _event(event) -> CollaborationEvent:
        return normalize_collaboration_event(event)

    def _history_snapshot(self) -> List[Dict[str, str]]:
        return [turn.to_message() for turn in self.session.history]

    def _boundary_stop_reason(self) -> Optional[str]:
        if self.cancel_token.is_cancelled:
            return self.cancel_token.reason
        return CollaborationPolicy.stop_reason(self.session, self.clock())

    async def _call_agent(self, agent_id: AgentId, prompt: str, history: List[Dict[str, str]]) -> AgentReply:
        session = self.session
        model_id = session.model_a if agent_id == "A" else session.model_b
        role = session.role_a if agent_id == "A" else session.role_b
        started = self.clock()
        try:
            reply = await self.agents[agent_id].send_message(
                prompt,
                history,
                model_id,
                role=role,
                session_id=session.session_id,
            )
        except AgentCallError as exc:
            if exc.agent_id is None:
                exc.agent_id = agent_id
            logger.warning(
                "Collaboration %s: agent %s (%s) failed: %s",
                session.session_id, agent_id, model_id, exc,
            )
            raise
        except Exception as exc:
            logger.error(
                "Collaboration %s: unexpected failure from agent %s",
                session.session_id, agent_id,
                exc_info=True,
            )
            raise ProviderError(str(exc) or type(exc).__name__, agent_id=agent_id) from exc

        if reply is None or not isinstance(reply.content, str):
            raise MalformedResponseError("agent returned no text content", agent_id=agent_id)

        logger.info(
            "Collaboration %s: agent %s (%s) replied in %.1fs, tokens=%s: %s",
            session.session_id,
            agent_id,
            model_id,
            self.clock() - started,
            reply.tokens,
            truncate_log_text(reply.content, 200),
        )
        return reply

    def _record_reply(self, agent_id: AgentId, reply: AgentReply) -> CollaborationEvent:
        session = self.session
        model_id = session.model_a if agent_id == "A" else session.model_b
        tokens = reply.tokens
        if isinstance(tokens, bool) or not isinstance(tokens, int) or tokens < 0:
            tokens = None
        session.append_turn(HistoryTurn(
            role=AGENT_ROLES[agent_id],
            content=reply.content,
            tokens=tokens,
            model=model_id,
            timestamp=self.clock(),
        ))
        return self._event(RoundOutputEvent(
            agent=agent_id,
            content=reply.content,
            tokens=tokens,
            elapsed_seconds=int(session.elapsed_seconds(self.clock())),
            round=session.iteration + 1,
            model=model_id,
        ))

    def _status_event(self) -> CollaborationEvent:
        session = self.session
        return self._event(StatusUpdateEvent(
            iteration=session.iteration,
            max_iterations=session.max_iterations,
            time_left_seconds=session.time_left_seconds(self.clock()),
            status=session.status.value,
        ))

    def _error_event(self, exc: AgentCallError) -> CollaborationEvent:
        agent_id = exc.agent_id if exc.agent_id in ("A", "B") else None
        label = f"Agent {agent_id}" if agent_id else "Agent"
        return self._event(ErrorEvent(
            agent=agent_id,
            message=f"{label} error ({exc.kind}): {exc}",
            kind=exc.kind,
        ))

    def _enter_stopped(self, reason: str) -> Optional[CollaborationEvent]:
        """Transition to STOPPED once; returns the termination event."""
        if self.state == OrchestratorState.STOPPED:
            return None
        self.state = OrchestratorState.STOPPED
        session = self.session
        session.deactivate(self.clock(), reason)
        logger.info(
            "Collaboration %s ended: reason=%s iteration=%s/%s status=%s tokens=%s",
            session.session_id,
            reason,
            session.iteration,
            session.max_iterations,
            session.status.value,
            session.total_tokens,
        )
        return self._event(SessionEndedEvent(
            iteration=session.iteration,
            status=session.status.value,
            total_tokens=session.total_tokens,
            reason=reason,
        ))
