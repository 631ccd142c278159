"""Budget policy helpers for collaboration sessions."""

from typing import Any, Optional

from .session_state import SessionState, SessionStatus


class CollaborationPolicy:
    """Pure policy helpers so the orchestrator can stay focused on control flow."""

    @staticmethod
    def resolve_iteration_limit(
        raw_limit: Any,
        *,
        fallback: int = 8,
        hard_cap: int = 20,
    ) -> int:
        """Normalize a requested max_iterations value."""
        if raw_limit is None or isinstance(raw_limit, bool):
            return fallback
        try:
            value = int(raw_limit)
        except (TypeError, ValueError):
            return fallback
        if value <= 0:
            return fallback
        return min(value, hard_cap)

    @staticmethod
    def stop_reason(state: SessionState, now: float) -> Optional[str]:
        """Return why no further round may start, or None to continue.

        Checked only at round boundaries; an in-flight call may overrun the
        time budget by up to one call's duration.
        """
        if state.status == SessionStatus.COMPLETE:
            return "complete"
        if state.iteration >= state.max_iterations:
            return "max_iterations"
        if state.elapsed_seconds(now) > state.time_limit_seconds:
            return "time_limit"
        return None
