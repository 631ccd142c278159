"""Completion-tag detection on Agent A output.

The tag is a text convention (``STATUS: [COMPLETE]``), not a structured
protocol: anything missing or malformed reads as WORKING.
"""

from __future__ import annotations

import re
from typing import Optional, Pattern, Protocol

from .session_state import SessionStatus

STATUS_TAG_PATTERN = re.compile(
    r"STATUS:\s*\[\s*(WORKING|COMPLETE|NEED_FEEDBACK)\s*\]",
    re.IGNORECASE,
)


class CompletionDetector(Protocol):
    """Maps raw agent text to a session status."""

    def detect(self, text: Optional[str]) -> SessionStatus:
        ...


class TagCompletionDetector:
    """First status tag anywhere in the text wins."""

    def __init__(self, pattern: Pattern[str] = STATUS_TAG_PATTERN):
        self.pattern = pattern

    def detect(self, text: Optional[str]) -> SessionStatus:
        match = self.pattern.search(text or "")
        if not match:
            return SessionStatus.WORKING
        try:
            return SessionStatus(match.group(1).upper())
        except ValueError:
            return SessionStatus.WORKING


class FinalLineCompletionDetector(TagCompletionDetector):
    """Stricter variant: only a tag on the last non-empty line counts."""

    def detect(self, text: Optional[str]) -> SessionStatus:
        lines = [line for line in (text or "").splitlines() if line.strip()]
        if not lines:
            return SessionStatus.WORKING
        return super().detect(lines[-1])


def build_completion_detector(name: str = "tag") -> CompletionDetector:
    """Resolve a configured detector name."""
    if name == "final_line":
        return FinalLineCompletionDetector()
    if name == "tag":
        return TagCompletionDetector()
    raise ValueError(f"unknown completion detector: {name}")
