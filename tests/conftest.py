"""Shared pytest fixtures for all tests."""

import asyncio
import shutil
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pytest

from src.api.services.collaboration import AgentReply


def _create_workspace_temp_dir(kind: str) -> Path:
    """Create a temporary directory under repository-local .pytest_work."""
    repo_root = Path(__file__).resolve().parents[1]
    root_dir = repo_root / ".pytest_work" / kind
    root_dir.mkdir(parents=True, exist_ok=True)
    temp_dir = root_dir / f"{kind}_{uuid.uuid4().hex[:8]}"
    temp_dir.mkdir(parents=True, exist_ok=True)
    return temp_dir


@pytest.fixture
def tmp_path():
    """Workspace-local replacement for pytest's tmp_path fixture."""
    temp_dir = _create_workspace_temp_dir("tmp_path")
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def temp_config_dir():
    """Create temporary directory for config files."""
    temp_dir = _create_workspace_temp_dir("config")
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


class ScriptedAgent:
    """Fake agent client answering from a script.

    Script items may be a string (reply text, ``tokens`` tokens), an
    ``AgentReply``, an exception instance (raised), or an async callable
    (awaited; its return value is used as the item).
    """

    def __init__(self, script: Sequence[Any] = (), default: Any = "working on it", tokens: Optional[int] = 10):
        self.script: List[Any] = list(script)
        self.default = default
        self.tokens = tokens
        self.calls: List[Dict[str, Any]] = []
        self.models: List[str] = ["model-1", "model-2"]

    async def send_message(self, prompt, history, model_id, *, role=None, session_id=""):
        self.calls.append({
            "prompt": prompt,
            "history": list(history),
            "model_id": model_id,
            "role": role,
            "session_id": session_id,
        })
        item = self.script.pop(0) if self.script else self.default
        if callable(item):
            item = await item()
        if isinstance(item, BaseException):
            raise item
        if isinstance(item, AgentReply):
            return item
        return AgentReply(content=item, tokens=self.tokens)

    async def list_available_models(self):
        return list(self.models)


class FakeClock:
    """Manually advanced wall clock."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


async def _wait_until(predicate, attempts: int = 200) -> None:
    """Yield to the event loop until ``predicate()`` holds."""
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


@pytest.fixture
def scripted_agent():
    """Factory for ScriptedAgent instances."""
    return ScriptedAgent


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def wait_until():
    """Poll helper for background collaboration tasks."""
    return _wait_until
