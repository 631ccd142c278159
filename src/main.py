"""Run one Agent A / Agent B collaboration in the terminal.

Usage:
    python -m src.main "Write a CLI that counts words" --step
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

load_dotenv()

from src.api.config import settings
from src.api.logging_config import setup_logging
from src.api.services.agent_client import build_agent_clients
from src.api.services.agent_profile_service import AgentProfileService
from src.api.services.collaboration import (
    CollaborationError,
    CollaborationRequest,
    TurnOrchestrator,
    build_completion_detector,
)


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a two-agent collaboration session.")
    parser.add_argument("task", help="Task description shared by both agents")
    parser.add_argument("--model-a", default=None, help="Model id for Agent A (default: profile default)")
    parser.add_argument("--model-b", default=None, help="Model id for Agent B (default: profile default)")
    parser.add_argument("--step", action="store_true", help="Pause after every round (Enter continues, q stops)")
    parser.add_argument("--max-iterations", type=int, default=None, help="Round budget override")
    parser.add_argument("--export", type=Path, default=None, help="Write the session export JSON to this path")
    return parser.parse_args(argv)


def format_event(event: Dict[str, Any]) -> str:
    """Render one collaboration event as terminal text."""
    event_type = event.get("type")
    if event_type == "session_started":
        return (
            f"Session {event.get('session_id')} started "
            f"({event.get('model_a')} / {event.get('model_b')}, max {event.get('max_iterations')} rounds)"
        )
    if event_type == "round_output":
        header = f"--- Round {event.get('round')} | Agent {event.get('agent')} ({event.get('model')})"
        if event.get("tokens") is not None:
            header += f" | {event['tokens']} tokens"
        return f"{header} ---\n{event.get('content', '')}"
    if event_type == "status_update":
        return (
            f"[status] iteration {event.get('iteration')}/{event.get('max_iterations')} "
            f"status={event.get('status')} time_left={event.get('time_left_seconds')}s"
        )
    if event_type == "waiting_for_continue":
        return "[paused] press Enter to continue, q to stop"
    if event_type == "error":
        return f"[error] {event.get('message')}"
    if event_type == "session_ended":
        return (
            f"Session ended: reason={event.get('reason')} iterations={event.get('iteration')} "
            f"status={event.get('status')} tokens={event.get('total_tokens')}"
        )
    return json.dumps(event, ensure_ascii=False)


async def run_cli(args: argparse.Namespace) -> int:
    config = await AgentProfileService(config_path=settings.agents_config_path).load_config()
    clients = build_agent_clients(settings, config)

    orchestrator = TurnOrchestrator(
        agent_a=clients["A"],
        agent_b=clients["B"],
        completion_detector=build_completion_detector(settings.completion_detector),
        max_iterations=settings.collaboration_max_iterations,
        max_iterations_cap=settings.collaboration_max_iterations_cap,
        time_limit_seconds=settings.collaboration_time_limit_seconds,
    )
    request = CollaborationRequest(
        task=args.task,
        model_a=args.model_a or clients["A"].profile.default_model,
        model_b=args.model_b or clients["B"].profile.default_model,
        auto_run=not args.step,
        max_iterations=args.max_iterations,
    )

    try:
        orchestrator.start(request)
    except CollaborationError as e:
        print(f"Cannot start: {e}", file=sys.stderr)
        return 2

    failed = False
    async for event in orchestrator.stream():
        print(format_event(event))
        if event.get("type") == "error":
            failed = True
        if event.get("type") == "waiting_for_continue":
            answer = await asyncio.to_thread(input, "> ")
            if answer.strip().lower() == "q":
                orchestrator.stop()
            else:
                orchestrator.continue_round()

    if args.export is not None:
        args.export.parent.mkdir(parents=True, exist_ok=True)
        args.export.write_text(
            json.dumps(orchestrator.session.to_export(), ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        print(f"Session exported to {args.export}")

    return 1 if failed else 0


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    setup_logging(settings.log_level, settings.logs_dir)
    try:
        return asyncio.run(run_cli(args))
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
