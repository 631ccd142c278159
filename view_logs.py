"""Agent interaction log viewer (logs/llm_interactions_YYYYMMDD.log)."""

import argparse
import json
from datetime import datetime
from pathlib import Path


def parse_log_file(log_path):
    """Parse the JSON-lines log; lines that do not parse are skipped."""
    entries = []
    with open(log_path, 'r', encoding='utf-8') as f:
        for line_no, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            try:
                entries.append(json.loads(line))
            except json.JSONDecodeError as e:
                print(f"Warning: line {line_no} is not valid JSON: {e}")
    return entries


def _default_log_file():
    today = datetime.now().strftime("%Y%m%d")
    return f"logs/llm_interactions_{today}.log"


def _preview(text, limit=150):
    text = text or ""
    return text[:limit] + '...' if len(text) > limit else text


def view_logs(log_file=None, session_id=None):
    """Print a summary of every interaction, optionally for one session."""
    log_path = Path(log_file or _default_log_file())

    if not log_path.exists():
        print(f"Log file not found: {log_path}\n")
        logs_dir = Path("logs")
        log_files = sorted(logs_dir.glob("llm_interactions_*.log"), reverse=True) if logs_dir.exists() else []
        if log_files:
            print("Available log files:")
            for f in log_files:
                print(f"  - {f.name}")
        return

    entries = parse_log_file(log_path)
    if session_id:
        entries = [e for e in entries if e.get('session_id') == session_id]

    print(f"\nLog file: {log_path}")
    print("=" * 100)

    if not entries:
        print("\nNo entries found\n")
        return

    for idx, entry in enumerate(entries, 1):
        print(f"\n#{idx} [{entry.get('type')}] {entry.get('timestamp')}")
        print(f"session={entry.get('session_id')} agent={entry.get('agent')}")

        if entry.get('type') == "ERROR":
            error = entry.get('error', {})
            print(f"{error.get('type')}: {error.get('message')} {error.get('context', '')}")
            continue

        request = entry.get('request', {})
        response = entry.get('response', {})
        print(
            f"model={entry.get('model')} messages={request.get('message_count')} "
            f"tokens={response.get('tokens')} elapsed={entry.get('elapsed_seconds')}s"
        )
        print("-" * 100)
        print(_preview(response.get('content')))

    print(f"\n{len(entries)} entries\n")


def view_interaction(log_file=None, num=1):
    """Print one interaction in full: every message sent and the reply."""
    log_path = Path(log_file or _default_log_file())
    if not log_path.exists():
        print(f"Log file not found: {log_path}")
        return

    entries = parse_log_file(log_path)
    if num < 1 or num > len(entries):
        print(f"Interaction #{num} does not exist ({len(entries)} entries)")
        return

    entry = entries[num - 1]
    print(f"\n{'=' * 100}")
    print(f"Interaction #{num}: session={entry.get('session_id')} agent={entry.get('agent')} model={entry.get('model')}")
    print(f"{'=' * 100}\n")

    for i, msg in enumerate(entry.get('request', {}).get('messages', []), 1):
        print(f"\n[{i}] {msg.get('type')}:")
        print(msg.get('content'))

    print(f"\n{'=' * 100}")
    print("Reply:")
    print("-" * 100)
    print(entry.get('response', {}).get('content'))
    print(f"\n{'=' * 100}\n")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="View agent interaction logs")
    parser.add_argument("-f", "--file", help="Log file path")
    parser.add_argument("-s", "--session", help="Only show entries for this session id")
    parser.add_argument("-i", "--interaction", type=int, help="Show one interaction in full")

    args = parser.parse_args()

    if args.interaction:
        view_interaction(args.file, args.interaction)
    else:
        view_logs(args.file, args.session)
