"""
Path helpers for repository layout.

Layout:
- config/local/: instance-specific writable configs (gitignored)
- logs/: server and agent interaction logs
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path


@lru_cache(maxsize=1)
def repo_root() -> Path:
    # This file lives at src/api/paths.py -> parents: api/ -> src/ -> repo root
    return Path(__file__).resolve().parents[2]


def config_local_dir() -> Path:
    return repo_root() / "config" / "local"


def default_agents_config_path() -> Path:
    return config_local_dir() / "agents_config.yaml"


def resolve_repo_path(path: Path) -> Path:
    """Anchor relative paths at the repository root."""
    path = Path(path).expanduser()
    if path.is_absolute():
        return path
    return repo_root() / path
