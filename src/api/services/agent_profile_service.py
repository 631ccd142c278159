"""
Agent profile configuration service

Handles loading the two agent profiles (priming text, provider,
default and fallback models)
"""
import logging
from pathlib import Path
from typing import Optional

import aiofiles
import yaml

from ..models.agent_profile import AgentsConfig
from ..paths import default_agents_config_path, resolve_repo_path

logger = logging.getLogger(__name__)


STATUS_INSTRUCTION = (
    "At the very end of every response, report your progress on its own line "
    "using exactly one of: STATUS: [WORKING], STATUS: [COMPLETE] or "
    "STATUS: [NEED_FEEDBACK]. Use STATUS: [COMPLETE] only when the task is fully done."
)

PROGRAMMER_PROMPT = (
    "You are an expert programmer collaborating with a supervisor. "
    "Work on the task you are given, write complete working code, and address "
    "every point of the supervisor's feedback in your next iteration. "
    + STATUS_INSTRUCTION
)

SUPERVISOR_PROMPT = (
    "You are a senior engineer supervising a programmer. Review each response "
    "against the original task, point out bugs, missing requirements and "
    "unclear parts, and give concrete, actionable feedback. Keep reviews short "
    "and say plainly when the work satisfies the task."
)


class AgentProfileService:
    """Agent profile configuration service"""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize agent profile service

        Args:
            config_path: Configuration file path, defaults to config/local/agents_config.yaml
        """
        if config_path is None:
            self.config_path = default_agents_config_path()
        else:
            self.config_path = resolve_repo_path(Path(config_path))
        self._ensure_config_exists()

    def _ensure_config_exists(self):
        """Ensure configuration file exists, create default if not"""
        if self.config_path.exists():
            return
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self._get_default_config(), f, allow_unicode=True, sort_keys=False)
        logger.info(f"Created default agents config at {self.config_path}")

    def _get_default_config(self) -> dict:
        """Get default configuration"""
        return {
            "agents": [
                {
                    "agent_id": "A",
                    "name": "Claude",
                    "role": "producer",
                    "provider_id": "anthropic",
                    "system_prompt": PROGRAMMER_PROMPT,
                    "default_model": "claude-sonnet-4-5-20250929",
                    "fallback_models": [],
                    "temperature": 0.7,
                },
                {
                    "agent_id": "B",
                    "name": "ChatGPT",
                    "role": "consumer",
                    "provider_id": "openai",
                    "system_prompt": SUPERVISOR_PROMPT,
                    "default_model": "gpt-4o",
                    "fallback_models": [],
                    "temperature": 0.7,
                },
            ]
        }

    async def load_config(self) -> AgentsConfig:
        """Load configuration file"""
        async with aiofiles.open(self.config_path, "r", encoding="utf-8") as f:
            content = await f.read()
        data = yaml.safe_load(content) or {}
        return AgentsConfig(**data)

