"""Configuration management using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from pathlib import Path
from typing import List, Literal, Optional
import os


def _default_cors_origins() -> List[str]:
    """Build sane CORS defaults without hardcoded project port literals."""
    frontend_port = os.getenv("FRONTEND_PORT", "").strip()
    origins = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    if frontend_port:
        origins = [
            f"http://localhost:{frontend_port}",
            f"http://127.0.0.1:{frontend_port}",
            *origins,
        ]
    return origins


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # CORS Configuration
    cors_origins: List[str] = Field(default_factory=_default_cors_origins)

    # Logging
    log_level: str = "INFO"
    logs_dir: Path = Path("logs")

    # Collaboration budgets
    collaboration_max_iterations: int = Field(default=8, ge=1)
    collaboration_max_iterations_cap: int = Field(default=20, ge=1)
    collaboration_time_limit_seconds: float = Field(default=180.0, gt=0)
    completion_detector: Literal["tag", "final_line"] = "tag"

    # Agent calls
    agent_request_timeout_seconds: float = Field(default=30.0, gt=0)
    agent_max_tokens: int = Field(default=2048, ge=1)

    # Provider credentials
    anthropic_api_key: Optional[str] = None
    anthropic_base_url: Optional[str] = None
    openai_api_key: Optional[str] = None
    openai_base_url: Optional[str] = None

    # Agent profiles (priming text, provider, fallback models)
    agents_config_path: Optional[Path] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    def api_key_for(self, provider_id: str) -> Optional[str]:
        """Return the configured API key for a provider id, if any."""
        return {
            "anthropic": self.anthropic_api_key,
            "openai": self.openai_api_key,
        }.get(provider_id)

    def base_url_for(self, provider_id: str) -> Optional[str]:
        """Return the configured base URL override for a provider id, if any."""
        return {
            "anthropic": self.anthropic_base_url,
            "openai": self.openai_base_url,
        }.get(provider_id)


# Global settings instance
settings = Settings()
