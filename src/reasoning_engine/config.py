"""Configuration and environment loading for the reasoning engine."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Anthropic
    anthropic_api_key: str | None = None

    # Claude model config
    claude_model: str = "claude-sonnet-4-20250514"
    claude_max_tokens: int = 2048

    # Which step generator the API wires into the orchestrator
    step_generator: Literal["claude", "continuation"] = "claude"

    # Reasoning session defaults
    reasoning_max_steps: int = 20
    reasoning_step_timeout_seconds: float = 30.0

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
