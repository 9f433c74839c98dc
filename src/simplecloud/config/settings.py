"""
Engine settings using Pydantic.

Provides environment-based configuration loading with SIMPLECLOUD_ prefix.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Engine settings."""

    # State
    state_backend: Literal["file", "memory", "s3"] = "file"
    state_path: str = "simplecloud-state.json"
    state_bucket: str | None = None
    state_key: str = "simplecloud/state.json"

    # Orchestration policy
    rollback: bool = False
    halt_on_destroy_error: bool = True
    skip_unchanged_updates: bool = False

    # AWS provider plugin
    aws_region: str = "us-east-1"
    poll_delay_seconds: int = 5
    poll_max_attempts: int = 60

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "SIMPLECLOUD_"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
