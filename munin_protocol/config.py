"""
Decoder configuration management
"""
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from munin_protocol.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Munin protocol decoder settings"""

    model_config = SettingsConfigDict(env_prefix="MUNIN_PROTOCOL_", env_file=".env")

    # Paths
    project_root: Path = Path(__file__).parent.parent
    log_dir: Path = project_root / "logs"

    # Logging
    log_level: str = "INFO"
    log_to_file: bool = False

    # Decoder limits
    max_response_bytes: int = 1024 * 1024

    # Interactive shell
    shell_prompt: str = "munin> "

    @field_validator("max_response_bytes")
    @classmethod
    def _positive_limit(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("max_response_bytes must be positive")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return level


def load_settings(**overrides: Any) -> Settings:
    """Build settings from the environment plus explicit overrides."""
    try:
        return Settings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid decoder settings",
            {"errors": [err["msg"] for err in e.errors()]},
        ) from e


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Default settings, read from the environment on first use."""
    return load_settings()
