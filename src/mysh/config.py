"""Configuration management for mysh."""

from __future__ import annotations

from pathlib import Path

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

DEFAULT_HISTORY_FILE = "mysh.history"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="MYSH_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Shell Configuration
    history_file: Path = Field(default=Path(DEFAULT_HISTORY_FILE), description="History log, relative to the cwd")
    prompt: str = Field(default="# ", description="Prompt printed before each read")
    show_cwd: bool = Field(default=False, description="Prefix the prompt with the working directory")

    # Process Configuration
    repeat_settle_seconds: float = Field(default=1.0, description="Pause after a repeat batch")

    # Logging Configuration
    log_level: str = Field(default="WARNING", description="Log level")

    @field_validator("repeat_settle_seconds")
    @classmethod
    def _non_negative_delay(cls, value: float) -> float:
        if value < 0:
            raise ValueError("repeat_settle_seconds must be >= 0")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper() or "WARNING"
        try:
            logger.level(level)
        except ValueError as exc:
            raise ValueError(f"unknown log level {value!r}") from exc
        return level


def load_settings(**overrides: object) -> Settings:
    """Load settings from the environment, applying non-empty CLI overrides."""

    updates = {key: value for key, value in overrides.items() if value is not None}
    # Init arguments win over the environment and go through the validators.
    settings = Settings(**updates)
    if not str(settings.history_file).strip() or settings.history_file == Path("."):
        raise ConfigurationError("history_file must name a file")
    return settings
