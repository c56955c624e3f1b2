"""Configuration settings for jobmatch."""

from pathlib import Path
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from jobmatch.utils.logging import LOG_FORMAT

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Process-level settings for the CLI: where reports go and how to log.

    Matching behavior (limits, workers, deadlines) is configured separately
    in :class:`jobmatch.matching.config.MatchingConfig`.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Reports
    output_dir: Path = Field(
        default=Path("./artifacts"),
        description="Directory for JSON match reports written with --save",
    )
    json_indent: Annotated[int, Field(ge=0, le=8)] = Field(
        default=2,
        description="Indentation of JSON match reports (0 = compact)",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_format: str = Field(
        default=LOG_FORMAT,
        description="logging.Formatter format string for stderr output",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: object) -> str:
        """Accept level names in any case; store them uppercased."""
        level = str(v).strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {v}. Must be one of {', '.join(_LOG_LEVELS)}")
        return level


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the application settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the settings singleton (useful for testing)."""
    global _settings
    _settings = None
