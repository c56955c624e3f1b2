"""Configuration settings for the matching engine."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from jobmatch.matching.models import MAX_SUGGESTIONS


class MatchingConfig(BaseSettings):
    """Matching engine configuration settings.

    All settings have sensible defaults and can be overridden via
    environment variables with `MATCHING_` prefix or a .env file.

    Scoring weights are deliberately not part of this object: they are a
    fixed constant in :mod:`jobmatch.matching.aggregator`.
    """

    model_config = SettingsConfigDict(
        env_prefix="MATCHING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Input paths used by the CLI
    profile_path: Path = Field(
        default=Path("profiles/candidate.yaml"),
        description="Path to the candidate profile snapshot (YAML/JSON)",
    )
    jobs_path: Path = Field(
        default=Path("data/jobs.json"),
        description="Path to the job postings snapshot (YAML/JSON)",
    )

    # Result shaping
    default_limit: Annotated[int, Field(gt=0)] = Field(
        default=50,
        description="Number of results returned when the caller gives no limit",
    )
    max_suggestions: Annotated[int, Field(ge=1, le=MAX_SUGGESTIONS)] = Field(
        default=5,
        description="Maximum number of improvement suggestions per result",
    )
    free_match_limit: Annotated[int, Field(gt=0)] = Field(
        default=3,
        description="Number of matches visible to non-entitled callers in a page",
    )

    # Batch execution
    max_workers: Annotated[int, Field(gt=0)] = Field(
        default=4,
        description="Worker threads used to score a batch (1 = inline)",
    )
    batch_timeout_seconds: Annotated[float, Field(gt=0.0)] | None = Field(
        default=None,
        description="Default deadline for a scoring batch (None = no deadline)",
    )


# Singleton instance for easy import
_matching_config: MatchingConfig | None = None


def get_matching_config() -> MatchingConfig:
    """Get the matching configuration singleton."""
    global _matching_config
    if _matching_config is None:
        _matching_config = MatchingConfig()
    return _matching_config


def reset_matching_config() -> None:
    """Reset the matching configuration singleton (useful for testing)."""
    global _matching_config
    _matching_config = None
