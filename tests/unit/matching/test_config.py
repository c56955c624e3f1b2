"""Tests for MatchingConfig."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError


class TestMatchingConfigDefaults:
    """Test default configuration values."""

    def test_matching_config_defaults(self):
        """MatchingConfig should load with documented defaults."""
        from jobmatch.matching.config import MatchingConfig

        config = MatchingConfig(_env_file=None)

        assert config.default_limit == 50
        assert config.max_suggestions == 5
        assert config.free_match_limit == 3
        assert config.max_workers == 4
        assert config.batch_timeout_seconds is None
        assert config.profile_path == Path("profiles/candidate.yaml")
        assert config.jobs_path == Path("data/jobs.json")

    def test_matching_config_has_no_weights(self):
        """Scoring weights should not be configurable."""
        from jobmatch.matching.config import MatchingConfig

        assert not any("weight" in name for name in MatchingConfig.model_fields)


class TestMatchingConfigFromEnvironment:
    """Test environment overrides."""

    def test_matching_config_reads_prefixed_env(self, monkeypatch):
        """MATCHING_ prefixed variables should override defaults."""
        monkeypatch.setenv("MATCHING_DEFAULT_LIMIT", "10")
        monkeypatch.setenv("MATCHING_BATCH_TIMEOUT_SECONDS", "2.5")

        from jobmatch.matching.config import MatchingConfig

        config = MatchingConfig(_env_file=None)

        assert config.default_limit == 10
        assert config.batch_timeout_seconds == 2.5


class TestMatchingConfigValidation:
    """Test value validation."""

    @pytest.mark.parametrize(
        "field,value",
        [
            ("default_limit", 0),
            ("max_suggestions", 6),
            ("max_workers", 0),
            ("free_match_limit", -1),
            ("batch_timeout_seconds", 0),
        ],
    )
    def test_matching_config_rejects_invalid_values(self, field, value):
        """Out-of-range values should raise ValidationError."""
        from jobmatch.matching.config import MatchingConfig

        with pytest.raises(ValidationError):
            MatchingConfig(_env_file=None, **{field: value})


class TestMatchingConfigSingleton:
    """Test singleton helpers."""

    def test_get_matching_config_returns_singleton(self):
        """get_matching_config should return the same instance until reset."""
        from jobmatch.matching.config import get_matching_config, reset_matching_config

        first = get_matching_config()

        assert get_matching_config() is first

        reset_matching_config()

        assert get_matching_config() is not first


class TestSuggestionCap:
    """Test that the suggestion cap cannot be raised through configuration."""

    def test_matching_config_rejects_more_than_five_suggestions_from_env(self, monkeypatch):
        """MATCHING_MAX_SUGGESTIONS above 5 should be rejected."""
        monkeypatch.setenv("MATCHING_MAX_SUGGESTIONS", "10")

        from jobmatch.matching.config import MatchingConfig

        with pytest.raises(ValidationError, match="max_suggestions"):
            MatchingConfig(_env_file=None)

    def test_score_job_returns_at_most_five_suggestions(self, make_job):
        """A bare profile against a demanding job still gets at most five."""
        from jobmatch.matching.config import MatchingConfig
        from jobmatch.matching.models import CandidateProfile
        from jobmatch.matching.service import MatchingService

        config = MatchingConfig(_env_file=None, max_suggestions=5, max_workers=1)
        job = make_job(
            experience_level="senior",
            location="Tokyo",
            is_remote=False,
            required_skills=["Python", "Go", "Rust", "Kafka", "Kubernetes"],
        )

        result = MatchingService(config=config).score_job(CandidateProfile(id="bare"), job)

        assert 0 < len(result.suggestions) <= 5
