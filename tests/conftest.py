"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from datetime import date, datetime

import pytest

AS_OF = date(2024, 1, 1)


@pytest.fixture(autouse=True)
def _reset_singletons():
    """Reset settings and logging singletons between tests."""
    from jobmatch.config.settings import reset_settings
    from jobmatch.matching.config import reset_matching_config
    from jobmatch.utils.logging import reset_logging

    yield
    reset_settings()
    reset_matching_config()
    reset_logging()


@pytest.fixture
def as_of() -> date:
    """Fixed reference date for experience calculations."""
    return AS_OF


@pytest.fixture
def matching_config():
    """Matching config isolated from any local .env file."""
    from jobmatch.matching.config import MatchingConfig

    return MatchingConfig(_env_file=None, max_workers=1)


@pytest.fixture
def frontend_candidate():
    """React/Node.js candidate with three years of experience."""
    from jobmatch.matching.models import CandidateProfile

    return CandidateProfile(
        id="cand-1",
        headline="Frontend Developer",
        skills=[{"name": "React"}, {"name": "Node.js"}],
        experiences=[
            {
                "position": "Frontend Developer",
                "company_name": "Acme",
                "start_date": date(2021, 1, 1),
                "is_current": True,
            }
        ],
    )


@pytest.fixture
def frontend_job():
    """Remote mid-level frontend job requiring React and TypeScript."""
    from jobmatch.matching.models import JobPosting

    return JobPosting(
        id="job-1",
        title="Frontend Engineer",
        experience_level="mid",
        is_remote=True,
        required_skills=[
            {"name": "React", "is_required": True},
            {"name": "TypeScript", "is_required": True},
        ],
        published_at=datetime(2023, 12, 1, 9, 0),
    )


@pytest.fixture
def make_job():
    """Factory for job postings with sensible defaults."""
    from jobmatch.matching.models import JobPosting

    def _make_job(job_id: str = "job", **overrides):
        data = {
            "id": job_id,
            "title": "Software Engineer",
            "experience_level": "mid",
            "is_remote": True,
            "required_skills": ["Python"],
        }
        data.update(overrides)
        return JobPosting(**data)

    return _make_job


@pytest.fixture
def make_candidate():
    """Factory for candidate profiles with sensible defaults."""
    from jobmatch.matching.models import CandidateProfile

    def _make_candidate(candidate_id: str = "cand", **overrides):
        data = {
            "id": candidate_id,
            "headline": "Software Engineer",
            "skills": ["Python"],
            "experiences": [
                {"position": "Software Engineer", "start_date": date(2020, 1, 1)}
            ],
        }
        data.update(overrides)
        return CandidateProfile(**data)

    return _make_candidate
