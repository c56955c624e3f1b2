"""Data models for the matching engine.

Inputs (candidate and job snapshots) are pydantic models so the snapshots
handed over by the data-access layer are validated at the boundary. They
accept both snake_case names and the camelCase keys used by the API layer.

Outputs are frozen dataclasses: a ``MatchResult`` is immutable once returned.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MAX_SUGGESTIONS = 5

_SNAPSHOT_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,
    extra="ignore",
)


def _coerce_id(value: Any) -> str:
    if value is None:
        raise ValueError("id is required")
    text = str(value).strip()
    if not text:
        raise ValueError("id must not be empty")
    return text


class _Snapshot(BaseModel):
    """Base class for read-only input snapshots."""

    model_config = _SNAPSHOT_CONFIG

    def to_dict(self) -> dict:
        """Serialize to a dictionary (camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_dict(cls, data: dict):
        """Deserialize from a dictionary (camelCase or snake_case keys)."""
        return cls.model_validate(data)


class CandidateSkill(_Snapshot):
    """A skill listed on a candidate profile."""

    name: str = Field(..., description="Free-text skill name")
    level: str | None = Field(
        default=None, description="Ordinal level (beginner/intermediate/expert)"
    )


class Experience(_Snapshot):
    """Work experience entry on a candidate profile."""

    position: str = Field(default="", description="Job title held")
    company_name: str = Field(default="", description="Company name")
    start_date: date = Field(..., description="Start date")
    end_date: date | None = Field(default=None, description="End date (if ended)")
    is_current: bool = Field(default=False, description="Whether the role is ongoing")

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _truncate_datetimes(cls, v: object) -> object:
        """Accept datetimes (and ISO datetime strings) by keeping the date part."""
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, str) and "T" in v:
            return datetime.fromisoformat(v.replace("Z", "+00:00")).date()
        return v


class Project(_Snapshot):
    """Portfolio project on a candidate profile."""

    name: str = Field(default="", description="Project name")
    technologies: list[str] = Field(
        default_factory=list, description="Technologies used in the project"
    )

    @field_validator("technologies", mode="before")
    @classmethod
    def _none_as_empty(cls, v: object) -> object:
        return [] if v is None else v


class CandidateProfile(_Snapshot):
    """Candidate profile snapshot consumed by the engine."""

    id: str = Field(..., description="Opaque candidate identifier")
    headline: str | None = Field(default=None, description="Current/target title")
    skills: list[CandidateSkill] = Field(default_factory=list)
    experiences: list[Experience] = Field(default_factory=list)
    address: str | None = Field(default=None, description="Preferred location")
    projects: list[Project] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _validate_id(cls, v: object) -> str:
        return _coerce_id(v)

    @field_validator("skills", mode="before")
    @classmethod
    def _accept_plain_skill_names(cls, v: object) -> object:
        """Allow ``["Python", ...]`` in addition to ``[{"name": "Python"}]``."""
        if v is None:
            return []
        if isinstance(v, list):
            return [{"name": item} if isinstance(item, str) else item for item in v]
        return v

    @field_validator("experiences", "projects", mode="before")
    @classmethod
    def _none_as_empty(cls, v: object) -> object:
        return [] if v is None else v

    @property
    def skill_names(self) -> list[str]:
        return [skill.name for skill in self.skills]


class JobSkill(_Snapshot):
    """A skill listed on a job posting."""

    name: str = Field(..., description="Free-text skill name")
    is_required: bool = Field(
        default=True, description="Required (True) or nice-to-have (False)"
    )


class JobPosting(_Snapshot):
    """Job posting snapshot consumed by the engine."""

    id: str = Field(..., description="Opaque job identifier")
    title: str = Field(default="", description="Job title")
    experience_level: str | None = Field(
        default=None, description="Seniority level (entry/mid/senior/lead/...)"
    )
    location: str | None = Field(default=None, description="Job location")
    is_remote: bool = Field(default=False, description="Whether the job is remote")
    required_skills: list[JobSkill] = Field(default_factory=list)
    published_at: datetime | None = Field(
        default=None, description="Publication time (ranking tie-break)"
    )

    @field_validator("id", mode="before")
    @classmethod
    def _validate_id(cls, v: object) -> str:
        return _coerce_id(v)

    @field_validator("required_skills", mode="before")
    @classmethod
    def _accept_plain_skill_names(cls, v: object) -> object:
        if v is None:
            return []
        if isinstance(v, list):
            return [{"name": item} if isinstance(item, str) else item for item in v]
        return v

    @property
    def must_have_skills(self) -> list[str]:
        """Skills that gate the skill score.

        When the posting marks no skill as required, every listed skill is
        treated as required.
        """
        required = [s.name for s in self.required_skills if s.is_required]
        if required:
            return required
        return [s.name for s in self.required_skills]

    @property
    def nice_to_have_skills(self) -> list[str]:
        if not any(s.is_required for s in self.required_skills):
            return []
        return [s.name for s in self.required_skills if not s.is_required]


_SCORE_FIELDS = (
    "skill_score",
    "experience_score",
    "title_score",
    "location_score",
    "bonus_score",
)


@dataclass(frozen=True)
class ScoreBreakdown:
    """Per-dimension sub-scores, each an integer in [0, 100]."""

    skill_score: int
    experience_score: int
    title_score: int
    location_score: int
    bonus_score: int

    def __post_init__(self) -> None:
        for name in _SCORE_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{name} must be an int (got {value!r})")
            if not (0 <= value <= 100):
                raise ValueError(f"{name} must be between 0 and 100 (got {value})")

    def items(self) -> list[tuple[str, int]]:
        """Return ``(dimension, score)`` pairs in canonical dimension order."""
        return [(name.removesuffix("_score"), getattr(self, name)) for name in _SCORE_FIELDS]

    def to_dict(self) -> dict:
        return {
            "skillScore": self.skill_score,
            "experienceScore": self.experience_score,
            "titleScore": self.title_score,
            "locationScore": self.location_score,
            "bonusScore": self.bonus_score,
        }


@dataclass(frozen=True)
class MatchDetails:
    """Skill lists and per-dimension explanations for a match."""

    matched_skills: tuple[str, ...] = ()
    missing_skills: tuple[str, ...] = ()
    extra_skills: tuple[str, ...] = ()
    experience_gap: str | None = None
    years_of_experience: float = 0.0
    title_similarity: str = ""
    location_match: str = ""
    bonus_factors: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "matchedSkills": list(self.matched_skills),
            "missingSkills": list(self.missing_skills),
            "extraSkills": list(self.extra_skills),
            "experienceGap": self.experience_gap,
            "yearsOfExperience": self.years_of_experience,
            "titleSimilarity": self.title_similarity,
            "locationMatch": self.location_match,
            "bonusFactors": list(self.bonus_factors),
        }


@dataclass(frozen=True)
class MatchResult:
    """Scored and explained match between one candidate and one job.

    ``breakdown``, ``details`` and ``suggestions`` are ``None`` only in the
    gated view returned to non-entitled callers.
    """

    job_id: str
    job_title: str
    match_score: int
    breakdown: ScoreBreakdown | None = None
    details: MatchDetails | None = None
    suggestions: tuple[str, ...] | None = None
    job_is_remote: bool = False
    job_published_at: datetime | None = None
    candidate_id: str | None = None

    def __post_init__(self) -> None:
        score = self.match_score
        if isinstance(score, bool) or not isinstance(score, int):
            raise TypeError(f"match_score must be an int (got {score!r})")
        if not (0 <= score <= 100):
            raise ValueError(f"match_score must be between 0 and 100 (got {score})")
        if self.suggestions is not None and len(self.suggestions) > MAX_SUGGESTIONS:
            raise ValueError(
                f"at most {MAX_SUGGESTIONS} suggestions are allowed "
                f"(got {len(self.suggestions)})"
            )

    @property
    def is_gated(self) -> bool:
        return self.breakdown is None and self.details is None and self.suggestions is None

    def to_dict(self) -> dict:
        """Serialize to a JSON-ready dictionary with camelCase keys.

        Gated fields are omitted rather than emitted as null.
        """
        data: dict[str, Any] = {
            "jobId": self.job_id,
            "jobTitle": self.job_title,
            "matchScore": self.match_score,
        }
        if self.candidate_id is not None:
            data["candidateId"] = self.candidate_id
        if self.breakdown is not None:
            data["breakdown"] = self.breakdown.to_dict()
        if self.details is not None:
            data["details"] = self.details.to_dict()
        if self.suggestions is not None:
            data["suggestions"] = list(self.suggestions)
        return data


@dataclass(frozen=True)
class MatchPage:
    """Ranked matches plus paging metadata for a caller's membership tier."""

    items: list[MatchResult] = field(default_factory=list)
    total_matches: int = 0
    entitled: bool = False
    free_limit: int | None = None
    message: str | None = None

    def __post_init__(self) -> None:
        if self.total_matches < len(self.items):
            raise ValueError(
                "total_matches cannot be smaller than the number of items "
                f"(got {self.total_matches} < {len(self.items)})"
            )

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "data": [item.to_dict() for item in self.items],
            "count": len(self.items),
            "totalMatches": self.total_matches,
            "entitled": self.entitled,
        }
        if self.free_limit is not None:
            data["freeLimit"] = self.free_limit
        if self.message:
            data["message"] = self.message
        return data


# Score bands shown to recruiters without access to the ranked list.
HIGH_MATCH_SCORE = 80
MEDIUM_MATCH_SCORE = 60


@dataclass(frozen=True)
class CandidateTeaser:
    """Counts of matching candidates per score band, without identities."""

    total_matches: int = 0
    high_matches: int = 0
    medium_matches: int = 0
    low_matches: int = 0

    @classmethod
    def from_results(cls, results: list[MatchResult]) -> CandidateTeaser:
        high = sum(1 for r in results if r.match_score >= HIGH_MATCH_SCORE)
        medium = sum(
            1 for r in results if MEDIUM_MATCH_SCORE <= r.match_score < HIGH_MATCH_SCORE
        )
        return cls(
            total_matches=len(results),
            high_matches=high,
            medium_matches=medium,
            low_matches=len(results) - high - medium,
        )

    def to_dict(self) -> dict:
        return {
            "totalMatches": self.total_matches,
            "breakdown": {
                "highMatches": self.high_matches,
                "mediumMatches": self.medium_matches,
                "lowMatches": self.low_matches,
            },
        }


@dataclass(frozen=True)
class CandidatePage:
    """Ranked candidates for a job, or only a teaser for non-entitled recruiters."""

    items: list[MatchResult] = field(default_factory=list)
    total_matches: int = 0
    entitled: bool = False
    teaser: CandidateTeaser | None = None

    def __post_init__(self) -> None:
        if self.total_matches < len(self.items):
            raise ValueError(
                "total_matches cannot be smaller than the number of items "
                f"(got {self.total_matches} < {len(self.items)})"
            )
        if not self.entitled and self.items:
            raise ValueError("non-entitled candidate pages cannot list candidates")

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "data": [item.to_dict() for item in self.items],
            "count": len(self.items),
            "totalMatches": self.total_matches,
            "entitled": self.entitled,
        }
        if self.teaser is not None:
            data["teaserData"] = self.teaser.to_dict()
        return data
