"""Score aggregation: five sub-scores -> one weighted match score."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from jobmatch.matching.models import CandidateProfile, JobPosting, ScoreBreakdown
from jobmatch.matching.scorers import (
    BonusScore,
    DimensionScore,
    ExperienceScore,
    SkillScore,
    TitleScore,
    clamp_score,
    score_bonus,
    score_experience,
    score_location,
    score_skills,
    score_title,
)


@dataclass(frozen=True)
class MatchWeights:
    """Relative importance of each dimension (must sum to 1.0)."""

    skills: float
    experience: float
    title: float
    location: float
    bonus: float

    def __post_init__(self) -> None:
        values = (self.skills, self.experience, self.title, self.location, self.bonus)
        if any(value < 0.0 or value > 1.0 for value in values):
            raise ValueError(f"Weights must be between 0.0 and 1.0 (got {values})")
        weight_sum = sum(values)
        if abs(weight_sum - 1.0) > 1e-6:
            raise ValueError(
                "Scoring weights must sum to 1.0. "
                f"Got {weight_sum:.6f} "
                f"(skills={self.skills}, experience={self.experience}, "
                f"title={self.title}, location={self.location}, bonus={self.bonus})."
            )


# Scoring policy. Changing these values changes every ranking.
MATCH_WEIGHTS = MatchWeights(
    skills=0.40,
    experience=0.25,
    title=0.15,
    location=0.10,
    bonus=0.10,
)


@dataclass(frozen=True)
class DimensionResults:
    """Raw scorer outputs for one candidate/job pair."""

    skills: SkillScore
    experience: ExperienceScore
    title: TitleScore
    location: DimensionScore
    bonus: BonusScore

    def breakdown(self) -> ScoreBreakdown:
        return ScoreBreakdown(
            skill_score=self.skills.score,
            experience_score=self.experience.score,
            title_score=self.title.score,
            location_score=self.location.score,
            bonus_score=self.bonus.score,
        )


def score_dimensions(
    candidate: CandidateProfile, job: JobPosting, as_of: date
) -> DimensionResults:
    """Run all five dimension scorers for a candidate/job pair."""
    return DimensionResults(
        skills=score_skills(candidate, job),
        experience=score_experience(candidate, job, as_of),
        title=score_title(candidate, job),
        location=score_location(candidate, job),
        bonus=score_bonus(candidate, job),
    )


def aggregate(breakdown: ScoreBreakdown, weights: MatchWeights = MATCH_WEIGHTS) -> int:
    """Combine sub-scores into the overall match score in [0, 100]."""
    total = (
        weights.skills * breakdown.skill_score
        + weights.experience * breakdown.experience_score
        + weights.title * breakdown.title_score
        + weights.location * breakdown.location_score
        + weights.bonus * breakdown.bonus_score
    )
    return clamp_score(round(total, 6))
