"""Match explanations: skill lists and improvement suggestions."""

from __future__ import annotations

from dataclasses import dataclass

from jobmatch.matching.aggregator import DimensionResults
from jobmatch.matching.models import (
    CandidateProfile,
    JobPosting,
    MatchResult,
    ScoreBreakdown,
)
from jobmatch.matching.normalizer import skill_index
from jobmatch.matching.scorers import ExperienceScore, most_recent_position

DEFAULT_MAX_SUGGESTIONS = 5

# Thresholds below which a dimension produces a suggestion.
SKILL_SUGGESTION_THRESHOLD = 70
EXPERIENCE_LOW_THRESHOLD = 50
TITLE_LOW_THRESHOLD = 40
TITLE_MODERATE_THRESHOLD = 70
LOCATION_LOW_THRESHOLD = 50
BONUS_LOW_THRESHOLD = 50
LOW_MATCH_THRESHOLD = 50

MAX_LISTED_MISSING_SKILLS = 3

# Tie-break order when two dimensions have the same score.
_DIMENSION_ORDER = {
    "skill": 0,
    "experience": 1,
    "title": 2,
    "location": 3,
    "bonus": 4,
    "overall": 5,
}


@dataclass(frozen=True)
class Explanation:
    """Display-ready skill lists and prioritized suggestions."""

    matched_skills: tuple[str, ...]
    missing_skills: tuple[str, ...]
    extra_skills: tuple[str, ...]
    suggestions: tuple[str, ...]


def skill_lists(
    candidate: CandidateProfile, job: JobPosting
) -> tuple[tuple[str, ...], tuple[str, ...], tuple[str, ...]]:
    """Return ``(matched, missing, extra)`` skills in display casing.

    Matched and extra skills use the candidate's spelling, missing skills the
    job's spelling. Matched skills follow job order (required first).
    """
    candidate_skills = skill_index(candidate.skill_names)
    required = skill_index(job.must_have_skills)
    optional = skill_index(job.nice_to_have_skills)
    job_skills = {**required, **{k: v for k, v in optional.items() if k not in required}}

    matched = tuple(candidate_skills[k] for k in job_skills if k in candidate_skills)
    missing = tuple(name for k, name in required.items() if k not in candidate_skills)
    extra = tuple(name for k, name in candidate_skills.items() if k not in job_skills)
    return matched, missing, extra


class _Suggestions:
    """Collects suggestions keyed by the score of the dimension they improve."""

    def __init__(self) -> None:
        self._items: list[tuple[int, int, int, str]] = []

    def add(self, dimension: str, score: int, text: str) -> None:
        self._items.append((score, _DIMENSION_ORDER[dimension], len(self._items), text))

    def ordered(self, limit: int) -> tuple[str, ...]:
        seen: set[str] = set()
        result: list[str] = []
        for *_, text in sorted(self._items):
            if text in seen:
                continue
            seen.add(text)
            result.append(text)
            if len(result) >= limit:
                break
        return tuple(result)


def _skill_suggestions(
    out: _Suggestions,
    candidate: CandidateProfile,
    score: int,
    missing: tuple[str, ...],
) -> None:
    if not skill_index(candidate.skill_names):
        out.add("skill", score, "Add your skills to your profile so they can be matched")
    if not missing:
        return
    if score < SKILL_SUGGESTION_THRESHOLD:
        for name in missing[:MAX_LISTED_MISSING_SKILLS]:
            out.add("skill", score, f"Add missing skill: {name}")
        remaining = len(missing) - MAX_LISTED_MISSING_SKILLS
        if remaining > 0:
            out.add(
                "skill",
                score,
                f"{remaining} more required skills are missing; "
                "focus on the ones listed above first",
            )
    else:
        out.add(
            "skill",
            score,
            f"Consider adding {', '.join(missing)} to reach a full skill match",
        )


def _experience_suggestions(
    out: _Suggestions,
    candidate: CandidateProfile,
    score: int,
    experience: ExperienceScore | None,
) -> None:
    if not candidate.experiences:
        out.add("experience", score, "Add your work experience to your profile")
    if score >= 100:
        return

    over_qualified = (
        experience is not None
        and experience.expected_range is not None
        and experience.expected_range[1] is not None
        and experience.years > experience.expected_range[1]
    )
    gap = f" ({experience.gap})" if experience is not None and experience.gap else ""

    if over_qualified:
        out.add(
            "experience",
            score,
            "Your experience is above the typical range for this role"
            f"{gap}; consider more senior positions",
        )
    elif score < EXPERIENCE_LOW_THRESHOLD:
        out.add(
            "experience",
            score,
            f"Your experience is below the typical range for this role{gap}",
        )
    else:
        out.add(
            "experience",
            score,
            "Your experience is slightly below the typical range for this role; "
            "highlight relevant projects and achievements",
        )


def _title_suggestions(
    out: _Suggestions, candidate: CandidateProfile, job: JobPosting, score: int
) -> None:
    has_headline = bool(candidate.headline and candidate.headline.strip())
    if not has_headline and most_recent_position(candidate.experiences) is None:
        out.add("title", score, "Add a headline with your current or target job title")
        return
    if score < TITLE_LOW_THRESHOLD:
        out.add(
            "title",
            score,
            "Update your headline or position titles to include keywords "
            f'from the job title "{job.title}"',
        )
    elif score < TITLE_MODERATE_THRESHOLD:
        out.add(
            "title",
            score,
            f'Emphasize keywords from the job title "{job.title}" in your profile',
        )


def _location_suggestions(
    out: _Suggestions, candidate: CandidateProfile, score: int
) -> None:
    if not (candidate.address and candidate.address.strip()):
        out.add("location", score, "Add your preferred work location to your profile")
        return
    if score < LOCATION_LOW_THRESHOLD:
        out.add(
            "location",
            score,
            "Your location does not match this job; consider relocating "
            "or applying for remote positions",
        )
    elif score < 100:
        out.add(
            "location",
            score,
            "This job is in a different city of your region; "
            "mention whether you are open to relocating",
        )


def _bonus_suggestions(
    out: _Suggestions, candidate: CandidateProfile, score: int
) -> None:
    if score < BONUS_LOW_THRESHOLD:
        out.add(
            "bonus",
            score,
            "Complete your profile to strengthen your application",
        )
    if not candidate.projects:
        out.add(
            "bonus",
            score,
            "Add projects showcasing relevant technologies to your portfolio",
        )


def generate_suggestions(
    candidate: CandidateProfile,
    job: JobPosting,
    breakdown: ScoreBreakdown,
    *,
    missing_skills: tuple[str, ...] = (),
    experience: ExperienceScore | None = None,
    match_score: int | None = None,
    max_suggestions: int = DEFAULT_MAX_SUGGESTIONS,
) -> tuple[str, ...]:
    """Build improvement suggestions, weakest dimension first.

    Each dimension contributes template sentences when its sub-score is
    below its threshold or when the profile lacks the data it needs.
    Suggestions are ordered by the score of the dimension they address
    (lowest first), then by dimension order, and capped at
    ``max_suggestions``.
    """
    out = _Suggestions()
    _skill_suggestions(out, candidate, breakdown.skill_score, missing_skills)
    _experience_suggestions(out, candidate, breakdown.experience_score, experience)
    _title_suggestions(out, candidate, job, breakdown.title_score)
    _location_suggestions(out, candidate, breakdown.location_score)
    _bonus_suggestions(out, candidate, breakdown.bonus_score)

    if match_score is not None and match_score < LOW_MATCH_THRESHOLD:
        out.add(
            "overall",
            101,
            f"Overall match score is {match_score}%. Focus on the skill and "
            "experience improvements above first",
        )

    return out.ordered(max_suggestions)


def explain(
    candidate: CandidateProfile,
    job: JobPosting,
    breakdown: ScoreBreakdown,
    dimensions: DimensionResults | None = None,
    *,
    match_score: int | None = None,
    max_suggestions: int = DEFAULT_MAX_SUGGESTIONS,
) -> Explanation:
    """Explain a breakdown: matched/missing/extra skills and suggestions."""
    matched, missing, extra = skill_lists(candidate, job)
    suggestions = generate_suggestions(
        candidate,
        job,
        breakdown,
        missing_skills=missing,
        experience=dimensions.experience if dimensions is not None else None,
        match_score=match_score,
        max_suggestions=max_suggestions,
    )
    return Explanation(
        matched_skills=matched,
        missing_skills=missing,
        extra_skills=extra,
        suggestions=suggestions,
    )


def format_explanation(result: MatchResult) -> str:
    """Render a human-readable summary of a match result."""
    lines = [f"Match Score: {result.match_score}%"]

    if result.breakdown is not None:
        b = result.breakdown
        d = result.details
        lines.append("")
        lines.append("Breakdown:")
        skills_note = ""
        if d is not None:
            skills_note = (
                f" ({len(d.matched_skills)} matched, {len(d.missing_skills)} missing)"
            )
        lines.append(f"- Skills: {b.skill_score}%{skills_note}")
        gap = f" ({d.experience_gap})" if d is not None and d.experience_gap else ""
        lines.append(f"- Experience: {b.experience_score}%{gap}")
        lines.append(f"- Title Similarity: {b.title_score}%")
        lines.append(f"- Location: {b.location_score}%")
        lines.append(f"- Bonus Factors: {b.bonus_score}%")

    if result.details is not None:
        d = result.details
        if d.matched_skills or d.missing_skills or d.extra_skills:
            lines.append("")
        if d.matched_skills:
            lines.append(f"Matched Skills: {', '.join(d.matched_skills)}")
        if d.missing_skills:
            lines.append(f"Missing Required Skills: {', '.join(d.missing_skills)}")
        if d.extra_skills:
            lines.append(f"Extra Skills: {', '.join(d.extra_skills[:5])}")

    if result.suggestions:
        lines.append("")
        lines.append("Suggestions:")
        lines.extend(f"- {suggestion}" for suggestion in result.suggestions)

    return "\n".join(lines)
