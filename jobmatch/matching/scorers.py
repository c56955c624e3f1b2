"""Dimension scorers for candidate/job matching.

Each scorer compares one facet of a candidate profile with a job posting and
returns an integer sub-score in [0, 100] together with a short explanation.
Scorers are total: missing optional data maps to a documented default and
never raises.

Defaults for missing data:
    - skills: job lists no skills -> 100
    - experience: job has no level -> 100; no experiences -> 0 years
    - title: no candidate title -> 0
    - location: remote job or no candidate location -> 100;
      job without a location -> 50
    - bonus: starts at 50 and moves by small deltas
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from jobmatch.matching.models import CandidateProfile, Experience, JobPosting
from jobmatch.matching.normalizer import normalize_skill, skill_index

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365.25

# Skills
OPTIONAL_SKILL_BONUS = 10.0

# Experience: expected years per job level, as (min, max); max None = open.
EXPERIENCE_LEVEL_RANGES: dict[str, tuple[float, float | None]] = {
    "intern": (0.0, 1.0),
    "internship": (0.0, 1.0),
    "fresher": (0.0, 2.0),
    "entry": (0.0, 2.0),
    "junior": (0.0, 2.0),
    "mid": (2.0, 5.0),
    "middle": (2.0, 5.0),
    "intermediate": (2.0, 5.0),
    "senior": (5.0, 10.0),
    "lead": (8.0, None),
    "staff": (8.0, None),
    "manager": (8.0, None),
    "principal": (10.0, None),
    "architect": (10.0, None),
}
DEFAULT_EXPERIENCE_LEVEL = "mid"
UNDER_QUALIFIED_PENALTY_PER_YEAR = 25.0
OVER_QUALIFIED_PENALTY_PER_YEAR = 10.0

# Title
_TITLE_PHRASES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\bfront[\s\-/]*end\b"), "frontend"),
    (re.compile(r"\bback[\s\-/]*end\b"), "backend"),
    (re.compile(r"\bfull[\s\-/]*stack\b"), "fullstack"),
    (re.compile(r"\bdev[\s\-/]*ops\b"), "devops"),
    (re.compile(r"\bmachine learning\b"), "ml"),
    (re.compile(r"\bquality assurance\b"), "qa"),
)
TITLE_TOKEN_SYNONYMS: dict[str, str] = {
    "developer": "engineer",
    "dev": "engineer",
    "programmer": "engineer",
    "engineering": "engineer",
    "eng": "engineer",
    "sr": "senior",
    "snr": "senior",
    "jr": "junior",
    "mgr": "manager",
    "fe": "frontend",
    "be": "backend",
}
_TITLE_STOP_WORDS = frozenset(
    {"a", "an", "and", "the", "of", "for", "to", "in", "at", "with", "on", "or"}
)
_TITLE_TOKEN = re.compile(r"[a-z0-9+#]+")

# Location
REMOTE_MARKERS = ("remote", "work from home", "wfh", "anywhere")
LOCATION_ALIASES: dict[str, str] = {
    "hcm": "ho chi minh city",
    "hcmc": "ho chi minh city",
    "tp hcm": "ho chi minh city",
    "tphcm": "ho chi minh city",
    "ho chi minh": "ho chi minh city",
    "tp ho chi minh": "ho chi minh city",
    "saigon": "ho chi minh city",
    "sai gon": "ho chi minh city",
    "ha noi": "hanoi",
    "hn": "hanoi",
    "danang": "da nang",
    "viet nam": "vietnam",
    "vn": "vietnam",
    "nyc": "new york",
    "new york city": "new york",
    "sf": "san francisco",
    "us": "united states",
    "usa": "united states",
    "uk": "united kingdom",
}
CITY_COUNTRIES: dict[str, str] = {
    "ho chi minh city": "vietnam",
    "hanoi": "vietnam",
    "da nang": "vietnam",
    "hai phong": "vietnam",
    "can tho": "vietnam",
    "nha trang": "vietnam",
    "new york": "united states",
    "san francisco": "united states",
    "seattle": "united states",
    "austin": "united states",
    "london": "united kingdom",
    "manchester": "united kingdom",
    "berlin": "germany",
    "munich": "germany",
    "singapore": "singapore",
    "tokyo": "japan",
}
LOCATION_PARTIAL_SCORE = 50
LOCATION_UNKNOWN_SCORE = 50

# Bonus
BONUS_BASELINE = 50.0
ADVANCED_SKILL_LEVELS = frozenset({"advanced", "expert", "master", "proficient"})


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    if value >= 0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


def clamp_score(value: float) -> int:
    """Round and clamp a raw score into [0, 100]."""
    return max(0, min(100, round_half_up(value)))


@dataclass(frozen=True)
class DimensionScore:
    """Sub-score for one dimension plus a one-line explanation."""

    score: int
    reason: str = ""


@dataclass(frozen=True)
class SkillScore(DimensionScore):
    """Skill sub-score with normalized matched/missing skill names."""

    matched_required: tuple[str, ...] = ()
    missing_required: tuple[str, ...] = ()
    matched_optional: tuple[str, ...] = ()


@dataclass(frozen=True)
class ExperienceScore(DimensionScore):
    years: float = 0.0
    expected_range: tuple[float, float | None] | None = None
    gap: str | None = None


@dataclass(frozen=True)
class TitleScore(DimensionScore):
    candidate_title: str | None = None


@dataclass(frozen=True)
class BonusScore(DimensionScore):
    factors: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Skills
# ---------------------------------------------------------------------------


def score_skills(candidate: CandidateProfile, job: JobPosting) -> SkillScore:
    """Score the share of required job skills the candidate has.

    ``100 * matched_required / required`` plus up to ``OPTIONAL_SKILL_BONUS``
    for matched nice-to-have skills, capped at 100. A job without skills
    scores 100.
    """
    candidate_skills = skill_index(candidate.skill_names)
    required = skill_index(job.must_have_skills)
    optional = [
        skill for skill in skill_index(job.nice_to_have_skills) if skill not in required
    ]

    if not required:
        return SkillScore(score=100, reason="No required skills listed")

    matched = tuple(skill for skill in required if skill in candidate_skills)
    missing = tuple(skill for skill in required if skill not in candidate_skills)
    matched_optional = tuple(skill for skill in optional if skill in candidate_skills)

    raw = 100.0 * len(matched) / len(required)
    if optional:
        raw += OPTIONAL_SKILL_BONUS * len(matched_optional) / len(optional)

    return SkillScore(
        score=clamp_score(raw),
        reason=f"{len(matched)} of {len(required)} required skills matched",
        matched_required=matched,
        missing_required=missing,
        matched_optional=matched_optional,
    )


# ---------------------------------------------------------------------------
# Experience
# ---------------------------------------------------------------------------


def total_experience_years(experiences: Iterable[Experience], as_of: date) -> float:
    """Sum experience as the union of date intervals, in years.

    Ongoing roles (``is_current`` or no end date) run until ``as_of``.
    Overlapping roles are counted once; a role ending before it starts
    counts as zero.
    """
    intervals: list[tuple[date, date]] = []
    for exp in experiences:
        start = exp.start_date
        end = as_of if exp.is_current or exp.end_date is None else exp.end_date
        end = min(end, as_of)
        if end <= start:
            if exp.end_date is not None and exp.end_date < start:
                logger.debug(
                    "Ignoring experience %r: end date %s before start date %s",
                    exp.position,
                    exp.end_date,
                    start,
                )
            continue
        intervals.append((start, end))

    intervals.sort()
    total_days = 0
    current_start: date | None = None
    current_end: date | None = None
    for start, end in intervals:
        if current_end is None or start > current_end:
            if current_start is not None and current_end is not None:
                total_days += (current_end - current_start).days
            current_start, current_end = start, end
        elif end > current_end:
            current_end = end
    if current_start is not None and current_end is not None:
        total_days += (current_end - current_start).days

    return total_days / DAYS_PER_YEAR


def normalize_experience_level(level: str | None) -> str | None:
    """Map a free-text job level ("Mid-Level", "SENIOR") to a range key."""
    if not level:
        return None
    value = re.sub(r"[\s_\-]+", " ", level.strip().lower())
    value = re.sub(r"\s*level$", "", value).strip()
    if not value:
        return None
    if value in EXPERIENCE_LEVEL_RANGES:
        return value
    for word in value.split():
        if word in EXPERIENCE_LEVEL_RANGES:
            return word
    return DEFAULT_EXPERIENCE_LEVEL


def _format_range(low: float, high: float | None) -> str:
    if high is None:
        return f"{low:g}+ years"
    return f"{low:g}-{high:g} years"


def score_experience(
    candidate: CandidateProfile, job: JobPosting, as_of: date
) -> ExperienceScore:
    """Score candidate years of experience against the job level's range.

    Inside the range scores 100. Each year short of the minimum costs
    ``UNDER_QUALIFIED_PENALTY_PER_YEAR`` points, each year beyond the maximum
    costs ``OVER_QUALIFIED_PENALTY_PER_YEAR``; the floor is 0.
    """
    years = total_experience_years(candidate.experiences, as_of)
    shown_years = round(years, 1)

    level = normalize_experience_level(job.experience_level)
    if level is None:
        return ExperienceScore(
            score=100, reason="No experience level specified", years=shown_years
        )

    low, high = EXPERIENCE_LEVEL_RANGES[level]
    expected = _format_range(low, high)

    if years < low:
        score = clamp_score(100.0 - UNDER_QUALIFIED_PENALTY_PER_YEAR * (low - years))
        gap = (
            f"Job expects {expected} ({job.experience_level}), "
            f"candidate has {shown_years:g} years"
        )
        return ExperienceScore(
            score=score,
            reason="Below the expected experience range",
            years=shown_years,
            expected_range=(low, high),
            gap=gap,
        )

    if high is not None and years > high:
        score = clamp_score(100.0 - OVER_QUALIFIED_PENALTY_PER_YEAR * (years - high))
        gap = (
            f"Job expects {expected} ({job.experience_level}), "
            f"candidate has {shown_years:g} years"
        )
        return ExperienceScore(
            score=score,
            reason="Above the expected experience range",
            years=shown_years,
            expected_range=(low, high),
            gap=gap,
        )

    return ExperienceScore(
        score=100,
        reason=f"Within the expected range ({expected})",
        years=shown_years,
        expected_range=(low, high),
    )


# ---------------------------------------------------------------------------
# Title
# ---------------------------------------------------------------------------


def title_tokens(title: str | None) -> frozenset[str]:
    """Return canonical lowercase word tokens of a job title."""
    if not title:
        return frozenset()
    value = title.lower()
    for pattern, replacement in _TITLE_PHRASES:
        value = pattern.sub(replacement, value)
    tokens = set()
    for token in _TITLE_TOKEN.findall(value):
        if token in _TITLE_STOP_WORDS:
            continue
        tokens.add(TITLE_TOKEN_SYNONYMS.get(token, token))
    return frozenset(tokens)


def title_similarity(title1: str | None, title2: str | None) -> int:
    """Jaccard similarity of canonical title tokens, scaled to 0-100."""
    if not title1 or not title2:
        return 0
    if title1.strip().lower() == title2.strip().lower():
        return 100
    tokens1 = title_tokens(title1)
    tokens2 = title_tokens(title2)
    union = tokens1 | tokens2
    if not union:
        return 0
    return clamp_score(100.0 * len(tokens1 & tokens2) / len(union))


def most_recent_position(experiences: Iterable[Experience]) -> str | None:
    """Position of the current role, or else the one that ended last."""
    positioned = [exp for exp in experiences if exp.position and exp.position.strip()]
    if not positioned:
        return None

    def recency(exp: Experience) -> tuple[bool, date, date]:
        ongoing = exp.is_current or exp.end_date is None
        end = date.max if ongoing else exp.end_date
        return (ongoing, end, exp.start_date)

    return max(positioned, key=recency).position.strip()


def score_title(candidate: CandidateProfile, job: JobPosting) -> TitleScore:
    """Score title similarity using the best of headline and latest position."""
    titles = []
    if candidate.headline and candidate.headline.strip():
        titles.append(candidate.headline.strip())
    position = most_recent_position(candidate.experiences)
    if position and position not in titles:
        titles.append(position)

    if not titles:
        return TitleScore(
            score=0, reason="No job title information in candidate profile"
        )
    if not job.title.strip():
        return TitleScore(score=0, reason="Job title is missing")

    best_title = titles[0]
    best_score = -1
    for title in titles:
        score = title_similarity(title, job.title)
        if score > best_score:
            best_title, best_score = title, score

    if best_score >= 70:
        reason = "High similarity - candidate title closely matches the job title"
    elif best_score >= 40:
        reason = "Moderate similarity - some relevant keywords match"
    else:
        reason = "Low similarity - limited keyword overlap"

    return TitleScore(score=best_score, reason=reason, candidate_title=best_title)


# ---------------------------------------------------------------------------
# Location
# ---------------------------------------------------------------------------


def _normalize_location_part(part: str) -> str:
    value = re.sub(r"[^\w\s]", " ", part.lower())
    value = re.sub(r"\s+", " ", value).strip()
    if value.startswith("city of "):
        value = value[len("city of ") :]
    return LOCATION_ALIASES.get(value, value)


def location_segments(location: str | None) -> tuple[str, ...]:
    """Split a location on commas into normalized, alias-resolved segments."""
    if not location:
        return ()
    segments = (_normalize_location_part(part) for part in location.split(","))
    return tuple(segment for segment in segments if segment)


def _countries(segments: tuple[str, ...]) -> set[str]:
    known = set(CITY_COUNTRIES.values())
    countries = {segment for segment in segments if segment in known}
    countries.update(CITY_COUNTRIES[s] for s in segments if s in CITY_COUNTRIES)
    return countries


def is_remote_location(location: str | None) -> bool:
    if not location:
        return False
    value = location.lower()
    return any(re.search(rf"\b{re.escape(marker)}\b", value) for marker in REMOTE_MARKERS)


def _contains_phrase(haystack: str, needle: str) -> bool:
    return re.search(rf"(^|\W){re.escape(needle)}($|\W)", haystack) is not None


def score_location(candidate: CandidateProfile, job: JobPosting) -> DimensionScore:
    """Score location compatibility.

    Remote jobs and candidates without a stated location score 100. Same
    city or one location contained in the other scores 100, same
    country/region scores 50, anything else 0.
    """
    if job.is_remote or is_remote_location(job.location):
        return DimensionScore(score=100, reason="Job is remote - location compatible")

    candidate_segments = location_segments(candidate.address)
    if not candidate_segments:
        return DimensionScore(
            score=100, reason="No location preference stated - assumed compatible"
        )

    job_segments = location_segments(job.location)
    if not job_segments:
        return DimensionScore(
            score=LOCATION_UNKNOWN_SCORE, reason="Job location information incomplete"
        )

    if candidate_segments[0] == job_segments[0]:
        return DimensionScore(score=100, reason="Same city - good location match")

    candidate_full = ", ".join(candidate_segments)
    job_full = ", ".join(job_segments)
    if _contains_phrase(candidate_full, job_full) or _contains_phrase(
        job_full, candidate_full
    ):
        return DimensionScore(score=100, reason="Location match")

    shared = set(candidate_segments) & set(job_segments)
    if shared or (_countries(candidate_segments) & _countries(job_segments)):
        return DimensionScore(
            score=LOCATION_PARTIAL_SCORE,
            reason="Same country/region - different city",
        )

    return DimensionScore(
        score=0, reason="Location mismatch - candidate may need to relocate"
    )


# ---------------------------------------------------------------------------
# Bonus
# ---------------------------------------------------------------------------


def _is_advanced(level: str | None) -> bool:
    if not level:
        return False
    value = level.strip().lower()
    if value.isdigit():
        return int(value) >= 4
    return value in ADVANCED_SKILL_LEVELS


def score_bonus(candidate: CandidateProfile, job: JobPosting) -> BonusScore:
    """Score minor signals not covered by the other dimensions.

    Starts at ``BONUS_BASELINE`` and is adjusted by small deltas for profile
    completeness, extra skills, advanced skill levels on job skills and
    project technologies.
    """
    score = BONUS_BASELINE
    factors: list[str] = []

    if candidate.headline and candidate.headline.strip():
        score += 5
    if candidate.address and candidate.address.strip():
        score += 5
    if candidate.experiences:
        score += 5
    if not skill_index(candidate.skill_names):
        score -= 10
        factors.append("No skills listed on profile")

    job_skills = set(skill_index(s.name for s in job.required_skills))
    candidate_skills = skill_index(candidate.skill_names)

    extra = [skill for skill in candidate_skills if skill not in job_skills]
    if extra:
        score += min(len(extra) * 2, 10)
        factors.append(f"{len(extra)} additional skills beyond requirements")

    advanced_seen: set[str] = set()
    for skill in candidate.skills:
        canonical = normalize_skill(skill.name)
        if canonical in job_skills and _is_advanced(skill.level):
            advanced_seen.add(canonical)
    if advanced_seen:
        score += min(len(advanced_seen) * 3, 9)
        factors.append(f"{len(advanced_seen)} job skills at an advanced level")

    project_techs = skill_index(
        tech for project in candidate.projects for tech in project.technologies
    )
    relevant = [tech for tech in project_techs if tech in job_skills]
    if relevant:
        score += min(len(relevant) * 3, 15)
        factors.append(f"{len(relevant)} job-relevant technologies used in projects")
    elif project_techs:
        score += 5
        factors.append(f"{len(project_techs)} technologies used in projects")

    return BonusScore(
        score=clamp_score(score),
        reason="Profile completeness and additional qualifications",
        factors=tuple(factors),
    )
