"""CV to job matching and scoring engine.

This package computes a normalized compatibility score between a candidate
profile and job postings, explains it, ranks the results and filters them
for the caller's membership tier.

Public API:
    - MatchingService: compute_matches and related entry points
    - MatchRanker: batch scoring, sorting and truncation
    - CandidateProfile / JobPosting: input snapshots
    - MatchResult: scored and explained output
    - normalize_skill: skill name canonicalization
    - MatchingConfig: configuration settings
"""

from jobmatch.matching.aggregator import MATCH_WEIGHTS, MatchWeights, aggregate
from jobmatch.matching.config import (
    MatchingConfig,
    get_matching_config,
    reset_matching_config,
)
from jobmatch.matching.explainer import explain, format_explanation
from jobmatch.matching.gate import apply_entitlement, gate_results
from jobmatch.matching.models import (
    CandidatePage,
    CandidateProfile,
    CandidateSkill,
    CandidateTeaser,
    Experience,
    JobPosting,
    JobSkill,
    MatchDetails,
    MatchPage,
    MatchResult,
    Project,
    ScoreBreakdown,
)
from jobmatch.matching.normalizer import normalize_skill, skills_match
from jobmatch.matching.profile import ProfileService
from jobmatch.matching.ranker import MatchRanker
from jobmatch.matching.service import MatchingService, MatchRequestError

__all__ = [
    "MatchingService",
    "MatchRequestError",
    "MatchRanker",
    "ProfileService",
    "CandidateProfile",
    "CandidateSkill",
    "Experience",
    "Project",
    "JobPosting",
    "JobSkill",
    "MatchResult",
    "MatchDetails",
    "MatchPage",
    "CandidatePage",
    "CandidateTeaser",
    "ScoreBreakdown",
    "MatchWeights",
    "MATCH_WEIGHTS",
    "aggregate",
    "explain",
    "format_explanation",
    "apply_entitlement",
    "gate_results",
    "normalize_skill",
    "skills_match",
    "MatchingConfig",
    "get_matching_config",
    "reset_matching_config",
]
