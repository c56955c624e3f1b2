"""Matching service: the engine's public entry points."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, date, datetime

from jobmatch.matching.config import MatchingConfig, get_matching_config
from jobmatch.matching.explainer import format_explanation
from jobmatch.matching.gate import apply_entitlement, gate_results
from jobmatch.matching.models import (
    CandidatePage,
    CandidateProfile,
    CandidateTeaser,
    JobPosting,
    MatchPage,
    MatchResult,
)
from jobmatch.matching.ranker import MatchRanker, build_match_result

logger = logging.getLogger(__name__)


class MatchRequestError(ValueError):
    """Raised when a caller violates the engine's input contract."""


def _validate_limit(limit: object) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise MatchRequestError(f"limit must be a positive integer (got {limit!r})")
    if limit <= 0:
        raise MatchRequestError(f"limit must be a positive integer (got {limit})")
    return limit


def _validate_timeout(timeout: float | None) -> float | None:
    if timeout is None:
        return None
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
        raise MatchRequestError(f"timeout must be a number of seconds (got {timeout!r})")
    if timeout < 0:
        raise MatchRequestError(f"timeout must not be negative (got {timeout})")
    return float(timeout)


def _validate_batch(items: Iterable[object] | None, model: type, name: str) -> list:
    if items is None:
        raise MatchRequestError(f"{name} must be a list, not None")
    if isinstance(items, (str, bytes, dict)):
        raise MatchRequestError(f"{name} must be a list of {model.__name__}")
    batch = list(items)
    for index, item in enumerate(batch):
        if not isinstance(item, model):
            raise MatchRequestError(
                f"{name}[{index}] must be a {model.__name__} "
                f"(got {type(item).__name__})"
            )
    return batch


def _require(value: object, model: type, name: str) -> None:
    if value is None:
        raise MatchRequestError(f"{name} is required")
    if not isinstance(value, model):
        raise MatchRequestError(
            f"{name} must be a {model.__name__} (got {type(value).__name__})"
        )


class MatchingService:
    """Compute ranked, explained and entitlement-gated match results."""

    def __init__(self, config: MatchingConfig | None = None) -> None:
        self.config = config or get_matching_config()
        self.ranker = MatchRanker(
            max_workers=self.config.max_workers,
            max_suggestions=self.config.max_suggestions,
        )

    def _as_of(self, as_of: date | None) -> date:
        # One reference date per request.
        return as_of if as_of is not None else datetime.now(UTC).date()

    def _timeout(self, timeout: float | None) -> float | None:
        if timeout is None:
            return self.config.batch_timeout_seconds
        return _validate_timeout(timeout)

    def compute_matches(
        self,
        candidate: CandidateProfile,
        jobs: Iterable[JobPosting],
        limit: int | None = None,
        entitled: bool = False,
        *,
        as_of: date | None = None,
        timeout: float | None = None,
    ) -> list[MatchResult]:
        """Rank jobs for a candidate and gate the results for the caller.

        Args:
            candidate: Candidate profile snapshot.
            jobs: Job snapshots to score (bounded by the caller).
            limit: Maximum results; defaults to ``config.default_limit``.
            entitled: Whether the caller may see breakdown, details and
                suggestions.
            as_of: Reference date for ongoing experience (defaults to today).
            timeout: Deadline in seconds for the batch; completed results are
                returned when it passes.

        Raises:
            MatchRequestError: On a missing candidate, a non-positive limit or
                malformed job list.
        """
        _require(candidate, CandidateProfile, "candidate")
        batch = _validate_batch(jobs, JobPosting, "jobs")
        limit = _validate_limit(self.config.default_limit if limit is None else limit)
        reference = self._as_of(as_of)

        results = self.ranker.rank(
            candidate,
            batch,
            limit,
            as_of=reference,
            timeout=self._timeout(timeout),
        )
        logger.info(
            "Matched candidate %s against %d jobs: returning %d (entitled=%s)",
            candidate.id,
            len(batch),
            len(results),
            entitled,
        )
        return gate_results(results, entitled)

    def compute_match_page(
        self,
        candidate: CandidateProfile,
        jobs: Iterable[JobPosting],
        limit: int | None = None,
        entitled: bool = False,
        *,
        as_of: date | None = None,
        timeout: float | None = None,
    ) -> MatchPage:
        """Rank jobs and shape a page for the caller's membership tier.

        Non-entitled callers see at most ``config.free_match_limit`` gated
        results, plus the total number of matches available to them.
        """
        requested = _validate_limit(self.config.default_limit if limit is None else limit)
        ranked = self.compute_matches(
            candidate,
            jobs,
            limit=requested if entitled else max(requested, self.config.default_limit),
            entitled=entitled,
            as_of=as_of,
            timeout=timeout,
        )
        if entitled:
            return MatchPage(items=ranked, total_matches=len(ranked), entitled=True)

        free_limit = self.config.free_match_limit
        visible = ranked[: min(requested, free_limit)]
        return MatchPage(
            items=visible,
            total_matches=len(ranked),
            entitled=False,
            free_limit=free_limit,
            message=(
                f"You're viewing {len(visible)} of {len(ranked)} recommended jobs. "
                "Upgrade to see all matches with detailed insights."
            ),
        )

    def score_job(
        self,
        candidate: CandidateProfile,
        job: JobPosting,
        *,
        entitled: bool = True,
        as_of: date | None = None,
    ) -> MatchResult:
        """Score a single candidate/job pair."""
        _require(candidate, CandidateProfile, "candidate")
        _require(job, JobPosting, "job")
        result = build_match_result(
            candidate,
            job,
            as_of=self._as_of(as_of),
            max_suggestions=self.config.max_suggestions,
        )
        return apply_entitlement(result, entitled)

    def match_candidates(
        self,
        job: JobPosting,
        candidates: Iterable[CandidateProfile],
        limit: int | None = None,
        *,
        as_of: date | None = None,
        timeout: float | None = None,
    ) -> list[MatchResult]:
        """Rank candidates for a job with full detail (entitled recruiter view).

        Callers without access to the ranked list should use
        :meth:`compute_candidate_page`, which only reports counts.
        """
        _require(job, JobPosting, "job")
        batch = _validate_batch(candidates, CandidateProfile, "candidates")
        limit = _validate_limit(self.config.default_limit if limit is None else limit)

        results = self.ranker.rank_candidates(
            job,
            batch,
            limit,
            as_of=self._as_of(as_of),
            timeout=self._timeout(timeout),
        )
        logger.info(
            "Matched job %s against %d candidates: returning %d",
            job.id,
            len(batch),
            len(results),
        )
        return results

    def compute_candidate_page(
        self,
        job: JobPosting,
        candidates: Iterable[CandidateProfile],
        limit: int | None = None,
        entitled: bool = False,
        *,
        as_of: date | None = None,
        timeout: float | None = None,
    ) -> CandidatePage:
        """Rank candidates for a job and shape a page for the recruiter's tier.

        Non-entitled recruiters get no individual candidates, only the total
        and the number of high, medium and low matches.
        """
        requested = _validate_limit(self.config.default_limit if limit is None else limit)
        ranked = self.match_candidates(
            job,
            candidates,
            limit=max(requested, self.config.default_limit),
            as_of=as_of,
            timeout=timeout,
        )
        if entitled:
            return CandidatePage(
                items=ranked[:requested], total_matches=len(ranked), entitled=True
            )
        return CandidatePage(
            total_matches=len(ranked),
            entitled=False,
            teaser=CandidateTeaser.from_results(ranked),
        )

    def format_result(self, result: MatchResult) -> str:
        """Format a MatchResult for CLI output."""
        header = f"{result.job_title} (job {result.job_id})"
        if result.candidate_id is not None:
            header += f" - candidate {result.candidate_id}"
        return f"{header}\n{format_explanation(result)}"
