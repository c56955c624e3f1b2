"""Match ranking: score a bounded batch, sort, truncate."""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import date
from typing import TypeVar

from jobmatch.matching.aggregator import aggregate, score_dimensions
from jobmatch.matching.explainer import DEFAULT_MAX_SUGGESTIONS, explain
from jobmatch.matching.models import (
    CandidateProfile,
    JobPosting,
    MatchDetails,
    MatchResult,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def build_match_result(
    candidate: CandidateProfile,
    job: JobPosting,
    *,
    as_of: date,
    max_suggestions: int = DEFAULT_MAX_SUGGESTIONS,
) -> MatchResult:
    """Score and explain one candidate/job pair (full detail)."""
    dimensions = score_dimensions(candidate, job, as_of)
    breakdown = dimensions.breakdown()
    match_score = aggregate(breakdown)
    explanation = explain(
        candidate,
        job,
        breakdown,
        dimensions,
        match_score=match_score,
        max_suggestions=max_suggestions,
    )

    details = MatchDetails(
        matched_skills=explanation.matched_skills,
        missing_skills=explanation.missing_skills,
        extra_skills=explanation.extra_skills,
        experience_gap=dimensions.experience.gap,
        years_of_experience=dimensions.experience.years,
        title_similarity=dimensions.title.reason,
        location_match=dimensions.location.reason,
        bonus_factors=dimensions.bonus.factors,
    )

    return MatchResult(
        job_id=job.id,
        job_title=job.title,
        match_score=match_score,
        breakdown=breakdown,
        details=details,
        suggestions=explanation.suggestions,
        job_is_remote=job.is_remote,
        job_published_at=job.published_at,
        candidate_id=candidate.id,
    )


def _job_sort_key(result: MatchResult) -> tuple[int, float, str]:
    # Newer jobs first; jobs without a publication date rank as oldest.
    published = result.job_published_at
    recency = -published.timestamp() if published is not None else math.inf
    return (-result.match_score, recency, result.job_id)


def _candidate_sort_key(result: MatchResult) -> tuple[int, str]:
    return (-result.match_score, result.candidate_id or "")


class MatchRanker:
    """Score a batch of pairs, sort by match score and truncate.

    Pairs are scored on a thread pool when ``max_workers > 1``. With a
    ``timeout`` the batch returns the results that were fully computed when
    the deadline passed; unfinished pairs are dropped, never half-built.
    Queued pairs are cancelled, but pairs already running when the deadline
    passes keep their worker thread until they finish. The ranker does not
    join those threads, so a batch can return while its pool is still busy.
    Scoring is pure, so their late results are simply discarded.
    """

    def __init__(
        self,
        *,
        max_workers: int = 1,
        max_suggestions: int = DEFAULT_MAX_SUGGESTIONS,
    ) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1 (got {max_workers})")
        self.max_workers = max_workers
        self.max_suggestions = max_suggestions

    def rank(
        self,
        candidate: CandidateProfile,
        jobs: Sequence[JobPosting],
        limit: int,
        *,
        as_of: date,
        timeout: float | None = None,
    ) -> list[MatchResult]:
        """Rank jobs for a candidate.

        Sort order: match score descending, then newer ``published_at``,
        then ``job_id`` ascending. Truncation to ``limit`` happens after
        sorting.
        """
        results = self._score_all(
            list(jobs),
            lambda job: build_match_result(
                candidate, job, as_of=as_of, max_suggestions=self.max_suggestions
            ),
            timeout=timeout,
        )
        results.sort(key=_job_sort_key)
        return results[:limit]

    def rank_candidates(
        self,
        job: JobPosting,
        candidates: Sequence[CandidateProfile],
        limit: int,
        *,
        as_of: date,
        timeout: float | None = None,
    ) -> list[MatchResult]:
        """Rank candidates for a job (score descending, then candidate id)."""
        results = self._score_all(
            list(candidates),
            lambda candidate: build_match_result(
                candidate, job, as_of=as_of, max_suggestions=self.max_suggestions
            ),
            timeout=timeout,
        )
        results.sort(key=_candidate_sort_key)
        return results[:limit]

    def _score_all(
        self,
        items: list[T],
        score: Callable[[T], MatchResult],
        *,
        timeout: float | None,
    ) -> list[MatchResult]:
        if not items:
            return []

        start = time.monotonic()
        if self.max_workers == 1 and timeout is None:
            results = [score(item) for item in items]
        else:
            results = self._score_concurrently(items, score, timeout)

        logger.debug(
            "Scored %d/%d pairs in %.3fs",
            len(results),
            len(items),
            time.monotonic() - start,
        )
        return results

    def _score_concurrently(
        self,
        items: list[T],
        score: Callable[[T], MatchResult],
        timeout: float | None,
    ) -> list[MatchResult]:
        pool = ThreadPoolExecutor(
            max_workers=min(self.max_workers, len(items)),
            thread_name_prefix="jobmatch-score",
        )
        try:
            futures: list[Future[MatchResult]] = [
                pool.submit(score, item) for item in items
            ]
            done, not_done = wait(futures, timeout=timeout)
            if not_done:
                logger.warning(
                    "Scoring deadline of %.3fs reached: returning %d of %d results",
                    timeout,
                    len(done),
                    len(futures),
                )
            # Keep input order for completed futures; errors propagate.
            return [future.result() for future in futures if future in done]
        finally:
            pool.shutdown(wait=False, cancel_futures=True)
