"""Tests for MatchRanker."""

from __future__ import annotations

import threading
from datetime import datetime

import pytest


class TestBuildMatchResult:
    """Test single-pair result construction."""

    def test_build_match_result_populates_all_fields(
        self, frontend_candidate, frontend_job, as_of
    ):
        """A freshly built result should carry full details."""
        from jobmatch.matching.ranker import build_match_result

        result = build_match_result(frontend_candidate, frontend_job, as_of=as_of)

        assert result.job_id == "job-1"
        assert result.candidate_id == "cand-1"
        assert result.breakdown is not None
        assert result.details is not None
        assert result.suggestions is not None
        assert result.job_is_remote is True
        assert list(result.details.matched_skills) == ["React"]
        assert list(result.details.missing_skills) == ["TypeScript"]


class TestRank:
    """Test ranking jobs for a candidate."""

    def test_rank_sorts_by_score_descending(self, make_candidate, make_job, as_of):
        """Higher match scores should come first."""
        from jobmatch.matching.ranker import MatchRanker

        candidate = make_candidate(skills=["Python", "SQL"])
        jobs = [
            make_job("low", required_skills=["Rust", "Go"]),
            make_job("high", required_skills=["Python", "SQL"]),
            make_job("mid", required_skills=["Python", "Go"]),
        ]

        results = MatchRanker().rank(candidate, jobs, 10, as_of=as_of)

        assert [r.job_id for r in results] == ["high", "mid", "low"]
        scores = [r.match_score for r in results]
        assert scores == sorted(scores, reverse=True)

    def test_rank_truncates_after_sorting(self, make_candidate, make_job, as_of):
        """Truncation should keep the best results."""
        from jobmatch.matching.ranker import MatchRanker

        candidate = make_candidate(skills=["Python"])
        jobs = [
            make_job("a", required_skills=["Go"]),
            make_job("b", required_skills=["Python"]),
            make_job("c", required_skills=["Rust"]),
        ]

        results = MatchRanker().rank(candidate, jobs, 1, as_of=as_of)

        assert [r.job_id for r in results] == ["b"]

    @pytest.mark.parametrize("limit", [1, 2, 5])
    def test_rank_length_is_min_of_limit_and_jobs(
        self, make_candidate, make_job, as_of, limit
    ):
        """The result length should be min(limit, len(jobs))."""
        from jobmatch.matching.ranker import MatchRanker

        jobs = [make_job(f"job-{i}") for i in range(3)]

        results = MatchRanker().rank(make_candidate(), jobs, limit, as_of=as_of)

        assert len(results) == min(limit, len(jobs))

    def test_rank_empty_jobs_returns_empty(self, make_candidate, as_of):
        """No jobs should give no results."""
        from jobmatch.matching.ranker import MatchRanker

        assert MatchRanker().rank(make_candidate(), [], 10, as_of=as_of) == []

    def test_rank_ties_broken_by_recency_then_job_id(
        self, make_candidate, make_job, as_of
    ):
        """Equal scores should order newer jobs first, then by job id."""
        from jobmatch.matching.ranker import MatchRanker

        jobs = [
            make_job("b-undated"),
            make_job("z-old", published_at=datetime(2023, 1, 1)),
            make_job("a-undated"),
            make_job("y-new", published_at=datetime(2023, 6, 1)),
        ]

        results = MatchRanker().rank(make_candidate(), jobs, 10, as_of=as_of)

        assert [r.job_id for r in results] == ["y-new", "z-old", "a-undated", "b-undated"]

    def test_rank_concurrent_matches_inline(self, make_candidate, make_job, as_of):
        """Thread-pool scoring should produce the same ranking as inline."""
        from jobmatch.matching.ranker import MatchRanker

        candidate = make_candidate(skills=["Python", "Go"])
        jobs = [
            make_job(f"job-{i}", required_skills=["Python", "Go", "Rust"][: i % 3 + 1])
            for i in range(12)
        ]

        inline = MatchRanker(max_workers=1).rank(candidate, jobs, 12, as_of=as_of)
        pooled = MatchRanker(max_workers=4).rank(candidate, jobs, 12, as_of=as_of)

        assert inline == pooled

    def test_rank_deadline_returns_completed_subset(
        self, make_candidate, make_job, as_of, monkeypatch
    ):
        """Pairs still running at the deadline should be dropped."""
        from jobmatch.matching import ranker as ranker_module
        from jobmatch.matching.ranker import MatchRanker

        release = threading.Event()
        original = ranker_module.build_match_result

        def _slow_for_blocked(candidate, job, **kwargs):
            if job.id == "blocked":
                release.wait(timeout=5)
            return original(candidate, job, **kwargs)

        monkeypatch.setattr(ranker_module, "build_match_result", _slow_for_blocked)

        jobs = [make_job("fast-1"), make_job("blocked"), make_job("fast-2")]
        try:
            results = MatchRanker(max_workers=3).rank(
                make_candidate(), jobs, 10, as_of=as_of, timeout=0.5
            )
        finally:
            release.set()

        assert sorted(r.job_id for r in results) == ["fast-1", "fast-2"]

    def test_rank_deadline_does_not_join_running_pairs(
        self, make_candidate, make_job, as_of, monkeypatch
    ):
        """A pair running at the deadline finishes later and is discarded."""
        from jobmatch.matching import ranker as ranker_module
        from jobmatch.matching.ranker import MatchRanker

        release = threading.Event()
        finished = threading.Event()
        original = ranker_module.build_match_result

        def _blocked_until_released(candidate, job, **kwargs):
            if job.id == "blocked":
                release.wait(timeout=5)
                result = original(candidate, job, **kwargs)
                finished.set()
                return result
            return original(candidate, job, **kwargs)

        monkeypatch.setattr(ranker_module, "build_match_result", _blocked_until_released)

        jobs = [make_job("fast"), make_job("blocked")]
        try:
            results = MatchRanker(max_workers=2).rank(
                make_candidate(), jobs, 10, as_of=as_of, timeout=0.5
            )
            assert not finished.is_set()
        finally:
            release.set()

        assert finished.wait(timeout=5)
        assert [r.job_id for r in results] == ["fast"]

    def test_ranker_rejects_zero_workers(self):
        """max_workers below 1 should be rejected."""
        from jobmatch.matching.ranker import MatchRanker

        with pytest.raises(ValueError, match="max_workers"):
            MatchRanker(max_workers=0)


class TestRankCandidates:
    """Test ranking candidates for a job."""

    def test_rank_candidates_orders_by_score_then_id(
        self, make_candidate, make_job, as_of
    ):
        """Candidates should be ranked by score, ties by candidate id."""
        from jobmatch.matching.ranker import MatchRanker

        job = make_job(required_skills=["Python", "SQL"])
        candidates = [
            make_candidate("c-2", skills=["Python"]),
            make_candidate("c-3", skills=["Python", "SQL"]),
            make_candidate("c-1", skills=["Python"]),
        ]

        results = MatchRanker().rank_candidates(job, candidates, 10, as_of=as_of)

        assert [r.candidate_id for r in results] == ["c-3", "c-1", "c-2"]
