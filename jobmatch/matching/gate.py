"""Entitlement gate: strip match insights for non-entitled callers.

The membership check itself belongs to the membership service; this module
only receives its verdict as a boolean. Scoring always runs in full, the
gate is applied to the finished results.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable

from jobmatch.matching.models import MatchResult


def apply_entitlement(result: MatchResult, entitled: bool) -> MatchResult:
    """Return the caller-facing view of a result.

    Entitled callers get the result unchanged. Others get a copy with
    ``breakdown``, ``details`` and ``suggestions`` removed.
    """
    if entitled:
        return result
    return dataclasses.replace(result, breakdown=None, details=None, suggestions=None)


def gate_results(results: Iterable[MatchResult], entitled: bool) -> list[MatchResult]:
    """Apply :func:`apply_entitlement` to every result, preserving order."""
    return [apply_entitlement(result, entitled) for result in results]
