"""Tri-state reduction of listener results."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from hookchain.models import ConsensusSummary


def summarize_results(results: Sequence[Any]) -> ConsensusSummary:
    """Bucket results into successes (``True``), failures (``False``) and
    don't-cares (``None``), then pick the outcome.

    Success dominance is checked first, failure dominance second. A chain with
    only don't-cares (or no listeners at all) yields ``None``; any other mix of
    ``True`` and ``False`` falls back to ``True``.
    """
    successes = sum(1 for result in results if result is True)
    failures = sum(1 for result in results if result is False)
    dont_cares = sum(1 for result in results if result is None)
    total = len(results)

    outcome: bool | None
    if successes and successes + dont_cares == total:
        outcome = True
    elif failures and failures + dont_cares == total:
        outcome = False
    elif dont_cares == total:
        outcome = None
    else:
        outcome = True

    return ConsensusSummary(
        successes=successes,
        failures=failures,
        dont_cares=dont_cares,
        total=total,
        outcome=outcome,
    )


def join_results(results: Sequence[Any]) -> bool | None:
    return summarize_results(results).outcome
