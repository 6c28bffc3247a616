"""
Result aggregation

Folds a finished wave's outcomes into result entries and running totals.
No I/O; the dispatcher decides when to apply the fold.
"""

from dataclasses import replace
from datetime import datetime
from typing import Iterable, Mapping, Optional, Union

from .batch import LookupOutcome
from .models import DomainResult, DomainStatus, ProcessingStats, utcnow


def fold_wave(
    outcomes: Mapping[str, Union[LookupOutcome, bool]],
    stats: ProcessingStats,
    now: Optional[datetime] = None,
) -> tuple[list[DomainResult], ProcessingStats]:
    """
    Turn one wave's outcomes into new results and updated stats.

    Args:
        outcomes: domain -> outcome (tagged or plain bool), in result order
        stats: Totals before this wave
        now: Completion time stamped on every result (defaults to now, UTC)

    Returns:
        Tuple of (new results, updated stats)
    """
    now = now or utcnow()
    results = []
    available = registered = errors = 0

    for domain, outcome in outcomes.items():
        if isinstance(outcome, LookupOutcome):
            is_available = outcome.collapse()
            if not outcome.is_ok:
                errors += 1
        else:
            is_available = bool(outcome)

        if is_available:
            available += 1
        else:
            registered += 1

        results.append(DomainResult(
            domain=domain,
            status=DomainStatus.AVAILABLE if is_available else DomainStatus.REGISTERED,
            timestamp=now,
        ))

    new_stats = replace(
        stats,
        processed=stats.processed + len(results),
        available=stats.available + available,
        registered=stats.registered + registered,
        errors=stats.errors + errors,
    )
    return results, new_stats


def summarize(
    results: Iterable[DomainResult],
    total: Optional[int] = None,
    outcomes: Optional[Mapping[str, Union[LookupOutcome, bool]]] = None,
) -> ProcessingStats:
    """
    Recompute counts from a result list.

    Results alone cannot tell a failed lookup from a registered domain, so
    `errors` is only filled when the tagged outcomes are passed as well.
    """
    results = list(results)
    available = sum(1 for r in results if r.is_available)
    errors = 0
    if outcomes is not None:
        errors = sum(
            1 for r in results
            if isinstance(outcomes.get(r.domain), LookupOutcome) and not outcomes[r.domain].is_ok
        )
    return ProcessingStats(
        total=total if total is not None else len(results),
        processed=len(results),
        available=available,
        registered=len(results) - available,
        errors=errors,
    )
