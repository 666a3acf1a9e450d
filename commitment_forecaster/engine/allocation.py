"""
Workload allocation: splits the run rate across spend categories.

Each category in the distribution receives ``run_rate × percent / 100`` and
is broken down into its first three registry services, whose spend shares
step down by 10 points each (40%, 30%, 20% of the category). Only the lead
service is tagged ``"growing"``.
"""

from __future__ import annotations

from typing import Iterable

from commitment_forecaster.models.consumption import ServiceConsumption, WorkloadBreakdown
from commitment_forecaster.taxonomy.workload_taxonomy import (
    CATEGORY_REGISTRY,
    DEFAULT_DISTRIBUTION,
    WorkloadCategory,
)

MAX_SERVICES = 3
_LEAD_SERVICE_SHARE = 0.4
_SERVICE_SHARE_STEP = 0.1


def allocate_workload(
    total_run_rate: float,
    distribution: Iterable[tuple[WorkloadCategory, float]] = DEFAULT_DISTRIBUTION,
) -> list[WorkloadBreakdown]:
    """Decompose ``total_run_rate`` into per-category breakdowns.

    Args:
        total_run_rate: Current monthly run rate (>= 0).
        distribution: Ordered ``(category, percent)`` pairs.

    Returns:
        One ``WorkloadBreakdown`` per distribution entry, in order.

    Raises:
        ValueError: If ``total_run_rate`` is negative.
    """
    if total_run_rate < 0:
        raise ValueError(f"total_run_rate must be >= 0, got {total_run_rate}.")

    breakdown: list[WorkloadBreakdown] = []
    for category, percent in distribution:
        info = CATEGORY_REGISTRY[category]
        monthly = total_run_rate * percent / 100.0

        services = tuple(
            ServiceConsumption(
                name=name,
                monthly_spend=monthly * (_LEAD_SERVICE_SHARE - i * _SERVICE_SHARE_STEP),
                trend="growing" if i == 0 else "stable",
            )
            for i, name in enumerate(info.typical_services[:MAX_SERVICES])
        )

        breakdown.append(
            WorkloadBreakdown(
                category=info.name,
                category_key=category,
                monthly_consumption=monthly,
                percent_of_total=percent,
                growth_rate=info.avg_growth_rate,
                services=services,
            )
        )
    return breakdown


def category_share(
    breakdown: Iterable[WorkloadBreakdown],
    category: WorkloadCategory,
) -> float | None:
    """Percent of total for ``category``, or ``None`` if it is not allocated."""
    for entry in breakdown:
        if entry.category_key == category:
            return entry.percent_of_total
    return None
