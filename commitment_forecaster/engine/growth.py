"""
Forward consumption projection under compound growth plus planned workloads.

Formula for future month ``i`` (1-based):

    monthly_rate = (1 + annual% / 100) ^ (1/12) − 1
    base_i       = run_rate × (1 + monthly_rate) ^ i
    amount_i     = base_i + Σ workload_contribution(w, i)

Planned workloads ramp linearly: a workload starting at month ``s`` with a
ramp-up of ``r`` months contributes ``estimate × k / r`` in its ``k``-th
active month (``k = i − s + 1``, ``1 ≤ k ≤ r``) and the full estimate from
month ``s + r`` onward. Before month ``s`` it contributes nothing.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable

from commitment_forecaster.models.commitment import PlannedWorkload
from commitment_forecaster.models.consumption import ConsumptionPoint
from commitment_forecaster.utils.time_utils import month_label

logger = logging.getLogger(__name__)


def monthly_growth_rate(annual_growth_percent: float) -> float:
    """Convert an annual growth percentage to the equivalent monthly rate.

    Raises:
        ValueError: If ``annual_growth_percent <= -100``.
    """
    if annual_growth_percent <= -100.0:
        raise ValueError(
            f"annual_growth_percent must be > -100, got {annual_growth_percent}."
        )
    return (1.0 + annual_growth_percent / 100.0) ** (1.0 / 12.0) - 1.0


def workload_contribution(workload: PlannedWorkload, month: int) -> float:
    """Consumption a planned workload adds in future month ``month`` (1-based)."""
    if month < workload.start_month:
        return 0.0
    months_active = month - workload.start_month + 1
    if months_active <= workload.ramp_up_months:
        return workload.estimated_monthly_consumption * months_active / workload.ramp_up_months
    return workload.estimated_monthly_consumption


def project_growth(
    months_remaining: int,
    run_rate: float,
    growth_rate_percent: float,
    planned_workloads: Iterable[PlannedWorkload],
    carried_cumulative: float,
    anchor_date: date,
) -> list[ConsumptionPoint]:
    """Project monthly consumption over the rest of the term.

    Args:
        months_remaining: Months left in the term (>= 0). 0 yields ``[]``.
        run_rate: Current monthly run rate (>= 0).
        growth_rate_percent: Annual organic growth, in percent.
        planned_workloads: Incremental workloads to layer on top.
        carried_cumulative: Cumulative consumption at the end of history.
        anchor_date: Date in the first projected month; month ``i`` is
            labelled ``anchor_date + (i - 1)`` months.

    Returns:
        One point per remaining month. ``consumed`` is 0; ``projected`` and
        ``run_rate`` hold the month's projected amount; ``cumulative``
        continues from ``carried_cumulative``.

    Raises:
        ValueError: If ``months_remaining`` or ``run_rate`` is negative, or
            the growth rate is <= -100%.
    """
    if months_remaining < 0:
        raise ValueError(f"months_remaining must be >= 0, got {months_remaining}.")
    if run_rate < 0:
        raise ValueError(f"run_rate must be >= 0, got {run_rate}.")

    monthly_rate = monthly_growth_rate(growth_rate_percent)
    workloads = list(planned_workloads)

    projection: list[ConsumptionPoint] = []
    cumulative = carried_cumulative

    for i in range(1, months_remaining + 1):
        amount = run_rate * (1.0 + monthly_rate) ** i
        for workload in workloads:
            amount += workload_contribution(workload, i)

        cumulative += amount
        projection.append(
            ConsumptionPoint(
                month=month_label(anchor_date, i - 1),
                consumed=0.0,
                projected=amount,
                cumulative=cumulative,
                run_rate=amount,
            )
        )

    logger.debug(
        "Projected %d month(s) | monthly_rate=%.5f workloads=%d end_cumulative=%.2f",
        len(projection), monthly_rate, len(workloads), cumulative,
    )
    return projection
