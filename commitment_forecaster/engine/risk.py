"""
Risk classification and summary aggregation.

Consumption ratio
-----------------
    expected_percent = min(months_elapsed, term_months) / term_months × 100
    ratio            = percent_consumed / expected_percent

Risk level (thresholds from ``RiskConfig``)
-------------------------------------------
    ratio <  0.7          → high
    0.7 <= ratio < 0.9    → medium
    ratio >= 0.9          → low       (also on_track = True)

Zero expected percent
---------------------
At the very start of a term nothing is expected to be consumed yet, so the
backward-looking ratio is 0/0. The ratio then falls back to the
forward-looking ``projected_end_consumption / total_commitment`` and is
classified with the same thresholds.
"""

from __future__ import annotations

import logging
from typing import Sequence

from commitment_forecaster.config import RiskConfig
from commitment_forecaster.models.commitment import Commitment
from commitment_forecaster.models.consumption import ConsumptionPoint, RiskLevel, Summary

logger = logging.getLogger(__name__)

_DEFAULT_RISK = RiskConfig()


def consumption_ratio(
    percent_consumed: float,
    months_elapsed: int,
    term_months: int,
    projected_end_consumption: float,
    total_commitment: float,
) -> float:
    """Actual vs. expected consumption pace.

    Falls back to ``projected_end_consumption / total_commitment`` when no
    time has elapsed (expected percent is 0).
    """
    expected_percent = min(months_elapsed, term_months) / term_months * 100.0
    if expected_percent <= 0:
        return projected_end_consumption / total_commitment
    return percent_consumed / expected_percent


def classify_risk(ratio: float, thresholds: RiskConfig = _DEFAULT_RISK) -> RiskLevel:
    """Map a consumption ratio to a risk level.

    Rules (evaluated in order, first match wins):
        1. HIGH   : ratio < high_ratio
        2. MEDIUM : ratio < medium_ratio
        3. LOW    : everything else
    """
    if ratio < thresholds.high_ratio:
        return "high"
    if ratio < thresholds.medium_ratio:
        return "medium"
    return "low"


def build_summary(
    commitment: Commitment,
    history: Sequence[ConsumptionPoint],
    projection: Sequence[ConsumptionPoint],
    months_elapsed: int,
    months_remaining: int,
    run_rate: float,
    thresholds: RiskConfig = _DEFAULT_RISK,
) -> Summary:
    """Aggregate a trajectory into a ``Summary``.

    Args:
        commitment: The contract.
        history: Historical series (realized consumption).
        projection: Projected series; may be empty.
        months_elapsed: Whole months since start (drives expected pace).
        months_remaining: Months left in the term.
        run_rate: Current monthly run rate.
        thresholds: Ratio thresholds for risk classification.

    Returns:
        Frozen ``Summary``.
    """
    total_consumed = sum(p.consumed for p in history)
    total = commitment.total_commitment
    percent_consumed = total_consumed / total * 100.0

    projected_end = projection[-1].cumulative if projection else total_consumed

    ratio = consumption_ratio(
        percent_consumed=percent_consumed,
        months_elapsed=months_elapsed,
        term_months=commitment.term_months,
        projected_end_consumption=projected_end,
        total_commitment=total,
    )
    risk_level = classify_risk(ratio, thresholds)

    logger.debug(
        "Summary | consumed=%.2f (%.1f%%) ratio=%.3f risk=%s",
        total_consumed, percent_consumed, ratio, risk_level,
    )

    return Summary(
        total_consumed=total_consumed,
        total_remaining=total - total_consumed,
        percent_consumed=percent_consumed,
        months_elapsed=months_elapsed,
        months_remaining=months_remaining,
        current_monthly_run_rate=run_rate,
        projected_end_consumption=projected_end,
        projected_shortfall=max(0.0, total - projected_end),
        projected_overage=max(0.0, projected_end - total),
        on_track=ratio >= thresholds.medium_ratio,
        risk_level=risk_level,
    )
