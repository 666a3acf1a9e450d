"""
Projection orchestration for the Commitment Forecaster.

``generate_projection()`` composes the engine in a deterministic sequence:

  Step 1 Timing:      months elapsed / remaining from ``as_of``.
  Step 2 History:     synthesize (or accept a supplied) historical series.
  Step 3 Projection:  compound growth + planned workload ramps, starting
                      at the current contract month (start + elapsed).
  Step 4 Summary:     totals, shortfall/overage, risk level, on-track flag.
  Step 5 Allocation:  run-rate breakdown by workload category.
  Step 6 Recommend:   ordered rule table, stable-sorted by priority.

Every call builds a new frozen ``Projection`` from its inputs alone; the
only non-determinism is the history perturbation, controlled by ``rng`` or
``config.history.seed``.

Velocity analysis is the secondary entry point and is re-exported here as
``analyze_velocity``.
"""

from __future__ import annotations

import logging
import random
from datetime import date
from typing import Optional, Sequence

from commitment_forecaster.config import AppConfig
from commitment_forecaster.engine.allocation import allocate_workload
from commitment_forecaster.engine.growth import project_growth
from commitment_forecaster.engine.history import synthesize_history
from commitment_forecaster.engine.risk import build_summary
from commitment_forecaster.engine.velocity import analyze_velocity
from commitment_forecaster.models.commitment import ProjectionRequest
from commitment_forecaster.models.consumption import ConsumptionPoint
from commitment_forecaster.models.projection import Projection
from commitment_forecaster.recommendations.rules import generate_recommendations
from commitment_forecaster.utils.time_utils import add_months, months_between, utc_today

logger = logging.getLogger(__name__)

__all__ = ["analyze_velocity", "generate_projection"]


def generate_projection(
    request: ProjectionRequest,
    as_of: Optional[date] = None,
    rng: Optional[random.Random] = None,
    history: Optional[Sequence[ConsumptionPoint]] = None,
    config: Optional[AppConfig] = None,
) -> Projection:
    """Forecast a commitment from its current run rate.

    Args:
        request: Commitment, run rate, growth assumption and planned workloads.
        as_of: Reference date ("now"). Defaults to today (UTC).
        rng: Random source for history synthesis. Defaults to
            ``random.Random(config.history.seed)``.
        history: Pre-computed historical series. When given, synthesis is
            skipped; the series must end before the current contract
            month (start + months elapsed), where the projection begins.
        config: Engine tunables. Defaults to ``AppConfig()``.

    Returns:
        A new, frozen ``Projection``.

    Raises:
        pydantic.ValidationError: If the assembled trajectory violates an
            ordering or cumulative invariant (e.g. an inconsistent supplied
            history).
    """
    config = config or AppConfig()
    as_of = as_of or utc_today()
    commitment = request.commitment
    run_rate = request.current_monthly_consumption

    # ── Step 1: Timing ────────────────────────────────────────────────────────
    months_elapsed = months_between(commitment.start_date, as_of)
    months_remaining = max(0, commitment.term_months - months_elapsed)

    logger.info(
        "Projecting commitment %.2f %s | elapsed=%d remaining=%d run_rate=%.2f growth=%.2f%%",
        commitment.total_commitment, commitment.currency,
        months_elapsed, months_remaining, run_rate, request.growth_rate_percent,
    )

    # ── Step 2: History ───────────────────────────────────────────────────────
    if history is None:
        hist_cfg = config.history
        history = synthesize_history(
            months_elapsed=months_elapsed,
            run_rate=run_rate,
            start_date=commitment.start_date,
            rng=rng or random.Random(hist_cfg.seed),
            monthly_growth=hist_cfg.monthly_growth,
            max_months=hist_cfg.max_months,
            noise=(hist_cfg.noise_low, hist_cfg.noise_high),
        )
    else:
        history = list(history)
        logger.debug("Using supplied history of %d month(s)", len(history))

    # ── Step 3: Projection ────────────────────────────────────────────────────
    total_consumed = sum(p.consumed for p in history)
    projected = project_growth(
        months_remaining=months_remaining,
        run_rate=run_rate,
        growth_rate_percent=request.growth_rate_percent,
        planned_workloads=request.planned_workloads,
        carried_cumulative=total_consumed,
        anchor_date=add_months(commitment.start_date, months_elapsed),
    )

    # ── Step 4: Summary ───────────────────────────────────────────────────────
    summary = build_summary(
        commitment=commitment,
        history=history,
        projection=projected,
        months_elapsed=months_elapsed,
        months_remaining=months_remaining,
        run_rate=run_rate,
        thresholds=config.risk,
    )

    # ── Step 5: Allocation ────────────────────────────────────────────────────
    breakdown = allocate_workload(run_rate)

    # ── Step 6: Recommend ─────────────────────────────────────────────────────
    recommendations = generate_recommendations(
        summary, breakdown, currency=commitment.currency
    )

    logger.info(
        "Projection complete | risk=%s on_track=%s shortfall=%.2f overage=%.2f recs=%d",
        summary.risk_level, summary.on_track,
        summary.projected_shortfall, summary.projected_overage, len(recommendations),
    )

    return Projection(
        commitment=commitment,
        consumption_history=history,
        projected_consumption=projected,
        summary=summary,
        workload_breakdown=breakdown,
        recommendations=recommendations,
    )
