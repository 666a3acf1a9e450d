"""
Historical consumption synthesis.

Only the current run rate is known for the elapsed part of a commitment, so
the history is back-filled: each past month is the current run rate
discounted by an assumed month-over-month growth rate, with bounded
multiplicative noise so the series looks like realized spend.

    amount_i = run_rate × (1 + g) ^ -(months_elapsed − i) × u_i
    u_i ~ Uniform(noise_low, noise_high)

The noise is drawn from an injected ``random.Random``; pass a seeded
generator (or ``noise=(1.0, 1.0)``) for reproducible output.
"""

from __future__ import annotations

import logging
import random
from datetime import date
from typing import Optional

from commitment_forecaster.models.consumption import ConsumptionPoint
from commitment_forecaster.utils.time_utils import month_label

logger = logging.getLogger(__name__)

DEFAULT_MONTHLY_GROWTH = 0.03
DEFAULT_MAX_MONTHS = 24
DEFAULT_NOISE: tuple[float, float] = (0.9, 1.1)


def synthesize_history(
    months_elapsed: int,
    run_rate: float,
    start_date: date,
    rng: Optional[random.Random] = None,
    monthly_growth: float = DEFAULT_MONTHLY_GROWTH,
    max_months: int = DEFAULT_MAX_MONTHS,
    noise: tuple[float, float] = DEFAULT_NOISE,
) -> list[ConsumptionPoint]:
    """Back-fill a consumption history from the current run rate.

    Args:
        months_elapsed: Whole months since commitment start (>= 0).
        run_rate: Current monthly run rate (>= 0).
        start_date: Commitment start; point ``i`` is labelled start + i months.
        rng: Random source for the perturbation. ``None`` uses an unseeded
            ``random.Random()``.
        monthly_growth: Assumed month-over-month growth used to discount
            the run rate into the past.
        max_months: Cap on the number of points produced.
        noise: ``(low, high)`` bounds of the multiplicative perturbation.

    Returns:
        ``min(months_elapsed, max_months)`` points in chronological order.
        ``projected`` and ``run_rate`` equal ``consumed`` on every point.

    Raises:
        ValueError: If ``months_elapsed`` or ``run_rate`` is negative, or the
            noise band is inverted.
    """
    if months_elapsed < 0:
        raise ValueError(f"months_elapsed must be >= 0, got {months_elapsed}.")
    if run_rate < 0:
        raise ValueError(f"run_rate must be >= 0, got {run_rate}.")
    low, high = noise
    if not 0.0 < low <= high:
        raise ValueError(f"noise must satisfy 0 < low <= high, got {noise}.")

    rng = rng or random.Random()
    history: list[ConsumptionPoint] = []
    cumulative = 0.0

    for i in range(min(months_elapsed, max_months)):
        months_ago = months_elapsed - i
        factor = (1.0 + monthly_growth) ** -months_ago
        amount = run_rate * factor * rng.uniform(low, high)
        cumulative += amount
        history.append(
            ConsumptionPoint(
                month=month_label(start_date, i),
                consumed=amount,
                projected=amount,
                cumulative=cumulative,
                run_rate=amount,
            )
        )

    logger.debug(
        "Synthesized %d historical month(s) | months_elapsed=%d cumulative=%.2f",
        len(history), months_elapsed, cumulative,
    )
    return history
