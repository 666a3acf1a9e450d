"""
Consumption velocity analysis: current vs. required monthly pace.

    required_velocity  = total_remaining / months_remaining
    velocity_gap       = required_velocity − current_run_rate
    velocity_ratio     = current_run_rate / required_velocity
    days_to_commitment = total_remaining / current_run_rate × 30

Trajectory status (first match wins)
------------------------------------
    ratio >= 1.1   → ahead
    ratio >= 0.9   → on-track
    ratio >= 0.7   → behind
    otherwise      → at-risk

Degenerate states
-----------------
    months_remaining == 0      → "complete"; required, gap and ratio are None
    total_remaining <= 0       → "ahead"; required is 0, ratio is None
    run rate == 0              → days_to_commitment is math.inf
                                 (0.0 if nothing remains)
"""

from __future__ import annotations

import math

from commitment_forecaster.models.projection import Projection, TrajectoryStatus, VelocityMetrics
from commitment_forecaster.utils.time_utils import DAYS_PER_MONTH

AHEAD_RATIO = 1.1
ON_TRACK_RATIO = 0.9
BEHIND_RATIO = 0.7


def classify_trajectory(velocity_ratio: float) -> TrajectoryStatus:
    """Map a velocity ratio to a trajectory status."""
    if velocity_ratio >= AHEAD_RATIO:
        return "ahead"
    if velocity_ratio >= ON_TRACK_RATIO:
        return "on-track"
    if velocity_ratio >= BEHIND_RATIO:
        return "behind"
    return "at-risk"


def days_to_commitment(total_remaining: float, run_rate: float) -> float:
    """Days to consume what remains at ``run_rate``; ``math.inf`` if never."""
    if total_remaining <= 0:
        return 0.0
    if run_rate <= 0:
        return math.inf
    return total_remaining / run_rate * DAYS_PER_MONTH


def analyze_velocity(projection: Projection) -> VelocityMetrics:
    """Compute velocity metrics for a completed projection."""
    summary = projection.summary
    run_rate = summary.current_monthly_run_rate
    remaining = summary.total_remaining
    days = days_to_commitment(remaining, run_rate)

    if summary.months_remaining == 0:
        return VelocityMetrics(
            monthly_velocity=run_rate,
            trajectory_status="complete",
            days_to_commitment=days,
            term_complete=True,
        )

    required = max(remaining, 0.0) / summary.months_remaining
    gap = required - run_rate

    if required == 0:
        return VelocityMetrics(
            monthly_velocity=run_rate,
            required_velocity=0.0,
            velocity_gap=gap,
            trajectory_status="ahead",
            days_to_commitment=days,
        )

    ratio = run_rate / required
    return VelocityMetrics(
        monthly_velocity=run_rate,
        required_velocity=required,
        velocity_gap=gap,
        velocity_ratio=ratio,
        trajectory_status=classify_trajectory(ratio),
        days_to_commitment=days,
    )
