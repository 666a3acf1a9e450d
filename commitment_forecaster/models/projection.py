"""
Projection output models.

``Projection`` is the aggregate root returned by ``generate_projection()``:
the commitment, its historical and projected series, the summary, the
workload breakdown and the prioritized recommendations. It is frozen and
validates the trajectory invariants on construction:

  - each series is in chronological order with no duplicate months,
  - no month appears in both the history and the projection,
  - cumulative consumption never decreases across the full trajectory.

``VelocityMetrics`` is the output of the secondary entry point,
``analyze_velocity()``.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from commitment_forecaster.models.commitment import Commitment
from commitment_forecaster.models.consumption import (
    ConsumptionPoint,
    Summary,
    WorkloadBreakdown,
)

RecommendationType = Literal["accelerate", "optimize", "migrate", "expand"]
Priority = Literal["high", "medium", "low"]
TrajectoryStatus = Literal["ahead", "on-track", "behind", "at-risk", "complete"]

PRIORITY_ORDER: dict[str, int] = {"high": 0, "medium": 1, "low": 2}


class Recommendation(BaseModel):
    """A corrective action for the commitment position.

    Attributes:
        type: Action family: accelerate, optimize, migrate or expand.
        priority: ``"high"``, ``"medium"`` or ``"low"``.
        title: Short headline.
        description: Human-readable explanation.
        estimated_impact: Monetary effect on consumption over the remaining
            term. Negative values are cost reductions.
        timeline: Indicative time to realize the impact, e.g. ``"1-3 months"``.
    """

    model_config = ConfigDict(frozen=True)

    type: RecommendationType
    priority: Priority
    title: str
    description: str
    estimated_impact: float
    timeline: str

    @field_validator("description")
    @classmethod
    def validate_description_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("description must not be empty.")
        return v.strip()


class Projection(BaseModel):
    """Full forecast of a commitment. Never mutated after construction."""

    model_config = ConfigDict(frozen=True)

    commitment: Commitment
    consumption_history: tuple[ConsumptionPoint, ...]
    projected_consumption: tuple[ConsumptionPoint, ...]
    summary: Summary
    workload_breakdown: tuple[WorkloadBreakdown, ...]
    recommendations: tuple[Recommendation, ...]

    @model_validator(mode="after")
    def validate_trajectory(self) -> "Projection":
        for label, series in (
            ("consumption_history", self.consumption_history),
            ("projected_consumption", self.projected_consumption),
        ):
            months = [p.month for p in series]
            if months != sorted(months):
                raise ValueError(f"{label} is not in chronological order.")
            if len(months) != len(set(months)):
                raise ValueError(f"{label} contains duplicate months.")

        if self.consumption_history and self.projected_consumption:
            last_hist = self.consumption_history[-1].month
            first_proj = self.projected_consumption[0].month
            if first_proj <= last_hist:
                raise ValueError(
                    f"projected_consumption starts at {first_proj}, "
                    f"not after the last historical month {last_hist}."
                )

        previous = 0.0
        for point in self.trajectory:
            # 1e-6 slack absorbs float accumulation noise
            if point.cumulative + 1e-6 < previous:
                raise ValueError(
                    f"cumulative decreases at {point.month} "
                    f"({previous} -> {point.cumulative})."
                )
            previous = point.cumulative
        return self

    @property
    def trajectory(self) -> tuple[ConsumptionPoint, ...]:
        """History followed by projection."""
        return self.consumption_history + self.projected_consumption


class VelocityMetrics(BaseModel):
    """Current vs. required monthly consumption velocity.

    Degenerate states are represented, not raised:

    - ``term_complete`` is ``True`` and ``trajectory_status`` is
      ``"complete"`` when no months remain; required velocity, gap and
      ratio are then ``None``.
    - ``velocity_ratio`` is ``None`` when nothing remains to consume
      (status ``"ahead"``).
    - ``days_to_commitment`` is ``math.inf`` when the run rate is 0 and
      an amount remains.
    """

    model_config = ConfigDict(frozen=True)

    monthly_velocity: float
    required_velocity: Optional[float] = None
    velocity_gap: Optional[float] = None
    velocity_ratio: Optional[float] = None
    trajectory_status: TrajectoryStatus
    days_to_commitment: float
    term_complete: bool = False
