"""
Consumption series, summary and workload breakdown models.

``ConsumptionPoint`` is one month of a trajectory. Historical points carry the
realized amount in ``consumed``; projected points have ``consumed == 0`` and
the forecast amount in ``projected``. ``cumulative`` continues across the
history/projection boundary.

``Summary`` aggregates a trajectory against its commitment, and
``WorkloadBreakdown`` decomposes the run rate by category.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from commitment_forecaster.taxonomy.workload_taxonomy import WorkloadCategory

RiskLevel = Literal["low", "medium", "high"]
ServiceTrend = Literal["growing", "stable", "declining"]

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class ConsumptionPoint(BaseModel):
    """One month of consumption.

    Attributes:
        month: Calendar month as ``YYYY-MM``.
        consumed: Realized consumption (0 for future months).
        projected: Projected consumption for the month.
        cumulative: Consumption to date including this month.
        run_rate: Monthly run rate snapshot.
    """

    model_config = ConfigDict(frozen=True)

    month: str = Field(pattern=MONTH_PATTERN)
    consumed: float = Field(ge=0)
    projected: float = Field(ge=0)
    cumulative: float = Field(ge=0)
    run_rate: float = Field(ge=0)


class Summary(BaseModel):
    """Aggregate position of a commitment against its trajectory.

    ``total_remaining`` is negative when consumption has already exceeded the
    commitment; ``percent_consumed`` is then above 100.
    """

    model_config = ConfigDict(frozen=True)

    total_consumed: float = Field(ge=0)
    total_remaining: float
    percent_consumed: float = Field(ge=0)
    months_elapsed: int = Field(ge=0)
    months_remaining: int = Field(ge=0)
    current_monthly_run_rate: float = Field(ge=0)
    projected_end_consumption: float = Field(ge=0)
    projected_shortfall: float = Field(ge=0)
    projected_overage: float = Field(ge=0)
    on_track: bool
    risk_level: RiskLevel


class ServiceConsumption(BaseModel):
    """Representative service within a workload category."""

    model_config = ConfigDict(frozen=True)

    name: str
    monthly_spend: float = Field(ge=0)
    trend: ServiceTrend


class WorkloadBreakdown(BaseModel):
    """Share of the run rate attributed to one workload category.

    Attributes:
        category: Display label from the category registry.
        category_key: Registry key of the category.
        monthly_consumption: Monthly spend attributed to the category.
        percent_of_total: Share of the run rate, in [0, 100].
        growth_rate: Assumed annual growth of the category, in percent.
        services: Up to three representative services.
    """

    model_config = ConfigDict(frozen=True)

    category: str
    category_key: WorkloadCategory
    monthly_consumption: float = Field(ge=0)
    percent_of_total: float = Field(ge=0, le=100)
    growth_rate: float
    services: tuple[ServiceConsumption, ...] = Field(default=(), max_length=3)
