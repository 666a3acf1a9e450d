"""
Commitment contract and projection input models.

``Commitment`` is the contract itself: a fixed spend amount to be consumed
over a fixed term. ``PlannedWorkload`` describes incremental consumption
expected to come online during the term. ``ProjectionRequest`` bundles both
with the current run rate and growth assumption. It is the single input of
``generate_projection()``.

All models are frozen. Validation failures raise ``pydantic.ValidationError``
(a ``ValueError`` subclass) before any computation starts.
"""

from __future__ import annotations

import math
from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from commitment_forecaster.taxonomy.workload_taxonomy import WorkloadCategory

Currency = Literal["USD", "EUR", "GBP", "JPY", "AUD"]


class Commitment(BaseModel):
    """A spend commitment agreed for a fixed term.

    Attributes:
        total_commitment: Total amount to be consumed over the term (> 0).
        term_months: Length of the term in months (> 0).
        start_date: First day of the term.
        end_date: Last day of the term; must be after ``start_date``.
        currency: ISO currency code of all amounts.
    """

    model_config = ConfigDict(frozen=True)

    total_commitment: float
    term_months: int
    start_date: date
    end_date: date
    currency: Currency = "USD"

    @field_validator("total_commitment")
    @classmethod
    def validate_total_positive(cls, v: float) -> float:
        if not math.isfinite(v) or v <= 0:
            raise ValueError(f"total_commitment must be a positive finite number, got {v}.")
        return v

    @field_validator("term_months")
    @classmethod
    def validate_term_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"term_months must be positive, got {v}.")
        return v

    @model_validator(mode="after")
    def validate_date_order(self) -> "Commitment":
        if self.end_date <= self.start_date:
            raise ValueError(
                f"end_date ({self.end_date}) must be after start_date ({self.start_date})."
            )
        return self


class PlannedWorkload(BaseModel):
    """An incremental workload expected to start consuming during the term.

    The workload ramps linearly from zero to ``estimated_monthly_consumption``
    over ``ramp_up_months``, beginning ``start_month`` months from now.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    category: WorkloadCategory
    estimated_monthly_consumption: float = Field(ge=0, allow_inf_nan=False)
    start_month: int = Field(ge=0)
    ramp_up_months: int = 1

    @field_validator("name")
    @classmethod
    def validate_name_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("name must not be empty.")
        return v.strip()

    @field_validator("ramp_up_months")
    @classmethod
    def validate_ramp_up(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"ramp_up_months must be >= 1, got {v}.")
        return v


class ProjectionRequest(BaseModel):
    """Input to ``generate_projection()``.

    Attributes:
        commitment: The contract being forecast.
        current_monthly_consumption: Current monthly run rate (>= 0).
        growth_rate_percent: Annual organic growth rate in percent; must be
            greater than -100.
        planned_workloads: Incremental workloads layered on the base run rate.
    """

    model_config = ConfigDict(frozen=True)

    commitment: Commitment
    current_monthly_consumption: float
    growth_rate_percent: float = 0.0
    planned_workloads: tuple[PlannedWorkload, ...] = ()

    @field_validator("current_monthly_consumption")
    @classmethod
    def validate_run_rate(cls, v: float) -> float:
        # 0 is a valid, degenerate run rate (nothing is being consumed)
        if not math.isfinite(v) or v < 0:
            raise ValueError(
                f"current_monthly_consumption must be a finite number >= 0, got {v}."
            )
        return v

    @field_validator("growth_rate_percent")
    @classmethod
    def validate_growth_rate(cls, v: float) -> float:
        if not math.isfinite(v) or v <= -100.0:
            raise ValueError(f"growth_rate_percent must be a finite number > -100, got {v}.")
        return v
