"""
Shared pytest fixtures for the Commitment Forecaster test suite.

Provides:
  - Sample domain objects (commitment, planned workload, request).
  - ``make_summary``: factory for ``Summary`` objects with overridable fields.
  - ``seeded_projection``: a reproducible mid-term projection.
"""

from __future__ import annotations

import random
from datetime import date
from typing import Callable

import pytest

from commitment_forecaster.engine.orchestrator import generate_projection
from commitment_forecaster.models.commitment import (
    Commitment,
    PlannedWorkload,
    ProjectionRequest,
)
from commitment_forecaster.models.consumption import Summary
from commitment_forecaster.models.projection import Projection
from commitment_forecaster.taxonomy.workload_taxonomy import WorkloadCategory


# ── Sample domain object factories ────────────────────────────────────────────

@pytest.fixture
def sample_commitment() -> Commitment:
    """1.2M USD over 12 months starting 2026-01-01."""
    return Commitment(
        total_commitment=1_200_000.0,
        term_months=12,
        start_date=date(2026, 1, 1),
        end_date=date(2027, 1, 1),
        currency="USD",
    )


@pytest.fixture
def sample_workload() -> PlannedWorkload:
    """10K/month workload starting in month 3 with a 4-month ramp."""
    return PlannedWorkload(
        name="Data warehouse migration",
        category=WorkloadCategory.ANALYTICS,
        estimated_monthly_consumption=10_000.0,
        start_month=3,
        ramp_up_months=4,
    )


@pytest.fixture
def sample_request(sample_commitment: Commitment) -> ProjectionRequest:
    """50K/month run rate, 0% growth, no planned workloads."""
    return ProjectionRequest(
        commitment=sample_commitment,
        current_monthly_consumption=50_000.0,
        growth_rate_percent=0.0,
    )


@pytest.fixture
def make_summary() -> Callable[..., Summary]:
    """Factory for ``Summary`` objects; keyword args override the defaults.

    Defaults describe a commitment that is exactly on pace: 600K of 1.2M
    consumed, 6 months left at 100K/month, no shortfall or overage.
    """

    def _make(**overrides) -> Summary:
        fields = dict(
            total_consumed=600_000.0,
            total_remaining=600_000.0,
            percent_consumed=50.0,
            months_elapsed=6,
            months_remaining=6,
            current_monthly_run_rate=100_000.0,
            projected_end_consumption=1_200_000.0,
            projected_shortfall=0.0,
            projected_overage=0.0,
            on_track=True,
            risk_level="low",
        )
        fields.update(overrides)
        return Summary(**fields)

    return _make


@pytest.fixture
def seeded_projection(
    sample_commitment: Commitment,
    sample_workload: PlannedWorkload,
) -> Projection:
    """Mid-term projection (6 months elapsed) with a planned workload, seed 42."""
    request = ProjectionRequest(
        commitment=sample_commitment,
        current_monthly_consumption=80_000.0,
        growth_rate_percent=12.0,
        planned_workloads=(sample_workload,),
    )
    return generate_projection(
        request,
        as_of=date(2026, 7, 20),
        rng=random.Random(42),
    )
