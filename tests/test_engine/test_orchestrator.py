"""
Tests for commitment_forecaster/engine/orchestrator.py.

What we test
------------
generate_projection():
  - Start of term: empty history, flat projection over the full term,
    600K shortfall on a 1.2M commitment, high risk, prioritized
    recommendations.
  - Mid term: history + projection cover the term without gaps or
    overlap; cumulative carries across the boundary and never decreases.
  - Planned workload ramp shows up in the projected amounts.
  - Same seed -> identical projection; config seed is used when no rng.
  - Supplied history replaces synthesis and drives the summary.
  - Fully consumed commitment at term end: on track, no shortfall.
  - Supplied history overlapping the projection is rejected.
  - Risk thresholds come from the config.
  - Velocity analysis is reachable from the orchestrator module.
  - Zero run rate: all-zero trajectory, full shortfall, infinite days to
    commitment.
"""

from __future__ import annotations

import math
import random
from datetime import date

import pytest
from pydantic import ValidationError

from commitment_forecaster.config import AppConfig, HistoryConfig, RiskConfig
from commitment_forecaster.engine.orchestrator import analyze_velocity, generate_projection
from commitment_forecaster.models.commitment import ProjectionRequest
from commitment_forecaster.models.consumption import ConsumptionPoint


# ── Helpers ───────────────────────────────────────────────────────────────────

def _flat_history(months: int, amount: float) -> list[ConsumptionPoint]:
    return [
        ConsumptionPoint(
            month=f"2026-{i + 1:02d}",
            consumed=amount,
            projected=amount,
            cumulative=amount * (i + 1),
            run_rate=amount,
        )
        for i in range(months)
    ]


# ── Start of term ─────────────────────────────────────────────────────────────

class TestStartOfTerm:
    @pytest.fixture
    def projection(self, sample_request):
        return generate_projection(
            sample_request, as_of=date(2026, 1, 1), rng=random.Random(0)
        )

    def test_history_is_empty(self, projection):
        assert projection.consumption_history == ()

    def test_projection_covers_term(self, projection):
        months = [p.month for p in projection.projected_consumption]
        assert months == [f"2026-{m:02d}" for m in range(1, 13)]

    def test_flat_amounts_at_zero_growth(self, projection):
        assert all(p.projected == 50_000.0 for p in projection.projected_consumption)

    def test_final_cumulative(self, projection):
        assert projection.projected_consumption[-1].cumulative == pytest.approx(600_000.0)

    def test_summary(self, projection):
        s = projection.summary
        assert s.months_elapsed == 0
        assert s.months_remaining == 12
        assert s.total_consumed == 0.0
        assert s.projected_shortfall == pytest.approx(600_000.0)
        assert s.projected_overage == 0.0
        assert s.risk_level == "high"
        assert s.on_track is False

    def test_recommendation_order(self, projection):
        titles = [r.title for r in projection.recommendations]
        assert titles == [
            "Accelerate Cloud Migration",
            "AI Platform & Copilot Adoption",
            "Increase AI/ML Investment",
            "Data Platform Modernization",
        ]

    def test_recommendation_impacts(self, projection):
        impacts = {r.title: r.estimated_impact for r in projection.recommendations}
        assert impacts["Accelerate Cloud Migration"] == pytest.approx(300_000.0)
        assert impacts["AI Platform & Copilot Adoption"] == pytest.approx(180_000.0)
        assert impacts["Data Platform Modernization"] == pytest.approx(150_000.0)
        assert impacts["Increase AI/ML Investment"] == pytest.approx(120_000.0)

    def test_breakdown_present(self, projection):
        assert len(projection.workload_breakdown) == 8
        total = sum(b.monthly_consumption for b in projection.workload_breakdown)
        assert total == pytest.approx(50_000.0)


# ── Mid term ──────────────────────────────────────────────────────────────────

class TestMidTerm:
    def test_history_and_projection_split(self, seeded_projection):
        assert len(seeded_projection.consumption_history) == 6
        assert len(seeded_projection.projected_consumption) == 6

    def test_months_contiguous(self, seeded_projection):
        months = [p.month for p in seeded_projection.trajectory]
        assert months == [f"2026-{m:02d}" for m in range(1, 13)]

    def test_cumulative_carries_over(self, seeded_projection):
        history_total = sum(p.consumed for p in seeded_projection.consumption_history)
        first = seeded_projection.projected_consumption[0]
        assert first.cumulative == pytest.approx(history_total + first.projected)

    def test_cumulative_non_decreasing(self, seeded_projection):
        values = [p.cumulative for p in seeded_projection.trajectory]
        assert values == sorted(values)

    def test_summary_matches_history(self, seeded_projection):
        s = seeded_projection.summary
        history_total = sum(p.consumed for p in seeded_projection.consumption_history)
        assert s.total_consumed == pytest.approx(history_total)
        assert s.total_remaining == pytest.approx(1_200_000.0 - history_total)
        assert s.projected_end_consumption == pytest.approx(
            seeded_projection.projected_consumption[-1].cumulative
        )

    def test_shortfall_or_overage_exclusive(self, seeded_projection):
        s = seeded_projection.summary
        assert s.projected_shortfall == 0.0 or s.projected_overage == 0.0

    def test_workload_ramp_visible(self, seeded_projection):
        m = 1.12 ** (1 / 12) - 1
        projected = seeded_projection.projected_consumption
        extras = [p.projected - 80_000.0 * (1 + m) ** i for i, p in enumerate(projected, 1)]
        assert extras == pytest.approx([0.0, 0.0, 2_500.0, 5_000.0, 7_500.0, 10_000.0], abs=1e-6)

    def test_recommendations_sorted_by_priority(self, seeded_projection):
        order = {"high": 0, "medium": 1, "low": 2}
        ranks = [order[r.priority] for r in seeded_projection.recommendations]
        assert ranks == sorted(ranks)


# ── Determinism ───────────────────────────────────────────────────────────────

class TestDeterminism:
    def test_same_seed_same_projection(self, sample_request):
        as_of = date(2026, 5, 10)
        a = generate_projection(sample_request, as_of=as_of, rng=random.Random(42))
        b = generate_projection(sample_request, as_of=as_of, rng=random.Random(42))
        assert a == b

    def test_config_seed_used_without_rng(self, sample_request):
        config = AppConfig(history=HistoryConfig(seed=7))
        as_of = date(2026, 5, 10)
        a = generate_projection(sample_request, as_of=as_of, config=config)
        b = generate_projection(sample_request, as_of=as_of, config=config)
        assert a.consumption_history == b.consumption_history

    def test_noise_free_history(self, sample_request):
        config = AppConfig(history=HistoryConfig(noise_low=1.0, noise_high=1.0))
        projection = generate_projection(sample_request, as_of=date(2026, 3, 5), config=config)
        amounts = [p.consumed for p in projection.consumption_history]
        assert amounts == pytest.approx([50_000.0 * 1.03 ** -2, 50_000.0 * 1.03 ** -1])


# ── Supplied history ──────────────────────────────────────────────────────────

class TestSuppliedHistory:
    def test_supplied_history_used(self, sample_request):
        history = _flat_history(6, 100_000.0)
        projection = generate_projection(
            sample_request, as_of=date(2026, 7, 20), history=history
        )
        assert list(projection.consumption_history) == history
        assert projection.summary.total_consumed == pytest.approx(600_000.0)
        assert projection.projected_consumption[0].cumulative == pytest.approx(650_000.0)

    def test_fully_consumed_at_term_end(self, sample_request):
        history = _flat_history(12, 100_000.0)
        projection = generate_projection(
            sample_request, as_of=date(2026, 12, 27), history=history
        )
        s = projection.summary
        assert projection.projected_consumption == ()
        assert s.total_remaining == pytest.approx(0.0)
        assert s.projected_shortfall == 0.0
        assert s.projected_overage >= 0.0
        assert s.on_track is True

    def test_overlapping_history_rejected(self, sample_request):
        history = _flat_history(7, 100_000.0)
        with pytest.raises(ValidationError, match="not after the last historical month"):
            generate_projection(sample_request, as_of=date(2026, 7, 20), history=history)


# ── Config and velocity ───────────────────────────────────────────────────────

class TestConfigAndVelocity:
    def test_risk_thresholds_from_config(self, sample_request):
        history = _flat_history(6, 80_000.0)
        as_of = date(2026, 7, 20)
        default = generate_projection(sample_request, as_of=as_of, history=history)
        lenient = generate_projection(
            sample_request, as_of=as_of, history=history,
            config=AppConfig(risk=RiskConfig(high_ratio=0.5, medium_ratio=0.75)),
        )
        assert default.summary.risk_level == "medium"
        assert lenient.summary.risk_level == "low"
        assert lenient.summary.on_track is True

    def test_velocity_from_projection(self, sample_request):
        projection = generate_projection(
            sample_request, as_of=date(2026, 7, 20), history=_flat_history(6, 100_000.0)
        )
        metrics = analyze_velocity(projection)
        assert metrics.required_velocity == pytest.approx(100_000.0)
        assert metrics.velocity_ratio == pytest.approx(0.5)
        assert metrics.trajectory_status == "at-risk"


# ── Zero run rate ─────────────────────────────────────────────────────────────

class TestZeroRunRate:
    @pytest.fixture
    def projection(self, sample_commitment):
        request = ProjectionRequest(
            commitment=sample_commitment,
            current_monthly_consumption=0.0,
            growth_rate_percent=10.0,
        )
        return generate_projection(request, as_of=date(2026, 7, 20), rng=random.Random(5))

    def test_all_zero_trajectory(self, projection):
        assert len(projection.consumption_history) == 6
        assert len(projection.projected_consumption) == 6
        assert all(p.consumed == 0.0 for p in projection.consumption_history)
        assert all(p.projected == 0.0 for p in projection.projected_consumption)
        assert all(p.cumulative == 0.0 for p in projection.trajectory)

    def test_summary_is_full_shortfall(self, projection):
        s = projection.summary
        assert s.current_monthly_run_rate == 0.0
        assert s.projected_shortfall == pytest.approx(1_200_000.0)
        assert s.risk_level == "high"

    def test_velocity_never_reaches_commitment(self, projection):
        metrics = analyze_velocity(projection)
        assert math.isinf(metrics.days_to_commitment)
        assert metrics.velocity_ratio == 0.0
        assert metrics.trajectory_status == "at-risk"
