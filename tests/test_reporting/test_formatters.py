"""
Tests for commitment_forecaster/reporting/formatters.py.

What we test
------------
format_currency():
  - Thousands separators, whole units, sign preserved, currency suffix.

format_consumption():
  - Millions with one decimal, thousands rounded, units below 1000.

format_projection_summary():
  - Contains commitment, risk level and each recommendation title.
  - Shortfall line only when a shortfall exists.
  - "(none)" when there are no recommendations.

format_velocity():
  - Regular metrics render ratio and status.
  - Infinite days render as "never"; None fields render as "n/a".
"""

from __future__ import annotations

import math
import random
from datetime import date

from commitment_forecaster.engine.orchestrator import generate_projection
from commitment_forecaster.models.projection import VelocityMetrics
from commitment_forecaster.reporting.formatters import (
    format_consumption,
    format_currency,
    format_projection_summary,
    format_velocity,
)


class TestFormatCurrency:
    def test_thousands_separator(self):
        assert format_currency(600_000.0) == "600,000 USD"

    def test_rounds_to_whole_units(self):
        assert format_currency(1_234.56, "EUR") == "1,235 EUR"

    def test_negative(self):
        assert format_currency(-15_000.0) == "-15,000 USD"


class TestFormatConsumption:
    def test_millions(self):
        assert format_consumption(1_500_000.0) == "1.5M USD"
        assert format_consumption(2_000_000.0, "GBP") == "2.0M GBP"

    def test_thousands(self):
        assert format_consumption(50_000.0) == "50K USD"

    def test_units(self):
        assert format_consumption(999.0) == "999 USD"


class TestFormatProjectionSummary:
    def test_start_of_term(self, sample_request):
        projection = generate_projection(
            sample_request, as_of=date(2026, 1, 1), rng=random.Random(0)
        )
        text = format_projection_summary(projection)

        assert "1.2M USD over 12 months" in text
        assert "Shortfall:          600K USD" in text
        assert "Risk level:         HIGH  (off track)" in text
        assert "Recommendations (4)" in text
        for rec in projection.recommendations:
            assert rec.title in text
        assert "+300,000 USD" in text

    def test_no_recommendations(self, seeded_projection):
        empty = seeded_projection.model_copy(update={"recommendations": ()})
        assert "(none)" in format_projection_summary(empty)


class TestFormatVelocity:
    def test_regular_metrics(self):
        m = VelocityMetrics(
            monthly_velocity=80_000.0,
            required_velocity=100_000.0,
            velocity_gap=20_000.0,
            velocity_ratio=0.8,
            trajectory_status="behind",
            days_to_commitment=225.0,
        )
        text = format_velocity(m)
        assert "Velocity ratio:     0.80" in text
        assert "Trajectory:         behind" in text
        assert "+20,000 USD/mo" in text
        assert "Days to commitment: 225" in text

    def test_degenerate_metrics(self):
        m = VelocityMetrics(
            monthly_velocity=0.0,
            trajectory_status="complete",
            days_to_commitment=math.inf,
            term_complete=True,
        )
        text = format_velocity(m)
        assert "never (run rate is 0)" in text
        assert "Required velocity:  n/a" in text
        assert "Velocity ratio:     n/a" in text
