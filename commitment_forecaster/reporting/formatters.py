"""
ASCII terminal formatters for CLI reporting commands.

All formatters accept engine models and return plain multi-line strings
suitable for ``typer.echo()``.

No third-party dependencies (no ``rich``, no ``colorama``).

Amounts
-------
``format_currency()`` renders a full amount with thousands separators
(``"600,000 USD"``); ``format_consumption()`` renders a compact form for
tables (``"1.2M USD"``, ``"50K USD"``, ``"999 USD"``).
"""

from __future__ import annotations

import math

from commitment_forecaster.models.projection import Projection, VelocityMetrics


def format_currency(amount: float, currency: str = "USD") -> str:
    """Whole-unit amount with thousands separators, e.g. ``"-15,000 USD"``."""
    return f"{amount:,.0f} {currency}"


def format_consumption(amount: float, currency: str = "USD") -> str:
    """Compact amount: millions with one decimal, thousands rounded, units rounded."""
    if amount >= 1_000_000:
        return f"{amount / 1_000_000:.1f}M {currency}"
    if amount >= 1_000:
        return f"{amount / 1_000:.0f}K {currency}"
    return f"{amount:.0f} {currency}"


def format_projection_summary(projection: Projection) -> str:
    """Format the summary block and recommendations of a projection."""
    s   = projection.summary
    cur = projection.commitment.currency
    lines = [
        "Commitment position",
        "-" * 60,
        f"  Commitment:         {format_consumption(projection.commitment.total_commitment, cur)}"
        f" over {projection.commitment.term_months} months",
        f"  Consumed:           {format_consumption(s.total_consumed, cur)}"
        f" ({s.percent_consumed:.1f}%)",
        f"  Remaining:          {format_consumption(max(s.total_remaining, 0.0), cur)}",
        f"  Months remaining:   {s.months_remaining}",
        f"  Run rate:           {format_consumption(s.current_monthly_run_rate, cur)}/mo",
        f"  Projected end:      {format_consumption(s.projected_end_consumption, cur)}",
    ]
    if s.projected_shortfall > 0:
        lines.append(f"  Shortfall:          {format_consumption(s.projected_shortfall, cur)}")
    if s.projected_overage > 0:
        lines.append(f"  Overage:           +{format_consumption(s.projected_overage, cur)}")
    lines.append(
        f"  Risk level:         {s.risk_level.upper()}"
        f"{'' if s.on_track else '  (off track)'}"
    )

    lines.append("")
    lines.append(f"Recommendations ({len(projection.recommendations)})")
    lines.append("-" * 60)
    if not projection.recommendations:
        lines.append("  (none)")
    for rec in projection.recommendations:
        sign = "+" if rec.estimated_impact > 0 else ""
        lines.append(
            f"  [{rec.priority.upper():<6}] {rec.title}  "
            f"({sign}{format_currency(rec.estimated_impact, cur)}, {rec.timeline})"
        )
    return "\n".join(lines)


def format_velocity(metrics: VelocityMetrics, currency: str = "USD") -> str:
    """Format velocity metrics as an aligned key/value block."""
    def _amount(value: float | None) -> str:
        return "n/a" if value is None else format_consumption(value, currency) + "/mo"

    if math.isinf(metrics.days_to_commitment):
        days = "never (run rate is 0)"
    else:
        days = f"{metrics.days_to_commitment:.0f}"

    ratio = "n/a" if metrics.velocity_ratio is None else f"{metrics.velocity_ratio:.2f}"
    gap = metrics.velocity_gap
    gap_str = "n/a" if gap is None else (
        f"{'+' if gap > 0 else ''}{format_currency(gap, currency)}/mo"
    )

    return "\n".join([
        "Consumption velocity",
        "-" * 60,
        f"  Current velocity:   {_amount(metrics.monthly_velocity)}",
        f"  Required velocity:  {_amount(metrics.required_velocity)}",
        f"  Velocity gap:       {gap_str}",
        f"  Velocity ratio:     {ratio}",
        f"  Trajectory:         {metrics.trajectory_status}",
        f"  Days to commitment: {days}",
    ])
