"""
Rule-driven recommendation generation.

Rules are an ordered tuple of ``RecommendationRule`` (predicate + builder)
pairs. Every rule is evaluated against the summary and workload breakdown;
each matching rule emits exactly one ``Recommendation``. The emitted list is
then stable-sorted by priority (high, medium, low), so rules with equal
priority keep their table order.

Default rule table (in order)
-----------------------------
    1. accelerate : shortfall > 0 and shortfall% > 20          high
    2. migrate    : shortfall > 0 (AI adoption)                 high if shortfall% > 20 else medium
    3. expand     : shortfall > 0 (data platform)               medium
    4. optimize   : overage > 0 (cost optimization)             medium
    5. expand     : AI/ML share absent or < 10%                 high if risk high else medium

``shortfall% = shortfall / total_remaining × 100``. Impacts are estimated
over the remaining term; the optimization impact is negative (savings).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

from commitment_forecaster.engine.allocation import category_share
from commitment_forecaster.models.consumption import Summary, WorkloadBreakdown
from commitment_forecaster.models.projection import PRIORITY_ORDER, Recommendation
from commitment_forecaster.reporting.formatters import format_currency
from commitment_forecaster.taxonomy.workload_taxonomy import WorkloadCategory

logger = logging.getLogger(__name__)

SEVERE_SHORTFALL_PCT = 20.0
AI_ML_TARGET_SHARE = 10.0


@dataclass(frozen=True)
class RuleContext:
    """Inputs shared by every rule.

    Attributes:
        summary:   Summary of the commitment position.
        breakdown: Workload breakdown by category.
        currency:  Currency code used in descriptions.
    """

    summary:   Summary
    breakdown: Sequence[WorkloadBreakdown]
    currency:  str = "USD"

    @property
    def shortfall_pct(self) -> float:
        """Shortfall as a percent of what remains to be consumed."""
        s = self.summary
        if s.total_remaining <= 0:
            return 100.0 if s.projected_shortfall > 0 else 0.0
        return s.projected_shortfall / s.total_remaining * 100.0

    @property
    def remaining_run(self) -> float:
        """Run rate carried over the remaining months."""
        return self.summary.current_monthly_run_rate * self.summary.months_remaining


@dataclass(frozen=True)
class RecommendationRule:
    """One entry of the rule table.

    Attributes:
        name:      Stable identifier, used in logs.
        predicate: Returns ``True`` when the rule applies.
        build:     Builds the recommendation for a matching context.
    """

    name:      str
    predicate: Callable[[RuleContext], bool]
    build:     Callable[[RuleContext], Recommendation]


# ── Rule builders ─────────────────────────────────────────────────────────────

def _has_shortfall(ctx: RuleContext) -> bool:
    return ctx.summary.projected_shortfall > 0


def _accelerate_migration(ctx: RuleContext) -> Recommendation:
    shortfall = ctx.summary.projected_shortfall
    return Recommendation(
        type="accelerate",
        priority="high",
        title="Accelerate Cloud Migration",
        description=(
            f"Current consumption trajectory shows a "
            f"{format_currency(shortfall, ctx.currency)} shortfall. Consider "
            "accelerating workload migrations to meet commitment."
        ),
        estimated_impact=shortfall * 0.5,
        timeline="3-6 months",
    )


def _ai_adoption(ctx: RuleContext) -> Recommendation:
    return Recommendation(
        type="migrate",
        priority="high" if ctx.shortfall_pct > SEVERE_SHORTFALL_PCT else "medium",
        title="AI Platform & Copilot Adoption",
        description=(
            "AI workloads can significantly increase consumption while delivering "
            "productivity gains. Consider adopting managed AI model services."
        ),
        estimated_impact=ctx.remaining_run * 0.3,
        timeline="1-3 months",
    )


def _data_platform_modernization(ctx: RuleContext) -> Recommendation:
    return Recommendation(
        type="expand",
        priority="medium",
        title="Data Platform Modernization",
        description=(
            "Migrate analytics workloads to a managed analytics platform for "
            "increased consumption and capabilities."
        ),
        estimated_impact=ctx.remaining_run * 0.25,
        timeline="3-6 months",
    )


def _cost_optimization(ctx: RuleContext) -> Recommendation:
    return Recommendation(
        type="optimize",
        priority="medium",
        title="Reserved Instance Optimization",
        description=(
            "Consider purchasing reserved capacity for predictable workloads to "
            "reduce costs while maintaining consumption credit."
        ),
        estimated_impact=-ctx.remaining_run * 0.15,
        timeline="Immediate",
    )


def _ai_ml_underweight(ctx: RuleContext) -> bool:
    share = category_share(ctx.breakdown, WorkloadCategory.AI_ML)
    return share is None or share < AI_ML_TARGET_SHARE


def _increase_ai_ml(ctx: RuleContext) -> Recommendation:
    return Recommendation(
        type="expand",
        priority="high" if ctx.summary.risk_level == "high" else "medium",
        title="Increase AI/ML Investment",
        description=(
            "AI workloads represent high-value consumption. Expand model hosting, "
            "cognitive services, and ML platform usage."
        ),
        estimated_impact=ctx.remaining_run * 0.2,
        timeline="1-3 months",
    )


DEFAULT_RULES: tuple[RecommendationRule, ...] = (
    RecommendationRule(
        name="accelerate_migration",
        predicate=lambda ctx: _has_shortfall(ctx) and ctx.shortfall_pct > SEVERE_SHORTFALL_PCT,
        build=_accelerate_migration,
    ),
    RecommendationRule(
        name="ai_adoption",
        predicate=_has_shortfall,
        build=_ai_adoption,
    ),
    RecommendationRule(
        name="data_platform_modernization",
        predicate=_has_shortfall,
        build=_data_platform_modernization,
    ),
    RecommendationRule(
        name="cost_optimization",
        predicate=lambda ctx: ctx.summary.projected_overage > 0,
        build=_cost_optimization,
    ),
    RecommendationRule(
        name="increase_ai_ml",
        predicate=_ai_ml_underweight,
        build=_increase_ai_ml,
    ),
)


def sort_by_priority(recommendations: Sequence[Recommendation]) -> list[Recommendation]:
    """Stable sort: high before medium before low, emission order kept within a level."""
    return sorted(recommendations, key=lambda r: PRIORITY_ORDER[r.priority])


def generate_recommendations(
    summary:   Summary,
    breakdown: Sequence[WorkloadBreakdown],
    rules:     Sequence[RecommendationRule] = DEFAULT_RULES,
    currency:  str = "USD",
) -> list[Recommendation]:
    """Evaluate ``rules`` in order and return the prioritized recommendations.

    Args:
        summary:   Commitment summary.
        breakdown: Workload breakdown by category.
        rules:     Ordered rule table.
        currency:  Currency code used in descriptions.

    Returns:
        Matching recommendations sorted by priority. Empty when no rule matches.
    """
    ctx = RuleContext(summary=summary, breakdown=breakdown, currency=currency)

    emitted: list[Recommendation] = []
    for rule in rules:
        if rule.predicate(ctx):
            emitted.append(rule.build(ctx))
            logger.debug("Rule [%s] matched", rule.name)

    return sort_by_priority(emitted)
