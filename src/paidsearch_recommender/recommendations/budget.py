"""Budget recommendations."""

import logging

from paidsearch_recommender.core.rules import Rule, first_match
from paidsearch_recommender.models.analysis import OverallHealth, TrendDirection
from paidsearch_recommender.models.metrics import MetricName
from paidsearch_recommender.models.recommendation import (
    BudgetChange,
    BudgetEfficiency,
    CandidateRecommendation,
    MaintainBudget,
    RecommendationPriority,
    RecommendationType,
)
from paidsearch_recommender.recommendations.context import RecommendationContext
from paidsearch_recommender.utils.numeric import format_currency, safe_divide

logger = logging.getLogger(__name__)

BUDGET_INCREASE_PCT = 20.0
BUDGET_DECREASE_PCT = 30.0
# Share of a budget change expected to flow through to the impact metric
INCREASE_CONVERSION_PASS_THROUGH = 0.7
DECREASE_COST_PASS_THROUGH = 0.8

MAINTAIN_FOCUS_AREAS = ["Keyword optimization", "Ad copy testing", "Bid adjustments"]


def classify_efficiency(ctx: RecommendationContext) -> BudgetEfficiency:
    """Classify how efficiently the campaign turns budget into results."""
    if ctx.health == OverallHealth.EXCELLENT.value and ctx.high_outlier_count == 0:
        return BudgetEfficiency.HIGH
    if ctx.health == OverallHealth.POOR.value or ctx.high_outlier_count > 3:
        return BudgetEfficiency.LOW
    return BudgetEfficiency.MEDIUM


def _roi(ctx: RecommendationContext) -> float:
    """Conversions per dollar spent over the window."""
    return safe_divide(ctx.mean(MetricName.CONVERSIONS), ctx.mean(MetricName.COST))


def _budget_reasoning(ctx: RecommendationContext, efficiency: BudgetEfficiency) -> list[str]:
    reasons = [
        f"Overall health is {ctx.health}",
        f"Budget efficiency is {efficiency.value}",
    ]
    cpa_trend = ctx.trend(MetricName.CPA)
    if cpa_trend is not None:
        reasons.append(cpa_trend.interpretation)
    reasons.append(f"ROI of {_roi(ctx):.2f} conversions per dollar")
    if ctx.high_outlier_count:
        reasons.append(f"{ctx.high_outlier_count} high-severity outliers")
    return reasons


def _should_increase(ctx: RecommendationContext) -> bool:
    return classify_efficiency(ctx) == BudgetEfficiency.HIGH and ctx.trend_is(
        MetricName.CPA, TrendDirection.DECREASING.value
    )


def _should_decrease(ctx: RecommendationContext) -> bool:
    struggling = (
        classify_efficiency(ctx) == BudgetEfficiency.LOW
        or ctx.health == OverallHealth.POOR.value
    )
    return struggling and ctx.trend_is(MetricName.CPA, TrendDirection.INCREASING.value)


def _should_maintain(ctx: RecommendationContext) -> bool:
    return classify_efficiency(ctx) == BudgetEfficiency.MEDIUM and ctx.trend_is(
        MetricName.CONVERSIONS, TrendDirection.STABLE.value
    )


def _budget_change(
    ctx: RecommendationContext, change_pct: float
) -> tuple[BudgetChange, float]:
    budget = ctx.campaign.budget
    suggested = round(budget * (1 + change_pct / 100), 2)
    efficiency = classify_efficiency(ctx)
    change = BudgetChange(
        current_daily_budget=budget,
        suggested_daily_budget=suggested,
        change_amount=round(suggested - budget, 2),
        change_percentage=change_pct,
        roi=_roi(ctx),
        efficiency=efficiency,
        reasoning=_budget_reasoning(ctx, efficiency),
    )
    return change, suggested


def _increase_budget(ctx: RecommendationContext) -> CandidateRecommendation:
    change, suggested = _budget_change(ctx, BUDGET_INCREASE_PCT)
    impact = BUDGET_INCREASE_PCT * INCREASE_CONVERSION_PASS_THROUGH
    return CandidateRecommendation(
        type=RecommendationType.BUDGET_REALLOCATION,
        campaign_id=ctx.campaign_id,
        title="Increase budget for high-performing campaign",
        description=(
            f"Campaign is highly efficient with improving CPA trend. "
            f"Recommend increasing daily budget from "
            f"{format_currency(ctx.campaign.budget)} to {format_currency(suggested)} "
            f"({BUDGET_INCREASE_PCT:.0f}% increase)."
        ),
        reasoning=". ".join(change.reasoning),
        expected_impact=f"{impact:.1f}% increase in conversions",
        impact_metric=MetricName.CONVERSIONS.value,
        impact_value=impact,
        confidence_score=0.85,
        priority=RecommendationPriority.HIGH,
        suggested_changes=change,
    )


def _decrease_budget(ctx: RecommendationContext) -> CandidateRecommendation:
    change, suggested = _budget_change(ctx, -BUDGET_DECREASE_PCT)
    impact = -BUDGET_DECREASE_PCT * DECREASE_COST_PASS_THROUGH
    return CandidateRecommendation(
        type=RecommendationType.BUDGET_REALLOCATION,
        campaign_id=ctx.campaign_id,
        title="Reduce budget for underperforming campaign",
        description=(
            f"Campaign shows declining efficiency with increasing CPA. "
            f"Recommend reducing daily budget from "
            f"{format_currency(ctx.campaign.budget)} to {format_currency(suggested)} "
            f"({BUDGET_DECREASE_PCT:.0f}% decrease)."
        ),
        reasoning=". ".join(change.reasoning),
        expected_impact=f"{abs(impact):.1f}% reduction in spend",
        impact_metric=MetricName.COST.value,
        impact_value=impact,
        confidence_score=0.80,
        priority=RecommendationPriority.CRITICAL,
        suggested_changes=change,
    )


def _maintain_budget(ctx: RecommendationContext) -> CandidateRecommendation:
    efficiency = classify_efficiency(ctx)
    return CandidateRecommendation(
        type=RecommendationType.BUDGET_REALLOCATION,
        campaign_id=ctx.campaign_id,
        title="Maintain budget while optimizing performance",
        description=(
            f"Campaign performance is stable. Keep the daily budget at "
            f"{format_currency(ctx.campaign.budget)} and focus on efficiency "
            f"improvements."
        ),
        reasoning=". ".join(_budget_reasoning(ctx, efficiency)),
        expected_impact="Improved efficiency at current spend",
        impact_metric=MetricName.EFFICIENCY.value,
        impact_value=0.0,
        confidence_score=0.70,
        priority=RecommendationPriority.MEDIUM,
        suggested_changes=MaintainBudget(
            current_daily_budget=ctx.campaign.budget,
            focus_areas=list(MAINTAIN_FOCUS_AREAS),
        ),
    )


BUDGET_RULES: tuple[Rule[RecommendationContext, CandidateRecommendation], ...] = (
    Rule("increase_efficient_budget", _should_increase, _increase_budget),
    Rule("decrease_inefficient_budget", _should_decrease, _decrease_budget),
    Rule("maintain_and_optimize", _should_maintain, _maintain_budget),
)


def generate_budget_recommendations(
    ctx: RecommendationContext,
) -> list[CandidateRecommendation]:
    """Budget recommendations for a campaign; none without a configured budget."""
    if not ctx.campaign.budget:
        logger.debug(f"Skipping budget rules for {ctx.campaign_id}: no budget set")
        return []
    recommendation = first_match(BUDGET_RULES, ctx)
    return [recommendation] if recommendation is not None else []
