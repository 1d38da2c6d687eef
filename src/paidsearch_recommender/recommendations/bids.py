"""Bid and bidding strategy recommendations."""

import logging

from paidsearch_recommender.core.rules import Rule, all_matches
from paidsearch_recommender.models.analysis import OverallHealth, TrendDirection
from paidsearch_recommender.models.metrics import BiddingStrategy, MetricName
from paidsearch_recommender.models.recommendation import (
    BidAdjustmentChange,
    BiddingStrategyChange,
    CandidateRecommendation,
    RecommendationPriority,
    RecommendationType,
)
from paidsearch_recommender.recommendations.context import RecommendationContext

logger = logging.getLogger(__name__)

BID_CHANGE_PCT = 12.0
BID_DECREASE_CPA_IMPACT = -12.5
BID_INCREASE_CONVERSION_IMPACT = 17.5
STRATEGY_CHANGE_CPA_IMPACT = -15.0
STRATEGY_CHANGE_MIN_TREND_CONFIDENCE = 0.6
STRATEGY_CONFIDENCE_DISCOUNT = 0.8

HEALTH_POINTS = {
    OverallHealth.EXCELLENT.value: 40,
    OverallHealth.GOOD.value: 30,
    OverallHealth.FAIR.value: 20,
    OverallHealth.POOR.value: 10,
}


def bid_performance_score(ctx: RecommendationContext) -> float:
    """Score current bidding performance from 0 to 100."""
    score = 50 + HEALTH_POINTS.get(ctx.health, 0)
    score -= 5 * ctx.high_outlier_count
    if ctx.trend_is(MetricName.CPA, TrendDirection.DECREASING.value):
        score += 10
    elif ctx.trend_is(MetricName.CPA, TrendDirection.INCREASING.value):
        score -= 10
    return float(min(100, max(0, score)))


def _is_manual_cpc(ctx: RecommendationContext) -> bool:
    return ctx.campaign.bidding_strategy == BiddingStrategy.MANUAL_CPC.value


def _should_lower_bids(ctx: RecommendationContext) -> bool:
    return _is_manual_cpc(ctx) and ctx.trend_is(
        MetricName.CPA, TrendDirection.INCREASING.value
    )


def _should_raise_bids(ctx: RecommendationContext) -> bool:
    return (
        ctx.health == OverallHealth.EXCELLENT.value
        and ctx.trend_is(MetricName.CPA, TrendDirection.DECREASING.value)
        and not ctx.trend_is(MetricName.CONVERSIONS, TrendDirection.DECREASING.value)
    )


def _should_switch_to_target_cpa(ctx: RecommendationContext) -> bool:
    trend = ctx.trend(MetricName.CPA)
    return (
        _should_lower_bids(ctx)
        and trend is not None
        and trend.confidence > STRATEGY_CHANGE_MIN_TREND_CONFIDENCE
    )


def _lower_bids(ctx: RecommendationContext) -> CandidateRecommendation:
    trend = ctx.trend(MetricName.CPA)
    return CandidateRecommendation(
        type=RecommendationType.BID_ADJUSTMENT,
        campaign_id=ctx.campaign_id,
        title="Lower bids to improve CPA",
        description=(
            f"CPA is trending up ({trend.change_percentage:.1f}% over the period). "
            f"Reduce manual CPC bids by {BID_CHANGE_PCT:.0f}% to bring acquisition "
            f"costs back in line."
        ),
        reasoning=trend.interpretation,
        expected_impact=f"{abs(BID_DECREASE_CPA_IMPACT):.1f}% reduction in CPA",
        impact_metric=MetricName.CPA.value,
        impact_value=BID_DECREASE_CPA_IMPACT,
        confidence_score=trend.confidence,
        priority=RecommendationPriority.HIGH,
        suggested_changes=BidAdjustmentChange(
            bid_change_percentage=-BID_CHANGE_PCT,
            reason="Rising CPA under manual bidding",
            performance_score=bid_performance_score(ctx),
        ),
    )


def _raise_bids(ctx: RecommendationContext) -> CandidateRecommendation:
    trend = ctx.trend(MetricName.CPA)
    return CandidateRecommendation(
        type=RecommendationType.BID_ADJUSTMENT,
        campaign_id=ctx.campaign_id,
        title="Increase bids to capture more volume",
        description=(
            f"Campaign health is excellent and CPA is improving. Raise bids by "
            f"{BID_CHANGE_PCT:.0f}% to win more auctions while efficiency holds."
        ),
        reasoning=trend.interpretation,
        expected_impact=(
            f"{BID_INCREASE_CONVERSION_IMPACT:.1f}% increase in conversions"
        ),
        impact_metric=MetricName.CONVERSIONS.value,
        impact_value=BID_INCREASE_CONVERSION_IMPACT,
        confidence_score=0.75,
        priority=RecommendationPriority.MEDIUM,
        suggested_changes=BidAdjustmentChange(
            bid_change_percentage=BID_CHANGE_PCT,
            reason="Improving CPA with excellent health",
            performance_score=bid_performance_score(ctx),
        ),
    )


def _switch_to_target_cpa(ctx: RecommendationContext) -> CandidateRecommendation:
    trend = ctx.trend(MetricName.CPA)
    target_cpa = ctx.campaign.target_cpa or round(ctx.mean(MetricName.CPA), 2) or None
    return CandidateRecommendation(
        type=RecommendationType.BIDDING_STRATEGY_CHANGE,
        campaign_id=ctx.campaign_id,
        title="Switch to Target CPA bidding",
        description=(
            "Manual CPC bidding is not keeping CPA under control. Switch to "
            "automated Target CPA bidding to let the platform optimize bids per "
            "auction."
        ),
        reasoning=trend.interpretation,
        expected_impact=f"{abs(STRATEGY_CHANGE_CPA_IMPACT):.1f}% reduction in CPA",
        impact_metric=MetricName.CPA.value,
        impact_value=STRATEGY_CHANGE_CPA_IMPACT,
        confidence_score=trend.confidence * STRATEGY_CONFIDENCE_DISCOUNT,
        priority=RecommendationPriority.MEDIUM,
        suggested_changes=BiddingStrategyChange(
            current_strategy=ctx.campaign.bidding_strategy,
            suggested_strategy=BiddingStrategy.TARGET_CPA.value,
            target_cpa=target_cpa,
        ),
    )


BID_RULES: tuple[Rule[RecommendationContext, CandidateRecommendation], ...] = (
    Rule("lower_manual_bids_on_rising_cpa", _should_lower_bids, _lower_bids),
    Rule("raise_bids_on_improving_cpa", _should_raise_bids, _raise_bids),
)

BIDDING_STRATEGY_RULES: tuple[
    Rule[RecommendationContext, CandidateRecommendation], ...
] = (
    Rule(
        "switch_manual_cpc_to_target_cpa",
        _should_switch_to_target_cpa,
        _switch_to_target_cpa,
    ),
)


def generate_bid_recommendations(
    ctx: RecommendationContext,
) -> list[CandidateRecommendation]:
    """Campaign-wide bid adjustments."""
    return all_matches(BID_RULES, ctx)


def generate_bidding_strategy_recommendations(
    ctx: RecommendationContext,
) -> list[CandidateRecommendation]:
    """Bidding strategy changes."""
    return all_matches(BIDDING_STRATEGY_RULES, ctx)
