"""Keyword, negative keyword and pause recommendations.

Item-level findings from the keyword and search term analyzers are rolled up
into one campaign-level recommendation per kind of action.
"""

import logging
from collections.abc import Sequence

from paidsearch_recommender.models.metrics import MetricName
from paidsearch_recommender.models.recommendation import (
    PRIORITY_RANK,
    CandidateRecommendation,
    KeywordAction,
    KeywordBidChange,
    KeywordRecommendation,
    NegativeKeywordChange,
    PauseKeywordsChange,
    RecommendationPriority,
    RecommendationType,
)
from paidsearch_recommender.recommendations.context import RecommendationContext
from paidsearch_recommender.utils.numeric import format_currency

logger = logging.getLogger(__name__)

CRITICAL_NEGATIVE_SAVINGS = 100.0
SCALE_BID_INCREASE_PCT = 15.0
SCALE_CONVERSION_IMPACT = 20.0
OPTIMIZE_CPA_IMPACT = -10.0
MAX_REASONS_IN_TEXT = 5


def _best_priority(priorities: Sequence[str]) -> str:
    return min(priorities, key=lambda p: PRIORITY_RANK[p])


def _share_of_spend(ctx: RecommendationContext, amount: float) -> float:
    """Amount as a percentage of window spend, capped at 100."""
    window_cost = ctx.window_cost
    if window_cost <= 0:
        return 0.0
    return min(100.0, amount / window_cost * 100)


def _keyword_reasons(items: Sequence[KeywordRecommendation]) -> str:
    reasons = [f"'{i.keyword_text}': {i.reason}" for i in items[:MAX_REASONS_IN_TEXT]]
    if len(items) > MAX_REASONS_IN_TEXT:
        reasons.append(f"and {len(items) - MAX_REASONS_IN_TEXT} more")
    return "; ".join(reasons)


def negative_keyword_recommendation(
    ctx: RecommendationContext,
) -> CandidateRecommendation | None:
    """Roll high and medium priority search term candidates into one recommendation.

    Savings count every candidate. Only the top candidates are listed as keywords.
    """
    candidates = [
        c
        for c in ctx.search_term_recommendations
        if c.priority
        in (RecommendationPriority.HIGH.value, RecommendationPriority.MEDIUM.value)
    ]
    if not candidates:
        return None

    savings = round(sum(c.estimated_savings for c in candidates), 2)
    share = _share_of_spend(ctx, savings)
    reasons = [f"'{c.search_term}': {c.reason}" for c in candidates[:MAX_REASONS_IN_TEXT]]

    return CandidateRecommendation(
        type=RecommendationType.ADD_NEGATIVE_KEYWORD,
        campaign_id=ctx.campaign_id,
        title=f"Add {len(candidates)} negative keywords",
        description=(
            f"Add {len(candidates)} search terms as negative keywords to eliminate "
            f"{format_currency(savings)} in wasted spend."
        ),
        reasoning=(
            "Search term analysis shows these terms generate cost with little or "
            "no conversion value: " + "; ".join(reasons)
        ),
        expected_impact=(
            f"{format_currency(savings)} reduction in wasted spend "
            f"({share:.1f}% of campaign cost)"
        ),
        impact_metric=MetricName.COST.value,
        impact_value=-share,
        confidence_score=0.90,
        priority=(
            RecommendationPriority.CRITICAL
            if savings > CRITICAL_NEGATIVE_SAVINGS
            else RecommendationPriority.HIGH
        ),
        suggested_changes=NegativeKeywordChange(
            keywords=[c.search_term for c in candidates[: ctx.max_negative_keywords]],
            estimated_savings=savings,
        ),
    )


def pause_keyword_recommendation(
    ctx: RecommendationContext,
) -> CandidateRecommendation | None:
    """Roll keywords marked for pausing into one recommendation."""
    items = [
        k for k in ctx.keyword_recommendations if k.action == KeywordAction.PAUSE.value
    ]
    if not items:
        return None

    savings = round(sum(k.estimated_savings or 0.0 for k in items), 2)
    share = _share_of_spend(ctx, savings)

    return CandidateRecommendation(
        type=RecommendationType.PAUSE_KEYWORD,
        campaign_id=ctx.campaign_id,
        title=f"Pause {len(items)} underperforming keywords",
        description=(
            f"Pause {len(items)} keywords that spent {format_currency(savings)} "
            f"with zero or poor conversions."
        ),
        reasoning="Keyword analysis: " + _keyword_reasons(items),
        expected_impact=(
            f"{format_currency(savings)} reduction in wasted spend "
            f"({share:.1f}% of campaign cost)"
        ),
        impact_metric=MetricName.COST.value,
        impact_value=-share,
        confidence_score=0.85,
        priority=_best_priority([k.priority for k in items]),
        suggested_changes=PauseKeywordsChange(
            keyword_ids=[k.keyword_id for k in items],
            keywords=[k.keyword_text for k in items],
            estimated_savings=savings,
        ),
    )


def scale_keyword_recommendation(
    ctx: RecommendationContext,
) -> CandidateRecommendation | None:
    """Roll keywords marked for scaling into one recommendation."""
    items = [
        k for k in ctx.keyword_recommendations if k.action == KeywordAction.SCALE.value
    ]
    if not items:
        return None

    return CandidateRecommendation(
        type=RecommendationType.KEYWORD_OPTIMIZATION,
        campaign_id=ctx.campaign_id,
        title=f"Scale {len(items)} high-performing keywords",
        description=(
            f"Increase bids by {SCALE_BID_INCREASE_PCT:.0f}% on {len(items)} keywords "
            f"converting below target CPA."
        ),
        reasoning="Keyword analysis: " + _keyword_reasons(items),
        expected_impact=f"{SCALE_CONVERSION_IMPACT:.1f}% increase in conversions",
        impact_metric=MetricName.CONVERSIONS.value,
        impact_value=SCALE_CONVERSION_IMPACT,
        confidence_score=0.80,
        priority=RecommendationPriority.MEDIUM,
        suggested_changes=KeywordBidChange(
            keyword_ids=[k.keyword_id for k in items],
            keywords=[k.keyword_text for k in items],
            suggested_bid_change_pct=SCALE_BID_INCREASE_PCT,
        ),
    )


def optimize_keyword_recommendation(
    ctx: RecommendationContext,
) -> CandidateRecommendation | None:
    """Roll keywords marked for optimization into one recommendation."""
    items = [
        k
        for k in ctx.keyword_recommendations
        if k.action == KeywordAction.OPTIMIZE.value
    ]
    if not items:
        return None

    return CandidateRecommendation(
        type=RecommendationType.KEYWORD_OPTIMIZATION,
        campaign_id=ctx.campaign_id,
        title=f"Optimize {len(items)} keywords",
        description=(
            f"Review bids, ad relevance and landing pages for {len(items)} keywords "
            f"converting slightly above target or with low CTR."
        ),
        reasoning="Keyword analysis: " + _keyword_reasons(items),
        expected_impact=f"{abs(OPTIMIZE_CPA_IMPACT):.1f}% reduction in CPA",
        impact_metric=MetricName.CPA.value,
        impact_value=OPTIMIZE_CPA_IMPACT,
        confidence_score=0.70,
        priority=_best_priority([k.priority for k in items]),
        suggested_changes=KeywordBidChange(
            keyword_ids=[k.keyword_id for k in items],
            keywords=[k.keyword_text for k in items],
            suggested_bid_change_pct=0.0,
            notes=[k.reason for k in items],
        ),
    )


KEYWORD_BUILDERS = (
    negative_keyword_recommendation,
    pause_keyword_recommendation,
    scale_keyword_recommendation,
    optimize_keyword_recommendation,
)


def generate_keyword_recommendations(
    ctx: RecommendationContext,
) -> list[CandidateRecommendation]:
    """Campaign-level keyword, negative keyword and pause recommendations."""
    recommendations = []
    for build in KEYWORD_BUILDERS:
        recommendation = build(ctx)
        if recommendation is not None:
            recommendations.append(recommendation)
    logger.debug(
        f"{len(recommendations)} keyword recommendations for {ctx.campaign_id}"
    )
    return recommendations
