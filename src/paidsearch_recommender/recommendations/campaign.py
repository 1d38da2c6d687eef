"""Campaign-level recommendations: pausing and volatility review."""

from paidsearch_recommender.core.rules import Rule, all_matches
from paidsearch_recommender.models.analysis import BenchmarkStatus, OverallHealth
from paidsearch_recommender.models.metrics import MetricName
from paidsearch_recommender.models.recommendation import (
    CandidateRecommendation,
    KeywordReviewChange,
    PauseCampaignChange,
    RecommendationPriority,
    RecommendationType,
)
from paidsearch_recommender.recommendations.context import RecommendationContext

VOLATILITY_OUTLIER_THRESHOLD = 3
VOLATILITY_CPA_IMPACT = -17.5


def _should_pause(ctx: RecommendationContext) -> bool:
    cost = ctx.benchmark(MetricName.COST)
    conversions = ctx.benchmark(MetricName.CONVERSIONS)
    return (
        ctx.health == OverallHealth.POOR.value
        and ctx.analysis.data_quality.has_sufficient_data
        and cost is not None
        and conversions is not None
        and cost.status == BenchmarkStatus.ABOVE.value
        and conversions.status == BenchmarkStatus.BELOW.value
    )


def _is_volatile(ctx: RecommendationContext) -> bool:
    return ctx.high_outlier_count > VOLATILITY_OUTLIER_THRESHOLD


def _pause_campaign(ctx: RecommendationContext) -> CandidateRecommendation:
    cost = ctx.benchmark(MetricName.COST)
    conversions = ctx.benchmark(MetricName.CONVERSIONS)
    reason = (
        f"Cost is {abs(cost.percentage_difference):.1f}% above its historical "
        f"benchmark while conversions are "
        f"{abs(conversions.percentage_difference):.1f}% below"
    )
    return CandidateRecommendation(
        type=RecommendationType.PAUSE_CAMPAIGN,
        campaign_id=ctx.campaign_id,
        title="Pause underperforming campaign",
        description=(
            f"{reason}. Pause the campaign and restructure it before re-enabling."
        ),
        reasoning=". ".join(ctx.analysis.summary.key_findings),
        expected_impact="100.0% reduction in spend",
        impact_metric=MetricName.COST.value,
        impact_value=-100.0,
        confidence_score=0.80,
        priority=RecommendationPriority.CRITICAL,
        suggested_changes=PauseCampaignChange(reason=reason),
    )


def _review_volatile_keywords(ctx: RecommendationContext) -> CandidateRecommendation:
    days = sorted({o.date.isoformat() for o in ctx.analysis.high_severity_outliers})
    return CandidateRecommendation(
        type=RecommendationType.KEYWORD_OPTIMIZATION,
        campaign_id=ctx.campaign_id,
        title="Review keywords driving performance volatility",
        description=(
            f"{ctx.high_outlier_count} high-severity outliers across {len(days)} days "
            f"point to unstable keywords. Review keywords active on those days and "
            f"tighten match types or bids."
        ),
        reasoning=f"{ctx.high_outlier_count} high-severity outliers detected",
        expected_impact=f"{abs(VOLATILITY_CPA_IMPACT):.1f}% reduction in CPA",
        impact_metric=MetricName.CPA.value,
        impact_value=VOLATILITY_CPA_IMPACT,
        confidence_score=0.70,
        priority=RecommendationPriority.HIGH,
        suggested_changes=KeywordReviewChange(outlier_days=days),
    )


CAMPAIGN_RULES: tuple[Rule[RecommendationContext, CandidateRecommendation], ...] = (
    Rule("pause_failing_campaign", _should_pause, _pause_campaign),
    Rule("review_volatile_keywords", _is_volatile, _review_volatile_keywords),
)


def generate_campaign_recommendations(
    ctx: RecommendationContext,
) -> list[CandidateRecommendation]:
    """Campaign-level pause and review recommendations."""
    return all_matches(CAMPAIGN_RULES, ctx)
