"""Predictive insights derived from a performance analysis."""

import logging
from collections.abc import Mapping

from paidsearch_recommender.models.analysis import (
    OverallHealth,
    PerformanceAnalysis,
    TrendDirection,
)
from paidsearch_recommender.models.insights import (
    CampaignSegment,
    CampaignSegmentName,
    CPAPrediction,
    CPATrend,
)
from paidsearch_recommender.models.metrics import MetricName

logger = logging.getLogger(__name__)


def predict_cpa(
    analysis: PerformanceAnalysis, horizon_days: int = 7
) -> CPAPrediction | None:
    """Project CPA forward along its fitted trend.

    Args:
        analysis: Performance analysis with CPA statistics
        horizon_days: Number of days to project ahead

    Returns:
        The projection, or None when the window has no CPA trend
    """
    interval = analysis.confidence_interval_for(MetricName.CPA.value)
    trend = analysis.trend_for(MetricName.CPA.value)
    if interval is None or trend is None:
        logger.debug(f"No CPA trend for campaign {analysis.campaign_id}")
        return None

    predicted = max(0.0, interval.mean + trend.slope * horizon_days)

    if trend.slope < 0:
        direction = CPATrend.IMPROVING
    elif trend.slope > 0:
        direction = CPATrend.DEGRADING
    else:
        direction = CPATrend.STABLE

    factors = []
    if trend.trend != TrendDirection.STABLE.value:
        factors.append(
            f"CPA trend is {trend.trend} ({trend.change_percentage:.1f}% over the period)"
        )
    cpa_test = analysis.significance_for(MetricName.CPA.value)
    if cpa_test is not None and cpa_test.is_significant:
        factors.append(cpa_test.interpretation)
    if analysis.high_severity_outliers:
        factors.append(
            f"{len(analysis.high_severity_outliers)} high-severity outliers "
            f"may affect accuracy"
        )
    if not analysis.data_quality.has_sufficient_data:
        factors.append("Limited historical data reduces prediction reliability")

    return CPAPrediction(
        current_cpa=interval.mean,
        predicted_cpa=predicted,
        horizon_days=horizon_days,
        trend=direction,
        confidence=trend.confidence,
        factors=factors,
    )


def segment_campaign(analysis: PerformanceAnalysis) -> CampaignSegment:
    """Assign a campaign to a performance segment."""
    characteristics: list[str] = []
    high_outliers = len(analysis.high_severity_outliers)
    health = analysis.summary.overall_health
    conversions_trend = analysis.trend_for(MetricName.CONVERSIONS.value)
    cpa_trend = analysis.trend_for(MetricName.CPA.value)

    if high_outliers > 2 or health == OverallHealth.POOR.value:
        segment = CampaignSegmentName.NEEDS_ATTENTION
        if health == OverallHealth.POOR.value:
            characteristics.append("Poor overall health")
        if high_outliers > 2:
            characteristics.append(f"{high_outliers} high-severity outliers")
    elif health == OverallHealth.EXCELLENT.value and (
        conversions_trend is None
        or conversions_trend.trend != TrendDirection.DECREASING.value
    ):
        segment = CampaignSegmentName.HIGH_PERFORMER
        characteristics.append("Excellent overall health")
        if cpa_trend is not None and cpa_trend.trend == TrendDirection.DECREASING.value:
            characteristics.append("Improving CPA")
    else:
        segment = CampaignSegmentName.AVERAGE_PERFORMER
        characteristics.append(f"{health.capitalize()} overall health")

    if conversions_trend is not None:
        characteristics.append(f"Conversions {conversions_trend.trend}")

    return CampaignSegment(
        campaign_id=analysis.campaign_id,
        segment=segment,
        characteristics=characteristics,
    )


def segment_campaigns(
    analyses: Mapping[str, PerformanceAnalysis],
) -> list[CampaignSegment]:
    """Segment several campaigns, ordered by campaign ID."""
    return [segment_campaign(analyses[cid]) for cid in sorted(analyses)]
