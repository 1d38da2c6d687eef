"""Combined impact simulation for a set of recommendations."""

from collections.abc import Sequence

from paidsearch_recommender.models.analysis import PerformanceAnalysis
from paidsearch_recommender.models.impact import (
    ImpactSimulation,
    ProjectedMetric,
    TimeToImpact,
)
from paidsearch_recommender.models.metrics import MetricName
from paidsearch_recommender.models.recommendation import CandidateRecommendation

TRACKED_METRICS = (
    MetricName.COST.value,
    MetricName.CONVERSIONS.value,
    MetricName.CPA.value,
    MetricName.ROAS.value,
)


def simulate_impact(
    recommendations: Sequence[CandidateRecommendation],
    analysis: PerformanceAnalysis,
) -> ImpactSimulation:
    """Project tracked metrics as if every recommendation were applied.

    Impact percentages targeting the same metric are added together. The
    confidence is the mean recommendation confidence, discounted by 5% per
    recommendation (at most 20%) for interactions between them.
    """
    projected = []
    for metric in TRACKED_METRICS:
        pct = sum(r.impact_value for r in recommendations if r.impact_metric == metric)
        interval = analysis.confidence_interval_for(metric)
        current = interval.mean if interval is not None else 0.0
        change = current * pct / 100
        projected.append(
            ProjectedMetric(
                metric=metric,
                current=current,
                projected=current + change,
                change=change,
                change_percentage=pct,
            )
        )

    if recommendations:
        mean_confidence = sum(r.confidence_score for r in recommendations) / len(
            recommendations
        )
        penalty = min(0.05 * len(recommendations), 0.2)
        confidence = mean_confidence * (1 - penalty)
    else:
        confidence = 0.0

    return ImpactSimulation(
        projected_metrics=projected,
        confidence=confidence,
        timeframe=TimeToImpact.TWO_TO_FOUR_WEEKS.value,
        recommendation_count=len(recommendations),
    )
