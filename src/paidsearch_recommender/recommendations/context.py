"""Inputs shared by every recommendation rule."""

from collections.abc import Sequence
from dataclasses import dataclass, field

from paidsearch_recommender.models.analysis import (
    PerformanceAnalysis,
    PerformanceBenchmark,
    TrendAnalysis,
)
from paidsearch_recommender.models.metrics import CampaignConfig, MetricName
from paidsearch_recommender.models.recommendation import (
    KeywordRecommendation,
    SearchTermRecommendation,
)


@dataclass(frozen=True)
class RecommendationContext:
    """Analysis, campaign configuration and item-level findings for one campaign."""

    analysis: PerformanceAnalysis
    campaign: CampaignConfig
    keyword_recommendations: Sequence[KeywordRecommendation] = field(
        default_factory=tuple
    )
    search_term_recommendations: Sequence[SearchTermRecommendation] = field(
        default_factory=tuple
    )
    max_negative_keywords: int = 20

    @property
    def campaign_id(self) -> str:
        return self.campaign.campaign_id

    @property
    def health(self) -> str:
        return self.analysis.summary.overall_health

    @property
    def high_outlier_count(self) -> int:
        return len(self.analysis.high_severity_outliers)

    def trend(self, metric: MetricName) -> TrendAnalysis | None:
        return self.analysis.trend_for(metric.value)

    def trend_is(self, metric: MetricName, direction: str) -> bool:
        """True when the metric has a trend in the given direction."""
        trend = self.trend(metric)
        return trend is not None and trend.trend == direction

    def benchmark(self, metric: MetricName) -> PerformanceBenchmark | None:
        return self.analysis.benchmark_for(metric.value)

    def mean(self, metric: MetricName) -> float:
        """Window mean of a metric, 0 when it was not measured."""
        interval = self.analysis.confidence_interval_for(metric.value)
        return interval.mean if interval is not None else 0.0

    @property
    def window_cost(self) -> float:
        """Total spend over the analyzed window."""
        return self.mean(MetricName.COST) * self.analysis.days_analyzed
