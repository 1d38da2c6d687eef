"""Test helper functions for creating campaigns, records and analyses."""

from collections.abc import Sequence
from datetime import date, timedelta

from paidsearch_recommender.models.analysis import (
    AnalysisSummary,
    ConfidenceInterval,
    DataQuality,
    OutlierDetection,
    OutlierSeverity,
    PerformanceAnalysis,
    PerformanceBenchmark,
    SignificanceTestResult,
    TrendAnalysis,
)
from paidsearch_recommender.models.metrics import (
    BiddingStrategy,
    CampaignConfig,
    MetricRecord,
)

START_DATE = date(2024, 1, 1)


def create_test_campaign(**overrides) -> CampaignConfig:
    """
    Create a test CampaignConfig with sensible defaults.

    Example:
        >>> campaign = create_test_campaign(budget=150.0, target_cpa=None)
    """
    defaults = {
        "campaign_id": "camp_test",
        "name": "Test Campaign",
        "budget": 100.0,
        "target_cpa": 50.0,
        "bidding_strategy": BiddingStrategy.TARGET_CPA,
    }
    return CampaignConfig(**{**defaults, **overrides})


def make_records(
    costs: Sequence[float],
    conversions: Sequence[float] | float = 5.0,
    conversion_value_per_conversion: float = 0.0,
    start: date = START_DATE,
) -> list[MetricRecord]:
    """Build consecutive daily records from a cost series."""
    if isinstance(conversions, (int, float)):
        conversions = [float(conversions)] * len(costs)
    return [
        MetricRecord(
            date=start + timedelta(days=i),
            impressions=1000,
            clicks=100,
            cost=cost,
            conversions=conv,
            conversion_value=conv * conversion_value_per_conversion,
        )
        for i, (cost, conv) in enumerate(zip(costs, conversions))
    ]


def create_test_analysis(
    *,
    health: str = "good",
    trends: dict[str, tuple] | None = None,
    intervals: dict[str, tuple[float, float]] | None = None,
    benchmarks: dict[str, tuple[str, float]] | None = None,
    significance: dict[str, float] | None = None,
    high_outliers: int = 0,
    sufficient: bool = True,
    completeness: float = 1.0,
    days: int = 30,
    campaign_id: str = "camp_test",
) -> PerformanceAnalysis:
    """
    Create a PerformanceAnalysis from compact descriptions.

    Args:
        health: Overall health value
        trends: metric -> (direction, confidence) or (direction, confidence, slope)
        intervals: metric -> (mean, standard_error)
        benchmarks: metric -> (status, percentage_difference)
        significance: metric -> p_value
        high_outliers: Number of high-severity outliers, one per day
        sufficient: Whether the window has sufficient data
        completeness: Data completeness ratio
        days: Days analyzed
        campaign_id: Campaign ID
    """
    trend_models = []
    for metric, shape in (trends or {}).items():
        direction, confidence = shape[0], shape[1]
        slope = shape[2] if len(shape) > 2 else {
            "increasing": 1.0,
            "decreasing": -1.0,
        }.get(direction, 0.0)
        trend_models.append(
            TrendAnalysis(
                metric=metric,
                slope=slope,
                trend=direction,
                change_percentage=10.0 if direction != "stable" else 0.0,
                confidence=confidence,
                interpretation=f"{metric} is {direction}",
            )
        )

    interval_models = [
        ConfidenceInterval(
            metric=metric,
            mean=mean,
            lower_bound=mean - 1.96 * se,
            upper_bound=mean + 1.96 * se,
            standard_error=se,
            sample_size=days,
        )
        for metric, (mean, se) in (intervals or {}).items()
    ]

    benchmark_models = [
        PerformanceBenchmark(
            metric=metric,
            current_value=100.0 + diff,
            benchmark_value=100.0,
            percentage_difference=diff,
            status=status,
        )
        for metric, (status, diff) in (benchmarks or {}).items()
    ]

    significance_models = [
        SignificanceTestResult(
            metric=metric,
            p_value=p_value,
            is_significant=p_value < 0.05,
            confidence_level=1 - p_value,
            interpretation=f"{metric} test",
        )
        for metric, p_value in (significance or {}).items()
    ]

    outliers = [
        OutlierDetection(
            date=START_DATE + timedelta(days=i),
            metric="cost",
            value=1000.0,
            z_score=4.0,
            severity=OutlierSeverity.HIGH,
        )
        for i in range(high_outliers)
    ]

    return PerformanceAnalysis(
        campaign_id=campaign_id,
        period_start=START_DATE,
        period_end=START_DATE + timedelta(days=days - 1),
        days_analyzed=days,
        data_quality=DataQuality(
            has_sufficient_data=sufficient,
            missing_days=0,
            data_completeness=completeness,
        ),
        significance_tests=significance_models,
        trends=trend_models,
        benchmarks=benchmark_models,
        outliers=outliers,
        confidence_intervals=interval_models,
        summary=AnalysisSummary(
            overall_health=health,
            key_findings=["Test finding"],
            recommendations=["Test recommendation"],
        ),
    )


__all__ = [
    "START_DATE",
    "create_test_analysis",
    "create_test_campaign",
    "make_records",
]
