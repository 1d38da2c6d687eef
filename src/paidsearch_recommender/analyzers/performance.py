"""Statistical performance analyzer.

Turns a daily metric series into trend, significance, benchmark, outlier and
confidence interval reports plus a qualitative health summary.
"""

import logging
from collections.abc import Sequence
from datetime import date

from paidsearch_recommender.analyzers import statistics
from paidsearch_recommender.core.config import AnalysisThresholds
from paidsearch_recommender.core.exceptions import AnalysisError
from paidsearch_recommender.models.analysis import (
    AnalysisSummary,
    BenchmarkStatus,
    ConfidenceInterval,
    DataQuality,
    OutlierDetection,
    OutlierSeverity,
    OverallHealth,
    PerformanceAnalysis,
    PerformanceBenchmark,
    SignificanceTestResult,
    TrendAnalysis,
    TrendDirection,
)
from paidsearch_recommender.models.metrics import MetricName, MetricRecord
from paidsearch_recommender.utils.numeric import percentage_change

logger = logging.getLogger(__name__)

# Direction of change that counts as a deterioration for each metric
ADVERSE_CHANGES: dict[str, str] = {
    MetricName.COST.value: "increased",
    MetricName.CONVERSIONS.value: "decreased",
    MetricName.CPA.value: "increased",
    MetricName.ROAS.value: "decreased",
}

CONCERNING_TRENDS: frozenset[tuple[str, str]] = frozenset(
    {
        (MetricName.CPA.value, TrendDirection.INCREASING.value),
        (MetricName.CONVERSIONS.value, TrendDirection.DECREASING.value),
        (MetricName.COST.value, TrendDirection.INCREASING.value),
    }
)


def _positive(records: Sequence[MetricRecord], attr: str) -> list[MetricRecord]:
    return [r for r in records if getattr(r, attr) > 0]


class StatisticalAnalyzer:
    """Analyze a campaign's daily metrics.

    All methods are deterministic functions of their arguments.
    """

    def __init__(self, thresholds: AnalysisThresholds | None = None):
        """Initialize the analyzer.

        Args:
            thresholds: Statistical thresholds, defaults used when omitted
        """
        self.thresholds = thresholds or AnalysisThresholds()

    def analyze(
        self,
        campaign_id: str,
        records: Sequence[MetricRecord],
        expected_days: int,
        period_start: date | None = None,
        period_end: date | None = None,
    ) -> PerformanceAnalysis:
        """Build the full performance report for a campaign window.

        Args:
            campaign_id: Campaign the records belong to
            records: Daily metric records, in any order
            expected_days: Number of days requested for the window
            period_start: Start of the window, defaults to the first record date
            period_end: End of the window, defaults to the last record date

        Returns:
            PerformanceAnalysis for the window

        Raises:
            AnalysisError: If no records are given and the period is not specified
        """
        ordered = sorted(records, key=lambda r: r.date)
        if period_start is None or period_end is None:
            if not ordered:
                raise AnalysisError(
                    "period_start and period_end are required when no records are supplied"
                )
            period_start = period_start or ordered[0].date
            period_end = period_end or ordered[-1].date

        data_quality = self.validate_data(ordered, expected_days)

        mid = len(ordered) // 2
        historical = ordered[:mid]
        recent = ordered[mid:]

        significance_tests = self._significance_tests(historical, recent)
        trends = self._trends(ordered)
        benchmarks = self._benchmarks(historical, recent)
        outliers = self._outliers(ordered)
        confidence_intervals = self._confidence_intervals(ordered)

        summary = self.summarize(data_quality, significance_tests, trends, outliers)

        logger.info(
            f"Analyzed {len(ordered)} days for campaign {campaign_id}: "
            f"health={summary.overall_health}, "
            f"{sum(1 for s in significance_tests if s.is_significant)} significant changes, "
            f"{len(outliers)} outliers"
        )

        return PerformanceAnalysis(
            campaign_id=campaign_id,
            period_start=period_start,
            period_end=period_end,
            days_analyzed=len(ordered),
            data_quality=data_quality,
            significance_tests=significance_tests,
            trends=trends,
            benchmarks=benchmarks,
            outliers=outliers,
            confidence_intervals=confidence_intervals,
            summary=summary,
        )

    def validate_data(
        self, records: Sequence[MetricRecord], expected_days: int
    ) -> DataQuality:
        """Check how much of the requested window is covered."""
        actual_days = len(records)
        completeness = (
            min(1.0, actual_days / expected_days) if expected_days > 0 else 0.0
        )
        return DataQuality(
            has_sufficient_data=(
                actual_days >= self.thresholds.min_days_required
                and completeness >= self.thresholds.min_data_completeness
            ),
            missing_days=max(0, expected_days - actual_days),
            data_completeness=completeness,
        )

    def test_significance(
        self,
        metric: str,
        historical: Sequence[float],
        recent: Sequence[float],
    ) -> SignificanceTestResult:
        """Welch's t-test between the historical and recent values of a metric."""
        result = statistics.welch_t_test(historical, recent)
        if result is None:
            return SignificanceTestResult(
                metric=metric,
                p_value=1.0,
                is_significant=False,
                confidence_level=0.0,
                interpretation="Insufficient data for statistical analysis",
                historical_mean=statistics.mean(historical),
                recent_mean=statistics.mean(recent),
            )

        historical_mean = statistics.mean(historical)
        recent_mean = statistics.mean(recent)
        change = percentage_change(recent_mean, historical_mean)
        is_significant = result.p_value < self.thresholds.significance_level

        if is_significant:
            direction = "increased" if recent_mean > historical_mean else "decreased"
            interpretation = (
                f"{metric} has {direction} by {abs(change):.1f}% "
                f"with statistical significance (p={result.p_value:.4f})"
            )
        else:
            interpretation = (
                f"{metric} change of {change:.1f}% is not statistically significant"
            )

        return SignificanceTestResult(
            metric=metric,
            p_value=result.p_value,
            is_significant=is_significant,
            confidence_level=1.0 - result.p_value,
            interpretation=interpretation,
            historical_mean=historical_mean,
            recent_mean=recent_mean,
            change_percentage=change,
            t_statistic=result.t_statistic,
            degrees_of_freedom=result.degrees_of_freedom,
        )

    def analyze_trend(self, metric: str, values: Sequence[float]) -> TrendAnalysis:
        """Least-squares trend of a metric over the window."""
        if len(values) < self.thresholds.min_trend_points:
            return TrendAnalysis(
                metric=metric,
                slope=0.0,
                trend=TrendDirection.STABLE,
                change_percentage=0.0,
                confidence=0.0,
                interpretation="Insufficient data for trend analysis",
            )

        fit = statistics.linear_trend(values)
        threshold = abs(statistics.mean(values)) * self.thresholds.stable_slope_ratio

        if fit.slope == 0 or abs(fit.slope) < threshold:
            trend = TrendDirection.STABLE
        elif fit.slope > 0:
            trend = TrendDirection.INCREASING
        else:
            trend = TrendDirection.DECREASING

        change = percentage_change(values[-1], values[0])

        return TrendAnalysis(
            metric=metric,
            slope=fit.slope,
            trend=trend,
            change_percentage=change,
            confidence=fit.r_squared,
            interpretation=self._interpret_trend(metric, trend, change, fit.r_squared),
        )

    def benchmark_performance(
        self, metric: str, current_value: float, benchmark_value: float
    ) -> PerformanceBenchmark:
        """Compare the current value of a metric against its benchmark."""
        difference = percentage_change(current_value, benchmark_value)

        if abs(difference) < self.thresholds.benchmark_tolerance_pct:
            status = BenchmarkStatus.AT_BENCHMARK
            interpretation = f"{metric} is performing at benchmark levels"
        else:
            status = BenchmarkStatus.ABOVE if difference > 0 else BenchmarkStatus.BELOW
            interpretation = (
                f"{metric} is {abs(difference):.1f}% {status.value} "
                f"the historical benchmark"
            )

        return PerformanceBenchmark(
            metric=metric,
            current_value=current_value,
            benchmark_value=benchmark_value,
            percentage_difference=difference,
            status=status,
            interpretation=interpretation,
        )

    def detect_outliers(
        self,
        metric: str,
        dates: Sequence[date],
        values: Sequence[float],
    ) -> list[OutlierDetection]:
        """Flag points more than the medium z threshold away from the mean."""
        outliers = []
        for day, value, z in zip(dates, values, statistics.z_scores(values)):
            if abs(z) <= self.thresholds.outlier_medium_z:
                continue
            severity = (
                OutlierSeverity.HIGH
                if abs(z) > self.thresholds.outlier_high_z
                else OutlierSeverity.MEDIUM
            )
            outliers.append(
                OutlierDetection(
                    date=day,
                    metric=metric,
                    value=value,
                    z_score=z,
                    severity=severity,
                )
            )
        return outliers

    def calculate_confidence_interval(
        self, metric: str, values: Sequence[float]
    ) -> ConfidenceInterval:
        """95% confidence interval around the mean of a metric."""
        interval = statistics.mean_interval(values)
        return ConfidenceInterval(
            metric=metric,
            mean=interval.mean,
            lower_bound=interval.mean - interval.margin,
            upper_bound=interval.mean + interval.margin,
            standard_error=interval.standard_error,
            confidence_level=0.95,
            sample_size=interval.sample_size,
        )

    def summarize(
        self,
        data_quality: DataQuality,
        significance_tests: Sequence[SignificanceTestResult],
        trends: Sequence[TrendAnalysis],
        outliers: Sequence[OutlierDetection],
    ) -> AnalysisSummary:
        """Synthesize health, findings and next steps from the reports."""
        key_findings: list[str] = []
        recommendations: list[str] = []

        if not data_quality.has_sufficient_data:
            key_findings.append(
                f"Limited data available "
                f"({data_quality.data_completeness * 100:.0f}% completeness)"
            )
            recommendations.append(
                "Ensure consistent data collection for more accurate analysis"
            )

        significant = [t for t in significance_tests if t.is_significant]
        if significant:
            key_findings.append(
                f"{len(significant)} metrics show statistically significant changes"
            )
            key_findings.extend(t.interpretation for t in significant)

        concerning = [t for t in trends if (t.metric, t.trend) in CONCERNING_TRENDS]
        for trend in concerning:
            key_findings.append(trend.interpretation)
            recommendations.append(
                f"Monitor {trend.metric} trend and consider optimization actions"
            )

        high_outliers = [o for o in outliers if o.severity == OutlierSeverity.HIGH]
        if high_outliers:
            key_findings.append(
                f"{len(high_outliers)} high-severity outliers detected"
            )
            recommendations.append("Investigate days with unusual performance patterns")

        adverse = [t for t in significant if self._is_adverse(t)]

        if (
            not data_quality.has_sufficient_data
            or len(concerning) > 2
            or len(high_outliers) > 3
        ):
            health = OverallHealth.POOR
        elif concerning or len(high_outliers) >= 2:
            health = OverallHealth.FAIR
        elif not adverse:
            health = OverallHealth.EXCELLENT
        else:
            health = OverallHealth.GOOD

        if not key_findings:
            key_findings.append(
                "Campaign performance is stable with no significant anomalies"
            )
        if not recommendations:
            recommendations.append(
                "Continue monitoring performance and maintain current strategy"
            )

        return AnalysisSummary(
            overall_health=health,
            key_findings=key_findings,
            recommendations=recommendations,
        )

    def _significance_tests(
        self,
        historical: Sequence[MetricRecord],
        recent: Sequence[MetricRecord],
    ) -> list[SignificanceTestResult]:
        tests = [
            self.test_significance(
                MetricName.COST.value,
                [r.cost for r in historical],
                [r.cost for r in recent],
            ),
            self.test_significance(
                MetricName.CONVERSIONS.value,
                [r.conversions for r in historical],
                [r.conversions for r in recent],
            ),
        ]

        for metric, attr in (
            (MetricName.CPA.value, "cost_per_conversion"),
            (MetricName.ROAS.value, "roas"),
        ):
            hist_values = [getattr(r, attr) for r in _positive(historical, attr)]
            recent_values = [getattr(r, attr) for r in _positive(recent, attr)]
            if hist_values and recent_values:
                tests.append(self.test_significance(metric, hist_values, recent_values))

        return tests

    def _trends(self, records: Sequence[MetricRecord]) -> list[TrendAnalysis]:
        if not records:
            return []

        trends = [
            self.analyze_trend(MetricName.COST.value, [r.cost for r in records]),
            self.analyze_trend(
                MetricName.CONVERSIONS.value, [r.conversions for r in records]
            ),
        ]

        for metric, attr in (
            (MetricName.CPA.value, "cost_per_conversion"),
            (MetricName.ROAS.value, "roas"),
        ):
            values = [getattr(r, attr) for r in _positive(records, attr)]
            if len(values) > self.thresholds.min_trend_points:
                trends.append(self.analyze_trend(metric, values))

        return trends

    def _benchmarks(
        self,
        historical: Sequence[MetricRecord],
        recent: Sequence[MetricRecord],
    ) -> list[PerformanceBenchmark]:
        if not historical or not recent:
            return []

        benchmarks = [
            self.benchmark_performance(
                MetricName.COST.value,
                statistics.mean([r.cost for r in recent]),
                statistics.mean([r.cost for r in historical]),
            ),
            self.benchmark_performance(
                MetricName.CONVERSIONS.value,
                statistics.mean([r.conversions for r in recent]),
                statistics.mean([r.conversions for r in historical]),
            ),
        ]

        hist_cpa = [
            r.cost_per_conversion
            for r in _positive(historical, "cost_per_conversion")
        ]
        recent_cpa = [
            r.cost_per_conversion for r in _positive(recent, "cost_per_conversion")
        ]
        if hist_cpa and recent_cpa:
            benchmarks.append(
                self.benchmark_performance(
                    MetricName.CPA.value,
                    statistics.mean(recent_cpa),
                    statistics.mean(hist_cpa),
                )
            )

        return benchmarks

    def _outliers(self, records: Sequence[MetricRecord]) -> list[OutlierDetection]:
        outliers = self.detect_outliers(
            MetricName.COST.value,
            [r.date for r in records],
            [r.cost for r in records],
        )
        outliers.extend(
            self.detect_outliers(
                MetricName.CONVERSIONS.value,
                [r.date for r in records],
                [r.conversions for r in records],
            )
        )
        converting = _positive(records, "cost_per_conversion")
        outliers.extend(
            self.detect_outliers(
                MetricName.CPA.value,
                [r.date for r in converting],
                [r.cost_per_conversion for r in converting],
            )
        )
        return outliers

    def _confidence_intervals(
        self, records: Sequence[MetricRecord]
    ) -> list[ConfidenceInterval]:
        if not records:
            return []

        intervals = [
            self.calculate_confidence_interval(
                MetricName.COST.value, [r.cost for r in records]
            ),
            self.calculate_confidence_interval(
                MetricName.CONVERSIONS.value, [r.conversions for r in records]
            ),
        ]

        for metric, attr in (
            (MetricName.CPA.value, "cost_per_conversion"),
            (MetricName.ROAS.value, "roas"),
        ):
            values = [getattr(r, attr) for r in _positive(records, attr)]
            if values:
                intervals.append(self.calculate_confidence_interval(metric, values))

        return intervals

    @staticmethod
    def _is_adverse(test: SignificanceTestResult) -> bool:
        adverse_direction = ADVERSE_CHANGES.get(test.metric)
        if adverse_direction == "increased":
            return test.recent_mean > test.historical_mean
        if adverse_direction == "decreased":
            return test.recent_mean < test.historical_mean
        return False

    @staticmethod
    def _interpret_trend(
        metric: str, trend: TrendDirection, change: float, r_squared: float
    ) -> str:
        if r_squared > 0.7:
            confidence = "high confidence"
        elif r_squared > 0.4:
            confidence = "moderate confidence"
        else:
            confidence = "low confidence"

        if trend == TrendDirection.STABLE:
            return f"{metric} has remained relatively stable ({confidence})"
        return f"{metric} is {trend.value} by {abs(change):.1f}% ({confidence})"
