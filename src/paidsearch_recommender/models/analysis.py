"""Performance analysis report models."""

from datetime import date
from enum import Enum

from pydantic import Field

from paidsearch_recommender.models.base import BaseRecommenderModel


class TrendDirection(str, Enum):
    """Direction of a metric trend."""

    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class BenchmarkStatus(str, Enum):
    """Recent performance relative to the historical benchmark."""

    ABOVE = "above"
    BELOW = "below"
    AT_BENCHMARK = "at_benchmark"


class OutlierSeverity(str, Enum):
    """Severity of an outlier observation."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class OverallHealth(str, Enum):
    """Qualitative campaign health."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class SignificanceTestResult(BaseRecommenderModel):
    """Welch's t-test between the historical and recent halves of a window."""

    metric: str
    p_value: float = Field(..., ge=0.0, le=1.0)
    is_significant: bool
    confidence_level: float = Field(..., ge=0.0, le=1.0)
    interpretation: str
    historical_mean: float = 0.0
    recent_mean: float = 0.0
    change_percentage: float = 0.0
    t_statistic: float = 0.0
    degrees_of_freedom: float = 0.0


class TrendAnalysis(BaseRecommenderModel):
    """Least-squares trend of a metric over the window."""

    metric: str
    slope: float
    trend: TrendDirection
    change_percentage: float
    confidence: float = Field(..., ge=0.0, le=1.0, description="R² of the fit")
    interpretation: str = ""


class PerformanceBenchmark(BaseRecommenderModel):
    """Recent-half mean compared with the historical-half mean."""

    metric: str
    current_value: float
    benchmark_value: float
    percentage_difference: float
    status: BenchmarkStatus
    interpretation: str = ""


class OutlierDetection(BaseRecommenderModel):
    """A single day whose value sits far from the window mean."""

    date: date
    metric: str
    value: float
    z_score: float
    severity: OutlierSeverity


class ConfidenceInterval(BaseRecommenderModel):
    """Confidence interval around a metric mean."""

    metric: str
    mean: float
    lower_bound: float
    upper_bound: float
    standard_error: float
    confidence_level: float = 0.95
    sample_size: int = 0


class DataQuality(BaseRecommenderModel):
    """Coverage of the requested window."""

    has_sufficient_data: bool
    missing_days: int = Field(..., ge=0)
    data_completeness: float = Field(..., ge=0.0, le=1.0)


class AnalysisSummary(BaseRecommenderModel):
    """Qualitative synthesis of the statistical reports."""

    overall_health: OverallHealth
    key_findings: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class PerformanceAnalysis(BaseRecommenderModel):
    """Complete statistical report for one campaign window."""

    campaign_id: str
    period_start: date
    period_end: date
    days_analyzed: int = Field(..., ge=0)
    data_quality: DataQuality
    significance_tests: list[SignificanceTestResult] = Field(default_factory=list)
    trends: list[TrendAnalysis] = Field(default_factory=list)
    benchmarks: list[PerformanceBenchmark] = Field(default_factory=list)
    outliers: list[OutlierDetection] = Field(default_factory=list)
    confidence_intervals: list[ConfidenceInterval] = Field(default_factory=list)
    summary: AnalysisSummary

    def trend_for(self, metric: str) -> TrendAnalysis | None:
        """Return the trend for a metric, if one was computed."""
        return next((t for t in self.trends if t.metric == metric), None)

    def significance_for(self, metric: str) -> SignificanceTestResult | None:
        """Return the significance test for a metric, if one was computed."""
        return next((s for s in self.significance_tests if s.metric == metric), None)

    def benchmark_for(self, metric: str) -> PerformanceBenchmark | None:
        """Return the benchmark for a metric, if one was computed."""
        return next((b for b in self.benchmarks if b.metric == metric), None)

    def confidence_interval_for(self, metric: str) -> ConfidenceInterval | None:
        """Return the confidence interval for a metric, if one was computed."""
        return next(
            (ci for ci in self.confidence_intervals if ci.metric == metric), None
        )

    @property
    def high_severity_outliers(self) -> list[OutlierDetection]:
        """Outliers classified as high severity."""
        return [o for o in self.outliers if o.severity == OutlierSeverity.HIGH]
