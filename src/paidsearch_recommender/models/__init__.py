"""Data models for the paid search recommender."""

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
from paidsearch_recommender.models.base import BaseRecommenderModel
from paidsearch_recommender.models.impact import (
    HistoricalRecommendation,
    HistoricalValidation,
    ImpactEstimate,
    ImpactSimulation,
    ImplementationComplexity,
    RankedRecommendation,
    RecommendationImpact,
    RiskLevel,
    TimeToImpact,
)
from paidsearch_recommender.models.insights import (
    BudgetAllocation,
    BudgetForecast,
    CampaignBudgetInput,
    CampaignSegment,
    CPAPrediction,
)
from paidsearch_recommender.models.keyword import (
    KeywordMatchType,
    KeywordPerformance,
    KeywordStatus,
    SearchTermPerformance,
)
from paidsearch_recommender.models.metrics import (
    BiddingStrategy,
    CampaignConfig,
    MetricName,
    MetricRecord,
)
from paidsearch_recommender.models.recommendation import (
    BudgetEfficiency,
    CandidateRecommendation,
    KeywordAction,
    KeywordRecommendation,
    RecommendationPriority,
    RecommendationType,
    SavingsSummary,
    SearchTermRecommendation,
)

__all__ = [
    "AnalysisSummary",
    "BaseRecommenderModel",
    "BenchmarkStatus",
    "BiddingStrategy",
    "BudgetAllocation",
    "BudgetEfficiency",
    "BudgetForecast",
    "CampaignBudgetInput",
    "CampaignConfig",
    "CampaignSegment",
    "CandidateRecommendation",
    "ConfidenceInterval",
    "CPAPrediction",
    "DataQuality",
    "HistoricalRecommendation",
    "HistoricalValidation",
    "ImpactEstimate",
    "ImpactSimulation",
    "ImplementationComplexity",
    "KeywordAction",
    "KeywordMatchType",
    "KeywordPerformance",
    "KeywordRecommendation",
    "KeywordStatus",
    "MetricName",
    "MetricRecord",
    "OutlierDetection",
    "OutlierSeverity",
    "OverallHealth",
    "PerformanceAnalysis",
    "PerformanceBenchmark",
    "RankedRecommendation",
    "RecommendationImpact",
    "RecommendationPriority",
    "RecommendationType",
    "RiskLevel",
    "SavingsSummary",
    "SearchTermPerformance",
    "SearchTermRecommendation",
    "SignificanceTestResult",
    "TimeToImpact",
    "TrendAnalysis",
    "TrendDirection",
]
