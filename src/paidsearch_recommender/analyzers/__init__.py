"""Analyzers for campaign, keyword and search term performance."""

from paidsearch_recommender.analyzers.base import RuleBasedAnalyzer
from paidsearch_recommender.analyzers.forecasting import (
    allocate_budget,
    forecast_budget,
)
from paidsearch_recommender.analyzers.insights import (
    predict_cpa,
    segment_campaign,
    segment_campaigns,
)
from paidsearch_recommender.analyzers.keyword_performance import (
    KeywordPerformanceAnalyzer,
)
from paidsearch_recommender.analyzers.performance import StatisticalAnalyzer
from paidsearch_recommender.analyzers.search_term_waste import (
    SearchTermWasteAnalyzer,
)

__all__ = [
    "KeywordPerformanceAnalyzer",
    "RuleBasedAnalyzer",
    "SearchTermWasteAnalyzer",
    "StatisticalAnalyzer",
    "allocate_budget",
    "forecast_budget",
    "predict_cpa",
    "segment_campaign",
    "segment_campaigns",
]
