"""Data providers for the recommender.

This module provides the repository interfaces the pipeline reads from and
two implementations:
- In-memory storage for callers that already hold the data
- Mock data for testing and demos
"""

from paidsearch_recommender.data_providers.base import (
    MetricsRepository,
    RecommendationHistoryRepository,
)
from paidsearch_recommender.data_providers.memory import InMemoryRepository
from paidsearch_recommender.data_providers.mock_provider import MockMetricsProvider

__all__ = [
    "InMemoryRepository",
    "MetricsRepository",
    "MockMetricsProvider",
    "RecommendationHistoryRepository",
]
