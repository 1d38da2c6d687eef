"""Repository interfaces for campaign data and recommendation history."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from paidsearch_recommender.models.impact import HistoricalRecommendation
    from paidsearch_recommender.models.keyword import (
        KeywordPerformance,
        SearchTermPerformance,
    )
    from paidsearch_recommender.models.metrics import CampaignConfig, MetricRecord


class MetricsRepository(ABC):
    """Interface for sources of campaign configuration and performance data."""

    @abstractmethod
    async def get_campaign(self, campaign_id: str) -> CampaignConfig | None:
        """Fetch a campaign's configuration, None when it does not exist."""
        pass

    @abstractmethod
    async def get_daily_metrics(
        self,
        campaign_id: str,
        start_date: date,
        end_date: date,
    ) -> list[MetricRecord]:
        """Fetch daily metric records between two dates, inclusive."""
        pass

    @abstractmethod
    async def get_keywords(self, campaign_id: str) -> list[KeywordPerformance]:
        """Fetch keyword performance for a campaign."""
        pass

    @abstractmethod
    async def get_search_terms(self, campaign_id: str) -> list[SearchTermPerformance]:
        """Fetch search term performance for a campaign."""
        pass


class RecommendationHistoryRepository(ABC):
    """Interface for the record of previously implemented recommendations."""

    @abstractmethod
    async def get_implemented_recommendations(
        self,
        recommendation_type: str,
        limit: int = 50,
    ) -> list[HistoricalRecommendation]:
        """Fetch implemented recommendations of a type, most recent first."""
        pass
