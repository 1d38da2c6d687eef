"""In-memory repositories."""

import logging
from collections import defaultdict
from collections.abc import Iterable
from datetime import date, datetime

from paidsearch_recommender.data_providers.base import (
    MetricsRepository,
    RecommendationHistoryRepository,
)
from paidsearch_recommender.models.impact import HistoricalRecommendation
from paidsearch_recommender.models.keyword import (
    KeywordPerformance,
    SearchTermPerformance,
)
from paidsearch_recommender.models.metrics import CampaignConfig, MetricRecord

logger = logging.getLogger(__name__)


class InMemoryRepository(MetricsRepository, RecommendationHistoryRepository):
    """Repository holding campaigns, metrics and history in dictionaries.

    Useful for tests and for callers that already have the data loaded.
    """

    def __init__(self) -> None:
        self._campaigns: dict[str, CampaignConfig] = {}
        self._metrics: dict[str, list[MetricRecord]] = defaultdict(list)
        self._keywords: dict[str, list[KeywordPerformance]] = defaultdict(list)
        self._search_terms: dict[str, list[SearchTermPerformance]] = defaultdict(list)
        self._history: list[HistoricalRecommendation] = []

    def add_campaign(
        self,
        campaign: CampaignConfig,
        metrics: Iterable[MetricRecord] = (),
        keywords: Iterable[KeywordPerformance] = (),
        search_terms: Iterable[SearchTermPerformance] = (),
    ) -> None:
        """Store a campaign and its data, replacing anything stored before."""
        campaign_id = campaign.campaign_id
        self._campaigns[campaign_id] = campaign
        self._metrics[campaign_id] = sorted(metrics, key=lambda r: r.date)
        self._keywords[campaign_id] = list(keywords)
        self._search_terms[campaign_id] = list(search_terms)

    def add_history(self, records: Iterable[HistoricalRecommendation]) -> None:
        """Append implemented recommendations to the history."""
        self._history.extend(records)

    async def get_campaign(self, campaign_id: str) -> CampaignConfig | None:
        campaign = self._campaigns.get(campaign_id)
        if campaign is None:
            logger.warning(f"Campaign {campaign_id} not found in memory repository")
        return campaign

    async def get_daily_metrics(
        self, campaign_id: str, start_date: date, end_date: date
    ) -> list[MetricRecord]:
        return [
            r for r in self._metrics.get(campaign_id, []) if start_date <= r.date <= end_date
        ]

    async def get_keywords(self, campaign_id: str) -> list[KeywordPerformance]:
        return list(self._keywords.get(campaign_id, []))

    async def get_search_terms(self, campaign_id: str) -> list[SearchTermPerformance]:
        return list(self._search_terms.get(campaign_id, []))

    async def get_implemented_recommendations(
        self, recommendation_type: str, limit: int = 50
    ) -> list[HistoricalRecommendation]:
        matching = [h for h in self._history if h.recommendation_type == recommendation_type]
        matching.sort(key=lambda h: h.implemented_at or datetime.min, reverse=True)
        return matching[:limit]
