"""Mock data provider for testing and demos."""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from paidsearch_recommender.data_providers.base import (
    MetricsRepository,
    RecommendationHistoryRepository,
)
from paidsearch_recommender.models.impact import HistoricalRecommendation
from paidsearch_recommender.models.keyword import (
    KeywordMatchType,
    KeywordPerformance,
    SearchTermPerformance,
)
from paidsearch_recommender.models.metrics import (
    BiddingStrategy,
    CampaignConfig,
    MetricRecord,
)
from paidsearch_recommender.models.recommendation import RecommendationType


@dataclass(frozen=True)
class CampaignProfile:
    """Shape of the generated daily series for one campaign."""

    config: CampaignConfig
    daily_cost: float
    daily_conversions: float
    value_per_conversion: float
    cpc: float
    ctr: float
    cost_drift: float = 0.0
    conversion_drift: float = 0.0


PROFILES: dict[str, CampaignProfile] = {
    "camp_001": CampaignProfile(
        config=CampaignConfig(
            campaign_id="camp_001",
            name="Brand - Core",
            budget=200.0,
            target_cpa=25.0,
            bidding_strategy=BiddingStrategy.TARGET_CPA,
        ),
        daily_cost=180.0,
        daily_conversions=9.0,
        value_per_conversion=90.0,
        cpc=1.2,
        ctr=0.08,
        conversion_drift=0.01,
    ),
    "camp_002": CampaignProfile(
        config=CampaignConfig(
            campaign_id="camp_002",
            name="Generic - Shoes",
            budget=150.0,
            target_cpa=40.0,
            bidding_strategy=BiddingStrategy.MANUAL_CPC,
        ),
        daily_cost=120.0,
        daily_conversions=4.0,
        value_per_conversion=60.0,
        cpc=2.1,
        ctr=0.03,
        cost_drift=0.02,
        conversion_drift=-0.015,
    ),
    "camp_003": CampaignProfile(
        config=CampaignConfig(
            campaign_id="camp_003",
            name="Competitor - Terms",
            budget=80.0,
            bidding_strategy=BiddingStrategy.ENHANCED_CPC,
        ),
        daily_cost=60.0,
        daily_conversions=1.0,
        value_per_conversion=45.0,
        cpc=3.4,
        ctr=0.015,
    ),
}

HISTORY_IMPACTS: dict[str, float] = {
    RecommendationType.BUDGET_REALLOCATION.value: 14.0,
    RecommendationType.KEYWORD_OPTIMIZATION.value: 20.0,
    RecommendationType.BID_ADJUSTMENT.value: -12.5,
    RecommendationType.ADD_NEGATIVE_KEYWORD.value: -15.0,
    RecommendationType.PAUSE_KEYWORD.value: -10.0,
    RecommendationType.BIDDING_STRATEGY_CHANGE.value: -15.0,
}


class MockMetricsProvider(MetricsRepository, RecommendationHistoryRepository):
    """Mock data provider for testing purposes.

    Returns seeded sample data for three campaigns: a healthy brand campaign,
    a generic campaign whose CPA is deteriorating, and a low-volume competitor
    campaign without a target CPA. The same seed always yields the same data.
    """

    def __init__(self, seed: int = 42, profiles: dict[str, CampaignProfile] | None = None):
        """Initialize the mock data provider.

        Args:
            seed: Random seed for consistent test data generation
            profiles: Campaign profiles, defaults to the built-in sample set
        """
        self.seed = seed
        self.profiles = profiles if profiles is not None else PROFILES

    def _rng(self, *parts: object) -> random.Random:
        return random.Random(":".join(str(p) for p in (self.seed, *parts)))

    @staticmethod
    def _add_variance(
        rng: random.Random, base_value: float, variance_pct: float = 0.2
    ) -> float:
        """Add seeded random variance to a base value.

        Args:
            rng: Seeded random generator
            base_value: The base value to vary
            variance_pct: Percentage variance (0.2 = ±20%)

        Returns:
            Value with random variance applied
        """
        variance = base_value * variance_pct
        return max(0, base_value + rng.uniform(-variance, variance))

    async def get_campaign(self, campaign_id: str) -> CampaignConfig | None:
        """Return the sample campaign configuration."""
        profile = self.profiles.get(campaign_id)
        return profile.config if profile else None

    async def get_daily_metrics(
        self, campaign_id: str, start_date: date, end_date: date
    ) -> list[MetricRecord]:
        """Return one generated record per day, drifting linearly over the range."""
        profile = self.profiles.get(campaign_id)
        if profile is None or end_date < start_date:
            return []

        rng = self._rng(campaign_id, start_date, end_date)
        records = []
        days = (end_date - start_date).days + 1
        for i in range(days):
            cost = self._add_variance(rng, profile.daily_cost * (1 + profile.cost_drift * i), 0.1)
            conversions = self._add_variance(
                rng,
                max(0.0, profile.daily_conversions * (1 + profile.conversion_drift * i)),
                0.15,
            )
            clicks = int(cost / profile.cpc)
            records.append(
                MetricRecord(
                    date=start_date + timedelta(days=i),
                    impressions=int(clicks / profile.ctr),
                    clicks=clicks,
                    cost=round(cost, 2),
                    conversions=round(conversions, 1),
                    conversion_value=round(conversions * profile.value_per_conversion, 2),
                )
            )
        return records

    async def get_keywords(self, campaign_id: str) -> list[KeywordPerformance]:
        """Return sample keywords covering every keyword action."""
        if campaign_id not in self.profiles:
            return []

        rng = self._rng(campaign_id, "keywords")
        samples = [
            ("kw_001", "running shoes", KeywordMatchType.EXACT, 8, 5000, 400, 300.0, 20.0),
            ("kw_002", "buy running shoes", KeywordMatchType.PHRASE, 7, 3000, 150, 200.0, 4.0),
            ("kw_003", "free shoes", KeywordMatchType.BROAD, 3, 8000, 90, 120.0, 0.0),
            ("kw_004", "trail shoes", KeywordMatchType.PHRASE, 6, 4000, 60, 90.0, 2.0),
            ("kw_005", "shoe store", KeywordMatchType.BROAD, 5, 9000, 50, 40.0, 1.0),
        ]
        return [
            KeywordPerformance(
                keyword_id=f"{campaign_id}_{keyword_id}",
                text=text,
                campaign_id=campaign_id,
                ad_group_id=f"{campaign_id}_ag_001",
                match_type=match_type,
                quality_score=quality_score,
                impressions=impressions,
                clicks=clicks,
                cost=round(self._add_variance(rng, cost, 0.05), 2),
                conversions=conversions,
                conversion_value=conversions * 75.0,
            )
            for keyword_id, text, match_type, quality_score, impressions, clicks, cost, conversions in samples
        ]

    async def get_search_terms(self, campaign_id: str) -> list[SearchTermPerformance]:
        """Return sample search terms, including wasteful ones."""
        if campaign_id not in self.profiles:
            return []

        rng = self._rng(campaign_id, "search_terms")
        samples = [
            ("brand running shoes", 500, 250.0, 25.0),
            ("free running shoes", 80, 95.0, 0.0),
            ("running shoes repair", 40, 35.0, 0.0),
            ("cheap shoes", 200, 150.0, 1.0),
            ("shoe size chart", 15, 12.0, 0.0),
        ]
        return [
            SearchTermPerformance(
                search_term=term,
                campaign_id=campaign_id,
                ad_group_id=f"{campaign_id}_ag_001",
                keyword_text="running shoes",
                impressions=clicks * 12,
                clicks=clicks,
                cost=round(self._add_variance(rng, cost, 0.05), 2),
                conversions=conversions,
                conversion_value=conversions * 75.0,
            )
            for term, clicks, cost, conversions in samples
        ]

    async def get_implemented_recommendations(
        self, recommendation_type: str, limit: int = 50
    ) -> list[HistoricalRecommendation]:
        """Return generated history scattered around typical impacts."""
        expected = HISTORY_IMPACTS.get(recommendation_type)
        if expected is None:
            return []

        rng = self._rng("history", recommendation_type)
        now = datetime(2024, 1, 1)
        records = [
            HistoricalRecommendation(
                recommendation_type=recommendation_type,
                impact_value=expected,
                actual_impact=round(expected * rng.uniform(0.7, 1.3), 2),
                implemented_at=now - timedelta(days=7 * i),
            )
            for i in range(12)
        ]
        return records[:limit]
