"""End-to-end recommendation pipeline.

Fetches a campaign's data from a repository, analyzes it, generates candidate
recommendations, estimates their impact and returns them prioritized.
"""

import asyncio
import logging
from collections.abc import Iterable, Sequence
from datetime import date, timedelta

from pydantic import Field

from paidsearch_recommender.analyzers.keyword_performance import (
    KeywordPerformanceAnalyzer,
)
from paidsearch_recommender.analyzers.performance import StatisticalAnalyzer
from paidsearch_recommender.analyzers.search_term_waste import (
    SearchTermWasteAnalyzer,
)
from paidsearch_recommender.core.config import Settings, get_settings
from paidsearch_recommender.core.exceptions import CampaignNotFoundError
from paidsearch_recommender.data_providers.base import (
    MetricsRepository,
    RecommendationHistoryRepository,
)
from paidsearch_recommender.impact.estimator import ImpactEstimator
from paidsearch_recommender.models.analysis import PerformanceAnalysis
from paidsearch_recommender.models.base import BaseRecommenderModel
from paidsearch_recommender.models.impact import (
    HistoricalRecommendation,
    RankedRecommendation,
)
from paidsearch_recommender.models.metrics import CampaignConfig, MetricRecord
from paidsearch_recommender.models.recommendation import (
    KeywordRecommendation,
    SearchTermRecommendation,
)
from paidsearch_recommender.prioritizer import prioritize
from paidsearch_recommender.recommendations.context import RecommendationContext
from paidsearch_recommender.recommendations.generator import RecommendationGenerator

logger = logging.getLogger(__name__)


class CampaignWindow(BaseRecommenderModel):
    """A campaign's configuration with its daily records for one window."""

    campaign: CampaignConfig
    records: list[MetricRecord] = Field(default_factory=list)
    start_date: date
    end_date: date
    expected_days: int


class PipelineResult(BaseRecommenderModel):
    """Everything produced for one campaign."""

    analysis: PerformanceAnalysis
    recommendations: list[RankedRecommendation] = Field(default_factory=list)
    keyword_recommendations: list[KeywordRecommendation] = Field(default_factory=list)
    search_term_recommendations: list[SearchTermRecommendation] = Field(
        default_factory=list
    )
    unsupported_categories: list[str] = Field(default_factory=list)


class RecommendationPipeline:
    """Run analysis, generation, estimation and prioritization for campaigns."""

    def __init__(
        self,
        metrics_repository: MetricsRepository,
        history_repository: RecommendationHistoryRepository | None = None,
        settings: Settings | None = None,
        generator: RecommendationGenerator | None = None,
        estimator: ImpactEstimator | None = None,
    ):
        """Initialize the pipeline.

        Args:
            metrics_repository: Source of campaign configuration and metrics
            history_repository: Source of past implemented recommendations; impact
                estimates carry no historical validation without it
            settings: Application settings, the cached settings when omitted
            generator: Recommendation generator, the default handler set when omitted
            estimator: Impact estimator, the default lookups when omitted
        """
        self.metrics_repository = metrics_repository
        self.history_repository = history_repository
        self.settings = settings or get_settings()
        self.analyzer = StatisticalAnalyzer(self.settings.analysis)
        self.keyword_analyzer = KeywordPerformanceAnalyzer(self.settings.keywords)
        self.search_term_analyzer = SearchTermWasteAnalyzer(self.settings.search_terms)
        self.generator = generator or RecommendationGenerator()
        self.estimator = estimator or ImpactEstimator(
            history_limit=self.settings.history_sample_limit
        )

    async def run(
        self,
        campaign_id: str,
        end_date: date | None = None,
        lookback_days: int | None = None,
        categories: Iterable[str] | None = None,
    ) -> PipelineResult:
        """Produce prioritized recommendations for one campaign.

        Args:
            campaign_id: Campaign to analyze
            end_date: Last day of the window, today when omitted
            lookback_days: Window length, the configured default when omitted
            categories: Recommendation categories to run, all when omitted

        Returns:
            PipelineResult for the campaign

        Raises:
            CampaignNotFoundError: If the repository has no such campaign
        """
        window = await self.load_window(campaign_id, end_date, lookback_days)
        campaign = window.campaign
        keywords, search_terms = await asyncio.gather(
            self.metrics_repository.get_keywords(campaign_id),
            self.metrics_repository.get_search_terms(campaign_id),
        )
        logger.info(
            f"Fetched {len(keywords)} keywords and {len(search_terms)} search terms "
            f"for campaign {campaign_id}"
        )

        analysis = self.analyze_window(window)

        target_cpa = (
            campaign.target_cpa
            if campaign.target_cpa is not None
            else self.settings.keywords.default_target_cpa
        )
        keyword_recommendations = self.keyword_analyzer.analyze(keywords, target_cpa)
        search_term_recommendations = self.search_term_analyzer.analyze(
            search_terms, target_cpa
        )

        generated = self.generator.generate(
            RecommendationContext(
                analysis=analysis,
                campaign=campaign,
                keyword_recommendations=keyword_recommendations,
                search_term_recommendations=search_term_recommendations,
                max_negative_keywords=self.settings.search_terms.max_negative_keywords,
            ),
            categories,
        )

        history = await self._load_history(
            {r.type for r in generated.recommendations}
        )
        ranked = [
            RankedRecommendation(
                recommendation=recommendation,
                impact=self.estimator.estimate(
                    recommendation, analysis, history.get(recommendation.type)
                ),
            )
            for recommendation in generated.recommendations
        ]

        return PipelineResult(
            analysis=analysis,
            recommendations=prioritize(ranked),
            keyword_recommendations=keyword_recommendations,
            search_term_recommendations=search_term_recommendations,
            unsupported_categories=generated.unsupported_categories,
        )

    async def load_window(
        self,
        campaign_id: str,
        end_date: date | None = None,
        lookback_days: int | None = None,
    ) -> CampaignWindow:
        """Fetch a campaign's configuration and daily records for a window.

        Raises:
            CampaignNotFoundError: If the repository has no such campaign
        """
        campaign = await self.metrics_repository.get_campaign(campaign_id)
        if campaign is None:
            raise CampaignNotFoundError(campaign_id)

        days = lookback_days or self.settings.lookback_days
        end = end_date or date.today()
        start = end - timedelta(days=days - 1)
        records = await self.metrics_repository.get_daily_metrics(
            campaign_id, start, end
        )
        logger.info(
            f"Fetched {len(records)} daily records for campaign {campaign_id} "
            f"({start} to {end})"
        )
        return CampaignWindow(
            campaign=campaign,
            records=records,
            start_date=start,
            end_date=end,
            expected_days=days,
        )

    def analyze_window(self, window: CampaignWindow) -> PerformanceAnalysis:
        """Run the statistical analysis over a fetched window."""
        return self.analyzer.analyze(
            window.campaign.campaign_id,
            window.records,
            window.expected_days,
            period_start=window.start_date,
            period_end=window.end_date,
        )

    async def analyze(
        self,
        campaign_id: str,
        end_date: date | None = None,
        lookback_days: int | None = None,
    ) -> PerformanceAnalysis:
        """Fetch and analyze a campaign window without generating recommendations."""
        window = await self.load_window(campaign_id, end_date, lookback_days)
        return self.analyze_window(window)

    async def run_many(
        self,
        campaign_ids: Sequence[str],
        end_date: date | None = None,
        lookback_days: int | None = None,
    ) -> dict[str, PipelineResult]:
        """Run the pipeline for several campaigns concurrently.

        Raises:
            CampaignNotFoundError: If any campaign is missing
        """
        results = await asyncio.gather(
            *(self.run(cid, end_date, lookback_days) for cid in campaign_ids)
        )
        return dict(zip(campaign_ids, results))

    async def _load_history(
        self, recommendation_types: set[str]
    ) -> dict[str, list[HistoricalRecommendation]]:
        """Fetch history once per recommendation type."""
        if self.history_repository is None or not recommendation_types:
            return {}

        types = sorted(recommendation_types)
        limit = self.settings.history_sample_limit
        fetched = await asyncio.gather(
            *(
                self.history_repository.get_implemented_recommendations(t, limit)
                for t in types
            )
        )
        return dict(zip(types, fetched))
