"""Tests for the end-to-end recommendation pipeline."""

from datetime import date

import pytest

from paidsearch_recommender.core.exceptions import CampaignNotFoundError
from paidsearch_recommender.data_providers.memory import InMemoryRepository
from paidsearch_recommender.data_providers.mock_provider import MockMetricsProvider
from paidsearch_recommender.models.keyword import (
    KeywordPerformance,
    SearchTermPerformance,
)
from paidsearch_recommender.pipeline import RecommendationPipeline
from paidsearch_recommender.prioritizer import sort_key
from tests.helpers.analysis_helpers import create_test_campaign, make_records
from tests.helpers.recommendation_helpers import create_history

END_DATE = date(2024, 1, 30)


class CountingRepository(InMemoryRepository):
    """In-memory repository that records history lookups."""

    def __init__(self):
        super().__init__()
        self.history_calls: list[str] = []

    async def get_implemented_recommendations(self, recommendation_type, limit=50):
        self.history_calls.append(recommendation_type)
        return await super().get_implemented_recommendations(recommendation_type, limit)


@pytest.fixture
def repository(campaign, stable_records):
    """Repository with one campaign carrying wasteful terms and mixed keywords."""
    repository = CountingRepository()
    repository.add_campaign(
        campaign,
        metrics=stable_records,
        keywords=[
            KeywordPerformance(
                keyword_id="kw_pause", text="free shoes", cost=80.0, clicks=40
            ),
            KeywordPerformance(
                keyword_id="kw_scale",
                text="running shoes",
                impressions=1000,
                clicks=100,
                cost=100.0,
                conversions=10,
            ),
            KeywordPerformance(
                keyword_id="kw_optimize",
                text="trail shoes",
                impressions=1000,
                clicks=100,
                cost=120.0,
                conversions=2,
            ),
        ],
        search_terms=[
            SearchTermPerformance(search_term="free running shoes", cost=208.0, clicks=40),
            SearchTermPerformance(search_term="shoe repair", cost=30.0, clicks=10),
        ],
    )
    repository.add_history(create_history("KEYWORD_OPTIMIZATION", [20.0] * 12, 20.0))
    return repository


@pytest.fixture
def pipeline(repository, settings):
    """Pipeline reading metrics and history from the same repository."""
    return RecommendationPipeline(repository, repository, settings=settings)


class TestRun:
    """Test a full pipeline run."""

    @pytest.mark.asyncio
    async def test_produces_prioritized_recommendations(self, pipeline):
        """Test recommendations are impact-scored and ordered."""
        result = await pipeline.run("camp_test", END_DATE, 30)

        assert result.analysis.summary.overall_health == "excellent"
        assert [r.recommendation.type for r in result.recommendations] == [
            "ADD_NEGATIVE_KEYWORD",
            "PAUSE_KEYWORD",
            "KEYWORD_OPTIMIZATION",
            "KEYWORD_OPTIMIZATION",
        ]
        assert result.recommendations[0].recommendation.priority == "critical"
        keys = [sort_key(r) for r in result.recommendations]
        assert keys == sorted(keys)
        assert result.unsupported_categories == ["ad_creative"]

    @pytest.mark.asyncio
    async def test_item_findings_returned(self, pipeline):
        """Test keyword and search term findings are returned alongside."""
        result = await pipeline.run("camp_test", END_DATE, 30)

        assert {k.keyword_id for k in result.keyword_recommendations} == {
            "kw_pause",
            "kw_scale",
            "kw_optimize",
        }
        assert [s.search_term for s in result.search_term_recommendations] == [
            "free running shoes",
            "shoe repair",
        ]

    @pytest.mark.asyncio
    async def test_history_fetched_once_per_type(self, pipeline, repository):
        """Test history is loaded once per recommendation type."""
        result = await pipeline.run("camp_test", END_DATE, 30)

        assert sorted(repository.history_calls) == [
            "ADD_NEGATIVE_KEYWORD",
            "KEYWORD_OPTIMIZATION",
            "PAUSE_KEYWORD",
        ]
        validated = [
            r for r in result.recommendations if r.impact.historical_validation
        ]
        assert {r.recommendation.type for r in validated} == {"KEYWORD_OPTIMIZATION"}

    @pytest.mark.asyncio
    async def test_without_history_repository(self, repository, settings):
        """Test estimates carry no validation without a history source."""
        pipeline = RecommendationPipeline(repository, settings=settings)

        result = await pipeline.run("camp_test", END_DATE, 30)

        assert all(r.impact.historical_validation is None for r in result.recommendations)
        assert repository.history_calls == []

    @pytest.mark.asyncio
    async def test_selected_categories(self, pipeline):
        """Test only the requested categories are generated."""
        result = await pipeline.run("camp_test", END_DATE, 30, categories=["budget"])

        assert result.recommendations == []
        assert result.unsupported_categories == []

    @pytest.mark.asyncio
    async def test_unknown_campaign(self, pipeline):
        """Test a missing campaign raises."""
        with pytest.raises(CampaignNotFoundError) as exc_info:
            await pipeline.run("camp_missing", END_DATE, 30)

        assert exc_info.value.campaign_id == "camp_missing"

    @pytest.mark.asyncio
    async def test_default_target_cpa(self, settings):
        """Test the configured target CPA is used when the campaign has none."""
        repository = InMemoryRepository()
        repository.add_campaign(
            create_test_campaign(target_cpa=None),
            metrics=make_records([100.0] * 30),
            keywords=[
                KeywordPerformance(
                    keyword_id="kw_1",
                    text="shoes",
                    impressions=1000,
                    clicks=100,
                    cost=650.0,
                    conversions=3,
                )
            ],
        )
        configured = settings.model_copy(
            update={
                "keywords": settings.keywords.model_copy(
                    update={"default_target_cpa": 50.0}
                )
            }
        )

        result = await RecommendationPipeline(repository, settings=configured).run(
            "camp_test", END_DATE, 30
        )

        assert [k.action for k in result.keyword_recommendations] == ["pause"]


class TestWindow:
    """Test window loading and analysis."""

    @pytest.mark.asyncio
    async def test_lookback_window(self, pipeline):
        """Test the window ends on the end date and spans the lookback."""
        window = await pipeline.load_window("camp_test", END_DATE, 10)

        assert window.start_date == date(2024, 1, 21)
        assert window.end_date == END_DATE
        assert len(window.records) == 10
        assert window.expected_days == 10

    @pytest.mark.asyncio
    async def test_analyze(self, pipeline):
        """Test analysis covers the requested period."""
        analysis = await pipeline.analyze("camp_test", END_DATE, 30)

        assert analysis.period_start == date(2024, 1, 1)
        assert analysis.period_end == END_DATE
        assert analysis.days_analyzed == 30

    @pytest.mark.asyncio
    async def test_window_beyond_data(self, pipeline):
        """Test missing days lower data quality."""
        analysis = await pipeline.analyze("camp_test", date(2024, 2, 14), 30)

        assert analysis.days_analyzed == 15
        assert analysis.data_quality.missing_days == 15
        assert not analysis.data_quality.has_sufficient_data


class TestRunMany:
    """Test running several campaigns."""

    @pytest.mark.asyncio
    async def test_results_by_campaign(self, repository, stable_records, settings):
        """Test every campaign gets its own result."""
        repository.add_campaign(
            create_test_campaign(campaign_id="camp_other"), metrics=stable_records
        )
        pipeline = RecommendationPipeline(repository, settings=settings)

        results = await pipeline.run_many(["camp_test", "camp_other"], END_DATE, 30)

        assert list(results) == ["camp_test", "camp_other"]
        assert results["camp_other"].recommendations == []
        assert results["camp_test"].analysis.campaign_id == "camp_test"

    @pytest.mark.asyncio
    async def test_missing_campaign_fails(self, pipeline):
        """Test one missing campaign fails the batch."""
        with pytest.raises(CampaignNotFoundError):
            await pipeline.run_many(["camp_test", "camp_missing"], END_DATE, 30)


class TestMockProviderRun:
    """Test the pipeline against the seeded mock provider."""

    @pytest.mark.asyncio
    async def test_deterministic(self, settings):
        """Test two runs over the same seed produce identical results."""
        first = await RecommendationPipeline(
            MockMetricsProvider(), MockMetricsProvider(), settings=settings
        ).run("camp_002", END_DATE, 30)
        second = await RecommendationPipeline(
            MockMetricsProvider(), MockMetricsProvider(), settings=settings
        ).run("camp_002", END_DATE, 30)

        assert first == second

    @pytest.mark.asyncio
    async def test_scores_in_range(self, settings):
        """Test every sample campaign yields well-formed results."""
        pipeline = RecommendationPipeline(
            MockMetricsProvider(), MockMetricsProvider(), settings=settings
        )

        results = await pipeline.run_many(["camp_001", "camp_002", "camp_003"], END_DATE)

        for result in results.values():
            keys = [sort_key(r) for r in result.recommendations]
            assert keys == sorted(keys)
            for ranked in result.recommendations:
                assert 0.0 <= ranked.impact.overall_score <= 100.0
                assert 0.0 <= ranked.recommendation.confidence_score <= 1.0
