"""Tests for the recommendation generator."""

import pytest

from paidsearch_recommender.models.recommendation import (
    CandidateRecommendation,
    PauseCampaignChange,
)
from paidsearch_recommender.recommendations.context import RecommendationContext
from paidsearch_recommender.recommendations.generator import (
    RecommendationCategory,
    RecommendationGenerator,
)
from tests.helpers.analysis_helpers import create_test_analysis, create_test_campaign


@pytest.fixture
def context():
    """Context for an efficient campaign with improving CPA."""
    return RecommendationContext(
        analysis=create_test_analysis(
            health="excellent",
            trends={"CPA": ("decreasing", 0.8)},
            intervals={"cost": (120.0, 4.0), "conversions": (6.0, 0.5)},
        ),
        campaign=create_test_campaign(budget=150.0),
    )


@pytest.fixture
def generator():
    """Generator with the built-in handlers."""
    return RecommendationGenerator()


class TestGenerator:
    """Test category dispatch."""

    def test_default_categories(self, generator):
        """Test every built-in category is registered in order."""
        assert generator.categories == [c.value for c in RecommendationCategory]

    def test_generate_all(self, generator, context):
        """Test all categories run and ad creative is reported as unsupported."""
        result = generator.generate(context)

        assert [r.type for r in result.recommendations] == [
            "BUDGET_REALLOCATION",
            "BID_ADJUSTMENT",
        ]
        assert result.unsupported_categories == ["ad_creative"]

    def test_generate_selected(self, generator, context):
        """Test only requested categories run."""
        result = generator.generate(context, ["bids"])

        assert [r.type for r in result.recommendations] == ["BID_ADJUSTMENT"]
        assert result.unsupported_categories == []

    def test_unknown_category(self, generator, context):
        """Test an unknown category is rejected."""
        with pytest.raises(KeyError):
            generator.generate(context, ["landing_pages"])

    def test_register_custom_handler(self, generator, context):
        """Test a new category is added without changing the generator."""

        def pause_everything(ctx):
            return [
                CandidateRecommendation(
                    type="PAUSE_CAMPAIGN",
                    campaign_id=ctx.campaign_id,
                    title="Pause",
                    description="Pause",
                    reasoning="Custom rule",
                    expected_impact="100.0% reduction in spend",
                    impact_metric="cost",
                    impact_value=-100.0,
                    confidence_score=0.5,
                    priority="low",
                    suggested_changes=PauseCampaignChange(reason="Custom rule"),
                )
            ]

        generator.register("custom", pause_everything)
        result = generator.generate(context, ["custom"])

        assert "custom" in generator.categories
        assert result.recommendations[0].reasoning == "Custom rule"

    def test_registration_does_not_leak(self, context):
        """Test registering on one generator leaves the defaults untouched."""
        RecommendationGenerator().register("custom", lambda ctx: [])

        assert "custom" not in RecommendationGenerator().categories

    def test_empty_handlers(self, context):
        """Test a generator with no handlers yields nothing."""
        result = RecommendationGenerator(handlers={}).generate(context)

        assert result.recommendations == []
        assert result.unsupported_categories == []
