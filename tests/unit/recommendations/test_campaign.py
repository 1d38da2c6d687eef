"""Tests for campaign-level recommendations."""

from paidsearch_recommender.recommendations.campaign import (
    generate_campaign_recommendations,
)
from paidsearch_recommender.recommendations.context import RecommendationContext
from tests.helpers.analysis_helpers import create_test_analysis, create_test_campaign


def _context(**analysis_kwargs):
    return RecommendationContext(
        analysis=create_test_analysis(**analysis_kwargs),
        campaign=create_test_campaign(),
    )


class TestPauseCampaign:
    """Test pausing failing campaigns."""

    def test_pause_when_cost_up_and_conversions_down(self):
        """Test a poor campaign spending more for fewer conversions is paused."""
        ctx = _context(
            health="poor",
            benchmarks={"cost": ("above", 25.0), "conversions": ("below", -20.0)},
        )

        [rec] = generate_campaign_recommendations(ctx)

        assert rec.type == "PAUSE_CAMPAIGN"
        assert rec.priority == "critical"
        assert rec.impact_value == -100.0
        assert rec.suggested_changes.reason == (
            "Cost is 25.0% above its historical benchmark while conversions are "
            "20.0% below"
        )
        assert rec.reasoning == "Test finding"

    def test_no_pause_without_sufficient_data(self):
        """Test a campaign is not paused on thin data."""
        ctx = _context(
            health="poor",
            sufficient=False,
            benchmarks={"cost": ("above", 25.0), "conversions": ("below", -20.0)},
        )

        assert generate_campaign_recommendations(ctx) == []

    def test_no_pause_when_not_poor(self):
        """Test only poor campaigns are paused."""
        ctx = _context(
            health="fair",
            benchmarks={"cost": ("above", 25.0), "conversions": ("below", -20.0)},
        )

        assert generate_campaign_recommendations(ctx) == []

    def test_no_pause_without_benchmarks(self):
        """Test missing benchmarks disable the rule."""
        assert generate_campaign_recommendations(_context(health="poor")) == []


class TestVolatilityReview:
    """Test keyword review for volatile campaigns."""

    def test_many_outliers_trigger_review(self):
        """Test more than three high-severity outliers trigger a review."""
        ctx = _context(health="fair", high_outliers=4)

        [rec] = generate_campaign_recommendations(ctx)

        assert rec.type == "KEYWORD_OPTIMIZATION"
        assert rec.priority == "high"
        assert rec.impact_metric == "CPA"
        assert rec.impact_value == -17.5
        assert rec.suggested_changes.outlier_days == [
            "2024-01-01",
            "2024-01-02",
            "2024-01-03",
            "2024-01-04",
        ]

    def test_three_outliers_do_not_trigger_review(self):
        """Test the threshold is strict."""
        assert generate_campaign_recommendations(_context(high_outliers=3)) == []

    def test_both_rules_can_fire(self):
        """Test pause and review are independent."""
        ctx = _context(
            health="poor",
            high_outliers=5,
            benchmarks={"cost": ("above", 25.0), "conversions": ("below", -20.0)},
        )

        recommendations = generate_campaign_recommendations(ctx)

        assert [r.type for r in recommendations] == [
            "PAUSE_CAMPAIGN",
            "KEYWORD_OPTIMIZATION",
        ]
