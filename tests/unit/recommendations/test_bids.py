"""Tests for bid and bidding strategy recommendations."""

import pytest

from paidsearch_recommender.models.metrics import BiddingStrategy
from paidsearch_recommender.recommendations.bids import (
    bid_performance_score,
    generate_bid_recommendations,
    generate_bidding_strategy_recommendations,
)
from paidsearch_recommender.recommendations.context import RecommendationContext
from tests.helpers.analysis_helpers import create_test_analysis, create_test_campaign


def _context(strategy=BiddingStrategy.MANUAL_CPC, target_cpa=50.0, **analysis_kwargs):
    return RecommendationContext(
        analysis=create_test_analysis(**analysis_kwargs),
        campaign=create_test_campaign(
            bidding_strategy=strategy, target_cpa=target_cpa
        ),
    )


class TestPerformanceScore:
    """Test the bid performance score."""

    def test_excellent_with_improving_cpa(self):
        """Test the score is capped at 100."""
        ctx = _context(health="excellent", trends={"CPA": ("decreasing", 0.8)})

        assert bid_performance_score(ctx) == 100.0

    def test_fair_with_rising_cpa(self):
        """Test health points, a rising CPA and outliers reduce the score."""
        ctx = _context(
            health="fair", trends={"CPA": ("increasing", 0.8)}, high_outliers=2
        )

        assert bid_performance_score(ctx) == 50.0


class TestBidAdjustments:
    """Test campaign-wide bid adjustments."""

    def test_lower_bids_on_rising_cpa(self):
        """Test manual bidding with rising CPA lowers bids."""
        ctx = _context(health="fair", trends={"CPA": ("increasing", 0.8)})

        [rec] = generate_bid_recommendations(ctx)

        assert rec.type == "BID_ADJUSTMENT"
        assert rec.priority == "high"
        assert rec.impact_metric == "CPA"
        assert rec.impact_value == -12.5
        assert rec.confidence_score == 0.8
        assert rec.suggested_changes.bid_change_percentage == -12.0
        assert rec.suggested_changes.performance_score == 60.0

    def test_automated_bidding_not_lowered(self):
        """Test rising CPA under automated bidding does not touch bids."""
        ctx = _context(
            strategy=BiddingStrategy.TARGET_CPA,
            health="fair",
            trends={"CPA": ("increasing", 0.8)},
        )

        assert generate_bid_recommendations(ctx) == []

    def test_raise_bids_on_improving_cpa(self):
        """Test excellent health with improving CPA raises bids."""
        ctx = _context(
            strategy=BiddingStrategy.TARGET_CPA,
            health="excellent",
            trends={"CPA": ("decreasing", 0.7)},
        )

        [rec] = generate_bid_recommendations(ctx)

        assert rec.priority == "medium"
        assert rec.impact_metric == "conversions"
        assert rec.impact_value == 17.5
        assert rec.confidence_score == 0.75
        assert rec.suggested_changes.bid_change_percentage == 12.0

    def test_falling_conversions_block_raise(self):
        """Test bids are not raised while conversions fall."""
        ctx = _context(
            health="excellent",
            trends={"CPA": ("decreasing", 0.7), "conversions": ("decreasing", 0.5)},
        )

        assert generate_bid_recommendations(ctx) == []


class TestBiddingStrategy:
    """Test bidding strategy changes."""

    def test_switch_to_target_cpa(self):
        """Test a reliable rising CPA trend under manual bidding switches strategy."""
        ctx = _context(health="fair", trends={"CPA": ("increasing", 0.8)})

        [rec] = generate_bidding_strategy_recommendations(ctx)

        assert rec.type == "BIDDING_STRATEGY_CHANGE"
        assert rec.priority == "medium"
        assert rec.impact_value == -15.0
        assert rec.confidence_score == pytest.approx(0.64)
        assert rec.suggested_changes.current_strategy == "MANUAL_CPC"
        assert rec.suggested_changes.suggested_strategy == "TARGET_CPA"
        assert rec.suggested_changes.target_cpa == 50.0

    def test_target_from_observed_cpa(self):
        """Test the observed mean CPA is suggested when no target is set."""
        ctx = _context(
            target_cpa=None,
            health="fair",
            trends={"CPA": ("increasing", 0.8)},
            intervals={"CPA": (42.5, 1.0)},
        )

        [rec] = generate_bidding_strategy_recommendations(ctx)

        assert rec.suggested_changes.target_cpa == 42.5

    def test_weak_trend_does_not_switch(self):
        """Test a poorly fitting trend is not enough to change strategy."""
        ctx = _context(health="fair", trends={"CPA": ("increasing", 0.5)})

        assert generate_bidding_strategy_recommendations(ctx) == []
        assert len(generate_bid_recommendations(ctx)) == 1
