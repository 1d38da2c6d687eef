"""Tests for CPA prediction and campaign segmentation."""

import pytest

from paidsearch_recommender.analyzers.insights import (
    predict_cpa,
    segment_campaign,
    segment_campaigns,
)
from tests.helpers.analysis_helpers import create_test_analysis


class TestPredictCPA:
    """Test CPA prediction."""

    def test_degrading_cpa(self):
        """Test a rising CPA is projected forward along its slope."""
        analysis = create_test_analysis(
            trends={"CPA": ("increasing", 0.8, 0.5)},
            intervals={"CPA": (40.0, 2.0)},
        )

        prediction = predict_cpa(analysis, horizon_days=10)

        assert prediction.current_cpa == 40.0
        assert prediction.predicted_cpa == pytest.approx(45.0)
        assert prediction.trend == "degrading"
        assert prediction.confidence == 0.8
        assert prediction.horizon_days == 10
        assert prediction.factors[0].startswith("CPA trend is increasing")

    def test_improving_cpa(self):
        """Test a falling CPA is improving."""
        analysis = create_test_analysis(
            trends={"CPA": ("decreasing", 0.6, -1.0)},
            intervals={"CPA": (40.0, 2.0)},
        )

        prediction = predict_cpa(analysis)

        assert prediction.predicted_cpa == pytest.approx(33.0)
        assert prediction.trend == "improving"

    def test_prediction_never_negative(self):
        """Test a steep decline is floored at zero."""
        analysis = create_test_analysis(
            trends={"CPA": ("decreasing", 0.9, -10.0)},
            intervals={"CPA": (20.0, 1.0)},
        )

        assert predict_cpa(analysis, horizon_days=7).predicted_cpa == 0.0

    def test_flat_cpa_is_stable(self):
        """Test a zero slope is stable with no trend factor."""
        analysis = create_test_analysis(
            trends={"CPA": ("stable", 0.0)},
            intervals={"CPA": (25.0, 1.0)},
        )

        prediction = predict_cpa(analysis)

        assert prediction.trend == "stable"
        assert prediction.predicted_cpa == 25.0
        assert prediction.factors == []

    def test_factors_include_data_issues(self):
        """Test outliers and limited data are listed as factors."""
        analysis = create_test_analysis(
            trends={"CPA": ("increasing", 0.5)},
            intervals={"CPA": (25.0, 1.0)},
            significance={"CPA": 0.01},
            high_outliers=2,
            sufficient=False,
        )

        factors = predict_cpa(analysis).factors

        assert "CPA test" in factors
        assert "2 high-severity outliers may affect accuracy" in factors
        assert "Limited historical data reduces prediction reliability" in factors

    def test_without_cpa_trend(self):
        """Test no prediction is made without a CPA trend."""
        analysis = create_test_analysis(intervals={"CPA": (25.0, 1.0)})

        assert predict_cpa(analysis) is None


class TestSegmentation:
    """Test campaign segmentation."""

    def test_high_performer(self):
        """Test excellent health with improving CPA."""
        analysis = create_test_analysis(
            health="excellent",
            trends={"CPA": ("decreasing", 0.7), "conversions": ("increasing", 0.6)},
        )

        segment = segment_campaign(analysis)

        assert segment.segment == "high_performer"
        assert segment.characteristics == [
            "Excellent overall health",
            "Improving CPA",
            "Conversions increasing",
        ]

    def test_excellent_with_falling_conversions_is_average(self):
        """Test falling conversions keep an excellent campaign out of the top segment."""
        analysis = create_test_analysis(
            health="excellent", trends={"conversions": ("decreasing", 0.6)}
        )

        assert segment_campaign(analysis).segment == "average_performer"

    def test_poor_health_needs_attention(self):
        """Test poor campaigns need attention."""
        analysis = create_test_analysis(health="poor")

        segment = segment_campaign(analysis)

        assert segment.segment == "needs_attention"
        assert "Poor overall health" in segment.characteristics

    def test_many_outliers_need_attention(self):
        """Test more than two high-severity outliers need attention."""
        analysis = create_test_analysis(health="fair", high_outliers=3)

        segment = segment_campaign(analysis)

        assert segment.segment == "needs_attention"
        assert "3 high-severity outliers" in segment.characteristics

    def test_average_performer(self):
        """Test good health is average."""
        segment = segment_campaign(create_test_analysis(health="good"))

        assert segment.segment == "average_performer"
        assert segment.characteristics == ["Good overall health"]

    def test_segments_sorted_by_campaign(self):
        """Test several campaigns are returned by campaign ID."""
        analyses = {
            "camp_b": create_test_analysis(health="poor", campaign_id="camp_b"),
            "camp_a": create_test_analysis(health="excellent", campaign_id="camp_a"),
        }

        segments = segment_campaigns(analyses)

        assert [s.campaign_id for s in segments] == ["camp_a", "camp_b"]
        assert [s.segment for s in segments] == ["high_performer", "needs_attention"]
