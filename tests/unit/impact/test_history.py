"""Tests for historical validation of impact estimates."""

import pytest

from paidsearch_recommender.impact.history import is_success, validate_against_history
from tests.helpers.recommendation_helpers import (
    create_history,
    create_test_recommendation,
)


class TestIsSuccess:
    """Test the success criterion."""

    @pytest.mark.parametrize(
        "actual,expected,result",
        [
            (14.0, 14.0, True),
            (16.5, 14.0, True),
            (11.5, 14.0, True),
            (17.0, 14.0, False),
            (-12.0, -10.0, True),
            (-13.0, -10.0, False),
            (0.0, 0.0, True),
            (1.0, 0.0, False),
        ],
    )
    def test_relative_tolerance(self, actual, expected, result):
        """Test outcomes within 20% of the expectation succeed."""
        assert is_success(actual, expected) is result


class TestValidateAgainstHistory:
    """Test historical validation."""

    def test_too_few_samples(self):
        """Test fewer than five comparable records give no validation."""
        history = create_history("BUDGET_REALLOCATION", [14.0] * 4)

        assert validate_against_history(create_test_recommendation(), history) is None

    def test_other_types_ignored(self):
        """Test records of other types are not comparable."""
        history = create_history("BUDGET_REALLOCATION", [14.0] * 3) + create_history(
            "PAUSE_KEYWORD", [14.0] * 10
        )

        assert validate_against_history(create_test_recommendation(), history) is None

    def test_low_confidence_with_few_samples(self):
        """Test five perfect outcomes are still low confidence."""
        history = create_history("BUDGET_REALLOCATION", [14.0] * 5)

        validation = validate_against_history(create_test_recommendation(), history)

        assert validation.similar_recommendations == 5
        assert validation.success_rate == 1.0
        assert validation.confidence == "low"

    def test_medium_confidence(self):
        """Test more than ten samples with a majority of successes."""
        history = create_history("BUDGET_REALLOCATION", [14.0] * 8 + [30.0] * 4)

        validation = validate_against_history(create_test_recommendation(), history)

        assert validation.success_rate == pytest.approx(8 / 12)
        assert validation.confidence == "medium"
        assert validation.average_actual_impact == pytest.approx((14 * 8 + 30 * 4) / 12)

    def test_high_confidence(self):
        """Test more than twenty samples with a strong success rate."""
        history = create_history("BUDGET_REALLOCATION", [14.0] * 20 + [30.0] * 2)

        validation = validate_against_history(create_test_recommendation(), history)

        assert validation.similar_recommendations == 22
        assert validation.confidence == "high"

    def test_low_success_rate(self):
        """Test mostly failed outcomes are low confidence."""
        history = create_history("BUDGET_REALLOCATION", [40.0] * 25)

        validation = validate_against_history(create_test_recommendation(), history)

        assert validation.success_rate == 0.0
        assert validation.confidence == "low"

    def test_missing_actual_falls_back_to_expected(self):
        """Test records without a measured impact use their expected impact."""
        history = create_history(
            "BUDGET_REALLOCATION", [None] * 6, impact_value=14.0
        )

        validation = validate_against_history(create_test_recommendation(), history)

        assert validation.success_rate == 1.0
        assert validation.average_actual_impact == 14.0
