"""Tests for recommendation prioritization."""

from paidsearch_recommender.prioritizer import prioritize, sort_key
from tests.helpers.recommendation_helpers import create_test_recommendation


def _rec(title, priority, confidence):
    return create_test_recommendation(
        title=title, priority=priority, confidence_score=confidence
    )


class TestPrioritize:
    """Test ordering by priority and confidence."""

    def test_priority_then_confidence(self):
        """Test critical comes first and higher confidence breaks ties."""
        recommendations = [
            _rec("low", "low", 0.9),
            _rec("high-weak", "high", 0.6),
            _rec("critical", "critical", 0.5),
            _rec("high-strong", "high", 0.9),
            _rec("medium", "medium", 0.99),
        ]

        ordered = prioritize(recommendations)

        assert [r.title for r in ordered] == [
            "critical",
            "high-strong",
            "high-weak",
            "medium",
            "low",
        ]

    def test_ties_keep_input_order(self):
        """Test equal priority and confidence preserve the original order."""
        recommendations = [_rec(f"rec {i}", "medium", 0.7) for i in range(5)]

        assert [r.title for r in prioritize(recommendations)] == [
            f"rec {i}" for i in range(5)
        ]

    def test_idempotent(self):
        """Test prioritizing twice changes nothing."""
        recommendations = [
            _rec("a", "low", 0.2),
            _rec("b", "high", 0.7),
            _rec("c", "high", 0.7),
            _rec("d", "critical", 0.1),
        ]

        once = prioritize(recommendations)

        assert prioritize(once) == once

    def test_sort_key(self):
        """Test the key pairs priority rank with negated confidence."""
        assert sort_key(_rec("a", "high", 0.7)) == (1, -0.7)

    def test_input_not_modified(self):
        """Test a new list is returned."""
        recommendations = [_rec("a", "low", 0.2), _rec("b", "critical", 0.7)]

        prioritize(recommendations)

        assert [r.title for r in recommendations] == ["a", "b"]

    def test_empty(self):
        """Test an empty input."""
        assert prioritize([]) == []
