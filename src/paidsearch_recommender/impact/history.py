"""Validation of expected impact against past implemented recommendations."""

import logging
from collections.abc import Sequence

from paidsearch_recommender.models.impact import (
    HistoricalRecommendation,
    HistoricalValidation,
    ValidationConfidence,
)
from paidsearch_recommender.models.recommendation import CandidateRecommendation

logger = logging.getLogger(__name__)

MIN_HISTORICAL_SAMPLES = 5
SUCCESS_TOLERANCE = 0.2


def is_success(actual: float, expected: float) -> bool:
    """True when the actual impact lands within 20% (relative) of the expected one."""
    if expected == 0:
        return actual == 0
    return abs(actual - expected) / abs(expected) <= SUCCESS_TOLERANCE


def validate_against_history(
    recommendation: CandidateRecommendation,
    history: Sequence[HistoricalRecommendation],
) -> HistoricalValidation | None:
    """Compare a recommendation's expected impact with similar past outcomes.

    Args:
        recommendation: Candidate recommendation being estimated
        history: Past implemented recommendations, most recent first

    Returns:
        HistoricalValidation, or None with fewer than five comparable records
    """
    samples = [
        h.actual_impact if h.actual_impact is not None else h.impact_value
        for h in history
        if h.recommendation_type == recommendation.type
    ]
    if len(samples) < MIN_HISTORICAL_SAMPLES:
        logger.debug(
            f"Only {len(samples)} historical {recommendation.type} records, "
            f"skipping validation"
        )
        return None

    expected = recommendation.impact_value
    success_rate = sum(1 for s in samples if is_success(s, expected)) / len(samples)
    n = len(samples)

    if success_rate > 0.7 and n > 20:
        confidence = ValidationConfidence.HIGH
    elif success_rate > 0.5 and n > 10:
        confidence = ValidationConfidence.MEDIUM
    else:
        confidence = ValidationConfidence.LOW

    return HistoricalValidation(
        similar_recommendations=n,
        success_rate=success_rate,
        average_actual_impact=sum(samples) / n,
        confidence=confidence,
    )
