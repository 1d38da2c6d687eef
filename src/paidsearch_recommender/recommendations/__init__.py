"""Rule-based recommendation generation."""

from paidsearch_recommender.recommendations.context import RecommendationContext
from paidsearch_recommender.recommendations.generator import (
    CategoryHandler,
    GenerationResult,
    RecommendationCategory,
    RecommendationGenerator,
)

__all__ = [
    "CategoryHandler",
    "GenerationResult",
    "RecommendationCategory",
    "RecommendationContext",
    "RecommendationGenerator",
]
