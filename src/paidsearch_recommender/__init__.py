"""Paid Search Recommender.

Statistical performance analysis and impact-scored recommendations for paid
search campaigns.
"""

__version__ = "1.0.0"

from paidsearch_recommender.pipeline import PipelineResult, RecommendationPipeline

__all__ = ["PipelineResult", "RecommendationPipeline", "__version__"]
