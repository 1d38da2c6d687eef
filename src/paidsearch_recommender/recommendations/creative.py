"""Ad creative recommendations."""

import logging

from paidsearch_recommender.models.recommendation import CandidateRecommendation
from paidsearch_recommender.recommendations.context import RecommendationContext

logger = logging.getLogger(__name__)


def generate_ad_creative_recommendations(
    ctx: RecommendationContext,
) -> list[CandidateRecommendation]:
    """Ad creative recommendations.

    Needs ad-level performance data, which the metric series does not carry,
    so this always returns an empty list. The generator reports the category
    as unsupported so callers do not read the empty list as "nothing to do".
    """
    logger.debug(f"Ad creative recommendations not available for {ctx.campaign_id}")
    return []
