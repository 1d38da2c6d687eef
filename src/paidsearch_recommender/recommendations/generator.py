"""Recommendation generator.

Dispatches to one handler per recommendation category. New categories are
added by registering a handler rather than by editing the generator.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum

from pydantic import Field

from paidsearch_recommender.models.base import BaseRecommenderModel
from paidsearch_recommender.models.recommendation import CandidateRecommendation
from paidsearch_recommender.recommendations.bids import (
    generate_bid_recommendations,
    generate_bidding_strategy_recommendations,
)
from paidsearch_recommender.recommendations.budget import (
    generate_budget_recommendations,
)
from paidsearch_recommender.recommendations.campaign import (
    generate_campaign_recommendations,
)
from paidsearch_recommender.recommendations.context import RecommendationContext
from paidsearch_recommender.recommendations.creative import (
    generate_ad_creative_recommendations,
)
from paidsearch_recommender.recommendations.keywords import (
    generate_keyword_recommendations,
)

logger = logging.getLogger(__name__)

HandlerFn = Callable[[RecommendationContext], list[CandidateRecommendation]]


class RecommendationCategory(str, Enum):
    """Recommendation categories."""

    BUDGET = "budget"
    KEYWORDS = "keywords"
    BIDS = "bids"
    BIDDING_STRATEGY = "bidding_strategy"
    CAMPAIGN = "campaign"
    AD_CREATIVE = "ad_creative"


@dataclass(frozen=True)
class CategoryHandler:
    """Generates the recommendations of one category."""

    generate: HandlerFn
    supported: bool = True


DEFAULT_HANDLERS: dict[str, CategoryHandler] = {
    RecommendationCategory.BUDGET.value: CategoryHandler(
        generate_budget_recommendations
    ),
    RecommendationCategory.KEYWORDS.value: CategoryHandler(
        generate_keyword_recommendations
    ),
    RecommendationCategory.BIDS.value: CategoryHandler(generate_bid_recommendations),
    RecommendationCategory.BIDDING_STRATEGY.value: CategoryHandler(
        generate_bidding_strategy_recommendations
    ),
    RecommendationCategory.CAMPAIGN.value: CategoryHandler(
        generate_campaign_recommendations
    ),
    RecommendationCategory.AD_CREATIVE.value: CategoryHandler(
        generate_ad_creative_recommendations, supported=False
    ),
}


class GenerationResult(BaseRecommenderModel):
    """Recommendations produced for a campaign."""

    recommendations: list[CandidateRecommendation] = Field(default_factory=list)
    unsupported_categories: list[str] = Field(default_factory=list)


class RecommendationGenerator:
    """Generate candidate recommendations for a campaign."""

    def __init__(self, handlers: dict[str, CategoryHandler] | None = None):
        """Initialize the generator.

        Args:
            handlers: Category handlers, defaults to the built-in set
        """
        self._handlers: dict[str, CategoryHandler] = dict(
            handlers if handlers is not None else DEFAULT_HANDLERS
        )

    @property
    def categories(self) -> list[str]:
        """Registered categories in evaluation order."""
        return list(self._handlers)

    def register(
        self, category: str, generate: HandlerFn, supported: bool = True
    ) -> None:
        """Register or replace the handler for a category."""
        self._handlers[category] = CategoryHandler(generate, supported)

    def generate(
        self,
        ctx: RecommendationContext,
        categories: Iterable[str] | None = None,
    ) -> GenerationResult:
        """Run the handlers of the requested categories.

        Args:
            ctx: Analysis, configuration and item findings for the campaign
            categories: Categories to run, all registered ones when omitted

        Returns:
            GenerationResult with the recommendations in category order and the
            categories that are registered but not yet supported

        Raises:
            KeyError: If a requested category has no handler
        """
        selected = list(categories) if categories is not None else self.categories
        recommendations: list[CandidateRecommendation] = []
        unsupported: list[str] = []

        for category in selected:
            handler = self._handlers[category]
            if not handler.supported:
                unsupported.append(category)
            produced = handler.generate(ctx)
            logger.debug(f"Category '{category}' produced {len(produced)} recommendations")
            recommendations.extend(produced)

        logger.info(
            f"Generated {len(recommendations)} recommendations for campaign "
            f"{ctx.campaign_id}"
        )
        return GenerationResult(
            recommendations=recommendations, unsupported_categories=unsupported
        )
