"""Recommendation models."""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import Field

from paidsearch_recommender.models.base import BaseRecommenderModel


class RecommendationPriority(str, Enum):
    """Priority levels for recommendations."""

    CRITICAL = "critical"  # Must fix immediately
    HIGH = "high"  # Should fix soon
    MEDIUM = "medium"  # Important but not urgent
    LOW = "low"  # Nice to have


PRIORITY_RANK: dict[str, int] = {
    RecommendationPriority.CRITICAL.value: 0,
    RecommendationPriority.HIGH.value: 1,
    RecommendationPriority.MEDIUM.value: 2,
    RecommendationPriority.LOW.value: 3,
}


class RecommendationType(str, Enum):
    """Types of recommendations."""

    BUDGET_REALLOCATION = "BUDGET_REALLOCATION"
    KEYWORD_OPTIMIZATION = "KEYWORD_OPTIMIZATION"
    BID_ADJUSTMENT = "BID_ADJUSTMENT"
    AD_CREATIVE = "AD_CREATIVE"
    PAUSE_CAMPAIGN = "PAUSE_CAMPAIGN"
    PAUSE_KEYWORD = "PAUSE_KEYWORD"
    ADD_NEGATIVE_KEYWORD = "ADD_NEGATIVE_KEYWORD"
    BIDDING_STRATEGY_CHANGE = "BIDDING_STRATEGY_CHANGE"


class BudgetEfficiency(str, Enum):
    """Budget efficiency classification."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class KeywordAction(str, Enum):
    """Action proposed for a single keyword."""

    PAUSE = "pause"
    SCALE = "scale"
    OPTIMIZE = "optimize"


# Suggested change payloads, one variant per kind of change


class BudgetChange(BaseRecommenderModel):
    """Increase or decrease of the daily budget."""

    kind: Literal["budget_change"] = "budget_change"
    current_daily_budget: float
    suggested_daily_budget: float
    change_amount: float
    change_percentage: float
    roi: float
    efficiency: BudgetEfficiency
    reasoning: list[str] = Field(default_factory=list)


class MaintainBudget(BaseRecommenderModel):
    """Keep the budget and work on efficiency instead."""

    kind: Literal["maintain_budget"] = "maintain_budget"
    current_daily_budget: float
    focus_areas: list[str] = Field(default_factory=list)


class NegativeKeywordChange(BaseRecommenderModel):
    """Search terms to add as negative keywords."""

    kind: Literal["negative_keywords"] = "negative_keywords"
    keywords: list[str]
    estimated_savings: float
    match_type: str = "EXACT"


class PauseKeywordsChange(BaseRecommenderModel):
    """Keywords to pause."""

    kind: Literal["pause_keywords"] = "pause_keywords"
    keyword_ids: list[str]
    keywords: list[str]
    estimated_savings: float


class KeywordBidChange(BaseRecommenderModel):
    """Bid change for a set of keywords."""

    kind: Literal["keyword_bids"] = "keyword_bids"
    keyword_ids: list[str]
    keywords: list[str]
    suggested_bid_change_pct: float
    notes: list[str] = Field(default_factory=list)


class BidAdjustmentChange(BaseRecommenderModel):
    """Campaign-wide bid adjustment."""

    kind: Literal["bid_adjustment"] = "bid_adjustment"
    bid_change_percentage: float
    reason: str
    performance_score: float = Field(0.0, ge=0.0, le=100.0)


class BiddingStrategyChange(BaseRecommenderModel):
    """Switch to a different bidding strategy."""

    kind: Literal["bidding_strategy"] = "bidding_strategy"
    current_strategy: str | None
    suggested_strategy: str
    target_cpa: float | None = None


class PauseCampaignChange(BaseRecommenderModel):
    """Pause the whole campaign."""

    kind: Literal["pause_campaign"] = "pause_campaign"
    reason: str


class KeywordReviewChange(BaseRecommenderModel):
    """Review keywords active on days with anomalous performance."""

    kind: Literal["keyword_review"] = "keyword_review"
    outlier_days: list[str]
    action: str = "review_high_variance_keywords"


SuggestedChanges = Annotated[
    Union[
        BudgetChange,
        MaintainBudget,
        NegativeKeywordChange,
        PauseKeywordsChange,
        KeywordBidChange,
        BidAdjustmentChange,
        BiddingStrategyChange,
        PauseCampaignChange,
        KeywordReviewChange,
    ],
    Field(discriminator="kind"),
]


class CandidateRecommendation(BaseRecommenderModel):
    """A proposed optimization action for one campaign."""

    type: RecommendationType = Field(..., description="Type of recommendation")
    campaign_id: str
    title: str = Field(..., description="Short title")
    description: str = Field(..., description="Detailed description")
    reasoning: str
    expected_impact: str
    impact_metric: str
    impact_value: float = Field(..., description="Signed percentage change")
    confidence_score: float = Field(..., ge=0.0, le=1.0)
    priority: RecommendationPriority = Field(..., description="Priority level")
    suggested_changes: SuggestedChanges

    @property
    def priority_rank(self) -> int:
        """Sort rank of the priority (critical first)."""
        return PRIORITY_RANK[self.priority]


class KeywordRecommendation(BaseRecommenderModel):
    """Pause, scale or optimize proposal for a single keyword."""

    keyword_id: str
    keyword_text: str
    action: KeywordAction
    priority: RecommendationPriority
    reason: str
    cost: float
    conversions: float
    cpa: float
    estimated_savings: float | None = None


class SearchTermRecommendation(BaseRecommenderModel):
    """Negative keyword candidate derived from a search term."""

    search_term: str
    priority: RecommendationPriority
    reason: str
    cost: float
    clicks: int
    conversions: float
    conversion_rate: float
    estimated_savings: float


class SavingsSummary(BaseRecommenderModel):
    """Estimated savings of negative keyword candidates."""

    total: float
    high: float = 0.0
    medium: float = 0.0
    low: float = 0.0
    count: int = 0
