"""Daily campaign metrics and campaign configuration models."""

from datetime import date
from enum import Enum

from pydantic import Field, computed_field

from paidsearch_recommender.models.base import (
    BaseRecommenderModel,
    PerformanceMetricsMixin,
)
from paidsearch_recommender.utils.numeric import safe_divide


class MetricName(str, Enum):
    """Metric names used across analysis reports and impact estimates."""

    COST = "cost"
    CONVERSIONS = "conversions"
    CPA = "CPA"
    ROAS = "ROAS"
    EFFICIENCY = "efficiency"


class BiddingStrategy(str, Enum):
    """Campaign bidding strategies."""

    MANUAL_CPC = "MANUAL_CPC"
    ENHANCED_CPC = "ENHANCED_CPC"
    TARGET_CPA = "TARGET_CPA"
    TARGET_ROAS = "TARGET_ROAS"
    MAXIMIZE_CONVERSIONS = "MAXIMIZE_CONVERSIONS"
    MAXIMIZE_CONVERSION_VALUE = "MAXIMIZE_CONVERSION_VALUE"
    TARGET_IMPRESSION_SHARE = "TARGET_IMPRESSION_SHARE"


class MetricRecord(PerformanceMetricsMixin):
    """One day of campaign performance.

    Ratios are derived from the raw counts and never stored separately.
    """

    date: date

    @computed_field
    @property
    def ctr(self) -> float:
        """Click-through rate as a percentage."""
        return safe_divide(self.clicks, self.impressions) * 100

    @computed_field
    @property
    def cpc(self) -> float:
        """Average cost per click."""
        return safe_divide(self.cost, self.clicks)

    @computed_field
    @property
    def cost_per_conversion(self) -> float:
        """Cost per conversion (CPA)."""
        return safe_divide(self.cost, self.conversions)

    @computed_field
    @property
    def roas(self) -> float:
        """Return on ad spend."""
        return safe_divide(self.conversion_value, self.cost)


class CampaignConfig(BaseRecommenderModel):
    """Campaign settings the recommendation rules depend on.

    Missing values disable the rules that need them.
    """

    campaign_id: str = Field(..., min_length=1)
    name: str = ""
    budget: float | None = Field(None, gt=0, description="Daily budget")
    target_cpa: float | None = Field(None, gt=0)
    target_roas: float | None = Field(None, gt=0)
    bidding_strategy: BiddingStrategy | None = None
