"""Predictive insight models: CPA prediction, segmentation and budget forecasts."""

from enum import Enum

from pydantic import Field

from paidsearch_recommender.models.base import BaseRecommenderModel


class CPATrend(str, Enum):
    """Direction of the predicted CPA."""

    IMPROVING = "improving"
    STABLE = "stable"
    DEGRADING = "degrading"


class CampaignSegmentName(str, Enum):
    """Performance segments."""

    HIGH_PERFORMER = "high_performer"
    AVERAGE_PERFORMER = "average_performer"
    UNDERPERFORMER = "underperformer"
    NEEDS_ATTENTION = "needs_attention"


class CPAPrediction(BaseRecommenderModel):
    """Short-horizon CPA projection from the fitted trend."""

    current_cpa: float
    predicted_cpa: float
    horizon_days: int
    trend: CPATrend
    confidence: float = Field(..., ge=0.0, le=1.0)
    factors: list[str] = Field(default_factory=list)


class CampaignSegment(BaseRecommenderModel):
    """Segment assignment for one campaign."""

    campaign_id: str
    segment: CampaignSegmentName
    characteristics: list[str] = Field(default_factory=list)


class BudgetForecast(BaseRecommenderModel):
    """Projected outcome of running a campaign at a different daily budget."""

    current_budget: float
    proposed_budget: float
    forecast_days: int
    forecasted_cost: float
    forecasted_conversions: float
    forecasted_revenue: float
    forecasted_cpa: float
    forecasted_roas: float
    efficiency: float = Field(..., ge=0.0, le=1.0)
    confidence: float = Field(..., ge=0.0, le=1.0)


class CampaignBudgetInput(BaseRecommenderModel):
    """Aggregate performance of a campaign used for budget allocation."""

    campaign_id: str
    cost: float = Field(..., ge=0.0)
    conversion_value: float = Field(..., ge=0.0)

    @property
    def roas(self) -> float:
        """Return on ad spend."""
        return self.conversion_value / self.cost if self.cost > 0 else 0.0


class BudgetAllocation(BaseRecommenderModel):
    """Share of an account budget assigned to a campaign."""

    campaign_id: str
    roas: float
    share: float = Field(..., ge=0.0, le=1.0)
    allocated_budget: float
