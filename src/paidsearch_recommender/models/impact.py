"""Impact estimation models."""

from datetime import datetime
from enum import Enum

from pydantic import Field

from paidsearch_recommender.models.base import BaseRecommenderModel
from paidsearch_recommender.models.recommendation import (
    CandidateRecommendation,
    RecommendationType,
)


class RiskLevel(str, Enum):
    """Risk level of an impact estimate."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ImplementationComplexity(str, Enum):
    """Effort needed to apply a recommendation."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TimeToImpact(str, Enum):
    """How soon an effect is expected to show."""

    IMMEDIATE = "immediate"
    ONE_TO_TWO_WEEKS = "1-2 weeks"
    TWO_TO_FOUR_WEEKS = "2-4 weeks"


class ValidationConfidence(str, Enum):
    """Confidence bucket for historical validation."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ImpactConfidenceInterval(BaseRecommenderModel):
    """Interval around the expected new value."""

    lower: float
    upper: float
    confidence_level: float = 0.95


class RiskAssessment(BaseRecommenderModel):
    """Best, worst and expected outcomes."""

    best_case: float
    worst_case: float
    expected_case: float
    risk_level: RiskLevel
    upside: float
    downside: float


class ImpactEstimate(BaseRecommenderModel):
    """Expected effect of a recommendation on one metric."""

    metric: str
    current_value: float
    expected_change: float
    expected_change_percentage: float
    expected_new_value: float
    confidence_interval: ImpactConfidenceInterval
    risk_assessment: RiskAssessment
    confidence_score: float = Field(..., ge=0.0, le=1.0)
    sample_size: int
    standard_error: float
    projected_monthly_impact: float
    time_to_impact: TimeToImpact


class HistoricalRecommendation(BaseRecommenderModel):
    """A previously implemented recommendation as recorded by the sink."""

    recommendation_type: RecommendationType
    impact_value: float = Field(..., description="Impact expected at the time")
    actual_impact: float | None = Field(
        None, description="Measured impact after implementation"
    )
    implemented_at: datetime | None = None


class HistoricalValidation(BaseRecommenderModel):
    """How similar recommendations performed in the past."""

    similar_recommendations: int
    success_rate: float = Field(..., ge=0.0, le=1.0)
    average_actual_impact: float
    confidence: ValidationConfidence


class RecommendationImpact(BaseRecommenderModel):
    """Full impact assessment attached to a recommendation."""

    recommendation_type: RecommendationType
    primary_impact: ImpactEstimate
    secondary_impacts: list[ImpactEstimate] = Field(default_factory=list)
    overall_score: float = Field(..., ge=0.0, le=100.0)
    implementation_complexity: ImplementationComplexity
    expected_roi: float
    historical_validation: HistoricalValidation | None = None


class RankedRecommendation(BaseRecommenderModel):
    """A recommendation paired with its impact assessment."""

    recommendation: CandidateRecommendation
    impact: RecommendationImpact

    @property
    def priority_rank(self) -> int:
        """Sort rank of the underlying recommendation."""
        return self.recommendation.priority_rank

    @property
    def confidence_score(self) -> float:
        """Confidence of the underlying recommendation."""
        return self.recommendation.confidence_score


class ProjectedMetric(BaseRecommenderModel):
    """Projected value of a metric after applying a set of recommendations."""

    metric: str
    current: float
    projected: float
    change: float
    change_percentage: float


class ImpactSimulation(BaseRecommenderModel):
    """Combined projection for a set of recommendations."""

    projected_metrics: list[ProjectedMetric] = Field(default_factory=list)
    confidence: float = Field(..., ge=0.0, le=1.0)
    timeframe: str = TimeToImpact.TWO_TO_FOUR_WEEKS.value
    recommendation_count: int = 0
