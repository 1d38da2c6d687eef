"""Impact estimation for candidate recommendations.

Primary metric, secondary spillovers and implementation complexity are looked
up per recommendation type, so supporting a new type means registering its
entries rather than editing branches.
"""

import logging
import math
from collections.abc import Callable, Sequence

from paidsearch_recommender.impact.history import validate_against_history
from paidsearch_recommender.models.analysis import PerformanceAnalysis
from paidsearch_recommender.models.impact import (
    HistoricalRecommendation,
    ImpactConfidenceInterval,
    ImpactEstimate,
    ImplementationComplexity,
    RecommendationImpact,
    RiskAssessment,
    RiskLevel,
    TimeToImpact,
)
from paidsearch_recommender.models.metrics import MetricName
from paidsearch_recommender.models.recommendation import (
    CandidateRecommendation,
    RecommendationType,
)

logger = logging.getLogger(__name__)

SecondaryHandler = Callable[[float], list[tuple[str, float]]]

Z_95 = 1.96
DEFAULT_RELATIVE_STANDARD_ERROR = 0.1
DAYS_PER_MONTH = 30

PRIMARY_METRICS: dict[str, str] = {
    RecommendationType.BUDGET_REALLOCATION.value: MetricName.COST.value,
    RecommendationType.KEYWORD_OPTIMIZATION.value: MetricName.COST.value,
    RecommendationType.BID_ADJUSTMENT.value: MetricName.CPA.value,
    RecommendationType.AD_CREATIVE.value: MetricName.CONVERSIONS.value,
    RecommendationType.PAUSE_CAMPAIGN.value: MetricName.COST.value,
    RecommendationType.PAUSE_KEYWORD.value: MetricName.COST.value,
    RecommendationType.ADD_NEGATIVE_KEYWORD.value: MetricName.COST.value,
    RecommendationType.BIDDING_STRATEGY_CHANGE.value: MetricName.CPA.value,
}


def _budget_spillover(pct: float) -> list[tuple[str, float]]:
    if pct > 0:
        return [(MetricName.CONVERSIONS.value, pct * 0.7)]
    return [(MetricName.CPA.value, abs(pct) * 0.5)]


def _keyword_spillover(pct: float) -> list[tuple[str, float]]:
    return [(MetricName.CPA.value, abs(pct) * 0.8)]


def _bid_spillover(pct: float) -> list[tuple[str, float]]:
    return [
        (MetricName.CONVERSIONS.value, pct * 0.6),
        (MetricName.CPA.value, -pct * 0.4),
    ]


def _strategy_spillover(pct: float) -> list[tuple[str, float]]:
    return [
        (MetricName.CPA.value, pct),
        (MetricName.CONVERSIONS.value, pct * 0.5),
    ]


SECONDARY_HANDLERS: dict[str, SecondaryHandler] = {
    RecommendationType.BUDGET_REALLOCATION.value: _budget_spillover,
    RecommendationType.KEYWORD_OPTIMIZATION.value: _keyword_spillover,
    RecommendationType.PAUSE_KEYWORD.value: _keyword_spillover,
    RecommendationType.ADD_NEGATIVE_KEYWORD.value: _keyword_spillover,
    RecommendationType.BID_ADJUSTMENT.value: _bid_spillover,
    RecommendationType.BIDDING_STRATEGY_CHANGE.value: _strategy_spillover,
}

IMPLEMENTATION_COMPLEXITY: dict[str, ImplementationComplexity] = {
    RecommendationType.ADD_NEGATIVE_KEYWORD.value: ImplementationComplexity.LOW,
    RecommendationType.PAUSE_KEYWORD.value: ImplementationComplexity.LOW,
    RecommendationType.BID_ADJUSTMENT.value: ImplementationComplexity.LOW,
    RecommendationType.BUDGET_REALLOCATION.value: ImplementationComplexity.MEDIUM,
    RecommendationType.KEYWORD_OPTIMIZATION.value: ImplementationComplexity.MEDIUM,
    RecommendationType.PAUSE_CAMPAIGN.value: ImplementationComplexity.MEDIUM,
    RecommendationType.BIDDING_STRATEGY_CHANGE.value: ImplementationComplexity.HIGH,
    RecommendationType.AD_CREATIVE.value: ImplementationComplexity.HIGH,
}

IMPLEMENTATION_COST: dict[str, float] = {
    ImplementationComplexity.LOW.value: 100.0,
    ImplementationComplexity.MEDIUM.value: 300.0,
    ImplementationComplexity.HIGH.value: 500.0,
}


class ImpactEstimator:
    """Attach quantified impact estimates to recommendations."""

    def __init__(
        self,
        primary_metrics: dict[str, str] | None = None,
        secondary_handlers: dict[str, SecondaryHandler] | None = None,
        complexity: dict[str, ImplementationComplexity] | None = None,
        history_limit: int = 50,
    ):
        """Initialize the estimator.

        Args:
            primary_metrics: Recommendation type to primary metric
            secondary_handlers: Recommendation type to spillover handler
            complexity: Recommendation type to implementation complexity
            history_limit: Maximum number of historical records considered
        """
        self.primary_metrics = dict(
            primary_metrics if primary_metrics is not None else PRIMARY_METRICS
        )
        self.secondary_handlers = dict(
            secondary_handlers
            if secondary_handlers is not None
            else SECONDARY_HANDLERS
        )
        self.complexity = dict(
            complexity if complexity is not None else IMPLEMENTATION_COMPLEXITY
        )
        self.history_limit = history_limit

    def register(
        self,
        recommendation_type: str,
        primary_metric: str,
        complexity: ImplementationComplexity,
        secondary_handler: SecondaryHandler | None = None,
    ) -> None:
        """Register the lookups for a recommendation type."""
        self.primary_metrics[recommendation_type] = primary_metric
        self.complexity[recommendation_type] = complexity
        if secondary_handler is not None:
            self.secondary_handlers[recommendation_type] = secondary_handler

    def estimate(
        self,
        recommendation: CandidateRecommendation,
        analysis: PerformanceAnalysis,
        history: Sequence[HistoricalRecommendation] | None = None,
    ) -> RecommendationImpact:
        """Estimate the impact of a recommendation.

        Args:
            recommendation: Candidate recommendation
            analysis: Performance analysis the recommendation was built from
            history: Past implemented recommendations of the same type, most recent first

        Returns:
            RecommendationImpact with primary and secondary estimates
        """
        rec_type = recommendation.type
        pct = recommendation.impact_value

        primary = self.estimate_metric_impact(
            self.primary_metrics.get(rec_type, recommendation.impact_metric),
            pct,
            analysis,
        )

        handler = self.secondary_handlers.get(rec_type)
        secondary = [
            self.estimate_metric_impact(metric, metric_pct, analysis)
            for metric, metric_pct in (handler(pct) if handler else [])
        ]

        complexity = self.complexity.get(rec_type, ImplementationComplexity.MEDIUM)
        validation = (
            validate_against_history(
                recommendation, history[: self.history_limit]
            )
            if history
            else None
        )

        impact = RecommendationImpact(
            recommendation_type=rec_type,
            primary_impact=primary,
            secondary_impacts=secondary,
            overall_score=self.overall_score(recommendation, primary, secondary),
            implementation_complexity=complexity,
            expected_roi=self.expected_roi(primary, secondary, complexity),
            historical_validation=validation,
        )
        logger.debug(
            f"Estimated {rec_type} impact: score={impact.overall_score:.1f}, "
            f"roi={impact.expected_roi:.1f}%"
        )
        return impact

    def estimate_metric_impact(
        self, metric: str, pct: float, analysis: PerformanceAnalysis
    ) -> ImpactEstimate:
        """Project a percentage change of one metric onto its current value."""
        interval = analysis.confidence_interval_for(metric)
        current = interval.mean if interval is not None else 0.0
        metric_se = (
            interval.standard_error
            if interval is not None and interval.standard_error
            else current * DEFAULT_RELATIVE_STANDARD_ERROR
        )

        expected_change = current * pct / 100
        expected_new = current + expected_change
        impact_se = metric_se * abs(pct / 100)
        margin = Z_95 * impact_se
        lower, upper = expected_new - margin, expected_new + margin

        return ImpactEstimate(
            metric=metric,
            current_value=current,
            expected_change=expected_change,
            expected_change_percentage=pct,
            expected_new_value=expected_new,
            confidence_interval=ImpactConfidenceInterval(
                lower=lower, upper=upper, confidence_level=0.95
            ),
            risk_assessment=RiskAssessment(
                best_case=upper,
                worst_case=lower,
                expected_case=expected_new,
                risk_level=self._risk_level(lower, upper, current),
                upside=upper - expected_new,
                downside=expected_new - lower,
            ),
            confidence_score=self.confidence_score(metric, analysis),
            sample_size=analysis.days_analyzed,
            standard_error=impact_se,
            projected_monthly_impact=abs(expected_change) * DAYS_PER_MONTH,
            time_to_impact=self._time_to_impact(pct),
        )

    @staticmethod
    def confidence_score(metric: str, analysis: PerformanceAnalysis) -> float:
        """Composite confidence from data quality, significance, trend fit and outliers."""
        quality = analysis.data_quality
        significance = analysis.significance_for(metric)
        trend = analysis.trend_for(metric)

        score = 0.5
        score += 0.15 if quality.has_sufficient_data else 0.0
        score += 0.15 * quality.data_completeness
        score += 0.3 * (significance.confidence_level if significance else 0.0)
        score += 0.2 * (trend.confidence if trend else 0.0)
        score -= min(0.05 * len(analysis.high_severity_outliers), 0.2)
        return min(1.0, max(0.0, score))

    @staticmethod
    def overall_score(
        recommendation: CandidateRecommendation,
        primary: ImpactEstimate,
        secondary: Sequence[ImpactEstimate],
    ) -> float:
        """Score a recommendation from 0 to 100.

        Each secondary estimate with a positive percentage change adds five points.
        """
        score = recommendation.confidence_score * 100

        magnitude = abs(primary.expected_change_percentage)
        if magnitude > 20:
            score += 10
        elif magnitude > 10:
            score += 5

        risk = primary.risk_assessment.risk_level
        if risk == RiskLevel.LOW.value:
            score += 10
        elif risk == RiskLevel.HIGH.value:
            score -= 10

        score += 5 * sum(1 for s in secondary if s.expected_change_percentage > 0)
        return min(100.0, max(0.0, score))

    @staticmethod
    def expected_roi(
        primary: ImpactEstimate,
        secondary: Sequence[ImpactEstimate],
        complexity: ImplementationComplexity | str,
    ) -> float:
        """Monthly benefit against a fixed implementation cost, as a percentage."""
        cost = IMPLEMENTATION_COST[ImplementationComplexity(complexity).value]
        benefit = abs(primary.projected_monthly_impact) + 0.5 * sum(
            abs(s.projected_monthly_impact) for s in secondary
        )
        return (benefit - cost) / cost * 100

    @staticmethod
    def _risk_level(lower: float, upper: float, current: float) -> RiskLevel:
        width = upper - lower
        if current != 0:
            uncertainty = width / abs(current)
        else:
            uncertainty = 0.0 if width == 0 else math.inf

        if uncertainty < 0.2:
            return RiskLevel.LOW
        if uncertainty < 0.5:
            return RiskLevel.MEDIUM
        return RiskLevel.HIGH

    @staticmethod
    def _time_to_impact(pct: float) -> TimeToImpact:
        magnitude = abs(pct)
        if magnitude > 20:
            return TimeToImpact.IMMEDIATE
        if magnitude > 10:
            return TimeToImpact.ONE_TO_TWO_WEEKS
        return TimeToImpact.TWO_TO_FOUR_WEEKS
