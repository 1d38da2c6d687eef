"""Keyword Performance Analyzer.

Classifies each keyword as a pause, scale or optimize candidate from its cost,
conversions, CPA relative to target, conversion rate, CTR and quality score.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from paidsearch_recommender.analyzers.base import RuleBasedAnalyzer
from paidsearch_recommender.core.config import KeywordThresholds
from paidsearch_recommender.core.rules import Rule, first_match
from paidsearch_recommender.models.keyword import KeywordPerformance
from paidsearch_recommender.models.recommendation import (
    PRIORITY_RANK,
    KeywordAction,
    KeywordRecommendation,
    RecommendationPriority,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeywordContext:
    """Inputs a keyword rule is evaluated against."""

    keyword: KeywordPerformance
    target_cpa: float | None
    thresholds: KeywordThresholds

    @property
    def has_target(self) -> bool:
        return self.target_cpa is not None


class KeywordPerformanceAnalyzer(
    RuleBasedAnalyzer[KeywordContext, KeywordRecommendation]
):
    """Identify keywords to pause, scale up or optimize.

    Keywords below the cost floor are skipped. Rules that compare CPA with a
    target are skipped when no target CPA is available.
    """

    def __init__(self, thresholds: KeywordThresholds | None = None):
        """Initialize the analyzer.

        Args:
            thresholds: Keyword thresholds, defaults used when omitted
        """
        self.thresholds = thresholds or KeywordThresholds()
        self._rules: tuple[Rule[KeywordContext, KeywordRecommendation], ...] = (
            # Pause
            Rule(
                "zero_conversion_spend",
                self._is_zero_conversion_spend,
                self._pause_zero_conversions,
            ),
            Rule(
                "cpa_far_above_target",
                self._is_cpa_far_above_target,
                self._pause_high_cpa,
            ),
            Rule("low_quality_score", self._is_low_quality, self._pause_low_quality),
            # Scale
            Rule(
                "cpa_well_below_target",
                self._is_cpa_well_below_target,
                self._scale_excellent_cpa,
            ),
            Rule(
                "strong_conversion_rate",
                self._is_strong_converter,
                self._scale_strong_conversion_rate,
            ),
            # Optimize
            Rule(
                "cpa_slightly_above_target",
                self._is_cpa_slightly_above_target,
                self._optimize_cpa,
            ),
            Rule("low_ctr", self._is_low_ctr, self._optimize_ctr),
        )

    @property
    def rules(self) -> Sequence[Rule[KeywordContext, KeywordRecommendation]]:
        return self._rules

    def analyze(
        self,
        keywords: Sequence[KeywordPerformance],
        target_cpa: float | None = None,
    ) -> list[KeywordRecommendation]:
        """Evaluate every keyword against the rule table.

        Args:
            keywords: Keywords with performance for the analysis window
            target_cpa: Campaign target CPA, falls back to the configured default

        Returns:
            Recommendations sorted by priority, then cost descending
        """
        target = (
            target_cpa if target_cpa is not None else self.thresholds.default_target_cpa
        )
        logger.info(f"Analyzing {len(keywords)} keywords (target CPA: {target})")

        recommendations = []
        for keyword in keywords:
            if keyword.cost < self.thresholds.min_cost:
                continue
            context = KeywordContext(keyword, target, self.thresholds)
            recommendation = first_match(self._rules, context)
            if recommendation is not None:
                recommendations.append(recommendation)

        recommendations.sort(key=lambda r: (PRIORITY_RANK[r.priority], -r.cost))

        logger.info(
            f"Keyword analysis complete: {len(recommendations)} recommendations "
            f"from {len(keywords)} keywords"
        )
        return recommendations

    # Predicates

    def _is_zero_conversion_spend(self, ctx: KeywordContext) -> bool:
        kw = ctx.keyword
        return kw.cost >= ctx.thresholds.pause_cost and kw.conversions == 0

    def _is_cpa_far_above_target(self, ctx: KeywordContext) -> bool:
        kw = ctx.keyword
        return ctx.has_target and kw.conversions > 0 and kw.cpa > ctx.target_cpa * 2

    def _is_low_quality(self, ctx: KeywordContext) -> bool:
        kw = ctx.keyword
        if (
            kw.quality_score is None
            or kw.quality_score >= ctx.thresholds.min_quality_score
        ):
            return False
        poor_cpa = (
            ctx.has_target and kw.conversions > 0 and kw.cpa > ctx.target_cpa * 1.5
        )
        return kw.conversions == 0 or poor_cpa

    def _is_cpa_well_below_target(self, ctx: KeywordContext) -> bool:
        kw = ctx.keyword
        return ctx.has_target and kw.conversions >= 5 and kw.cpa < ctx.target_cpa * 0.5

    def _is_strong_converter(self, ctx: KeywordContext) -> bool:
        kw = ctx.keyword
        return (
            ctx.has_target
            and kw.conversions >= 3
            and kw.conversion_rate >= ctx.thresholds.min_conversion_rate * 2
            and kw.cpa <= ctx.target_cpa
        )

    def _is_cpa_slightly_above_target(self, ctx: KeywordContext) -> bool:
        kw = ctx.keyword
        return (
            ctx.has_target
            and kw.conversions > 0
            and ctx.target_cpa < kw.cpa <= ctx.target_cpa * 1.5
        )

    def _is_low_ctr(self, ctx: KeywordContext) -> bool:
        kw = ctx.keyword
        return kw.conversions > 0 and kw.ctr < ctx.thresholds.low_ctr

    # Builders

    def _build(
        self,
        ctx: KeywordContext,
        action: KeywordAction,
        priority: RecommendationPriority,
        reason: str,
    ) -> KeywordRecommendation:
        kw = ctx.keyword
        return KeywordRecommendation(
            keyword_id=kw.keyword_id,
            keyword_text=kw.text,
            action=action,
            priority=priority,
            reason=reason,
            cost=kw.cost,
            conversions=kw.conversions,
            cpa=kw.cpa,
            estimated_savings=kw.cost if action == KeywordAction.PAUSE else None,
        )

    def _pause_zero_conversions(self, ctx: KeywordContext) -> KeywordRecommendation:
        return self._build(
            ctx,
            KeywordAction.PAUSE,
            RecommendationPriority.HIGH,
            f"Spent {self._format_currency(ctx.keyword.cost)} with 0 conversions "
            f"- pure waste",
        )

    def _pause_high_cpa(self, ctx: KeywordContext) -> KeywordRecommendation:
        cpa = ctx.keyword.cpa
        above = (cpa / ctx.target_cpa - 1) * 100
        return self._build(
            ctx,
            KeywordAction.PAUSE,
            RecommendationPriority.HIGH,
            f"CPA of {self._format_currency(cpa)} is {above:.1f}% above target",
        )

    def _pause_low_quality(self, ctx: KeywordContext) -> KeywordRecommendation:
        return self._build(
            ctx,
            KeywordAction.PAUSE,
            RecommendationPriority.MEDIUM,
            f"Low quality score ({ctx.keyword.quality_score}) with poor performance",
        )

    def _scale_excellent_cpa(self, ctx: KeywordContext) -> KeywordRecommendation:
        cpa = ctx.keyword.cpa
        below = (1 - cpa / ctx.target_cpa) * 100
        return self._build(
            ctx,
            KeywordAction.SCALE,
            RecommendationPriority.HIGH,
            f"Excellent CPA of {self._format_currency(cpa)} ({below:.1f}% below target) "
            f"- increase bids",
        )

    def _scale_strong_conversion_rate(
        self, ctx: KeywordContext
    ) -> KeywordRecommendation:
        return self._build(
            ctx,
            KeywordAction.SCALE,
            RecommendationPriority.MEDIUM,
            f"Strong conversion rate ({ctx.keyword.conversion_rate:.1f}%) at target CPA "
            f"- scale up",
        )

    def _optimize_cpa(self, ctx: KeywordContext) -> KeywordRecommendation:
        return self._build(
            ctx,
            KeywordAction.OPTIMIZE,
            RecommendationPriority.MEDIUM,
            f"CPA of {self._format_currency(ctx.keyword.cpa)} slightly above target "
            f"- optimize bids or landing page",
        )

    def _optimize_ctr(self, ctx: KeywordContext) -> KeywordRecommendation:
        return self._build(
            ctx,
            KeywordAction.OPTIMIZE,
            RecommendationPriority.LOW,
            f"Low CTR ({ctx.keyword.ctr:.1f}%) - improve ad relevance",
        )
