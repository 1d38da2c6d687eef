"""Search Term Waste Analyzer.

This analyzer identifies search terms generating spend with little or no
conversion value and proposes them as negative keywords.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from paidsearch_recommender.analyzers.base import RuleBasedAnalyzer
from paidsearch_recommender.core.config import SearchTermThresholds
from paidsearch_recommender.core.rules import Rule, first_match
from paidsearch_recommender.models.keyword import SearchTermPerformance
from paidsearch_recommender.models.recommendation import (
    RecommendationPriority,
    SavingsSummary,
    SearchTermRecommendation,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchTermContext:
    """Inputs a search term rule is evaluated against."""

    term: SearchTermPerformance
    target_cpa: float | None
    thresholds: SearchTermThresholds


def aggregate_search_terms(
    search_terms: Sequence[SearchTermPerformance],
) -> list[SearchTermPerformance]:
    """Sum metrics of rows that share the same search term, keeping first-seen order."""
    totals: dict[str, dict[str, float]] = {}
    first_rows: dict[str, SearchTermPerformance] = {}

    for row in search_terms:
        bucket = totals.setdefault(
            row.search_term,
            {
                "impressions": 0,
                "clicks": 0,
                "cost": 0.0,
                "conversions": 0.0,
                "conversion_value": 0.0,
            },
        )
        first_rows.setdefault(row.search_term, row)
        bucket["impressions"] += row.impressions
        bucket["clicks"] += row.clicks
        bucket["cost"] += row.cost
        bucket["conversions"] += row.conversions
        bucket["conversion_value"] += row.conversion_value

    return [
        first_rows[term].model_copy(update=metrics)
        for term, metrics in totals.items()
    ]


class SearchTermWasteAnalyzer(
    RuleBasedAnalyzer[SearchTermContext, SearchTermRecommendation]
):
    """Identify search terms generating spend with no conversion value.

    Terms that already convert at or below the target CPA are never proposed.
    """

    def __init__(self, thresholds: SearchTermThresholds | None = None):
        """Initialize the analyzer.

        Args:
            thresholds: Cost and click thresholds, defaults used when omitted
        """
        self.thresholds = thresholds or SearchTermThresholds()
        self._rules: tuple[Rule[SearchTermContext, SearchTermRecommendation], ...] = (
            Rule(
                "high_cost_zero_conversions",
                self._is_high_cost_waste,
                self._high_cost_waste,
            ),
            Rule(
                "cpa_far_above_target",
                self._is_cpa_far_above_target,
                self._high_cpa,
            ),
            Rule(
                "medium_cost_zero_conversions",
                self._is_medium_cost_waste,
                self._medium_cost_waste,
            ),
            Rule(
                "low_conversion_rate",
                self._is_low_conversion_rate,
                self._low_conversion_rate,
            ),
            Rule(
                "low_cost_clicks_zero_conversions",
                self._is_minor_waste,
                self._minor_waste,
            ),
        )

    @property
    def rules(self) -> Sequence[Rule[SearchTermContext, SearchTermRecommendation]]:
        return self._rules

    def analyze(
        self,
        search_terms: Sequence[SearchTermPerformance],
        target_cpa: float | None = None,
    ) -> list[SearchTermRecommendation]:
        """Find negative keyword candidates.

        Args:
            search_terms: Search term rows, possibly several per term
            target_cpa: Campaign target CPA; CPA based rules are skipped without it

        Returns:
            Candidates sorted by estimated savings descending
        """
        aggregated = aggregate_search_terms(search_terms)
        logger.info(f"Analyzing {len(aggregated)} search terms")

        candidates = []
        for term in aggregated:
            if self._is_converting_well(term, target_cpa):
                continue
            context = SearchTermContext(term, target_cpa, self.thresholds)
            candidate = first_match(self._rules, context)
            if candidate is not None:
                candidates.append(candidate)

        candidates.sort(key=lambda c: c.estimated_savings, reverse=True)

        logger.info(
            f"Analysis complete: {len(candidates)} negative keyword candidates, "
            f"{self._format_currency(sum(c.estimated_savings for c in candidates))} "
            f"potential savings"
        )
        return candidates

    def calculate_total_savings(
        self, candidates: Sequence[SearchTermRecommendation]
    ) -> SavingsSummary:
        """Total estimated savings, broken down by priority."""
        by_priority = {
            RecommendationPriority.HIGH.value: 0.0,
            RecommendationPriority.MEDIUM.value: 0.0,
            RecommendationPriority.LOW.value: 0.0,
        }
        for candidate in candidates:
            if candidate.priority in by_priority:
                by_priority[candidate.priority] += candidate.estimated_savings

        return SavingsSummary(
            total=sum(c.estimated_savings for c in candidates),
            high=by_priority[RecommendationPriority.HIGH.value],
            medium=by_priority[RecommendationPriority.MEDIUM.value],
            low=by_priority[RecommendationPriority.LOW.value],
            count=len(candidates),
        )

    @staticmethod
    def _is_converting_well(
        term: SearchTermPerformance, target_cpa: float | None
    ) -> bool:
        if term.conversions <= 0:
            return False
        return target_cpa is None or term.cpa <= target_cpa

    # Predicates

    def _is_high_cost_waste(self, ctx: SearchTermContext) -> bool:
        return ctx.term.conversions == 0 and ctx.term.cost >= ctx.thresholds.high_cost

    def _is_cpa_far_above_target(self, ctx: SearchTermContext) -> bool:
        term = ctx.term
        return (
            ctx.target_cpa is not None
            and term.conversions > 0
            and term.cost >= ctx.thresholds.medium_cost
            and term.cpa > ctx.target_cpa * 2
        )

    def _is_medium_cost_waste(self, ctx: SearchTermContext) -> bool:
        term = ctx.term
        return (
            term.conversions == 0
            and ctx.thresholds.medium_cost <= term.cost < ctx.thresholds.high_cost
        )

    def _is_low_conversion_rate(self, ctx: SearchTermContext) -> bool:
        term = ctx.term
        return (
            term.conversions > 0
            and term.cost >= ctx.thresholds.medium_cost
            and term.conversion_rate < ctx.thresholds.low_conversion_rate
        )

    def _is_minor_waste(self, ctx: SearchTermContext) -> bool:
        term = ctx.term
        return (
            term.conversions == 0
            and term.cost < ctx.thresholds.medium_cost
            and term.clicks >= ctx.thresholds.low_min_clicks
        )

    # Builders

    def _build(
        self,
        ctx: SearchTermContext,
        priority: RecommendationPriority,
        reason: str,
        savings_ratio: float = 1.0,
    ) -> SearchTermRecommendation:
        term = ctx.term
        return SearchTermRecommendation(
            search_term=term.search_term,
            priority=priority,
            reason=reason,
            cost=term.cost,
            clicks=term.clicks,
            conversions=term.conversions,
            conversion_rate=term.conversion_rate,
            estimated_savings=round(term.cost * savings_ratio, 2),
        )

    def _high_cost_waste(self, ctx: SearchTermContext) -> SearchTermRecommendation:
        return self._build(
            ctx,
            RecommendationPriority.HIGH,
            f"Spent {self._format_currency(ctx.term.cost)} with 0 conversions "
            f"- immediate waste",
        )

    def _high_cpa(self, ctx: SearchTermContext) -> SearchTermRecommendation:
        return self._build(
            ctx,
            RecommendationPriority.HIGH,
            f"CPA of {self._format_currency(ctx.term.cpa)} is more than double the "
            f"{self._format_currency(ctx.target_cpa)} target",
            savings_ratio=0.8,
        )

    def _medium_cost_waste(self, ctx: SearchTermContext) -> SearchTermRecommendation:
        return self._build(
            ctx,
            RecommendationPriority.MEDIUM,
            f"Spent {self._format_currency(ctx.term.cost)} with 0 conversions",
        )

    def _low_conversion_rate(self, ctx: SearchTermContext) -> SearchTermRecommendation:
        return self._build(
            ctx,
            RecommendationPriority.MEDIUM,
            f"Low conversion rate ({ctx.term.conversion_rate:.1f}%) with "
            f"{self._format_currency(ctx.term.cost)} spend",
            savings_ratio=0.5,
        )

    def _minor_waste(self, ctx: SearchTermContext) -> SearchTermRecommendation:
        return self._build(
            ctx,
            RecommendationPriority.LOW,
            f"{self._format_currency(ctx.term.cost)} spent with 0 conversions "
            f"- minor waste",
        )
