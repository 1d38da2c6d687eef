"""Budget forecasting and account-level budget allocation."""

import logging
from collections.abc import Sequence

from paidsearch_recommender.models.insights import (
    BudgetAllocation,
    BudgetForecast,
    CampaignBudgetInput,
)
from paidsearch_recommender.models.metrics import MetricRecord
from paidsearch_recommender.utils.numeric import safe_divide

logger = logging.getLogger(__name__)

HISTORY_DAYS = 30
MAX_FORECAST_CONFIDENCE = 0.95
# Spend beyond the current budget converts with diminishing returns
DIMINISHING_RETURNS_EXPONENT = 0.3


def forecast_budget(
    records: Sequence[MetricRecord],
    current_budget: float,
    proposed_budget: float,
    forecast_days: int = 30,
) -> BudgetForecast | None:
    """Forecast spend and conversions at a proposed daily budget.

    Uses the last 30 days of history. Conversions scale with the budget
    multiplier damped by a diminishing-returns efficiency factor.

    Args:
        records: Daily metric records
        current_budget: Current daily budget
        proposed_budget: Proposed daily budget
        forecast_days: Number of days to forecast

    Returns:
        BudgetForecast, or None when there is no history or no current budget
    """
    if not records or current_budget <= 0:
        return None

    history = sorted(records, key=lambda r: r.date)[-HISTORY_DAYS:]
    days = len(history)
    avg_cost = sum(r.cost for r in history) / days
    avg_conversions = sum(r.conversions for r in history) / days
    avg_value = sum(r.conversion_value for r in history) / days

    multiplier = proposed_budget / current_budget
    efficiency = (
        min(1.0, 1 / multiplier**DIMINISHING_RETURNS_EXPONENT) if multiplier > 0 else 1.0
    )

    cost = avg_cost * multiplier * forecast_days
    conversions = avg_conversions * multiplier * efficiency * forecast_days
    revenue = avg_value * multiplier * efficiency * forecast_days

    logger.debug(
        f"Budget forecast: multiplier={multiplier:.2f}, efficiency={efficiency:.3f}"
    )

    return BudgetForecast(
        current_budget=current_budget,
        proposed_budget=proposed_budget,
        forecast_days=forecast_days,
        forecasted_cost=cost,
        forecasted_conversions=conversions,
        forecasted_revenue=revenue,
        forecasted_cpa=safe_divide(cost, conversions),
        forecasted_roas=safe_divide(revenue, cost),
        efficiency=efficiency,
        confidence=min(MAX_FORECAST_CONFIDENCE, days / HISTORY_DAYS),
    )


def allocate_budget(
    campaigns: Sequence[CampaignBudgetInput], total_budget: float
) -> list[BudgetAllocation]:
    """Split an account budget across campaigns in proportion to ROAS.

    Campaigns share the budget equally when none has a positive ROAS.
    """
    if not campaigns:
        return []

    total_roas = sum(c.roas for c in campaigns)
    allocations = []
    for campaign in campaigns:
        share = (
            campaign.roas / total_roas if total_roas > 0 else 1 / len(campaigns)
        )
        allocations.append(
            BudgetAllocation(
                campaign_id=campaign.campaign_id,
                roas=campaign.roas,
                share=share,
                allocated_budget=total_budget * share,
            )
        )
    return allocations
