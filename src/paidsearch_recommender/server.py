"""FastMCP server exposing campaign analysis and recommendations."""

import logging
import re
from datetime import date, datetime
from enum import Enum
from typing import Any

from fastmcp import FastMCP
from pydantic import BaseModel, Field

from paidsearch_recommender import __version__
from paidsearch_recommender.analyzers.forecasting import allocate_budget, forecast_budget
from paidsearch_recommender.analyzers.insights import predict_cpa, segment_campaigns
from paidsearch_recommender.core.config import (
    Environment,
    get_settings,
    setup_logging,
)
from paidsearch_recommender.core.exceptions import (
    AnalysisError,
    CampaignNotFoundError,
    ConfigurationError,
    RecommenderError,
)
from paidsearch_recommender.data_providers.base import (
    MetricsRepository,
    RecommendationHistoryRepository,
)
from paidsearch_recommender.data_providers.mock_provider import MockMetricsProvider
from paidsearch_recommender.impact.simulation import simulate_impact
from paidsearch_recommender.models.insights import CampaignBudgetInput
from paidsearch_recommender.pipeline import RecommendationPipeline

logger = logging.getLogger(__name__)


# ============================================================================
# Error Codes
# ============================================================================


class ErrorCode(str, Enum):
    """Error codes for programmatic error handling."""

    INVALID_INPUT = "INVALID_INPUT"
    CAMPAIGN_NOT_FOUND = "CAMPAIGN_NOT_FOUND"
    INSUFFICIENT_DATA = "INSUFFICIENT_DATA"
    ANALYSIS_ERROR = "ANALYSIS_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# Initialize MCP server
mcp = FastMCP("Paid Search Recommender")


# ============================================================================
# Helper Functions
# ============================================================================


def sanitize_error_message(msg: str) -> str:
    """Remove potential credentials from error messages.

    Args:
        msg: Original error message

    Returns:
        Sanitized error message with credentials redacted

    Examples:
        >>> sanitize_error_message("Token abc123xyz456abc123xyz failed")
        "Token [REDACTED] failed"
        >>> sanitize_error_message("user@example.com request failed")
        "[EMAIL_REDACTED] request failed"
    """
    # Remove anything that looks like a token (20+ alphanumeric/dash/underscore)
    msg = re.sub(r"[A-Za-z0-9_-]{20,}", "[REDACTED]", msg)

    # Remove anything that looks like an email address
    msg = re.sub(r"\b[\w.-]+@[\w.-]+\.\w+\b", "[EMAIL_REDACTED]", msg)

    # Remove anything that looks like an API key pattern
    msg = re.sub(
        r"(api[_-]?key|token|secret|password|credential)[\"']?\s*[:=]\s*[\"']?[^\s\"']+",
        r"\1=[REDACTED]",
        msg,
        flags=re.IGNORECASE,
    )

    return msg


def validate_date_format(date_str: str | None, field_name: str = "date") -> date | None:
    """Validate an optional date string in YYYY-MM-DD format.

    Raises:
        ValueError: If the date format is invalid
    """
    if date_str is None:
        return None
    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError:
        raise ValueError(
            f"Invalid {field_name} format: {date_str}. Expected YYYY-MM-DD"
        )


def error_response(error: Exception) -> dict[str, Any]:
    """Map an exception to an error payload, logging it sanitized."""
    message = sanitize_error_message(str(error))

    if isinstance(error, CampaignNotFoundError):
        logger.warning(message)
        code, retry = ErrorCode.CAMPAIGN_NOT_FOUND, False
    elif isinstance(error, ValueError):
        logger.error(f"Invalid input: {message}")
        code, retry = ErrorCode.INVALID_INPUT, False
        message = f"Invalid input: {message}"
    elif isinstance(error, ConfigurationError):
        logger.error(f"Configuration error: {message}")
        code, retry = ErrorCode.CONFIGURATION_ERROR, False
    elif isinstance(error, AnalysisError):
        logger.error(f"Analysis failed: {message}", exc_info=True)
        code, retry = ErrorCode.ANALYSIS_ERROR, True
    elif isinstance(error, RecommenderError):
        logger.error(f"Recommender error: {message}", exc_info=True)
        code, retry = ErrorCode.ANALYSIS_ERROR, True
    else:
        logger.error(f"Unexpected error: {message}", exc_info=True)
        code, retry = ErrorCode.INTERNAL_ERROR, False
        message = "An unexpected error occurred. Please contact support if this persists."

    return {
        "status": "error",
        "error_code": code,
        "message": message,
        "details": {"error_type": type(error).__name__, "retry_allowed": retry},
        "data": None,
    }


# Repositories shared across requests
_metrics_repository: MetricsRepository | None = None
_history_repository: RecommendationHistoryRepository | None = None
_pipeline: RecommendationPipeline | None = None


def configure_repositories(
    metrics_repository: MetricsRepository,
    history_repository: RecommendationHistoryRepository | None = None,
) -> None:
    """Set the repositories the tools read from."""
    global _metrics_repository, _history_repository, _pipeline
    _metrics_repository = metrics_repository
    _history_repository = history_repository
    _pipeline = None


def reset_repositories_for_testing() -> None:
    """Reset the shared repositories and pipeline (for testing only)."""
    global _metrics_repository, _history_repository, _pipeline
    _metrics_repository = None
    _history_repository = None
    _pipeline = None


def _get_pipeline() -> RecommendationPipeline:
    """Get or create the shared pipeline (singleton pattern).

    Falls back to the seeded mock provider when no repository was configured.
    """
    global _metrics_repository, _history_repository, _pipeline

    if _pipeline is not None:
        return _pipeline

    if _metrics_repository is None:
        logger.warning("No metrics repository configured, serving mock data")
        mock = MockMetricsProvider()
        _metrics_repository = mock
        _history_repository = _history_repository or mock

    _pipeline = RecommendationPipeline(
        _metrics_repository, _history_repository, settings=get_settings()
    )
    return _pipeline


# ============================================================================
# Models
# ============================================================================


class CampaignWindowRequest(BaseModel):
    """Request model for analyzing one campaign window."""

    campaign_id: str = Field(..., min_length=1, description="Campaign ID")
    end_date: str | None = Field(
        None, description="Last day of the window in YYYY-MM-DD format (default today)"
    )
    lookback_days: int | None = Field(
        None, ge=1, le=365, description="Window length in days (default from settings)"
    )


class RecommendationsRequest(CampaignWindowRequest):
    """Request model for generating recommendations."""

    categories: list[str] | None = Field(
        None, description="Recommendation categories to run (default all)"
    )


class ImpactSimulationRequest(CampaignWindowRequest):
    """Request model for simulating the combined impact of recommendations."""

    recommendation_types: list[str] | None = Field(
        None, description="Only include recommendations of these types"
    )


class CPAPredictionRequest(CampaignWindowRequest):
    """Request model for CPA prediction."""

    horizon_days: int = Field(7, ge=1, le=90, description="Days to project ahead")


class BudgetForecastRequest(CampaignWindowRequest):
    """Request model for a budget forecast."""

    proposed_budget: float = Field(..., gt=0, description="Proposed daily budget")
    forecast_days: int = Field(30, ge=1, le=365, description="Days to forecast")


class CampaignsRequest(BaseModel):
    """Request model for multi-campaign operations."""

    campaign_ids: list[str] = Field(..., min_length=1, description="Campaign IDs")
    end_date: str | None = Field(
        None, description="Last day of the window in YYYY-MM-DD format (default today)"
    )
    lookback_days: int | None = Field(None, ge=1, le=365)


class BudgetAllocationRequest(CampaignsRequest):
    """Request model for splitting an account budget across campaigns."""

    total_budget: float = Field(..., gt=0, description="Total daily budget")


# ============================================================================
# Tools
# ============================================================================


@mcp.tool()
async def analyze_campaign_performance(request: CampaignWindowRequest) -> dict[str, Any]:
    """
    Run the statistical performance analysis for a campaign.

    Returns significance tests, trends, benchmarks, outliers, confidence
    intervals, data quality and an overall health summary.
    """
    try:
        end_date = validate_date_format(request.end_date, "end_date")
        analysis = await _get_pipeline().analyze(
            request.campaign_id, end_date, request.lookback_days
        )
        return {
            "status": "success",
            "message": f"Campaign health is {analysis.summary.overall_health}",
            "metadata": {
                "campaign_id": request.campaign_id,
                "period_start": analysis.period_start.isoformat(),
                "period_end": analysis.period_end.isoformat(),
                "days_analyzed": analysis.days_analyzed,
            },
            "data": analysis.model_dump(mode="json"),
        }
    except Exception as e:
        return error_response(e)


@mcp.tool()
async def generate_recommendations(request: RecommendationsRequest) -> dict[str, Any]:
    """
    Generate prioritized, impact-scored recommendations for a campaign.

    Recommendations cover budget, keywords, bids, bidding strategy and
    campaign status, each with an impact estimate. Keyword and search term
    findings are returned alongside.
    """
    try:
        end_date = validate_date_format(request.end_date, "end_date")
        result = await _get_pipeline().run(
            request.campaign_id,
            end_date,
            request.lookback_days,
            categories=request.categories,
        )
        return {
            "status": "success",
            "message": f"Generated {len(result.recommendations)} recommendations",
            "metadata": {
                "campaign_id": request.campaign_id,
                "overall_health": result.analysis.summary.overall_health,
                "recommendation_count": len(result.recommendations),
                "unsupported_categories": result.unsupported_categories,
            },
            "data": result.model_dump(mode="json"),
        }
    except KeyError as e:
        return error_response(ValueError(f"Unknown recommendation category: {e}"))
    except Exception as e:
        return error_response(e)


@mcp.tool()
async def simulate_recommendation_impact(
    request: ImpactSimulationRequest,
) -> dict[str, Any]:
    """
    Project cost, conversions, CPA and ROAS as if the recommendations were applied.
    """
    try:
        end_date = validate_date_format(request.end_date, "end_date")
        result = await _get_pipeline().run(
            request.campaign_id, end_date, request.lookback_days
        )
        selected = [
            r.recommendation
            for r in result.recommendations
            if request.recommendation_types is None
            or r.recommendation.type in request.recommendation_types
        ]
        simulation = simulate_impact(selected, result.analysis)
        return {
            "status": "success",
            "message": f"Simulated {simulation.recommendation_count} recommendations",
            "metadata": {"campaign_id": request.campaign_id},
            "data": simulation.model_dump(mode="json"),
        }
    except Exception as e:
        return error_response(e)


@mcp.tool()
async def predict_campaign_cpa(request: CPAPredictionRequest) -> dict[str, Any]:
    """
    Project a campaign's CPA forward along its fitted trend.
    """
    try:
        end_date = validate_date_format(request.end_date, "end_date")
        analysis = await _get_pipeline().analyze(
            request.campaign_id, end_date, request.lookback_days
        )
        prediction = predict_cpa(analysis, request.horizon_days)
        if prediction is None:
            return {
                "status": "error",
                "error_code": ErrorCode.INSUFFICIENT_DATA,
                "message": "Not enough conversion data to fit a CPA trend",
                "details": {"error_type": "insufficient_data", "retry_allowed": False},
                "data": None,
            }
        return {
            "status": "success",
            "message": f"CPA is {prediction.trend}",
            "metadata": {"campaign_id": request.campaign_id},
            "data": prediction.model_dump(mode="json"),
        }
    except Exception as e:
        return error_response(e)


@mcp.tool()
async def forecast_campaign_budget(request: BudgetForecastRequest) -> dict[str, Any]:
    """
    Forecast spend and conversions for a campaign at a proposed daily budget.
    """
    try:
        end_date = validate_date_format(request.end_date, "end_date")
        window = await _get_pipeline().load_window(
            request.campaign_id, end_date, request.lookback_days
        )
        forecast = forecast_budget(
            window.records,
            window.campaign.budget or 0.0,
            request.proposed_budget,
            request.forecast_days,
        )
        if forecast is None:
            return {
                "status": "error",
                "error_code": ErrorCode.INSUFFICIENT_DATA,
                "message": "Forecast needs daily history and a current budget",
                "details": {"error_type": "insufficient_data", "retry_allowed": False},
                "data": None,
            }
        return {
            "status": "success",
            "message": f"Forecast for {forecast.forecast_days} days",
            "metadata": {"campaign_id": request.campaign_id},
            "data": forecast.model_dump(mode="json"),
        }
    except Exception as e:
        return error_response(e)


@mcp.tool()
async def segment_account_campaigns(request: CampaignsRequest) -> dict[str, Any]:
    """
    Group campaigns into high performers, average performers and campaigns
    that need attention.
    """
    try:
        end_date = validate_date_format(request.end_date, "end_date")
        pipeline = _get_pipeline()
        analyses = {
            cid: await pipeline.analyze(cid, end_date, request.lookback_days)
            for cid in dict.fromkeys(request.campaign_ids)
        }
        segments = segment_campaigns(analyses)
        return {
            "status": "success",
            "message": f"Segmented {len(segments)} campaigns",
            "metadata": {"campaign_count": len(segments)},
            "data": [s.model_dump(mode="json") for s in segments],
        }
    except Exception as e:
        return error_response(e)


@mcp.tool()
async def allocate_account_budget(request: BudgetAllocationRequest) -> dict[str, Any]:
    """
    Split a total daily budget across campaigns in proportion to their ROAS.
    """
    try:
        end_date = validate_date_format(request.end_date, "end_date")
        pipeline = _get_pipeline()
        inputs = []
        for cid in dict.fromkeys(request.campaign_ids):
            window = await pipeline.load_window(cid, end_date, request.lookback_days)
            inputs.append(
                CampaignBudgetInput(
                    campaign_id=cid,
                    cost=sum(r.cost for r in window.records),
                    conversion_value=sum(r.conversion_value for r in window.records),
                )
            )
        allocations = allocate_budget(inputs, request.total_budget)
        return {
            "status": "success",
            "message": f"Allocated budget across {len(allocations)} campaigns",
            "metadata": {"total_budget": request.total_budget},
            "data": [a.model_dump(mode="json") for a in allocations],
        }
    except Exception as e:
        return error_response(e)


# ============================================================================
# Resources
# ============================================================================


@mcp.resource("resource://health")
def health_check() -> dict[str, Any]:
    """
    Provides server health status.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "server": "Paid Search Recommender",
        "repository_configured": _metrics_repository is not None,
        "tools_available": [
            "analyze_campaign_performance",
            "generate_recommendations",
            "simulate_recommendation_impact",
            "predict_campaign_cpa",
            "forecast_campaign_budget",
            "segment_account_campaigns",
            "allocate_account_budget",
        ],
    }


@mcp.resource("resource://config")
def get_config() -> dict[str, Any]:
    """
    Provides the active analysis thresholds (no secrets are held in settings).
    """
    settings = get_settings()
    return {
        "server_version": __version__,
        "environment": settings.environment,
        "lookback_days": settings.lookback_days,
        "analysis": settings.analysis.model_dump(),
        "keywords": settings.keywords.model_dump(),
        "search_terms": settings.search_terms.model_dump(),
    }


# ============================================================================
# Server Factory
# ============================================================================


def create_mcp_server() -> FastMCP:
    """
    Create and return the configured MCP server instance.

    Returns:
        FastMCP: The configured server instance ready to run.
    """
    return mcp


def main() -> None:
    """Configure logging and run the MCP server."""
    settings = get_settings()
    setup_logging(settings)
    if settings.environment == Environment.PRODUCTION.value and settings.debug:
        logger.warning(
            "Debug mode enabled in production environment. "
            "This may expose sensitive information in logs."
        )
    mcp.run()


if __name__ == "__main__":
    main()
