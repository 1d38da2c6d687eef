"""Core configuration and exceptions."""

from paidsearch_recommender.core.config import Settings, get_settings, setup_logging
from paidsearch_recommender.core.exceptions import (
    AnalysisError,
    CampaignNotFoundError,
    ConfigurationError,
    RecommenderError,
    ResourceNotFoundError,
)

__all__ = [
    "AnalysisError",
    "CampaignNotFoundError",
    "ConfigurationError",
    "RecommenderError",
    "ResourceNotFoundError",
    "Settings",
    "get_settings",
    "setup_logging",
]
