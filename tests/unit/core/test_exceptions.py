"""Tests for the exception hierarchy."""

import pytest

from paidsearch_recommender.core.exceptions import (
    AnalysisError,
    CampaignNotFoundError,
    ConfigurationError,
    RecommenderError,
    ResourceNotFoundError,
)


class TestExceptions:
    """Test exception types."""

    @pytest.mark.parametrize(
        "error_type", [AnalysisError, ConfigurationError, ResourceNotFoundError]
    )
    def test_share_base(self, error_type):
        """Test every error can be caught as RecommenderError."""
        assert issubclass(error_type, RecommenderError)

    def test_campaign_not_found(self):
        """Test the missing campaign ID is kept and named in the message."""
        error = CampaignNotFoundError("camp_404")

        assert isinstance(error, ResourceNotFoundError)
        assert error.campaign_id == "camp_404"
        assert str(error) == "Campaign not found: camp_404"
