"""Custom exceptions for the paid search recommender."""


class RecommenderError(Exception):
    """Base exception for all recommender errors."""

    pass


class AnalysisError(RecommenderError):
    """Raised when analysis fails."""

    pass


class ConfigurationError(RecommenderError):
    """Raised when configuration is invalid."""

    pass


class ResourceNotFoundError(RecommenderError):
    """Raised when requested resource is not found."""

    pass


class CampaignNotFoundError(ResourceNotFoundError):
    """Raised when a campaign cannot be found in the metrics repository."""

    def __init__(self, campaign_id: str):
        """Initialize campaign not found error.

        Args:
            campaign_id: ID of the campaign that was requested
        """
        super().__init__(f"Campaign not found: {campaign_id}")
        self.campaign_id = campaign_id
