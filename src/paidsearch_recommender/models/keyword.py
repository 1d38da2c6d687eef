"""Keyword and search term performance models."""

from enum import Enum
from typing import Any

from pydantic import Field, field_validator

from paidsearch_recommender.models.base import PerformanceMetricsMixin
from paidsearch_recommender.utils.numeric import clean_numeric_value, safe_divide


class KeywordMatchType(str, Enum):
    """Keyword match type values."""

    EXACT = "EXACT"
    PHRASE = "PHRASE"
    BROAD = "BROAD"


class KeywordStatus(str, Enum):
    """Keyword status values."""

    ENABLED = "ENABLED"
    PAUSED = "PAUSED"
    REMOVED = "REMOVED"


class KeywordPerformance(PerformanceMetricsMixin):
    """Keyword with aggregated performance for the analysis window."""

    keyword_id: str
    text: str
    campaign_id: str | None = None
    ad_group_id: str | None = None
    match_type: KeywordMatchType = KeywordMatchType.BROAD
    status: KeywordStatus = KeywordStatus.ENABLED
    quality_score: int | None = Field(None, description="Quality score (1-10)")

    @field_validator("quality_score", mode="before")
    @classmethod
    def clean_quality_score(cls, v: Any) -> int | None:
        """Clean and validate quality score field."""
        cleaned = clean_numeric_value(v)
        if cleaned is not None:
            # Quality score should be between 1 and 10
            score = int(cleaned)
            return score if 1 <= score <= 10 else None
        return None

    @property
    def ctr(self) -> float:
        """Calculate Click-Through Rate."""
        return safe_divide(self.clicks, self.impressions) * 100

    @property
    def cpa(self) -> float:
        """Calculate Cost Per Acquisition."""
        return safe_divide(self.cost, self.conversions)

    @property
    def conversion_rate(self) -> float:
        """Calculate Conversion Rate."""
        return safe_divide(self.conversions, self.clicks) * 100


class SearchTermPerformance(PerformanceMetricsMixin):
    """Search query that triggered an ad, with its metrics."""

    search_term: str
    campaign_id: str | None = None
    ad_group_id: str | None = None
    keyword_text: str | None = None

    @property
    def cpa(self) -> float:
        """Calculate Cost Per Acquisition."""
        return safe_divide(self.cost, self.conversions)

    @property
    def conversion_rate(self) -> float:
        """Calculate Conversion Rate."""
        return safe_divide(self.conversions, self.clicks) * 100
