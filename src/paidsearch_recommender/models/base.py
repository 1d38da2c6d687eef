"""Base model with common configuration."""

from typing import Any

from pydantic import BaseModel as PydanticBaseModel
from pydantic import field_validator

from paidsearch_recommender.utils.numeric import clean_numeric_value


class BaseRecommenderModel(PydanticBaseModel):
    """Base model for all recommender value objects.

    Instances are immutable: every analysis run builds fresh objects from
    the raw metric series.
    """

    model_config = {
        # Use enum values instead of names
        "use_enum_values": True,
        # Value objects are never mutated after construction
        "frozen": True,
        # Allow population by field name
        "populate_by_name": True,
    }


class PerformanceMetricsMixin(BaseRecommenderModel):
    """Raw delivery metrics shared by records, keywords and search terms."""

    impressions: int = 0
    clicks: int = 0
    cost: float = 0.0
    conversions: float = 0.0
    conversion_value: float = 0.0

    @field_validator("impressions", "clicks", mode="before")
    @classmethod
    def clean_integer_fields(cls, v: Any) -> int:
        """Clean and validate integer metric fields."""
        cleaned = clean_numeric_value(v)
        value = int(cleaned) if cleaned is not None else 0
        if value < 0:
            raise ValueError("Count metrics must be non-negative")
        return value

    @field_validator("cost", "conversions", "conversion_value", mode="before")
    @classmethod
    def clean_float_fields(cls, v: Any) -> float:
        """Clean and validate float metric fields."""
        cleaned = clean_numeric_value(v)
        value = float(cleaned) if cleaned is not None else 0.0
        if value < 0:
            raise ValueError("Cost and conversion metrics must be non-negative")
        return value
