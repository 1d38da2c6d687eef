"""Configuration management for the paid search recommender."""

import logging
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from paidsearch_recommender.core.exceptions import ConfigurationError


class Environment(str, Enum):
    """Application environments."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LogFormat(str, Enum):
    """Log format options."""

    JSON = "json"
    TEXT = "text"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: LogFormat = LogFormat.JSON
    log_file: Path | None = Field(
        default=None, description="Optional file that receives a copy of all logs"
    )


class AnalysisThresholds(BaseModel):
    """Thresholds used by the statistical analyzer."""

    min_days_required: int = Field(default=30, ge=1)
    min_data_completeness: float = Field(default=0.7, ge=0.0, le=1.0)
    significance_level: float = Field(default=0.05, gt=0.0, lt=1.0)
    min_trend_points: int = Field(default=7, ge=2)
    stable_slope_ratio: float = Field(default=0.01, ge=0.0)
    benchmark_tolerance_pct: float = Field(default=5.0, ge=0.0)
    outlier_medium_z: float = Field(default=2.0, gt=0.0)
    outlier_high_z: float = Field(default=3.0, gt=0.0)

    @model_validator(mode="after")
    def validate_outlier_thresholds(self) -> "AnalysisThresholds":
        """High-severity z threshold must sit above the medium one."""
        if self.outlier_high_z <= self.outlier_medium_z:
            raise ValueError("outlier_high_z must be greater than outlier_medium_z")
        return self


class KeywordThresholds(BaseModel):
    """Thresholds for per-keyword pause/scale/optimize rules."""

    default_target_cpa: float | None = Field(
        default=None,
        gt=0.0,
        description="Target CPA used when the campaign does not define one",
    )
    min_conversion_rate: float = Field(default=1.0, ge=0.0, le=100.0)  # Percentage
    min_quality_score: int = Field(default=5, ge=1, le=10)
    min_cost: float = Field(default=10.0, ge=0.0)
    pause_cost: float = Field(default=50.0, gt=0.0)
    low_ctr: float = Field(default=1.0, ge=0.0, le=100.0)  # Percentage

    @model_validator(mode="after")
    def validate_cost_floors(self) -> "KeywordThresholds":
        """The pause cost must not be below the analysis floor."""
        if self.pause_cost < self.min_cost:
            raise ValueError("pause_cost must be greater than or equal to min_cost")
        return self


class SearchTermThresholds(BaseModel):
    """Thresholds for negative keyword candidates."""

    high_cost: float = Field(default=50.0, gt=0.0)
    medium_cost: float = Field(default=20.0, gt=0.0)
    low_min_clicks: int = Field(default=5, ge=1)
    low_conversion_rate: float = Field(default=1.0, ge=0.0, le=100.0)  # Percentage
    max_negative_keywords: int = Field(default=20, ge=1)

    @model_validator(mode="after")
    def validate_cost_bands(self) -> "SearchTermThresholds":
        """Cost bands must be ordered."""
        if self.medium_cost >= self.high_cost:
            raise ValueError("medium_cost must be lower than high_cost")
        return self


class Settings(BaseSettings):
    """Application settings.

    Environment Variables:
        PSR_ENVIRONMENT=development
        PSR_LOOKBACK_DAYS=30
        PSR_LOGGING__LEVEL=INFO
        PSR_LOGGING__FORMAT=json
        PSR_KEYWORDS__DEFAULT_TARGET_CPA=100
        PSR_ANALYSIS__SIGNIFICANCE_LEVEL=0.05
    """

    model_config = SettingsConfigDict(
        env_prefix="PSR_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False
    lookback_days: int = Field(default=30, ge=1, le=365)
    history_sample_limit: int = Field(default=50, ge=1)

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    analysis: AnalysisThresholds = Field(default_factory=AnalysisThresholds)
    keywords: KeywordThresholds = Field(default_factory=KeywordThresholds)
    search_terms: SearchTermThresholds = Field(default_factory=SearchTermThresholds)

    @classmethod
    def from_env(cls, env_file: Path | None = None, **overrides: Any) -> "Settings":
        """Load settings from the environment, reading a .env file first if present."""
        if env_file:
            load_dotenv(env_file)
        else:
            root_dir = Path(__file__).parent.parent.parent.parent
            env_path = root_dir / ".env"
            if env_path.exists():
                load_dotenv(env_path)

        return cls(**overrides)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    try:
        return Settings.from_env()
    except ValidationError as e:
        logging.error(f"Configuration error: {e}")
        raise ConfigurationError(str(e)) from e


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == LogFormat.JSON:
        import json

        class JsonFormatter(logging.Formatter):
            def format(self, record: logging.LogRecord) -> str:
                log_data = {
                    "timestamp": self.formatTime(record),
                    "level": record.levelname,
                    "logger": record.name,
                    "message": record.getMessage(),
                    "module": record.module,
                    "function": record.funcName,
                    "line": record.lineno,
                }
                if record.exc_info:
                    log_data["exception"] = self.formatException(record.exc_info)
                return json.dumps(log_data)

        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if settings.logging.log_file:
        settings.logging.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(settings.logging.log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
