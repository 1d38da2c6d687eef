"""Tests for configuration management."""

import logging
import os

import pytest
from pydantic import ValidationError

from paidsearch_recommender.core.config import (
    AnalysisThresholds,
    KeywordThresholds,
    LogFormat,
    SearchTermThresholds,
    Settings,
    get_settings,
    setup_logging,
)
from paidsearch_recommender.core.exceptions import ConfigurationError


class TestSettings:
    """Test settings loading."""

    def test_defaults(self, settings):
        """Test default thresholds."""
        assert settings.lookback_days == 30
        assert settings.history_sample_limit == 50
        assert settings.analysis.significance_level == 0.05
        assert settings.analysis.min_days_required == 30
        assert settings.keywords.default_target_cpa is None
        assert settings.search_terms.max_negative_keywords == 20
        assert settings.logging.format == LogFormat.JSON

    def test_environment_overrides(self, monkeypatch):
        """Test prefixed and nested environment variables."""
        monkeypatch.setenv("PSR_LOOKBACK_DAYS", "14")
        monkeypatch.setenv("PSR_KEYWORDS__DEFAULT_TARGET_CPA", "75")
        monkeypatch.setenv("PSR_ANALYSIS__SIGNIFICANCE_LEVEL", "0.1")
        monkeypatch.setenv("PSR_LOGGING__FORMAT", "text")

        settings = Settings()

        assert settings.lookback_days == 14
        assert settings.keywords.default_target_cpa == 75.0
        assert settings.analysis.significance_level == 0.1
        assert settings.logging.format == LogFormat.TEXT

    def test_from_env_file(self, tmp_path, monkeypatch):
        """Test values are read from a .env file."""
        monkeypatch.delenv("PSR_LOOKBACK_DAYS", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("PSR_LOOKBACK_DAYS=21\n")

        try:
            settings = Settings.from_env(env_file)
            assert settings.lookback_days == 21
        finally:
            os.environ.pop("PSR_LOOKBACK_DAYS", None)

    def test_get_settings_is_cached(self):
        """Test the same instance is returned until the cache is cleared."""
        assert get_settings() is get_settings()

    def test_invalid_settings_raise_configuration_error(self, monkeypatch):
        """Test invalid values surface as ConfigurationError."""
        monkeypatch.setenv("PSR_LOOKBACK_DAYS", "0")

        with pytest.raises(ConfigurationError):
            get_settings()


class TestThresholdValidation:
    """Test threshold validators."""

    def test_outlier_thresholds_ordered(self):
        """Test the high z threshold must exceed the medium one."""
        with pytest.raises(ValidationError, match="outlier_high_z"):
            AnalysisThresholds(outlier_medium_z=3.0, outlier_high_z=2.0)

    def test_pause_cost_above_floor(self):
        """Test the pause cost cannot be below the analysis floor."""
        with pytest.raises(ValidationError, match="pause_cost"):
            KeywordThresholds(min_cost=60.0, pause_cost=50.0)

    def test_cost_bands_ordered(self):
        """Test the medium cost band must be below the high band."""
        with pytest.raises(ValidationError, match="medium_cost"):
            SearchTermThresholds(medium_cost=60.0, high_cost=50.0)

    def test_significance_level_range(self):
        """Test the significance level is a probability."""
        with pytest.raises(ValidationError):
            AnalysisThresholds(significance_level=1.5)


class TestSetupLogging:
    """Test logging configuration."""

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        root.handlers = handlers
        root.setLevel(level)

    def test_json_logging(self, settings):
        """Test JSON logging adds a console handler at the configured level."""
        setup_logging(settings)

        root = logging.getLogger()
        assert root.level == logging.INFO
        assert type(root.handlers[-1].formatter).__name__ == "JsonFormatter"

    def test_file_logging(self, tmp_path):
        """Test a log file receives a copy of the logs."""
        log_file = tmp_path / "logs" / "app.log"
        settings = Settings(logging={"level": "DEBUG", "format": "text", "log_file": log_file})

        setup_logging(settings)
        logging.getLogger("paidsearch_recommender.test").debug("hello")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert logging.getLogger().level == logging.DEBUG
        assert "hello" in log_file.read_text()
