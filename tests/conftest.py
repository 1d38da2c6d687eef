"""Pytest configuration and shared fixtures."""

import pytest

from paidsearch_recommender.core.config import Settings, get_settings
from paidsearch_recommender.data_providers.memory import InMemoryRepository
from tests.helpers.analysis_helpers import create_test_campaign, make_records


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Make every test read settings from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings():
    """Default settings."""
    return Settings()


@pytest.fixture
def campaign():
    """Campaign with a budget, target CPA and Target CPA bidding."""
    return create_test_campaign()


@pytest.fixture
def stable_records():
    """Thirty days of identical performance."""
    return make_records([100.0] * 30, conversions=5.0, conversion_value_per_conversion=40.0)


@pytest.fixture
def memory_repository(campaign, stable_records):
    """In-memory repository holding one stable campaign."""
    repository = InMemoryRepository()
    repository.add_campaign(campaign, metrics=stable_records)
    return repository
