"""Impact estimation, historical validation and simulation."""

from paidsearch_recommender.impact.estimator import ImpactEstimator
from paidsearch_recommender.impact.history import validate_against_history
from paidsearch_recommender.impact.simulation import simulate_impact

__all__ = ["ImpactEstimator", "simulate_impact", "validate_against_history"]
