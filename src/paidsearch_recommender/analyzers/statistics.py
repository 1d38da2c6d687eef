"""Numeric building blocks for the statistical analyzer.

Every function here is pure and tolerates short or empty series: callers get
neutral values (zero slope, p=1, empty z-scores) instead of exceptions.
"""

import logging
import math
from collections.abc import Sequence
from typing import NamedTuple

import numpy as np
from scipy import stats
from sklearn.linear_model import LinearRegression

logger = logging.getLogger(__name__)

# z multipliers for 95% intervals: normal for large samples, t(30) otherwise
LARGE_SAMPLE_Z = 1.96
SMALL_SAMPLE_Z = 2.042
LARGE_SAMPLE_THRESHOLD = 30


class WelchResult(NamedTuple):
    """Outcome of Welch's unequal-variance t-test."""

    t_statistic: float
    degrees_of_freedom: float
    p_value: float


class LinearFit(NamedTuple):
    """Ordinary least squares fit of value on day index."""

    slope: float
    intercept: float
    r_squared: float


class MeanInterval(NamedTuple):
    """Mean with its standard error and 95% margin."""

    mean: float
    standard_error: float
    margin: float
    sample_size: int


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean, 0 for an empty series."""
    return float(np.mean(values)) if len(values) else 0.0


def sample_std(values: Sequence[float]) -> float:
    """Sample standard deviation (n-1), 0 for fewer than two points."""
    return float(np.std(values, ddof=1)) if len(values) > 1 else 0.0


def population_std(values: Sequence[float]) -> float:
    """Population standard deviation (n), 0 for an empty series."""
    return float(np.std(values)) if len(values) else 0.0


def welch_t_test(
    historical: Sequence[float], recent: Sequence[float]
) -> WelchResult | None:
    """Two-tailed Welch's t-test of recent against historical values.

    Returns None when either sample has fewer than two points.
    """
    if len(historical) < 2 or len(recent) < 2:
        return None

    hist = np.asarray(historical, dtype=float)
    rec = np.asarray(recent, dtype=float)
    var_hist = hist.var(ddof=1) / len(hist)
    var_rec = rec.var(ddof=1) / len(rec)
    pooled = var_hist + var_rec
    mean_diff = float(rec.mean() - hist.mean())

    if pooled == 0:
        # Both halves are constant: the difference is exact or absent
        if mean_diff == 0:
            return WelchResult(0.0, 0.0, 1.0)
        return WelchResult(math.copysign(math.inf, mean_diff), 0.0, 0.0)

    t_statistic = mean_diff / math.sqrt(pooled)
    df = pooled**2 / (
        var_hist**2 / (len(hist) - 1) + var_rec**2 / (len(rec) - 1)
    )
    p_value = float(2 * stats.t.sf(abs(t_statistic), df))
    return WelchResult(float(t_statistic), float(df), min(1.0, max(0.0, p_value)))


def linear_trend(values: Sequence[float]) -> LinearFit:
    """Fit value against day index 0..n-1 with ordinary least squares.

    R² is reported as 0 for a constant series, where it is undefined.
    """
    y = np.asarray(values, dtype=float)
    if len(y) < 2:
        return LinearFit(0.0, float(y[0]) if len(y) else 0.0, 0.0)

    X = np.arange(len(y)).reshape(-1, 1)
    model = LinearRegression()
    model.fit(X, y)

    if np.ptp(y) == 0:
        r_squared = 0.0
    else:
        r_squared = float(min(1.0, max(0.0, model.score(X, y))))

    return LinearFit(float(model.coef_[0]), float(model.intercept_), r_squared)


def z_scores(values: Sequence[float]) -> list[float]:
    """Population z-score of every point; all zeros when the series is constant."""
    if not len(values):
        return []
    arr = np.asarray(values, dtype=float)
    std = arr.std()
    if std == 0:
        return [0.0] * len(arr)
    return [float(z) for z in (arr - arr.mean()) / std]


def mean_interval(values: Sequence[float]) -> MeanInterval:
    """Mean with a 95% margin using the sample standard deviation."""
    n = len(values)
    if n == 0:
        return MeanInterval(0.0, 0.0, 0.0, 0)
    z = LARGE_SAMPLE_Z if n > LARGE_SAMPLE_THRESHOLD else SMALL_SAMPLE_Z
    standard_error = sample_std(values) / math.sqrt(n)
    return MeanInterval(mean(values), standard_error, z * standard_error, n)
