'''
Pytest configuration and fixtures for the macro-transforms test suite.

This module provides common fixtures used across the test suite: seeded random
number generators, representative macroeconomic series, observation tables and
a configuration reset that keeps runtime changes from leaking between tests.
'''

from typing import Dict

import numpy as np
import pandas as pd
import pytest
from hypothesis import HealthCheck, settings, strategies as st

from macrotransforms.core.config import reset_config


# Property tests share the autouse configuration reset below; the first call
# of a JIT kernel includes compilation time
settings.register_profile(
    "macrotransforms",
    suppress_health_check=[HealthCheck.function_scoped_fixture],
    deadline=None
)
settings.load_profile("macrotransforms")


# ---- Golden Scenario ----

GOLDEN_SERIES = np.array([1.0, 2.0, 3.0, 4.0, 5.0, 4.0, 3.0, 2.0, 1.0, 2.0])
GOLDEN_LAMBDA = 1600.0
GOLDEN_TREND = np.array([
    2.869457341646653, 2.839905830779172, 2.809185909073162, 2.775604224545858,
    2.737586684021321, 2.694324441683275, 2.646422660037927, 2.595302548815435,
    2.542606303583435, 2.489604055816549
])
GOLDEN_CYCLE = GOLDEN_SERIES - GOLDEN_TREND


# ---- Configuration Isolation ----

@pytest.fixture(autouse=True)
def clean_config():
    """Restore default configuration after every test."""
    yield
    reset_config()


# ---- Basic Data Generation Fixtures ----

@pytest.fixture
def rng() -> np.random.Generator:
    """Provide a seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def sample_size() -> int:
    """Default sample size for test data."""
    return 200


@pytest.fixture
def golden_series() -> np.ndarray:
    """The ten-observation series with a stored HP baseline at lambda=1600."""
    return GOLDEN_SERIES.copy()


@pytest.fixture
def trend_cycle_series(rng: np.random.Generator, sample_size: int) -> np.ndarray:
    """Generate a series with a linear trend, a business cycle and noise."""
    t = np.arange(sample_size)
    trend = 100.0 + 0.5 * t
    cycle = 2.0 * np.sin(2 * np.pi * t / 32)
    noise = rng.standard_normal(sample_size) * 0.3
    return trend + cycle + noise


@pytest.fixture
def quarterly_series(trend_cycle_series: np.ndarray) -> pd.Series:
    """Trend/cycle series as a Pandas Series with a quarterly DatetimeIndex."""
    dates = pd.date_range(start='1960-01-01', periods=len(trend_cycle_series), freq='QS')
    return pd.Series(trend_cycle_series, index=dates, name="GDP")


@pytest.fixture
def ragged_frame(trend_cycle_series: np.ndarray) -> pd.DataFrame:
    """Observation table whose columns start and end at different dates."""
    n = len(trend_cycle_series)
    dates = pd.date_range(start='1960-01-01', periods=n, freq='QS')

    late_start = trend_cycle_series * 0.5
    late_start[:8] = np.nan
    early_end = np.log(trend_cycle_series)
    early_end[-5:] = np.nan

    return pd.DataFrame(
        {"GDP": trend_cycle_series, "PCE": late_start, "LOGGDP": early_end},
        index=dates
    )


@pytest.fixture
def macro_frame() -> pd.DataFrame:
    """Small observation table with nominal output, a deflator and population."""
    dates = pd.date_range(start='2000-01-01', periods=4, freq='QS')
    return pd.DataFrame(
        {
            "GDP": [200.0, 210.0, 220.5, 231.0],
            "GDPCTPI": [1.0, 1.05, 1.05, 1.1],
            "CNP16OV": [100.0, 101.0, 102.0, 103.0],
            "filtered_population_growth": [0.0025, 0.0025, 0.0026, 0.0026],
            "unfiltered_population_growth": [0.0030, 0.0020, 0.0026, 0.0031],
        },
        index=dates
    )


# ---- Hypothesis Strategies ----

def finite_series(min_size: int = 5, max_size: int = 60) -> st.SearchStrategy:
    """Strategy producing lists of moderate finite floats."""
    return st.lists(
        st.floats(min_value=-1e3, max_value=1e3, allow_nan=False, allow_infinity=False),
        min_size=min_size,
        max_size=max_size
    )


def smoothing_parameters() -> st.SearchStrategy:
    """Strategy producing non-negative smoothing parameters across typical scales."""
    return st.sampled_from([0.0, 1.0, 10.0, 100.0, 1600.0, 14400.0, 1e5])


def padding_counts() -> Dict[str, st.SearchStrategy]:
    """Strategies for the number of leading and trailing missing values."""
    return {
        "n_leading": st.integers(min_value=0, max_value=6),
        "n_trailing": st.integers(min_value=0, max_value=6),
    }
