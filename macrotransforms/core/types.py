# macrotransforms/core/types.py

"""
Core type annotations for macro-transforms.

This module defines the type aliases shared across the package so that the
filter, the collaborating transforms and the configuration layer agree on what
a series, a table of observations and a configuration value look like.
"""

from typing import Literal, Sequence, Tuple, Union

import numpy as np
import pandas as pd

# NumPy array type aliases
Vector = np.ndarray  # 1D array
Matrix = np.ndarray  # 2D array

# Series and table inputs
SeriesLike = Union[np.ndarray, pd.Series, Sequence[float]]
TimeSeriesData = Union[np.ndarray, pd.Series]  # Single time series
ScalarOrSeries = Union[float, np.ndarray, pd.Series, pd.DataFrame]

# Column identifiers in an observation table
Mnemonic = str

# Banded storage of the HP penalty matrix: five row-indexed diagonals
BandArray = np.ndarray

# Trend and cycle pair returned by the functional HP filter
TrendCycle = Tuple[TimeSeriesData, TimeSeriesData]

# Solver selection for the penalty system
SolverMethod = Literal["cholesky", "lu"]

# Sampling frequencies with conventional HP smoothing parameters
Frequency = Literal["annual", "quarterly", "monthly"]

# Configuration types
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
