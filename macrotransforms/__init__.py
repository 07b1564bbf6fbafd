# macrotransforms/__init__.py
"""
macro-transforms - Hodrick-Prescott filtering for macroeconomic data

This package provides the trend/cycle decomposition and the data transforms
used to prepare macroeconomic observables for estimation and to report model
output in familiar units.

The package provides tools for:
- Hodrick-Prescott filtering of series with missing boundary observations
- Column-wise filtering of observation tables, synchronously or asynchronously
- Frequency conversions, deflating and per-capita transforms
- Reverse transforms from log growth and log levels to annualized percent changes

This module serves as the main entry point for the package.
"""

import logging

from .version import __version__, __title__, __description__, __license__

# Set up package-wide logger; handlers are attached by the configuration manager
logger = logging.getLogger("macrotransforms")
logger.addHandler(logging.NullHandler())

from . import core
from . import models
from . import utils

from .core.config import get_config, reset_config, set_config
from .core.exceptions import (
    DataError,
    DimensionMismatchError,
    EmptySeriesError,
    MacroTransformsError,
    NotConvertibleToSeriesError,
    NumericWarning,
    ParameterError,
    SeriesTooShortError,
)
from .models.time_series.filters import (
    FilterResult,
    HPFilter,
    hp_filter,
    hpfilter,
    hpfilter_frame,
    hpfilter_frame_async,
    lambda_for_frequency,
    reassemble,
    trim_missing_boundaries,
)
from .utils.data_transformations import (
    annualtoquarter,
    difflog,
    hpadjust,
    loglevelto4qpct_annualized,
    loglevelto4qpct_annualized_percapita,
    logtopct_annualized,
    logtopct_annualized_percapita,
    nominal_to_real,
    oneqtrpctchange,
    percapita,
    quartertoannual,
    quartertoannualpercent,
)

__all__ = [
    # Version
    '__version__',

    # Filters
    'hpfilter',
    'hp_filter',
    'HPFilter',
    'FilterResult',
    'hpfilter_frame',
    'hpfilter_frame_async',
    'lambda_for_frequency',
    'trim_missing_boundaries',
    'reassemble',

    # Transforms
    'annualtoquarter',
    'quartertoannual',
    'quartertoannualpercent',
    'nominal_to_real',
    'percapita',
    'difflog',
    'oneqtrpctchange',
    'hpadjust',
    'logtopct_annualized_percapita',
    'logtopct_annualized',
    'loglevelto4qpct_annualized',
    'loglevelto4qpct_annualized_percapita',

    # Configuration
    'get_config',
    'set_config',
    'reset_config',

    # Errors
    'MacroTransformsError',
    'ParameterError',
    'DimensionMismatchError',
    'DataError',
    'NotConvertibleToSeriesError',
    'EmptySeriesError',
    'SeriesTooShortError',
    'NumericWarning',
]

logger.debug(f"macro-transforms v{__version__} imported")
