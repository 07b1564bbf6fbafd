"""
macro-transforms Core Module

This module provides the foundations shared by the filters and transforms:
type definitions, input validation, parameter containers, the base filter
class, the exception hierarchy and configuration management.

Key components:
- Base class for stateful filters
- Parameter containers with validation
- Custom type definitions and annotations
- Exception hierarchy for error handling
- Validation utilities for input checking
- Configuration management
"""

import logging

# Set up module-level logger
logger = logging.getLogger("macrotransforms.core")

from .base import ModelBase
from .parameters import HPFilterParameters, ParameterBase
from .exceptions import (
    ConfigurationError,
    DataError,
    DimensionError,
    DimensionMismatchError,
    EmptySeriesError,
    MacroTransformsError,
    MacroTransformsWarning,
    NotConvertibleToSeriesError,
    NotFittedError,
    NumericError,
    NumericWarning,
    ParameterError,
    SeriesTooShortError,
)
from .validation import (
    validate_columns,
    validate_input_series,
    validate_matching_length,
    validate_series,
    validate_smoothing_parameter,
)
from .config import (
    get_config,
    get_config_manager,
    initialize_config,
    reset_config,
    save_config,
    set_config,
)

__all__ = [
    'ModelBase',
    'ParameterBase',
    'HPFilterParameters',
    'MacroTransformsError',
    'ParameterError',
    'DimensionError',
    'DimensionMismatchError',
    'DataError',
    'NotConvertibleToSeriesError',
    'EmptySeriesError',
    'SeriesTooShortError',
    'NumericError',
    'ConfigurationError',
    'NotFittedError',
    'MacroTransformsWarning',
    'NumericWarning',
    'validate_series',
    'validate_smoothing_parameter',
    'validate_matching_length',
    'validate_columns',
    'validate_input_series',
    'initialize_config',
    'get_config',
    'set_config',
    'reset_config',
    'save_config',
    'get_config_manager',
]

logger.debug("macro-transforms core module initialized")
