"""
macro-transforms Time Series Module

This module provides the Hodrick-Prescott trend/cycle decomposition. Series are
trimmed of leading and trailing missing values, filtered with a banded solver
for the pentadiagonal penalty system, and padded back to their original length.

Key components:
- hpfilter: Functional filter returning (trend, cycle)
- HPFilter: Stateful filter object returning a FilterResult
- hpfilter_frame / hpfilter_frame_async: Column-wise filtering of DataFrames
- build_penalty_matrix / solve_penalty_system: Banded penalty system
"""

import logging

# Set up module-level logger
logger = logging.getLogger("macrotransforms.models.time_series")

from ._banded import PenaltyMatrix, build_penalty_matrix, solve_penalty_system
from .filters import (
    FilterBase,
    FilterResult,
    HPFilter,
    TrimmedSeries,
    hp_filter,
    hpfilter,
    hpfilter_frame,
    hpfilter_frame_async,
    lambda_for_frequency,
    reassemble,
    trim_missing_boundaries,
)

__all__ = [
    'PenaltyMatrix',
    'build_penalty_matrix',
    'solve_penalty_system',
    'FilterBase',
    'FilterResult',
    'HPFilter',
    'TrimmedSeries',
    'hp_filter',
    'hpfilter',
    'hpfilter_frame',
    'hpfilter_frame_async',
    'lambda_for_frequency',
    'reassemble',
    'trim_missing_boundaries',
]
