"""
macro-transforms Utilities Module

This module provides the data transformations that accompany the HP filter:
frequency conversions, deflating, per-capita adjustments and reverse
transforms from model units to annualized percent changes.
"""

import logging

# Set up module-level logger
logger = logging.getLogger("macrotransforms.utils")

from .data_transformations import (
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
]
