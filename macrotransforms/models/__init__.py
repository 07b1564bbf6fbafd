"""
macro-transforms Models Module

This module groups the filtering models. The time series submodule provides the
Hodrick-Prescott filter in functional and object-oriented form.
"""

import logging

# Set up module-level logger
logger = logging.getLogger("macrotransforms.models")

from . import time_series

__all__ = ['time_series']
