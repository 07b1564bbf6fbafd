"""
Numba-accelerated core functions for the Hodrick-Prescott filter.

This module provides the JIT-compiled loops behind the HP filter: the boundary
scan that locates the defined interior of a series and the assembly of the five
diagonals of the HP penalty matrix. Both are plain loops over a float64 vector,
which Numba compiles to tight machine code.
"""

import logging
from typing import Tuple

import numpy as np
from numba import jit

# Set up module-level logger
logger = logging.getLogger("macrotransforms.models.time_series._numba_core")

# Row layout of the band array: offsets -2, -1, 0, +1, +2
BAND_OFFSETS = (-2, -1, 0, 1, 2)


@jit(nopython=True, cache=True)
def defined_bounds(y: np.ndarray) -> Tuple[int, int]:
    """
    Locate the first and last non-NaN positions of a series.

    Args:
        y: Series to scan

    Returns:
        Tuple[int, int]: Zero-based first and last defined index, or (-1, -1)
        when the series holds no defined value
    """
    n = len(y)
    first = 0
    while first < n and np.isnan(y[first]):
        first += 1
    if first == n:
        return -1, -1

    last = n - 1
    while np.isnan(y[last]):
        last -= 1
    return first, last


@jit(nopython=True, cache=True)
def hp_penalty_bands(m: int, lam: float) -> np.ndarray:
    """
    Assemble the diagonals of the HP penalty matrix ``I + lam * D'D``.

    Row ``k`` of the result holds the diagonal at offset ``BAND_OFFSETS[k]``,
    indexed by matrix row: ``bands[k, r] = A[r, r + offset]``. Entries whose
    column falls outside the matrix are zero.

    Args:
        m: Matrix dimension (at least 5)
        lam: Smoothing parameter

    Returns:
        np.ndarray: Array of shape (5, m)
    """
    bands = np.zeros((5, m))

    for r in range(2, m - 2):
        bands[0, r] = lam
        bands[1, r] = -4.0 * lam
        bands[2, r] = 6.0 * lam + 1.0
        bands[3, r] = -4.0 * lam
        bands[4, r] = lam

    # First row
    bands[2, 0] = 1.0 + lam
    bands[3, 0] = -2.0 * lam
    bands[4, 0] = lam

    # Second row
    bands[1, 1] = -2.0 * lam
    bands[2, 1] = 1.0 + 5.0 * lam
    bands[3, 1] = -4.0 * lam
    bands[4, 1] = lam

    # Second to last row
    bands[0, m - 2] = lam
    bands[1, m - 2] = -4.0 * lam
    bands[2, m - 2] = 1.0 + 5.0 * lam
    bands[3, m - 2] = -2.0 * lam

    # Last row
    bands[0, m - 1] = lam
    bands[1, m - 1] = -2.0 * lam
    bands[2, m - 1] = 1.0 + lam

    return bands


def hp_penalty_bands_numpy(m: int, lam: float) -> np.ndarray:
    """
    Vectorized NumPy assembly of the HP penalty diagonals.

    Produces exactly the same array as ``hp_penalty_bands``; used when Numba
    acceleration is switched off in the configuration.
    """
    bands = np.zeros((5, m))
    bands[:, 2:m - 2] = np.array(
        [lam, -4.0 * lam, 6.0 * lam + 1.0, -4.0 * lam, lam]
    )[:, np.newaxis]

    bands[2:, 0] = [1.0 + lam, -2.0 * lam, lam]
    bands[1:, 1] = [-2.0 * lam, 1.0 + 5.0 * lam, -4.0 * lam, lam]
    bands[:4, m - 2] = [lam, -4.0 * lam, 1.0 + 5.0 * lam, -2.0 * lam]
    bands[:3, m - 1] = [lam, -2.0 * lam, 1.0 + lam]
    return bands
