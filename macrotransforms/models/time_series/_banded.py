"""
Banded penalty matrix and solver for the Hodrick-Prescott filter.

The HP trend solves ``(I + lambda * D'D) trend = y`` where ``D`` is the second
difference operator. The system matrix is symmetric, positive definite and
pentadiagonal, so it is stored as five row-indexed diagonals and handed
directly to LAPACK's banded Cholesky (or LU) routines through SciPy, without
ever forming a dense ``m x m`` matrix.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
from scipy import linalg, sparse

from macrotransforms.core.config import get_config
from macrotransforms.core.exceptions import (
    DimensionMismatchError, NumericError, ParameterError, SeriesTooShortError,
    warn_numeric
)
from macrotransforms.core.types import BandArray, Matrix, SolverMethod, Vector
from macrotransforms.models.time_series._numba_core import (
    BAND_OFFSETS, hp_penalty_bands, hp_penalty_bands_numpy
)

# Set up module-level logger
logger = logging.getLogger("macrotransforms.models.time_series._banded")

# The stencil needs two neighbours on each side of the interior rows
MIN_PENALTY_SIZE = 5


@dataclass(frozen=True)
class PenaltyMatrix:
    """Symmetric pentadiagonal HP penalty matrix ``I + lambda * D'D``.

    Each band is a read-only array of length ``size`` indexed by matrix row,
    so ``super1[r]`` is ``A[r, r + 1]`` and ``sub2[r]`` is ``A[r, r - 2]``.
    Entries that would fall outside the matrix are zero.

    Attributes:
        size: Matrix dimension
        lambda_: Smoothing parameter the matrix was built with
        sub2: Diagonal at offset -2
        sub1: Diagonal at offset -1
        main: Main diagonal
        super1: Diagonal at offset +1
        super2: Diagonal at offset +2
    """

    size: int
    lambda_: float
    sub2: BandArray
    sub1: BandArray
    main: BandArray
    super1: BandArray
    super2: BandArray

    @property
    def bands(self) -> BandArray:
        """All five diagonals stacked in offset order (-2, -1, 0, +1, +2)."""
        return np.vstack([self.sub2, self.sub1, self.main, self.super1, self.super2])

    def band(self, offset: int) -> BandArray:
        """Return the diagonal at ``offset``, one of -2, -1, 0, 1, 2."""
        if offset not in BAND_OFFSETS:
            raise ParameterError(
                f"Band offset must be one of {BAND_OFFSETS}, got {offset}",
                param_name="offset",
                param_value=offset
            )
        return (self.sub2, self.sub1, self.main, self.super1, self.super2)[offset + 2]

    def to_upper_banded(self) -> Matrix:
        """Upper symmetric band storage as expected by ``scipy.linalg.solveh_banded``.

        Row ``2`` holds the main diagonal and rows ``1`` and ``0`` the first and
        second super-diagonals, right-aligned: ``ab[2 + i - j, j] = A[i, j]``.
        """
        m = self.size
        ab = np.zeros((3, m))
        ab[0, 2:] = self.super2[:m - 2]
        ab[1, 1:] = self.super1[:m - 1]
        ab[2, :] = self.main
        return ab

    def to_banded(self) -> Matrix:
        """General ``(2, 2)`` band storage as expected by ``scipy.linalg.solve_banded``."""
        m = self.size
        ab = np.zeros((5, m))
        ab[0, 2:] = self.super2[:m - 2]
        ab[1, 1:] = self.super1[:m - 1]
        ab[2, :] = self.main
        ab[3, :m - 1] = self.sub1[1:]
        ab[4, :m - 2] = self.sub2[2:]
        return ab

    def to_sparse(self) -> sparse.csc_matrix:
        """Sparse CSC representation of the matrix."""
        m = self.size
        diagonals = [
            self.sub2[2:], self.sub1[1:], self.main,
            self.super1[:m - 1], self.super2[:m - 2]
        ]
        return sparse.diags(diagonals, list(BAND_OFFSETS), shape=(m, m), format='csc')

    def to_dense(self) -> Matrix:
        """Dense ``size x size`` array; intended for inspection and testing."""
        return self.to_sparse().toarray()

    def is_symmetric(self, tol: Optional[float] = None) -> bool:
        """Check that every sub-diagonal mirrors its super-diagonal."""
        if tol is None:
            tol = get_config("numerical", "symmetry_tolerance", 1e-12)
        m = self.size
        return bool(
            np.allclose(self.sub1[1:], self.super1[:m - 1], rtol=0.0, atol=tol)
            and np.allclose(self.sub2[2:], self.super2[:m - 2], rtol=0.0, atol=tol)
        )


def build_penalty_matrix(m: int, lambda_: float, use_numba: Optional[bool] = None) -> PenaltyMatrix:
    """
    Build the HP penalty matrix for a series of length ``m``.

    Interior rows carry the stencil ``(lambda, -4 lambda, 6 lambda + 1, -4 lambda,
    lambda)``; the first two and last two rows use the one-sided corrections
    that make the matrix equal ``I + lambda * D'D`` exactly.

    Args:
        m: Length of the (trimmed) series
        lambda_: Smoothing parameter (validated by the caller)
        use_numba: Use the JIT-compiled kernel; defaults to ``core.enable_numba``

    Returns:
        PenaltyMatrix: The immutable banded matrix

    Raises:
        SeriesTooShortError: If ``m`` is smaller than 5
    """
    if m < MIN_PENALTY_SIZE:
        raise SeriesTooShortError(
            f"HP filter requires at least {MIN_PENALTY_SIZE} observations between "
            f"leading and trailing missing values, got {m}",
            length=m,
            min_length=MIN_PENALTY_SIZE,
            data_name="series"
        )

    if use_numba is None:
        use_numba = get_config("core", "enable_numba", True)

    if use_numba:
        bands = hp_penalty_bands(m, float(lambda_))
    else:
        bands = hp_penalty_bands_numpy(m, float(lambda_))

    bands.setflags(write=False)

    return PenaltyMatrix(
        size=m,
        lambda_=float(lambda_),
        sub2=bands[0],
        sub1=bands[1],
        main=bands[2],
        super1=bands[3],
        super2=bands[4],
    )


def solve_penalty_system(
    matrix: PenaltyMatrix,
    rhs: Vector,
    method: Optional[SolverMethod] = None
) -> Vector:
    """
    Solve ``matrix @ trend = rhs`` for the HP trend.

    Missing values inside ``rhs`` are not an error: every entry of the
    solution depends on every entry of the right-hand side, so a single NaN
    makes the whole trend NaN. That result is returned as is, with a
    ``NumericWarning`` when ``filters.warn_on_contamination`` is enabled.

    Args:
        matrix: Penalty matrix from ``build_penalty_matrix``
        rhs: Trimmed series, same length as the matrix
        method: "cholesky" or "lu"; defaults to ``numerical.hp_solver``

    Returns:
        np.ndarray: Trend vector

    Raises:
        ParameterError: If the method is unknown
        NumericError: If the factorization fails
    """
    if method is None:
        method = get_config("numerical", "hp_solver", "cholesky")
    if method not in ("cholesky", "lu"):
        raise ParameterError(
            f"Unknown HP solver method: {method}",
            param_name="method",
            param_value=method,
            constraint="'cholesky' or 'lu'"
        )

    rhs = np.asarray(rhs, dtype=np.float64)
    if len(rhs) != matrix.size:
        raise DimensionMismatchError(
            f"Right-hand side has length {len(rhs)}, expected {matrix.size}",
            array_name="rhs",
            expected_length=matrix.size,
            actual_length=len(rhs)
        )

    n_missing = int(np.isnan(rhs).sum())
    if n_missing:
        message = (
            f"Series contains {n_missing} missing value(s) between its first and last "
            f"observation; the filtered output is NaN over the whole range"
        )
        logger.warning(message)
        if get_config("filters", "warn_on_contamination", True):
            warn_numeric(
                message,
                operation="HP filter",
                issue="interior missing values",
                value=n_missing
            )
        return np.full(matrix.size, np.nan)

    logger.debug(f"Solving {matrix.size}x{matrix.size} HP penalty system with {method}")
    try:
        if method == "cholesky":
            trend = linalg.solveh_banded(matrix.to_upper_banded(), rhs, lower=False)
        else:
            trend = linalg.solve_banded((2, 2), matrix.to_banded(), rhs)
    except (linalg.LinAlgError, ValueError) as e:
        raise NumericError(
            f"HP penalty system could not be solved: {e}",
            operation="HP penalty solve",
            error_type="factorization",
            details=str(e)
        ) from e

    return trend
