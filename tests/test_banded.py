# tests/test_banded.py
"""
Tests for the HP penalty matrix and banded solver.

This module checks that the five stored diagonals equal ``I + lambda * D'D``
for the second difference operator ``D``, that the Numba and NumPy assembly
paths agree, that the band layouts handed to SciPy are consistent, and that
the solver reports bad input the way the rest of the package does.
"""

import numpy as np
import pytest
from hypothesis import given, settings, strategies as st
from numpy.testing import assert_allclose, assert_array_equal
from scipy import linalg

from macrotransforms.core.exceptions import (
    DimensionMismatchError, NumericWarning, ParameterError, SeriesTooShortError
)
from macrotransforms.models.time_series._banded import (
    MIN_PENALTY_SIZE, PenaltyMatrix, build_penalty_matrix, solve_penalty_system
)
from macrotransforms.models.time_series._numba_core import (
    BAND_OFFSETS, defined_bounds, hp_penalty_bands, hp_penalty_bands_numpy
)


def dense_penalty(m: int, lambda_: float) -> np.ndarray:
    """Reference ``I + lambda * D'D`` built from a dense second difference operator."""
    D = np.diff(np.eye(m), n=2, axis=0)
    return np.eye(m) + lambda_ * D.T @ D


class TestPenaltyMatrix:
    """Tests for the banded penalty matrix."""

    @pytest.mark.parametrize("m", [5, 6, 7, 10, 25])
    @pytest.mark.parametrize("lambda_", [0.0, 1.0, 1600.0])
    def test_matches_dense_definition(self, m, lambda_):
        """Test that the bands reproduce I + lambda * D'D exactly."""
        matrix = build_penalty_matrix(m, lambda_)
        assert_allclose(matrix.to_dense(), dense_penalty(m, lambda_), rtol=0, atol=1e-9)

    def test_interior_stencil(self):
        """Test the stencil on an interior row."""
        lam = 1600.0
        matrix = build_penalty_matrix(10, lam)
        row = [matrix.band(offset)[5] for offset in BAND_OFFSETS]

        assert row == [lam, -4 * lam, 6 * lam + 1, -4 * lam, lam]

    def test_boundary_rows(self):
        """Test the corrected first, second, second-to-last and last rows."""
        lam = 2.0
        matrix = build_penalty_matrix(8, lam)
        dense = matrix.to_dense()

        assert_array_equal(dense[0, :3], [1 + lam, -2 * lam, lam])
        assert_array_equal(dense[1, :4], [-2 * lam, 1 + 5 * lam, -4 * lam, lam])
        assert_array_equal(dense[-2, -4:], [lam, -4 * lam, 1 + 5 * lam, -2 * lam])
        assert_array_equal(dense[-1, -3:], [lam, -2 * lam, 1 + lam])

    def test_out_of_range_entries_are_zero(self):
        """Test that band entries outside the matrix are zero."""
        m = 9
        matrix = build_penalty_matrix(m, 1600.0)

        assert_array_equal(matrix.sub2[:2], 0.0)
        assert matrix.sub1[0] == 0.0
        assert matrix.super1[m - 1] == 0.0
        assert_array_equal(matrix.super2[m - 2:], 0.0)

    def test_attributes(self):
        """Test stored size, smoothing parameter and band shapes."""
        matrix = build_penalty_matrix(12, 100)

        assert isinstance(matrix, PenaltyMatrix)
        assert matrix.size == 12
        assert matrix.lambda_ == 100.0
        assert matrix.bands.shape == (5, 12)
        assert all(len(matrix.band(offset)) == 12 for offset in BAND_OFFSETS)

    def test_symmetric(self):
        """Test that every sub-diagonal mirrors its super-diagonal."""
        matrix = build_penalty_matrix(30, 14400.0)
        dense = matrix.to_dense()

        assert matrix.is_symmetric()
        assert_array_equal(dense, dense.T)

    def test_bands_are_read_only(self):
        """Test that the stored diagonals cannot be modified."""
        matrix = build_penalty_matrix(10, 1600.0)

        with pytest.raises(ValueError):
            matrix.main[0] = 0.0
        with pytest.raises(ValueError):
            matrix.super2[3] = 0.0

    def test_invalid_band_offset(self):
        """Test that only offsets -2..2 are available."""
        matrix = build_penalty_matrix(10, 1600.0)
        with pytest.raises(ParameterError):
            matrix.band(3)

    @pytest.mark.parametrize("m", [0, 1, 4])
    def test_too_small(self, m):
        """Test that matrices smaller than the stencil are rejected."""
        with pytest.raises(SeriesTooShortError) as exc_info:
            build_penalty_matrix(m, 1600.0)
        assert exc_info.value.min_length == MIN_PENALTY_SIZE

    def test_band_layouts_match_dense(self):
        """Test that the SciPy band layouts describe the same matrix."""
        m = 11
        matrix = build_penalty_matrix(m, 3.0)
        dense = matrix.to_dense()

        upper = matrix.to_upper_banded()
        general = matrix.to_banded()
        for i in range(m):
            for j in range(max(0, i - 2), min(m, i + 3)):
                assert general[2 + i - j, j] == dense[i, j]
                if j >= i:
                    assert upper[2 + i - j, j] == dense[i, j]

    def test_sparse_format(self):
        """Test the sparse representation."""
        sparse_matrix = build_penalty_matrix(20, 1600.0).to_sparse()

        assert sparse_matrix.format == "csc"
        assert sparse_matrix.nnz == 5 * 20 - 6


class TestBandAssembly:
    """Tests for the Numba and NumPy band assembly kernels."""

    @given(m=st.integers(min_value=5, max_value=60),
           lam=st.floats(min_value=0.0, max_value=1e6, allow_nan=False))
    @settings(max_examples=30, deadline=None)
    def test_numba_matches_numpy(self, m, lam):
        """Test that both assembly paths produce identical bands."""
        assert_array_equal(hp_penalty_bands(m, lam), hp_penalty_bands_numpy(m, lam))

    def test_use_numba_flag(self):
        """Test that the assembly path can be chosen per call."""
        jit_matrix = build_penalty_matrix(15, 1600.0, use_numba=True)
        np_matrix = build_penalty_matrix(15, 1600.0, use_numba=False)
        assert_array_equal(jit_matrix.bands, np_matrix.bands)

    @pytest.mark.parametrize("y, expected", [
        ([1.0, 2.0, 3.0], (0, 2)),
        ([np.nan, 2.0, np.nan, 4.0, np.nan], (1, 3)),
        ([np.nan, np.nan, 5.0], (2, 2)),
        ([np.nan, np.nan], (-1, -1)),
        ([], (-1, -1)),
    ])
    def test_defined_bounds(self, y, expected):
        """Test the boundary scan for first and last defined positions."""
        first, last = defined_bounds(np.array(y, dtype=np.float64))
        assert (first, last) == expected


class TestPenaltySolver:
    """Tests for the banded solver."""

    def test_cholesky_matches_dense_solve(self, trend_cycle_series):
        """Test the banded Cholesky solution against a dense solve."""
        m = len(trend_cycle_series)
        matrix = build_penalty_matrix(m, 1600.0)

        trend = solve_penalty_system(matrix, trend_cycle_series, method="cholesky")
        expected = linalg.solve(dense_penalty(m, 1600.0), trend_cycle_series, assume_a="pos")

        assert_allclose(trend, expected, rtol=1e-9)

    def test_lu_matches_cholesky(self, trend_cycle_series):
        """Test that both solvers agree."""
        matrix = build_penalty_matrix(len(trend_cycle_series), 1600.0)

        chol = solve_penalty_system(matrix, trend_cycle_series, method="cholesky")
        lu = solve_penalty_system(matrix, trend_cycle_series, method="lu")

        assert_allclose(chol, lu, rtol=1e-10)

    def test_unknown_method(self, golden_series):
        """Test that an unknown method is rejected."""
        matrix = build_penalty_matrix(len(golden_series), 1600.0)
        with pytest.raises(ParameterError):
            solve_penalty_system(matrix, golden_series, method="qr")

    def test_length_mismatch(self, golden_series):
        """Test that the right-hand side must match the matrix size."""
        matrix = build_penalty_matrix(8, 1600.0)
        with pytest.raises(DimensionMismatchError) as exc_info:
            solve_penalty_system(matrix, golden_series)

        assert exc_info.value.expected_length == 8
        assert exc_info.value.actual_length == 10

    def test_missing_values_give_nan(self, golden_series):
        """Test that NaN in the right-hand side makes the solution NaN."""
        y = golden_series.copy()
        y[3] = np.nan
        matrix = build_penalty_matrix(len(y), 1600.0)

        with pytest.warns(NumericWarning) as record:
            trend = solve_penalty_system(matrix, y)

        assert np.isnan(trend).all()
        assert record[0].message.value == 1
