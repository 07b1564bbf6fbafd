# tests/test_data_transformations.py
"""
Tests for the collaborating data transformations.

This module covers the frequency conversions, the DataFrame-based level
transforms (deflating, per-capita, population growth adjustment), log
differencing and the reverse transforms that turn model output, a single path
or a matrix of draws, into annualized percent changes.
"""

import numpy as np
import pandas as pd
import pytest
from hypothesis import given, settings, strategies as st
from numpy.testing import assert_allclose, assert_array_equal
from pandas.testing import assert_index_equal, assert_series_equal

from macrotransforms.core.exceptions import (
    DataError, DimensionError, DimensionMismatchError, NotConvertibleToSeriesError
)
from macrotransforms.utils.data_transformations import (
    annualtoquarter, difflog, hpadjust, loglevelto4qpct_annualized,
    loglevelto4qpct_annualized_percapita, logtopct_annualized,
    logtopct_annualized_percapita, nominal_to_real, oneqtrpctchange, percapita,
    quartertoannual, quartertoannualpercent
)

# Annualized percent change of a 1 percent quarterly log growth rate
ONE_PCT_ANNUALIZED = 100.0 * (np.exp(0.04) - 1.0)


class TestFrequencyConversions:
    """Tests for annual/quarterly conversions."""

    def test_scalars(self):
        """Test the conversions on scalar values."""
        assert annualtoquarter(4.0) == 1.0
        assert quartertoannual(1.0) == 4.0
        assert quartertoannualpercent(1.0) == 400.0

    def test_arrays_and_lists(self):
        """Test that arrays and lists are converted elementwise."""
        assert_allclose(annualtoquarter(np.array([4.0, 8.0])), [1.0, 2.0])
        assert_allclose(quartertoannual([0.5, 1.5]), [2.0, 6.0])
        assert_allclose(quartertoannualpercent([0.01]), [4.0])

    def test_series_keeps_index(self, quarterly_series):
        """Test that a Pandas Series keeps its index."""
        result = quartertoannual(quarterly_series)

        assert isinstance(result, pd.Series)
        assert_index_equal(result.index, quarterly_series.index)
        assert_series_equal(annualtoquarter(result), quarterly_series)

    @given(v=st.floats(min_value=-1e6, max_value=1e6, allow_nan=False))
    @settings(max_examples=30)
    def test_inverse_pair(self, v):
        """Test that quarter-to-annual undoes annual-to-quarter."""
        assert_allclose(quartertoannual(annualtoquarter(v)), v)


class TestLevelTransforms:
    """Tests for the DataFrame-based level transforms."""

    def test_nominal_to_real(self, macro_frame):
        """Test deflating with the default deflator mnemonic."""
        real = nominal_to_real("GDP", macro_frame)

        assert_allclose(real, [200.0, 200.0, 210.0, 210.0])
        assert_index_equal(real.index, macro_frame.index)

    def test_nominal_to_real_custom_deflator(self, macro_frame):
        """Test deflating with an explicit deflator mnemonic."""
        df = macro_frame.rename(columns={"GDPCTPI": "GDPDEF"})
        real = nominal_to_real("GDP", df, deflator_mnemonic="GDPDEF")
        assert_allclose(real, [200.0, 200.0, 210.0, 210.0])

    def test_percapita(self, macro_frame):
        """Test dividing by population."""
        result = percapita("GDP", macro_frame, "CNP16OV")
        assert_allclose(result, macro_frame["GDP"] / macro_frame["CNP16OV"])

    @pytest.mark.parametrize("call", [
        lambda df: nominal_to_real("GDP", df, deflator_mnemonic="PCEPI"),
        lambda df: nominal_to_real("NGDP", df),
        lambda df: percapita("GDP", df, "POP"),
        lambda df: hpadjust(np.zeros(4), df, filtered_mnemonic="filtered"),
    ])
    def test_missing_mnemonic(self, macro_frame, call):
        """Test that a missing column is reported as a data error."""
        with pytest.raises(DataError):
            call(macro_frame)

    def test_requires_dataframe(self):
        """Test that the observation table must be a DataFrame."""
        with pytest.raises(DataError):
            percapita("GDP", {"GDP": [1.0], "POP": [2.0]}, "POP")

    def test_hpadjust(self, macro_frame):
        """Test adding back the unfiltered minus filtered population growth."""
        y = np.array([1.0, 2.0, 3.0, 4.0])
        result = hpadjust(y, macro_frame)

        expected = y + 100.0 * np.array([0.0005, -0.0005, 0.0, 0.0005])
        assert_allclose(result, expected, atol=1e-12)

    def test_hpadjust_series(self, macro_frame):
        """Test that a Series keeps its own index."""
        y = pd.Series([1.0, 2.0, 3.0, 4.0], index=macro_frame.index, name="GDP")
        result = hpadjust(y, macro_frame)

        assert isinstance(result, pd.Series)
        assert result.name == "GDP"
        assert_allclose(result.iloc[0], 1.05)

    def test_hpadjust_length_mismatch(self, macro_frame):
        """Test that a series of the wrong length is rejected."""
        with pytest.raises(DimensionMismatchError):
            hpadjust(np.zeros(3), macro_frame)


class TestDifflog:
    """Tests for log differences and quarterly percent changes."""

    def test_difflog(self):
        """Test log differences with a NaN first element."""
        d = difflog([1.0, np.e, np.e ** 3])

        assert np.isnan(d[0])
        assert_allclose(d[1:], [1.0, 2.0])

    def test_difflog_series(self, quarterly_series):
        """Test that a Series keeps its index."""
        d = difflog(quarterly_series)

        assert isinstance(d, pd.Series)
        assert_index_equal(d.index, quarterly_series.index)
        assert_allclose(d.iloc[1:], np.diff(np.log(quarterly_series.to_numpy())))

    def test_difflog_missing_values(self):
        """Test that None and pd.NA are read as NaN."""
        d = difflog([1.0, None, 2.0, 4.0])
        assert np.isnan(d[:3]).all()
        assert_allclose(d[3], np.log(2.0))

        s = pd.Series([1.0, pd.NA, 2.0, 4.0], dtype="Float64")
        ds = difflog(s)
        assert ds.isna().iloc[:3].all()
        assert_allclose(ds.iloc[3], np.log(2.0))

    def test_difflog_short_series(self):
        """Test that a single observation gives a single NaN."""
        d = difflog([5.0])
        assert d.shape == (1,)
        assert np.isnan(d[0])

    def test_difflog_not_convertible(self):
        """Test that non-numeric input is rejected."""
        with pytest.raises(NotConvertibleToSeriesError):
            difflog("GDP")

    @given(data=st.lists(st.floats(min_value=1e-3, max_value=1e6), min_size=2, max_size=40))
    @settings(max_examples=30)
    def test_cumulative_sum_reconstructs_levels(self, data):
        """Test that exp(cumsum(difflog(x))) recovers x up to the scale x[0]."""
        x = np.array(data)
        d = difflog(x)

        reconstructed = x[0] * np.exp(np.cumsum(d[1:]))
        assert_allclose(reconstructed, x[1:], rtol=1e-8)

    def test_oneqtrpctchange(self):
        """Test quarterly percent changes."""
        x = np.array([100.0, 100.0 * np.exp(0.01), 100.0 * np.exp(0.03)])
        result = oneqtrpctchange(x)

        assert np.isnan(result[0])
        assert_allclose(result[1:], [1.0, 2.0])


class TestReverseTransforms:
    """Tests for transforms from model units to annualized percent changes."""

    def test_logtopct_annualized(self):
        """Test annualizing quarterly log growth in percent."""
        assert logtopct_annualized(0.0) == 0.0
        assert_allclose(logtopct_annualized(1.0), ONE_PCT_ANNUALIZED)
        assert_allclose(logtopct_annualized(np.array([1.0, 1.0])), [ONE_PCT_ANNUALIZED] * 2)

    def test_logtopct_annualized_scale(self):
        """Test growth given as a fraction."""
        assert_allclose(logtopct_annualized(0.01, q_adj=1.0), ONE_PCT_ANNUALIZED)

    def test_logtopct_annualized_percapita_path(self):
        """Test adding population growth to a single path."""
        y = np.array([0.5, 1.0, 0.0])
        pop = np.array([0.005, 0.0, 0.01])

        result = logtopct_annualized_percapita(y, pop)

        assert result.shape == (3,)
        assert_allclose(result, [ONE_PCT_ANNUALIZED, ONE_PCT_ANNUALIZED, ONE_PCT_ANNUALIZED])

    def test_logtopct_annualized_percapita_draws(self):
        """Test that population growth is applied to every draw."""
        y = np.array([[1.0, 0.0, 2.0], [0.0, 1.0, -1.0]])
        pop = np.array([0.0, 0.01, -0.01])

        result = logtopct_annualized_percapita(y, pop)

        assert result.shape == (2, 3)
        assert_allclose(result[0], [ONE_PCT_ANNUALIZED, ONE_PCT_ANNUALIZED, ONE_PCT_ANNUALIZED])
        assert_allclose(result[1], [0.0, 100.0 * (np.exp(0.08) - 1.0),
                                    100.0 * (np.exp(-0.08) - 1.0)])

    def test_logtopct_annualized_percapita_series(self, quarterly_series):
        """Test that a Series keeps its index."""
        pop = np.zeros(len(quarterly_series))
        result = logtopct_annualized_percapita(quarterly_series / 100.0, pop)

        assert isinstance(result, pd.Series)
        assert_index_equal(result.index, quarterly_series.index)

    @pytest.mark.parametrize("y", [np.zeros(4), np.zeros((3, 4))])
    def test_logtopct_annualized_percapita_mismatch(self, y):
        """Test that population growth must have one value per period."""
        with pytest.raises(DimensionMismatchError) as exc_info:
            logtopct_annualized_percapita(y, np.zeros(5))

        assert exc_info.value.expected_length == 4
        assert exc_info.value.actual_length == 5

    def test_logtopct_annualized_percapita_three_dimensions(self):
        """Test that arrays with more than two dimensions are rejected."""
        with pytest.raises(DimensionError):
            logtopct_annualized_percapita(np.zeros((2, 2, 2)), np.zeros(2))

    def test_loglevelto4qpct_annualized_path(self):
        """Test log levels to annualized percent changes for a single path."""
        y = np.array([100.0, 101.0, 103.0])

        result = loglevelto4qpct_annualized(y, 99.0)

        assert_allclose(result, [ONE_PCT_ANNUALIZED, ONE_PCT_ANNUALIZED,
                                 100.0 * (np.exp(0.08) - 1.0)])

    def test_loglevelto4qpct_annualized_draws(self):
        """Test that every draw starts from the same previous level."""
        y = np.array([[101.0, 102.0], [100.0, 101.0]])

        result = loglevelto4qpct_annualized(y, 100.0)

        assert result.shape == (2, 2)
        assert_allclose(result[0], [ONE_PCT_ANNUALIZED, ONE_PCT_ANNUALIZED])
        assert_allclose(result[1], [0.0, ONE_PCT_ANNUALIZED])

    def test_loglevelto4qpct_annualized_constant(self):
        """Test that constant log levels give zero growth."""
        result = loglevelto4qpct_annualized(np.full(6, 250.0), 250.0)
        assert_array_equal(result, np.zeros(6))

    def test_loglevelto4qpct_annualized_percapita(self):
        """Test adding population growth to log-level changes."""
        y = np.array([[100.0, 100.5], [99.0, 99.5]])
        pop = np.array([0.0, 0.005])

        result = loglevelto4qpct_annualized_percapita(y, 99.0, pop)

        assert_allclose(result[0], [ONE_PCT_ANNUALIZED, ONE_PCT_ANNUALIZED])
        assert_allclose(result[1], [0.0, ONE_PCT_ANNUALIZED])

    def test_loglevelto4qpct_annualized_percapita_path(self):
        """Test the per-capita transform on a single path."""
        y = np.array([100.0, 100.0])
        pop = np.array([0.01, 0.0])

        result = loglevelto4qpct_annualized_percapita(y, 100.0, pop)
        assert_allclose(result, [ONE_PCT_ANNUALIZED, 0.0], atol=1e-12)

    def test_loglevelto4qpct_annualized_percapita_mismatch(self):
        """Test that population growth must have one value per period."""
        with pytest.raises(DimensionMismatchError):
            loglevelto4qpct_annualized_percapita(np.zeros((2, 3)), 0.0, np.zeros(2))

    def test_growth_transforms_agree(self):
        """Test that log-level changes match annualized log growth."""
        rng = np.random.default_rng(7)
        growth = rng.normal(0.5, 0.3, size=12)
        levels = 500.0 + np.cumsum(growth)

        assert_allclose(
            loglevelto4qpct_annualized(levels[1:], levels[0]),
            logtopct_annualized(growth[1:])
        )
