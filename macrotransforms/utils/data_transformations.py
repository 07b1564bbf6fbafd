'''
Data Transformation Module

This module provides the frequency conversions, level transforms and reverse
transforms that accompany the Hodrick-Prescott filter when macroeconomic
observables are prepared for estimation or forecasts are reported.

Forward transforms turn raw observations into model units (real, per capita,
quarterly log growth in percent). Reverse transforms take model output, which
may be a single path (``nperiods``) or a matrix of draws
(``ndraws x nperiods``), back to annualized percent changes.

All functions accept scalars, NumPy arrays and Pandas objects; Pandas inputs
keep their index. Observation tables are Pandas DataFrames whose columns are
named by mnemonic.

Functions:
    annualtoquarter: Convert an annual rate to a quarterly rate
    quartertoannual: Convert a quarterly rate to an annual rate
    quartertoannualpercent: Convert a quarterly fraction to an annual percent
    nominal_to_real: Deflate a nominal series
    percapita: Divide a series by population
    difflog: First difference of the log of a series
    oneqtrpctchange: Quarter-over-quarter log percent change
    hpadjust: Swap filtered for unfiltered population growth
    logtopct_annualized_percapita: Per-capita log growth to annualized percent
    logtopct_annualized: Log growth to annualized percent
    loglevelto4qpct_annualized: Log level to annualized percent change
    loglevelto4qpct_annualized_percapita: Per-capita log level to annualized percent change
'''

import logging
from typing import Any, Tuple, Union

import numpy as np
import pandas as pd

from macrotransforms.core.exceptions import raise_dimension_error
from macrotransforms.core.types import (
    Matrix, Mnemonic, ScalarOrSeries, SeriesLike, TimeSeriesData, Vector
)
from macrotransforms.core.validation import (
    validate_columns, validate_input_series, validate_matching_length, validate_series
)

# Set up module-level logger
logger = logging.getLogger("macrotransforms.utils.data_transformations")


def _as_numeric(v: Any) -> Any:
    """Leave scalars, arrays and Pandas objects alone; convert sequences to float arrays."""
    if isinstance(v, (pd.Series, pd.DataFrame, np.ndarray)) or np.isscalar(v):
        return v
    return np.asarray(v, dtype=np.float64)


def _draws_array(y: Any, data_name: str = "y") -> Tuple[np.ndarray, int]:
    """Return ``y`` as a float array of one path or ``ndraws x nperiods`` draws.

    Returns:
        Tuple of (array, nperiods)

    Raises:
        DimensionError: If ``y`` is not 1-D or 2-D
    """
    values = np.asarray(y.to_numpy(dtype=np.float64, na_value=np.nan)
                        if isinstance(y, (pd.Series, pd.DataFrame)) else y,
                        dtype=np.float64)
    if values.ndim not in (1, 2):
        raise_dimension_error(
            f"{data_name} must be a vector (nperiods) or a matrix (ndraws x nperiods), "
            f"got {values.ndim} dimension(s)",
            array_name=data_name,
            expected_shape="(nperiods,) or (ndraws, nperiods)",
            actual_shape=values.shape
        )
    return values, values.shape[-1]


def _like(result: np.ndarray, template: Any) -> Union[np.ndarray, pd.Series, pd.DataFrame]:
    """Wrap ``result`` in the Pandas type of ``template``, keeping its labels."""
    if isinstance(template, pd.Series):
        return pd.Series(result, index=template.index, name=template.name)
    if isinstance(template, pd.DataFrame):
        return pd.DataFrame(result, index=template.index, columns=template.columns)
    return result


def _previous_period(values: np.ndarray, y0: float) -> np.ndarray:
    """Shift log levels one period back, filling the first period with ``y0``."""
    y_t1 = np.empty_like(values)
    if values.shape[-1] == 0:
        return y_t1
    y_t1[..., 0] = y0
    y_t1[..., 1:] = values[..., :-1]
    return y_t1


def annualtoquarter(v: ScalarOrSeries) -> ScalarOrSeries:
    """
    Convert from annual to quarter frequency by dividing by 4.

    Args:
        v: Annual rate (scalar, array or Pandas object)

    Returns:
        Quarterly rate with the same type as the input

    Examples:
        >>> from macrotransforms.utils.data_transformations import annualtoquarter
        >>> annualtoquarter(4.0)
        1.0
    """
    return _as_numeric(v) / 4.0


def quartertoannual(v: ScalarOrSeries) -> ScalarOrSeries:
    """
    Convert from quarter to annual frequency by multiplying by 4.

    Args:
        v: Quarterly rate (scalar, array or Pandas object)

    Returns:
        Annual rate with the same type as the input
    """
    return _as_numeric(v) * 4.0


def quartertoannualpercent(v: ScalarOrSeries) -> ScalarOrSeries:
    """
    Convert from a quarterly fraction to an annual percentage by multiplying by 400.

    Args:
        v: Quarterly rate as a fraction

    Returns:
        Annual rate in percent with the same type as the input
    """
    return _as_numeric(v) * 400.0


def nominal_to_real(col: Mnemonic, df: pd.DataFrame,
                    deflator_mnemonic: Mnemonic = "GDPCTPI") -> pd.Series:
    """
    Convert a nominal series to a real one by dividing by a price deflator.

    Args:
        col: Mnemonic of the nominal series
        df: Table of observations holding both series
        deflator_mnemonic: Mnemonic of the deflator (default: the chain-type
            GDP price index, "GDPCTPI")

    Returns:
        pd.Series: Real series indexed like ``df``

    Raises:
        DataError: If either column is missing from ``df``

    Examples:
        >>> import pandas as pd
        >>> from macrotransforms.utils.data_transformations import nominal_to_real
        >>> df = pd.DataFrame({"GDP": [200.0, 210.0], "GDPCTPI": [1.0, 1.05]})
        >>> nominal_to_real("GDP", df).tolist()
        [200.0, 200.0]
    """
    validate_columns(df, [col, deflator_mnemonic])
    return df[col] / df[deflator_mnemonic]


def percapita(col: Mnemonic, df: pd.DataFrame, population_mnemonic: Mnemonic) -> pd.Series:
    """
    Convert a series to per-capita terms by dividing by population.

    Args:
        col: Mnemonic of the series
        df: Table of observations holding both series
        population_mnemonic: Mnemonic of the population series

    Returns:
        pd.Series: Per-capita series indexed like ``df``

    Raises:
        DataError: If either column is missing from ``df``
    """
    validate_columns(df, [col, population_mnemonic])
    return df[col] / df[population_mnemonic]


@validate_input_series(0, data_name="x")
def difflog(x: SeriesLike) -> TimeSeriesData:
    """
    Compute the first difference of the log of a series.

    The first element has no predecessor and is NaN, so the output has the
    same length as the input. Missing values (None, ``pd.NA``) are read as NaN
    and propagate to the two differences that involve them.

    Args:
        x: Positive series (list, NumPy array or Pandas Series)

    Returns:
        ``[NaN, log(x[1]) - log(x[0]), ...]``; a Pandas Series with the
        input's index when ``x`` is a Series

    Examples:
        >>> import numpy as np
        >>> from macrotransforms.utils.data_transformations import difflog
        >>> d = difflog([1.0, np.e, np.e ** 3])
        >>> np.isnan(d[0]), np.allclose(d[1:], [1.0, 2.0])
        (True, True)
    """
    values = validate_series(x, data_name="x") if isinstance(x, pd.Series) else x

    out = np.full(len(values), np.nan)
    if len(values) > 1:
        with np.errstate(divide='ignore', invalid='ignore'):
            logs = np.log(values)
        out[1:] = logs[1:] - logs[:-1]

    return _like(out, x)


def oneqtrpctchange(y: SeriesLike) -> TimeSeriesData:
    """
    Calculate the quarter-over-quarter log percent change of a series.

    Args:
        y: Positive series in levels

    Returns:
        ``100 * difflog(y)``, with a NaN first element
    """
    return 100.0 * difflog(y)


def hpadjust(y: ScalarOrSeries,
             df: pd.DataFrame,
             filtered_mnemonic: Mnemonic = "filtered_population_growth",
             unfiltered_mnemonic: Mnemonic = "unfiltered_population_growth") -> ScalarOrSeries:
    """
    Adjust a per-capita series for the HP filtering of population growth.

    Per-capita series are computed with HP-filtered population growth. This
    adds back the difference between unfiltered and filtered population growth
    (in percent), so that the result corresponds to actual population.

    Args:
        y: Per-capita series, one value per row of ``df``
        df: Table holding both population growth series (as fractions)
        filtered_mnemonic: Mnemonic of HP-filtered population growth
        unfiltered_mnemonic: Mnemonic of unfiltered population growth

    Returns:
        ``y + 100 * (df[unfiltered] - df[filtered])``

    Raises:
        DataError: If either population column is missing from ``df``
        DimensionMismatchError: If ``y`` has a different number of periods than ``df``
    """
    validate_columns(df, [filtered_mnemonic, unfiltered_mnemonic])
    adjustment = 100.0 * (df[unfiltered_mnemonic] - df[filtered_mnemonic])

    if isinstance(y, pd.Series):
        validate_matching_length(y, len(df), "y")
        return y + adjustment.to_numpy()

    y = _as_numeric(y)
    if np.ndim(y) == 0:
        return y + adjustment
    validate_matching_length(y, len(df), "y")
    return y + adjustment.to_numpy()


def logtopct_annualized_percapita(y: Union[Vector, Matrix, pd.Series, pd.DataFrame],
                                  pop_growth: SeriesLike,
                                  q_adj: float = 100.0) -> TimeSeriesData:
    """
    Transform per-capita log growth to annualized aggregate percent growth.

    ``pop_growth`` is the quarterly log growth of population (as a fraction).
    When ``y`` holds several draws, the same population path is applied to
    every draw.

    Args:
        y: Per-capita quarterly log growth, a path of ``nperiods`` values or a
            matrix of draws with shape ``(ndraws, nperiods)``
        pop_growth: Population growth, one value per period
        q_adj: Scale of ``y``; 100 when ``y`` is in percent

    Returns:
        ``100 * (exp(y / q_adj + pop_growth) ** 4 - 1)``, shaped like ``y``

    Raises:
        DimensionError: If ``y`` is neither 1-D nor 2-D
        DimensionMismatchError: If ``pop_growth`` does not have ``nperiods`` values
    """
    values, nperiods = _draws_array(y)
    pop = validate_matching_length(
        validate_series(pop_growth, data_name="pop_growth"), nperiods, "pop_growth"
    )

    result = 100.0 * (np.exp(values / q_adj + pop) ** 4 - 1.0)
    return _like(result, y)


def logtopct_annualized(y: ScalarOrSeries, q_adj: float = 100.0) -> ScalarOrSeries:
    """
    Transform quarterly log growth to annualized percent growth.

    Args:
        y: Quarterly log growth (any shape)
        q_adj: Scale of ``y``; 100 when ``y`` is in percent

    Returns:
        ``100 * (exp(y / q_adj) ** 4 - 1)`` with the same type as the input
    """
    return 100.0 * (np.exp(_as_numeric(y) / q_adj) ** 4 - 1.0)


def loglevelto4qpct_annualized(y: Union[Vector, Matrix, pd.Series, pd.DataFrame],
                               y0: float) -> TimeSeriesData:
    """
    Transform a log-level path to annualized quarter-over-quarter percent changes.

    The previous-period level of the first period is ``y0``; every later
    period uses the preceding entry of the same path (or draw).

    Args:
        y: Log levels times 100, a path of ``nperiods`` values or a matrix of
            draws with shape ``(ndraws, nperiods)``
        y0: Log level (times 100) of the period before the first

    Returns:
        ``100 * (exp(y / 100 - y_prev / 100) ** 4 - 1)``, shaped like ``y``

    Raises:
        DimensionError: If ``y`` is neither 1-D nor 2-D

    Examples:
        >>> import numpy as np
        >>> from macrotransforms.utils.data_transformations import loglevelto4qpct_annualized
        >>> np.allclose(loglevelto4qpct_annualized(np.array([1.0, 1.0]), 1.0), 0.0)
        True
    """
    values, _ = _draws_array(y)
    y_t1 = _previous_period(values, float(y0))

    result = 100.0 * (np.exp(values / 100.0 - y_t1 / 100.0) ** 4 - 1.0)
    return _like(result, y)


def loglevelto4qpct_annualized_percapita(y: Union[Vector, Matrix, pd.Series, pd.DataFrame],
                                         y0: float,
                                         pop_growth: SeriesLike) -> TimeSeriesData:
    """
    Transform a per-capita log-level path to annualized aggregate percent changes.

    Args:
        y: Per-capita log levels times 100, a path of ``nperiods`` values or a
            matrix of draws with shape ``(ndraws, nperiods)``
        y0: Log level (times 100) of the period before the first
        pop_growth: Population growth, one value per period

    Returns:
        ``100 * (exp(y / 100 - y_prev / 100 + pop_growth) ** 4 - 1)``, shaped like ``y``

    Raises:
        DimensionError: If ``y`` is neither 1-D nor 2-D
        DimensionMismatchError: If ``pop_growth`` does not have ``nperiods`` values
    """
    values, nperiods = _draws_array(y)
    pop = validate_matching_length(
        validate_series(pop_growth, data_name="pop_growth"), nperiods, "pop_growth"
    )
    y_t1 = _previous_period(values, float(y0))

    result = 100.0 * (np.exp(values / 100.0 - y_t1 / 100.0 + pop) ** 4 - 1.0)
    return _like(result, y)
