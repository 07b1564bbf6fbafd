# macrotransforms/models/time_series/filters.py

"""
Hodrick-Prescott Filtering Module

This module implements the Hodrick-Prescott (HP) filter used to split
macroeconomic observables into a smooth trend and a cyclical component before
they enter the forecasting pipeline, and to post-process filtered output.

Observation tables routinely contain series that start later or end earlier
than the rest of the table. Consecutive missing values (NaN) at the beginning
or end of a series are therefore excluded from filtering and re-inserted in
the output. Missing values strictly inside a series are not rejected: they
make the entire filtered range NaN, and a ``NumericWarning`` is issued.

Classes:
    TrimmedSeries: Interior of a series plus its leading/trailing NaN counts
    FilterResult: Result container for filter output
    FilterBase: Abstract base class for stateful filters
    HPFilter: Hodrick-Prescott filter

Functions:
    trim_missing_boundaries: Locate the defined interior of a series
    reassemble: Pad trimmed output back to the original length
    hpfilter: Functional HP filter returning (trend, cycle)
    hp_filter: Convenience function returning a FilterResult
    hpfilter_frame: Filter each column of a DataFrame
    hpfilter_frame_async: Filter each column of a DataFrame concurrently
    lambda_for_frequency: Conventional smoothing parameter for a data frequency

References:
    Hodrick, Robert; Prescott, Edward C. (1997). "Postwar U.S. Business
    Cycles: An Empirical Investigation". Journal of Money, Credit, and
    Banking 29 (1): 1-16.
"""

import asyncio
import logging
import warnings
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Tuple, TypeVar

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

from macrotransforms.core.base import ModelBase
from macrotransforms.core.config import get_config
from macrotransforms.core.exceptions import (
    DimensionError, EmptySeriesError, NotFittedError, ParameterError
)
from macrotransforms.core.parameters import HPFilterParameters, ParameterBase
from macrotransforms.core.types import (
    Frequency, Mnemonic, SeriesLike, SolverMethod, TimeSeriesData, TrendCycle, Vector
)
from macrotransforms.core.validation import (
    validate_columns, validate_series, validate_smoothing_parameter
)
from macrotransforms.models.time_series._banded import (
    build_penalty_matrix, solve_penalty_system
)
from macrotransforms.models.time_series._numba_core import defined_bounds

# Set up module-level logger
logger = logging.getLogger("macrotransforms.models.time_series.filters")

# Type variable for filter parameters
T = TypeVar('T', bound=ParameterBase)


class TrimmedSeries(NamedTuple):
    """Defined interior of a series.

    Attributes:
        values: Observations from the first to the last non-NaN value
        n_leading: Number of NaN values removed from the start
        n_trailing: Number of NaN values removed from the end
    """

    values: Vector
    n_leading: int
    n_trailing: int

    @property
    def original_length(self) -> int:
        """Length of the series before trimming."""
        return self.n_leading + len(self.values) + self.n_trailing


def trim_missing_boundaries(y: Vector) -> TrimmedSeries:
    """Strip leading and trailing NaN values from a series.

    Only the boundaries are scanned; NaN values between the first and last
    observation are kept in the returned interior.

    Args:
        y: 1-D float64 series

    Returns:
        TrimmedSeries: The interior view and the number of removed positions

    Raises:
        EmptySeriesError: If the series has no defined value
    """
    y = np.ascontiguousarray(y, dtype=np.float64)
    first, last = defined_bounds(y)
    if first < 0:
        raise EmptySeriesError(
            "Series has no defined (non-NaN) values"
            if len(y) else "Series is empty",
            data_name="series",
            issue="no defined values"
        )

    return TrimmedSeries(
        values=y[first:last + 1],
        n_leading=int(first),
        n_trailing=int(len(y) - 1 - last)
    )


def reassemble(values: Vector, n_leading: int, n_trailing: int) -> Vector:
    """Pad trimmed output with NaN back to the original series length.

    Args:
        values: Output computed on the trimmed interior
        n_leading: Number of NaN positions to restore at the start
        n_trailing: Number of NaN positions to restore at the end

    Returns:
        np.ndarray: Newly allocated array of length
        ``n_leading + len(values) + n_trailing``
    """
    out = np.full(n_leading + len(values) + n_trailing, np.nan)
    out[n_leading:n_leading + len(values)] = values
    return out


def _hp_decompose(y: Vector,
                  lambda_: float,
                  method: Optional[SolverMethod] = None) -> Tuple[Vector, Vector]:
    """Trim, solve and reassemble; ``y`` and ``lambda_`` are already validated."""
    trimmed = trim_missing_boundaries(y)
    logger.debug(
        f"HP filter: n={len(y)}, leading NaN={trimmed.n_leading}, "
        f"trailing NaN={trimmed.n_trailing}, lambda={lambda_}"
    )

    matrix = build_penalty_matrix(len(trimmed.values), lambda_)
    trend_ = solve_penalty_system(matrix, trimmed.values, method=method)
    cycle_ = trimmed.values - trend_

    trend = reassemble(trend_, trimmed.n_leading, trimmed.n_trailing)
    cycle = reassemble(cycle_, trimmed.n_leading, trimmed.n_trailing)
    return trend, cycle


def hpfilter(y: SeriesLike,
             lambda_: float,
             method: Optional[SolverMethod] = None) -> TrendCycle:
    """Apply the Hodrick-Prescott filter.

    The trend minimizes the squared deviation from ``y`` plus ``lambda_``
    times the squared second differences of the trend. For quarterly data,
    one can use ``lambda_=1600``.

    Consecutive missing values at the beginning or end of the series are
    excluded from the filtering and are NaN in both outputs. If there are
    missing values within the series, the filtered values are all NaN.

    Args:
        y: Series to filter (list, NumPy array, single row/column matrix,
            or Pandas Series)
        lambda_: Smoothing parameter (non-negative)
        method: Banded solver, "cholesky" or "lu"; defaults to the
            ``numerical.hp_solver`` configuration option

    Returns:
        Tuple of (trend, cycle). Both are Pandas Series sharing the input's
        index when ``y`` is a Series, and NumPy arrays otherwise.

    Raises:
        NotConvertibleToSeriesError: If ``y`` is not a flat numeric sequence
        ParameterError: If ``lambda_`` is negative or not finite
        EmptySeriesError: If ``y`` has no defined value
        SeriesTooShortError: If fewer than 5 observations remain after trimming

    Examples:
        >>> import numpy as np
        >>> from macrotransforms.models.time_series.filters import hpfilter
        >>> trend, cycle = hpfilter([1.0, 2.0, 3.0, 4.0, 5.0, 4.0], 0.0)
        >>> np.allclose(cycle, 0.0)
        True
    """
    values = validate_series(y, data_name="y")
    lam = validate_smoothing_parameter(lambda_)

    trend, cycle = _hp_decompose(values, lam, method=method)

    if isinstance(y, pd.Series):
        return (pd.Series(trend, index=y.index, name=y.name),
                pd.Series(cycle, index=y.index, name=y.name))
    return trend, cycle


def lambda_for_frequency(frequency: Frequency) -> float:
    """Return the conventional HP smoothing parameter for a data frequency.

    The values come from the ``filters`` configuration section (by default
    100 for annual, 1600 for quarterly and 14400 for monthly data).

    Args:
        frequency: "annual", "quarterly" or "monthly"

    Returns:
        float: The smoothing parameter

    Raises:
        ParameterError: If the frequency is unknown
    """
    key = str(frequency).lower()
    if key not in ("annual", "quarterly", "monthly"):
        raise ParameterError(
            f"Unknown data frequency: {frequency}",
            param_name="frequency",
            param_value=frequency,
            constraint="'annual', 'quarterly' or 'monthly'"
        )
    return float(get_config("filters", f"{key}_lambda"))


def hpfilter_frame(df: pd.DataFrame,
                   lambda_: float,
                   columns: Optional[Sequence[Mnemonic]] = None,
                   method: Optional[SolverMethod] = None) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Apply the HP filter to each column of a DataFrame independently.

    Each column is trimmed separately, so columns that start or end at
    different dates are handled as in ``hpfilter``.

    Args:
        df: Table of observations
        lambda_: Smoothing parameter
        columns: Columns to filter (default: all columns)
        method: Banded solver, "cholesky" or "lu"

    Returns:
        Tuple of (trend, cycle) DataFrames with the selected columns and the
        input's index

    Raises:
        DataError: If a requested column is missing
    """
    columns = list(df.columns) if columns is None else list(columns)
    validate_columns(df, columns)
    lam = validate_smoothing_parameter(lambda_)

    trends: Dict[Mnemonic, Vector] = {}
    cycles: Dict[Mnemonic, Vector] = {}
    for col in columns:
        trends[col], cycles[col] = _hp_decompose(
            validate_series(df[col], data_name=str(col)), lam, method=method
        )

    return (pd.DataFrame(trends, index=df.index, columns=columns),
            pd.DataFrame(cycles, index=df.index, columns=columns))


async def hpfilter_frame_async(df: pd.DataFrame,
                               lambda_: float,
                               columns: Optional[Sequence[Mnemonic]] = None,
                               method: Optional[SolverMethod] = None) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Asynchronously apply the HP filter to each column of a DataFrame.

    Columns share no state, so each one is filtered in the event loop's
    default executor and the results are gathered in column order.

    Args:
        df: Table of observations
        lambda_: Smoothing parameter
        columns: Columns to filter (default: all columns)
        method: Banded solver, "cholesky" or "lu"

    Returns:
        Tuple of (trend, cycle) DataFrames, as ``hpfilter_frame``
    """
    columns = list(df.columns) if columns is None else list(columns)
    validate_columns(df, columns)
    lam = validate_smoothing_parameter(lambda_)

    loop = asyncio.get_running_loop()
    tasks = [
        loop.run_in_executor(
            None, _hp_decompose, validate_series(df[col], data_name=str(col)), lam, method
        )
        for col in columns
    ]
    decomposed = await asyncio.gather(*tasks)

    trends = {col: trend for col, (trend, _) in zip(columns, decomposed)}
    cycles = {col: cycle for col, (_, cycle) in zip(columns, decomposed)}
    return (pd.DataFrame(trends, index=df.index, columns=columns),
            pd.DataFrame(cycles, index=df.index, columns=columns))


@dataclass
class FilterResult:
    """Result container for time series filtering operations.

    Attributes:
        original: Original time series data
        trend: Trend component
        cycle: Cycle component
        parameters: Dictionary of filter parameters
        filter_name: Name of the filter used
        index: Time index from the original data (if available)
        n_leading_missing: Number of leading NaN values excluded from filtering
        n_trailing_missing: Number of trailing NaN values excluded from filtering
    """

    original: np.ndarray
    trend: np.ndarray
    cycle: np.ndarray
    parameters: Dict[str, Any] = field(default_factory=dict)
    filter_name: str = "Unknown Filter"
    index: Optional[pd.Index] = None
    n_leading_missing: int = 0
    n_trailing_missing: int = 0

    def __post_init__(self) -> None:
        """Validate result object after initialization."""
        n = len(self.original)
        for name in ("trend", "cycle"):
            component = getattr(self, name)
            if len(component) != n:
                raise DimensionError(
                    f"{name.capitalize()} component length must match original data length",
                    array_name=name,
                    expected_shape=f"({n},)",
                    actual_shape=component.shape
                )

    @property
    def contaminated(self) -> bool:
        """True when interior missing values made the filtered range NaN."""
        n = len(self.original)
        interior = self.trend[self.n_leading_missing:n - self.n_trailing_missing]
        return bool(len(interior) and np.isnan(interior).all())

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result object to a dictionary.

        Returns:
            Dict[str, Any]: Dictionary representation of the result object
        """
        result_dict = {
            "original": self.original,
            "trend": self.trend,
            "cycle": self.cycle,
            "parameters": self.parameters.copy(),
            "filter_name": self.filter_name,
            "n_leading_missing": self.n_leading_missing,
            "n_trailing_missing": self.n_trailing_missing,
        }
        if self.index is not None:
            result_dict["index"] = self.index

        return result_dict

    def to_dataframe(self) -> pd.DataFrame:
        """Convert the result object to a pandas DataFrame.

        Returns:
            pd.DataFrame: DataFrame with original, trend and cycle columns
        """
        data = {
            "original": self.original,
            "trend": self.trend,
            "cycle": self.cycle
        }
        return pd.DataFrame(data, index=self.index)

    def summary(self) -> str:
        """Generate a short text summary of the decomposition."""
        lines = [f"Filter: {self.filter_name}"]
        lines.append("=" * len(lines[0]))
        for key, value in self.parameters.items():
            lines.append(f"{key}: {value}")
        lines.append(f"Observations: {len(self.original)}")
        lines.append(f"Leading missing: {self.n_leading_missing}")
        lines.append(f"Trailing missing: {self.n_trailing_missing}")
        if self.contaminated:
            lines.append("Interior missing values: output is NaN")
        else:
            lines.append(f"Cycle std. dev.: {np.nanstd(self.cycle):.6f}")
        return "\n".join(lines)

    def plot(self, figsize: Tuple[int, int] = (12, 8),
             components: Optional[List[str]] = None) -> plt.Figure:
        """Plot the filter results.

        Args:
            figsize: Figure size (width, height) in inches
            components: Components to plot (default: original, trend, cycle)

        Returns:
            plt.Figure: Matplotlib figure object
        """
        if components is None:
            components = ["original", "trend", "cycle"]

        fig, axes = plt.subplots(len(components), 1, figsize=figsize, sharex=True)
        if len(components) == 1:
            axes = [axes]

        x = self.index if self.index is not None else np.arange(len(self.original))

        styles = {
            "original": ("Original", None, "Original Series"),
            "trend": ("Trend", "red", "Trend Component"),
            "cycle": ("Cycle", "green", "Cycle Component"),
        }
        for ax, component in zip(axes, components):
            if component not in styles:
                warnings.warn(f"Component '{component}' not found in filter results")
                continue
            label, color, title = styles[component]
            ax.plot(x, getattr(self, component), label=label, color=color)
            ax.set_title(title)
            ax.legend()
            ax.grid(True, alpha=0.3)

        fig.suptitle(f"{self.filter_name} Decomposition", fontsize=14)
        fig.tight_layout()
        plt.subplots_adjust(top=0.9)

        return fig


class FilterBase(ModelBase[T, FilterResult, TimeSeriesData], ABC):
    """Abstract base class for time series filters.

    Type Parameters:
        T: The parameter type for this filter
    """

    def __init__(self, name: str = "FilterBase"):
        """Initialize the filter.

        Args:
            name: A descriptive name for the filter
        """
        super().__init__(name=name)
        self._data: Optional[np.ndarray] = None
        self._index: Optional[pd.Index] = None
        self._trend: Optional[np.ndarray] = None
        self._cycle: Optional[np.ndarray] = None

    @property
    def data(self) -> Optional[np.ndarray]:
        """The data passed to the most recent ``filter`` call."""
        return self._data

    @property
    def index(self) -> Optional[pd.Index]:
        """Index of the most recent input, if it was a Pandas Series."""
        return self._index

    @property
    def trend(self) -> np.ndarray:
        """Get the trend component.

        Raises:
            NotFittedError: If the filter has not been applied
        """
        if not self._fitted:
            raise NotFittedError(
                "Filter has not been applied. Call filter() first.",
                model_type=self._name,
                operation="trend"
            )
        return self._trend

    @property
    def cycle(self) -> np.ndarray:
        """Get the cycle component.

        Raises:
            NotFittedError: If the filter has not been applied
        """
        if not self._fitted:
            raise NotFittedError(
                "Filter has not been applied. Call filter() first.",
                model_type=self._name,
                operation="cycle"
            )
        return self._cycle

    def validate_data(self, data: SeriesLike) -> np.ndarray:
        """Validate the input data for filtering.

        Args:
            data: The data to validate

        Returns:
            np.ndarray: The validated data as a float64 vector

        Raises:
            NotConvertibleToSeriesError: If the data is not a flat numeric sequence
        """
        self._index = data.index if isinstance(data, pd.Series) else None
        return validate_series(data, data_name="data")

    @abstractmethod
    def filter(self, data: SeriesLike, **kwargs: Any) -> FilterResult:
        """Apply the filter to the provided data.

        Args:
            data: The data to filter
            **kwargs: Additional keyword arguments for filtering

        Returns:
            FilterResult: The filter results
        """
        pass

    async def filter_async(self, data: SeriesLike, **kwargs: Any) -> FilterResult:
        """Asynchronously apply the filter to the provided data.

        Runs the synchronous ``filter`` in the event loop's default executor.

        Args:
            data: The data to filter
            **kwargs: Additional keyword arguments for filtering

        Returns:
            FilterResult: The filter results
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, lambda: self.filter(data, **kwargs))

    def _create_result_object(self,
                              data: np.ndarray,
                              trend: np.ndarray,
                              cycle: np.ndarray,
                              parameters: Optional[Dict[str, Any]] = None,
                              n_leading_missing: int = 0,
                              n_trailing_missing: int = 0) -> FilterResult:
        """Create a result object from filter output and store it on the filter."""
        result = FilterResult(
            original=data,
            trend=trend,
            cycle=cycle,
            parameters=parameters or {},
            filter_name=self._name,
            index=self._index,
            n_leading_missing=n_leading_missing,
            n_trailing_missing=n_trailing_missing
        )

        self._trend = trend
        self._cycle = cycle
        self._results = result
        self._fitted = True
        return result


class HPFilter(FilterBase[HPFilterParameters]):
    """Hodrick-Prescott filter.

    Separates a series into a smooth trend and a cyclical component by
    penalizing the curvature of the trend. Leading and trailing missing
    values are excluded from the filtering and restored in the output.

    Attributes:
        lambda_: Smoothing parameter (higher values give smoother trends)
        method: Banded solver, "cholesky" or "lu" (None uses configuration)

    Examples:
        >>> from macrotransforms.models.time_series.filters import HPFilter
        >>> hp = HPFilter(lambda_=1600.0)
        >>> result = hp.filter([1.0, 2.0, 3.0, 4.0, 5.0, 4.0, 3.0, 2.0, 1.0, 2.0])
        >>> len(result.trend)
        10
    """

    def __init__(self,
                 lambda_: float = 1600.0,
                 method: Optional[SolverMethod] = None,
                 name: str = "Hodrick-Prescott Filter"):
        """Initialize the HP filter.

        Args:
            lambda_: Smoothing parameter (default: 1600.0 for quarterly data)
            method: Banded solver, "cholesky" or "lu" (None uses configuration)
            name: A descriptive name for the filter
        """
        super().__init__(name=name)
        self.params = HPFilterParameters(lambda_=lambda_)
        self.method = method

    @property
    def lambda_(self) -> float:
        """Get the smoothing parameter."""
        return self.params.lambda_

    @lambda_.setter
    def lambda_(self, value: float) -> None:
        """Set the smoothing parameter.

        Raises:
            ParameterError: If the parameter is invalid
        """
        self.params = HPFilterParameters(lambda_=value)

    def filter(self,
               data: SeriesLike,
               lambda_: Optional[float] = None,
               **kwargs: Any) -> FilterResult:
        """Apply the Hodrick-Prescott filter to the provided data.

        Args:
            data: The data to filter
            lambda_: Smoothing parameter (overrides the instance parameter if provided)
            **kwargs: Additional keyword arguments; ``method`` overrides the solver

        Returns:
            FilterResult: The filter results

        Raises:
            NotConvertibleToSeriesError: If the data is not a flat numeric sequence
            EmptySeriesError: If the data has no defined value
            SeriesTooShortError: If fewer than 5 observations remain after trimming
            NumericError: If the penalty system cannot be solved
        """
        data_array = self.validate_data(data)
        self._data = data_array

        if lambda_ is not None:
            self.lambda_ = lambda_

        method = kwargs.get("method", self.method)
        trimmed = trim_missing_boundaries(data_array)
        trend, cycle = _hp_decompose(data_array, self.lambda_, method=method)

        return self._create_result_object(
            data=data_array,
            trend=trend,
            cycle=cycle,
            parameters={"lambda_": self.lambda_},
            n_leading_missing=trimmed.n_leading,
            n_trailing_missing=trimmed.n_trailing
        )


def hp_filter(data: SeriesLike,
              lambda_: float = 1600.0,
              **kwargs: Any) -> FilterResult:
    """Apply the Hodrick-Prescott filter and return a FilterResult.

    Args:
        data: The data to filter
        lambda_: Smoothing parameter (default: 1600.0 for quarterly data)
        **kwargs: Additional keyword arguments for filtering

    Returns:
        FilterResult: The filter results
    """
    filter_obj = HPFilter(lambda_=lambda_)
    return filter_obj.filter(data, **kwargs)
