# macrotransforms/core/validation.py

"""
Validation utilities for macro-transforms.

This module turns loosely typed caller input into the concrete representations
the numerical code works with, and rejects input that cannot be used before any
matrix is assembled. Each check raises a specific exception from
``macrotransforms.core.exceptions`` so callers can tell a non-numeric input from
an empty series or a mismatched auxiliary series.
"""

import functools
import inspect
import numbers
from typing import Any, Callable, Optional, Sequence, TypeVar, cast

import numpy as np
import pandas as pd

from macrotransforms.core.exceptions import (
    DataError, DimensionMismatchError, NotConvertibleToSeriesError, ParameterError,
    raise_data_error
)
from macrotransforms.core.types import Mnemonic, SeriesLike, Vector

F = TypeVar('F', bound=Callable[..., Any])  # Function type


def validate_series(
    data: SeriesLike,
    data_name: str = "series"
) -> Vector:
    """Convert input to a flat, contiguous float64 vector.

    Pandas Series contribute their values, lists and tuples are converted
    element by element, and 2-D arrays are accepted when one of their
    dimensions is 1. NaN values are kept as they are; deciding what they mean
    is left to the caller.

    Args:
        data: Series to validate
        data_name: Name of the series for error messages

    Returns:
        np.ndarray: 1-D float64 copy of the input

    Raises:
        NotConvertibleToSeriesError: If the input is not a flat numeric sequence
    """
    if data is None:
        raise NotConvertibleToSeriesError(
            f"{data_name} cannot be None",
            data_name=data_name,
            issue="missing input"
        )

    if isinstance(data, (str, bytes)) or np.isscalar(data):
        raise NotConvertibleToSeriesError(
            f"{data_name} must be convertible to a vector, got {type(data).__name__}",
            data_name=data_name,
            issue="scalar input"
        )

    if isinstance(data, pd.DataFrame):
        if data.shape[1] != 1:
            raise NotConvertibleToSeriesError(
                f"{data_name} must be convertible to a vector, got a DataFrame "
                f"with {data.shape[1]} columns",
                data_name=data_name,
                issue="multiple columns"
            )
        data = data.iloc[:, 0]

    try:
        if isinstance(data, pd.Series):
            values = data.to_numpy(dtype=np.float64, na_value=np.nan)
        else:
            values = np.asarray(data, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise NotConvertibleToSeriesError(
            f"{data_name} must be convertible to a vector",
            data_name=data_name,
            issue="non-numeric or ragged input",
            details=str(e)
        ) from e

    if values.ndim == 0:
        raise NotConvertibleToSeriesError(
            f"{data_name} must be convertible to a vector, got a 0-dimensional array",
            data_name=data_name,
            issue="scalar input"
        )

    if values.ndim > 1:
        non_singleton = [dim for dim in values.shape if dim != 1]
        if len(non_singleton) > 1:
            raise NotConvertibleToSeriesError(
                f"{data_name} must be convertible to a vector, got shape {values.shape}",
                data_name=data_name,
                issue="more than one non-singleton dimension"
            )
        values = values.reshape(-1)

    return np.array(values, dtype=np.float64, copy=True)


def validate_smoothing_parameter(lambda_: Any, param_name: str = "lambda_") -> float:
    """Validate the HP smoothing parameter.

    Args:
        lambda_: Smoothing parameter to validate
        param_name: Name of the parameter for error messages

    Returns:
        float: The smoothing parameter as a Python float

    Raises:
        ParameterError: If the parameter is not a finite non-negative real number
    """
    if isinstance(lambda_, bool) or not isinstance(lambda_, numbers.Real):
        raise ParameterError(
            f"Parameter {param_name} must be a real number, got {type(lambda_).__name__}",
            param_name=param_name,
            param_value=lambda_,
            constraint="real number"
        )

    value = float(lambda_)
    if not np.isfinite(value):
        raise ParameterError(
            f"Parameter {param_name} must be finite, got {value}",
            param_name=param_name,
            param_value=value,
            constraint="finite"
        )
    if value < 0:
        raise ParameterError(
            f"Parameter {param_name} must be non-negative, got {value}",
            param_name=param_name,
            param_value=value,
            constraint=">= 0"
        )
    return value


def validate_matching_length(
    auxiliary: Vector,
    expected_length: int,
    array_name: str = "auxiliary series"
) -> Vector:
    """Validate that an auxiliary series has one entry per period.

    Args:
        auxiliary: Auxiliary series (e.g., population growth)
        expected_length: Number of periods in the primary series
        array_name: Name of the auxiliary series for error messages

    Returns:
        np.ndarray: The validated auxiliary series

    Raises:
        DimensionMismatchError: If the lengths differ
    """
    if len(auxiliary) != expected_length:
        raise DimensionMismatchError(
            f"{array_name} has length {len(auxiliary)}, expected {expected_length}",
            array_name=array_name,
            expected_length=expected_length,
            actual_length=len(auxiliary)
        )
    return auxiliary


def validate_columns(
    df: pd.DataFrame,
    columns: Sequence[Mnemonic],
    data_name: str = "df"
) -> pd.DataFrame:
    """Validate that a DataFrame holds every requested column.

    Args:
        df: Table of observations
        columns: Mnemonics that must be present
        data_name: Name of the table for error messages

    Returns:
        pd.DataFrame: The validated table

    Raises:
        DataError: If ``df`` is not a DataFrame or a column is missing
    """
    if not isinstance(df, pd.DataFrame):
        raise DataError(
            f"{data_name} must be a Pandas DataFrame, got {type(df).__name__}",
            data_name=data_name,
            issue="not a DataFrame"
        )

    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise_data_error(
            f"{data_name} is missing column(s): {', '.join(map(str, missing))}",
            data_name=data_name,
            issue="missing mnemonic",
            index=", ".join(map(str, missing))
        )
    return df


def validate_input_series(arg_index: int, data_name: Optional[str] = None) -> Callable[[F], F]:
    """Decorator that converts a positional series argument with ``validate_series``.

    Pandas Series arguments are left untouched so the decorated function can
    preserve their index; every other input is replaced by the validated vector.

    Args:
        arg_index: Position of the series argument
        data_name: Name used in error messages (defaults to the parameter name)

    Returns:
        Callable: Decorator for the function
    """
    def decorator(func: F) -> F:
        sig = inspect.signature(func)
        param_names = list(sig.parameters)
        name = data_name or (param_names[arg_index] if arg_index < len(param_names) else "series")

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            if len(args) > arg_index:
                value = args[arg_index]
                if not isinstance(value, pd.Series):
                    args = list(args)
                    args[arg_index] = validate_series(value, data_name=name)
                    args = tuple(args)
            elif name in kwargs and not isinstance(kwargs[name], pd.Series):
                kwargs[name] = validate_series(kwargs[name], data_name=name)
            return func(*args, **kwargs)

        return cast(F, wrapper)

    return decorator
