'''
Custom exception classes for macro-transforms.

This module defines the exception hierarchy used throughout the package. Every
error carries a primary message plus optional details and a context dictionary,
and the formatted message records the location that raised it, so failures in a
long data-preparation pipeline can be traced back to the offending series.

Structural problems with input data (empty series, series too short for the
HP penalty stencil, mismatched auxiliary series) are reported through the
``DataError`` and ``DimensionError`` branches. Numerical conditions that do not
stop a computation are reported as warnings derived from
``MacroTransformsWarning``.
'''

from typing import Any, Dict, Optional, Tuple, Union
import inspect
import warnings
import numpy as np
from pathlib import Path


def _format_message(message: str,
                    details: Optional[str],
                    context: Optional[Dict[str, Any]],
                    frame: Any) -> str:
    full_message = message
    if details:
        full_message += f"\n\nDetails: {details}"

    if context:
        context_str = "\n".join(f"  {k}: {v}" for k, v in context.items())
        full_message += f"\n\nContext:\n{context_str}"

    # Skip constructor frames so the location points at the raising code
    caller = frame.f_back if frame else None
    while caller and caller.f_code.co_filename == __file__:
        caller = caller.f_back
    if caller:
        caller_info = inspect.getframeinfo(caller)
        full_message += f"\n\nLocation: {Path(caller_info.filename).name}:{caller_info.lineno}"

    return full_message


class MacroTransformsError(Exception):
    """Base exception class for all macro-transforms errors.

    Attributes:
        message: The error message
        details: Additional details about the error
        context: Dictionary containing contextual information about the error
    """

    def __init__(self,
                 message: str,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        """Initialize the MacroTransformsError.

        Args:
            message: The primary error message
            details: Additional details about the error
            context: Dictionary containing contextual information about the error
        """
        self.message = message
        self.details = details
        self.context = context or {}

        frame = inspect.currentframe()
        try:
            full_message = _format_message(message, details, context, frame)
        finally:
            del frame
        super().__init__(full_message)


class ParameterError(MacroTransformsError):
    """Exception raised when a parameter such as the smoothing parameter is invalid.

    Attributes:
        param_name: The name of the parameter that caused the error
        param_value: The invalid parameter value
        constraint: Description of the constraint that was violated
    """

    def __init__(self,
                 message: str,
                 param_name: Optional[str] = None,
                 param_value: Optional[Any] = None,
                 constraint: Optional[str] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.param_name = param_name
        self.param_value = param_value
        self.constraint = constraint

        context_dict = context or {}
        if param_name:
            context_dict["Parameter"] = param_name
        if param_value is not None:
            context_dict["Value"] = param_value
        if constraint:
            context_dict["Constraint"] = constraint

        super().__init__(message, details, context_dict)


class DimensionError(MacroTransformsError):
    """Exception raised for errors related to array dimensions.

    Attributes:
        array_name: The name of the array that caused the error
        expected_shape: The expected shape of the array
        actual_shape: The actual shape of the array
    """

    def __init__(self,
                 message: str,
                 array_name: Optional[str] = None,
                 expected_shape: Optional[Union[Tuple[int, ...], str]] = None,
                 actual_shape: Optional[Tuple[int, ...]] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.array_name = array_name
        self.expected_shape = expected_shape
        self.actual_shape = actual_shape

        context_dict = context or {}
        if array_name:
            context_dict["Array"] = array_name
        if expected_shape is not None:
            context_dict["Expected Shape"] = expected_shape
        if actual_shape is not None:
            context_dict["Actual Shape"] = actual_shape

        super().__init__(message, details, context_dict)


class DimensionMismatchError(DimensionError):
    """Exception raised when an auxiliary series does not line up with the primary series.

    Used by the reverse transforms when, for example, a population growth
    series has a different number of periods than the data being transformed.

    Attributes:
        expected_length: Number of periods in the primary series
        actual_length: Number of periods in the auxiliary series
    """

    def __init__(self,
                 message: str,
                 array_name: Optional[str] = None,
                 expected_length: Optional[int] = None,
                 actual_length: Optional[int] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.expected_length = expected_length
        self.actual_length = actual_length

        super().__init__(
            message,
            array_name=array_name,
            expected_shape=f"({expected_length},)" if expected_length is not None else None,
            actual_shape=(actual_length,) if actual_length is not None else None,
            details=details,
            context=context,
        )


class NumericError(MacroTransformsError):
    """Exception raised when a numerical computation fails.

    Attributes:
        operation: The operation that caused the error
        values: The values that caused the error
        error_type: The type of numerical error (e.g., "factorization")
    """

    def __init__(self,
                 message: str,
                 operation: Optional[str] = None,
                 values: Optional[Any] = None,
                 error_type: Optional[str] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.operation = operation
        self.values = values
        self.error_type = error_type

        context_dict = context or {}
        if operation:
            context_dict["Operation"] = operation
        if values is not None:
            if isinstance(values, np.ndarray) and values.size > 10:
                # Truncate large arrays for readability
                context_dict["Values"] = f"Array with shape {values.shape}"
            else:
                context_dict["Values"] = values
        if error_type:
            context_dict["Error Type"] = error_type

        super().__init__(message, details, context_dict)


class DataError(MacroTransformsError):
    """Exception raised for errors related to input data.

    Attributes:
        data_name: The name of the data that caused the error
        issue: Description of the issue with the data
        index: The index or location where the issue was detected
    """

    def __init__(self,
                 message: str,
                 data_name: Optional[str] = None,
                 issue: Optional[str] = None,
                 index: Optional[Union[int, Tuple[int, ...], str]] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.data_name = data_name
        self.issue = issue
        self.index = index

        context_dict = context or {}
        if data_name:
            context_dict["Data"] = data_name
        if issue:
            context_dict["Issue"] = issue
        if index is not None:
            context_dict["Index"] = index

        super().__init__(message, details, context_dict)


class NotConvertibleToSeriesError(DataError, TypeError):
    """Exception raised when input cannot be read as a flat ordered numeric sequence."""


class EmptySeriesError(DataError):
    """Exception raised when a series has no defined (non-NaN) observation."""


class SeriesTooShortError(DataError):
    """Exception raised when the trimmed series is too short for the HP penalty stencil.

    Attributes:
        length: Length of the trimmed series
        min_length: Minimum length required
    """

    def __init__(self,
                 message: str,
                 length: Optional[int] = None,
                 min_length: Optional[int] = None,
                 data_name: Optional[str] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.length = length
        self.min_length = min_length

        issue = None
        if length is not None and min_length is not None:
            issue = f"insufficient length: {length} < {min_length}"

        super().__init__(message, data_name=data_name, issue=issue,
                         details=details, context=context)


class ConfigurationError(MacroTransformsError):
    """Exception raised for errors in configuration settings.

    Attributes:
        setting: The configuration setting that caused the error
        value: The invalid value
        issue: Description of the configuration issue
    """

    def __init__(self,
                 message: str,
                 setting: Optional[str] = None,
                 value: Optional[Any] = None,
                 issue: Optional[str] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.setting = setting
        self.value = value
        self.issue = issue

        context_dict = context or {}
        if setting:
            context_dict["Setting"] = setting
        if value is not None:
            context_dict["Value"] = value
        if issue:
            context_dict["Issue"] = issue

        super().__init__(message, details, context_dict)


class NotFittedError(MacroTransformsError):
    """Exception raised when results are requested from a filter that has not been applied.

    Attributes:
        model_type: The type of filter or model
        operation: The operation that was attempted
    """

    def __init__(self,
                 message: str,
                 model_type: Optional[str] = None,
                 operation: Optional[str] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.model_type = model_type
        self.operation = operation

        context_dict = context or {}
        if model_type:
            context_dict["Model Type"] = model_type
        if operation:
            context_dict["Operation"] = operation

        super().__init__(message, details, context_dict)


class MacroTransformsWarning(Warning):
    """Base warning class for all macro-transforms warnings.

    Attributes:
        message: The warning message
        details: Additional details about the warning
        context: Dictionary containing contextual information about the warning
    """

    def __init__(self,
                 message: str,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details
        self.context = context or {}

        frame = inspect.currentframe()
        try:
            full_message = _format_message(message, details, context, frame)
        finally:
            del frame
        super().__init__(full_message)


class NumericWarning(MacroTransformsWarning):
    """Warning for numerical conditions that do not stop a computation.

    The HP filter issues this warning when interior missing values contaminate
    the whole trimmed range of its output.

    Attributes:
        operation: The operation where the issue was detected
        issue: Description of the numerical issue
        value: The value that may cause numerical issues
    """

    def __init__(self,
                 message: str,
                 operation: Optional[str] = None,
                 issue: Optional[str] = None,
                 value: Optional[Any] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.operation = operation
        self.issue = issue
        self.value = value

        context_dict = context or {}
        if operation:
            context_dict["Operation"] = operation
        if issue:
            context_dict["Issue"] = issue
        if value is not None:
            context_dict["Value"] = value

        super().__init__(message, details, context_dict)


# Helper functions for raising exceptions with consistent formatting

def raise_dimension_error(message: str,
                          array_name: Optional[str] = None,
                          expected_shape: Optional[Union[Tuple[int, ...], str]] = None,
                          actual_shape: Optional[Tuple[int, ...]] = None,
                          details: Optional[str] = None,
                          context: Optional[Dict[str, Any]] = None) -> None:
    """Raise a DimensionError with consistent formatting.

    Raises:
        DimensionError: The formatted dimension error
    """
    raise DimensionError(message, array_name, expected_shape, actual_shape, details, context)


def raise_data_error(message: str,
                     data_name: Optional[str] = None,
                     issue: Optional[str] = None,
                     index: Optional[Union[int, Tuple[int, ...], str]] = None,
                     details: Optional[str] = None,
                     context: Optional[Dict[str, Any]] = None) -> None:
    """Raise a DataError with consistent formatting.

    Raises:
        DataError: The formatted data error
    """
    raise DataError(message, data_name, issue, index, details, context)


def warn_numeric(message: str,
                 operation: Optional[str] = None,
                 issue: Optional[str] = None,
                 value: Optional[Any] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
    """Issue a NumericWarning with consistent formatting.

    Args:
        message: The primary warning message
        operation: The operation where the issue was detected
        issue: Description of the numerical issue
        value: The value that may cause numerical issues
        details: Additional details about the warning
        context: Dictionary containing contextual information about the warning
    """
    warnings.warn(
        NumericWarning(message, operation, issue, value, details, context),
        stacklevel=3
    )
