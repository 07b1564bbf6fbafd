'''
Parameter containers for macro-transforms.

Parameter containers are dataclasses that validate themselves on construction,
so an invalid smoothing parameter is rejected before any series is touched.
'''

from dataclasses import asdict, dataclass, is_dataclass
from typing import Any, Dict, Type, TypeVar

import numpy as np

from macrotransforms.core.validation import validate_smoothing_parameter

P = TypeVar('P', bound='ParameterBase')


class ParameterBase:
    """Base class for all parameter containers.

    This class provides common functionality for parameter validation and
    serialization that is shared across all parameter types.
    """

    def validate(self) -> None:
        """Validate parameter constraints.

        Raises:
            ParameterError: If parameter constraints are violated
        """
        pass

    def to_dict(self) -> Dict[str, Any]:
        """Convert parameters to a dictionary.

        Returns:
            Dict[str, Any]: Dictionary representation of parameters
        """
        if is_dataclass(self):
            return asdict(self)
        return {k: v for k, v in self.__dict__.items() if not k.startswith('_')}

    def to_array(self) -> np.ndarray:
        """Convert parameters to a NumPy array.

        Raises:
            NotImplementedError: If not implemented by subclass
        """
        raise NotImplementedError("to_array must be implemented by subclass")

    @classmethod
    def from_array(cls: Type[P], array: np.ndarray, **kwargs: Any) -> P:
        """Create parameters from a NumPy array.

        Raises:
            NotImplementedError: If not implemented by subclass
        """
        raise NotImplementedError("from_array must be implemented by subclass")


@dataclass
class HPFilterParameters(ParameterBase):
    """Parameters for the Hodrick-Prescott filter.

    Attributes:
        lambda_: Smoothing parameter (must be finite and non-negative)
    """

    lambda_: float

    def __post_init__(self) -> None:
        """Validate parameters after initialization."""
        self.validate()

    def validate(self) -> None:
        """Validate HP filter parameter constraints.

        A zero smoothing parameter is allowed; the filter then returns the
        input as its trend.

        Raises:
            ParameterError: If parameter constraints are violated
        """
        super().validate()
        self.lambda_ = validate_smoothing_parameter(self.lambda_, "lambda_")

    def to_array(self) -> np.ndarray:
        """Convert parameters to a NumPy array.

        Returns:
            np.ndarray: Array representation of parameters
        """
        return np.array([self.lambda_])

    @classmethod
    def from_array(cls, array: np.ndarray, **kwargs: Any) -> 'HPFilterParameters':
        """Create parameters from a NumPy array.

        Raises:
            ValueError: If the array length is not 1
        """
        if len(array) != 1:
            raise ValueError(f"Array length must be 1, got {len(array)}")

        return cls(lambda_=float(array[0]))
