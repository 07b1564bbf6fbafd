'''
Abstract base classes for macro-transforms.

This module defines the base class that establishes the contract shared by the
stateful filter objects: a descriptive name, a flag recording whether the
object has been applied to data, and access to the most recent result.
'''

import abc
from typing import Any, Generic, Optional, TypeVar, cast

from macrotransforms.core.exceptions import NotFittedError

# Type variables for generic base classes
T = TypeVar('T')  # Generic type for parameters
R = TypeVar('R')  # Generic type for results
D = TypeVar('D')  # Generic type for data


class ModelBase(abc.ABC, Generic[T, R, D]):
    """Abstract base class for filters and models.

    Type Parameters:
        T: The parameter type
        R: The result type
        D: The data type accepted
    """

    def __init__(self, name: str = "Model"):
        """Initialize the model with a name.

        Args:
            name: A descriptive name for the model
        """
        self._name = name
        self._fitted = False
        self._results: Optional[R] = None

    @property
    def name(self) -> str:
        """Get the model name."""
        return self._name

    @property
    def fitted(self) -> bool:
        """Check if the model has been applied to data."""
        return self._fitted

    @property
    def results(self) -> R:
        """Get the most recent results.

        Raises:
            NotFittedError: If the model has not been applied to data
        """
        if not self._fitted:
            raise NotFittedError(
                f"{self._name} has not been applied to data yet.",
                model_type=self._name,
                operation="results"
            )
        return cast(R, self._results)

    @abc.abstractmethod
    def validate_data(self, data: D) -> Any:
        """Validate the input data.

        Raises:
            NotConvertibleToSeriesError: If the data has an incorrect type
        """
        pass

    def summary(self) -> str:
        """Generate a text summary of the model."""
        if not self._fitted:
            return f"Model: {self._name} (not fitted)"

        if hasattr(self._results, "summary") and callable(getattr(self._results, "summary")):
            return cast(Any, self._results).summary()

        return f"Model: {self._name} (fitted)"

    def __str__(self) -> str:
        return self.summary()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self._name}', fitted={self._fitted})"
