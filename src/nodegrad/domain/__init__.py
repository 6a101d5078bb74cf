"""
Backend-agnostic contracts for nodegrad.

The domain layer holds the structural interfaces (tensors, operations,
optimizers, distributions) and the error taxonomy. It must not import NumPy
or anything from the infrastructure layer.
"""

from ._errors import (
    DimensionMismatchError,
    GraphWiringError,
    HyperparameterRangeError,
    NodeArityError,
    NonFiniteValueError,
    ReadOnlyViewError,
    TensorIndexError,
)
from ._operation import Operation
from ._optimizers import IOptimizer
from ._tensor import IMatrix, ITensor
from .utils._distribution import IDistribution

__all__ = [
    DimensionMismatchError.__name__,
    GraphWiringError.__name__,
    HyperparameterRangeError.__name__,
    NodeArityError.__name__,
    NonFiniteValueError.__name__,
    ReadOnlyViewError.__name__,
    TensorIndexError.__name__,
    Operation.__name__,
    IOptimizer.__name__,
    IMatrix.__name__,
    ITensor.__name__,
    IDistribution.__name__,
]
