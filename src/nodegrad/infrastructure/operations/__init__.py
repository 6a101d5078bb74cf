"""
Operation nodes placed in an `ExecutionGraph`.
"""

from ._activations import Sigmoid, sigmoid, sigmoid_derivative
from ._linear import Add, MatMul, Repeat, Sum
from ._sources import Constant, Parameter, Variable

__all__ = [
    Constant.__name__,
    Parameter.__name__,
    Variable.__name__,
    MatMul.__name__,
    Sum.__name__,
    Repeat.__name__,
    Add.__name__,
    Sigmoid.__name__,
    sigmoid.__name__,
    sigmoid_derivative.__name__,
]
