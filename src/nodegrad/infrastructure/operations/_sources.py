"""
Value-holding operations: constants, trainable parameters and variables.

These operations have arity 0. They sit at the sources of an execution graph
and return a held tensor from `forward`. They never receive `partial` calls;
instead, the graph hands the error accumulated at a `Parameter` node to an
optimizer.
"""

from __future__ import annotations

from typing import Optional, Sequence

from ...domain._errors import GraphWiringError
from ...domain._operation import Operation
from ..tensor._tensor import Tensor


class _ValueOperation(Operation):
    """
    Shared base of operations that return a held tensor.
    """

    arity = 0

    def __init__(self, value: Optional[Tensor] = None) -> None:
        self._value = value

    @property
    def value(self) -> Optional[Tensor]:
        return self._value

    def forward(self, inputs: Sequence[Tensor]) -> Tensor:
        if self._value is None:
            raise GraphWiringError(f"{self.describe()} has no value")
        return self._value

    def partial(self, input_id, inputs, output, error) -> Optional[Tensor]:
        return None

    def describe(self) -> str:
        if self._value is None:
            return type(self).__name__
        return f"{type(self).__name__} {self._value.describe()}"


class Constant(_ValueOperation):
    """
    Fixed tensor (e.g. an adjacency matrix or node features).

    A constant never contributes a trainable gradient, and the graph never
    propagates error into it.
    """

    def __init__(self, value: Tensor) -> None:
        super().__init__(value)

    @property
    def is_constant(self) -> bool:
        return True

    def set_to(self, value: Tensor) -> None:
        """Replace the held tensor."""
        self._value = value


class Parameter(_ValueOperation):
    """
    Trainable tensor.

    The held tensor's `handle` is its identity for the lifetime of training;
    the optimizer mutates the held tensor in place and keys its moment state
    by that handle, so the tensor object must never be replaced.
    """

    def __init__(self, value: Tensor) -> None:
        super().__init__(value)

    @property
    def is_trainable(self) -> bool:
        return True


class Variable(_ValueOperation):
    """
    Placeholder whose value is fed by the caller on every forward pass.
    """

    def __init__(self) -> None:
        super().__init__(None)

    def feed(self, value: Tensor) -> None:
        self._value = value
