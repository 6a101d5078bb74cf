"""
Tensor and matrix interface definitions.

This module defines the domain-level interfaces for the numeric containers
the computation graph operates on. The interfaces are structural
(`typing.Protocol`) so that any storage policy satisfying the contract can
participate in graph evaluation and optimization.

Notes
-----
- `get`/`put` are the only primitive accessors. Every derived operation is
  expressed in terms of them plus `traverse`.
- `traverse` guarantees that every position holding a non-zero value is
  visited, but it *may* also visit positions holding zero. Consumers must
  treat a visited zero as valid and never assume non-zero.
"""

from __future__ import annotations

from typing import Iterator, Protocol, Tuple, Union, runtime_checkable

Number = Union[int, float]


@runtime_checkable
class ITensor(Protocol):
    """
    Fixed-size, one-dimensional numeric container.

    The size is set once at construction and never changes afterwards.
    """

    @property
    def size(self) -> int:
        """Return the number of elements."""
        ...

    @property
    def shape(self) -> Tuple[int, ...]:
        """Return the shape used for operand compatibility checks."""
        ...

    @property
    def handle(self) -> int:
        """
        Return the opaque identity handle assigned at construction.

        Two distinct tensors never share a handle, even when their contents
        are numerically equal. Optimizers key per-parameter state by it.
        """
        ...

    def get(self, pos: int) -> float:
        """
        Retrieve the value at `pos`.

        Raises
        ------
        TensorIndexError
            If `pos` is outside ``[0, size)``.
        """
        ...

    def put(self, pos: int, value: float) -> "ITensor":
        """
        Assign `value` at `pos` and return the receiver.

        Raises
        ------
        TensorIndexError
            If `pos` is outside ``[0, size)``.
        NonFiniteValueError
            If `value` is NaN.
        """
        ...

    def traverse(self) -> Iterator[int]:
        """
        Iterate over positions that may hold non-zero values.
        """
        ...

    def zero_copy(self) -> "ITensor":
        """Return a zero-filled tensor of the same size and storage kind."""
        ...

    def describe(self) -> str:
        """Return a short description naming the kind and shape."""
        ...


@runtime_checkable
class IMatrix(ITensor, Protocol):
    """
    Two-dimensional specialization of `ITensor` with row-major addressing.

    Invariants
    ----------
    - ``rows * cols == size``.
    - Shapes are checked before multiply/elementwise operations.
    """

    @property
    def rows(self) -> int:
        """Return the number of rows."""
        ...

    @property
    def cols(self) -> int:
        """Return the number of columns."""
        ...

    def get_element(self, row: int, col: int) -> float:
        """Retrieve the element at ``(row, col)``."""
        ...

    def put_element(self, row: int, col: int, value: float) -> "IMatrix":
        """Assign the element at ``(row, col)`` and return the receiver."""
        ...

    def entries(self) -> Iterator[Tuple[int, int]]:
        """Iterate over the ``(row, col)`` pairs visited by `traverse`."""
        ...

    def matmul(
        self,
        other: "IMatrix",
        transpose_self: bool = False,
        transpose_other: bool = False,
    ) -> "IMatrix":
        """
        Multiply this matrix with `other`, honoring transpose flags.

        Raises
        ------
        DimensionMismatchError
            If the inner dimensions differ after applying the flags.
        """
        ...
