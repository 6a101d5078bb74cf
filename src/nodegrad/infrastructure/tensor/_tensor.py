"""
Concrete Tensor implementation and its dense/sparse variants.

This module provides `Tensor`, the abstract base of every numeric container
in nodegrad, together with the two concrete vector kinds:

- `DenseTensor`: every position materialized in a NumPy array
- `SparseTensor`: only explicitly written non-zero positions materialized

Design notes
------------
- `get`/`put` are the only primitive accessors. Every derived operation
  (arithmetic, reductions, normalization, fillers) is written once here in
  terms of `get`, `put` and `traverse`, so it works unchanged for any storage
  policy and for non-owning views.
- Pure operations return a new tensor obtained from `zero_copy()` and then
  filled, so results keep the storage kind of the receiver. ``self_*``
  variants mutate and return the receiver.
- Binary operations check operand shapes first and raise
  `DimensionMismatchError` naming both operands. Nothing truncates or pads.
- Each tensor receives an opaque integer `handle` at construction. Equality
  and hashing are left at object identity; optimizers key per-parameter
  state by `handle`.
"""

from __future__ import annotations

import itertools
import math
import numbers
import operator
from abc import ABC, abstractmethod
from typing import Iterator, Optional, Tuple, Union

import numpy as np

from ...domain._errors import (
    DimensionMismatchError,
    NonFiniteValueError,
    TensorIndexError,
)
from ...domain._tensor import ITensor
from ...domain.utils._distribution import IDistribution
from ..utils._distributions import Uniform
from ._storage import DenseStorageMixin, SparseStorageMixin

Number = Union[int, float]

_next_handle = itertools.count(1).__next__


class Tensor(ITensor, ABC):
    """
    Fixed-size one-dimensional numeric container.

    Parameters
    ----------
    size : int
        Number of elements. Set once and immutable thereafter.

    Notes
    -----
    Subclasses supply a storage policy by implementing ``_allocate``,
    ``_read``, ``_write``, ``traverse``, ``zero_copy`` and ``is_sparse``
    (usually through `DenseStorageMixin` / `SparseStorageMixin`).
    """

    def __init__(self, size: int) -> None:
        size = operator.index(size)
        if size < 0:
            raise ValueError(f"Tensor size must be non-negative, got {size}")
        self._size: int = size
        self._handle: int = _next_handle()
        self._allocate(size)

    # ------------------------------------------------------------------
    # Storage hooks
    # ------------------------------------------------------------------
    @abstractmethod
    def _allocate(self, size: int) -> None: ...

    @abstractmethod
    def _read(self, pos: int) -> float: ...

    @abstractmethod
    def _write(self, pos: int, value: float) -> None: ...

    @abstractmethod
    def traverse(self) -> Iterator[int]:
        """
        Iterate over positions that may hold non-zero values.

        Every non-zero position is visited; some visited positions may hold
        zero. Dense storage visits the full range, sparse storage only its
        stored entries.
        """
        ...

    @abstractmethod
    def zero_copy(self) -> "Tensor":
        """
        Return a zero-filled tensor with the same shape and storage kind.
        """
        ...

    @property
    def is_sparse(self) -> bool:
        """Whether only explicitly written positions are materialized."""
        return False

    # ------------------------------------------------------------------
    # Identity and structure
    # ------------------------------------------------------------------
    @property
    def size(self) -> int:
        return self._size

    @property
    def shape(self) -> Tuple[int, ...]:
        return (self._size,)

    @property
    def handle(self) -> int:
        return self._handle

    def describe(self) -> str:
        """
        Describe the kind and shape of the tensor, e.g. ``"DenseTensor (5)"``.
        """
        return f"{type(self).__name__} ({self.size})"

    def is_matching(self, other: "Tensor") -> bool:
        """
        Check whether binary operations between the two tensors are allowed.

        Vectors match vectors of the same size; matrices match matrices with
        the same rows and columns. A vector never matches a matrix.
        """
        return tuple(self.shape) == tuple(other.shape)

    def assert_matching(self, other: "Tensor") -> None:
        """
        Raises
        ------
        DimensionMismatchError
            If `is_matching` is False. The message names both operands.
        """
        if not self.is_matching(other):
            raise DimensionMismatchError(self.describe(), other.describe())

    def assert_size(self, size: int) -> None:
        if self.size != size:
            raise DimensionMismatchError(self.describe(), f"size {size}")

    def assert_finite(self) -> None:
        """
        Fail fast if any traversed element is NaN or infinite.

        This is an explicit, opt-in check. It is not enforced on mutation.

        Raises
        ------
        NonFiniteValueError
            On the first non-finite element found.
        """
        for i in self.traverse():
            value = self.get(i)
            if not math.isfinite(value):
                raise NonFiniteValueError(i, value)

    # ------------------------------------------------------------------
    # Primitive accessors
    # ------------------------------------------------------------------
    def _check_position(self, pos: int) -> int:
        pos = operator.index(pos)
        if pos < 0 or pos >= self._size:
            raise TensorIndexError(pos, f"[0, {self._size})")
        return pos

    def get(self, pos: int) -> float:
        """
        Retrieve the value at `pos`.

        Raises
        ------
        TensorIndexError
            If `pos` is outside ``[0, size)``.
        """
        return self._read(self._check_position(pos))

    def put(self, pos: int, value: float) -> "Tensor":
        """
        Assign `value` at `pos`.

        Returns
        -------
        Tensor
            The receiver.

        Raises
        ------
        TensorIndexError
            If `pos` is outside ``[0, size)``.
        NonFiniteValueError
            If `value` is NaN.
        """
        pos = self._check_position(pos)
        value = float(value)
        if math.isnan(value):
            raise NonFiniteValueError(pos, value)
        self._write(pos, value)
        return self

    def put_add(self, pos: int, value: float) -> "Tensor":
        """Add `value` to the element at `pos`."""
        return self.put(pos, self.get(pos) + value)

    def __iter__(self) -> Iterator[int]:
        return self.traverse()

    def __len__(self) -> int:
        return self._size

    def num_non_zero_elements(self) -> int:
        """
        Count traversed positions. This over-approximates for dense storage.
        """
        return sum(1 for _ in self.traverse())

    # ------------------------------------------------------------------
    # Copies
    # ------------------------------------------------------------------
    def copy(self) -> "Tensor":
        """
        Return an independent deep copy (zero copy refilled from traversal).
        """
        res = self.zero_copy()
        for i in self.traverse():
            res.put(i, self.get(i))
        return res

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------
    def add(self, other: Union["Tensor", Number]) -> "Tensor":
        """
        Elementwise addition with a tensor, or addition of a scalar to every
        element.
        """
        if isinstance(other, numbers.Number):
            res = self.zero_copy()
            for i in range(self.size):
                res.put(i, self.get(i) + other)
            return res
        self.assert_matching(other)
        res = self.copy()
        for i in other.traverse():
            res.put(i, res.get(i) + other.get(i))
        return res

    def self_add(self, other: Union["Tensor", Number]) -> "Tensor":
        """In-place variant of `add`."""
        if isinstance(other, numbers.Number):
            for i in range(self.size):
                self.put(i, self.get(i) + other)
            return self
        self.assert_matching(other)
        for i in other.traverse():
            self.put(i, self.get(i) + other.get(i))
        return self

    def subtract(self, other: "Tensor") -> "Tensor":
        self.assert_matching(other)
        res = self.copy()
        for i in other.traverse():
            res.put(i, res.get(i) - other.get(i))
        return res

    def self_subtract(self, other: "Tensor") -> "Tensor":
        self.assert_matching(other)
        for i in other.traverse():
            self.put(i, self.get(i) - other.get(i))
        return self

    def multiply(self, other: Union["Tensor", Number]) -> "Tensor":
        """
        Elementwise (Hadamard) product with a tensor, or scaling by a number.
        """
        res = self.zero_copy()
        if isinstance(other, numbers.Number):
            for i in self.traverse():
                res.put(i, self.get(i) * other)
            return res
        self.assert_matching(other)
        for i in self.traverse():
            res.put(i, self.get(i) * other.get(i))
        return res

    def self_multiply(self, other: Union["Tensor", Number]) -> "Tensor":
        """In-place variant of `multiply`."""
        if isinstance(other, numbers.Number):
            for i in self.traverse():
                self.put(i, self.get(i) * other)
            return self
        self.assert_matching(other)
        for i in self.traverse():
            self.put(i, self.get(i) * other.get(i))
        return self

    def sqrt(self) -> "Tensor":
        """Square root of the absolute value of each element."""
        res = self.zero_copy()
        for i in self.traverse():
            res.put(i, math.sqrt(abs(self.get(i))))
        return res

    def self_sqrt(self) -> "Tensor":
        for i in self.traverse():
            self.put(i, math.sqrt(abs(self.get(i))))
        return self

    def inverse(self) -> "Tensor":
        """Inverse of each non-zero element. Zeros stay zero."""
        res = self.zero_copy()
        for i in self.traverse():
            value = self.get(i)
            if value != 0:
                res.put(i, 1.0 / value)
        return res

    def self_inverse(self) -> "Tensor":
        for i in self.traverse():
            value = self.get(i)
            if value != 0:
                self.put(i, 1.0 / value)
        return self

    # ------------------------------------------------------------------
    # Reductions
    # ------------------------------------------------------------------
    def dot(self, other: "Tensor", other2: Optional["Tensor"] = None) -> float:
        """
        Dot product with `other`, or the triple product with `other` and
        `other2` when the second tensor is given.
        """
        self.assert_matching(other)
        res = 0.0
        if other2 is None:
            for i in self.traverse():
                res += self.get(i) * other.get(i)
            return res
        self.assert_matching(other2)
        for i in self.traverse():
            res += self.get(i) * other.get(i) * other2.get(i)
        return res

    def norm(self) -> float:
        """L2 norm."""
        res = 0.0
        for i in self.traverse():
            value = self.get(i)
            res += value * value
        return math.sqrt(res)

    def sum(self) -> float:
        res = 0.0
        for i in self.traverse():
            res += self.get(i)
        return res

    def max(self) -> float:
        """Maximum traversed element, ``-inf`` for an empty tensor."""
        res = -math.inf
        for i in self.traverse():
            value = self.get(i)
            if value > res:
                res = value
        return res

    def min(self) -> float:
        """Minimum traversed element, ``+inf`` for an empty tensor."""
        res = math.inf
        for i in self.traverse():
            value = self.get(i)
            if value < res:
                res = value
        return res

    # ------------------------------------------------------------------
    # Normalization
    # ------------------------------------------------------------------
    def normalized(self) -> "Tensor":
        """
        L2-normalized copy. Returns an equivalent copy when the norm is zero.
        """
        norm = self.norm()
        if norm == 0:
            return self.copy()
        res = self.zero_copy()
        for i in self.traverse():
            res.put(i, self.get(i) / norm)
        return res

    def to_probability(self) -> "Tensor":
        """
        Copy divided by the element sum. Returns an equivalent copy when the
        sum is zero.
        """
        total = self.sum()
        if total == 0:
            return self.copy()
        res = self.zero_copy()
        for i in self.traverse():
            res.put(i, self.get(i) / total)
        return res

    def set_to_normalized(self) -> "Tensor":
        norm = self.norm()
        if norm != 0:
            for i in self.traverse():
                self.put(i, self.get(i) / norm)
        return self

    def set_to_probability(self) -> "Tensor":
        total = self.sum()
        if total != 0:
            for i in self.traverse():
                self.put(i, self.get(i) / total)
        return self

    # ------------------------------------------------------------------
    # Fillers
    # ------------------------------------------------------------------
    def set_to_zero(self) -> "Tensor":
        for i in range(self.size):
            self.put(i, 0.0)
        return self

    def set_to_ones(self) -> "Tensor":
        for i in range(self.size):
            self.put(i, 1.0)
        return self

    def set_to_uniform(self) -> "Tensor":
        """Set every element to ``1/size``."""
        for i in range(self.size):
            self.put(i, 1.0 / self.size)
        return self

    def set_to_random(self, distribution: Optional[IDistribution] = None) -> "Tensor":
        """
        Fill every element with a sample of `distribution` (uniform in
        ``[0, 1)`` by default).
        """
        if distribution is None:
            distribution = Uniform()
        for i in range(self.size):
            self.put(i, distribution.sample())
        return self

    # ------------------------------------------------------------------
    # Conversions
    # ------------------------------------------------------------------
    def to_numpy(self) -> np.ndarray:
        """
        Return the elements as a new NumPy array shaped like the tensor.
        """
        values = np.zeros(self.size, dtype=np.float64)
        for i in self.traverse():
            values[i] = self.get(i)
        return values.reshape(self.shape)

    def copy_from_numpy(self, arr) -> "Tensor":
        """
        Overwrite every element from an array with the same shape.

        Raises
        ------
        DimensionMismatchError
            If the array shape differs from the tensor shape.
        """
        arr = np.asarray(arr, dtype=np.float64)
        if tuple(arr.shape) != tuple(self.shape):
            raise DimensionMismatchError(self.describe(), f"ndarray {arr.shape}")
        for i, value in enumerate(arr.reshape(-1)):
            self.put(i, float(value))
        return self

    def to_double(self) -> float:
        """
        Convert a tensor of size 1 to a float.

        Raises
        ------
        DimensionMismatchError
            If the tensor does not have exactly one element.
        """
        self.assert_size(1)
        return self.get(0)

    @staticmethod
    def from_double(value: float) -> "DenseTensor":
        """Create a dense tensor of size 1 holding `value`."""
        res = DenseTensor(1)
        res.put(0, value)
        return res

    @staticmethod
    def from_range(start: int, end: Optional[int] = None) -> "DenseTensor":
        """
        Create a dense tensor holding ``[start, start+1, ..., end-1]``.
        Called with one argument, the range is ``[0, start)``.
        """
        if end is None:
            start, end = 0, start
        res = DenseTensor(end - start)
        for pos in range(end - start):
            res.put(pos, start + pos)
        return res

    @staticmethod
    def from_numpy(arr, *, sparse: bool = False) -> "Tensor":
        """
        Create a vector from a one-dimensional array.
        """
        arr = np.asarray(arr, dtype=np.float64)
        if arr.ndim != 1:
            raise DimensionMismatchError("vector", f"ndarray {arr.shape}")
        res = SparseTensor(arr.shape[0]) if sparse else DenseTensor(arr.shape[0])
        return res.copy_from_numpy(arr)

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------
    def __add__(self, other: Union["Tensor", Number]) -> "Tensor":
        return self.add(other)

    def __radd__(self, other: Number) -> "Tensor":
        return self.add(other)

    def __sub__(self, other: Union["Tensor", Number]) -> "Tensor":
        if isinstance(other, numbers.Number):
            return self.add(-other)
        return self.subtract(other)

    def __rsub__(self, other: Number) -> "Tensor":
        return self.multiply(-1.0).add(other)

    def __mul__(self, other: Union["Tensor", Number]) -> "Tensor":
        return self.multiply(other)

    def __rmul__(self, other: Number) -> "Tensor":
        return self.multiply(other)

    def __neg__(self) -> "Tensor":
        return self.multiply(-1.0)

    def __str__(self) -> str:
        return ",".join(str(self.get(i)) for i in range(self.size))

    def __repr__(self) -> str:
        return f"<{self.describe()} handle={self._handle}>"


class DenseTensor(DenseStorageMixin, Tensor):
    """
    Vector with every position materialized in a NumPy array.
    """

    def zero_copy(self) -> "DenseTensor":
        return DenseTensor(self.size)


class SparseTensor(SparseStorageMixin, Tensor):
    """
    Vector that materializes only explicitly written non-zero positions.
    """

    def zero_copy(self) -> "SparseTensor":
        return SparseTensor(self.size)
