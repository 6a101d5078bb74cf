"""
Storage policy mixins for tensors and matrices.

This module provides the two backing-storage policies shared by vectors and
matrices. Each mixin implements the storage hooks declared by `Tensor`:

- ``_allocate(size)``: create zero-filled backing storage
- ``_read(pos)`` / ``_write(pos, value)``: unchecked element access
- ``traverse()``: positions that may hold non-zero values
- ``is_sparse``: the storage kind, used to pick result kinds

Design notes
------------
- Bounds and NaN checks live in `Tensor.get`/`Tensor.put`; the hooks here are
  only ever called with validated arguments.
- Dense traversal over-approximates (every position is visited); sparse
  traversal visits stored entries only. Both satisfy the traversal contract.
- Sparse traversal iterates over a sorted snapshot of the stored positions so
  that callers may write into the same tensor while traversing it.
"""

from __future__ import annotations

from typing import Dict, Iterator

import numpy as np


class DenseStorageMixin:
    """
    Materializes every position in a contiguous NumPy ``float64`` array.
    """

    _size: int
    _values: np.ndarray

    def _allocate(self, size: int) -> None:
        self._values = np.zeros(size, dtype=np.float64)

    def _read(self, pos: int) -> float:
        return float(self._values[pos])

    def _write(self, pos: int, value: float) -> None:
        self._values[pos] = value

    def traverse(self) -> Iterator[int]:
        """
        Iterate over the full index range ``0 .. size-1``.
        """
        return iter(range(self._size))

    @property
    def is_sparse(self) -> bool:
        return False

    def to_numpy(self) -> np.ndarray:
        """
        Return a copy of the backing array, shaped like the tensor.
        """
        return self._values.reshape(self.shape).copy()


class SparseStorageMixin:
    """
    Materializes only explicitly written non-zero positions in a dict.

    Reads of unwritten positions return 0. Writing ``0.0`` removes the entry,
    which keeps traversal proportional to the number of non-zeros.
    """

    _values: Dict[int, float]

    def _allocate(self, size: int) -> None:
        self._values = {}

    def _read(self, pos: int) -> float:
        return self._values.get(pos, 0.0)

    def _write(self, pos: int, value: float) -> None:
        if value == 0.0:
            self._values.pop(pos, None)
        else:
            self._values[pos] = value

    def traverse(self) -> Iterator[int]:
        """
        Iterate over stored positions in ascending order.
        """
        return iter(sorted(self._values))

    @property
    def is_sparse(self) -> bool:
        return True
