"""
Matrix specialization of `Tensor`.

This module defines `Matrix`, a two-dimensional `Tensor` with row-major
addressing, and its two owning storage kinds `DenseMatrix` and
`SparseMatrix`.

Design notes
------------
- Element ``(row, col)`` lives at position ``row * cols + col``; every
  inherited vector operation therefore works on matrices unchanged.
- Shapes are compared as ``(rows, cols)`` tuples, so elementwise operations
  between matrices of different shapes (or a matrix and a vector) raise
  `DimensionMismatchError`.
- `matmul` walks only the traversed entries of both operands, which keeps
  products with sparse adjacency matrices proportional to their non-zeros.
  The result is sparse only when both operands are sparse-backed.
"""

from __future__ import annotations

import operator
from typing import Dict, Iterator, List, Tuple

import numpy as np

from ...domain._errors import DimensionMismatchError, TensorIndexError
from ...domain._tensor import IMatrix
from ..tensor._storage import DenseStorageMixin, SparseStorageMixin
from ..tensor._tensor import Tensor


class Matrix(Tensor, IMatrix):
    """
    Two-dimensional tensor with ``rows x cols`` elements.

    Parameters
    ----------
    rows : int
        Number of rows.
    cols : int
        Number of columns.
    """

    def __init__(self, rows: int, cols: int) -> None:
        rows = operator.index(rows)
        cols = operator.index(cols)
        if rows < 0 or cols < 0:
            raise ValueError(f"Matrix dimensions must be non-negative, got ({rows}, {cols})")
        self._rows: int = rows
        self._cols: int = cols
        super().__init__(rows * cols)

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.rows, self.cols)

    def describe(self) -> str:
        return f"{type(self).__name__} ({self.rows},{self.cols})"

    def _element_position(self, row: int, col: int) -> int:
        row = operator.index(row)
        col = operator.index(col)
        if row < 0 or row >= self.rows or col < 0 or col >= self.cols:
            raise TensorIndexError((row, col), f"({self.rows},{self.cols})")
        return row * self.cols + col

    def get_element(self, row: int, col: int) -> float:
        """
        Retrieve the element at ``(row, col)``.

        Raises
        ------
        TensorIndexError
            If either index is out of range.
        """
        return self.get(self._element_position(row, col))

    def put_element(self, row: int, col: int, value: float) -> "Matrix":
        """
        Assign the element at ``(row, col)`` and return the receiver.
        """
        self.put(self._element_position(row, col), value)
        return self

    def entries(self) -> Iterator[Tuple[int, int]]:
        """
        Iterate over the ``(row, col)`` pairs of the traversed positions.
        """
        cols = self.cols
        for pos in self.traverse():
            yield divmod(pos, cols)

    def _empty_like(self, rows: int, cols: int, sparse: bool) -> "Matrix":
        return SparseMatrix(rows, cols) if sparse else DenseMatrix(rows, cols)

    def transposed(self) -> "Matrix":
        """
        Return a materialized transpose with the same storage kind.
        """
        res = self._empty_like(self.cols, self.rows, self.is_sparse)
        for row, col in self.entries():
            res.put_element(col, row, self.get_element(row, col))
        return res

    def matmul(
        self,
        other: "Matrix",
        transpose_self: bool = False,
        transpose_other: bool = False,
    ) -> "Matrix":
        """
        Matrix multiplication honoring transpose flags.

        Computes ``op(self) · op(other)`` where ``op`` transposes its operand
        when the corresponding flag is set. Backward rules use the flags to
        obtain ``E·Hᵗ`` and ``Wᵗ·E`` without materializing transposes.

        Parameters
        ----------
        other : Matrix
            Right-hand operand.
        transpose_self : bool, optional
            Use the transpose of this matrix. Defaults to False.
        transpose_other : bool, optional
            Use the transpose of `other`. Defaults to False.

        Returns
        -------
        Matrix
            The product, sparse only if both operands are sparse-backed.

        Raises
        ------
        DimensionMismatchError
            If `other` is not a Matrix, or if the inner dimensions differ
            after applying the flags.
        """
        if not isinstance(other, Matrix):
            raise DimensionMismatchError(
                self.describe(), other.describe(), "matmul expects a Matrix operand"
            )

        out_rows, inner = (self.cols, self.rows) if transpose_self else (self.rows, self.cols)
        other_inner, out_cols = (
            (other.cols, other.rows) if transpose_other else (other.rows, other.cols)
        )
        if inner != other_inner:
            raise DimensionMismatchError(
                self.describe(),
                other.describe(),
                f"matmul inner dimensions {inner} vs {other_inner}, "
                f"transpose_self={transpose_self}, transpose_other={transpose_other}",
            )

        # inner index -> [(output col, value)]
        right: Dict[int, List[Tuple[int, float]]] = {}
        for row, col in other.entries():
            value = other.get_element(row, col)
            if value == 0.0:
                continue
            k, j = (col, row) if transpose_other else (row, col)
            right.setdefault(k, []).append((j, value))

        res = self._empty_like(out_rows, out_cols, self.is_sparse and other.is_sparse)
        for row, col in self.entries():
            value = self.get_element(row, col)
            if value == 0.0:
                continue
            i, k = (col, row) if transpose_self else (row, col)
            for j, other_value in right.get(k, ()):
                res.put_element(i, j, res.get_element(i, j) + value * other_value)
        return res

    def access_row(self, row: int) -> Tensor:
        """
        Return a mutable vector view over one row (no data is copied).
        """
        from ._views import AccessRow

        return AccessRow(self, row)

    def access_col(self, col: int) -> Tensor:
        """
        Return a mutable vector view over one column (no data is copied).
        """
        from ._views import AccessCol

        return AccessCol(self, col)

    @staticmethod
    def from_numpy(arr, *, sparse: bool = False) -> "Matrix":
        """
        Create a matrix from a two-dimensional array.
        """
        arr = np.asarray(arr, dtype=np.float64)
        if arr.ndim != 2:
            raise DimensionMismatchError("matrix", f"ndarray {arr.shape}")
        rows, cols = arr.shape
        res = SparseMatrix(rows, cols) if sparse else DenseMatrix(rows, cols)
        res.copy_from_numpy(arr)
        return res


class DenseMatrix(DenseStorageMixin, Matrix):
    """
    Matrix with every element materialized in a NumPy array.
    """

    def zero_copy(self) -> "DenseMatrix":
        return DenseMatrix(self.rows, self.cols)


class SparseMatrix(SparseStorageMixin, Matrix):
    """
    Matrix that materializes only explicitly written non-zero elements.
    """

    def zero_copy(self) -> "SparseMatrix":
        return SparseMatrix(self.rows, self.cols)
