"""
Non-owning matrix and vector views.

Views present the full `Matrix`/`Tensor` contract over data owned by other
tensors. They never copy backing storage: mutating the underlying tensor is
visible through the view, and the view's shape is derived from the backing
data rather than stored independently.

Views
-----
- `ColumnRepetition`: a vector repeated as every column of a matrix.
- `RowCollection`: equal-size vectors presented as the rows of a matrix.
- `AccessRow` / `AccessCol`: one row/column of a matrix as a vector.

Notes
-----
- `put` on a view writes through to the backing tensor when the view is
  mutable, and raises `ReadOnlyViewError` otherwise.
- `traverse` walks only positions that are genuinely present in the backing
  data, so backward computations over views of sparse data stay sparse.
- `zero_copy` materializes: it returns an owning tensor of the same shape,
  sparse when the backing data is sparse.
"""

from __future__ import annotations

import operator
from abc import abstractmethod
from typing import Iterator, List, Sequence

from ...domain._errors import DimensionMismatchError, ReadOnlyViewError
from ..tensor._tensor import DenseTensor, SparseTensor, Tensor
from ._matrix import Matrix


class ColumnRepetition(Matrix):
    """
    Matrix whose every column is the same backing vector.

    Element ``(row, col)`` equals ``column.get(row)`` for all ``col``.

    Parameters
    ----------
    times : int
        Number of columns (repetitions).
    column : Tensor
        Backing vector; its size gives the number of rows.
    mutable : bool, optional
        Whether `put` writes through to `column`. Defaults to False, because
        one write changes a whole row of the view.
    """

    def __init__(self, times: int, column: Tensor, mutable: bool = False) -> None:
        self._column = column
        self._times = operator.index(times)
        self._mutable = bool(mutable)
        super().__init__(column.size, self._times)

    @property
    def rows(self) -> int:
        return self._column.size

    @property
    def cols(self) -> int:
        return self._times

    @property
    def column(self) -> Tensor:
        return self._column

    @property
    def is_sparse(self) -> bool:
        return self._column.is_sparse

    def _allocate(self, size: int) -> None:
        pass

    def _read(self, pos: int) -> float:
        return self._column.get(pos // self._times)

    def _write(self, pos: int, value: float) -> None:
        if not self._mutable:
            raise ReadOnlyViewError(self.describe())
        self._column.put(pos // self._times, value)

    def traverse(self) -> Iterator[int]:
        times = self._times
        for row in self._column.traverse():
            for col in range(times):
                yield row * times + col

    def zero_copy(self) -> Matrix:
        return self._empty_like(self.rows, self.cols, self.is_sparse)


class RowCollection(Matrix):
    """
    Matrix whose rows are a list of equal-size backing vectors.

    Parameters
    ----------
    rows : Sequence[Tensor]
        Backing vectors, one per row. All must have the same size.
    mutable : bool, optional
        Whether `put` writes through to the row vectors. Defaults to True.

    Raises
    ------
    DimensionMismatchError
        If the vectors do not all have the same size.
    """

    def __init__(self, rows: Sequence[Tensor], mutable: bool = True) -> None:
        self._row_tensors: List[Tensor] = list(rows)
        for row in self._row_tensors[1:]:
            self._row_tensors[0].assert_matching(row)
        self._mutable = bool(mutable)
        cols = self._row_tensors[0].size if self._row_tensors else 0
        super().__init__(len(self._row_tensors), cols)

    @property
    def rows(self) -> int:
        return len(self._row_tensors)

    @property
    def cols(self) -> int:
        return self._row_tensors[0].size if self._row_tensors else 0

    @property
    def is_sparse(self) -> bool:
        return bool(self._row_tensors) and all(row.is_sparse for row in self._row_tensors)

    def _allocate(self, size: int) -> None:
        pass

    def _read(self, pos: int) -> float:
        row, col = divmod(pos, self.cols)
        return self._row_tensors[row].get(col)

    def _write(self, pos: int, value: float) -> None:
        if not self._mutable:
            raise ReadOnlyViewError(self.describe())
        row, col = divmod(pos, self.cols)
        self._row_tensors[row].put(col, value)

    def traverse(self) -> Iterator[int]:
        cols = self.cols
        for row, tensor in enumerate(self._row_tensors):
            for col in tensor.traverse():
                yield row * cols + col

    def zero_copy(self) -> Matrix:
        return self._empty_like(self.rows, self.cols, self.is_sparse)


class _MatrixLineView(Tensor):
    """
    Shared base for vector views over one line (row or column) of a matrix.
    """

    def __init__(self, matrix: Matrix, index: int, size: int, mutable: bool) -> None:
        self._matrix = matrix
        self._index = operator.index(index)
        self._mutable = bool(mutable)
        super().__init__(size)

    @property
    def is_sparse(self) -> bool:
        return self._matrix.is_sparse

    def _allocate(self, size: int) -> None:
        pass

    @abstractmethod
    def _coordinates(self, pos: int) -> tuple: ...

    def _read(self, pos: int) -> float:
        return self._matrix.get_element(*self._coordinates(pos))

    def _write(self, pos: int, value: float) -> None:
        if not self._mutable:
            raise ReadOnlyViewError(self.describe())
        self._matrix.put_element(*self._coordinates(pos), value)

    def zero_copy(self) -> Tensor:
        return SparseTensor(self.size) if self.is_sparse else DenseTensor(self.size)


class AccessRow(_MatrixLineView):
    """
    Vector view over row `row` of `matrix`; its size is ``matrix.cols``.
    """

    def __init__(self, matrix: Matrix, row: int, mutable: bool = True) -> None:
        if not 0 <= row < matrix.rows:
            raise DimensionMismatchError(matrix.describe(), f"row {row}")
        super().__init__(matrix, row, matrix.cols, mutable)

    def _coordinates(self, pos: int) -> tuple:
        return (self._index, pos)

    def traverse(self) -> Iterator[int]:
        if not self._matrix.is_sparse:
            return iter(range(self.size))
        return iter([col for row, col in self._matrix.entries() if row == self._index])


class AccessCol(_MatrixLineView):
    """
    Vector view over column `col` of `matrix`; its size is ``matrix.rows``.
    """

    def __init__(self, matrix: Matrix, col: int, mutable: bool = True) -> None:
        if not 0 <= col < matrix.cols:
            raise DimensionMismatchError(matrix.describe(), f"col {col}")
        super().__init__(matrix, col, matrix.rows, mutable)

    def _coordinates(self, pos: int) -> tuple:
        return (pos, self._index)

    def traverse(self) -> Iterator[int]:
        if not self._matrix.is_sparse:
            return iter(range(self.size))
        return iter([row for row, col in self._matrix.entries() if col == self._index])
