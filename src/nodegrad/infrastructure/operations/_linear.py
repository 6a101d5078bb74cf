"""
Linear-algebra operations: matrix multiply, summation, repetition and
elementwise addition.

Each class implements ``forward(inputs)`` and
``partial(input_id, inputs, output, error)``:

| Operation | forward | partial(0) | partial(1) |
|---|---|---|---|
| MatMul(W, H) | ``W·H`` | ``E·Hᵗ`` | ``Wᵗ·E`` |
| Sum(matrix) | row sums | ``E[row]`` at each traversed (row, col) | - |
| Sum(vector) | scalar sum | ones scaled by the scalar error | - |
| Repeat(v, n) | ``v`` repeated as ``n`` columns | row sums of ``E`` | None |
| Add(a, b) | ``a + b`` | ``E`` | ``E`` |
"""

from __future__ import annotations

from typing import Optional, Sequence

from ...domain._errors import DimensionMismatchError
from ...domain._operation import Operation
from ..matrix._matrix import Matrix
from ..matrix._views import ColumnRepetition
from ..tensor._tensor import DenseTensor, Tensor


def _as_matrix(tensor: Tensor, operation: Operation) -> Matrix:
    if not isinstance(tensor, Matrix):
        raise DimensionMismatchError(
            tensor.describe(), "Matrix", f"{operation.describe()} expects a Matrix"
        )
    return tensor


class MatMul(Operation):
    """
    Matrix product ``W·H`` of its two inputs.
    """

    arity = 2

    def forward(self, inputs: Sequence[Tensor]) -> Tensor:
        W = _as_matrix(inputs[0], self)
        H = _as_matrix(inputs[1], self)
        return W.matmul(H)

    def partial(self, input_id, inputs, output, error) -> Optional[Tensor]:
        E = _as_matrix(error, self)
        W = _as_matrix(inputs[0], self)
        H = _as_matrix(inputs[1], self)
        if input_id == 0:
            return E.matmul(H, False, True)
        return W.matmul(E, True, False)


class Sum(Operation):
    """
    Row-wise sum of a matrix into a dense vector, or the sum of a vector into
    a tensor of size 1.
    """

    arity = 1

    def forward(self, inputs: Sequence[Tensor]) -> Tensor:
        x = inputs[0]
        if isinstance(x, Matrix):
            ret = DenseTensor(x.rows)
            for row, col in x.entries():
                ret.put_add(row, x.get_element(row, col))
            return ret
        return Tensor.from_double(x.sum())

    def partial(self, input_id, inputs, output, error) -> Optional[Tensor]:
        x = inputs[0]
        if isinstance(x, Matrix):
            error.assert_size(x.rows)
            ret = x.zero_copy()
            for row, col in x.entries():
                ret.put_element(row, col, error.get(row))
            return ret
        return x.zero_copy().set_to_ones().self_multiply(error.to_double())


class Repeat(Operation):
    """
    Column repetition of a vector.

    Input 0 is the vector; input 1 is a size-1 tensor holding the
    non-negative integer repetition count, which is not differentiable.
    """

    arity = 2

    def forward(self, inputs: Sequence[Tensor]) -> Tensor:
        count = inputs[1].to_double()
        if count < 0 or count != int(count):
            raise ValueError(
                f"{self.describe()} expects a non-negative integer count, got {count}"
            )
        return ColumnRepetition(int(count), inputs[0])

    def partial(self, input_id, inputs, output, error) -> Optional[Tensor]:
        if input_id == 1:
            return None
        E = _as_matrix(error, self)
        ret = inputs[0].zero_copy()
        for row, col in E.entries():
            ret.put_add(row, E.get_element(row, col))
        return ret


class Add(Operation):
    """
    Elementwise sum of two inputs with matching shapes.
    """

    arity = 2

    def forward(self, inputs: Sequence[Tensor]) -> Tensor:
        return inputs[0].add(inputs[1])

    def partial(self, input_id, inputs, output, error) -> Optional[Tensor]:
        return error
