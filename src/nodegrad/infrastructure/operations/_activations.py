"""
Elementwise activation operations.

Notes
-----
The logistic function maps 0 to 0.5, so activations are evaluated over the
full index range of their input rather than its traversal.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

from ...domain._operation import Operation
from ..tensor._tensor import Tensor


def _logistic(value: float) -> float:
    if value >= 0:
        return 1.0 / (1.0 + math.exp(-value))
    e = math.exp(value)
    return e / (1.0 + e)


def sigmoid(x: Tensor) -> Tensor:
    """
    Apply the logistic function elementwise.

    Parameters
    ----------
    x : Tensor
        Input tensor. It is not modified.

    Returns
    -------
    Tensor
        New tensor of the same shape (from ``x.zero_copy()``).
    """
    res = x.zero_copy()
    for i in range(x.size):
        res.put(i, _logistic(x.get(i)))
    return res


def sigmoid_derivative(x: Tensor) -> Tensor:
    """
    Derivative of the logistic function, ``s(x) * (1 - s(x))``, elementwise.
    """
    res = x.zero_copy()
    for i in range(x.size):
        s = _logistic(x.get(i))
        res.put(i, s * (1.0 - s))
    return res


class Sigmoid(Operation):
    """
    Elementwise logistic activation.

    Backward:

        d(sigmoid)/dx = sigmoid(x) * (1 - sigmoid(x))
    """

    arity = 1

    def forward(self, inputs: Sequence[Tensor]) -> Tensor:
        return sigmoid(inputs[0])

    def partial(self, input_id, inputs, output, error) -> Optional[Tensor]:
        return sigmoid_derivative(inputs[0]).self_multiply(error)
