"""
Stochastic Gradient Descent (SGD) optimizer implementation.

The optimizer updates a parameter tensor in place using its gradient and a
fixed learning rate, optionally applying classical L2 regularization (coupled
weight decay). It keeps no per-parameter state.
"""

from __future__ import annotations

from dataclasses import dataclass

from ...domain._errors import HyperparameterRangeError
from ...domain._optimizers import IOptimizer
from ..tensor._tensor import Tensor


@dataclass
class SGD(IOptimizer):
    """
    Stochastic Gradient Descent (SGD) optimizer.

    Update rule
    -----------
        g <- g + weight_decay * p      (if weight_decay > 0)
        p <- p - learning_rate * g

    Parameters
    ----------
    learning_rate : float
        Step size. Must be > 0.
    weight_decay : float, optional
        Classical L2 regularization coefficient. Must be >= 0. Defaults to 0.0.
    """

    learning_rate: float
    weight_decay: float = 0.0

    def __init__(self, learning_rate: float, *, weight_decay: float = 0.0) -> None:
        self.learning_rate = float(learning_rate)
        self.weight_decay = float(weight_decay)
        if not self.learning_rate > 0.0:
            raise HyperparameterRangeError("learning_rate", self.learning_rate, "(0,inf)")
        if self.weight_decay < 0.0:
            raise HyperparameterRangeError("weight_decay", self.weight_decay, "[0,inf)")

    def update(self, parameter: Tensor, gradient: Tensor) -> None:
        parameter.assert_matching(gradient)
        g = gradient
        if self.weight_decay != 0.0:
            g = g.add(parameter.multiply(self.weight_decay))
        parameter.self_add(g.multiply(-self.learning_rate))

    def reset(self) -> None:
        pass


__all__ = [SGD.__name__]
