"""
Gradient accumulation across concurrent backward passes.

`BatchOptimizer` wraps another optimizer. Worker threads each run their own
forward/backward pass and call `update`, which only sums the gradient per
parameter. A single thread then calls `update_all` to apply the mean gradient
through the wrapped optimizer.
"""

from __future__ import annotations

import threading
from typing import Dict, Tuple

from ...domain._optimizers import IOptimizer
from ..tensor._tensor import Tensor


class BatchOptimizer(IOptimizer):
    """
    Thread-safe accumulator applying averaged gradients through `base`.

    Parameters
    ----------
    base : IOptimizer
        Optimizer that receives the mean gradient of every parameter.
    """

    def __init__(self, base: IOptimizer) -> None:
        self.base = base
        # handle -> (parameter, gradient sum, count)
        self._accumulated: Dict[int, Tuple[Tensor, Tensor, int]] = {}
        self._lock = threading.Lock()

    def update(self, parameter: Tensor, gradient: Tensor) -> None:
        """
        Add `gradient` to the running sum kept for `parameter`.
        """
        parameter.assert_matching(gradient)
        with self._lock:
            entry = self._accumulated.get(parameter.handle)
            if entry is None:
                self._accumulated[parameter.handle] = (parameter, gradient.copy(), 1)
            else:
                _, total, count = entry
                total.self_add(gradient)
                self._accumulated[parameter.handle] = (parameter, total, count + 1)

    def pending(self) -> int:
        """Number of parameters with accumulated gradients."""
        with self._lock:
            return len(self._accumulated)

    def update_all(self) -> None:
        """
        Apply the mean accumulated gradient of every parameter through the
        wrapped optimizer and clear the accumulators.
        """
        with self._lock:
            accumulated = self._accumulated
            self._accumulated = {}
        for parameter, total, count in accumulated.values():
            self.base.update(parameter, total.self_multiply(1.0 / count))

    def reset(self) -> None:
        """
        Drop accumulated gradients and reset the wrapped optimizer.
        """
        with self._lock:
            self._accumulated = {}
        self.base.reset()


__all__ = [BatchOptimizer.__name__]
