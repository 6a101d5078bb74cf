"""
Domain-level optimizer contracts for nodegrad.

This module defines the `IOptimizer` protocol, which specifies the minimal
interface required for optimizer implementations (e.g. SGD, Adam).

Notes
-----
- Domain contracts are backend-agnostic and must not depend on NumPy or
  infrastructure implementations.
- Optimizers receive a parameter tensor together with its accumulated
  gradient and mutate the parameter in place. How the gradient was computed
  (the execution graph) is outside the scope of this protocol.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ._tensor import ITensor


@runtime_checkable
class IOptimizer(Protocol):
    """
    Optimizer interface contract.

    Required methods
    ----------------
    - `update(parameter, gradient)` applies one update to one parameter.
    - `reset()` discards all per-parameter state.
    """

    def update(self, parameter: ITensor, gradient: ITensor) -> None:
        """
        Apply one optimization update to `parameter` in place.

        Parameters
        ----------
        parameter : ITensor
            Trainable tensor. Its `handle` identifies it across steps.
        gradient : ITensor
            Gradient of the loss with respect to `parameter`.
        """
        ...

    def reset(self) -> None:
        """
        Discard all per-parameter state (e.g. to restart training).
        """
        ...
