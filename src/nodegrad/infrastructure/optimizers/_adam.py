"""
Adam optimizer implementation.

This module provides the Adam optimization algorithm together with its NDAdam
variant. The optimizer receives a parameter tensor and its gradient, updates
the parameter in place, and keeps per-parameter first/second moment state
keyed by the parameter's `handle`.

Design notes
------------
- State is created lazily on the first update of each parameter and persists
  until `reset`.
- Updates to one parameter are serialized by a per-parameter lock; updates to
  different parameters may run concurrently from several threads.
- Update math is expressed in terms of nodegrad `Tensor` operations, so
  sparse gradients stay sparse wherever the formula allows it.
- NDAdam (``nd_mode=True``) removes the gradient component parallel to the
  parameter and renormalizes the parameter to unit L2 norm after each step.

This module contains only Adam. Other optimizers live in separate modules
under the optimizers package.
"""

from __future__ import annotations

import threading
import warnings
from dataclasses import dataclass
from typing import Dict

from ...domain._errors import HyperparameterRangeError
from ...domain._optimizers import IOptimizer
from ..tensor._tensor import Tensor


@dataclass
class _AdamState:
    """
    Per-parameter Adam state.

    Attributes
    ----------
    m : Tensor
        First moment estimate.
    v : Tensor
        Second moment estimate.
    b1t : float
        Running product ``b1^t``.
    b2t : float
        Running product ``b2^t``.
    """

    m: Tensor
    v: Tensor
    b1t: float = 1.0
    b2t: float = 1.0


@dataclass
class Adam(IOptimizer):
    """
    Adam optimizer.

    Update rule
    -----------
    Let ``g_t`` be the gradient at step ``t``. In ND mode it is first
    projected as ``g_t <- g_t - p * (g_t · p)``. Then:

        m_t = b1 * m_{t-1} + (1 - b1) * g_t
        v_t = b2 * v_{t-1} + (1 - b2) * (g_t ** 2)

        m_hat = m_t / (1 - b1^t)
        v_hat = v_t / (1 - b2^t)

        p <- p - lr * m_hat / (sqrt(v_hat) + epsilon)

    and in ND mode ``p`` is finally rescaled to unit L2 norm.

    Parameters
    ----------
    learning_rate : float, optional
        Step size. Must be > 0. Defaults to 1e-3.
    nd_mode : bool, optional
        Use the NDAdam variant. Defaults to False.
    b1 : float, optional
        First moment decay, in ``[0, 1)``. Defaults to 0.9.
    b2 : float, optional
        Second moment decay, in ``[0, 1)``. Defaults to 0.999.
    epsilon : float, optional
        Denominator stabilizer, in ``(0, 1)``. Defaults to 1e-8.
    legacy_second_moment : bool, optional
        Compute ``v_hat`` from the first moment ``m`` instead of ``v``. This
        reproduces an older form of this update and exists only to
        replay old training runs. Defaults to False.

    Raises
    ------
    HyperparameterRangeError
        If any hyperparameter is outside its valid range.
    """

    learning_rate: float = 1e-3
    nd_mode: bool = False
    b1: float = 0.9
    b2: float = 0.999
    epsilon: float = 1e-8
    legacy_second_moment: bool = False

    def __init__(
        self,
        learning_rate: float = 1e-3,
        *,
        nd_mode: bool = False,
        b1: float = 0.9,
        b2: float = 0.999,
        epsilon: float = 1e-8,
        legacy_second_moment: bool = False,
    ) -> None:
        self.learning_rate = float(learning_rate)
        self.nd_mode = bool(nd_mode)
        self.b1 = float(b1)
        self.b2 = float(b2)
        self.epsilon = float(epsilon)
        self.legacy_second_moment = bool(legacy_second_moment)

        if not self.learning_rate > 0.0:
            raise HyperparameterRangeError("learning_rate", self.learning_rate, "(0,inf)")
        if not 0.0 <= self.b1 < 1.0:
            raise HyperparameterRangeError("b1", self.b1, "[0,1)")
        if not 0.0 <= self.b2 < 1.0:
            raise HyperparameterRangeError("b2", self.b2, "[0,1)")
        if not 0.0 < self.epsilon < 1.0:
            raise HyperparameterRangeError("epsilon", self.epsilon, "(0,1)")
        if self.legacy_second_moment:
            warnings.warn(
                "legacy_second_moment computes the second moment estimate from "
                "the first moment and does not converge like Adam",
                UserWarning,
                stacklevel=2,
            )

        # handle -> state / lock
        self._state: Dict[int, _AdamState] = {}
        self._locks: Dict[int, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, handle: int) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(handle)
            if lock is None:
                lock = threading.Lock()
                self._locks[handle] = lock
            return lock

    def state(self, parameter: Tensor) -> _AdamState:
        """
        Return the state kept for `parameter`.

        Raises
        ------
        KeyError
            If `parameter` has not been updated since construction or the
            last `reset`.
        """
        return self._state[parameter.handle]

    def update(self, parameter: Tensor, gradient: Tensor) -> None:
        """
        Apply one Adam step to `parameter` in place.

        Parameters
        ----------
        parameter : Tensor
            Trainable tensor, identified across steps by its `handle`.
        gradient : Tensor
            Gradient of the loss with respect to `parameter`.

        Raises
        ------
        DimensionMismatchError
            If `gradient` does not match the shape of `parameter`.
        """
        parameter.assert_matching(gradient)
        handle = parameter.handle
        with self._lock_for(handle):
            st = self._state.get(handle)
            if st is None:
                st = _AdamState(m=parameter.zero_copy(), v=parameter.zero_copy())
                self._state[handle] = st

            g = gradient
            if self.nd_mode:
                g = g.subtract(parameter.multiply(g.dot(parameter)))

            st.b1t *= self.b1
            st.b2t *= self.b2

            st.m.self_multiply(self.b1).self_add(g.multiply(1.0 - self.b1))
            st.v.self_multiply(self.b2).self_add(g.multiply(g).self_multiply(1.0 - self.b2))

            m_hat = st.m.multiply(1.0 / (1.0 - st.b1t))
            second = st.m if self.legacy_second_moment else st.v
            v_hat = second.multiply(1.0 / (1.0 - st.b2t))

            denom = v_hat.self_sqrt().self_add(self.epsilon).self_inverse()
            parameter.self_add(m_hat.self_multiply(-self.learning_rate).self_multiply(denom))
            if self.nd_mode:
                parameter.set_to_normalized()

    def reset(self) -> None:
        """
        Discard the moment estimates of every parameter.

        Waits for in-flight updates to finish. Per-parameter locks are kept,
        so later updates still serialize with any caller holding one.
        """
        with self._registry_lock:
            locks = list(self._locks.values())
            for lock in locks:
                lock.acquire()
            try:
                self._state.clear()
            finally:
                for lock in locks:
                    lock.release()


__all__ = [Adam.__name__]
