"""
Uniform and Xavier/Glorot weight initializers.

This module provides the built-in initialization strategies and registers
them into the global `WeightInitializer` registry.

Implemented variants
--------------------
- ``uniform``:
    ``U(-1/sqrt(fan_in), +1/sqrt(fan_in))``.
- ``xavier_uniform``:
    ``U(-sqrt(6/(fan_in+fan_out)), +sqrt(6/(fan_in+fan_out)))``.
- ``xavier_normal``:
    zero-mean normal with ``std = sqrt(2 / (fan_in + fan_out))``.

Notes
-----
- Fan-in and fan-out are computed from the tensor shape via
  ``_calculate_fan_in_and_fan_out``.
- Samples are drawn through `Tensor.set_to_random`, so every position is
  written regardless of the storage kind.
"""

import math
from typing import Optional

from ._base import WeightInitializer
from .._distributions import Normal, Uniform
from ...tensor._tensor import Tensor
from ....domain.utils._weight_initialization import _calculate_fan_in_and_fan_out


def _fans(tensor: Tensor) -> tuple[int, int]:
    fan_in, fan_out = _calculate_fan_in_and_fan_out(tuple(tensor.shape))
    return max(1, int(fan_in)), max(1, int(fan_out))


@WeightInitializer.register_initializer("uniform")
def uniform(tensor: Tensor, seed: Optional[int] = None) -> Tensor:
    """
    Apply fan-in scaled uniform initialization in-place and return `tensor`.
    """
    fan_in, _ = _fans(tensor)
    bound = 1.0 / math.sqrt(float(fan_in))
    return tensor.set_to_random(Uniform(-bound, bound, seed=seed))


@WeightInitializer.register_initializer("xavier_uniform")
def xavier_uniform(tensor: Tensor, seed: Optional[int] = None) -> Tensor:
    """
    Apply Xavier (Glorot) uniform initialization.

    This initializes weights from a uniform distribution:

        U(-bound, +bound), where bound = sqrt(6 / (fan_in + fan_out))

    Parameters
    ----------
    tensor:
        The tensor to initialize in-place.
    seed:
        Optional seed for the sampling generator.

    Returns
    -------
    Tensor
        The initialized tensor (same object).
    """
    fan_in, fan_out = _fans(tensor)
    bound = math.sqrt(6.0 / float(fan_in + fan_out))
    return tensor.set_to_random(Uniform(-bound, bound, seed=seed))


@WeightInitializer.register_initializer("xavier_normal")
def xavier_normal(tensor: Tensor, seed: Optional[int] = None) -> Tensor:
    """
    Apply Xavier (Glorot) normal initialization.

    This initializes weights from a zero-mean normal distribution with
    standard deviation:

        std = sqrt(2 / (fan_in + fan_out))

    Parameters
    ----------
    tensor:
        The tensor to initialize in-place.
    seed:
        Optional seed for the sampling generator.

    Returns
    -------
    Tensor
        The initialized tensor (same object).
    """
    fan_in, fan_out = _fans(tensor)
    std = math.sqrt(2.0 / float(fan_in + fan_out))
    return tensor.set_to_random(Normal(0.0, std, seed=seed))


__all__ = [
    uniform.__name__,
    xavier_uniform.__name__,
    xavier_normal.__name__,
]
