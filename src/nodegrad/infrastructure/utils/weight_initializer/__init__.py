"""
Weight initialization public API.

This module aggregates the built-in initialization strategies and registers
them into the `WeightInitializer` registry via import side effects.

Exports
-------
- WeightInitializer:
    The registry-backed initializer dispatcher used to fill parameter tensors.

Notes
-----
- Individual initializer implementations are defined in submodules and
  registered at import time.
- Concrete initializer functions are accessed indirectly via registry names
  (``"uniform"``, ``"xavier_uniform"``, ``"xavier_normal"``).
"""

from ._xavier import *
from ._base import WeightInitializer

__all__ = [
    WeightInitializer.__name__,
]
