"""
Abstract interfaces and utilities for weight initialization.

This module defines the abstract base class for weight initializers used by
the execution graph to fill parameter tensors, along with the shared helper
for computing fan-in and fan-out values from tensor shapes.

The concrete implementation and registry logic live in the infrastructure
layer. This module exists in the domain layer to define contracts and shared
mathematical utilities without binding to any specific backend.
"""

from typing import Callable, Dict, TypeVar
from abc import ABC

from .._tensor import ITensor


T = TypeVar("T", bound=Callable[..., ITensor])


class _WeightInitializer(ABC):
    """
    Abstract base class for weight initializer dispatchers.

    Design notes
    ------------
    - Initializers are identified by string names.
    - Each initializer is a callable that mutates a tensor in-place and
      returns it.
    - This class does not prescribe how initializers are stored or invoked;
      it only defines the expected interface.
    """

    INITIALIZERS: Dict[str, Callable] = {}

    def __init__(self, initializer_name: str) -> None:
        """
        Construct a weight initializer dispatcher.

        Parameters
        ----------
        initializer_name:
            The string key identifying a registered initializer.
        """
        ...

    @classmethod
    def register_initializer(
        cls, name: str, *, overwrite: bool = False
    ) -> Callable[[T], T]:
        """
        Register a weight initializer under a given name.

        Parameters
        ----------
        name:
            Name used to identify the initializer.
        overwrite:
            Whether to allow overwriting an existing registration.

        Returns
        -------
        Callable
            A decorator that registers the initializer function.
        """
        ...

    @classmethod
    def available(cls) -> tuple[str, ...]:
        """
        Return the names of all registered initializers.
        """
        ...

    def __call__(self, tensor: ITensor, *args, **kwargs) -> ITensor:
        """
        Apply the initializer to a tensor in place and return it.
        """
        ...


def _calculate_fan_in_and_fan_out(shape: tuple[int, ...]) -> tuple[int, int]:
    """
    Compute both fan-in and fan-out values for a tensor shape.

    Parameters
    ----------
    shape:
        Shape of the tensor, either ``(size,)`` or ``(rows, cols)``.

    Returns
    -------
    tuple[int, int]
        A tuple of (fan_in, fan_out).

    Notes
    -----
    A matrix ``W`` used as ``W·H`` maps ``cols`` inputs to ``rows`` outputs,
    so ``fan_in = cols`` and ``fan_out = rows``. A vector is treated as a
    single column.
    """
    if len(shape) == 0:
        return 1, 1
    if len(shape) == 1:
        return int(shape[0]), 1
    rows, cols = shape
    return int(cols), int(rows)
