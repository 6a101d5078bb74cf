"""
Named weight initializers for graph parameters.

`ExecutionGraph.init` takes a callable and applies it to every `Parameter`
tensor of the graph. `WeightInitializer` is that callable: it resolves a
strategy by name (``"uniform"``, ``"xavier_uniform"``, ``"xavier_normal"``)
and fills a dense or sparse vector/matrix in place, sampling every position
through `Tensor.set_to_random`.

Strategies register themselves when `weight_initializer` is imported, and
receive the tensor plus an optional ``seed`` so runs can be replayed.

Usage example
-------------
    graph.init(WeightInitializer("xavier_uniform"))

    @WeightInitializer.register_initializer("halves")
    def halves(tensor: Tensor, seed=None) -> Tensor:
        return tensor.set_to_ones().self_multiply(0.5)
"""

from __future__ import annotations

from typing import Any, Callable, ClassVar, Dict, TypeVar

from ....domain.utils._weight_initialization import _WeightInitializer
from ...tensor._tensor import Tensor

T = TypeVar("T", bound=Callable[..., Tensor])


class WeightInitializer(_WeightInitializer):
    """
    Parameter filler selected by strategy name.

    Parameters
    ----------
    initializer_name : str
        Registered strategy name.

    Raises
    ------
    ValueError
        If no strategy is registered under `initializer_name`. The message
        lists the registered names.
    """

    INITIALIZERS: ClassVar[Dict[str, Callable[..., Tensor]]] = {}

    def __init__(self, initializer_name: str) -> None:
        try:
            self._initializer: Callable[..., Tensor] = self.INITIALIZERS[
                initializer_name
            ]
        except KeyError as e:
            available = ", ".join(sorted(self.INITIALIZERS)) or "<none>"
            raise ValueError(
                f"Unsupported initializer name: {initializer_name!r}. "
                f"Available: {available}"
            ) from e
        self.name = initializer_name

    @classmethod
    def register_initializer(
        cls, name: str, *, overwrite: bool = False
    ) -> Callable[[T], T]:
        """
        Decorator adding a strategy ``fn(tensor, seed=None) -> tensor``.

        Raises
        ------
        ValueError
            If `name` is empty, or already taken and `overwrite` is False.
        """
        if not isinstance(name, str) or not name:
            raise ValueError("Initializer name must be a non-empty string")

        def decorator(func: T) -> T:
            if not overwrite and name in cls.INITIALIZERS:
                raise ValueError(f"Initializer already registered: {name!r}")
            cls.INITIALIZERS[name] = func
            return func

        return decorator

    @classmethod
    def available(cls) -> tuple[str, ...]:
        return tuple(sorted(cls.INITIALIZERS))

    def __call__(self, tensor: Tensor, *args: Any, **kwargs: Any) -> Tensor:
        """Fill `tensor` in place and return it."""
        return self._initializer(tensor, *args, **kwargs)
