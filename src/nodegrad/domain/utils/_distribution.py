"""
Random distribution interface used to fill tensors with samples.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class IDistribution(Protocol):
    """
    A source of independent scalar samples.

    `Tensor.set_to_random` draws one sample per position from an object
    satisfying this protocol.
    """

    def sample(self) -> float:
        """Draw one sample."""
        ...
