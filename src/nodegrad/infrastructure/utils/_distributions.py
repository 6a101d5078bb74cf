"""
NumPy-backed sampling distributions.

Each distribution owns a `numpy.random.Generator`, so passing a `seed` makes
tensor initialization reproducible without touching global random state.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ...domain.utils._distribution import IDistribution


class Uniform(IDistribution):
    """
    Uniform distribution over ``[low, high)``.

    Raises
    ------
    ValueError
        If ``high < low``.
    """

    def __init__(self, low: float = 0.0, high: float = 1.0, seed: Optional[int] = None) -> None:
        if high < low:
            raise ValueError(f"Uniform requires low <= high, got [{low}, {high})")
        self.low = float(low)
        self.high = float(high)
        self._rng = np.random.default_rng(seed)

    def sample(self) -> float:
        return float(self._rng.uniform(self.low, self.high))


class Normal(IDistribution):
    """
    Normal distribution with the given mean and standard deviation.

    Raises
    ------
    ValueError
        If ``std < 0``.
    """

    def __init__(self, mean: float = 0.0, std: float = 1.0, seed: Optional[int] = None) -> None:
        if std < 0:
            raise ValueError(f"Normal requires std >= 0, got {std}")
        self.mean = float(mean)
        self.std = float(std)
        self._rng = np.random.default_rng(seed)

    def sample(self) -> float:
        return float(self._rng.normal(self.mean, self.std))
