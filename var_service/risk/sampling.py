"""Random samplers used by Monte Carlo VaR.

Each sampler owns its own ``numpy.random.Generator`` so that concurrent
requests never share random state. Pass a seed to make a run reproducible.
"""

from __future__ import annotations

from typing import Protocol

import numpy as np

from var_service.errors import InvalidParameter


class RandomSampler(Protocol):
    """Sampler contract for i.i.d. normal draws."""

    def sample(self, mean: float, std: float, size: int) -> np.ndarray: ...


class NormalSampler:
    """Normal(mean, std) sampler backed by ``numpy.random.default_rng``."""

    def __init__(self, seed: int | None = None):
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def sample(self, mean: float, std: float, size: int) -> np.ndarray:
        if std < 0 or not np.isfinite(std):
            raise InvalidParameter(f"std must be a finite non-negative number, got {std}")
        if size <= 0:
            raise InvalidParameter(f"size must be positive, got {size}")
        return self._rng.normal(loc=mean, scale=std, size=size)
