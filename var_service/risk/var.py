"""Value at Risk: Historical, Parametric and Monte Carlo estimators.

Computes one-period VaR for a series of simple returns at a given confidence
level. VaR is reported as a loss magnitude: the negative of the estimated tail
return, so 0.03 means a 3% loss.

Design decisions:
  - Historical simulation reads the order statistic at
    floor((1 - confidence) × N), clamped into the sample.
  - Parametric (variance-covariance) uses the population standard deviation
    and the inverse normal CDF at the requested confidence.
  - Monte Carlo fits Normal(mean, std) and applies the historical quantile
    rule to 10,000 simulated returns. The sampler is injectable so tests can
    seed it.

Usage:
    from var_service.risk.var import compute_var

    compute_var("historical", [-0.05, -0.02, 0.01, 0.03, 0.04], 0.8)  # 0.02
    compute_var("montecarlo", returns, 0.99, sampler=NormalSampler(seed=7))
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Sequence

import numpy as np
from scipy.stats import norm

from var_service.errors import InvalidMethod, InvalidParameter
from var_service.risk.sampling import NormalSampler, RandomSampler

logger = logging.getLogger(__name__)

DEFAULT_SIMULATIONS = 10_000

# Absorbs binary rounding in (1 - confidence) * n, e.g. (1 - 0.8) * 5.
_INDEX_TOLERANCE = 1e-9


class VarMethod(str, Enum):
    HISTORICAL = "historical"
    PARAMETRIC = "parametric"
    MONTECARLO = "montecarlo"

    @classmethod
    def parse(cls, value: "str | VarMethod") -> "VarMethod":
        """Resolve a method selector, raising InvalidMethod for unknown values."""
        if isinstance(value, VarMethod):
            return value
        normalized = str(value or "").strip().lower()
        try:
            return cls(normalized)
        except ValueError:
            available = ", ".join(m.value for m in cls)
            raise InvalidMethod(f"Unknown VaR method: {value!r}. Available: {available}") from None


def _validate_returns(returns: Sequence[float]) -> np.ndarray:
    try:
        values = np.asarray(returns, dtype=float)
    except (TypeError, ValueError) as exc:
        raise InvalidParameter(f"returns must be numeric: {exc}") from exc
    if values.ndim != 1 or values.size == 0:
        raise InvalidParameter("returns must be a non-empty 1-D sequence")
    if not np.all(np.isfinite(values)):
        raise InvalidParameter("returns must contain only finite values")
    return values


def _validate_confidence(confidence: float) -> float:
    try:
        value = float(confidence)
    except (TypeError, ValueError) as exc:
        raise InvalidParameter(f"confidence must be a number, got {confidence!r}") from exc
    if not math.isfinite(value) or not 0.0 < value < 1.0:
        raise InvalidParameter(f"confidence must lie strictly between 0 and 1, got {confidence}")
    return value


def tail_index(confidence: float, n: int) -> int:
    """Index of the VaR order statistic in an ascending sample of size n."""
    index = math.floor((1.0 - confidence) * n + _INDEX_TOLERANCE)
    return min(max(index, 0), n - 1)


def _mean_std(values: np.ndarray) -> tuple[float, float]:
    return float(values.mean()), float(values.std(ddof=0))


def historical_var(returns: Sequence[float], confidence: float = 0.95) -> float:
    """
    Historical simulation VaR.

    Args:
        returns:    Daily simple returns, negative values are losses.
        confidence: Confidence level in (0, 1).

    Returns:
        -sorted_returns[floor((1 - confidence) × N)]
    """
    values = _validate_returns(returns)
    confidence = _validate_confidence(confidence)

    sorted_returns = np.sort(values, kind="stable")
    idx = tail_index(confidence, sorted_returns.size)
    return float(-sorted_returns[idx])


def parametric_var(returns: Sequence[float], confidence: float = 0.95) -> float:
    """
    Variance-covariance VaR under a normal assumption.

    Returns:
        -(mean - z × std) with z = Φ⁻¹(confidence) and population std.
    """
    values = _validate_returns(returns)
    confidence = _validate_confidence(confidence)

    mean, std = _mean_std(values)
    z = float(norm.ppf(confidence))
    return float(-(mean - z * std))


def monte_carlo_var(
    returns: Sequence[float],
    confidence: float = 0.95,
    sampler: RandomSampler | None = None,
    simulations: int = DEFAULT_SIMULATIONS,
) -> float:
    """
    Monte Carlo VaR from a fitted normal distribution.

    Args:
        returns:     Daily simple returns.
        confidence:  Confidence level in (0, 1).
        sampler:     Source of normal draws. A fresh unseeded NormalSampler is
                     created per call when omitted.
        simulations: Number of simulated returns (default 10,000).
    """
    values = _validate_returns(returns)
    confidence = _validate_confidence(confidence)
    if isinstance(simulations, bool) or int(simulations) != simulations or simulations <= 0:
        raise InvalidParameter(f"simulations must be a positive integer, got {simulations}")

    mean, std = _mean_std(values)
    sampler = sampler or NormalSampler()
    simulated = np.sort(np.asarray(sampler.sample(mean, std, int(simulations)), dtype=float))
    idx = tail_index(confidence, simulated.size)
    return float(-simulated[idx])


def compute_var(
    method: "str | VarMethod",
    returns: Sequence[float],
    confidence: float,
    sampler: RandomSampler | None = None,
    simulations: int = DEFAULT_SIMULATIONS,
) -> float:
    """Dispatch to the estimator selected by ``method``."""
    selected = VarMethod.parse(method)
    if selected is VarMethod.HISTORICAL:
        result = historical_var(returns, confidence)
    elif selected is VarMethod.PARAMETRIC:
        result = parametric_var(returns, confidence)
    else:
        result = monte_carlo_var(returns, confidence, sampler=sampler, simulations=simulations)

    logger.debug(
        "VaR method=%s confidence=%.4f n=%s -> %.6f",
        selected.value,
        float(confidence),
        len(returns),
        result,
    )
    return result
