"""Random variates and densities used by the pooling demonstrations."""

from __future__ import annotations

import math
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass

import numpy as np

DEFAULT_RNG_SEED = 42
SEED_ENV_VAR = "GSL_RNG_SEED"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass(frozen=True)
class GaussParams:
    """Mean and standard deviation of a normal distribution."""

    mu: float
    sigma: float

    def __str__(self) -> str:
        return f"({self.mu:+4.2f},{self.sigma:4.2f})"


def _parse_leading_int(text: str) -> int:
    """Read a leading integer the lenient way: no digits means zero."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def seed_from_env(environ: Mapping[str, str] | None = None, offset: int = 0) -> int:
    """Seed taken from ``GSL_RNG_SEED`` in *environ*, or the default, plus *offset*."""
    if environ is None:
        environ = os.environ
    value = environ.get(SEED_ENV_VAR)
    base = _parse_leading_int(value) if value is not None else DEFAULT_RNG_SEED
    return base + offset


class Sampler:
    """A seeded Mersenne Twister source of random variates.

    Each thread of work should own its own sampler.
    """

    def __init__(self, seed: int | None = None) -> None:
        if seed is None:
            seed = seed_from_env()
        self.seed = seed
        self._rng = np.random.Generator(np.random.MT19937(seed))

    def beta(self, a: float, b: float) -> float:
        """Draw from Beta(a, b)."""
        return float(self._rng.beta(a, b))

    def beta_jeffreys(self) -> float:
        """Draw from the Jeffreys prior Beta(0.5, 0.5)."""
        return self.beta(0.5, 0.5)

    def binomial(self, p: float, n: int) -> int:
        """Number of successes in *n* trials with success probability *p*."""
        if n < 0:
            raise ValueError("number of trials must be non-negative")
        return int(self._rng.binomial(n, p))

    def gamma(self, a: float, theta: float) -> float:
        """Draw from a gamma distribution with shape *a* and scale *theta*."""
        return float(self._rng.gamma(a, theta))

    def gaussian(self, params: GaussParams) -> float:
        """Draw from the normal distribution described by *params*."""
        if params.sigma == 0:
            return float(params.mu)
        return float(params.mu + self._rng.normal(0.0, params.sigma))

    def flat01(self) -> float:
        """Draw uniformly from [0, 1)."""
        return float(self._rng.random())


def gaussian_pdf(x, params: GaussParams):
    """Normal density at *x* (a number or an array) under *params*."""
    with np.errstate(divide="ignore", invalid="ignore", over="ignore", under="ignore"):
        u = (np.asarray(x, dtype=float) - params.mu) / params.sigma
        density = np.exp(-0.5 * u * u) / (math.sqrt(2.0 * math.pi) * abs(params.sigma))
    return density if density.ndim else float(density)


def sigma_of_precision(precision):
    """Standard deviation matching a precision; zero precision gives infinity."""
    with np.errstate(divide="ignore", invalid="ignore"):
        sigma = np.sqrt(np.divide(1.0, np.asarray(precision, dtype=float)))
    return sigma if sigma.ndim else float(sigma)