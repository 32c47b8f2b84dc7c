"""Marginal likelihood of data under the one- and two-component models.

Each integral over the prior is approximated in two ways: a Riemann sum over
prior quantiles (a fixed grid) and a Monte Carlo average over prior draws.
All results are natural logarithms.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import numpy as np
from scipy import stats

from poolornot.model import Prior, logsumexp
from poolornot.randist import seed_from_env, sigma_of_precision

DEFAULT_GAUSS_N = 20
DEFAULT_GAMMA_N = 10
DEFAULT_JBETA_N = 40
DEFAULT_REPEATS = 2_000_000
DEFAULT_WORKERS = 16

# Offset added to worker seeds for the two-component sampler so that the
# two estimates do not share random streams.
_MIXTURE_SEED_OFFSET = 100
# Number of prior draws evaluated at once by a sampling worker.
_BLOCK = 8192
_SQRT_TWO_PI = math.sqrt(2.0 * math.pi)


@dataclass(frozen=True, eq=False)
class Grid:
    """Prior quantiles used for the Riemann sums.

    *mu_values* are quantiles of the mean prior, *precision_values* of the
    precision prior and *mix_values* of the Jeffreys prior restricted to
    mixing coefficients no larger than one half.
    """

    mu_values: np.ndarray
    precision_values: np.ndarray
    mix_values: np.ndarray

    @property
    def sigma_values(self) -> np.ndarray:
        """Standard deviations matching *precision_values*."""
        return np.asarray(sigma_of_precision(self.precision_values), dtype=float)


def build_grid(
    prior: Prior | None = None,
    gauss_n: int = DEFAULT_GAUSS_N,
    gamma_n: int = DEFAULT_GAMMA_N,
    jbeta_n: int = DEFAULT_JBETA_N,
) -> Grid:
    """Compute the prior quantiles for the given grid sizes."""
    if prior is None:
        prior = Prior()
    if gauss_n < 0:
        raise ValueError("gauss_n must be non-negative")
    if gamma_n < 1:
        raise ValueError("gamma_n must be positive")
    if jbeta_n < 1:
        raise ValueError("jbeta_n must be positive")

    # The normal range is unbounded, so use the quantiles 1/(n+1) ... n/(n+1).
    gauss_x = np.arange(1, gauss_n + 1, dtype=float) / (1 + gauss_n)
    mu_values = prior.mu_prior.sigma * stats.norm.ppf(gauss_x) + prior.mu_prior.mu

    gamma_x = np.arange(gamma_n, dtype=float) / gamma_n
    precision_values = stats.gamma.ppf(gamma_x, prior.sigma_a, scale=prior.sigma_b)

    # By symmetry only coefficients up to one half are needed: a coefficient
    # of 0.8 is 0.2 with the components swapped.
    jbeta_x = 0.5 * np.arange(jbeta_n, dtype=float) / jbeta_n
    mix_values = stats.beta.ppf(jbeta_x, 0.5, 0.5)

    return Grid(
        np.asarray(mu_values, dtype=float),
        np.asarray(precision_values, dtype=float),
        np.asarray(mix_values, dtype=float),
    )


def _pdf(x: np.ndarray, mu: np.ndarray, sigma: np.ndarray) -> np.ndarray:
    """Normal density, broadcasting *x* against *mu* and *sigma*."""
    with np.errstate(divide="ignore", invalid="ignore", over="ignore", under="ignore"):
        u = (x - mu) / sigma
        return np.exp(-0.5 * u * u) / (_SQRT_TWO_PI * np.abs(sigma))


def _density_table(data: np.ndarray, grid: Grid) -> np.ndarray:
    """Densities of each point under each grid component, shape (mu, sigma, point)."""
    mu = grid.mu_values[:, None, None]
    sigma = grid.sigma_values[None, :, None]
    return _pdf(data[None, None, :], mu, sigma)


def _as_data(data: Iterable[float]) -> np.ndarray:
    return np.asarray(list(data) if not isinstance(data, np.ndarray) else data,
                      dtype=float).ravel()


def evidence_1component_by_summing(data: Iterable[float], grid: Grid) -> float:
    """Riemann-sum estimate of log of the integral of P[D, mu, sigma]."""
    arr = _as_data(data)
    gauss_n = grid.mu_values.size
    gamma_n = grid.precision_values.size
    if gauss_n == 0:
        return 0.0
    table = _density_table(arr, grid)
    with np.errstate(divide="ignore", invalid="ignore"):
        log_lik = np.log(table).sum(axis=2)
    per_mu = [logsumexp(row) for row in log_lik]
    return logsumexp(per_mu) - math.log(gauss_n) - math.log(gamma_n)


def evidence_2component_by_summing(data: Iterable[float], grid: Grid) -> float:
    """Riemann-sum estimate of log of the integral of P[D, m, mu1, sigma1, mu2, sigma2]."""
    arr = _as_data(data)
    gauss_n = grid.mu_values.size
    gamma_n = grid.precision_values.size
    jbeta_n = grid.mix_values.size
    if gauss_n == 0:
        return 0.0
    table = _density_table(arr, grid)
    mix = grid.mix_values[None, None, None, :, None]
    # Axes: m2, s1, s2, mix coefficient, data point.
    prob2 = table[:, None, :, None, :]
    per_job: list[float] = []
    with np.errstate(divide="ignore", invalid="ignore", over="ignore", under="ignore"):
        for m1 in range(gauss_n):
            prob1 = table[m1][None, :, None, None, :]
            log_lik = np.log((1 - mix) * prob2 + mix * prob1).sum(axis=4)
            per_job.extend(logsumexp(block.ravel()) for block in log_lik)
    return (
        logsumexp(per_job)
        - 2 * math.log(gauss_n)
        - 2 * math.log(gamma_n)
        - math.log(jbeta_n)
    )


def _draw_components(rng: np.random.Generator, prior: Prior, count: int):
    mu = prior.mu_prior.mu + rng.normal(0.0, prior.mu_prior.sigma, count)
    sigma = np.asarray(
        sigma_of_precision(rng.gamma(prior.sigma_a, prior.sigma_b, count)), dtype=float
    )
    return mu, sigma


def _one_component_block(
    rng: np.random.Generator, prior: Prior, data: np.ndarray, count: int
) -> np.ndarray:
    mu, sigma = _draw_components(rng, prior, count)
    density = _pdf(data[None, :], mu[:, None], sigma[:, None])
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.log(density).sum(axis=1)


def _two_component_block(
    rng: np.random.Generator, prior: Prior, data: np.ndarray, count: int
) -> np.ndarray:
    mix = rng.beta(0.5, 0.5, count)
    mu1, sigma1 = _draw_components(rng, prior, count)
    mu2, sigma2 = _draw_components(rng, prior, count)
    prob1 = _pdf(data[None, :], mu1[:, None], sigma1[:, None])
    prob2 = _pdf(data[None, :], mu2[:, None], sigma2[:, None])
    c = mix[:, None]
    with np.errstate(divide="ignore", invalid="ignore", over="ignore", under="ignore"):
        return np.log((1 - c) * prob2 + c * prob1).sum(axis=1)


_BlockFn = Callable[[np.random.Generator, Prior, np.ndarray, int], np.ndarray]


def _worker(block_fn: _BlockFn, seed: int, prior: Prior, data: np.ndarray, count: int) -> float:
    if count == 0:
        return 0.0
    rng = np.random.Generator(np.random.MT19937(seed))
    parts = []
    remaining = count
    while remaining > 0:
        size = min(_BLOCK, remaining)
        parts.append(block_fn(rng, prior, data, size))
        remaining -= size
    return logsumexp(np.concatenate(parts))


def _evidence_by_sampling(
    block_fn: _BlockFn,
    data: Iterable[float],
    prior: Prior | None,
    repeats: int,
    seed: int | None,
    workers: int,
    seed_offset: int,
) -> float:
    if repeats < 1:
        raise ValueError("repeats must be positive")
    if workers < 1:
        raise ValueError("workers must be positive")
    if prior is None:
        prior = Prior()
    if seed is None:
        seed = seed_from_env()
    arr = _as_data(data)

    chunk, remainder = divmod(repeats, workers)
    counts = [chunk] * workers
    counts[-1] += remainder
    seeds = [seed + seed_offset + i for i in range(workers)]

    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = list(
            pool.map(lambda s, c: _worker(block_fn, s, prior, arr, c), seeds, counts)
        )
    return logsumexp(results) - math.log(repeats)


def evidence_1component_by_sampling(
    data: Iterable[float],
    prior: Prior | None = None,
    repeats: int = DEFAULT_REPEATS,
    seed: int | None = None,
    workers: int = DEFAULT_WORKERS,
) -> float:
    """Monte Carlo estimate of log of the integral of P[D, mu, sigma].

    Worker ``i`` draws from its own stream seeded with ``seed + i``.
    """
    return _evidence_by_sampling(_one_component_block, data, prior, repeats, seed, workers, 0)


def evidence_2component_by_sampling(
    data: Iterable[float],
    prior: Prior | None = None,
    repeats: int = DEFAULT_REPEATS,
    seed: int | None = None,
    workers: int = DEFAULT_WORKERS,
) -> float:
    """Monte Carlo estimate of log of the integral of P[D, m, mu1, sigma1, mu2, sigma2].

    Worker ``i`` draws from its own stream seeded with ``seed + 100 + i``.
    """
    return _evidence_by_sampling(
        _two_component_block, data, prior, repeats, seed, workers, _MIXTURE_SEED_OFFSET
    )