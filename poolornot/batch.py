"""Batch model comparison with every size and prior set on the command line.

Prints only the number of correct selections by sampling and by summing.
"""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field, replace

from poolornot.demo import generate_datasets
from poolornot.evidence import (
    DEFAULT_GAMMA_N,
    DEFAULT_GAUSS_N,
    DEFAULT_JBETA_N,
    DEFAULT_REPEATS,
    DEFAULT_WORKERS,
    build_grid,
    evidence_1component_by_sampling,
    evidence_1component_by_summing,
    evidence_2component_by_sampling,
    evidence_2component_by_summing,
)
from poolornot.model import Prior
from poolornot.randist import GaussParams, Sampler, seed_from_env

DEFAULT_SAVENAME = "Gaussian_poolOrNot_result.txt"
_SAVENAME_MAX = 99

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_LEADING_FLOAT = re.compile(
    r"\s*([+-]?(?:inf(?:inity)?|nan|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))", re.IGNORECASE
)


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def _atof(text: str) -> float:
    match = _LEADING_FLOAT.match(text)
    return float(match.group(1)) if match else 0.0


@dataclass(frozen=True)
class Settings:
    """Sizes, prior and sample count for a batch run."""

    data_n: int = 25
    dataset_n: int = 10
    gauss_n: int = DEFAULT_GAUSS_N
    gamma_n: int = DEFAULT_GAMMA_N
    jbeta_n: int = DEFAULT_JBETA_N
    savename: str = DEFAULT_SAVENAME
    prior: Prior = field(default_factory=Prior)
    sample_repeats: int = DEFAULT_REPEATS


def parse_args(argv: list[str] | None = None) -> Settings:
    """Read positional settings, leniently, as numbers with trailing text ignored.

    Order: data_n dataset_n gauss_n gamma_n jbeta_n savename mu sigma a b repeats.
    """
    if argv is None:
        argv = sys.argv[1:]
    settings = Settings()
    int_fields = ("data_n", "dataset_n", "gauss_n", "gamma_n", "jbeta_n")
    settings = replace(settings, **{name: _atoi(arg) for name, arg in zip(int_fields, argv)})
    if len(argv) >= 6:
        settings = replace(settings, savename=argv[5][:_SAVENAME_MAX])

    prior = settings.prior
    mu, sigma = prior.mu_prior.mu, prior.mu_prior.sigma
    if len(argv) >= 7:
        mu = _atof(argv[6])
    if len(argv) >= 8:
        sigma = _atof(argv[7])
    sigma_a = _atof(argv[8]) if len(argv) >= 9 else prior.sigma_a
    sigma_b = _atof(argv[9]) if len(argv) >= 10 else prior.sigma_b
    settings = replace(settings, prior=Prior(GaussParams(mu, sigma), sigma_a, sigma_b))
    if len(argv) >= 11:
        settings = replace(settings, sample_repeats=_atoi(argv[10]))
    return settings


def run_batch(settings: Settings, seed: int | None = None) -> tuple[int, int, int, int]:
    """Return correct selections: (model 1 by sampling, model 2 by sampling,
    model 1 by summing, model 2 by summing)."""
    if settings.data_n < 0:
        raise ValueError("data_n must be non-negative")
    if settings.dataset_n < 0:
        raise ValueError("dataset_n must be non-negative")
    if settings.sample_repeats < 1:
        raise ValueError("sample_repeats must be positive")
    if seed is None:
        seed = seed_from_env()

    prior = settings.prior
    grid = build_grid(prior, settings.gauss_n, settings.gamma_n, settings.jbeta_n)
    _, _, data1s, data2s = generate_datasets(
        Sampler(seed), prior, settings.dataset_n, settings.data_n
    )

    def prefers_one(data: list[float]) -> tuple[bool, bool]:
        sampled1 = evidence_1component_by_sampling(
            data, prior, settings.sample_repeats, seed, DEFAULT_WORKERS
        )
        sampled2 = evidence_2component_by_sampling(
            data, prior, settings.sample_repeats, seed, DEFAULT_WORKERS
        )
        summed1 = evidence_1component_by_summing(data, grid)
        summed2 = evidence_2component_by_summing(data, grid)
        return sampled1 > sampled2, summed1 > summed2

    verdicts1 = [prefers_one(data) for data in data1s]
    verdicts2 = [prefers_one(data) for data in data2s]
    n = settings.dataset_n
    return (
        sum(sampling for sampling, _ in verdicts1),
        n - sum(sampling for sampling, _ in verdicts2),
        sum(summing for _, summing in verdicts1),
        n - sum(summing for _, summing in verdicts2),
    )


def main(argv: list[str] | None = None) -> int:
    """Command entry point: parse settings, run, print the four counts."""
    try:
        counts = run_batch(parse_args(argv))
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    print("(%d, %d, %d, %d)" % counts)
    return 0


if __name__ == "__main__":
    sys.exit(main())