"""Draw a few values from the Jeffreys prior Beta(0.5, 0.5)."""

from __future__ import annotations

import sys

from poolornot.randist import Sampler, seed_from_env

DEFAULT_COUNT = 10


def sample_jeffreys(sampler: Sampler, count: int) -> list[float]:
    """Return *count* draws from Beta(0.5, 0.5)."""
    if count < 0:
        raise ValueError("count must be non-negative")
    return [sampler.beta_jeffreys() for _ in range(count)]


def main(argv: list[str] | None = None) -> int:
    """Print ten Jeffreys-prior draws; the seed comes from ``GSL_RNG_SEED``."""
    sampler = Sampler(seed_from_env())
    for r in sample_jeffreys(sampler, DEFAULT_COUNT):
        print("Sampling from Beta(0.5,0.5), drew r=%g" % r)
    return 0


if __name__ == "__main__":
    sys.exit(main())