"""Compare one- and two-component Gaussian models on simulated datasets.

Datasets are drawn from both models.  Each dataset is scored by maximum
likelihood with the BIC, and by the marginal likelihood of each model,
estimated both by sampling the prior and by summing over prior quantiles.
"""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from typing import TextIO

from poolornot.evidence import (
    DEFAULT_GAMMA_N,
    DEFAULT_GAUSS_N,
    DEFAULT_JBETA_N,
    DEFAULT_REPEATS,
    DEFAULT_WORKERS,
    Grid,
    build_grid,
    evidence_1component_by_sampling,
    evidence_1component_by_summing,
    evidence_2component_by_sampling,
    evidence_2component_by_summing,
)
from poolornot.model import (
    MixtureParams,
    Prior,
    compare_models_bic,
    max_likelihood_1gauss,
    max_likelihood_2gauss,
)
from poolornot.randist import GaussParams, Sampler, seed_from_env

DATA_N = 50
DATASET_N = 10
GAUSS_N = DEFAULT_GAUSS_N
GAMMA_N = DEFAULT_GAMMA_N
JBETA_N = DEFAULT_JBETA_N
SAMPLE_REPEATS = DEFAULT_REPEATS
WORKERS = DEFAULT_WORKERS
EM_MAX_ITER = 100
EM_TOLERANCE = 1e-6

USAGE_EXIT = 64
_PROG = "gaussian-poolornot"
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass
class Tally:
    """How often each method picked each model over a run."""

    datasets_n: int
    model1_sampling_favors1: int = 0
    model1_summing_favors1: int = 0
    model2_sampling_favors1: int = 0
    model2_summing_favors1: int = 0
    model1_bic_favors1: int = 0
    model2_bic_favors2: int = 0

    @property
    def model1_sampling_correct(self) -> int:
        return self.model1_sampling_favors1

    @property
    def model2_sampling_correct(self) -> int:
        return self.datasets_n - self.model2_sampling_favors1

    @property
    def model1_summing_correct(self) -> int:
        return self.model1_summing_favors1

    @property
    def model2_summing_correct(self) -> int:
        return self.datasets_n - self.model2_summing_favors1

    def summary_lines(self) -> list[str]:
        """The closing report, one string per line."""
        n = self.datasets_n
        return [
            f"By sampling: Model1 data, correct selection {self.model1_sampling_correct}/{n}",
            f"             Model2 data, correct selection {self.model2_sampling_correct}/{n}",
            f"By summing:  Model1 data, correct selection {self.model1_summing_correct}/{n}",
            f"             Model2 data, correct selection {self.model2_summing_correct}/{n}",
            f"By BIC:      Model1 data, correct selection {self.model1_bic_favors1}/{n}",
            f"             Model2 data, correct selection {self.model2_bic_favors2}/{n}",
        ]


def generate_datasets(
    sampler: Sampler, prior: Prior, dataset_n: int, data_n: int
) -> tuple[list[GaussParams], list[MixtureParams], list[list[float]], list[list[float]]]:
    """Draw model parameters and data for *dataset_n* datasets of each model.

    Returns the one-component parameters, the mixture parameters, and the
    datasets generated from each.  Points are drawn point by point across
    datasets, so a dataset's first points do not depend on *data_n*.
    """
    if dataset_n < 0:
        raise ValueError("dataset_n must be non-negative")
    if data_n < 0:
        raise ValueError("data_n must be non-negative")

    params1: list[GaussParams] = []
    params2: list[MixtureParams] = []
    for _ in range(dataset_n):
        params1.append(prior.sample_gauss(sampler))
        params2.append(prior.sample_mixture(sampler))

    data1s: list[list[float]] = [[] for _ in range(dataset_n)]
    data2s: list[list[float]] = [[] for _ in range(dataset_n)]
    for _ in range(data_n):
        for gauss, mixture, data1, data2 in zip(params1, params2, data1s, data2s):
            data1.append(sampler.gaussian(gauss))
            component = mixture.gauss1 if sampler.flat01() < mixture.mix_cof else mixture.gauss2
            data2.append(sampler.gaussian(component))
    return params1, params2, data1s, data2s


def _analyse(
    data: list[float], prior: Prior, grid: Grid, seed: int, out: TextIO, mle_label: str
) -> tuple[int, bool, bool]:
    """Score one dataset; return the BIC choice and whether each integral favours one component."""
    mle1 = max_likelihood_1gauss(data)
    mle2 = max_likelihood_2gauss(data, EM_MAX_ITER, EM_TOLERANCE)
    out.write("Data maximum likelihood under one component model= %g\n" % mle1.log_likelihood)
    out.write("%s = (%4.2f,%4.2f)\n" % (mle_label, mle1.mu, mle1.sigma))
    out.write("Data maximum likelihood under two component model= %g\n" % mle2.log_likelihood)
    out.write(
        "MLE cof, (μ₁,σ₁), (μ₂,σ₂) = %4.2f, (%4.2f,%4.2f), (%4.2f,%4.2f)\n"
        % (mle2.mix_cof, mle2.gauss1.mu, mle2.gauss1.sigma, mle2.gauss2.mu, mle2.gauss2.sigma)
    )
    model = compare_models_bic(mle1, mle2, len(data))
    out.write("BIC favors model %d\n" % model)

    sampled1 = evidence_1component_by_sampling(data, prior, SAMPLE_REPEATS, seed, WORKERS)
    sampled2 = evidence_2component_by_sampling(data, prior, SAMPLE_REPEATS, seed, WORKERS)
    summed1 = evidence_1component_by_summing(data, grid)
    summed2 = evidence_2component_by_summing(data, grid)
    out.write(
        "Integrals by sampling= (%g,%g)  by summing: (%g,%g)\n\n"
        % (sampled1, sampled2, summed1, summed2)
    )
    return model, sampled1 > sampled2, summed1 > summed2


def run_demo(datasets_n: int = DATASET_N, out: TextIO | None = None, seed: int | None = None) -> Tally:
    """Run the comparison on *datasets_n* datasets of each model, reporting to *out*."""
    if datasets_n < 1:
        raise ValueError("datasets_n must be positive")
    if out is None:
        out = sys.stdout
    if seed is None:
        seed = seed_from_env()

    prior = Prior()
    grid = build_grid(prior, GAUSS_N, GAMMA_N, JBETA_N)
    tally = Tally(datasets_n)

    out.write("Starting computation for %d datasets each. ...\n" % datasets_n)

    sampler = Sampler(seed)
    params1, params2, data1s, data2s = generate_datasets(
        sampler, prior, max(DATASET_N, datasets_n), DATA_N
    )

    out.write("\nData generated with one component\n")
    for params, data in zip(params1[:datasets_n], data1s[:datasets_n]):
        out.write("generating data with: (μ,σ) =  (%4.2f,%4.2f)\n" % (params.mu, params.sigma))
        model, sampling_one, summing_one = _analyse(data, prior, grid, seed, out, "MLE (μ,σ)")
        tally.model1_bic_favors1 += model == 1
        tally.model1_sampling_favors1 += sampling_one
        tally.model1_summing_favors1 += summing_one

    out.write("\nData generated with two components\n")
    for params, data in zip(params2[:datasets_n], data2s[:datasets_n]):
        out.write(
            "generating data with:  m; (μ1,σ1); (μ2,σ2) =  %5.3f; (%4.2f,%4.2f); (%4.2f,%4.2f)\n"
            % (params.mix_cof, params.gauss1.mu, params.gauss1.sigma,
               params.gauss2.mu, params.gauss2.sigma)
        )
        model, sampling_one, summing_one = _analyse(data, prior, grid, seed, out, "MLE μ,σ")
        tally.model2_bic_favors2 += model == 2
        tally.model2_sampling_favors1 += sampling_one
        tally.model2_summing_favors1 += summing_one

    for line in tally.summary_lines():
        out.write(line + "\n")
    return tally


def main(argv: list[str] | None = None) -> int:
    """Command entry point: ``gaussian-poolornot [num_datasets]``."""
    if argv is None:
        argv = sys.argv[1:]
    usage = f"Usage: {_PROG} [num_datasets]"
    datasets_n = DATASET_N
    if len(argv) > 1:
        print(usage)
        return USAGE_EXIT
    if argv:
        match = _LEADING_INT.match(argv[0])
        datasets_n = int(match.group(1)) if match else 0
        if datasets_n <= 0:
            print(usage)
            return USAGE_EXIT
    run_demo(datasets_n)
    return 0


if __name__ == "__main__":
    sys.exit(main())