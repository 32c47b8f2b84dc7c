"""One- and two-component Gaussian models: priors, data generation and likelihoods."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, field

import numpy as np

from poolornot.randist import GaussParams, Sampler, gaussian_pdf, sigma_of_precision

# Free parameters of each model, as counted by the BIC.
_ONE_COMPONENT_PARAMS = 2  # mu, sigma
_TWO_COMPONENT_PARAMS = 5  # mixing coefficient, mu1, sigma1, mu2, sigma2

_MIN_VARIANCE = 1e-6


@dataclass(frozen=True)
class MixtureParams:
    """A two-component Gaussian mixture; *mix_cof* is the weight of *gauss1*."""

    mix_cof: float
    gauss1: GaussParams
    gauss2: GaussParams

    def __str__(self) -> str:
        return f"{self.mix_cof:5.3f}; {self.gauss1}; {self.gauss2}"


@dataclass(frozen=True)
class Prior:
    """Normal prior on the mean and gamma prior on the precision of a component."""

    mu_prior: GaussParams = field(default_factory=lambda: GaussParams(0.0, 4.0))
    sigma_a: float = 0.5
    sigma_b: float = 2.0

    def sample_gauss(self, sampler: Sampler) -> GaussParams:
        """Draw the parameters of one Gaussian component."""
        mu = sampler.gaussian(self.mu_prior)
        sigma = sigma_of_precision(sampler.gamma(self.sigma_a, self.sigma_b))
        return GaussParams(mu, sigma)

    def sample_mixture(self, sampler: Sampler) -> MixtureParams:
        """Draw a mixing coefficient from the Jeffreys prior and two components."""
        mix_cof = sampler.beta_jeffreys()
        gauss1 = self.sample_gauss(sampler)
        gauss2 = self.sample_gauss(sampler)
        return MixtureParams(mix_cof, gauss1, gauss2)


@dataclass(frozen=True)
class Mle1Result:
    """Maximum-likelihood fit of a single Gaussian."""

    mu: float
    sigma: float
    log_likelihood: float


@dataclass(frozen=True)
class Mle2Result:
    """Maximum-likelihood fit of a two-component Gaussian mixture."""

    mix_cof: float
    gauss1: GaussParams
    gauss2: GaussParams
    log_likelihood: float


def _as_array(values: Iterable[float]) -> np.ndarray:
    arr = np.asarray(values if not isinstance(values, (list, tuple)) else list(values),
                     dtype=float).ravel()
    return arr


def _sequential_pivot(values: np.ndarray) -> float:
    """The reference point used for the shifted sum.

    A finite pivot is replaced only by a larger value; a non-finite pivot
    (nan or infinite) is replaced by whatever comes next.
    """
    pivot = float(values[0])
    for x in values[1:]:
        x = float(x)
        if not math.isfinite(pivot) or x > pivot:
            pivot = x
    return pivot


def logsumexp(log_probs: Iterable[float]) -> float:
    """Return log(sum(exp(v))) over *log_probs*, ignoring nan and infinite terms."""
    arr = _as_array(log_probs)
    if arr.size == 0:
        raise ValueError("logsumexp needs at least one value")
    finite = np.isfinite(arr)
    pivot = float(arr.max()) if finite.all() else _sequential_pivot(arr)
    with np.errstate(over="ignore", under="ignore", invalid="ignore", divide="ignore"):
        total = float(np.exp(arr[finite] - pivot).sum())
        return float(pivot + np.log(total))


def sample_mean(data: Iterable[float]) -> float:
    """Arithmetic mean of *data*."""
    arr = _as_array(data)
    if arr.size == 0:
        raise ValueError("mean of empty data")
    return float(arr.sum() / arr.size)


def sample_variance(data: Iterable[float]) -> float:
    """Population variance of *data* (divides by n)."""
    arr = _as_array(data)
    mean = sample_mean(arr)
    diff = arr - mean
    return float((diff * diff).sum() / arr.size)


def generate_1component(sampler: Sampler, params: GaussParams, n: int) -> list[float]:
    """Draw *n* points from a single Gaussian."""
    if n < 0:
        raise ValueError("n must be non-negative")
    return [sampler.gaussian(params) for _ in range(n)]


def generate_2component(sampler: Sampler, params: MixtureParams, n: int) -> list[float]:
    """Draw *n* points from a two-component mixture."""
    if n < 0:
        raise ValueError("n must be non-negative")
    return [
        sampler.gaussian(params.gauss1 if sampler.flat01() < params.mix_cof else params.gauss2)
        for _ in range(n)
    ]


def log_likelihood_1gauss(data: Iterable[float], params: GaussParams) -> float:
    """log P[data | mu, sigma]."""
    arr = _as_array(data)
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.log(gaussian_pdf(arr, params)).sum())


def log_likelihood_2gauss(
    data: Iterable[float], mix_cof: float, gauss1: GaussParams, gauss2: GaussParams
) -> float:
    """log P[data | mix_cof, gauss1, gauss2]."""
    arr = _as_array(data)
    prob1 = gaussian_pdf(arr, gauss1)
    prob2 = gaussian_pdf(arr, gauss2)
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.log((1 - mix_cof) * prob2 + mix_cof * prob1).sum())


def max_likelihood_1gauss(data: Iterable[float]) -> Mle1Result:
    """Closed-form maximum-likelihood single Gaussian."""
    arr = _as_array(data)
    mu = sample_mean(arr)
    sigma = math.sqrt(sample_variance(arr))
    return Mle1Result(mu, sigma, log_likelihood_1gauss(arr, GaussParams(mu, sigma)))


def max_likelihood_2gauss(
    data: Iterable[float], max_iter: int = 100, tolerance: float = 1e-6
) -> Mle2Result:
    """Fit a two-component mixture by expectation maximisation."""
    arr = _as_array(data)
    n = arr.size
    single = max_likelihood_1gauss(arr)

    gauss1 = GaussParams(single.mu - 0.5 * single.sigma, single.sigma * 0.8)
    gauss2 = GaussParams(single.mu + 0.5 * single.sigma, single.sigma * 1.2)
    mix_cof = 0.5
    previous = -math.inf

    with np.errstate(divide="ignore", invalid="ignore", over="ignore", under="ignore"):
        for _ in range(max_iter):
            prob1 = mix_cof * gaussian_pdf(arr, gauss1)
            prob2 = (1 - mix_cof) * gaussian_pdf(arr, gauss2)
            resp = prob1 / (prob1 + prob2)
            other = 1 - resp

            sum_r = float(resp.sum())
            sum_1r = float(other.sum())
            mix_cof = sum_r / n

            mu1 = float((resp * arr).sum()) / sum_r if sum_r else math.nan
            mu2 = float((other * arr).sum()) / sum_1r if sum_1r else math.nan
            var1 = (float((resp * arr * arr).sum()) / sum_r if sum_r else math.nan) - mu1 * mu1
            var2 = (float((other * arr * arr).sum()) / sum_1r if sum_1r else math.nan) - mu2 * mu2
            gauss1 = GaussParams(mu1, math.sqrt(float(np.fmax(var1, _MIN_VARIANCE))))
            gauss2 = GaussParams(mu2, math.sqrt(float(np.fmax(var2, _MIN_VARIANCE))))

            current = log_likelihood_2gauss(arr, mix_cof, gauss1, gauss2)
            if abs(current - previous) < tolerance:
                break
            previous = current

    return Mle2Result(
        mix_cof, gauss1, gauss2, log_likelihood_2gauss(arr, mix_cof, gauss1, gauss2)
    )


def compare_models_bic(mle1: Mle1Result, mle2: Mle2Result, n: int) -> int:
    """Return 2 if the mixture has the lower BIC on *n* points, else 1."""
    if n <= 0:
        raise ValueError("n must be positive")
    log_n = math.log(n)
    bic1 = -2 * mle1.log_likelihood + _ONE_COMPONENT_PARAMS * log_n
    bic2 = -2 * mle2.log_likelihood + _TWO_COMPONENT_PARAMS * log_n
    return 2 if bic2 < bic1 else 1