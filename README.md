# poolornot

A small demonstration of Bayesian model selection. Given a sample of numbers,
was it drawn from one Gaussian, or from a mixture of two?

Model parameters have a prior. Each mean has a normal prior, by default
N(0, 4). Each precision has a gamma prior, by default shape 0.5 and scale 2.
The mixing coefficient has the Jeffreys prior Beta(0.5, 0.5). For each dataset
the package estimates the marginal likelihood (the evidence) of both models in
two ways:

- **by sampling**: a Monte Carlo average of the likelihood over prior draws.
  The draws are split across worker threads, and each worker has its own
  seeded Mersenne Twister stream.
- **by summing**: a Riemann sum over a grid of prior quantiles.

It also fits both models by maximum likelihood and compares the fits with the
Bayesian Information Criterion. The one-component fit is in closed form. The
two-component fit uses expectation maximisation. All evidence values are
natural-log probabilities.

## Installation

```
pip install .
```

## Commands

### poolornot-demo

```
poolornot-demo [num_datasets]
```

This command generates `num_datasets` datasets (default 10) of 50 points each,
from each model. For every dataset it prints:

- the generating parameters;
- the maximum-likelihood fits;
- the BIC choice;
- the four evidence estimates.

At the end it prints how often each method picked the true model. If the
argument is not a positive integer, or if more than one argument is given, the
command prints a usage line and exits with status 64.

### poolornot-batch

```
poolornot-batch [data_n] [dataset_n] [gauss_n] [gamma_n] [jbeta_n] [savename] [mu_mu] [mu_sigma] [sigma_a] [sigma_b] [repeats]
```

This command runs the comparison with every setting given as a positional
argument. It prints only the tally:

```
(sampling model 1, sampling model 2, summing model 1, summing model 2)
```

Each number is a count of correct selections. The defaults are:

| Setting | Default |
|---|---|
| data_n | 25 points |
| dataset_n | 10 datasets |
| grid sizes | 20, 10 and 40 |
| prior | N(0, 4) for the mean; gamma(0.5, 2) for the precision |
| repeats | 2,000,000 prior draws |

Arguments are read leniently: trailing text is ignored, and text that is not a
number counts as zero. If a setting is invalid, the command prints an error to
standard error and exits with status 2.

### poolornot-jeffreys

```
poolornot-jeffreys
```

This command prints ten draws from Beta(0.5, 0.5).

### Seeds and speed

Every command takes its seed from the `GSL_RNG_SEED` environment variable if it
is set. Otherwise it uses 42, so runs are reproducible. With the default
2,000,000 draws per estimate, the sampling estimates take a while.

## Library use

| Module | Contents |
|---|---|
| `poolornot.randist` | `GaussParams`, the seeded `Sampler`, `gaussian_pdf`, `sigma_of_precision`, `seed_from_env` |
| `poolornot.model` | `Prior`, `MixtureParams`, data generation, log-likelihoods, `logsumexp`, `max_likelihood_1gauss`, `max_likelihood_2gauss` (EM), `compare_models_bic` |
| `poolornot.evidence` | `build_grid` / `Grid`, `evidence_1component_by_summing`, `evidence_2component_by_summing`, `evidence_1component_by_sampling`, `evidence_2component_by_sampling` |
| `poolornot.demo` | `run_demo`, `generate_datasets`, `Tally` |
| `poolornot.batch` | `Settings`, `parse_args`, `run_batch` |
| `poolornot.jeffreys` | `sample_jeffreys` |

An example:

```python
from poolornot.randist import Sampler
from poolornot.model import Prior, generate_1component, max_likelihood_1gauss
from poolornot.evidence import (
    build_grid,
    evidence_1component_by_sampling,
    evidence_1component_by_summing,
    evidence_2component_by_summing,
)

sampler = Sampler(42)
prior = Prior()
data = generate_1component(sampler, prior.sample_gauss(sampler), 50)

grid = build_grid(prior, 20, 10, 40)
log_e1 = evidence_1component_by_summing(data, grid)
log_e2 = evidence_2component_by_summing(data, grid)
print("one component" if log_e1 > log_e2 else "two components")
print(max_likelihood_1gauss(data))
print(evidence_1component_by_sampling(data, prior, repeats=100_000, seed=42, workers=4))
```

## What it does not do

`poolornot-batch` accepts a `savename` argument (default
`Gaussian_poolOrNot_result.txt`), but it writes no file. Results go only to
standard output. The package reads no data of your own from the command line.
To score a real sample, use the library functions.

## Running the tests

```
pip install .[test]
pytest
```