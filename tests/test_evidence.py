import math

import numpy as np
import pytest

from poolornot.evidence import (
    build_grid,
    evidence_1component_by_sampling,
    evidence_1component_by_summing,
    evidence_2component_by_sampling,
    evidence_2component_by_summing,
)
from poolornot.model import Prior
from poolornot.randist import GaussParams

UNIMODAL = [-0.4, -0.2, 0.0, 0.1, 0.3]
BIMODAL = [-6.0 + 0.05 * k for k in range(-10, 10)] + [6.0 + 0.05 * k for k in range(-10, 10)]


def test_grid_sizes_follow_arguments():
    grid = build_grid(Prior(), 7, 5, 9)
    assert grid.mu_values.size == 7
    assert grid.precision_values.size == 5
    assert grid.mix_values.size == 9
    assert grid.sigma_values.size == 5


def test_grid_defaults_match_prior_defaults():
    grid = build_grid()
    assert grid.mu_values.size == 20
    assert grid.precision_values.size == 10
    assert grid.mix_values.size == 40


def test_grid_starts_at_zero_quantile_for_gamma_and_beta():
    grid = build_grid(Prior(), 4, 6, 8)
    assert grid.precision_values[0] == 0.0
    assert grid.mix_values[0] == 0.0
    assert math.isinf(grid.sigma_values[0])


def test_grid_mix_values_stay_below_half():
    grid = build_grid(Prior(), 3, 3, 40)
    values = grid.mix_values.tolist()
    assert len(values) == 40
    assert values[0] == 0.0
    assert max(values) < 0.5
    assert values == sorted(values)
    assert len(set(values)) == 40


def test_grid_mu_values_symmetric_about_prior_mean():
    prior = Prior(mu_prior=GaussParams(1.5, 2.0))
    grid = build_grid(prior, 9, 3, 3)
    assert np.all(np.diff(grid.mu_values) > 0)
    assert np.allclose(grid.mu_values + grid.mu_values[::-1], 3.0)
    assert grid.mu_values[4] == pytest.approx(1.5)


@pytest.mark.parametrize("sizes", [(-1, 3, 3), (3, 0, 3), (3, 3, 0)])
def test_grid_rejects_bad_sizes(sizes):
    with pytest.raises(ValueError):
        build_grid(Prior(), *sizes)


def test_summing_with_empty_mu_grid_is_zero():
    grid = build_grid(Prior(), 0, 3, 3)
    assert evidence_1component_by_summing(UNIMODAL, grid) == 0.0
    assert evidence_2component_by_summing(UNIMODAL, grid) == 0.0


def test_summing_is_translation_invariant():
    shift = 2.5
    base = build_grid(Prior(), 8, 5, 6)
    moved = build_grid(Prior(mu_prior=GaussParams(shift, 4.0)), 8, 5, 6)
    shifted = [x + shift for x in UNIMODAL]
    assert evidence_1component_by_summing(shifted, moved) == pytest.approx(
        evidence_1component_by_summing(UNIMODAL, base), rel=1e-9
    )
    assert evidence_2component_by_summing(shifted, moved) == pytest.approx(
        evidence_2component_by_summing(UNIMODAL, base), rel=1e-9
    )


def test_summing_prefers_two_components_for_bimodal_data():
    grid = build_grid(Prior(), 20, 10, 10)
    one = evidence_1component_by_summing(BIMODAL, grid)
    two = evidence_2component_by_summing(BIMODAL, grid)
    assert math.isfinite(one) and math.isfinite(two)
    assert two > one


def test_summing_of_no_data_is_log_of_finite_fraction():
    grid = build_grid(Prior(), 5, 4, 3)
    # With no data every grid point has likelihood one.
    assert evidence_1component_by_summing([], grid) == pytest.approx(0.0)
    assert evidence_2component_by_summing([], grid) == pytest.approx(0.0)


def test_sampling_is_reproducible_for_a_seed():
    a = evidence_1component_by_sampling(UNIMODAL, Prior(), 3000, seed=7, workers=3)
    b = evidence_1component_by_sampling(UNIMODAL, Prior(), 3000, seed=7, workers=3)
    assert a == b
    c = evidence_2component_by_sampling(UNIMODAL, Prior(), 3000, seed=7, workers=3)
    d = evidence_2component_by_sampling(UNIMODAL, Prior(), 3000, seed=7, workers=3)
    assert c == d


def test_sampling_of_no_data_is_zero():
    assert evidence_1component_by_sampling([], Prior(), 100, seed=1, workers=4) == pytest.approx(0.0)
    assert evidence_2component_by_sampling([], Prior(), 100, seed=1, workers=4) == pytest.approx(0.0)


def test_sampling_agrees_roughly_with_summing():
    grid = build_grid(Prior(), 20, 10, 40)
    summed = evidence_1component_by_summing(UNIMODAL, grid)
    sampled = evidence_1component_by_sampling(UNIMODAL, Prior(), 40000, seed=3, workers=4)
    assert abs(summed - sampled) < 1.5


def test_sampling_prefers_two_components_for_bimodal_data():
    one = evidence_1component_by_sampling(BIMODAL, Prior(), 20000, seed=11, workers=4)
    two = evidence_2component_by_sampling(BIMODAL, Prior(), 20000, seed=11, workers=4)
    assert two > one


@pytest.mark.parametrize("repeats, workers", [(0, 2), (10, 0)])
def test_sampling_rejects_bad_counts(repeats, workers):
    with pytest.raises(ValueError):
        evidence_1component_by_sampling(UNIMODAL, Prior(), repeats, seed=1, workers=workers)
    with pytest.raises(ValueError):
        evidence_2component_by_sampling(UNIMODAL, Prior(), repeats, seed=1, workers=workers)