import re

import pytest

from poolornot import batch
from poolornot.model import Prior
from poolornot.randist import GaussParams

SMALL_ARGV = ["8", "2", "3", "2", "2", "out.txt", "0", "4", "0.5", "2", "50"]


def test_parse_args_defaults():
    s = batch.parse_args([])
    assert (s.data_n, s.dataset_n, s.gauss_n, s.gamma_n, s.jbeta_n) == (25, 10, 20, 10, 40)
    assert s.savename == "Gaussian_poolOrNot_result.txt"
    assert s.prior == Prior()
    assert s.sample_repeats == 2000000


def test_parse_args_all_positions():
    s = batch.parse_args(["30", "5", "6", "7", "8", "res.txt", "1.5", "3", "0.25", "4", "1000"])
    assert (s.data_n, s.dataset_n, s.gauss_n, s.gamma_n, s.jbeta_n) == (30, 5, 6, 7, 8)
    assert s.savename == "res.txt"
    assert s.prior == Prior(GaussParams(1.5, 3.0), 0.25, 4.0)
    assert s.sample_repeats == 1000


def test_parse_args_lenient_numbers():
    s = batch.parse_args(["12abc", "x"])
    assert s.data_n == 12
    assert s.dataset_n == 0
    assert s.gauss_n == 20


def test_parse_args_truncates_savename():
    s = batch.parse_args(["1", "1", "1", "1", "1", "a" * 150])
    assert s.savename == "a" * 99


def test_run_batch_counts_in_range():
    settings = batch.parse_args(SMALL_ARGV)
    counts = batch.run_batch(settings, seed=5)
    assert len(counts) == 4
    assert all(0 <= c <= settings.dataset_n for c in counts)


def test_run_batch_deterministic():
    settings = batch.parse_args(SMALL_ARGV)
    first = batch.run_batch(settings, seed=8)
    second = batch.run_batch(settings, seed=8)
    assert len(first) == 4
    assert all(0 <= c <= 2 for c in first)
    assert tuple(first) == tuple(second)


def test_run_batch_no_datasets():
    settings = batch.parse_args(["8", "0", "3", "2", "2", "out.txt", "0", "4", "0.5", "2", "50"])
    assert batch.run_batch(settings, seed=1) == (0, 0, 0, 0)


def test_run_batch_rejects_bad_settings():
    with pytest.raises(ValueError):
        batch.run_batch(batch.Settings(data_n=-1), seed=1)
    with pytest.raises(ValueError):
        batch.run_batch(batch.Settings(sample_repeats=0), seed=1)


def test_main_prints_tuple(capsys, monkeypatch):
    monkeypatch.setenv("GSL_RNG_SEED", "3")
    assert batch.main(SMALL_ARGV) == 0
    out = capsys.readouterr().out.strip()
    match = re.fullmatch(r"\((\d+), (\d+), (\d+), (\d+)\)", out)
    assert match is not None
    assert all(0 <= int(g) <= 2 for g in match.groups())


def test_main_reports_error(capsys):
    argv = ["8", "2", "3", "0", "2"]
    assert batch.main(argv) == 2
    assert "error" in capsys.readouterr().err