"""Bayesian choice between one- and two-component Gaussian models of a sample, by prior sampling, grid summing and BIC."""

__version__ = "0.1.0"
__all__ = ["randist", "jeffreys", "model", "evidence", "demo", "batch"]