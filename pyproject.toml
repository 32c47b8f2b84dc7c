[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "poolornot"
version = "0.1.0"
description = "Bayesian choice between one- and two-component Gaussian models of a sample, by prior sampling, grid summing and BIC."
requires-python = ">=3.10"
dependencies = [
    "numpy",
    "scipy",
]
keywords = ["bayesian", "model selection", "gaussian mixture", "evidence", "marginal likelihood", "BIC", "EM"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
poolornot-demo = "poolornot.demo:main"
poolornot-batch = "poolornot.batch:main"
poolornot-jeffreys = "poolornot.jeffreys:main"

[tool.hatch.build.targets.wheel]
packages = ["poolornot"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
