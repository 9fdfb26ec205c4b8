[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "purecfr"
version = "0.1.0"
description = "Poker game definitions, betting rules, betting trees and abstractions for Pure CFR solvers"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["poker", "cfr", "game theory", "abstraction", "betting tree", "mersenne twister"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment :: Board Games",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["purecfr"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
