"""Pytest configuration and shared fixtures for gradfit tests.

This module provides:
- Deterministic RNG fixtures seeded from ``TEST_RNG_SEED``
- A small noise-free multi-output linear regression problem
"""

import os
from typing import NamedTuple

import numpy as np
import pytest


def _seed() -> int:
    return int(os.environ.get("TEST_RNG_SEED", "0"))


class LinearProblem(NamedTuple):
    X: np.ndarray
    Y: np.ndarray
    theta: np.ndarray


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).
    This ensures tests are reproducible while allowing override for debugging.

    Returns:
        A seeded numpy.random.Generator instance.
    """
    return np.random.default_rng(_seed())


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds() -> None:
    """Seed numpy's global RNG for code that draws from ``np.random`` directly."""
    np.random.seed(_seed())


@pytest.fixture(scope="function")
def linear_problem(rng: np.random.Generator) -> LinearProblem:
    """200 samples, 2 features, 2 outputs, ``Y = X @ theta`` exactly."""
    X = rng.standard_normal((200, 2))
    theta = rng.standard_normal((2, 2))
    return LinearProblem(X=X, Y=X @ theta, theta=theta)
