"""Input validation, row shuffling and default sizing for the fit loops."""

from __future__ import annotations

import math
from typing import Optional, Union

import numpy as np

from ..errors import ShapeMismatchError

RandomState = Union[None, int, np.random.Generator]


def check_random_state(random_state: RandomState) -> np.random.Generator:
    """Turn a seed, ``None`` or a generator into a ``numpy.random.Generator``."""
    if isinstance(random_state, np.random.Generator):
        return random_state
    return np.random.default_rng(random_state)


def check_xy(X: np.ndarray, Y: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Return float64 copies of ``X`` (2-D) and ``Y`` (2-D, one column per output)."""
    X = np.array(X, dtype=float)
    Y = np.array(Y, dtype=float)
    if X.ndim != 2:
        raise ShapeMismatchError(f"X must be 2-D, got shape {X.shape}")
    if Y.ndim == 1:
        Y = Y.reshape(-1, 1)
    if Y.ndim != 2:
        raise ShapeMismatchError(f"Y must be 1-D or 2-D, got shape {Y.shape}")
    if X.shape[0] != Y.shape[0]:
        raise ShapeMismatchError(f"X and Y row counts differ: {X.shape[0]} != {Y.shape[0]}")
    if X.shape[0] == 0:
        raise ValueError("cannot fit on an empty dataset")
    return X, Y


def shuffle_rows(X: np.ndarray, Y: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    """Apply one random row permutation to ``X`` and ``Y`` in place.

    Returns the permutation used.
    """
    if X.shape[0] != Y.shape[0]:
        raise ShapeMismatchError(f"X and Y row counts differ: {X.shape[0]} != {Y.shape[0]}")
    perm = rng.permutation(X.shape[0])
    X[...] = X[perm]
    Y[...] = Y[perm]
    return perm


def resolve_mini_batch_size(n_samples: int, requested: Optional[int] = None) -> int:
    """``requested`` if positive, else ``clamp(sqrt(n_samples), 1, 100)``; never above ``n_samples``."""
    if requested is not None and requested > 0:
        size = int(requested)
    else:
        size = int(max(1.0, min(100.0, math.sqrt(n_samples))))
    return max(1, min(n_samples, size))


def resolve_epochs(n_samples: int, requested: Optional[int], budget: float) -> int:
    """``requested`` if positive, else ``budget // n_samples`` (at least 1)."""
    if requested is not None and requested > 0:
        return int(requested)
    return max(1, int(budget // n_samples))


__all__ = [
    "RandomState",
    "check_random_state",
    "check_xy",
    "resolve_epochs",
    "resolve_mini_batch_size",
    "shuffle_rows",
]
