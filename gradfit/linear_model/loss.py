"""Regularized losses for linear models.

All losses share one signature::

    loss(y_true, X, theta, y_pred, y_diff, grad, alpha, l1_ratio, n_samples, activation) -> J

``y_pred`` and ``y_diff`` are filled in place with the activated predictions
and the residuals ``y_pred - y_true``. When ``grad`` is not ``None`` it is
overwritten with ``dJ/dtheta``. The data term is averaged over the rows of
``X``; the elastic-net penalty is scaled by ``1 / n_samples`` so mini-batches
of a larger set share the full-set regularization weight.
"""

from __future__ import annotations

from typing import Callable, Optional

import numpy as np

from ..errors import UnsupportedConfigurationError
from .activations import Activation

LossFunction = Callable[
    [np.ndarray, np.ndarray, np.ndarray, np.ndarray, np.ndarray, Optional[np.ndarray], float, float, int, Activation],
    float,
]

_PROB_CLIP = 1e-12


def _penalty(theta: np.ndarray, alpha: float, l1_ratio: float, n_samples: int) -> float:
    if alpha <= 0.0:
        return 0.0
    l1 = alpha * l1_ratio * float(np.sum(np.abs(theta)))
    l2 = alpha * (1.0 - l1_ratio) * float(np.sum(theta * theta)) / 2.0
    return (l1 + l2) / n_samples


def _add_penalty_grad(grad: np.ndarray, theta: np.ndarray, alpha: float, l1_ratio: float, n_samples: int) -> None:
    if alpha <= 0.0:
        return
    grad += alpha * l1_ratio * np.sign(theta) / n_samples
    grad += alpha * (1.0 - l1_ratio) * theta / n_samples


def square_loss(
    y_true: np.ndarray,
    X: np.ndarray,
    theta: np.ndarray,
    y_pred: np.ndarray,
    y_diff: np.ndarray,
    grad: Optional[np.ndarray],
    alpha: float,
    l1_ratio: float,
    n_samples: int,
    activation: Activation,
) -> float:
    """Half mean squared error plus elastic-net penalty."""
    m = X.shape[0]
    y_pred[...] = activation.f(X @ theta)
    np.subtract(y_pred, y_true, out=y_diff)
    J = float(np.sum(y_diff * y_diff)) / (2.0 * m)
    J += _penalty(theta, alpha, l1_ratio, n_samples)
    if grad is not None:
        grad[...] = X.T @ (y_diff * activation.fprime(y_pred)) / m
        _add_penalty_grad(grad, theta, alpha, l1_ratio, n_samples)
    return J


def cross_entropy_loss(
    y_true: np.ndarray,
    X: np.ndarray,
    theta: np.ndarray,
    y_pred: np.ndarray,
    y_diff: np.ndarray,
    grad: Optional[np.ndarray],
    alpha: float,
    l1_ratio: float,
    n_samples: int,
    activation: Activation,
) -> float:
    """Binary cross-entropy for outputs in (0, 1), e.g. with ``Logistic``."""
    m = X.shape[0]
    y_pred[...] = activation.f(X @ theta)
    np.subtract(y_pred, y_true, out=y_diff)
    p = np.clip(y_pred, _PROB_CLIP, 1.0 - _PROB_CLIP)
    J = -float(np.sum(y_true * np.log(p) + (1.0 - y_true) * np.log1p(-p))) / m
    J += _penalty(theta, alpha, l1_ratio, n_samples)
    if grad is not None:
        # dJ/dp * dp/dz, which reduces to (p - y) for the logistic activation
        delta = (p - y_true) / (p * (1.0 - p)) * activation.fprime(p)
        grad[...] = X.T @ delta / m
        _add_penalty_grad(grad, theta, alpha, l1_ratio, n_samples)
    return J


_LOSSES = {"square": square_loss, "cross-entropy": cross_entropy_loss}


def get_loss(name: str) -> LossFunction:
    try:
        return _LOSSES[name.lower()]
    except KeyError:
        raise UnsupportedConfigurationError(
            f"Unknown loss '{name}'. Supported names: {sorted(_LOSSES)}"
        ) from None


__all__ = ["LossFunction", "cross_entropy_loss", "get_loss", "square_loss"]
