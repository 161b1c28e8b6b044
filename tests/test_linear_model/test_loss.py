"""Tests for the regularized loss functions."""

from __future__ import annotations

import numpy as np
import pytest

from gradfit.errors import UnsupportedConfigurationError
from gradfit.linear_model import Identity, Logistic, Tanh, cross_entropy_loss, get_loss, square_loss
from gradfit.optimize import approx_grad


def _objective(loss, Y, X, alpha, l1_ratio, n_samples, activation):
    y_pred = np.zeros(Y.shape)
    y_diff = np.zeros(Y.shape)

    def fun(theta: np.ndarray) -> float:
        return loss(Y, X, theta, y_pred, y_diff, None, alpha, l1_ratio, n_samples, activation)

    return fun


@pytest.mark.parametrize("activation", [Identity(), Tanh(), Logistic()])
@pytest.mark.parametrize("alpha,l1_ratio", [(0.0, 0.0), (0.5, 0.0), (0.5, 0.3)])
def test_square_loss_gradient_matches_finite_differences(
    activation, alpha: float, l1_ratio: float, rng: np.random.Generator
) -> None:
    X = rng.standard_normal((20, 3))
    Y = rng.standard_normal((20, 2))
    theta = rng.uniform(0.2, 1.0, size=(3, 2)) * rng.choice([-1.0, 1.0], size=(3, 2))
    grad = np.zeros_like(theta)
    J = square_loss(Y, X, theta, np.zeros(Y.shape), np.zeros(Y.shape), grad, alpha, l1_ratio, 100, activation)

    fun = _objective(square_loss, Y, X, alpha, l1_ratio, 100, activation)
    assert J == pytest.approx(fun(theta))
    assert np.allclose(grad, approx_grad(fun, theta), atol=1e-6)


def test_cross_entropy_gradient_matches_finite_differences(rng: np.random.Generator) -> None:
    X = rng.standard_normal((30, 2))
    Y = (rng.random((30, 1)) > 0.5).astype(float)
    theta = rng.standard_normal((2, 1))
    grad = np.zeros_like(theta)
    cross_entropy_loss(Y, X, theta, np.zeros(Y.shape), np.zeros(Y.shape), grad, 0.1, 0.0, 30, Logistic())

    fun = _objective(cross_entropy_loss, Y, X, 0.1, 0.0, 30, Logistic())
    assert np.allclose(grad, approx_grad(fun, theta), atol=1e-6)


def test_square_loss_fills_buffers() -> None:
    X = np.array([[1.0, 0.0], [0.0, 1.0]])
    Y = np.array([[1.0], [1.0]])
    theta = np.array([[2.0], [0.0]])
    y_pred = np.zeros((2, 1))
    y_diff = np.zeros((2, 1))
    J = square_loss(Y, X, theta, y_pred, y_diff, None, 0.0, 0.0, 2, Identity())
    assert np.array_equal(y_pred, [[2.0], [0.0]])
    assert np.array_equal(y_diff, [[1.0], [-1.0]])
    assert J == pytest.approx(0.5)


def test_penalty_is_scaled_by_sample_count() -> None:
    X = np.eye(2)
    Y = X.copy()
    theta = np.eye(2)
    buffers = (np.zeros((2, 2)), np.zeros((2, 2)))
    # a perfect fit leaves only the penalty
    ridge = square_loss(Y, X, theta, *buffers, None, 2.0, 0.0, 10, Identity())
    lasso = square_loss(Y, X, theta, *buffers, None, 2.0, 1.0, 10, Identity())
    assert ridge == pytest.approx(2.0 * 2.0 / 2.0 / 10)
    assert lasso == pytest.approx(2.0 * 2.0 / 10)


def test_get_loss() -> None:
    assert get_loss("square") is square_loss
    assert get_loss("Cross-Entropy") is cross_entropy_loss
    with pytest.raises(UnsupportedConfigurationError, match="Unknown loss"):
        get_loss("hinge")
