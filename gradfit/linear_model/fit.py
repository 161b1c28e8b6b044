"""Mini-batch training loop for linear models."""

from __future__ import annotations

import math
from typing import Optional

import numpy as np

from ..logging import get_logger
from ..optimizers.store import ParameterStore
from .base import FitOptions, FitResult
from .concurrent import lin_fit_local
from .utils import check_random_state, check_xy, resolve_epochs, resolve_mini_batch_size, shuffle_rows

logger = get_logger(__name__)

EPOCH_BUDGET = 1e6


def lin_fit(X: np.ndarray, Y: np.ndarray, options: Optional[FitOptions] = None) -> FitResult:
    """Fit ``Y ~ activation(X @ theta)``.

    Uses the local-minimizer path (:func:`lin_fit_local`) when
    ``options.method_factory`` is set or no update rule is given, and the
    mini-batch loop (:func:`sgd_fit`) otherwise.
    """
    if options is None:
        options = FitOptions()
    if options.method_factory is not None or options.solver is None:
        return lin_fit_local(X, Y, options)
    return sgd_fit(X, Y, options)


def sgd_fit(X: np.ndarray, Y: np.ndarray, options: FitOptions) -> FitResult:
    """Drive ``options.solver`` over shuffled mini-batches until convergence.

    Each epoch shuffles the rows of (copies of) ``X`` and ``Y`` jointly,
    applies one update per mini-batch, then evaluates the objective ``J`` and
    RMSE on the full set. The fit stops once ``sqrt(RMSE) < tol`` or the epoch
    budget is spent; either way Theta, which stays bound to the solver, is
    restored to the snapshot taken at the lowest ``J`` before it is returned,
    since later epochs can move away from it.
    """
    if options.solver is None:
        raise ValueError("sgd_fit requires options.solver")
    X, Y = check_xy(X, Y)
    n_samples, n_features = X.shape
    n_outputs = Y.shape[1]
    rng = check_random_state(options.random_state)

    store = ParameterStore.zeros(n_features, n_outputs)
    theta = store.theta
    if options.theta_initializer is not None:
        options.theta_initializer(theta)
    else:
        theta[...] = 0.01 * rng.random(theta.shape)
    theta_best = store.snapshot()
    grad = np.zeros_like(theta)

    batch_size = resolve_mini_batch_size(n_samples, options.mini_batch_size)
    epochs = resolve_epochs(n_samples, options.epochs, EPOCH_BUDGET)
    y_pred_mini = np.zeros((batch_size, n_outputs))
    y_diff_mini = np.zeros((batch_size, n_outputs))
    y_pred = np.zeros((n_samples, n_outputs))
    y_diff = np.zeros((n_samples, n_outputs))

    solver = options.solver
    solver.set_theta(theta)
    loss = options.loss
    alpha, l1_ratio, activation = options.alpha, options.l1_ratio, options.activation

    rmse = math.inf
    J_best = math.inf
    converged = False
    history: list[float] = []
    epoch = 0
    while epoch < epochs and not converged:
        epoch += 1
        shuffle_rows(X, Y, rng)
        for start in range(0, n_samples, batch_size):
            end = min(start + batch_size, n_samples)
            rows = end - start
            loss(
                Y[start:end],
                X[start:end],
                theta,
                y_pred_mini[:rows],
                y_diff_mini[:rows],
                grad,
                alpha,
                l1_ratio,
                n_samples,
                activation,
            )
            solver.update_params(grad)

        J = loss(Y, X, theta, y_pred, y_diff, None, alpha, l1_ratio, n_samples, activation)
        if J < J_best:
            J_best = J
            store.snapshot(theta_best)
        rmse = math.sqrt(float(np.mean(y_diff * y_diff)))
        # sqrt of the RMSE, not the RMSE itself, is compared with tol
        converged = math.sqrt(rmse) < options.tol

        if options.history:
            history.append(J)
        if options.callback is not None:
            options.callback(epoch, J, theta)
        logger.debug("epoch %d: J=%g rmse=%g", epoch, J, rmse)

    logger.info(
        "%r finished after %d epochs: converged=%s J=%g rmse=%g",
        solver,
        epoch,
        converged,
        J_best,
        rmse,
    )
    store.restore(theta_best)
    return FitResult(
        converged=converged,
        rmse=rmse,
        objective=J_best,
        epochs=epoch,
        theta=store.theta,
        history=history,
    )


__all__ = ["EPOCH_BUDGET", "lin_fit", "sgd_fit"]
