"""Linear fits delegated to a local minimizer, one concurrent fit per output.

When outputs are independent, each column of Theta only affects its own
column of the loss, so the columns are minimized separately in a thread pool.
Every column task owns its parameter vector and prediction/residual buffers;
the only shared structure is the completion queue drained by
``as_completed``. Results are written back by column index, so the assembled
Theta does not depend on which task finishes first.
"""

from __future__ import annotations

import concurrent.futures
import math
import os
from typing import Callable, Optional

import numpy as np

from ..errors import UnsupportedConfigurationError
from ..logging import get_logger
from ..optimize.core import Method, OptimizeResult, Problem, Settings
from ..optimize.local import local_minimize
from ..optimize.methods import LBFGS
from ..optimizers.store import ParameterStore
from .base import FitOptions, FitResult
from .utils import check_random_state, check_xy, resolve_epochs

logger = get_logger(__name__)

EVALUATION_BUDGET = 4e6


def _make_problem(X: np.ndarray, Y: np.ndarray, options: FitOptions, n_samples: int) -> Problem:
    """Objective over the row-major flattened ``(n_features, Y.shape[1])`` Theta."""
    shape = (X.shape[1], Y.shape[1])
    y_pred = np.zeros(Y.shape)
    y_diff = np.zeros(Y.shape)

    def fun(w: np.ndarray) -> float:
        return options.loss(
            Y, X, w.reshape(shape), y_pred, y_diff, None,
            options.alpha, options.l1_ratio, n_samples, options.activation,
        )

    def grad(w: np.ndarray) -> np.ndarray:
        g = np.zeros(shape)
        options.loss(
            Y, X, w.reshape(shape), y_pred, y_diff, g,
            options.alpha, options.l1_ratio, n_samples, options.activation,
        )
        return g.reshape(-1)

    return Problem(fun=fun, grad=grad, dim=shape[0] * shape[1])


def _fit_column(
    X: np.ndarray,
    y: np.ndarray,
    theta0: np.ndarray,
    options: FitOptions,
    settings: Settings,
    method_factory: Callable[[], Method],
) -> OptimizeResult:
    problem = _make_problem(X, y, options, X.shape[0])
    return local_minimize(problem, theta0, method_factory(), settings)


def lin_fit_local(X: np.ndarray, Y: np.ndarray, options: Optional[FitOptions] = None) -> FitResult:
    """Fit a linear model with a reverse-communication minimization method.

    Args:
        X: ``(n_samples, n_features)`` inputs.
        Y: ``(n_samples, n_outputs)`` targets.
        options: Fit options; ``method_factory`` defaults to :class:`LBFGS`.
            ``callback`` and ``history`` are honoured by the joint fit only,
            where one major iteration of the method counts as an epoch.

    Returns:
        A :class:`FitResult`. ``converged`` is False unless every column stopped on a
        convergence threshold; a failing column never interrupts the others.

    Raises:
        UnsupportedConfigurationError: If ``callback`` or ``history`` is set for a
            per-output fit.
    """
    if options is None:
        options = FitOptions()
    if options.per_output_fit and (options.callback is not None or options.history):
        raise UnsupportedConfigurationError(
            "callback and history require per_output_fit=False with a local minimizer"
        )
    X, Y = check_xy(X, Y)
    n_samples, n_features = X.shape
    n_outputs = Y.shape[1]
    method_factory = options.method_factory or LBFGS
    rng = check_random_state(options.random_state)

    store = ParameterStore.zeros(n_features, n_outputs)
    if options.theta_initializer is not None:
        options.theta_initializer(store.theta)
    else:
        store.theta[...] = 0.01 * rng.standard_normal(store.shape)

    settings = Settings(
        gradient_threshold=1e-12,
        function_threshold=options.tol * options.tol,
        func_evaluations=resolve_epochs(n_samples, options.epochs, EVALUATION_BUDGET),
    )
    if options.per_output_fit:
        return _fit_per_output(X, Y, store, options, settings, method_factory)
    return _fit_joint(X, Y, store, options, settings, method_factory)


def _fit_per_output(
    X: np.ndarray,
    Y: np.ndarray,
    store: ParameterStore,
    options: FitOptions,
    settings: Settings,
    method_factory: Callable[[], Method],
) -> FitResult:
    n_outputs = Y.shape[1]
    max_workers = min(n_outputs, options.n_jobs or os.cpu_count() or 1)
    results: list[Optional[OptimizeResult]] = [None] * n_outputs

    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(
                _fit_column,
                X,
                Y[:, o : o + 1].copy(),
                store.column(o).copy(),
                options,
                settings,
                method_factory,
            ): o
            for o in range(n_outputs)
        }
        for future in concurrent.futures.as_completed(futures):
            o = futures[future]
            try:
                results[o] = future.result()
            except ArithmeticError as exc:
                logger.warning("fit of output %d failed: %s", o, exc)

    converged = True
    objectives = np.zeros(n_outputs)
    evaluations = 0
    for o, res in enumerate(results):
        if res is None:
            # column keeps its initial values
            converged = False
            objectives[o] = math.nan
            continue
        store.column(o)[:] = res.x
        objectives[o] = res.fun
        evaluations += res.nfev
        converged = converged and res.success
        logger.debug("output %d: %s (%s)", o, res.status.value, res.message)

    rmse = float(np.mean(np.sqrt(objectives)))
    logger.info(
        "per-output fit of %d columns finished: converged=%s rmse=%g evaluations=%d",
        n_outputs,
        converged,
        rmse,
        evaluations,
    )
    return FitResult(
        converged=converged,
        rmse=rmse,
        objective=float(np.mean(objectives)),
        epochs=evaluations,
        theta=store.theta,
    )


def _fit_joint(
    X: np.ndarray,
    Y: np.ndarray,
    store: ParameterStore,
    options: FitOptions,
    settings: Settings,
    method_factory: Callable[[], Method],
) -> FitResult:
    n_outputs = Y.shape[1]
    problem = _make_problem(X, Y, options, X.shape[0])
    history: list[float] = []
    iteration = 0

    def on_iteration(x: np.ndarray, f: float, grad: np.ndarray) -> None:
        nonlocal iteration
        iteration += 1
        if options.history:
            history.append(f)
        if options.callback is not None:
            options.callback(iteration, f, x.reshape(store.shape))

    callback = on_iteration if options.callback is not None or options.history else None
    res = local_minimize(problem, store.flat.copy(), method_factory(), settings, callback=callback)
    store.restore(res.x.reshape(store.shape))
    rmse = math.sqrt(res.fun / n_outputs)
    logger.info(
        "joint fit finished: status=%s rmse=%g evaluations=%d",
        res.status.value,
        rmse,
        res.nfev,
    )
    return FitResult(
        converged=res.success,
        rmse=rmse,
        objective=res.fun,
        epochs=res.nfev,
        theta=store.theta,
        history=history,
    )


__all__ = ["EVALUATION_BUDGET", "lin_fit_local"]
