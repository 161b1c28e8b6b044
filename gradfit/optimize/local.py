"""Driver running a reverse-communication :class:`Method` to termination."""

from __future__ import annotations

import math
from typing import Callable, Optional

import numpy as np

from ..errors import UnsupportedConfigurationError
from ..logging import get_logger
from .core import Array, Location, Method, Operation, OptimizeResult, Problem, Settings, Status
from .utils import approx_grad

logger = get_logger(__name__)

_MESSAGES = {
    Status.GRADIENT_THRESHOLD: "Gradient threshold satisfied.",
    Status.FUNCTION_THRESHOLD: "Function threshold satisfied.",
    Status.FUNCTION_EVALUATION_LIMIT: "Function evaluation limit reached.",
    Status.ITERATION_LIMIT: "Major iteration limit reached.",
}


def _grad_norm(grad: Array) -> float:
    return float(np.max(np.abs(grad))) if grad.size else 0.0


def _check_thresholds(location: Location, settings: Settings) -> Status:
    if location.f < settings.function_threshold:
        return Status.FUNCTION_THRESHOLD
    if _grad_norm(location.gradient) < settings.gradient_threshold:
        return Status.GRADIENT_THRESHOLD
    return Status.NOT_TERMINATED


def _check_budgets(nfev: int, nit: int, settings: Settings) -> Status:
    if settings.func_evaluations > 0 and nfev >= settings.func_evaluations:
        return Status.FUNCTION_EVALUATION_LIMIT
    if settings.major_iterations > 0 and nit >= settings.major_iterations:
        return Status.ITERATION_LIMIT
    return Status.NOT_TERMINATED


def local_minimize(
    problem: Problem,
    x0: Array,
    method: Method,
    settings: Optional[Settings] = None,
    callback: Optional[Callable[[np.ndarray, float, np.ndarray], None]] = None,
) -> OptimizeResult:
    """Minimize ``problem`` from ``x0`` with ``method``.

    The initial point is evaluated before ``method.init`` is called, and an
    evaluation requested by ``init`` at that same point is not repeated.
    After that the driver performs whatever the method requests, checks the
    thresholds whenever a major iteration is reported and the budgets after
    every step. The best (lowest objective) point evaluated is returned.

    ``callback(x, f, grad)``, when given, receives copies of the location
    after every major iteration.

    A non-finite objective value or an :class:`ArithmeticError` raised while
    evaluating the problem or iterating the method ends the run with
    :attr:`Status.FAILURE`. Any other exception, such as a shape mismatch
    detected by ``method.init``, propagates.
    """
    if settings is None:
        settings = Settings()
    if method.needs().hessian:
        raise UnsupportedConfigurationError("methods requiring a Hessian are not supported")

    x = np.array(x0, dtype=float).reshape(-1)
    location = Location(x=x.copy(), gradient=np.zeros_like(x))
    nfev = 0
    njev = 0
    nit = 0

    def evaluate(op: Operation) -> None:
        nonlocal nfev, njev
        if op & Operation.FUNC_EVALUATION:
            location.f = float(problem.fun(location.x))
            nfev += 1
        if op & Operation.GRAD_EVALUATION:
            if problem.grad is not None:
                grad = np.asarray(problem.grad(location.x), dtype=float)
            else:
                grad, evals = approx_grad(problem.fun, location.x, return_evals=True)
                nfev += evals
            np.copyto(location.gradient, grad.reshape(-1))
            njev += 1

    best_x = location.x.copy()
    best_f = math.nan
    best_grad_norm = math.nan
    status = Status.NOT_TERMINATED
    message = ""

    try:
        evaluate(Operation.EVALUATION)
        best_f = location.f
        best_grad_norm = _grad_norm(location.gradient)
        if not math.isfinite(location.f):
            status = Status.FAILURE
            message = "Objective is not finite at the initial point."
        else:
            status = _check_thresholds(location, settings)

        if status is Status.NOT_TERMINATED:
            op = method.init(location)
            if np.array_equal(location.x, best_x):
                # f and gradient at x0 are already known
                op &= ~Operation.EVALUATION
            while True:
                evaluate(op)
                if op & Operation.FUNC_EVALUATION:
                    if not math.isfinite(location.f):
                        status = Status.FAILURE
                        message = "Objective became non-finite."
                        break
                    if location.f < best_f:
                        best_f = location.f
                        best_x = location.x.copy()
                        best_grad_norm = _grad_norm(location.gradient)
                if op & Operation.MAJOR_ITERATION:
                    nit += 1
                    if callback is not None:
                        callback(location.x.copy(), location.f, location.gradient.copy())
                    status = _check_thresholds(location, settings)
                    if status is not Status.NOT_TERMINATED:
                        break
                status = _check_budgets(nfev, nit, settings)
                if status is not Status.NOT_TERMINATED:
                    break
                op = method.iterate(location)
    except ArithmeticError as exc:
        status = Status.FAILURE
        message = str(exc) or type(exc).__name__

    if not message:
        message = _MESSAGES[status]
    logger.debug(
        "%s finished: status=%s f=%g nit=%d nfev=%d",
        type(method).__name__,
        status.value,
        best_f,
        nit,
        nfev,
    )
    return OptimizeResult(
        x=best_x,
        fun=float(best_f),
        status=status,
        message=message,
        nit=nit,
        nfev=nfev,
        njev=njev,
        grad_norm=best_grad_norm,
    )


__all__ = ["local_minimize"]
