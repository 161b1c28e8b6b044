"""Finite-difference helpers."""

from __future__ import annotations

import numpy as np

from .core import Array, Objective


def approx_grad(
    fun: Objective, x: Array, eps: float = 1e-6, return_evals: bool = False
) -> Array | tuple[Array, int]:
    """Central-difference gradient of ``fun`` at ``x``.

    Parameters
    ----------
    fun:
        Scalar objective.
    x:
        Point of evaluation; any shape, the gradient has the same shape.
    eps:
        Perturbation size.
    return_evals:
        Also return the number of objective evaluations used.
    """
    if eps <= 0:
        raise ValueError("eps must be positive")
    x = np.array(x, dtype=float)
    grad = np.zeros_like(x)
    flat_x = x.reshape(-1)
    flat_grad = grad.reshape(-1)
    for i in range(flat_x.size):
        orig = flat_x[i]
        flat_x[i] = orig + eps
        f_plus = fun(x)
        flat_x[i] = orig - eps
        f_minus = fun(x)
        flat_x[i] = orig
        flat_grad[i] = (f_plus - f_minus) / (2.0 * eps)
    if return_evals:
        return grad, 2 * flat_x.size
    return grad


__all__ = ["approx_grad"]
