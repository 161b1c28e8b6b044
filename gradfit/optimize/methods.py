"""Line-search minimization methods speaking the reverse-communication protocol."""

from __future__ import annotations

from collections import deque
from typing import Deque, Optional

import numpy as np

from .core import Array, Location, Needs, Operation
from .line_search import Backtracking


class _LineSearchMethod:
    """Shared driver logic: pick a direction, backtrack, report the iterate."""

    def __init__(self, line_search: Optional[Backtracking] = None) -> None:
        self.line_search = line_search if line_search is not None else Backtracking()
        self._searching = False
        self._x0: Optional[Array] = None
        self._g0: Optional[Array] = None
        self._direction: Optional[Array] = None

    def needs(self) -> Needs:
        return Needs(gradient=True, hessian=False)

    def init(self, location: Location) -> Operation:
        self._reset()
        return self._start(location)

    def iterate(self, location: Location) -> Operation:
        if not self._searching:
            return self._start(location)
        accepted, step = self.line_search.iterate(location.f)
        if accepted:
            self._searching = False
            self._accepted(location, step)
            return Operation.MAJOR_ITERATION
        np.copyto(location.x, self._x0 + step * self._direction)
        return Operation.EVALUATION

    def _start(self, location: Location) -> Operation:
        grad = np.asarray(location.gradient, dtype=float)
        direction = self._compute_direction(grad)
        slope = float(np.dot(grad, direction))
        if not slope < 0:
            self._reset()
            direction = -grad
            slope = -float(np.dot(grad, grad))
        self._x0 = location.x.copy()
        self._g0 = grad.copy()
        self._direction = direction
        step = self.line_search.init(location.f, slope, self._initial_step(grad))
        np.copyto(location.x, self._x0 + step * direction)
        self._searching = True
        return Operation.EVALUATION

    def _reset(self) -> None:
        self._searching = False

    def _compute_direction(self, grad: Array) -> Array:
        raise NotImplementedError

    def _initial_step(self, grad: Array) -> float:
        raise NotImplementedError

    def _accepted(self, location: Location, step: float) -> None:
        pass


class GradientDescent(_LineSearchMethod):
    """Steepest descent with Armijo backtracking.

    The first trial step is ``1 / ||g||_inf``; afterwards each search starts
    from twice the previously accepted step.
    """

    def __init__(self, line_search: Optional[Backtracking] = None) -> None:
        super().__init__(line_search)
        self._last_step: Optional[float] = None

    def _reset(self) -> None:
        super()._reset()
        self._last_step = None

    def _compute_direction(self, grad: Array) -> Array:
        return -grad

    def _initial_step(self, grad: Array) -> float:
        if self._last_step is not None:
            return 2.0 * self._last_step
        norm = float(np.max(np.abs(grad))) if grad.size else 0.0
        return 1.0 / norm if norm > 0 else 1.0

    def _accepted(self, location: Location, step: float) -> None:
        self._last_step = step


class LBFGS(_LineSearchMethod):
    """Limited-memory BFGS using the two-loop recursion.

    Args:
        m: Number of stored curvature pairs.
        line_search: Step-length search, Armijo backtracking by default.
    """

    def __init__(self, m: int = 10, line_search: Optional[Backtracking] = None) -> None:
        if m <= 0:
            raise ValueError("Memory parameter m must be positive.")
        super().__init__(line_search)
        self.m = int(m)
        self._s: Deque[Array] = deque(maxlen=self.m)
        self._y: Deque[Array] = deque(maxlen=self.m)

    def _reset(self) -> None:
        super()._reset()
        self._s.clear()
        self._y.clear()

    def _compute_direction(self, grad: Array) -> Array:
        q = grad.copy()
        alpha_vals = []
        for s, y in reversed(list(zip(self._s, self._y))):
            rho = 1.0 / float(np.dot(y, s))
            alpha_i = rho * float(np.dot(s, q))
            q = q - alpha_i * y
            alpha_vals.append((rho, alpha_i, s, y))
        if self._s:
            gamma = float(np.dot(self._s[-1], self._y[-1]) / np.dot(self._y[-1], self._y[-1]))
        else:
            gamma = 1.0
        r = gamma * q
        for rho, alpha_i, s, y in reversed(alpha_vals):
            beta = rho * float(np.dot(y, r))
            r = r + s * (alpha_i - beta)
        return -r

    def _initial_step(self, grad: Array) -> float:
        if self._s:
            return 1.0
        norm = float(np.max(np.abs(grad))) if grad.size else 0.0
        return min(1.0, 1.0 / norm) if norm > 0 else 1.0

    def _accepted(self, location: Location, step: float) -> None:
        s = location.x - self._x0
        y = np.asarray(location.gradient, dtype=float) - self._g0
        if float(np.dot(y, s)) > 1e-12:
            self._s.append(s)
            self._y.append(y)


__all__ = ["GradientDescent", "LBFGS"]
