"""Armijo backtracking driven by reverse communication.

The search never calls the objective. :meth:`Backtracking.init` returns the
first trial step; the owner evaluates ``f(x0 + step * p)`` and feeds the value
to :meth:`Backtracking.iterate` until a step is accepted.
"""

from __future__ import annotations

import math


class LineSearchError(ArithmeticError):
    """No acceptable step could be found along the search direction."""


class Backtracking:
    """Classic Armijo backtracking (Nocedal & Wright, Alg. 3.1)."""

    def __init__(self, rho: float = 0.5, c: float = 1e-4, max_iter: int = 50) -> None:
        if not (0 < c < 1):
            raise ValueError("Armijo constant c must lie in (0, 1)")
        if not (0 < rho < 1):
            raise ValueError("rho must lie in (0, 1)")
        if max_iter <= 0:
            raise ValueError("max_iter must be positive")
        self.rho = float(rho)
        self.c = float(c)
        self.max_iter = int(max_iter)
        self._f0 = math.nan
        self._slope = math.nan
        self._step = math.nan
        self._trials = 0

    def init(self, f0: float, slope: float, step: float) -> float:
        """Start a search from value ``f0`` with directional derivative ``slope``."""
        if not slope < 0:
            raise LineSearchError("search direction is not a descent direction")
        if step <= 0:
            raise ValueError("initial step must be positive")
        self._f0 = float(f0)
        self._slope = float(slope)
        self._step = float(step)
        self._trials = 0
        return self._step

    def iterate(self, f: float) -> tuple[bool, float]:
        """Return ``(accepted, step)`` given the objective at the current trial."""
        if math.isfinite(f) and f <= self._f0 + self.c * self._step * self._slope:
            return True, self._step
        self._trials += 1
        if self._trials >= self.max_iter:
            raise LineSearchError(f"no sufficient decrease after {self._trials} trial steps")
        self._step *= self.rho
        return False, self._step


__all__ = ["Backtracking", "LineSearchError"]
