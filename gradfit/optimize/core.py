"""Core interfaces of the iterative local-minimizer protocol.

A :class:`Method` never evaluates the objective itself. It asks the driver
for work through :class:`Operation` flags ("evaluate f and its gradient at
``location.x``", "a major iteration is complete") and the driver fills the
shared :class:`Location` before calling back.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, runtime_checkable

import numpy as np

Array = np.ndarray
Objective = Callable[[Array], float]
Gradient = Callable[[Array], Array]


class Operation(enum.Flag):
    """Work requested from the driver by a method."""

    NO_OPERATION = 0
    FUNC_EVALUATION = 1
    GRAD_EVALUATION = 2
    MAJOR_ITERATION = 4

    EVALUATION = 3


class Status(enum.Enum):
    """Termination status of :func:`~gradfit.optimize.local_minimize`."""

    NOT_TERMINATED = "not_terminated"
    GRADIENT_THRESHOLD = "gradient_threshold"
    FUNCTION_THRESHOLD = "function_threshold"
    FUNCTION_EVALUATION_LIMIT = "function_evaluation_limit"
    ITERATION_LIMIT = "iteration_limit"
    FAILURE = "failure"


@dataclass(frozen=True)
class Problem:
    """Objective with an optional analytic gradient."""

    fun: Objective
    grad: Optional[Gradient] = None
    dim: Optional[int] = None


@dataclass
class Location:
    """Current point with its objective value and gradient."""

    x: Array
    f: float = float("nan")
    gradient: Optional[Array] = None


@dataclass(frozen=True)
class Needs:
    """Derivative information a method requires."""

    gradient: bool = True
    hessian: bool = False


@dataclass(frozen=True)
class Settings:
    """
    Termination settings of the driver.

    Args:
        gradient_threshold: Stop once the gradient infinity norm drops below.
        function_threshold: Stop once the objective drops below.
        func_evaluations: Objective evaluation budget, 0 means unlimited.
        major_iterations: Major iteration budget, 0 means unlimited.
    """

    gradient_threshold: float = 1e-12
    function_threshold: float = float("-inf")
    func_evaluations: int = 0
    major_iterations: int = 0


@dataclass
class OptimizeResult:
    """Result returned by :func:`~gradfit.optimize.local_minimize`."""

    x: Array
    fun: float
    status: Status
    message: str
    nit: int
    nfev: int
    njev: int
    grad_norm: float

    @property
    def success(self) -> bool:
        """Whether a convergence threshold ended the run.

        Exhausted budgets and failures both count as unsuccessful.
        """
        return self.status in (Status.GRADIENT_THRESHOLD, Status.FUNCTION_THRESHOLD)


@runtime_checkable
class Method(Protocol):
    """Reverse-communication minimization method."""

    def init(self, location: Location) -> Operation:
        ...

    def iterate(self, location: Location) -> Operation:
        ...

    def needs(self) -> Needs:
        ...


__all__ = [
    "Array",
    "Gradient",
    "Location",
    "Method",
    "Needs",
    "Objective",
    "Operation",
    "OptimizeResult",
    "Problem",
    "Settings",
    "Status",
]
