"""Reverse-communication local minimization.

Example
-------
>>> import numpy as np
>>> from gradfit.optimize import LBFGS, Problem, Settings, local_minimize
>>> problem = Problem(fun=lambda x: float(np.sum((x - 1.0) ** 2)), grad=lambda x: 2 * (x - 1.0))
>>> res = local_minimize(problem, np.zeros(3), LBFGS(), Settings(gradient_threshold=1e-10))
>>> bool(np.allclose(res.x, 1.0))
True
"""

from .adapter import AdapterState, UpdateRuleMethod
from .core import (
    Location,
    Method,
    Needs,
    Operation,
    OptimizeResult,
    Problem,
    Settings,
    Status,
)
from .line_search import Backtracking, LineSearchError
from .local import local_minimize
from .methods import LBFGS, GradientDescent
from .utils import approx_grad

__all__ = [
    "AdapterState",
    "Backtracking",
    "GradientDescent",
    "LBFGS",
    "LineSearchError",
    "Location",
    "Method",
    "Needs",
    "Operation",
    "OptimizeResult",
    "Problem",
    "Settings",
    "Status",
    "UpdateRuleMethod",
    "approx_grad",
    "local_minimize",
]
