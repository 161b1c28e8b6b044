"""Options and result containers shared by the fit loops."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional

import numpy as np

from ..optimize.core import Method
from ..optimizers.rules import UpdateRule
from .activations import Activation, Identity
from .loss import LossFunction, square_loss
from .utils import RandomState

ThetaInitializer = Callable[[np.ndarray], None]
EpochCallback = Callable[[int, float, np.ndarray], None]


@dataclass(frozen=True)
class FitOptions:
    """
    Configuration of :func:`~gradfit.linear_model.lin_fit`.

    Args:
        epochs: Epoch budget of the mini-batch loop (default ``1e6 // n_samples``)
            or evaluation budget of the local minimizer (default
            ``4e6 // n_samples``). 0 selects the default.
        mini_batch_size: Rows per mini-batch, 0 for
            ``clamp(sqrt(n_samples), 1, 100)``.
        tol: Convergence tolerance.
        solver: Update rule driving the mini-batch loop.
        alpha: Elastic-net regularization weight.
        l1_ratio: Share of L1 in the penalty, 0 for ridge, 1 for lasso.
        loss: Loss and gradient function.
        activation: Activation applied to ``X @ theta``.
        method_factory: Builds one fresh local-minimization method per fit
            (per column when ``per_output_fit``). Selects the local-minimizer
            path.
        theta_initializer: Fills the initial Theta in place.
        per_output_fit: Fit each output column independently and concurrently.
        random_state: Seed or generator for initialization and shuffling.
        n_jobs: Worker threads for per-output fits, ``None`` for the CPU count.
        callback: Called as ``callback(epoch, J, theta)`` after every epoch.
            A joint local-minimizer fit calls it after every major iteration;
            a per-output fit rejects it.
        history: Record the full-set objective of every epoch (or major
            iteration, as for ``callback``).
    """

    epochs: int = 0
    mini_batch_size: int = 0
    tol: float = 1e-6
    solver: Optional[UpdateRule] = None
    alpha: float = 0.0
    l1_ratio: float = 0.0
    loss: LossFunction = square_loss
    activation: Activation = field(default_factory=Identity)
    method_factory: Optional[Callable[[], Method]] = None
    theta_initializer: Optional[ThetaInitializer] = None
    per_output_fit: bool = True
    random_state: RandomState = None
    n_jobs: Optional[int] = None
    callback: Optional[EpochCallback] = None
    history: bool = False

    def __post_init__(self) -> None:
        if self.epochs < 0:
            raise ValueError(f"epochs must be >= 0, got {self.epochs}")
        if self.mini_batch_size < 0:
            raise ValueError(f"mini_batch_size must be >= 0, got {self.mini_batch_size}")
        if self.tol < 0:
            raise ValueError(f"tol must be >= 0, got {self.tol}")
        if self.alpha < 0:
            raise ValueError(f"alpha must be >= 0, got {self.alpha}")
        if not 0.0 <= self.l1_ratio <= 1.0:
            raise ValueError(f"l1_ratio must lie in [0, 1], got {self.l1_ratio}")
        if self.n_jobs is not None and self.n_jobs <= 0:
            raise ValueError(f"n_jobs must be positive, got {self.n_jobs}")


@dataclass
class FitResult:
    """
    Outcome of a fit.

    Attributes:
        converged: Whether the tolerance test passed on the final epoch (or
            every minimization stopped on a convergence threshold).
        rmse: Root-mean-square error of the final epoch.
        objective: Best regularized objective observed.
        epochs: Epochs run, or objective evaluations used by the minimizer.
        theta: Fitted ``(n_features, n_outputs)`` parameters; for the
            mini-batch loop, the snapshot taken at the best objective.
        history: Per-epoch objective values when requested.
    """

    converged: bool
    rmse: float
    objective: float
    epochs: int
    theta: np.ndarray
    history: List[float] = field(default_factory=list)


__all__ = ["EpochCallback", "FitOptions", "FitResult", "ThetaInitializer"]
