"""Linear-model fitting driven by the update rules and local minimizers."""

from .activations import Activation, Identity, Logistic, ReLU, Tanh, get_activation
from .base import FitOptions, FitResult
from .concurrent import lin_fit_local
from .fit import lin_fit, sgd_fit
from .loss import LossFunction, cross_entropy_loss, get_loss, square_loss
from .utils import check_random_state, check_xy, shuffle_rows

__all__ = [
    "Activation",
    "FitOptions",
    "FitResult",
    "Identity",
    "Logistic",
    "LossFunction",
    "ReLU",
    "Tanh",
    "check_random_state",
    "check_xy",
    "cross_entropy_loss",
    "get_activation",
    "get_loss",
    "lin_fit",
    "lin_fit_local",
    "sgd_fit",
    "shuffle_rows",
    "square_loss",
]
