"""gradfit - first-order optimizers and fit loops for linear parametric models."""

__version__ = "0.1.0"

from .errors import ShapeMismatchError, UnsupportedConfigurationError

# Fit loops
from .linear_model import (
    FitOptions,
    FitResult,
    Identity,
    Logistic,
    ReLU,
    Tanh,
    cross_entropy_loss,
    lin_fit,
    lin_fit_local,
    sgd_fit,
    shuffle_rows,
    square_loss,
)

# Logging
from .logging import configure_logging, get_logger, set_log_level

# Local minimization protocol
from .optimize import (
    LBFGS,
    GradientDescent,
    Location,
    Needs,
    Operation,
    OptimizeResult,
    Problem,
    Settings,
    Status,
    UpdateRuleMethod,
    local_minimize,
)

# Update rules
from .optimizers import (
    SGD,
    Adadelta,
    Adagrad,
    Adam,
    ParameterStore,
    RMSProp,
    UpdateRule,
    UpdateRuleConfig,
    Variant,
    create_adadelta,
    create_adagrad,
    create_adam,
    create_rmsprop,
    create_sgd,
    create_update_rule,
)

__all__ = [
    "Adadelta",
    "Adagrad",
    "Adam",
    "FitOptions",
    "FitResult",
    "GradientDescent",
    "Identity",
    "LBFGS",
    "Location",
    "Logistic",
    "Needs",
    "Operation",
    "OptimizeResult",
    "ParameterStore",
    "Problem",
    "RMSProp",
    "ReLU",
    "SGD",
    "Settings",
    "ShapeMismatchError",
    "Status",
    "Tanh",
    "UnsupportedConfigurationError",
    "UpdateRule",
    "UpdateRuleConfig",
    "UpdateRuleMethod",
    "Variant",
    "__version__",
    "configure_logging",
    "create_adadelta",
    "create_adagrad",
    "create_adam",
    "create_rmsprop",
    "create_sgd",
    "create_update_rule",
    "cross_entropy_loss",
    "get_logger",
    "lin_fit",
    "lin_fit_local",
    "local_minimize",
    "set_log_level",
    "sgd_fit",
    "shuffle_rows",
    "square_loss",
]
