"""Stateful first-order update rules.

Example
-------
>>> import numpy as np
>>> from gradfit.optimizers import create_adam
>>> theta = np.zeros((2, 1))
>>> rule = create_adam()
>>> rule.set_theta(theta)
>>> rule.update_params(np.array([[1.0], [-1.0]]))
>>> rule.time_step
1
"""

from .factory import (
    UpdateRuleConfig,
    create_adadelta,
    create_adagrad,
    create_adam,
    create_rmsprop,
    create_sgd,
    create_update_rule,
    parse_variant,
)
from .rules import SGD, Adadelta, Adagrad, Adam, RMSProp, UpdateRule, Variant
from .store import ParameterStore

__all__ = [
    "Adadelta",
    "Adagrad",
    "Adam",
    "ParameterStore",
    "RMSProp",
    "SGD",
    "UpdateRule",
    "UpdateRuleConfig",
    "Variant",
    "create_adadelta",
    "create_adagrad",
    "create_adam",
    "create_rmsprop",
    "create_sgd",
    "create_update_rule",
    "parse_variant",
]
