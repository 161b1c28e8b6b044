"""Expose an :class:`~gradfit.optimizers.UpdateRule` as a :class:`Method`.

The driver owns the flattened parameter vector; the adapter reshapes it to
``(n_features, n_outputs)`` (row-major), lets the rule compute a step from the
driver-supplied gradient and adds the step in place.
"""

from __future__ import annotations

import enum

import numpy as np

from ..errors import ShapeMismatchError
from ..optimizers.rules import UpdateRule
from .core import Location, Needs, Operation


class AdapterState(enum.Enum):
    """What the adapter's next :meth:`UpdateRuleMethod.iterate` call does.

    ``AWAITING_MAJOR_ITERATION``: the location holds a fresh evaluation of
    the current iterate; apply a step and request an evaluation.
    ``AWAITING_EVALUATION``: a step was applied and its evaluation requested;
    report the completed major iteration.
    """

    AWAITING_EVALUATION = "awaiting_evaluation"
    AWAITING_MAJOR_ITERATION = "awaiting_major_iteration"


class UpdateRuleMethod:
    """Reverse-communication wrapper around an update rule.

    Args:
        rule: The update rule to drive. It is (re)bound on :meth:`init`.
        n_features: Rows of the parameter matrix, 0 to infer from the
            initial location.
        n_outputs: Columns of the parameter matrix, 0 to infer.
    """

    def __init__(self, rule: UpdateRule, n_features: int = 0, n_outputs: int = 0) -> None:
        self.rule = rule
        self.n_features = int(n_features)
        self.n_outputs = int(n_outputs)
        self.state = AdapterState.AWAITING_MAJOR_ITERATION

    def needs(self) -> Needs:
        return Needs(gradient=True, hessian=False)

    def init(self, location: Location) -> Operation:
        size = len(location.x)
        if self.n_features == 0 or self.n_outputs == 0:
            self.n_features, self.n_outputs = size, 1
        elif size == self.n_features:
            self.n_outputs = 1
        if size != self.n_features * self.n_outputs:
            raise ShapeMismatchError(
                f"size error: expected {self.n_features}x{self.n_outputs}, got {size}"
            )
        self.rule.bind((self.n_features, self.n_outputs))
        self.state = AdapterState.AWAITING_MAJOR_ITERATION
        return Operation.EVALUATION

    def iterate(self, location: Location) -> Operation:
        if self.state is AdapterState.AWAITING_EVALUATION:
            self.state = AdapterState.AWAITING_MAJOR_ITERATION
            return Operation.MAJOR_ITERATION
        shape = (self.n_features, self.n_outputs)
        grad = np.asarray(location.gradient, dtype=float).reshape(shape)
        theta = location.x.reshape(shape)
        theta += self.rule.step(grad)
        self.state = AdapterState.AWAITING_EVALUATION
        return Operation.EVALUATION

    def __repr__(self) -> str:
        return f"UpdateRuleMethod({self.rule!r})"


__all__ = ["AdapterState", "UpdateRuleMethod"]
