import numpy as np
import pytest

from gradfit.errors import ShapeMismatchError
from gradfit.optimize import (
    AdapterState,
    Location,
    Method,
    Operation,
    Problem,
    Settings,
    Status,
    UpdateRuleMethod,
    local_minimize,
)
from gradfit.optimizers import SGD, create_rmsprop


def test_adapter_satisfies_protocol():
    method = UpdateRuleMethod(create_rmsprop())
    assert isinstance(method, Method)
    needs = method.needs()
    assert needs.gradient and not needs.hessian
    assert repr(method) == "UpdateRuleMethod(rmsprop(step_size=0.05, momentum=0, gamma=0.9))"


def test_init_rejects_wrong_size():
    method = UpdateRuleMethod(create_rmsprop(), n_features=3, n_outputs=2)
    with pytest.raises(ShapeMismatchError, match="size error: expected 3x2, got 5"):
        method.init(Location(x=np.zeros(5)))


def test_init_single_output_from_feature_count():
    rule = create_rmsprop()
    method = UpdateRuleMethod(rule, n_features=4, n_outputs=3)
    assert method.init(Location(x=np.zeros(4))) == Operation.EVALUATION
    assert method.n_outputs == 1
    assert rule.shape == (4, 1)


def test_init_infers_shape():
    rule = create_rmsprop()
    method = UpdateRuleMethod(rule)
    method.init(Location(x=np.zeros(6)))
    assert rule.shape == (6, 1)


def test_init_binds_matrix_shape():
    rule = create_rmsprop()
    method = UpdateRuleMethod(rule, n_features=3, n_outputs=2)
    method.init(Location(x=np.zeros(6)))
    assert rule.shape == (3, 2)
    assert rule.time_step == 0


def test_iterate_alternates_steps_and_major_iterations():
    rule = SGD(step_size=0.1, momentum=0.0)
    method = UpdateRuleMethod(rule, n_features=2, n_outputs=1)
    location = Location(x=np.array([1.0, -1.0]), f=1.0, gradient=np.array([2.0, -4.0]))
    assert method.init(location) == Operation.EVALUATION
    assert method.state is AdapterState.AWAITING_MAJOR_ITERATION

    assert method.iterate(location) == Operation.EVALUATION
    assert method.state is AdapterState.AWAITING_EVALUATION
    assert rule.time_step == 1
    eta = 0.1 * 100 / 101
    assert np.allclose(location.x, [1.0 - eta * 2.0, -1.0 + eta * 4.0])

    assert method.iterate(location) == Operation.MAJOR_ITERATION
    assert method.state is AdapterState.AWAITING_MAJOR_ITERATION
    assert rule.time_step == 1

    assert method.iterate(location) == Operation.EVALUATION
    assert rule.time_step == 2


def test_iterate_updates_row_major_matrix():
    rule = SGD(step_size=1.0, momentum=0.0)
    method = UpdateRuleMethod(rule, n_features=2, n_outputs=2)
    x = np.zeros(4)
    location = Location(x=x, gradient=np.array([1.0, 2.0, 3.0, 4.0]))
    method.init(location)
    method.iterate(location)
    assert location.x is x
    assert np.allclose(x, -(100 / 101) * np.array([1.0, 2.0, 3.0, 4.0]))


def test_driver_counts_one_rule_step_per_major_iteration():
    target = np.array([1.0, 2.0, -1.0])
    problem = Problem(
        fun=lambda x: float(0.5 * np.sum((x - target) ** 2)),
        grad=lambda x: x - target,
    )
    rule = create_rmsprop()
    res = local_minimize(problem, np.zeros(3), UpdateRuleMethod(rule), Settings(major_iterations=25))
    assert res.status is Status.ITERATION_LIMIT
    assert res.nit == 25
    assert rule.time_step == 25
    assert res.fun < problem.fun(np.zeros(3))


def test_driver_converges_with_update_rule():
    target = np.array([1.0, 2.0, -1.0])
    problem = Problem(
        fun=lambda x: float(0.5 * np.sum((x - target) ** 2)),
        grad=lambda x: x - target,
    )
    res = local_minimize(
        problem, np.zeros(3), UpdateRuleMethod(create_rmsprop()), Settings(function_threshold=1e-8)
    )
    assert res.status is Status.FUNCTION_THRESHOLD
    assert np.allclose(res.x, target, atol=1e-3)


def test_initial_point_is_evaluated_once():
    target = np.array([1.0, 2.0, -1.0])
    points = []

    def fun(x: np.ndarray) -> float:
        points.append(x.copy())
        return float(0.5 * np.sum((x - target) ** 2))

    problem = Problem(fun=fun, grad=lambda x: x - target)
    res = local_minimize(
        problem, np.zeros(3), UpdateRuleMethod(create_rmsprop()), Settings(major_iterations=1)
    )
    # x0, then the point after the single rule step
    assert res.nfev == 2
    assert len(points) == 2
    assert np.array_equal(points[0], np.zeros(3))
    assert not np.array_equal(points[1], points[0])
