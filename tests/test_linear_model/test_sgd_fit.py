"""Tests for the mini-batch training loop."""

from __future__ import annotations

import numpy as np
import pytest

from gradfit.linear_model import FitOptions, FitResult, lin_fit, sgd_fit
from gradfit.optimizers import SGD, create_adadelta, create_adagrad, create_adam, create_rmsprop


def _sgd():
    return SGD(step_size=0.05, momentum=0.9)


CONVERGING_RULES = [_sgd, create_adagrad, create_rmsprop, create_adadelta, create_adam]


@pytest.mark.parametrize("factory", CONVERGING_RULES)
def test_converges_and_recovers_theta(factory, linear_problem) -> None:
    X, Y, theta_true = linear_problem
    res = sgd_fit(X, Y, FitOptions(solver=factory(), tol=1e-2, random_state=0))
    assert res.converged
    assert np.sqrt(res.rmse) < 1e-2
    assert 0 < res.epochs < 5000
    assert np.allclose(res.theta, theta_true, atol=1e-2)


def test_returns_snapshot_at_best_objective(linear_problem) -> None:
    X, Y, _ = linear_problem
    seen: list[tuple[float, np.ndarray]] = []

    def callback(epoch: int, J: float, theta: np.ndarray) -> None:
        assert epoch == len(seen) + 1
        seen.append((J, theta.copy()))

    solver = create_adam()
    options = FitOptions(
        solver=solver, epochs=40, tol=0.0, random_state=1, callback=callback, history=True
    )
    res = sgd_fit(X, Y, options)

    objectives = [J for J, _ in seen]
    best = int(np.argmin(objectives))
    assert res.epochs == 40
    assert res.history == objectives
    assert res.objective == objectives[best]
    assert np.array_equal(res.theta, seen[best][1])
    # the solver is left bound to the restored best Theta
    assert solver.get_theta() is res.theta
    assert not res.converged


def test_inputs_are_not_modified(linear_problem) -> None:
    X, Y, _ = linear_problem
    X0, Y0 = X.copy(), Y.copy()
    sgd_fit(X, Y, FitOptions(solver=create_adam(), epochs=3, random_state=0))
    assert np.array_equal(X, X0)
    assert np.array_equal(Y, Y0)


def test_same_seed_same_result(linear_problem) -> None:
    X, Y, _ = linear_problem
    a = sgd_fit(X, Y, FitOptions(solver=create_rmsprop(), epochs=5, random_state=3))
    b = sgd_fit(X, Y, FitOptions(solver=create_rmsprop(), epochs=5, random_state=3))
    assert np.array_equal(a.theta, b.theta)
    assert a.objective == b.objective


def test_solver_is_bound_to_fit_shape(linear_problem) -> None:
    X, Y, _ = linear_problem
    rule = create_adam()
    rule.set_theta(np.zeros((5, 5)))
    sgd_fit(X, Y, FitOptions(solver=rule, epochs=2, mini_batch_size=50, random_state=0))
    assert rule.shape == (2, 2)
    # 200 rows in batches of 50, two epochs
    assert rule.time_step == 8


def test_theta_initializer(linear_problem) -> None:
    X, Y, theta_true = linear_problem

    def init(theta: np.ndarray) -> None:
        theta[...] = theta_true

    res = sgd_fit(X, Y, FitOptions(solver=create_adam(), tol=1e-2, theta_initializer=init))
    assert res.converged
    assert res.epochs == 1


def test_single_output_vector_target(linear_problem) -> None:
    X, Y, _ = linear_problem
    res = sgd_fit(X, Y[:, 0], FitOptions(solver=create_adam(), epochs=3, random_state=0))
    assert res.theta.shape == (2, 1)


def test_sgd_fit_requires_solver(linear_problem) -> None:
    X, Y, _ = linear_problem
    with pytest.raises(ValueError, match="solver"):
        sgd_fit(X, Y, FitOptions())


def test_lin_fit_dispatches_on_solver(linear_problem) -> None:
    X, Y, _ = linear_problem
    res = lin_fit(X, Y, FitOptions(solver=create_adam(), epochs=2, random_state=0))
    assert res.epochs == 2
    assert len(res.history) == 0


@pytest.mark.parametrize(
    "kwargs",
    [{"epochs": -1}, {"tol": -1.0}, {"alpha": -0.1}, {"l1_ratio": 1.5}, {"n_jobs": 0}, {"mini_batch_size": -2}],
)
def test_invalid_options(kwargs) -> None:
    with pytest.raises(ValueError):
        FitOptions(**kwargs)
