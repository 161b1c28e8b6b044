"""
Example: Fitting linear models with gradfit

This example fits the same noise-free multi-output regression problem with
every update rule in the mini-batch loop, then with L-BFGS and with an update
rule driven through the local minimizer, one thread per output column.
"""

import numpy as np

from gradfit import (
    SGD,
    FitOptions,
    UpdateRuleMethod,
    create_adadelta,
    create_adagrad,
    create_adam,
    create_rmsprop,
    lin_fit,
)
from gradfit.linear_model import Logistic, cross_entropy_loss


def make_problem(n_samples=200, n_features=2, n_outputs=2, seed=0):
    rng = np.random.default_rng(seed)
    X = rng.standard_normal((n_samples, n_features))
    theta = rng.standard_normal((n_features, n_outputs))
    return X, X @ theta, theta


def example_update_rules():
    """Example: mini-batch loop with each update rule."""
    print("=" * 60)
    print("Example 1: Mini-batch training loop")
    print("=" * 60)

    X, Y, theta = make_problem()
    solvers = [
        SGD(step_size=0.05, momentum=0.9),
        create_adagrad(),
        create_rmsprop(),
        create_adadelta(),
        create_adam(),
    ]
    for solver in solvers:
        res = lin_fit(X, Y, FitOptions(solver=solver, tol=1e-2, epochs=2000, random_state=0))
        err = np.max(np.abs(res.theta - theta))
        print(f"{solver!r:50s} converged={res.converged} epochs={res.epochs} max|dTheta|={err:.2e}")
    print()


def example_local_minimizer():
    """Example: concurrent per-output fits with a local minimizer."""
    print("=" * 60)
    print("Example 2: Per-output local minimization")
    print("=" * 60)

    X, Y, theta = make_problem(n_outputs=4)
    res = lin_fit(X, Y, FitOptions(tol=1e-4, random_state=0))
    print(f"L-BFGS:  converged={res.converged} evaluations={res.epochs} rmse={res.rmse:.2e}")

    options = FitOptions(
        tol=1e-2,
        method_factory=lambda: UpdateRuleMethod(create_rmsprop(), n_features=X.shape[1]),
        random_state=0,
    )
    res = lin_fit(X, Y, options)
    print(f"RMSProp: converged={res.converged} evaluations={res.epochs} rmse={res.rmse:.2e}")
    print()


def example_logistic_regression():
    """Example: logistic regression with cross-entropy and ridge penalty."""
    print("=" * 60)
    print("Example 3: Logistic regression")
    print("=" * 60)

    rng = np.random.default_rng(1)
    X = rng.standard_normal((500, 3))
    p = 1.0 / (1.0 + np.exp(-X @ np.array([2.0, -1.0, 0.5])))
    y = (rng.random(500) < p).astype(float)

    options = FitOptions(
        solver=create_adam(),
        loss=cross_entropy_loss,
        activation=Logistic(),
        alpha=1.0,
        epochs=200,
        tol=0.0,
        random_state=0,
    )
    res = lin_fit(X, y, options)
    accuracy = np.mean((Logistic().f(X @ res.theta)[:, 0] > 0.5) == (y > 0.5))
    print(f"Coefficients: {res.theta[:, 0]}")
    print(f"Training accuracy: {accuracy:.3f}")
    print()


if __name__ == "__main__":
    print("\n" + "=" * 60)
    print("gradfit - Linear Model Examples")
    print("=" * 60 + "\n")

    example_update_rules()
    example_local_minimizer()
    example_logistic_regression()

    print("=" * 60)
    print("All examples completed successfully!")
    print("=" * 60)
