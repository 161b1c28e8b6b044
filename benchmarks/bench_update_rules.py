"""Benchmark update-rule steps."""

import time
from typing import Dict

import numpy as np

from gradfit.optimizers import create_update_rule


def benchmark_update_rule(
    name: str,
    n_features: int,
    n_outputs: int = 4,
    n_steps: int = 1000,
) -> Dict[str, float]:
    """Benchmark :meth:`UpdateRule.update_params`.

    Args:
        name: Variant name.
        n_features: Rows of Theta.
        n_outputs: Columns of Theta.
        n_steps: Timed steps.

    Returns:
        Dictionary with timing results.
    """
    rng = np.random.default_rng(0)
    theta = np.zeros((n_features, n_outputs))
    grads = rng.standard_normal((16, n_features, n_outputs))
    rule = create_update_rule(name)
    rule.set_theta(theta)

    # Warmup
    for g in grads:
        rule.update_params(g)

    start = time.perf_counter()
    for i in range(n_steps):
        rule.update_params(grads[i % len(grads)])
    end = time.perf_counter()

    total_time = end - start
    return {
        "n_features": n_features,
        "n_outputs": n_outputs,
        "total_time_sec": total_time,
        "time_per_step_sec": total_time / n_steps,
        "steps_per_sec": n_steps / total_time,
    }


if __name__ == "__main__":
    print("Benchmarking update rules...")
    for name in ("sgd", "adagrad", "rmsprop", "adadelta", "adam"):
        for n_features in (10, 1000):
            results = benchmark_update_rule(name, n_features=n_features)
            print(f"{name} ({n_features}x{results['n_outputs']}):")
            print(f"  Time per step: {results['time_per_step_sec']*1e6:.1f} us")
            print(f"  Steps per second: {results['steps_per_sec']:.0f}")
