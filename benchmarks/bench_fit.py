"""Benchmark the training loop and the concurrent per-output fits."""

import time
from typing import Dict, Optional

import numpy as np

from gradfit.linear_model import FitOptions, lin_fit_local, sgd_fit
from gradfit.optimizers import create_adam


def _problem(n_samples: int, n_features: int, n_outputs: int):
    rng = np.random.default_rng(0)
    X = rng.standard_normal((n_samples, n_features))
    Y = X @ rng.standard_normal((n_features, n_outputs))
    return X, Y


def benchmark_sgd_fit(n_samples: int, n_features: int, n_outputs: int, epochs: int = 20) -> Dict[str, float]:
    """Time ``epochs`` epochs of the mini-batch loop with Adam."""
    X, Y = _problem(n_samples, n_features, n_outputs)
    options = FitOptions(solver=create_adam(), epochs=epochs, tol=0.0, random_state=0)
    start = time.perf_counter()
    res = sgd_fit(X, Y, options)
    total_time = time.perf_counter() - start
    return {
        "total_time_sec": total_time,
        "time_per_epoch_sec": total_time / res.epochs,
        "objective": res.objective,
    }


def benchmark_lin_fit_local(
    n_samples: int, n_features: int, n_outputs: int, n_jobs: Optional[int] = None
) -> Dict[str, float]:
    """Time an L-BFGS fit, one worker thread per output column."""
    X, Y = _problem(n_samples, n_features, n_outputs)
    options = FitOptions(tol=1e-4, n_jobs=n_jobs, random_state=0)
    start = time.perf_counter()
    res = lin_fit_local(X, Y, options)
    total_time = time.perf_counter() - start
    return {
        "total_time_sec": total_time,
        "evaluations": res.epochs,
        "converged": res.converged,
    }


if __name__ == "__main__":
    print("Benchmarking mini-batch loop...")
    results = benchmark_sgd_fit(n_samples=10_000, n_features=50, n_outputs=4)
    print(f"sgd_fit (10000x50, 4 outputs):")
    print(f"  Time per epoch: {results['time_per_epoch_sec']*1e3:.2f} ms")

    print("Benchmarking per-output fits...")
    for n_jobs in (1, 4):
        results = benchmark_lin_fit_local(n_samples=10_000, n_features=50, n_outputs=8, n_jobs=n_jobs)
        print(f"lin_fit_local (10000x50, 8 outputs, n_jobs={n_jobs}):")
        print(f"  Total time: {results['total_time_sec']:.3f} s")
        print(f"  Evaluations: {results['evaluations']}")
