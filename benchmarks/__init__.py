"""Performance benchmarks for gradfit.

This package contains microbenchmarks for hot paths in the library:
update-rule steps, the mini-batch training loop and concurrent per-output fits.
"""
