"""Exceptions raised for structural misuse of the optimizers.

Both derive from :class:`ValueError` so callers that already guard argument
validation keep working. Numerical non-convergence is never raised; it is
reported through ``converged`` / ``status`` fields instead.
"""

from __future__ import annotations


class ShapeMismatchError(ValueError):
    """Gradient, parameter or update arrays disagree in shape."""


class UnsupportedConfigurationError(ValueError):
    """Unknown update-rule variant or invalid combination of options."""


def check_same_shape(expected: tuple[int, ...], got: tuple[int, ...], what: str) -> None:
    """Raise :class:`ShapeMismatchError` unless ``got == expected``."""
    if tuple(expected) != tuple(got):
        raise ShapeMismatchError(f"{what} shape mismatch: expected {tuple(expected)}, got {tuple(got)}")


__all__ = ["ShapeMismatchError", "UnsupportedConfigurationError", "check_same_shape"]
