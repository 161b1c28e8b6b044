"""Ownership wrapper around the parameter matrix being fit."""

from __future__ import annotations

from typing import Optional

import numpy as np

from ..errors import ShapeMismatchError, check_same_shape


class ParameterStore:
    """Holds Theta, a dense ``(n_features, n_outputs)`` float matrix.

    The wrapped array is not copied: update rules and loss functions see the
    same storage, and :meth:`apply` mutates it in place.
    """

    def __init__(self, theta: np.ndarray) -> None:
        if not isinstance(theta, np.ndarray) or theta.ndim != 2:
            shape = getattr(theta, "shape", None)
            raise ShapeMismatchError(f"theta must be a 2-D array, got shape {shape}")
        if theta.dtype != np.float64:
            raise ValueError(f"theta must be float64, got {theta.dtype}")
        self._theta = theta

    @classmethod
    def zeros(cls, n_features: int, n_outputs: int) -> "ParameterStore":
        return cls(np.zeros((n_features, n_outputs), dtype=float))

    @property
    def theta(self) -> np.ndarray:
        return self._theta

    @property
    def shape(self) -> tuple[int, int]:
        return self._theta.shape  # type: ignore[return-value]

    @property
    def flat(self) -> np.ndarray:
        """Row-major 1-D view sharing Theta's storage."""
        return self._theta.reshape(-1)

    def column(self, o: int) -> np.ndarray:
        return self._theta[:, o]

    def apply(self, update: np.ndarray) -> None:
        """Add ``update`` into Theta in place."""
        check_same_shape(self.shape, np.shape(update), "update")
        self._theta += update

    def snapshot(self, out: Optional[np.ndarray] = None) -> np.ndarray:
        """Copy Theta into independent storage (``out`` when given)."""
        if out is None:
            return self._theta.copy()
        check_same_shape(self.shape, out.shape, "snapshot buffer")
        np.copyto(out, self._theta)
        return out

    def restore(self, buffer: np.ndarray) -> None:
        check_same_shape(self.shape, np.shape(buffer), "restore buffer")
        np.copyto(self._theta, buffer)

    def __repr__(self) -> str:
        return f"ParameterStore(shape={self.shape})"


__all__ = ["ParameterStore"]
