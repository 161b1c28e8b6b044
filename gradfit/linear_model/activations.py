"""Element-wise activations applied to the linear predictor ``X @ Theta``.

``fprime`` takes the *activated* value ``y = f(z)`` rather than ``z``, which
lets loss functions reuse the prediction buffer.
"""

from __future__ import annotations

import numpy as np

from ..errors import UnsupportedConfigurationError


class Activation:
    """Base activation: ``f`` and its derivative expressed through ``f(z)``."""

    name = "activation"

    def f(self, z: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def fprime(self, y: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Identity(Activation):
    name = "identity"

    def f(self, z: np.ndarray) -> np.ndarray:
        return z

    def fprime(self, y: np.ndarray) -> np.ndarray:
        return np.ones_like(y)


class Logistic(Activation):
    name = "logistic"

    def f(self, z: np.ndarray) -> np.ndarray:
        return 1.0 / (1.0 + np.exp(-z))

    def fprime(self, y: np.ndarray) -> np.ndarray:
        return y * (1.0 - y)


class Tanh(Activation):
    name = "tanh"

    def f(self, z: np.ndarray) -> np.ndarray:
        return np.tanh(z)

    def fprime(self, y: np.ndarray) -> np.ndarray:
        return 1.0 - y * y


class ReLU(Activation):
    name = "relu"

    def f(self, z: np.ndarray) -> np.ndarray:
        return np.maximum(z, 0.0)

    def fprime(self, y: np.ndarray) -> np.ndarray:
        return (y > 0.0).astype(float)


_ACTIVATIONS = {cls.name: cls for cls in (Identity, Logistic, Tanh, ReLU)}


def get_activation(name: str) -> Activation:
    """Return a new activation instance by name."""
    try:
        return _ACTIVATIONS[name.lower()]()
    except KeyError:
        raise UnsupportedConfigurationError(
            f"Unknown activation '{name}'. Supported names: {sorted(_ACTIVATIONS)}"
        ) from None


__all__ = ["Activation", "Identity", "Logistic", "ReLU", "Tanh", "get_activation"]
