"""First-order parameter update rules sharing one update contract.

Every rule turns a gradient ``g`` of Theta's shape into an additive update.
The gradient is first clipped per output column when ``gradient_clipping > 0``:

.. math::

    g' = g \\cdot \\min(1, c / \\lVert g_{:,o} \\rVert_2)

then handed to the variant:

* ``sgd``: ``-eta * g' / sqrt(t)`` with ``eta = step_size * 100 / (100 + t)``
* ``adagrad``: ``-step_size / (sqrt(G) + eps) * g'``, ``G += g'^2``
* ``rmsprop``: Adagrad's rate on a decayed accumulator
* ``adadelta``: ``-sqrt(U) / sqrt(G + eps) * g'``
* ``adam``: ``-step_size * m_hat / (sqrt(v_hat) + eps)``

and finally blended with the previous update when ``momentum > 0``.

Rules are bound to a shape before use (:meth:`UpdateRule.bind`), which
allocates exactly the buffers the variant needs and resets the time step.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from enum import Enum
from types import MappingProxyType
from typing import ClassVar, Mapping, Optional

import numpy as np

from ..errors import ShapeMismatchError, check_same_shape
from .store import ParameterStore

State = dict[str, np.ndarray]


class Variant(str, Enum):
    """Update-rule family tag."""

    SGD = "sgd"
    ADAGRAD = "adagrad"
    RMSPROP = "rmsprop"
    ADADELTA = "adadelta"
    ADAM = "adam"


class UpdateRule(ABC):
    """Base class for the stateful update rules.

    Args:
        step_size: Base learning rate. Must be positive.
        momentum: Weight of the previous update added to the new one.
        gradient_clipping: Per-column L2 bound on the gradient; ``<= 0``
            disables clipping.
        epsilon: Guard against division by zero.
    """

    variant: ClassVar[Variant]

    def __init__(
        self,
        step_size: float,
        momentum: float = 0.0,
        gradient_clipping: float = 0.0,
        epsilon: float = 1e-8,
    ) -> None:
        if step_size <= 0.0:
            raise ValueError(f"step_size must be positive, got {step_size}")
        if momentum < 0.0:
            raise ValueError(f"momentum must be >= 0, got {momentum}")
        if epsilon < 0.0:
            raise ValueError(f"epsilon must be >= 0, got {epsilon}")
        self.step_size = float(step_size)
        self.momentum = float(momentum)
        self.gradient_clipping = float(gradient_clipping)
        self.epsilon = float(epsilon)

        self._shape: Optional[tuple[int, int]] = None
        self._store: Optional[ParameterStore] = None
        self._time_step = 0
        self._prev_update: Optional[np.ndarray] = None
        self._update: Optional[np.ndarray] = None
        self._state: State = {}

    # ------------------------------------------------------------------
    # binding
    # ------------------------------------------------------------------
    def bind(self, shape: tuple[int, int]) -> None:
        """Allocate all buffers for ``shape`` and reset the time step."""
        if len(shape) != 2:
            raise ShapeMismatchError(f"update rules work on 2-D parameters, got shape {tuple(shape)}")
        n_features, n_outputs = int(shape[0]), int(shape[1])
        self._shape = (n_features, n_outputs)
        self._time_step = 0
        self._prev_update = np.zeros(self._shape)
        self._update = np.zeros(self._shape)
        self._state = self._allocate(self._shape)

    def set_theta(self, theta: np.ndarray) -> None:
        """Bind the rule to ``theta``, which :meth:`update_params` mutates."""
        self._store = ParameterStore(theta)
        self.bind(self._store.shape)

    def get_theta(self) -> np.ndarray:
        if self._store is None:
            raise RuntimeError("set_theta must be called before get_theta")
        return self._store.theta

    @property
    def shape(self) -> Optional[tuple[int, int]]:
        return self._shape

    @property
    def time_step(self) -> int:
        """Number of committed updates since the last :meth:`bind`."""
        return self._time_step

    def get_time_step(self) -> int:
        return self._time_step

    @property
    def state(self) -> Mapping[str, np.ndarray]:
        """Read-only view of the variant accumulators."""
        return MappingProxyType(self._state)

    @property
    def prev_update(self) -> Optional[np.ndarray]:
        return self._prev_update

    # ------------------------------------------------------------------
    # update contract
    # ------------------------------------------------------------------
    def clip_gradient(self, grad: np.ndarray) -> np.ndarray:
        """Scale each gradient column down to L2 norm ``gradient_clipping``."""
        g = np.asarray(grad, dtype=float)
        if self.gradient_clipping <= 0.0:
            return g
        norms = np.linalg.norm(g, axis=0)
        scale = np.ones_like(norms)
        over = norms > self.gradient_clipping
        scale[over] = self.gradient_clipping / norms[over]
        return g * scale

    def get_update(self, grad: np.ndarray, out: Optional[np.ndarray] = None) -> np.ndarray:
        """Return the update the next :meth:`step` would produce.

        Neither the accumulators nor the time step are modified, so repeated
        calls with the same gradient give identical results.
        """
        update, _ = self._next(grad)
        if out is None:
            return update
        check_same_shape(self._shape, out.shape, "update buffer")
        np.copyto(out, update)
        return out

    def step(self, grad: np.ndarray) -> np.ndarray:
        """Compute the update, commit the rule state and advance the time step.

        Theta is left untouched. The returned array is an internal buffer
        overwritten by the next call.
        """
        update, new_state = self._next(grad)
        self._time_step += 1
        for key, value in new_state.items():
            np.copyto(self._state[key], value)
        np.copyto(self._prev_update, update)
        np.copyto(self._update, update)
        return self._update

    def update_params(self, grad: np.ndarray) -> None:
        """Apply one update to the bound Theta in place."""
        if self._store is None:
            raise RuntimeError("set_theta must be called before update_params")
        self._store.apply(self.step(grad))

    def _next(self, grad: np.ndarray) -> tuple[np.ndarray, State]:
        if self._shape is None:
            raise RuntimeError(f"{self.variant.value} rule is not bound; call set_theta or bind first")
        check_same_shape(self._shape, np.shape(grad), "gradient")
        g = self.clip_gradient(grad)
        t = self._time_step + 1
        update, new_state = self._compute(g, t)
        if self.momentum > 0.0:
            update = update + self.momentum * self._prev_update
        return update, new_state

    def _eta(self, t: int) -> float:
        """Time-decayed learning rate."""
        return self.step_size * 100.0 / (100.0 + t)

    @abstractmethod
    def _allocate(self, shape: tuple[int, int]) -> State:
        """Create the variant accumulators for ``shape``."""

    @abstractmethod
    def _compute(self, g: np.ndarray, t: int) -> tuple[np.ndarray, State]:
        """Return the raw update for clipped gradient ``g`` at step ``t``
        together with the accumulator values to commit."""

    def _describe(self) -> str:
        return f"step_size={self.step_size:g}, momentum={self.momentum:g}"

    def __repr__(self) -> str:
        return f"{self.variant.value}({self._describe()})"


class SGD(UpdateRule):
    """Plain stochastic gradient descent, with heavy-ball momentum if set."""

    variant = Variant.SGD

    def __init__(
        self,
        step_size: float = 1e-4,
        momentum: float = 0.9,
        gradient_clipping: float = 0.0,
        epsilon: float = 1e-8,
    ) -> None:
        super().__init__(step_size, momentum, gradient_clipping, epsilon)

    def _allocate(self, shape: tuple[int, int]) -> State:
        return {}

    def _compute(self, g: np.ndarray, t: int) -> tuple[np.ndarray, State]:
        return -self._eta(t) * g / math.sqrt(t), {}


class Adagrad(UpdateRule):
    """Per-parameter rates from the running sum of squared gradients."""

    variant = Variant.ADAGRAD

    def __init__(
        self,
        step_size: float = 0.5,
        momentum: float = 0.0,
        gradient_clipping: float = 10.0,
        epsilon: float = 1e-8,
    ) -> None:
        super().__init__(step_size, momentum, gradient_clipping, epsilon)

    def _allocate(self, shape: tuple[int, int]) -> State:
        return {"G": np.full(shape, self.epsilon)}

    def _compute(self, g: np.ndarray, t: int) -> tuple[np.ndarray, State]:
        G = self._state["G"]
        if t > 1:
            rate = self.step_size / (np.sqrt(G) + self.epsilon)
        else:
            rate = np.full_like(G, self.step_size)
        return -rate * g, {"G": G + g * g}


class RMSProp(UpdateRule):
    """Adagrad on an exponentially decayed squared-gradient average.

    The rate is only rescaled where the accumulator exceeds one in absolute
    value, and the decay is applied after the update is computed.
    """

    variant = Variant.RMSPROP

    def __init__(
        self,
        step_size: float = 0.05,
        momentum: float = 0.0,
        gradient_clipping: float = 0.0,
        epsilon: float = 1e-8,
        gamma: float = 0.9,
    ) -> None:
        super().__init__(step_size, momentum, gradient_clipping, epsilon)
        _check_decay("gamma", gamma)
        self.gamma = float(gamma)

    def _allocate(self, shape: tuple[int, int]) -> State:
        return {"G": np.full(shape, self.epsilon)}

    def _compute(self, g: np.ndarray, t: int) -> tuple[np.ndarray, State]:
        G = self._state["G"]
        rate = np.full_like(G, self.step_size)
        if t > 1:
            large = np.abs(G) > 1.0
            rate[large] /= np.sqrt(G[large] + self.epsilon)
        new_G = self.gamma * G + (1.0 - self.gamma) * g * g
        return -rate * g, {"G": new_G}

    def _describe(self) -> str:
        return f"{super()._describe()}, gamma={self.gamma:g}"


class Adadelta(UpdateRule):
    """Adadelta (Zeiler, 2012): rates from decayed gradient and update RMS."""

    variant = Variant.ADADELTA

    def __init__(
        self,
        step_size: float = 1e-4,
        momentum: float = 0.0,
        gradient_clipping: float = 0.0,
        epsilon: float = 1e-8,
        gamma: float = 0.9,
    ) -> None:
        super().__init__(step_size, momentum, gradient_clipping, epsilon)
        _check_decay("gamma", gamma)
        self.gamma = float(gamma)

    def _allocate(self, shape: tuple[int, int]) -> State:
        return {"G": np.full(shape, self.epsilon), "U": np.ones(shape)}

    def _compute(self, g: np.ndarray, t: int) -> tuple[np.ndarray, State]:
        G = self.gamma * self._state["G"] + (1.0 - self.gamma) * g * g
        if t > 1:
            rate = np.sqrt(self._state["U"]) / np.sqrt(G + self.epsilon)
        else:
            # U carries no information before the first update.
            rate = np.full_like(G, self._eta(t))
        update = -rate * g
        U = self.gamma * self._state["U"] + (1.0 - self.gamma) * update * update
        return update, {"G": G, "U": U}

    def _describe(self) -> str:
        return f"{super()._describe()}, gamma={self.gamma:g}"


class Adam(UpdateRule):
    """Adam (Kingma & Ba, 2014) with bias-corrected moment estimates."""

    variant = Variant.ADAM

    def __init__(
        self,
        step_size: float = 0.5,
        momentum: float = 0.0,
        gradient_clipping: float = 0.0,
        epsilon: float = 1e-8,
        beta1: float = 0.9,
        beta2: float = 0.999,
    ) -> None:
        super().__init__(step_size, momentum, gradient_clipping, epsilon)
        _check_decay("beta1", beta1)
        _check_decay("beta2", beta2)
        self.beta1 = float(beta1)
        self.beta2 = float(beta2)

    def _allocate(self, shape: tuple[int, int]) -> State:
        return {name: np.zeros(shape) for name in ("mt", "vt", "mtcap", "vtcap")}

    def _compute(self, g: np.ndarray, t: int) -> tuple[np.ndarray, State]:
        mt = self.beta1 * self._state["mt"] + (1.0 - self.beta1) * g
        vt = self.beta2 * self._state["vt"] + (1.0 - self.beta2) * g * g
        mtcap = mt / (1.0 - self.beta1**t)
        vtcap = vt / (1.0 - self.beta2**t)
        update = -self.step_size * mtcap / (np.sqrt(vtcap) + self.epsilon)
        return update, {"mt": mt, "vt": vt, "mtcap": mtcap, "vtcap": vtcap}

    def _describe(self) -> str:
        return f"step_size={self.step_size:g}, beta1={self.beta1:g}, beta2={self.beta2:g}"


def _check_decay(name: str, value: float) -> None:
    if not 0.0 <= value < 1.0:
        raise ValueError(f"{name} must lie in [0, 1), got {value}")


RULES: dict[Variant, type[UpdateRule]] = {
    Variant.SGD: SGD,
    Variant.ADAGRAD: Adagrad,
    Variant.RMSPROP: RMSProp,
    Variant.ADADELTA: Adadelta,
    Variant.ADAM: Adam,
}

__all__ = [
    "Adadelta",
    "Adagrad",
    "Adam",
    "RMSProp",
    "RULES",
    "SGD",
    "UpdateRule",
    "Variant",
]
