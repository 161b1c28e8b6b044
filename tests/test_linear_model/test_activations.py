"""Tests for activations."""

from __future__ import annotations

import numpy as np
import pytest

from gradfit.errors import UnsupportedConfigurationError
from gradfit.linear_model import Identity, Logistic, ReLU, Tanh, get_activation


@pytest.mark.parametrize("activation", [Identity(), Logistic(), Tanh()])
def test_fprime_is_derivative(activation) -> None:
    z = np.linspace(-2.0, 2.0, 9)
    h = 1e-6
    numeric = (activation.f(z + h) - activation.f(z - h)) / (2 * h)
    assert np.allclose(activation.fprime(activation.f(z)), numeric, atol=1e-6)


def test_relu() -> None:
    relu = ReLU()
    y = relu.f(np.array([-1.0, 0.0, 2.0]))
    assert np.array_equal(y, [0.0, 0.0, 2.0])
    assert np.array_equal(relu.fprime(y), [0.0, 0.0, 1.0])


def test_get_activation() -> None:
    assert isinstance(get_activation("logistic"), Logistic)
    assert isinstance(get_activation("TANH"), Tanh)
    assert repr(get_activation("identity")) == "Identity()"
    with pytest.raises(UnsupportedConfigurationError, match="Unknown activation"):
        get_activation("softmax")
