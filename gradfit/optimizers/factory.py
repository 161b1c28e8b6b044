"""Factories building update rules from names or configuration objects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

from ..errors import UnsupportedConfigurationError
from .rules import RULES, SGD, Adadelta, Adagrad, Adam, RMSProp, UpdateRule, Variant


@dataclass(frozen=True)
class UpdateRuleConfig:
    """
    Configuration for creating an update rule.

    Fields left as ``None`` keep the variant default; fields a variant does
    not use (``gamma`` for Adam, ``beta1`` for SGD, ...) are ignored.

    Args:
        name: Variant name: "sgd", "adagrad", "rmsprop", "adadelta" or "adam".
        step_size: Base learning rate. Must be positive.
        momentum: Previous-update weight.
        gradient_clipping: Per-column gradient L2 bound, ``<= 0`` disables it.
        epsilon: Division guard.
        gamma: Decay of the RMSProp / Adadelta accumulators.
        beta1: Adam first-moment decay.
        beta2: Adam second-moment decay.
    """

    name: str
    step_size: Optional[float] = None
    momentum: Optional[float] = None
    gradient_clipping: Optional[float] = None
    epsilon: Optional[float] = None
    gamma: Optional[float] = None
    beta1: Optional[float] = None
    beta2: Optional[float] = None


_VARIANT_FIELDS = {
    Variant.SGD: (),
    Variant.ADAGRAD: (),
    Variant.RMSPROP: ("gamma",),
    Variant.ADADELTA: ("gamma",),
    Variant.ADAM: ("beta1", "beta2"),
}


def create_sgd() -> SGD:
    """SGD with step 1e-4 and momentum 0.9."""
    return SGD(step_size=1e-4, momentum=0.9)


def create_adagrad() -> Adagrad:
    """Adagrad with step 0.5 and gradient clipping at 10."""
    return Adagrad(step_size=0.5, momentum=0.0, gradient_clipping=10.0)


def create_adadelta() -> Adadelta:
    """Adadelta with gamma 0.9; step 1e-4 is only used on the first update."""
    return Adadelta(step_size=1e-4, momentum=0.0, gamma=0.9)


def create_rmsprop() -> RMSProp:
    """RMSProp with step 0.05 and gamma 0.9."""
    return RMSProp(step_size=0.05, momentum=0.0, gamma=0.9)


def create_adam() -> Adam:
    """Adam with step 0.5, betas (0.9, 0.999) and epsilon 1e-8."""
    return Adam(step_size=0.5, beta1=0.9, beta2=0.999, epsilon=1e-8)


_DEFAULTS = {
    Variant.SGD: create_sgd,
    Variant.ADAGRAD: create_adagrad,
    Variant.ADADELTA: create_adadelta,
    Variant.RMSPROP: create_rmsprop,
    Variant.ADAM: create_adam,
}


def parse_variant(name: Union[str, Variant]) -> Variant:
    """Map a (case-insensitive) name onto :class:`Variant`."""
    if isinstance(name, Variant):
        return name
    try:
        return Variant(str(name).lower())
    except ValueError:
        supported = [v.value for v in Variant]
        raise UnsupportedConfigurationError(
            f"Unsupported update rule '{name}'. Supported names: {supported}"
        ) from None


def create_update_rule(config: Union[str, Variant, UpdateRuleConfig]) -> UpdateRule:
    """
    Create an update rule from a name or an :class:`UpdateRuleConfig`.

    Args:
        config: Variant name or full configuration.

    Returns:
        A fresh, unbound update rule.

    Raises:
        UnsupportedConfigurationError: If the variant name is unknown.
        ValueError: If a hyper-parameter is out of range.
    """
    if not isinstance(config, UpdateRuleConfig):
        return _DEFAULTS[parse_variant(config)]()

    variant = parse_variant(config.name)
    base = _DEFAULTS[variant]()
    kwargs: dict[str, Any] = {
        "step_size": base.step_size,
        "momentum": base.momentum,
        "gradient_clipping": base.gradient_clipping,
        "epsilon": base.epsilon,
    }
    for field in _VARIANT_FIELDS[variant]:
        kwargs[field] = getattr(base, field)
    for field in list(kwargs):
        value = getattr(config, field)
        if value is not None:
            kwargs[field] = value
    return RULES[variant](**kwargs)


__all__ = [
    "UpdateRuleConfig",
    "create_adadelta",
    "create_adagrad",
    "create_adam",
    "create_rmsprop",
    "create_sgd",
    "create_update_rule",
    "parse_variant",
]
