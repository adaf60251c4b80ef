"""Activation functions and their paired derivatives."""

from __future__ import annotations

from enum import Enum

import numpy as np

from .errors import ConfigurationError
from .types import Array


def sigmoid(x: Array) -> Array:
    """Return the logistic sigmoid ``1 / (1 + e^-x)``.

    Evaluated as ``exp(-log(1 + e^-x))`` so large negative inputs underflow to
    zero instead of overflowing.
    """

    return np.exp(-np.logaddexp(0.0, -x))


def sigmoid_deriv(x: Array) -> Array:
    s = sigmoid(x)
    return s * (1.0 - s)


def tanh(x: Array) -> Array:
    """Hyperbolic tangent in sign-separated form.

    With ``s = sign(x)`` the value is ``s * (1 - e) / (1 + e)`` where
    ``e = exp(-2|x|)``, so the exponential never overflows for large ``|x|``.
    """

    x = np.asarray(x, dtype=np.float64)
    s = np.where(x > 0.0, 1.0, -1.0)
    e = np.exp(-s * 2.0 * x)
    return s * (1.0 - e) / (1.0 + e)


def tanh_deriv(x: Array) -> Array:
    t = tanh(x)
    return 1.0 - t * t


class Activation(str, Enum):
    """Network-wide activation function, selected once per network."""

    SIGMOID = "sigmoid"
    TANH = "tanh"

    def __call__(self, x: Array) -> Array:
        return _FUNCTIONS[self][0](x)

    def deriv(self, x: Array) -> Array:
        return _FUNCTIONS[self][1](x)

    @classmethod
    def parse(cls, name: str) -> "Activation":
        key = str(name).strip().lower()
        for member in cls:
            if member.value == key:
                return member
        choices = ", ".join(member.value for member in cls)
        raise ConfigurationError(
            f"Unknown activation function {name!r}. Available: {choices}"
        )


_FUNCTIONS = {
    Activation.SIGMOID: (sigmoid, sigmoid_deriv),
    Activation.TANH: (tanh, tanh_deriv),
}


__all__ = ["Activation", "sigmoid", "sigmoid_deriv", "tanh", "tanh_deriv"]
