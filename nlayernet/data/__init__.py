"""Test-case and weight-file I/O for NLayerNet."""

from .cases import load_cases, make_cases, manual_cases, read_values
from .weights import load_weights, save_weights

__all__ = [
    "load_cases",
    "load_weights",
    "make_cases",
    "manual_cases",
    "read_values",
    "save_weights",
]
