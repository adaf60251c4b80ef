"""Core numerical primitives for NLayerNet."""

from . import activations, errors, network, topology, types

__all__ = ["activations", "errors", "network", "topology", "types"]
