"""N-layer feed-forward network with streaming backpropagation."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import numpy as np

from .activations import Activation
from .errors import DataShapeError
from .topology import INPUT_LAYER, Topology
from .types import Array

logger = logging.getLogger(__name__)


class Network:
    """Owns the weights and per-layer scratch buffers of one network.

    Everything is sized from ``topology`` at construction and never resized.
    ``weights[n]`` connects layer ``n`` to layer ``n + 1`` and is indexed
    ``[source_unit, destination_unit]``. Theta and psi buffers exist only when
    the network is built with ``training=True``; slot 0 (the input layer) of
    both is ``None``.

    Instances are single-threaded state machines: a case's weight update must
    finish before the next case's forward pass starts, because online updates
    are visible to the very next case.
    """

    def __init__(
        self,
        topology: Topology,
        *,
        activation: Activation = Activation.SIGMOID,
        lambda_value: float = 0.3,
        training: bool = False,
    ) -> None:
        self._topology = topology
        self._activation = Activation(activation)
        self._lambda = float(lambda_value)
        self._training = bool(training)

        layers = topology.layers
        self._a: List[Array] = [np.zeros(size, dtype=np.float64) for size in layers]
        self._weights: List[Array] = [
            np.zeros(shape, dtype=np.float64) for shape in topology.weight_shapes()
        ]
        self._thetas: Optional[List[Optional[Array]]] = None
        self._psis: Optional[List[Optional[Array]]] = None
        if self._training:
            self._thetas = [None] + [np.zeros(size, dtype=np.float64) for size in layers[1:]]
            self._psis = [None] + [np.zeros(size, dtype=np.float64) for size in layers[1:]]
        self._has_case = False

    # ------------------------------------------------------------------
    # Read-only configuration

    @property
    def topology(self) -> Topology:
        return self._topology

    @property
    def activation(self) -> Activation:
        return self._activation

    @property
    def lambda_value(self) -> float:
        return self._lambda

    @property
    def training(self) -> bool:
        return self._training

    @property
    def weights(self) -> Sequence[Array]:
        """The live weight matrices. Mutate only through this class."""

        return tuple(self._weights)

    @property
    def activations(self) -> Sequence[Array]:
        """Activation buffers of the most recent forward pass."""

        return tuple(self._a)

    def hidden_activations(self) -> List[Array]:
        return [a.copy() for a in self._a[self._topology.first_hidden : self._topology.output]]

    def output(self) -> Array:
        return self._a[self._topology.output].copy()

    def parameter_count(self) -> int:
        return self._topology.weight_count()

    # ------------------------------------------------------------------
    # Weight population

    def fill_random(
        self, low: float, high: float, rng: np.random.Generator | None = None
    ) -> None:
        """Draw every weight independently from ``U[low, high)``.

        Matrices are filled in the canonical order (connectivity layer, then
        source unit, then destination unit), so a seeded generator always
        yields the same network.
        """

        rng = rng if rng is not None else np.random.default_rng()
        for W in self._weights:
            W[...] = rng.uniform(low, high, size=W.shape)
        logger.debug("Filled %d random weights in [%s, %s)", self.parameter_count(), low, high)

    def set_weights(self, matrices: Sequence[Array]) -> None:
        """Copy explicit weight matrices into the store after checking shapes."""

        if len(matrices) != len(self._weights):
            raise DataShapeError(
                f"Expected {len(self._weights)} weight matrices for "
                f"{self._topology}, got {len(matrices)}"
            )
        staged = []
        for idx, (W, values) in enumerate(zip(self._weights, matrices)):
            values = np.asarray(values, dtype=np.float64)
            if values.shape != W.shape:
                raise DataShapeError(
                    f"Weight matrix {idx} must have shape {W.shape}, got {values.shape}"
                )
            staged.append(values)
        for W, values in zip(self._weights, staged):
            W[...] = values

    def set_flat_weights(self, values: Sequence[float] | Array) -> None:
        """Fill the store from a flat sequence in canonical order."""

        flat = np.asarray(values, dtype=np.float64).ravel()
        expected = self.parameter_count()
        if flat.size != expected:
            raise DataShapeError(
                f"Topology {self._topology} needs {expected} weights, got {flat.size}"
            )
        matrices = []
        offset = 0
        for W in self._weights:
            matrices.append(flat[offset : offset + W.size].reshape(W.shape))
            offset += W.size
        self.set_weights(matrices)

    def flat_weights(self) -> Array:
        """Return a copy of all weights flattened in canonical order."""

        return np.concatenate([W.ravel() for W in self._weights])

    # ------------------------------------------------------------------
    # Forward propagation

    def _set_inputs(self, inputs: Array) -> None:
        inputs = np.asarray(inputs, dtype=np.float64).ravel()
        if inputs.shape[0] != self._topology.input_size:
            raise DataShapeError(
                f"Expected {self._topology.input_size} inputs, got {inputs.shape[0]}"
            )
        self._a[INPUT_LAYER][...] = inputs

    def run(self, inputs: Array) -> Array:
        """Inference-only forward pass; returns a copy of the output layer."""

        self._set_inputs(inputs)
        self._has_case = False
        f = self._activation
        a = self._a
        for n in range(self._topology.first_hidden, self._topology.output + 1):
            a[n][...] = f(a[n - 1] @ self._weights[n - 1])
        return a[self._topology.output].copy()

    def forward_train(self, inputs: Array, expected: Array) -> float:
        """Training-mode forward pass for one case.

        Retains theta for every non-input layer, fills the output layer's psi
        with ``(expected - actual) * f'(theta)`` and returns the case's squared
        error ``sum((expected - actual) ** 2)``.
        """

        thetas, psis = self._require_training()
        expected = np.asarray(expected, dtype=np.float64).ravel()
        if expected.shape[0] != self._topology.output_size:
            raise DataShapeError(
                f"Expected {self._topology.output_size} target values, got {expected.shape[0]}"
            )
        self._set_inputs(inputs)

        f = self._activation
        a = self._a
        out = self._topology.output
        for n in range(self._topology.first_hidden, out + 1):
            np.matmul(a[n - 1], self._weights[n - 1], out=thetas[n])
            a[n][...] = f(thetas[n])

        omega = expected - a[out]
        psis[out][...] = omega * f.deriv(thetas[out])
        self._has_case = True
        return float(omega @ omega)

    # ------------------------------------------------------------------
    # Backward propagation / weight update

    def backpropagate(self) -> None:
        """Update every weight in place for the case last given to :meth:`forward_train`.

        The sweep walks from the last hidden layer down to the first. At each
        layer ``n`` omega is read from ``weights[n]`` *before* ``weights[n]`` is
        updated with the same ``psi[n + 1]``; once the sweep has moved past a
        connectivity layer it is never read again for this case. Reordering
        these two steps (for example updating all layers in one vectorised
        pass) silently changes the gradient.
        """

        thetas, psis = self._require_training()
        if not self._has_case:
            raise RuntimeError("backpropagate() called before forward_train()")

        f = self._activation
        lam = self._lambda
        a = self._a
        top = self._topology
        for n in range(top.last_hidden, top.first_hidden - 1, -1):
            W = self._weights[n]
            omega = W @ psis[n + 1]  # read before the update below
            psis[n][...] = omega * f.deriv(thetas[n])
            W += lam * np.outer(a[n], psis[n + 1])

        self._weights[INPUT_LAYER] += lam * np.outer(a[INPUT_LAYER], psis[top.first_hidden])
        self._has_case = False

    def train_case(self, inputs: Array, expected: Array) -> float:
        """Forward then backward for one case; returns its squared error."""

        error = self.forward_train(inputs, expected)
        self.backpropagate()
        return error

    def _require_training(self) -> tuple[List[Array], List[Array]]:
        if self._thetas is None or self._psis is None:
            raise RuntimeError("Network was built for inference; pass training=True to train it")
        return self._thetas, self._psis  # type: ignore[return-value]

    def __repr__(self) -> str:
        mode = "training" if self._training else "inference"
        return (
            f"Network(topology='{self._topology}', activation={self._activation.value}, "
            f"lambda_value={self._lambda}, mode={mode})"
        )


__all__ = ["Network"]
