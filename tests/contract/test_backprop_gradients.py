"""The streaming update must equal an exact gradient-descent step on one case."""

import numpy as np
import pytest

from nlayernet.core.activations import Activation
from nlayernet.core.network import Network
from nlayernet.core.topology import Topology


def _case_error(network: Network, inputs, expected) -> float:
    diff = expected - network.run(inputs)
    return 0.5 * float(diff @ diff)


def _numerical_gradient(network: Network, inputs, expected, eps: float = 1e-6) -> np.ndarray:
    flat = network.flat_weights()
    grad = np.zeros_like(flat)
    for idx in range(flat.size):
        shifted = flat.copy()
        shifted[idx] = flat[idx] + eps
        network.set_flat_weights(shifted)
        plus = _case_error(network, inputs, expected)
        shifted[idx] = flat[idx] - eps
        network.set_flat_weights(shifted)
        minus = _case_error(network, inputs, expected)
        grad[idx] = (plus - minus) / (2.0 * eps)
    network.set_flat_weights(flat)
    return grad


@pytest.mark.parametrize("descriptor", ["3-2", "2-3-2", "3-4-3-2", "2-3-3-2-2"])
@pytest.mark.parametrize("activation", [Activation.SIGMOID, Activation.TANH])
def test_update_matches_finite_difference_gradient(descriptor, activation):
    lam = 0.5
    rng = np.random.default_rng(len(descriptor))
    network = Network(
        Topology.parse(descriptor), activation=activation, lambda_value=lam, training=True
    )
    network.fill_random(-1.0, 1.0, rng)
    inputs = rng.uniform(-1.0, 1.0, size=network.topology.input_size)
    expected = rng.uniform(0.0, 1.0, size=network.topology.output_size)

    grad = _numerical_gradient(network, inputs, expected)
    before = network.flat_weights()
    network.train_case(inputs, expected)
    delta = network.flat_weights() - before

    assert np.allclose(delta, -lam * grad, rtol=1e-5, atol=1e-8)
