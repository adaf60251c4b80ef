import numpy as np
import pytest

from nlayernet.core.activations import Activation, sigmoid, sigmoid_deriv
from nlayernet.core.errors import DataShapeError
from nlayernet.core.network import Network
from nlayernet.core.topology import Topology


def _scenario_network(training: bool = False, lambda_value: float = 0.3) -> Network:
    network = Network(Topology.parse("2-2-1"), lambda_value=lambda_value, training=training)
    network.set_weights([[[0.1, 0.2], [0.3, 0.4]], [[0.5], [0.6]]])
    return network


def test_allocation_matches_topology():
    network = Network(Topology.parse("2-2-1-3"), training=True)
    assert [W.shape for W in network.weights] == [(2, 2), (2, 1), (1, 3)]
    assert [a.shape for a in network.activations] == [(2,), (2,), (1,), (3,)]
    assert all(np.all(W == 0.0) for W in network.weights)
    assert network.parameter_count() == 9


@pytest.mark.parametrize("descriptor", ["3-2", "2-2-1", "2-4-3-2", "5-1-1-1-4"])
@pytest.mark.parametrize(
    "activation,expected", [(Activation.SIGMOID, 0.5), (Activation.TANH, 0.0)]
)
def test_zero_weights_give_f_of_zero_everywhere(descriptor, activation, expected):
    network = Network(Topology.parse(descriptor), activation=activation)
    rng = np.random.default_rng(0)
    network.run(rng.uniform(-3, 3, size=network.topology.input_size))
    for layer in network.activations[1:]:
        assert np.allclose(layer, expected)


def test_forward_propagation_scenario():
    network = _scenario_network()
    output = network.run([1.0, 0.0])
    hidden = network.hidden_activations()[0]
    assert hidden[0] == pytest.approx(0.52498, abs=1e-5)
    assert hidden[1] == pytest.approx(0.54983, abs=1e-5)
    assert output.shape == (1,)
    assert output[0] == pytest.approx(0.64392, abs=1e-4)


def test_forward_train_matches_inference_and_returns_squared_error():
    network = _scenario_network(training=True)
    error = network.forward_train([1.0, 0.0], [1.0])
    actual = network.output()[0]
    assert actual == pytest.approx(_scenario_network().run([1.0, 0.0])[0])
    assert error == pytest.approx((1.0 - actual) ** 2)


def test_single_update_reads_weights_before_writing_them():
    lam = 0.3
    network = _scenario_network(training=True, lambda_value=lam)
    x = np.array([1.0, 0.0])
    target = 1.0

    W0 = np.array([[0.1, 0.2], [0.3, 0.4]])
    W1 = np.array([[0.5], [0.6]])
    theta_h = x @ W0
    h = sigmoid(theta_h)
    theta_out = h @ W1
    out = sigmoid(theta_out)
    psi_out = (target - out) * sigmoid_deriv(theta_out)
    # hidden psi uses the output weights as they were before this case
    psi_h = (W1 @ psi_out) * sigmoid_deriv(theta_h)
    expected_W1 = W1 + lam * np.outer(h, psi_out)
    expected_W0 = W0 + lam * np.outer(x, psi_h)

    network.train_case(x, [target])
    assert np.allclose(network.weights[1], expected_W1, rtol=0, atol=1e-12)
    assert np.allclose(network.weights[0], expected_W0, rtol=0, atol=1e-12)


def test_updated_psi_would_differ_from_streaming_result():
    lam = 5.0
    network = _scenario_network(training=True, lambda_value=lam)
    x = np.array([1.0, 0.0])
    W1 = np.array([[0.5], [0.6]])
    h = sigmoid(x @ np.array([[0.1, 0.2], [0.3, 0.4]]))
    theta_out = h @ W1
    psi_out = (1.0 - sigmoid(theta_out)) * sigmoid_deriv(theta_out)
    stale_W1 = W1 + lam * np.outer(h, psi_out)
    psi_from_updated = (stale_W1 @ psi_out) * sigmoid_deriv(x @ np.array([[0.1, 0.2], [0.3, 0.4]]))

    network.train_case(x, [1.0])
    delta_W0 = network.weights[0] - np.array([[0.1, 0.2], [0.3, 0.4]])
    assert not np.allclose(delta_W0, lam * np.outer(x, psi_from_updated))


def test_two_layer_network_updates_input_to_output_weights():
    lam = 0.5
    network = Network(Topology.parse("3-2"), lambda_value=lam, training=True)
    rng = np.random.default_rng(4)
    network.fill_random(-1.0, 1.0, rng)
    before = network.weights[0].copy()
    x = np.array([0.2, -0.4, 1.0])
    target = np.array([0.0, 1.0])

    theta = x @ before
    psi = (target - sigmoid(theta)) * sigmoid_deriv(theta)
    network.train_case(x, target)
    assert np.allclose(network.weights[0], before + lam * np.outer(x, psi))


def test_buffers_are_reused_in_place():
    network = Network(Topology.parse("2-3-2"), training=True)
    network.fill_random(-1.0, 1.0, np.random.default_rng(1))
    buffers = [id(a) for a in network.activations]
    weights = [id(W) for W in network.weights]
    for _ in range(3):
        network.train_case([0.5, 0.25], [1.0, 0.0])
        network.run([0.1, 0.2])
    assert [id(a) for a in network.activations] == buffers
    assert [id(W) for W in network.weights] == weights


def test_fill_random_respects_range_and_seed():
    topology = Topology.parse("4-6-3")
    first = Network(topology)
    second = Network(topology)
    first.fill_random(0.1, 1.5, np.random.default_rng(11))
    second.fill_random(0.1, 1.5, np.random.default_rng(11))
    flat = first.flat_weights()
    assert flat.size == topology.weight_count()
    assert np.all(flat >= 0.1) and np.all(flat < 1.5)
    assert np.array_equal(flat, second.flat_weights())


def test_flat_weights_use_canonical_order():
    network = Network(Topology.parse("2-3-1"))
    values = np.arange(9, dtype=float)
    network.set_flat_weights(values)
    assert np.array_equal(network.weights[0], [[0, 1, 2], [3, 4, 5]])
    assert np.array_equal(network.weights[1], [[6], [7], [8]])
    assert np.array_equal(network.flat_weights(), values)


def test_shape_errors():
    network = Network(Topology.parse("2-2-1"), training=True)
    with pytest.raises(DataShapeError):
        network.run([1.0, 2.0, 3.0])
    with pytest.raises(DataShapeError):
        network.forward_train([1.0, 2.0], [1.0, 0.0])
    with pytest.raises(DataShapeError):
        network.set_flat_weights([0.0] * 5)
    with pytest.raises(DataShapeError):
        network.set_weights([np.zeros((2, 2))])
    before = network.flat_weights()
    with pytest.raises(DataShapeError):
        network.set_weights([np.ones((2, 2)), np.ones((1, 2))])
    assert np.array_equal(network.flat_weights(), before)


def test_inference_network_cannot_train():
    network = Network(Topology.parse("2-2-1"))
    with pytest.raises(RuntimeError):
        network.train_case([0.0, 1.0], [1.0])


def test_backpropagate_requires_a_training_forward_pass():
    network = Network(Topology.parse("2-2-1"), training=True)
    with pytest.raises(RuntimeError):
        network.backpropagate()
    network.forward_train([0.0, 1.0], [1.0])
    network.backpropagate()
    with pytest.raises(RuntimeError):
        network.backpropagate()
