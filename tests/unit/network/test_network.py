"""
Unit tests for the Network class.
"""

import graphviz
import pytest

from sketchnet.activations     import ActivationFunction
from sketchnet.core.matrix     import Matrix, DimensionMismatchError
from sketchnet.network.layer   import Layer
from sketchnet.network.network import Network, mean_squared_error


# ============================================================================
# Construction
# ============================================================================

class TestNetworkInit:

    def test_layer_shapes(self):
        """Layer k has sizes[k+1] neurons and consumes vectors of width sizes[k]."""
        network = Network([4, 3, 2])
        assert len(network.layers) == 2
        assert (network.layers[0].weight.rows, network.layers[0].weight.columns) == (3, 4)
        assert (network.layers[0].bias.rows, network.layers[0].bias.columns) == (3, 1)
        assert (network.layers[1].weight.rows, network.layers[1].weight.columns) == (2, 3)
        assert (network.layers[1].bias.rows, network.layers[1].bias.columns) == (2, 1)

    def test_adjacent_layers_fit(self):
        network = Network([225, 120, 60, 6])
        for previous, layer in zip(network.layers, network.layers[1:]):
            assert layer.output == previous.input

    def test_defaults(self):
        network = Network([2, 1])
        assert network.rate == 0.1
        assert network.activation == ActivationFunction.sigmoid()
        assert all(layer.activation == ActivationFunction.sigmoid() for layer in network.layers)

    def test_explicit_rate_and_activation(self):
        relu    = ActivationFunction.relu(0.5)
        network = Network([2, 2, 1], rate=0.3, activation=relu)
        assert network.rate == 0.3
        assert all(layer.activation == relu for layer in network.layers)

    def test_sizes_are_copied(self):
        sizes   = [3, 2]
        network = Network(sizes)
        sizes.append(5)
        assert network.sizes == [3, 2]

    @pytest.mark.parametrize("sizes", [[], [4], [4, 0, 2], [3, -1]])
    def test_invalid_sizes_raise(self, sizes):
        with pytest.raises(ValueError):
            Network(sizes)

    @pytest.mark.parametrize("rate", [0.0, -0.1])
    def test_invalid_rate_raises(self, rate):
        with pytest.raises(ValueError):
            Network([2, 1], rate=rate)

    def test_repr(self):
        assert "sizes=[2, 1]" in repr(Network([2, 1]))


# ============================================================================
# Forward pass
# ============================================================================

class TestForwardPass:

    def test_process_all_returns_every_stage(self):
        network = Network.from_random([4, 3, 2])
        output  = network.process_all([0.1, 0.2, 0.3, 0.4])
        assert len(output) == 3
        assert output[0].data == pytest.approx([0.1, 0.2, 0.3, 0.4])
        assert [stage.rows for stage in output] == [4, 3, 2]
        assert all(stage.columns == 1 for stage in output)

    def test_predict_length_and_range(self):
        network    = Network.from_random([4, 3, 2])
        prediction = network.predict([1, 0, 1, 0])
        assert isinstance(prediction, list)
        assert len(prediction) == 2
        assert all(0.0 < value < 1.0 for value in prediction)

    def test_zero_network_predicts_one_half(self):
        assert Network([3, 2, 2]).predict([1, 2, 3]) == [0.5, 0.5]

    def test_wrong_input_length_raises(self):
        with pytest.raises(DimensionMismatchError):
            Network([4, 3, 2]).predict([1, 2, 3])

    def test_prediction_is_deterministic(self):
        network = Network.from_random([4, 3, 2])
        assert network.predict([1, 0, 0, 1]) == network.predict([1, 0, 0, 1])


# ============================================================================
# Training
# ============================================================================

class TestTrain:

    def test_single_step_hand_computed(self):
        """
        Linear network [1, 1, 1], rate 0.5, w0=0.5, w1=2, zero biases, x=1, target 2.
        Forward: h=0.5, y=1, error=1.
        Layer 1: delta=0.5 -> w1=2.25, b1=0.5; error propagated through updated w1: 2.25.
        Layer 0: delta=1.125 -> w0=1.625, b0=1.125.
        """
        network = Network([1, 1, 1], rate=0.5, activation=ActivationFunction.linear(1.0))
        network.layers[0].replace_weight(Matrix.from_array([0.5]))
        network.layers[1].replace_weight(Matrix.from_array([2.0]))

        network.train([1.0], [2.0])

        assert network.layers[1].weight.data == pytest.approx([2.25])
        assert network.layers[1].bias.data == pytest.approx([0.5])
        assert network.layers[0].weight.data == pytest.approx([1.625])
        assert network.layers[0].bias.data == pytest.approx([1.125])

    def test_single_layer_sigmoid_step(self):
        """Zero single-layer sigmoid net: y=0.5, delta = rate * 0.25 * (1 - 0.5)."""
        network = Network([2, 1], rate=1.0)
        network.train([1.0, 0.0], [1.0])
        assert network.layers[0].bias.data == pytest.approx([0.125])
        assert network.layers[0].weight.data == pytest.approx([0.125, 0.0])

    def test_training_reduces_error(self):
        network = Network.from_random([4, 3, 2])
        example, target = [1, 0, 1, 0], [1, 0]
        before = network.error(example, target)
        for _ in range(200):
            network.train(example, target)
        assert network.error(example, target) < before

    def test_perfect_prediction_leaves_parameters_alone(self):
        network = Network([2, 1], activation=ActivationFunction.linear(1.0))
        network.train([1.0, 1.0], [0.0])
        assert network.layers[0].weight.data == [0.0, 0.0]
        assert network.layers[0].bias.data == [0.0]

    def test_wrong_expected_length_raises(self):
        with pytest.raises(DimensionMismatchError):
            Network([2, 2]).train([1, 1], [1])

    def test_wrong_input_length_raises(self):
        with pytest.raises(DimensionMismatchError):
            Network([2, 2]).train([1], [1, 1])


class TestMeanSquaredError:

    def test_value(self):
        assert mean_squared_error([1.0, 0.0], [0.0, 0.0]) == 0.5

    def test_zero_for_equal_vectors(self):
        assert mean_squared_error([0.3, 0.7], [0.3, 0.7]) == 0.0

    def test_length_mismatch_raises(self):
        with pytest.raises(DimensionMismatchError):
            mean_squared_error([1.0], [1.0, 2.0])

    def test_network_error(self):
        assert Network([2, 1]).error([1, 1], [1.0]) == pytest.approx(0.25)


# ============================================================================
# Genetic operators
# ============================================================================

class TestFromRandom:

    def test_parameters_in_range(self):
        network = Network.from_random([3, 4, 2], min_value=-0.2, max_value=0.2)
        for layer in network.layers:
            assert all(-0.2 <= value < 0.2 for value in layer.weight.data + layer.bias.data)

    def test_rate_and_activation(self):
        network = Network.from_random([3, 2], rate=0.2, activation=ActivationFunction.elu())
        assert network.rate == 0.2
        assert network.activation == ActivationFunction.elu()


class TestFromCrossover:

    def test_rate_is_mean(self):
        child = Network.from_crossover(Network.from_random([3, 2], rate=0.1),
                                       Network.from_random([3, 2], rate=0.3))
        assert child.rate == pytest.approx(0.2)

    def test_layers_are_crossed_layer_by_layer(self):
        parent1 = Network.from_random([4, 3, 2])
        parent2 = Network.from_random([4, 3, 2])
        child   = Network.from_crossover(parent1, parent2)
        assert child.sizes == [4, 3, 2]
        for index, layer in enumerate(child.layers):
            expected = Layer.crossover(parent1.layers[index], parent2.layers[index])
            assert layer.weight == expected.weight
            assert layer.bias == expected.bias

    def test_child_has_parent_topology_and_activation(self):
        relu    = ActivationFunction.relu()
        child   = Network.from_crossover(Network.from_random([3, 3, 1], activation=relu),
                                         Network.from_random([3, 3, 1], activation=relu))
        assert child.activation == relu
        assert child.predict([1, 2, 3]) is not None

    def test_size_mismatch_raises(self):
        with pytest.raises(DimensionMismatchError):
            Network.from_crossover(Network([3, 2]), Network([3, 3, 2]))


class TestMutateAndCopy:

    def test_mutate_touches_every_layer(self):
        network = Network([4, 3, 2])
        Network.mutate(network, 0.5, 1.0, 1.0)
        for layer in network.layers:
            assert all(value >= 0.5 for value in layer.weight.data + layer.bias.data)

    def test_mutate_keeps_shapes(self):
        network = Network.from_random([4, 3, 2])
        Network.mutate(network, -0.1, 0.1, 0.3)
        assert [(layer.weight.rows, layer.weight.columns) for layer in network.layers] == [(3, 4), (2, 3)]

    def test_copy_is_independent(self):
        network   = Network.from_random([3, 2, 1], rate=0.4)
        duplicate = network.copy()
        assert duplicate.predict([1, 2, 3]) == network.predict([1, 2, 3])
        assert duplicate.rate == 0.4

        duplicate.train([1, 2, 3], [1.0])
        assert network.layers[0].weight != duplicate.layers[0].weight


# ============================================================================
# Visualization
# ============================================================================

class TestVisualize:

    def test_small_network_draws_every_neuron(self):
        network = Network.from_random([2, 3, 1])
        dot     = network.visualize()
        assert isinstance(dot, graphviz.Digraph)
        for name in ["L0N0", "L0N1", "L1N2", "L2N0"]:
            assert name in dot.source
        assert "L0N1 -> L1N2" in dot.source

    def test_wide_layers_are_summarized(self):
        dot = Network([225, 120, 60, 6]).visualize()
        assert "225 neurons" in dot.source
        assert "L0 -> L1" in dot.source
        assert "L2 -> L3N0" in dot.source
        assert "L0N0" not in dot.source

    def test_graph_label_describes_network(self):
        dot = Network([2, 1], rate=0.25).visualize()
        assert "sizes=[2, 1], rate=0.25, sigmoid" in dot.source
