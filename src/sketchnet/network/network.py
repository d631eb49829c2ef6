"""
Sketchnet Network Module

This module implements the feed-forward Network: an ordered stack of layers
sharing a learning rate. It orchestrates forward propagation, training by
backpropagation (plain gradient descent, one example at a time) and the
network-level genetic operators, which delegate to each layer.

Classes:
    Network: Ordered sequence of layers with forward pass, training and genetic operators

Functions:
    mean_squared_error: Mean squared distance between two equally long vectors
"""

import numpy as np
import graphviz  # type: ignore
from typing import Sequence

from sketchnet.activations   import ActivationFunction
from sketchnet.core.matrix   import Matrix, DimensionMismatchError
from sketchnet.network.layer import Layer

def mean_squared_error(values: Sequence[float], expected: Sequence[float]) -> float:
    values   = np.asarray(values,   dtype=np.float64)
    expected = np.asarray(expected, dtype=np.float64)
    if values.shape != expected.shape:
        raise DimensionMismatchError(f"Cannot compare vectors of length {values.size} and {expected.size}")
    return float(np.mean((values - expected) ** 2))

class Network:
    """
    A feed-forward neural network.

    The network is built from a list of layer sizes '[s0, s1, ..., sn]': s0 is the
    width of the raw input vector, and every following entry is the neuron count of
    one layer. Layer k therefore has 's[k+1]' neurons and consumes vectors of width
    's[k]', which guarantees that adjacent layers fit together.

    Public Properties:
        sizes:      The layer sizes the network was built from
        layers:     The layers, in input-to-output order
        rate:       The learning rate
        activation: The default activation function shared by all layers

    Public Methods:
        process_all(input):       Forward pass returning every intermediate activation
        predict(input):           Forward pass returning the output vector
        train(input, expected):   One step of gradient descent on one example
        error(input, expected):   Mean squared error of the prediction
        copy():                   Independent copy of the network
        visualize(view):          Graphviz rendering of the network structure
        from_random(...):         Build a network with uniform random parameters
        from_crossover(n1, n2):   Build a child network from two parents
        mutate(network, ...):     Mutate every layer
    """

    def __init__(self,
                 sizes     : Sequence[int],
                 rate      : float | None = None,
                 activation: ActivationFunction | None = None):
        """
        Parameters:
            sizes:      Number of neurons per layer, input width first (at least 2 entries)
            rate:       Learning rate (default 0.1)
            activation: Activation function for every layer (default sigmoid)
        """
        sizes = [int(size) for size in sizes]
        if len(sizes) < 2:
            raise ValueError(f"A network needs at least 2 layer sizes, got {sizes}")
        if any(size <= 0 for size in sizes):
            raise ValueError(f"Layer sizes must be positive, got {sizes}")

        rate = 0.1 if rate is None else float(rate)
        if rate <= 0:
            raise ValueError(f"Learning rate must be positive, got {rate}")

        self._sizes     : list[int]          = sizes
        self._rate      : float              = rate
        self._activation: ActivationFunction = activation if activation is not None else ActivationFunction.sigmoid()
        self._layers    : list[Layer]        = []
        self._initialize()

    def _initialize(self) -> None:
        last = None
        for neurons in self._sizes:
            if last is not None:
                self._layers.append(Layer(neurons, last, self._activation))
            last = neurons

    @property
    def sizes(self) -> list[int]:
        return list(self._sizes)

    @property
    def layers(self) -> list[Layer]:
        return list(self._layers)

    @property
    def rate(self) -> float:
        return self._rate

    @property
    def activation(self) -> ActivationFunction:
        return self._activation

    def process_all(self, input: Sequence[float]) -> list[Matrix]:
        """
        Run the forward pass.

        Parameters:
            input: Input vector of length 'sizes[0]'

        Returns:
            List of column vectors: the input itself followed by the output of every layer
        """
        result = Matrix.from_array(input)
        output = [result]
        for layer in self._layers:
            result = layer.process(result)
            output.append(result)
        return output

    def predict(self, input: Sequence[float]) -> list[float]:
        """
        Get the output vector (length 'sizes[-1]') for the given input vector.
        """
        return self.process_all(input)[-1].data

    def train(self, input: Sequence[float], expected: Sequence[float]) -> None:
        """
        Adjust the parameters towards 'expected' by one step of gradient descent.

        Going from the last layer to the first, each layer receives
            delta  = rate * (activation'(output[i]) ⊙ error)
            weight += delta · output[i-1]ᵀ
            bias   += delta
        and the error is propagated backward through the layer's *updated* weight.

        Parameters:
            input:    Input vector of length 'sizes[0]'
            expected: Target output vector of length 'sizes[-1]'
        """
        output = self.process_all(input)
        errors = Matrix.from_array(expected).subtract(output[-1])

        for index in range(len(output) - 1, 0, -1):
            layer  = self._layers[index - 1]
            bias   = self._gradient_descent(layer, output[index], errors)
            weight = bias.multiply(output[index - 1].transpose())
            Layer.adjust(layer, weight, bias)
            if index > 1:
                errors = layer.weight.transpose().multiply(errors)

    def _gradient_descent(self, layer: Layer, output: Matrix, errors: Matrix) -> Matrix:
        return output.apply(layer.activation.derivative).hadamard(errors).scale(self._rate)

    def error(self, input: Sequence[float], expected: Sequence[float]) -> float:
        """Mean squared error between the prediction for 'input' and 'expected'."""
        return mean_squared_error(self.predict(input), expected)

    def copy(self) -> 'Network':
        result = Network(self._sizes, self._rate, self._activation)
        for source, target in zip(self._layers, result._layers):
            target.replace_weight(source.weight.copy())
            target.replace_bias(source.bias.copy())
        return result

    @classmethod
    def from_random(cls,
                    sizes     : Sequence[int],
                    rate      : float | None = None,
                    activation: ActivationFunction | None = None,
                    min_value : float = -1.0,
                    max_value : float = 1.0) -> 'Network':
        """
        Build a network whose weights and biases are uniform in [min_value, max_value).
        """
        result = cls(sizes, rate, activation)
        for layer in result._layers:
            Layer.randomize(layer, min_value, max_value)
        return result

    @classmethod
    def from_crossover(cls, network1: 'Network', network2: 'Network') -> 'Network':
        """
        Build a child network from two parents of identical topology.

        The child's learning rate is the mean of the parents' rates and its
        layer k is 'Layer.crossover(network1.layers[k], network2.layers[k])'.
        """
        if network1._sizes != network2._sizes:
            raise DimensionMismatchError(f"Cannot cross networks of sizes {network1._sizes} and {network2._sizes}")

        result = cls(network1._sizes, (network1._rate + network2._rate) / 2, network1._activation)
        result._layers = [Layer.crossover(layer1, layer2)
                          for layer1, layer2 in zip(network1._layers, network2._layers)]
        return result

    @staticmethod
    def mutate(network: 'Network', min_value: float, max_value: float, rate: float) -> None:
        """Apply 'Layer.mutate' to every layer of the network."""
        for layer in network._layers:
            Layer.mutate(layer, min_value, max_value, rate)

    def visualize(self, view: bool = False, max_neurons: int = 16) -> graphviz.Digraph:
        """
        Visualize the network structure using Graphviz.

        Layers wider than 'max_neurons' are drawn as a single summary node.

        Parameters:
            view:        If True, render and open the visualization
            max_neurons: Widest layer drawn neuron by neuron

        Returns:
            graphviz.Digraph object representing the network
        """
        dot = graphviz.Digraph()
        dot.attr(rankdir='LR')
        dot.attr('graph', labelloc='t', label=f"sizes={self._sizes}, rate={self._rate:g}, {self._activation}")

        node_attrs = {'style': 'filled', 'shape': 'circle', 'penwidth': '0.5',
                      'fontsize': '5', 'width': '0.5', 'height': '0.5', 'fixedsize': 'true'}

        # node names per layer position (0 = input)
        names = []
        for position, width in enumerate(self._sizes):
            fillcolor = 'lightgrey' if position == 0 else ('white' if position == len(self._sizes) - 1 else 'lightblue')
            with dot.subgraph(name=f'cluster_{position}') as cluster:
                cluster.attr(rank='same', style='invisible')
                if width > max_neurons:
                    name = f"L{position}"
                    cluster.node(name, label=f"{width} neurons", fillcolor=fillcolor, **node_attrs)
                    names.append([name])
                    continue
                layer_names = []
                for neuron in range(width):
                    name  = f"L{position}N{neuron}"
                    label = f"{neuron}"
                    if position > 0:
                        label += f"\\nbias={self._layers[position - 1].bias.get(neuron, 0):.2f}"
                    cluster.node(name, label=label, fillcolor=fillcolor, **node_attrs)
                    layer_names.append(name)
                names.append(layer_names)

        for position, layer in enumerate(self._layers):
            sources, targets = names[position], names[position + 1]
            if self._sizes[position] > max_neurons or self._sizes[position + 1] > max_neurons:
                for source in sources:
                    for target in targets:
                        dot.edge(source, target, fontsize='5', penwidth='0.5', arrowsize='0.5')
                continue
            for neuron, target in enumerate(targets):
                for previous, source in enumerate(sources):
                    weight = layer.weight.get(neuron, previous)
                    color  = 'black' if weight >= 0 else 'red'
                    dot.edge(source, target, label=f"{weight:.2f}", color=color,
                             fontsize='5', penwidth='0.5', arrowsize='0.5')

        if view:
            dot.view()
        return dot

    def __repr__(self):
        return f"Network(sizes={self._sizes}, rate={self._rate:g}, activation={self._activation})"
