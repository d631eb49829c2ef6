"""
Sketchnet Layer Module

This module implements the Layer class: one affine transform (weight · input + bias)
followed by an activation function, plus the genetic operators (randomize, mutate,
crossover) and the parameter update used by gradient descent.

Classes:
    Layer: A fully connected layer owning one weight matrix and one bias vector
"""

import math

from sketchnet.activations         import ActivationFunction
from sketchnet.core.matrix         import Matrix, DimensionMismatchError
from sketchnet.core.random_utils   import random_uniform, random_set

class Layer:
    """
    A fully connected network layer.

    The weight matrix has shape (input x output) and the bias vector (input x 1),
    where 'input' is the number of neurons of this layer and 'output' is the width
    of the column vector the layer consumes. 'process' right-multiplies the weight
    by that column vector, so the result has one row per neuron.

    Weight and bias are replaced wholesale by 'randomize' and 'adjust', so no two
    layers ever share a matrix. 'mutate' and 'crossover' write elements in place
    (crossover only into the freshly created child).

    Public Properties:
        input:      Number of neurons (rows of weight and bias)
        output:     Width of the consumed input vector (columns of weight)
        activation: The activation function applied by 'process'
        weight:     The weight matrix
        bias:       The bias vector

    Public Methods:
        process(column):            Forward pass for one column vector
        replace_weight(matrix):     Install a new weight matrix
        replace_bias(matrix):       Install a new bias vector
        randomize(layer, min, max): Fill weight and bias with uniform values
        adjust(layer, dw, db):      Add parameter deltas (gradient descent update)
        crossover(layer1, layer2):  Build a child layer from two parents
        mutate(layer, min, max, rate): Perturb a random subset of parameters
    """

    def __init__(self, input: int, output: int, activation: ActivationFunction):
        """
        Create a layer with zero weight and bias.

        Parameters:
            input:      Number of neurons in this layer
            output:     Width of the input vector this layer consumes
            activation: Activation function (shared, read-only)
        """
        self._input     : int                = int(input)
        self._output    : int                = int(output)
        self._activation: ActivationFunction = activation
        self._weight    : Matrix             = Matrix(self._input, self._output)
        self._bias      : Matrix             = Matrix(self._input, 1)

    @property
    def input(self) -> int:
        return self._input

    @property
    def output(self) -> int:
        return self._output

    @property
    def activation(self) -> ActivationFunction:
        return self._activation

    @property
    def weight(self) -> Matrix:
        return self._weight

    @property
    def bias(self) -> Matrix:
        return self._bias

    def process(self, column: Matrix) -> Matrix:
        """
        Compute 'activation(weight · column + bias)'.

        Parameters:
            column: Column vector with 'output' rows

        Returns:
            New column vector with 'input' rows

        Raises:
            DimensionMismatchError: if the column vector has the wrong width
        """
        return self._weight.multiply(column).add(self._bias).apply(self._activation.generate)

    def replace_weight(self, weight: Matrix) -> None:
        if weight.rows != self._input or weight.columns != self._output:
            raise DimensionMismatchError(f"Weight must be ({self._input} x {self._output}), "
                                         f"got ({weight.rows} x {weight.columns})")
        self._weight = weight

    def replace_bias(self, bias: Matrix) -> None:
        if bias.rows != self._input or bias.columns != 1:
            raise DimensionMismatchError(f"Bias must be ({self._input} x 1), got ({bias.rows} x {bias.columns})")
        self._bias = bias

    def _verify_shape(self) -> None:
        if not (self._weight.rows == self._bias.rows == self._input):
            raise DimensionMismatchError(f"Layer shape invariant violated: weight has {self._weight.rows} rows, "
                                         f"bias has {self._bias.rows} rows, layer has {self._input} neurons")

    def same_shape(self, other: 'Layer') -> bool:
        return self._input == other._input and self._output == other._output

    @staticmethod
    def _cross_weight(target: Matrix, source1: Matrix, source2: Matrix) -> None:
        # Two pointers walk the flattened index space from both ends; the midpoint is included.
        size = target.size
        half = size // 2
        for offset1 in range(half + 1):
            offset2 = size - 1 - offset1
            row1, column1 = Matrix.get_row(source1, offset1), Matrix.get_column(source1, offset1)
            row2, column2 = Matrix.get_row(source2, offset2), Matrix.get_column(source2, offset2)
            value1 = source1.get(row1, column1)
            value2 = source2.get(row2, column2)
            target.set(row1, column1, value2)
            target.set(row2, column2, value1)

    @staticmethod
    def _cross_bias(target: Matrix, source1: Matrix, source2: Matrix) -> None:
        # Same two-pointer swap, but the midpoint is excluded: for an odd size
        # the middle element of the child keeps its initial zero.
        size = target.size
        half = size // 2
        for row1 in range(half):
            row2 = size - 1 - row1
            value1 = source1.get(row1, 0)
            value2 = source2.get(row2, 0)
            target.set(row1, 0, value2)
            target.set(row2, 0, value1)

    @staticmethod
    def _mutate_matrix(target: Matrix, min_value: float, max_value: float, rate: float) -> None:
        count   = math.floor(target.size * rate + 0.5)   # half-up rounding
        offsets = random_set(0, target.size - 1, count)
        for offset in offsets:
            row    = Matrix.get_row(target, offset)
            column = Matrix.get_column(target, offset)
            target.set(row, column, target.get(row, column) + random_uniform(min_value, max_value))

    @classmethod
    def crossover(cls, layer1: 'Layer', layer2: 'Layer') -> 'Layer':
        """
        Create a child layer by interleaving the parameters of two parents.

        Position i (from the front) of the child takes the value found at position
        size-1-i (from the back) of 'layer2', and position size-1-i takes the value
        at position i of 'layer1'. The bias walk stops before the midpoint, the
        weight walk includes it.

        Parameters:
            layer1: First parent (also provides the child's shape and activation)
            layer2: Second parent, same shape as 'layer1'

        Returns:
            The child layer
        """
        if not layer1.same_shape(layer2):
            raise DimensionMismatchError(f"Cannot cross a ({layer1.input} x {layer1.output}) layer "
                                         f"with a ({layer2.input} x {layer2.output}) layer")

        child = cls(layer1._input, layer1._output, layer1._activation)
        cls._cross_bias(child._bias, layer1._bias, layer2._bias)
        cls._cross_weight(child._weight, layer1._weight, layer2._weight)
        child._verify_shape()
        return child

    @staticmethod
    def randomize(layer: 'Layer', min_value: float, max_value: float) -> None:
        """
        Replace weight and bias with new matrices of uniform values in [min_value, max_value).
        """
        bias = Matrix(layer._input, 1)
        bias.fill(lambda row, column: random_uniform(min_value, max_value))
        weight = Matrix(layer._input, layer._output)
        weight.fill(lambda row, column: random_uniform(min_value, max_value))
        layer.replace_bias(bias)
        layer.replace_weight(weight)

    @staticmethod
    def mutate(layer: 'Layer', min_value: float, max_value: float, rate: float) -> None:
        """
        Perturb a random subset of the layer's parameters in place.

        Exactly 'round(size * rate)' distinct weight elements, and independently
        'round(size * rate)' distinct bias elements, get a uniform random value in
        [min_value, max_value) added to them.
        """
        Layer._mutate_matrix(layer._weight, min_value, max_value, rate)
        Layer._mutate_matrix(layer._bias, min_value, max_value, rate)
        layer._verify_shape()

    @staticmethod
    def adjust(layer: 'Layer', weight: Matrix, bias: Matrix) -> None:
        """
        Replace 'weight := weight + weight_delta' and 'bias := bias + bias_delta'.
        """
        layer._weight = layer._weight.add(weight)
        layer._bias   = layer._bias.add(bias)

    def __repr__(self):
        return f"Layer(input={self._input}, output={self._output}, activation={self._activation})"
