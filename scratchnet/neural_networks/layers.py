"""
Neural network layers implementation.

Every layer exchanges lists of feature maps (one Matrix per feature) with its
neighbours. Trainable parameters are exposed through a flat index space so the
training loop and the gradient checker can treat all layers alike.
"""
from typing import NamedTuple

import numpy as np

from ..common.utils import normal_random_values
from ..maths import (
    Matrix,
    MatrixShapeError,
    convolute_full_kernel,
    convolute_valid_kernel_only,
    flatten
)
from .activations import get_activation


class LayerShape(NamedTuple):
    """Shape of a layer's input or output: `features` maps of rows x columns."""
    features: int
    rows: int
    columns: int

    @property
    def size(self):
        return self.features * self.rows * self.columns


def _random_matrix(rows, columns, rng):
    return Matrix(rows, columns, normal_random_values(rows * columns, rng))


class Layer:
    """
    Base class for all neural network layers.

    A layer corresponds to one layer of neurons together with the connections
    leading into it.
    """

    def __init__(self):
        self.input_shape = None
        # Sum of parameter gradients over the backward passes of one mini-batch.
        # Aligned with _parameters(); None until the first backward pass.
        self.total_gradients = None

    def connect(self, input_shape, rng=None):
        """
        Set the shape of the input this layer receives and initialize its parameters.

        Args:
            input_shape (LayerShape): Output shape of the previous layer
            rng (np.random.Generator, optional): Random number generator
        """
        raise NotImplementedError

    @property
    def output_shape(self):
        """Shape of the layer's output."""
        raise NotImplementedError

    @property
    def neuron_count(self):
        return self.output_shape.size

    def forward(self, input_data):
        """Forward pass through the layer."""
        raise NotImplementedError

    def backward(self, output_error):
        """
        Backward pass through the layer.

        Adds the gradients of this layer's parameters to `total_gradients`.

        Args:
            output_error (list of Matrix): Error in this layer's output, i.e. the
                error returned by the successive layer or the cost derivative

        Returns:
            list of Matrix: Error in this layer's input
        """
        raise NotImplementedError

    def _parameters(self):
        """Parameter matrices in index order."""
        return []

    def _assign_parameters(self, parameters):
        """Replace the parameter matrices (same order as `_parameters`)."""

    def _check_connected(self):
        if self.input_shape is None:
            raise ValueError(f"{self.__class__.__name__} is not connected to an input shape.")

    def _accumulate(self, gradients):
        if self.total_gradients is None:
            self.total_gradients = gradients
        else:
            self.total_gradients = [total + gradient for total, gradient
                                    in zip(self.total_gradients, gradients)]

    def adjust_parameters(self, step_calculation):
        """
        Add a step computed from the total gradients to every parameter:
        `param = param + step_calculation(total_gradient)`. Resets the total gradients.

        Args:
            step_calculation (callable): Maps a total gradient Matrix to a step Matrix
        """
        parameters = self._parameters()
        if not parameters:
            return
        if self.total_gradients is None:
            raise ValueError("Cannot adjust parameters without previous backpropagation.")
        self._assign_parameters([parameter + step_calculation(total_gradient)
                                 for parameter, total_gradient
                                 in zip(parameters, self.total_gradients)])
        self.total_gradients = None

    def reset_total_gradients(self):
        self.total_gradients = None

    @property
    def parameter_count(self):
        return sum(parameter.rows * parameter.columns for parameter in self._parameters())

    def _locate(self, index):
        """Map a flat parameter index to (matrix position, row, column)."""
        if index < 0:
            raise IndexError(f"Parameter index {index} out of range")
        offset = index
        for position, parameter in enumerate(self._parameters()):
            size = parameter.rows * parameter.columns
            if offset < size:
                row, column = divmod(offset, parameter.columns)
                return position, row, column
            offset -= size
        raise IndexError(
            f"Parameter index {index} out of range for {self.__class__.__name__} "
            f"with {self.parameter_count} parameters")

    def get_parameter(self, index):
        position, row, column = self._locate(index)
        return self._parameters()[position][row, column]

    def set_parameter(self, index, value):
        position, row, column = self._locate(index)
        self._parameters()[position][row, column] = value

    def get_gradient(self, index):
        """Total gradient of the parameter at `index`, or None if nothing was accumulated."""
        position, row, column = self._locate(index)
        if self.total_gradients is None:
            return None
        return self.total_gradients[position][row, column]

    def __repr__(self):
        return f"{self.__class__.__name__}(input_shape={self.input_shape})"


class FullyConnectedLayer(Layer):
    """
    Layer whose neurons are connected to each neuron in the previous layer.
    """

    def __init__(self, neuron_count, activation='sigmoid', weights=None, biases=None):
        """
        Initialize the layer.

        Args:
            neuron_count (int): Number of neurons
            activation (str or Activation): Non-linearity ('sigmoid', 'relu')
            weights (Matrix, optional): Initial weights of shape (neuron_count, input size)
            biases (Matrix, optional): Initial biases of shape (neuron_count, 1)
        """
        super().__init__()
        if neuron_count < 1:
            raise ValueError(f"neuron_count must be positive, got {neuron_count}")
        self._neuron_count = neuron_count
        self.activation = get_activation(activation)
        self.weights = weights.copy() if weights is not None else None
        self.biases = biases.copy() if biases is not None else None
        if biases is not None and biases.shape != (neuron_count, 1):
            raise MatrixShapeError(
                f"Biases must be {neuron_count}x1, got {biases.rows}x{biases.columns}")

        # Values of the most recent forward pass, consumed by backward()
        self.most_recent_inputs = None
        self.most_recent_weighted_sums = None

    def connect(self, input_shape, rng=None):
        if rng is None:
            rng = np.random.default_rng()
        self.input_shape = input_shape
        input_size = input_shape.size
        if self.weights is None:
            self.weights = _random_matrix(self._neuron_count, input_size, rng)
        elif self.weights.shape != (self._neuron_count, input_size):
            raise MatrixShapeError(
                f"Weights must be {self._neuron_count}x{input_size}, "
                f"got {self.weights.rows}x{self.weights.columns}")
        if self.biases is None:
            self.biases = _random_matrix(self._neuron_count, 1, rng)

    @property
    def output_shape(self):
        return LayerShape(1, self._neuron_count, 1)

    @property
    def neuron_count(self):
        return self._neuron_count

    def forward(self, input_data):
        """
        Forward pass: activation(weights x input + biases)

        Args:
            input_data (list of Matrix): Feature maps; flattened into one column
                vector unless already given as a single column vector

        Returns:
            list of Matrix: The layer output as a single column vector
        """
        self._check_connected()
        if len(input_data) == 1 and input_data[0].columns == 1:
            inputs = input_data[0]
        else:
            inputs = flatten(input_data)
        if inputs.rows != self.weights.columns:
            raise MatrixShapeError(
                f"Input of size {inputs.rows} does not match {self.weights.columns} input neurons")
        self.most_recent_inputs = inputs
        self.most_recent_weighted_sums = self.weights @ inputs + self.biases
        return [self.activation.apply(self.most_recent_weighted_sums)]

    def backward(self, output_error):
        if self.most_recent_inputs is None or self.most_recent_weighted_sums is None:
            raise ValueError("Cannot backpropagate without previous forward propagation.")
        output_error = flatten(output_error)
        local_error = output_error * self.activation.apply_derivative(self.most_recent_weighted_sums)
        biases_gradients = local_error
        weights_gradients = local_error @ self.most_recent_inputs.transpose()
        self._accumulate([biases_gradients, weights_gradients])

        self.most_recent_inputs = None
        self.most_recent_weighted_sums = None

        input_error = self.weights.transpose() @ local_error
        return input_error.split(*self.input_shape)

    # Biases come first in the parameter index space, then weights row by row
    def _parameters(self):
        if self.weights is None or self.biases is None:
            return []
        return [self.biases, self.weights]

    def _assign_parameters(self, parameters):
        self.biases, self.weights = parameters

    def __repr__(self):
        return (f"FullyConnectedLayer(neuron_count={self._neuron_count}, "
                f"activation={self.activation!r})")


class ConvolutionLayer(Layer):
    """
    Layer convolving its input with one kernel per feature.

    Only single-channel input is supported.
    """

    def __init__(self, features, kernel_rows, kernel_columns, activation='relu'):
        """
        Initialize the layer.

        Args:
            features (int): Number of kernels, i.e. output feature maps
            kernel_rows (int): Kernel height (odd)
            kernel_columns (int): Kernel width (odd)
            activation (str or Activation): Non-linearity, rectifier by default
        """
        super().__init__()
        if kernel_rows % 2 != 1 or kernel_columns % 2 != 1:
            raise MatrixShapeError(
                f"Kernel must have odd dimensions, got {kernel_rows}x{kernel_columns}")
        if features < 1:
            raise ValueError(f"features must be positive, got {features}")
        self.features = features
        self.kernel_rows = kernel_rows
        self.kernel_columns = kernel_columns
        self.activation = get_activation(activation)
        self.weights = None
        # One 1x1 matrix per feature
        self.biases = None

        self.most_recent_inputs = None
        self.most_recent_weighted_sums = None

    def connect(self, input_shape, rng=None):
        if rng is None:
            rng = np.random.default_rng()
        if input_shape.features != 1:
            raise MatrixShapeError(
                f"ConvolutionLayer supports single-channel input only, got {input_shape.features} features")
        if input_shape.rows < self.kernel_rows or input_shape.columns < self.kernel_columns:
            raise MatrixShapeError(
                f"Kernel {self.kernel_rows}x{self.kernel_columns} does not fit into "
                f"{input_shape.rows}x{input_shape.columns} input")
        self.input_shape = input_shape
        if self.weights is None:
            self.weights = [_random_matrix(self.kernel_rows, self.kernel_columns, rng)
                            for _ in range(self.features)]
            self.biases = [_random_matrix(1, 1, rng) for _ in range(self.features)]

    @property
    def output_shape(self):
        self._check_connected()
        return LayerShape(self.features,
                          self.input_shape.rows - self.kernel_rows + 1,
                          self.input_shape.columns - self.kernel_columns + 1)

    def forward(self, input_data):
        """
        Forward pass: activation(bias_f + valid_convolution(input, kernel_f)) per feature
        """
        self._check_connected()
        if (len(input_data) != 1
                or input_data[0].shape != (self.input_shape.rows, self.input_shape.columns)):
            raise MatrixShapeError(
                f"Wrong input dimensions (expected 1x{self.input_shape.rows}x"
                f"{self.input_shape.columns} single-channel input)")
        inputs = input_data[0]
        self.most_recent_inputs = inputs
        self.most_recent_weighted_sums = [
            bias[0, 0] + convolute_valid_kernel_only(inputs, kernel)
            for kernel, bias in zip(self.weights, self.biases)
        ]
        return [self.activation.apply(weighted_sum)
                for weighted_sum in self.most_recent_weighted_sums]

    def backward(self, output_error):
        """
        Backward pass.

        The kernel gradient at (r, c) is the dot product of the delta map with
        the input region shifted by (r, c). The input error is the full
        convolution of each zero-padded delta map with its kernel rotated by
        180 degrees, summed over all features.
        """
        if self.most_recent_inputs is None or self.most_recent_weighted_sums is None:
            raise ValueError("Cannot backpropagate without previous forward propagation.")
        if len(output_error) != self.features:
            raise MatrixShapeError(
                f"Expected error for {self.features} features, got {len(output_error)}")
        inputs = self.most_recent_inputs
        deltas = [feature_error * self.activation.apply_derivative(weighted_sum)
                  for feature_error, weighted_sum
                  in zip(output_error, self.most_recent_weighted_sums)]

        biases_gradients = [Matrix(1, 1, [delta.sum()]) for delta in deltas]
        weights_gradients = []
        for delta in deltas:
            kernel_gradient = Matrix(self.kernel_rows, self.kernel_columns)
            for row in range(self.kernel_rows):
                for column in range(self.kernel_columns):
                    affected_inputs = inputs.submatrix(row, self.kernel_rows - row - 1,
                                                       column, self.kernel_columns - column - 1)
                    kernel_gradient[row, column] = (affected_inputs * delta).sum()
            weights_gradients.append(kernel_gradient)
        self._accumulate(biases_gradients + weights_gradients)

        self.most_recent_inputs = None
        self.most_recent_weighted_sums = None

        vertical_border = (self.kernel_rows - 1) // 2
        horizontal_border = (self.kernel_columns - 1) // 2
        input_error = Matrix(self.input_shape.rows, self.input_shape.columns)
        for delta, kernel in zip(deltas, self.weights):
            # rotate_180 works in place, so rotate a private copy of the kernel
            flipped_kernel = kernel.copy().rotate_180()
            padded_delta = delta.zero_padded(vertical_border, horizontal_border)
            input_error = input_error + convolute_full_kernel(padded_delta, flipped_kernel)
        return [input_error]

    # All biases (feature order) first, then the kernels feature by feature
    def _parameters(self):
        if self.weights is None:
            return []
        return self.biases + self.weights

    def _assign_parameters(self, parameters):
        self.biases = list(parameters[:self.features])
        self.weights = list(parameters[self.features:])

    def __repr__(self):
        return (f"ConvolutionLayer(features={self.features}, kernel_rows={self.kernel_rows}, "
                f"kernel_columns={self.kernel_columns}, activation={self.activation!r})")


class MaxPoolingLayer(Layer):
    """
    Layer dividing each feature map into pooling regions and forwarding only
    the maximum value of each region.
    """

    def __init__(self, pooling_region_rows, pooling_region_columns):
        super().__init__()
        if pooling_region_rows < 1 or pooling_region_columns < 1:
            raise ValueError("Pooling region dimensions must be positive")
        self.pooling_region_rows = pooling_region_rows
        self.pooling_region_columns = pooling_region_columns
        # Per feature, the (row, column) of each region's maximum relative to the input
        self.most_recent_max_indices = None

    def connect(self, input_shape, rng=None):
        if (input_shape.rows % self.pooling_region_rows != 0
                or input_shape.columns % self.pooling_region_columns != 0):
            raise MatrixShapeError(
                "Pooling layer incompatible to previous layer: input must be multiple of pooling region.")
        self.input_shape = input_shape

    @property
    def output_shape(self):
        self._check_connected()
        return LayerShape(self.input_shape.features,
                          self.input_shape.rows // self.pooling_region_rows,
                          self.input_shape.columns // self.pooling_region_columns)

    def forward(self, input_data):
        self._check_connected()
        if len(input_data) != self.input_shape.features:
            raise MatrixShapeError(
                f"Expected {self.input_shape.features} feature maps, got {len(input_data)}")
        vertical_regions = self.input_shape.rows // self.pooling_region_rows
        horizontal_regions = self.input_shape.columns // self.pooling_region_columns
        max_indices = []
        outputs = []
        for feature_input in input_data:
            if feature_input.shape != (self.input_shape.rows, self.input_shape.columns):
                raise MatrixShapeError(
                    f"Feature map {feature_input.rows}x{feature_input.columns} does not match "
                    f"{self.input_shape.rows}x{self.input_shape.columns}")
            max_values = []
            feature_indices = []
            for vertical_index in range(vertical_regions):
                for horizontal_index in range(horizontal_regions):
                    row_start = vertical_index * self.pooling_region_rows
                    column_start = horizontal_index * self.pooling_region_columns
                    value, row, column = feature_input.max_value_and_index_of_region(
                        row_start, column_start,
                        self.pooling_region_rows, self.pooling_region_columns)
                    max_values.append(value)
                    feature_indices.append((row + row_start, column + column_start))
            max_indices.append(feature_indices)
            outputs.append(Matrix(vertical_regions, horizontal_regions, max_values))
        self.most_recent_max_indices = max_indices
        return outputs

    def backward(self, output_error):
        """Route each error value to the position of its region's maximum."""
        if self.most_recent_max_indices is None:
            raise ValueError("Cannot backpropagate without previous forward propagation.")
        if len(output_error) != len(self.most_recent_max_indices):
            raise MatrixShapeError(
                f"Expected error for {len(self.most_recent_max_indices)} features, "
                f"got {len(output_error)}")
        expected_shape = (self.output_shape.rows, self.output_shape.columns)
        for feature_error in output_error:
            if feature_error.shape != expected_shape:
                raise MatrixShapeError(
                    f"Error map {feature_error.rows}x{feature_error.columns} does not match "
                    f"{expected_shape[0]}x{expected_shape[1]} pooling output")
        input_error = []
        for feature_indices, feature_error in zip(self.most_recent_max_indices, output_error):
            feature_input_error = Matrix(self.input_shape.rows, self.input_shape.columns)
            for (row, column), error in zip(feature_indices, feature_error.elements):
                feature_input_error[row, column] = error
            input_error.append(feature_input_error)
        self.most_recent_max_indices = None
        return input_error

    def __repr__(self):
        return (f"MaxPoolingLayer(pooling_region_rows={self.pooling_region_rows}, "
                f"pooling_region_columns={self.pooling_region_columns})")
