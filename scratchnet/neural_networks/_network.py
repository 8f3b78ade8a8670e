"""
Neural network composed of an ordered sequence of layers, trained with
mini-batch stochastic gradient descent.
"""
import numpy as np
import pandas as pd

from ..base import BaseNetwork
from ..common.utils import fisher_yates_shuffle, normal_random_values
from ..maths import Matrix, MatrixShapeError, flatten
from .layers import LayerShape

GRADIENT_CHECK_COLUMNS = [
    'layer',
    'parameter',
    'numeric_gradient',
    'analytic_gradient',
    'relative_error',
    'passed'
]


class NeuralNetwork(BaseNetwork):
    """
    Feedforward neural network built from fully-connected, convolution and
    max-pooling layers.

    The cost function is the quadratic cost C = 0.5 * ||output - desired||^2.
    """

    def __init__(self, input_shape, layers, random_state=None, verbose=False):
        """
        Initialize the network and connect its layers.

        Args:
            input_shape (LayerShape or tuple): (features, rows, columns) of the
                network input. The input layer is not an actual layer.
            layers (list of Layer): Layers without the input layer
            random_state (int, optional): Seed for parameter initialization and shuffling
            verbose (bool): Whether to print the test accuracy during training
        """
        if not layers:
            raise ValueError("Neural network needs at least one layer apart from the input layer.")
        self.input_shape = LayerShape(*input_shape)
        self.layers = list(layers)
        self.random_state = random_state
        self.verbose = verbose
        self.rng_ = np.random.default_rng(random_state)
        self.test_scores_ = []
        self._connect_layers()

    def _connect_layers(self):
        """Give each layer the output shape of its predecessor as input shape."""
        shape = self.input_shape
        for layer in self.layers:
            layer.connect(shape, self.rng_)
            shape = layer.output_shape

    @property
    def output_shape(self):
        return self.layers[-1].output_shape

    def predict(self, input_data):
        """
        Feed an input through the network.

        Args:
            input_data (Matrix or list of Matrix): A single-channel input or one
                matrix per input feature, matching the network's input shape

        Returns:
            Matrix: Column vector of the output layer's values
        """
        feature_maps = [input_data] if isinstance(input_data, Matrix) else list(input_data)
        if (len(feature_maps) != self.input_shape.features
                or any(feature_map.shape != (self.input_shape.rows, self.input_shape.columns)
                       for feature_map in feature_maps)):
            raise MatrixShapeError(
                f"Input not compatible with network input layer {tuple(self.input_shape)}.")
        output = feature_maps
        for layer in self.layers:
            output = layer.forward(output)
        return flatten(output)

    def train(self, training_set, epochs, mini_batch_size, learning_rate,
              test_set=None, progress_callback=None):
        """
        Train the network with mini-batch stochastic gradient descent.

        The training set is shuffled at the start of every epoch and divided
        into mini batches of `mini_batch_size` samples. Samples which do not
        fill a complete mini batch are left out for that epoch.

        Args:
            training_set (list): Samples of (input, desired output)
            epochs (int): Number of full iterations over the training set
            mini_batch_size (int): Number of samples in each mini batch
            learning_rate (float): Learning rate used for gradient descent
            test_set (list, optional): Samples used to measure the accuracy
                before training and after each epoch
            progress_callback (callable, optional): Called as
                progress_callback(epoch, batch_index, batch_count) after each mini batch

        Returns:
            self: Trained network
        """
        if epochs < 0:
            raise ValueError(f"epochs must be non-negative, got {epochs}")
        if mini_batch_size < 1:
            raise ValueError(f"mini_batch_size must be positive, got {mini_batch_size}")

        current_training_set = list(training_set)
        batch_count = len(current_training_set) // mini_batch_size

        if test_set is not None:
            self._record_test_score("Untrained", test_set)

        for epoch in range(epochs):
            fisher_yates_shuffle(current_training_set, self.rng_)
            for batch_index in range(batch_count):
                start = batch_index * mini_batch_size
                mini_batch = current_training_set[start:start + mini_batch_size]
                self._update_mini_batch(mini_batch, learning_rate)
                if progress_callback is not None:
                    progress_callback(epoch, batch_index, batch_count)

            if test_set is not None:
                self._record_test_score(f"Epoch {epoch}", test_set)

        return self

    def _record_test_score(self, label, test_set):
        correctly_classified = self.test(test_set)
        self.test_scores_.append(correctly_classified)
        if self.verbose:
            print(f"{label}: {correctly_classified}/{len(test_set)}")

    def _update_mini_batch(self, mini_batch, learning_rate):
        self._update_total_gradients(mini_batch)
        self._update_parameters(learning_rate, len(mini_batch))

    def _update_total_gradients(self, mini_batch):
        """Backpropagate every sample; gradients are summed inside the layers."""
        for input_data, desired_output in mini_batch:
            output = self.predict(input_data)
            error = [self.cost_derivative(output, desired_output)]
            for layer in reversed(self.layers):
                error = layer.backward(error)

    def _update_parameters(self, learning_rate, mini_batch_size):
        factor = learning_rate / mini_batch_size
        for layer in self.layers:
            layer.adjust_parameters(lambda total_gradient: -total_gradient * factor)

    @staticmethod
    def cost_derivative(output, desired_output):
        """Derivative of the quadratic cost with respect to the network output."""
        return output - desired_output

    @staticmethod
    def cost(output, desired_output):
        difference = output - desired_output
        return 0.5 * (difference * difference).sum()

    def gradient_check(self, epsilon=1e-5, tolerance=1e-4):
        """
        Compare the backpropagated gradient of every parameter with a numeric
        central-difference estimate on a random sample.

        Args:
            epsilon (float): Perturbation applied to each parameter
            tolerance (float): Largest relative error counted as passed

        Returns:
            pd.DataFrame: One row per parameter with the columns of GRADIENT_CHECK_COLUMNS
        """
        input_maps = [Matrix(self.input_shape.rows, self.input_shape.columns,
                             normal_random_values(self.input_shape.rows * self.input_shape.columns,
                                                  self.rng_))
                      for _ in range(self.input_shape.features)]
        desired_output = Matrix.vector(normal_random_values(self.output_shape.size, self.rng_))

        for layer in self.layers:
            layer.reset_total_gradients()
        self._update_total_gradients([(input_maps, desired_output)])

        records = []
        for layer_index, layer in enumerate(self.layers):
            for parameter_index in range(layer.parameter_count):
                previous_value = layer.get_parameter(parameter_index)
                layer.set_parameter(parameter_index, previous_value + epsilon)
                cost_plus = self.cost(self.predict(input_maps), desired_output)
                layer.set_parameter(parameter_index, previous_value - epsilon)
                cost_minus = self.cost(self.predict(input_maps), desired_output)
                layer.set_parameter(parameter_index, previous_value)

                numeric_gradient = (cost_plus - cost_minus) / (2 * epsilon)
                analytic_gradient = layer.get_gradient(parameter_index)
                relative_error = (abs(analytic_gradient - numeric_gradient)
                                  / max(abs(analytic_gradient), abs(numeric_gradient), 1e-6))
                records.append((layer_index, parameter_index, numeric_gradient,
                                analytic_gradient, relative_error, relative_error < tolerance))

        for layer in self.layers:
            layer.reset_total_gradients()

        report = pd.DataFrame.from_records(records, columns=GRADIENT_CHECK_COLUMNS)
        if self.verbose:
            print(report.to_string(index=False))
        return report

    def __repr__(self):
        layers = ", ".join(repr(layer) for layer in self.layers)
        return f"{self.__class__.__name__}(input_shape={tuple(self.input_shape)}, layers=[{layers}])"
