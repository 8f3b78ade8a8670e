"""
Fully-connected sigmoid network described by its layer sizes.
"""
from ..maths import MatrixShapeError
from ._network import NeuralNetwork
from .layers import FullyConnectedLayer, LayerShape


class FeedforwardNetwork(NeuralNetwork):
    """
    Neural network made only of sigmoid fully-connected layers.

    The first entry of `layer_sizes` is the size of the input column vector,
    every following entry adds one fully-connected layer.
    """

    def __init__(self, layer_sizes, weights=None, biases=None, random_state=None, verbose=False):
        """
        Args:
            layer_sizes (list of int): [inputs, hidden..., outputs]
            weights (list of Matrix, optional): One weight matrix per layer
            biases (list of Matrix, optional): One bias column vector per layer
            random_state (int, optional): Seed for parameter initialization and shuffling
            verbose (bool): Whether to print the test accuracy during training
        """
        layer_sizes = [int(size) for size in layer_sizes]
        if len(layer_sizes) < 2:
            raise ValueError("A feedforward network needs at least an input and an output layer size.")
        if any(size < 1 for size in layer_sizes):
            raise ValueError(f"Layer sizes must be positive, got {layer_sizes}")

        layer_count = len(layer_sizes) - 1
        weights = list(weights) if weights is not None else [None] * layer_count
        biases = list(biases) if biases is not None else [None] * layer_count
        if len(weights) != layer_count or len(biases) != layer_count:
            raise MatrixShapeError(
                f"Expected {layer_count} weight and bias matrices, "
                f"got {len(weights)} and {len(biases)}")

        self.layer_sizes = layer_sizes
        layers = [
            FullyConnectedLayer(size, 'sigmoid', weights=layer_weights, biases=layer_biases)
            for size, layer_weights, layer_biases in zip(layer_sizes[1:], weights, biases)
        ]
        super().__init__(LayerShape(1, layer_sizes[0], 1), layers,
                         random_state=random_state, verbose=verbose)

    @property
    def weights(self):
        return [layer.weights for layer in self.layers]

    @property
    def biases(self):
        return [layer.biases for layer in self.layers]

    def feedforward(self, input_data):
        """Output column vector for an input column vector."""
        return self.predict(input_data)

    def __repr__(self):
        return f"FeedforwardNetwork(layer_sizes={self.layer_sizes})"
