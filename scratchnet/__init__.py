"""
Neural networks from scratch: matrices, fully-connected, convolution and
max-pooling layers trained with mini-batch stochastic gradient descent.
"""
from .maths import Matrix, MatrixShapeError, VectorShape
from .neural_networks import (
    LayerShape,
    FullyConnectedLayer,
    ConvolutionLayer,
    MaxPoolingLayer,
    NeuralNetwork,
    FeedforwardNetwork,
    save_network,
    load_network
)

__version__ = "0.1.0"

__all__ = [
    'Matrix',
    'MatrixShapeError',
    'VectorShape',
    'LayerShape',
    'FullyConnectedLayer',
    'ConvolutionLayer',
    'MaxPoolingLayer',
    'NeuralNetwork',
    'FeedforwardNetwork',
    'save_network',
    'load_network'
]
