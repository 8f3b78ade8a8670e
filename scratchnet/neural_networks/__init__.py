"""
Neural network layers, networks and persistence.
"""
from .activations import (
    Activation,
    Sigmoid,
    Rectifier,
    get_activation
)
from .layers import (
    LayerShape,
    Layer,
    FullyConnectedLayer,
    ConvolutionLayer,
    MaxPoolingLayer
)
from ._network import NeuralNetwork
from ._feedforward import FeedforwardNetwork
from .persistence import (
    NetworkIOError,
    NetworkFileNotFoundError,
    InvalidNetworkData,
    save_network,
    load_network
)

__all__ = [
    'Activation',
    'Sigmoid',
    'Rectifier',
    'get_activation',
    'LayerShape',
    'Layer',
    'FullyConnectedLayer',
    'ConvolutionLayer',
    'MaxPoolingLayer',
    'NeuralNetwork',
    'FeedforwardNetwork',
    'NetworkIOError',
    'NetworkFileNotFoundError',
    'InvalidNetworkData',
    'save_network',
    'load_network'
]
