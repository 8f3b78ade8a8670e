"""
persistence.py
~~~~~~~~~~~~~~

JSON persistence for feedforward networks.

A saved network is a document of the form::

    {
        "layer_sizes": [2, 3, 1],
        "weights": [{"rows": 3, "columns": 2, "elements": [...]}, ...],
        "biases": [{"rows": 3, "columns": 1, "elements": [...]}, ...]
    }
"""

import json
import logging
import os
from typing import Any, Dict

from ..maths import InvalidIOData, Matrix
from ._feedforward import FeedforwardNetwork

# Configure module logger
logger = logging.getLogger(__name__)


class NetworkIOError(Exception):
    """Base class for errors raised while saving or loading a network."""


class NetworkFileNotFoundError(NetworkIOError):
    """The network file does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Network file not found: {path}")


class InvalidNetworkData(NetworkIOError):
    """The network document is malformed; `data_identifier` names the field."""

    def __init__(self, data_identifier: str):
        self.data_identifier = data_identifier
        super().__init__(f"Invalid network data for field '{data_identifier}'")


def network_to_dict(network: FeedforwardNetwork) -> Dict[str, Any]:
    """
    Convert a network into its JSON-serializable representation.

    Args:
        network: Network to convert

    Returns:
        Dict with layer sizes, weights and biases
    """
    if not isinstance(network, FeedforwardNetwork):
        raise TypeError(f"Only FeedforwardNetwork can be saved, got {type(network).__name__}")
    return {
        'layer_sizes': list(network.layer_sizes),
        'weights': [weights.to_io_representation() for weights in network.weights],
        'biases': [biases.to_io_representation() for biases in network.biases],
    }


def _matrices_from_list(data: Dict[str, Any], field: str, expected_shapes):
    entries = data.get(field)
    if not isinstance(entries, list) or len(entries) != len(expected_shapes):
        raise InvalidNetworkData(field)

    matrices = []
    for index, (entry, expected_shape) in enumerate(zip(entries, expected_shapes)):
        try:
            matrix = Matrix.from_io_representation(entry)
        except InvalidIOData as exc:
            raise InvalidNetworkData(f"{field}[{index}].{exc.data_identifier}") from exc
        if matrix.shape != expected_shape:
            raise InvalidNetworkData(f"{field}[{index}]")
        matrices.append(matrix)
    return matrices


def network_from_dict(data: Dict[str, Any]) -> FeedforwardNetwork:
    """
    Rebuild a network from its JSON representation.

    Args:
        data: Dict as produced by network_to_dict

    Returns:
        FeedforwardNetwork: Network with the stored parameters

    Raises:
        InvalidNetworkData: If a field is missing or malformed
    """
    if not isinstance(data, dict):
        raise InvalidNetworkData('network')

    layer_sizes = data.get('layer_sizes')
    if (not isinstance(layer_sizes, list) or len(layer_sizes) < 2
            or any(isinstance(size, bool) or not isinstance(size, int) or size < 1
                   for size in layer_sizes)):
        raise InvalidNetworkData('layer_sizes')

    weight_shapes = [(outputs, inputs) for inputs, outputs in zip(layer_sizes, layer_sizes[1:])]
    bias_shapes = [(outputs, 1) for outputs in layer_sizes[1:]]
    weights = _matrices_from_list(data, 'weights', weight_shapes)
    biases = _matrices_from_list(data, 'biases', bias_shapes)

    return FeedforwardNetwork(layer_sizes, weights=weights, biases=biases)


def save_network(network: FeedforwardNetwork, path: str) -> None:
    """
    Save a network as JSON, creating missing parent directories.

    Args:
        network: Network to save
        path: Destination file path
    """
    document = network_to_dict(network)
    directory = os.path.dirname(path)
    if directory and not os.path.exists(directory):
        os.makedirs(directory)

    with open(path, 'w', encoding='utf-8') as file:
        json.dump(document, file)
    logger.info("Saved network with layer sizes %s to %s", network.layer_sizes, path)


def load_network(path: str) -> FeedforwardNetwork:
    """
    Load a network saved with save_network.

    Args:
        path: Source file path

    Returns:
        FeedforwardNetwork: The restored network

    Raises:
        NetworkFileNotFoundError: If the file does not exist
        InvalidNetworkData: If the file is not a valid network document
    """
    if not os.path.isfile(path):
        logger.error("Network file not found: %s", path)
        raise NetworkFileNotFoundError(path)

    with open(path, 'r', encoding='utf-8') as file:
        try:
            data = json.load(file)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.error("Network file %s is not valid UTF-8 JSON: %s", path, exc)
            raise InvalidNetworkData('network') from exc

    network = network_from_dict(data)
    logger.info("Loaded network with layer sizes %s from %s", network.layer_sizes, path)
    return network
