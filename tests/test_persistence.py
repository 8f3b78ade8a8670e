"""
test_persistence.py
~~~~~~~~~~~~~~~~~~~

Tests for saving and loading networks as JSON.
"""

import json
import os

import pytest

from scratchnet.maths import Matrix
from scratchnet.neural_networks import (
    FeedforwardNetwork,
    FullyConnectedLayer,
    InvalidNetworkData,
    NetworkFileNotFoundError,
    NetworkIOError,
    NeuralNetwork,
    load_network,
    save_network
)


@pytest.fixture
def network():
    return FeedforwardNetwork([3, 4, 2], random_state=0)


@pytest.fixture
def network_file(tmp_path, network):
    path = str(tmp_path / "network.json")
    save_network(network, path)
    return path


def _rewrite(path, **changes):
    with open(path, encoding='utf-8') as file:
        document = json.load(file)
    document.update(changes)
    with open(path, 'w', encoding='utf-8') as file:
        json.dump(document, file)


@pytest.mark.unit
class TestSaveAndLoad:
    """Test round trips through a JSON file."""

    def test_round_trip_is_exact(self, network, network_file):
        restored = load_network(network_file)
        assert restored.layer_sizes == [3, 4, 2]
        assert restored.weights == network.weights
        assert restored.biases == network.biases

        input_data = Matrix.vector([0.3, -1.2, 0.7])
        assert restored.predict(input_data) == network.predict(input_data)

    def test_document_layout(self, network_file):
        with open(network_file, encoding='utf-8') as file:
            document = json.load(file)
        assert set(document) == {'layer_sizes', 'weights', 'biases'}
        assert document['weights'][0]['rows'] == 4
        assert document['weights'][0]['columns'] == 3
        assert len(document['biases'][1]['elements']) == 2

    def test_save_creates_directories(self, tmp_path, network):
        path = str(tmp_path / "nested" / "models" / "network.json")
        save_network(network, path)
        assert os.path.exists(path)

    def test_only_feedforward_networks_can_be_saved(self, tmp_path):
        network = NeuralNetwork((1, 2, 1), [FullyConnectedLayer(1)], random_state=0)
        with pytest.raises(TypeError):
            save_network(network, str(tmp_path / "network.json"))


@pytest.mark.unit
class TestLoadErrors:
    """Test errors raised for missing or malformed files."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(NetworkFileNotFoundError) as exc_info:
            load_network(str(tmp_path / "missing.json"))
        assert isinstance(exc_info.value, NetworkIOError)

    def test_file_not_utf8(self, tmp_path):
        path = tmp_path / "binary.json"
        path.write_bytes(b"\xff\xfe\x00garbage")
        with pytest.raises(InvalidNetworkData) as exc_info:
            load_network(str(path))
        assert isinstance(exc_info.value, NetworkIOError)
        assert exc_info.value.data_identifier == 'network'

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding='utf-8')
        with pytest.raises(InvalidNetworkData) as exc_info:
            load_network(str(path))
        assert exc_info.value.data_identifier == 'network'

    def test_invalid_layer_sizes(self, network_file):
        _rewrite(network_file, layer_sizes=[3])
        with pytest.raises(InvalidNetworkData) as exc_info:
            load_network(network_file)
        assert exc_info.value.data_identifier == 'layer_sizes'

    def test_missing_biases(self, network_file):
        _rewrite(network_file, biases=[])
        with pytest.raises(InvalidNetworkData) as exc_info:
            load_network(network_file)
        assert exc_info.value.data_identifier == 'biases'

    def test_invalid_matrix_field(self, network_file):
        _rewrite(network_file, weights=[{'rows': 4, 'columns': 3, 'elements': [1.0]},
                                        {'rows': 2, 'columns': 4, 'elements': [0.0] * 8}])
        with pytest.raises(InvalidNetworkData) as exc_info:
            load_network(network_file)
        assert exc_info.value.data_identifier == 'weights[0].elements'

    def test_matrix_shape_not_matching_layer_sizes(self, network_file):
        _rewrite(network_file, weights=[{'rows': 3, 'columns': 4, 'elements': [0.0] * 12},
                                        {'rows': 2, 'columns': 4, 'elements': [0.0] * 8}])
        with pytest.raises(InvalidNetworkData) as exc_info:
            load_network(network_file)
        assert exc_info.value.data_identifier == 'weights[0]'
