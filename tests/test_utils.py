"""
test_utils.py
~~~~~~~~~~~~~

Tests for random value generation and sample conversion.
"""

import numpy as np
import pandas as pd
import pytest

from scratchnet.common import normal_random_values, samples_from_frame, versor
from scratchnet.maths import VectorShape


@pytest.fixture
def frame():
    return pd.DataFrame({
        'length': [1.0, 2.0, 4.0],
        'width': [0.5, 1.0, 2.0],
        'species': [0, 2, 1],
    })


@pytest.mark.unit
class TestNormalRandomValues:
    """Test Box-Muller sampling."""

    def test_distribution(self):
        values = normal_random_values(20000, np.random.default_rng(0))
        assert values.shape == (20000,)
        assert np.all(np.isfinite(values))
        assert abs(values.mean()) < 0.05
        assert abs(values.std() - 1.0) < 0.05

    def test_seeded_values_repeat(self):
        first = normal_random_values(5, np.random.default_rng(1))
        second = normal_random_values(5, np.random.default_rng(1))
        assert np.array_equal(first, second)


@pytest.mark.unit
class TestSamples:
    """Test converting tabular data into samples."""

    def test_versor(self):
        assert versor(2, 3).elements == [0.0, 0.0, 1.0]
        assert versor(0, 2, VectorShape.ROW).shape == (1, 2)

    def test_samples_from_dataframe(self, frame):
        samples = samples_from_frame(frame, label_column='species')
        assert len(samples) == 3
        input_data, desired_output = samples[1]
        assert input_data.elements == [2.0, 1.0]
        assert desired_output.elements == [0.0, 0.0, 1.0]

    def test_samples_from_array_with_scale(self, frame):
        samples = samples_from_frame(frame.to_numpy(), n_classes=4, scale=[4.0, 2.0])
        input_data, desired_output = samples[2]
        assert input_data.elements == [1.0, 1.0]
        assert desired_output.shape == (4, 1)
        assert desired_output.elements[1] == 1.0

    def test_unsupported_type_raises(self):
        with pytest.raises(TypeError):
            samples_from_frame([[1.0, 0]])
