"""
test_matrix.py
~~~~~~~~~~~~~~

Unit tests for the Matrix type.
"""

import numpy as np
import pytest

from scratchnet.maths import InvalidIOData, Matrix, MatrixShapeError, VectorShape


@pytest.fixture
def square():
    """2x2 matrix [[1, 2], [3, 4]]."""
    return Matrix(2, 2, [1, 2, 3, 4])


@pytest.mark.unit
class TestConstruction:
    """Test building matrices."""

    def test_defaults_to_zeros(self):
        matrix = Matrix(2, 3)
        assert matrix.shape == (2, 3)
        assert matrix.elements == [0.0] * 6

    def test_wrong_value_count_raises(self):
        with pytest.raises(MatrixShapeError):
            Matrix(2, 2, [1, 2, 3])

    def test_sequence_is_row_major(self):
        matrix = Matrix.sequence(2, 3)
        assert matrix[0, 2] == 3.0
        assert matrix[1, 0] == 4.0

    def test_vector_shapes(self):
        column = Matrix.vector([1, 2, 3])
        row = Matrix.vector([1, 2, 3], VectorShape.ROW)
        assert column.shape == (3, 1)
        assert row.shape == (1, 3)
        assert column.transpose() == row

    def test_versor(self):
        assert Matrix.versor(1, 3).elements == [0.0, 1.0, 0.0]
        with pytest.raises(IndexError):
            Matrix.versor(3, 3)

    def test_from_numpy_copies(self):
        array = np.ones((2, 2))
        matrix = Matrix.from_numpy(array)
        array[0, 0] = 5.0
        assert matrix[0, 0] == 1.0

    def test_mirror_shape_of(self, square):
        assert Matrix.mirror_shape_of(square, 7.0) == Matrix.filled(2, 2, 7.0)


@pytest.mark.unit
class TestArithmetic:
    """Test operators and products."""

    def test_transpose_twice_is_identity(self):
        matrix = Matrix.sequence(2, 3)
        assert matrix.transpose().transpose() == matrix

    def test_product_with_identity(self):
        matrix = Matrix.sequence(3, 2)
        assert matrix @ Matrix.identity(2) == matrix
        assert matrix.multiply(Matrix.identity(2)) == matrix

    def test_product_values(self, square):
        assert (square @ square).elements == [7.0, 10.0, 15.0, 22.0]

    def test_product_mismatch_raises(self):
        with pytest.raises(MatrixShapeError):
            Matrix(2, 3) @ Matrix(2, 3)

    def test_addition_mismatch_raises(self):
        with pytest.raises(MatrixShapeError):
            Matrix(2, 3) + Matrix(3, 2)

    def test_hadamard_and_scalar_operations(self, square):
        assert (square * square).elements == [1.0, 4.0, 9.0, 16.0]
        assert (2 * square).elements == [2.0, 4.0, 6.0, 8.0]
        assert (square / 2).elements == [0.5, 1.0, 1.5, 2.0]
        assert (1 - square).elements == [0.0, -1.0, -2.0, -3.0]
        assert (-square + square) == Matrix(2, 2)

    def test_operators_do_not_mutate(self, square):
        _ = square + square
        _ = square * 3
        assert square.elements == [1.0, 2.0, 3.0, 4.0]

    def test_sum(self, square):
        assert square.sum() == 10.0


@pytest.mark.unit
class TestAccess:
    """Test subscripts, maxima and reshaping."""

    def test_out_of_range_subscript_raises(self, square):
        with pytest.raises(IndexError):
            _ = square[2, 0]
        with pytest.raises(IndexError):
            square[0, -1] = 1.0

    def test_max_returns_first_of_ties(self):
        matrix = Matrix(2, 2, [1, 3, 3, 0])
        assert matrix.max_value_and_index() == (3.0, 0, 1)

    def test_max_of_region_is_region_relative(self):
        matrix = Matrix.sequence(4, 4)
        assert matrix.max_value_and_index_of_region(2, 2, 2, 2) == (16.0, 1, 1)

    def test_max_of_region_out_of_bounds_raises(self):
        with pytest.raises(MatrixShapeError):
            Matrix.sequence(4, 4).max_value_and_index_of_region(3, 3, 2, 2)

    def test_submatrix(self):
        matrix = Matrix.sequence(4, 4)
        assert matrix.submatrix(1, 1, 1, 1).elements == [6.0, 7.0, 10.0, 11.0]
        with pytest.raises(MatrixShapeError):
            matrix.submatrix(2, 2, 0, 0)

    def test_zero_padded(self, square):
        padded = square.zero_padded(1, 0)
        assert padded.shape == (4, 2)
        assert padded.elements == [0.0, 0.0, 1.0, 2.0, 3.0, 4.0, 0.0, 0.0]

    def test_split_is_inverse_of_to_vector(self):
        vector = Matrix.sequence(2, 3).to_vector()
        first, second = vector.split(2, 1, 3)
        assert first.elements == [1.0, 2.0, 3.0]
        assert second.elements == [4.0, 5.0, 6.0]
        with pytest.raises(MatrixShapeError):
            vector.split(2, 2, 2)


@pytest.mark.unit
class TestInPlaceOperations:
    """Test reversals and rotations."""

    def test_reverse_rows(self):
        assert Matrix.sequence(2, 3).reverse_rows().elements == [3.0, 2.0, 1.0, 6.0, 5.0, 4.0]

    def test_reverse_columns(self):
        assert Matrix.sequence(2, 3).reverse_columns().elements == [4.0, 5.0, 6.0, 1.0, 2.0, 3.0]

    def test_rotate_90(self, square):
        assert square.copy().rotate_90().elements == [3.0, 1.0, 4.0, 2.0]
        assert square.copy().rotate_90(clockwise=False).elements == [2.0, 4.0, 1.0, 3.0]

    def test_rotate_180_mutates_receiver(self, square):
        square.rotate_180()
        assert square.elements == [4.0, 3.0, 2.0, 1.0]

    def test_copy_is_independent(self, square):
        copy = square.copy()
        copy.rotate_180()
        assert square.elements == [1.0, 2.0, 3.0, 4.0]


@pytest.mark.unit
class TestIORepresentation:
    """Test conversion to and from the storage representation."""

    def test_round_trip(self):
        matrix = Matrix(2, 2, [0.1, -2.5, 1e-300, 3.0])
        assert Matrix.from_io_representation(matrix.to_io_representation()) == matrix

    @pytest.mark.parametrize("representation, field", [
        ([1, 2], 'matrix'),
        ({'columns': 1, 'elements': [1.0]}, 'rows'),
        ({'rows': 1, 'columns': 'a', 'elements': [1.0]}, 'columns'),
        ({'rows': 2, 'columns': 2, 'elements': [1.0, 2.0, 3.0]}, 'elements'),
    ])
    def test_invalid_representation_names_field(self, representation, field):
        with pytest.raises(InvalidIOData) as exc_info:
            Matrix.from_io_representation(representation)
        assert exc_info.value.data_identifier == field
