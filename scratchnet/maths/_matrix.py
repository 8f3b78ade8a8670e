"""
Dense two-dimensional matrix of double precision values.
"""
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

import numpy as np


class MatrixShapeError(ValueError):
    """Raised when the shapes of matrices are incompatible for an operation."""


class InvalidIOData(ValueError):
    """Raised when a stored matrix representation is malformed."""

    def __init__(self, data_identifier: str):
        self.data_identifier = data_identifier
        super().__init__(f"Invalid IO data for field '{data_identifier}'")


class VectorShape(Enum):
    """Orientation of a vector."""
    COLUMN = "column"
    ROW = "row"


class Matrix:
    """
    Matrix with `rows` x `columns` elements stored in row-major order.

    Arithmetic operators return new matrices. The only operations mutating a
    matrix are subscript assignment and the in-place reversals and rotations.
    """

    __slots__ = ("_data",)

    # numpy scalars on the left of an operator defer to Matrix
    __array_ufunc__ = None

    def __init__(self, rows: int, columns: int, values: Optional[Sequence[float]] = None):
        """
        Initialize a matrix of the given shape.

        Args:
            rows (int): Number of rows
            columns (int): Number of columns
            values (sequence of float, optional): Row-major elements; must contain
                exactly rows * columns values. Defaults to all zeros.
        """
        if rows < 0 or columns < 0:
            raise MatrixShapeError(f"Invalid matrix shape {rows}x{columns}")
        if values is None:
            self._data = np.zeros((rows, columns), dtype=np.float64)
        else:
            data = np.array(values, dtype=np.float64).ravel()
            if data.size != rows * columns:
                raise MatrixShapeError(
                    f"Cannot build a {rows}x{columns} matrix from {data.size} values")
            self._data = data.reshape(rows, columns)

    # Constructors

    @classmethod
    def from_numpy(cls, array: np.ndarray) -> "Matrix":
        """Wrap a copy of a 2D numpy array (1D arrays become column vectors)."""
        array = np.asarray(array, dtype=np.float64)
        if array.ndim == 1:
            array = array.reshape(-1, 1)
        if array.ndim != 2:
            raise MatrixShapeError(f"Matrix requires a 2D array, got {array.ndim}D")
        matrix = cls.__new__(cls)
        matrix._data = array.copy()
        return matrix

    @classmethod
    def filled(cls, rows: int, columns: int, value: float) -> "Matrix":
        return cls.from_numpy(np.full((rows, columns), value, dtype=np.float64))

    @classmethod
    def sequence(cls, rows: int, columns: int) -> "Matrix":
        """Matrix holding 1.0, 2.0, 3.0, ... in row-major order."""
        return cls(rows, columns, np.arange(1, rows * columns + 1, dtype=np.float64))

    @classmethod
    def identity(cls, size: int) -> "Matrix":
        return cls.from_numpy(np.eye(size))

    @classmethod
    def mirror_shape_of(cls, shape_model: "Matrix", value: float = 0.0) -> "Matrix":
        """Matrix with the shape of `shape_model` and every element set to `value`."""
        return cls.filled(shape_model.rows, shape_model.columns, value)

    @classmethod
    def vector(cls, values: Sequence[float],
               shape: VectorShape = VectorShape.COLUMN) -> "Matrix":
        values = np.asarray(values, dtype=np.float64).ravel()
        if shape is VectorShape.COLUMN:
            return cls(values.size, 1, values)
        return cls(1, values.size, values)

    @classmethod
    def versor(cls, component: int, count: int,
               shape: VectorShape = VectorShape.COLUMN) -> "Matrix":
        """Vector of `count` zeros except for a 1.0 at `component` (one-hot)."""
        if not 0 <= component < count:
            raise IndexError(f"Versor component {component} out of range for {count} elements")
        values = np.zeros(count, dtype=np.float64)
        values[component] = 1.0
        return cls.vector(values, shape)

    # Shape and element access

    @property
    def rows(self) -> int:
        return self._data.shape[0]

    @property
    def columns(self) -> int:
        return self._data.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self._data.shape

    @property
    def elements(self) -> List[float]:
        """Row-major copy of the elements."""
        return self._data.ravel().tolist()

    def to_numpy(self) -> np.ndarray:
        """Copy of the elements as a 2D numpy array."""
        return self._data.copy()

    def _check_index(self, index):
        if not isinstance(index, tuple) or len(index) != 2:
            raise IndexError("Matrix subscripts require a (row, column) pair")
        row, column = index
        if not (0 <= row < self.rows and 0 <= column < self.columns):
            raise IndexError(
                f"Index ({row}, {column}) out of range for {self.rows}x{self.columns} matrix")
        return row, column

    def __getitem__(self, index) -> float:
        row, column = self._check_index(index)
        return float(self._data[row, column])

    def __setitem__(self, index, value: float):
        row, column = self._check_index(index)
        self._data[row, column] = value

    def _check_same_shape(self, other: "Matrix", operation: str):
        if self.shape != other.shape:
            raise MatrixShapeError(
                f"Trying to {operation} matrices of different sizes "
                f"({self.rows}x{self.columns} and {other.rows}x{other.columns})")

    # Arithmetic

    def __add__(self, other):
        if isinstance(other, Matrix):
            self._check_same_shape(other, "add")
            return Matrix.from_numpy(self._data + other._data)
        return Matrix.from_numpy(self._data + float(other))

    def __radd__(self, other):
        return self.__add__(other)

    def __sub__(self, other):
        if isinstance(other, Matrix):
            self._check_same_shape(other, "subtract")
            return Matrix.from_numpy(self._data - other._data)
        return Matrix.from_numpy(self._data - float(other))

    def __rsub__(self, other):
        return Matrix.from_numpy(float(other) - self._data)

    def __neg__(self):
        return Matrix.from_numpy(-self._data)

    def __mul__(self, other):
        """Scalar multiplication, or Hadamard product when `other` is a Matrix."""
        if isinstance(other, Matrix):
            return self.hadamard(other)
        return Matrix.from_numpy(self._data * float(other))

    def __rmul__(self, other):
        return self.__mul__(other)

    def __truediv__(self, other):
        if isinstance(other, Matrix):
            return NotImplemented
        return Matrix.from_numpy(self._data / float(other))

    def __rtruediv__(self, other):
        """Divide a scalar by every element."""
        return Matrix.from_numpy(float(other) / self._data)

    def __matmul__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.multiply(other)

    def hadamard(self, other: "Matrix") -> "Matrix":
        """Element-wise product of two matrices of the same size."""
        self._check_same_shape(other, "calculate the Hadamard product of")
        return Matrix.from_numpy(self._data * other._data)

    def multiply(self, other: "Matrix") -> "Matrix":
        """Matrix product self x other."""
        if self.columns != other.rows:
            raise MatrixShapeError(
                f"The left matrix' number of columns ({self.columns}) does not match "
                f"the right matrix' number of rows ({other.rows})")
        return Matrix.from_numpy(self._data @ other._data)

    def __eq__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    __hash__ = None

    # Mathematical operations

    def copy(self) -> "Matrix":
        return Matrix.from_numpy(self._data)

    def transpose(self) -> "Matrix":
        return Matrix.from_numpy(self._data.T)

    def exp(self) -> "Matrix":
        """Element-wise exponential."""
        return Matrix.from_numpy(np.exp(self._data))

    def sum(self) -> float:
        return float(np.sum(self._data))

    def apply(self, func: Callable[[np.ndarray], np.ndarray]) -> "Matrix":
        """Map `func` (a vectorised function on arrays) over every element."""
        return Matrix.from_numpy(func(self._data))

    def max_value_and_index(self) -> Tuple[float, int, int]:
        """
        Maximum element and its position.

        Returns:
            tuple: (value, row, column) of the first maximum in row-major order
        """
        flat_index = int(np.argmax(self._data))
        row, column = divmod(flat_index, self.columns)
        return float(self._data[row, column]), row, column

    def max_value_and_index_of_region(self, row_start: int, column_start: int,
                                      rows: int, columns: int) -> Tuple[float, int, int]:
        """
        Maximum of the region starting at (row_start, column_start).

        Returns:
            tuple: (value, row, column) with row and column relative to the region
        """
        if (row_start < 0 or column_start < 0 or rows <= 0 or columns <= 0
                or row_start + rows > self.rows or column_start + columns > self.columns):
            raise MatrixShapeError(
                f"Region {rows}x{columns} at ({row_start}, {column_start}) exceeds "
                f"{self.rows}x{self.columns} matrix")
        region = self._data[row_start:row_start + rows, column_start:column_start + columns]
        row, column = divmod(int(np.argmax(region)), columns)
        return float(region[row, column]), row, column

    def submatrix(self, top: int, bottom: int, left: int, right: int) -> "Matrix":
        """Interior of the matrix after cutting borders of the given widths."""
        rows = self.rows - top - bottom
        columns = self.columns - left - right
        if min(top, bottom, left, right) < 0 or rows <= 0 or columns <= 0:
            raise MatrixShapeError(
                f"Cannot cut borders ({top}, {bottom}, {left}, {right}) "
                f"from a {self.rows}x{self.columns} matrix")
        return Matrix.from_numpy(self._data[top:top + rows, left:left + columns])

    def zero_padded(self, vertical: int, horizontal: int) -> "Matrix":
        """Copy surrounded by `vertical` zero rows and `horizontal` zero columns on each side."""
        return Matrix.from_numpy(np.pad(self._data, ((vertical, vertical), (horizontal, horizontal)),
                                        mode='constant'))

    def to_vector(self, shape: VectorShape = VectorShape.COLUMN) -> "Matrix":
        """Row-major elements as a column or row vector."""
        return Matrix.vector(self._data.ravel(), shape)

    def split(self, features: int, rows: int, columns: int) -> List["Matrix"]:
        """Cut the row-major elements into `features` matrices of rows x columns."""
        if features * rows * columns != self._data.size:
            raise MatrixShapeError(
                f"Cannot split {self._data.size} elements into {features}x{rows}x{columns}")
        chunks = self._data.reshape(features, rows, columns)
        return [Matrix.from_numpy(chunk) for chunk in chunks]

    # In-place operations

    def reverse_rows(self) -> "Matrix":
        """Reverse the order of the elements within each row."""
        self._data = self._data[:, ::-1].copy()
        return self

    def reverse_columns(self) -> "Matrix":
        """Reverse the order of the elements within each column."""
        self._data = self._data[::-1, :].copy()
        return self

    def rotate_90(self, clockwise: bool = True) -> "Matrix":
        self._data = self._data.T.copy()
        if clockwise:
            return self.reverse_rows()
        return self.reverse_columns()

    def rotate_180(self) -> "Matrix":
        return self.reverse_rows().reverse_columns()

    # Storage

    def to_io_representation(self) -> dict:
        return {
            'rows': self.rows,
            'columns': self.columns,
            'elements': self.elements,
        }

    @classmethod
    def from_io_representation(cls, representation: Mapping[str, Any]) -> "Matrix":
        """
        Rebuild a matrix from its (rows, columns, elements) representation.

        Raises:
            InvalidIOData: naming the first missing or malformed field
        """
        if not isinstance(representation, Mapping):
            raise InvalidIOData('matrix')
        rows = representation.get('rows')
        if not isinstance(rows, int) or isinstance(rows, bool) or rows < 0:
            raise InvalidIOData('rows')
        columns = representation.get('columns')
        if not isinstance(columns, int) or isinstance(columns, bool) or columns < 0:
            raise InvalidIOData('columns')
        elements = representation.get('elements')
        if (not isinstance(elements, (list, tuple)) or len(elements) != rows * columns
                or not all(isinstance(e, (int, float)) and not isinstance(e, bool)
                           for e in elements)):
            raise InvalidIOData('elements')
        return cls(rows, columns, elements)

    # Representation

    def __repr__(self):
        return f"Matrix(rows={self.rows}, columns={self.columns}, values={self.elements})"

    def __str__(self):
        lines = []
        for row_index in range(self.rows):
            contents = "\t".join(str(value) for value in self._data[row_index])
            if self.rows == 1:
                lines.append(f"(\t{contents}\t)")
            elif row_index == 0:
                lines.append(f"⎛\t{contents}\t⎞")
            elif row_index == self.rows - 1:
                lines.append(f"⎝\t{contents}\t⎠")
            else:
                lines.append(f"⎜\t{contents}\t⎥")
        return "\n".join(lines)
