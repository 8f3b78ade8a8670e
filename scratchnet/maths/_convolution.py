"""
Convolution and reshaping helpers operating on Matrix objects.
"""
from typing import Sequence

import numpy as np

from ._matrix import Matrix, MatrixShapeError, VectorShape


def _check_kernel(signal, kernel):
    if kernel.rows % 2 == 0 or kernel.columns % 2 == 0:
        raise MatrixShapeError(
            f"Kernel must have odd dimensions, got {kernel.rows}x{kernel.columns}")
    if kernel.rows > signal.rows or kernel.columns > signal.columns:
        raise MatrixShapeError(
            f"Kernel {kernel.rows}x{kernel.columns} does not fit into "
            f"{signal.rows}x{signal.columns} signal")


def convolute_valid_kernel_only(signal: Matrix, kernel: Matrix) -> Matrix:
    """
    Convolve `signal` with an odd-dimensioned `kernel` without padding.

    The kernel is only applied where it lies completely inside the signal, so
    the result has `signal.rows - kernel.rows + 1` rows and
    `signal.columns - kernel.columns + 1` columns. The kernel is not flipped,
    i.e. this is the cross-correlation used by convolution layers.

    Args:
        signal (Matrix): Input matrix
        kernel (Matrix): Kernel with odd number of rows and columns

    Returns:
        Matrix: Convolution result
    """
    _check_kernel(signal, kernel)
    # patches shape: (out_rows, out_columns, kernel_rows, kernel_columns)
    patches = np.lib.stride_tricks.sliding_window_view(signal.to_numpy(), kernel.shape)
    out_rows, out_columns = patches.shape[:2]
    patches_flat = patches.reshape(out_rows * out_columns, -1)
    output_flat = patches_flat @ kernel.to_numpy().ravel()
    return Matrix.from_numpy(output_flat.reshape(out_rows, out_columns))


def convolute_full_kernel(signal: Matrix, kernel: Matrix) -> Matrix:
    """
    Convolve `signal` with an odd-dimensioned `kernel`, treating values outside
    the signal as zero. The result has the same shape as `signal`.
    """
    if kernel.rows % 2 == 0 or kernel.columns % 2 == 0:
        raise MatrixShapeError(
            f"Kernel must have odd dimensions, got {kernel.rows}x{kernel.columns}")
    padded = signal.zero_padded((kernel.rows - 1) // 2, (kernel.columns - 1) // 2)
    return convolute_valid_kernel_only(padded, kernel)


def flatten(matrices: Sequence[Matrix], shape: VectorShape = VectorShape.COLUMN) -> Matrix:
    """Concatenate the row-major elements of `matrices` into one vector."""
    if not matrices:
        raise MatrixShapeError("Cannot flatten an empty list of matrices")
    values = np.concatenate([matrix.to_numpy().ravel() for matrix in matrices])
    return Matrix.vector(values, shape)
