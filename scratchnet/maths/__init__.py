"""
Matrix arithmetic and convolution kernels.
"""
from ._matrix import (
    Matrix,
    MatrixShapeError,
    InvalidIOData,
    VectorShape
)
from ._convolution import (
    convolute_valid_kernel_only,
    convolute_full_kernel,
    flatten
)

__all__ = [
    'Matrix',
    'MatrixShapeError',
    'InvalidIOData',
    'VectorShape',
    'convolute_valid_kernel_only',
    'convolute_full_kernel',
    'flatten'
]
