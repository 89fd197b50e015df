"""Dense, row-major matrices of doubles with an in-place transpose."""
from . import compiler, linalg, transpose
from .errors import (
    AliasingError,
    InvalidRangeError,
    MatrixError,
    OutOfBoundsError,
    ReleasedMatrixError,
    ShapeMismatchError,
)
from .linalg import matmul, matmul_into
from .matrix import Matrix
from .transpose import TransposeStrategy, select_strategy

__all__ = [
    "compiler",
    "linalg",
    "transpose",
    "Matrix",
    "matmul",
    "matmul_into",
    "TransposeStrategy",
    "select_strategy",
    "MatrixError",
    "ShapeMismatchError",
    "OutOfBoundsError",
    "InvalidRangeError",
    "ReleasedMatrixError",
    "AliasingError",
]
