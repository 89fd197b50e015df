"""Exceptions raised on precondition violations."""


class MatrixError(Exception):
    """Base class for every error raised by rowmajor."""


class ShapeMismatchError(MatrixError, ValueError):
    """Operand dimensions are incompatible for the requested operation."""


class OutOfBoundsError(MatrixError, IndexError):
    """A row or column index lies outside the matrix."""


class InvalidRangeError(MatrixError, ValueError):
    """A uniform fill was requested over an empty or inverted range."""


class ReleasedMatrixError(MatrixError, RuntimeError):
    """The storage of a matrix was used after it has been released."""


class AliasingError(MatrixError, ValueError):
    """A destination matrix is also one of the operands."""
