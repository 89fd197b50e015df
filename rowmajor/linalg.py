"""Matrix multiplication."""
from __future__ import annotations

from rowmajor.compiler import compiler
from rowmajor.errors import AliasingError, ShapeMismatchError
from rowmajor.matrix import Matrix


def matmul_into(a: Matrix, b: Matrix, dest: Matrix) -> None:
    """Write ``a @ b`` into `dest`, which must already be ``a.height x b.width``.

    Each cell is accumulated left to right over the shared dimension, starting
    from 0.0, so results are bit-for-bit reproducible.
    """
    if a.width != b.height:
        raise ShapeMismatchError(f"Cannot multiply {a.shape} by {b.shape}.")

    if dest.shape != (a.height, b.width):
        raise ShapeMismatchError(
            f"Destination {dest.shape} does not fit the product {(a.height, b.width)}."
        )

    if dest is a or dest is b:
        raise AliasingError("The destination of a matmul cannot be one of its operands.")

    compiler.matmul_kernel()(
        a._buffer.values,
        b._buffer.values,
        dest._buffer.values,
        a.height,
        a.width,
        b.width,
    )


def matmul(a: Matrix, b: Matrix) -> Matrix:
    if a.width != b.height:
        raise ShapeMismatchError(f"Cannot multiply {a.shape} by {b.shape}.")

    output: Matrix = Matrix.empty(a.height, b.width)
    matmul_into(a, b, output)

    return output
