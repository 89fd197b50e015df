import numpy as np
import pytest

from rowmajor import AliasingError, Matrix, ShapeMismatchError, matmul, matmul_into

a = Matrix([[1.0, 2.0], [3.0, 4.0]])
b = Matrix([[5.0], [6.0]])


def test_matmul():
    result = matmul(a, b)

    assert result.shape == (2, 1), "Shape is loco."
    assert result.values() == [17.0, 39.0], "Content is not the same."


def test_matmul_operator():
    assert (a @ b).values() == [17.0, 39.0]


def test_matmul_into():
    dest = Matrix.repeated(2, 1, 99.0)
    matmul_into(a, b, dest)

    assert dest.values() == [17.0, 39.0]


def test_matmul_matches_numpy():
    rng = np.random.default_rng(3)
    left = Matrix.uniform(7, 5, -1.0, 1.0, rng)
    right = Matrix.uniform(5, 9, -1.0, 1.0, rng)

    result = matmul(left, right)

    assert result.shape == (7, 9)
    assert np.allclose(result.content, left.content @ right.content)


def test_matmul_accumulates_left_to_right():
    left = Matrix([[1e16, 1.0, -1e16]])
    right = Matrix([[1.0], [1.0], [1.0]])

    # ((0 + 1e16) + 1) - 1e16 loses the 1 to rounding.
    assert matmul(left, right).values() == [0.0]


def test_matmul_shape_mismatch():
    with pytest.raises(ShapeMismatchError):
        matmul(a, Matrix.zeros(3, 3))

    with pytest.raises(ShapeMismatchError):
        b @ b


def test_matmul_into_wrong_destination():
    dest = Matrix.zeros(1, 2)

    with pytest.raises(ShapeMismatchError):
        matmul_into(a, b, dest)

    assert dest.values() == [0.0, 0.0]


def test_matmul_into_rejects_aliasing():
    square = Matrix([[1.0, 2.0], [3.0, 4.0]])

    with pytest.raises(AliasingError):
        matmul_into(square, a, square)


def test_matmul_with_empty_inner_dimension():
    assert matmul(Matrix.zeros(2, 0), Matrix.zeros(0, 3)).values() == [0.0] * 6
