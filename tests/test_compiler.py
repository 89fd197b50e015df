import ctypes

from rowmajor.compiler import compiler
from rowmajor.compiler.buffer import DoubleBuffer


def doubles(*values):
    return (ctypes.c_double * len(values))(*values)


def test_elementwise_kernel():
    target, other = doubles(1.0, 2.0, 3.0), doubles(0.5, 0.5, 0.5)
    compiler.elementwise_kernel("-")(target, other, 3)

    assert list(target) == [0.5, 1.5, 2.5]


def test_kernels_are_cached():
    assert compiler.elementwise_kernel("+") is compiler.elementwise_kernel("+")
    assert compiler.scalar_kernel("*") is compiler.scalar_kernel("*")


def test_scalar_kernel_respects_length():
    target = doubles(1.0, 2.0, 3.0)
    compiler.scalar_kernel("*")(target, 10.0, 2)

    assert list(target) == [10.0, 20.0, 3.0]


def test_zero_length_kernel_is_a_noop():
    target = doubles(4.0)
    compiler.scalar_kernel("**")(target, 2.0, 0)

    assert list(target) == [4.0]


def test_matmul_kernel():
    dest = doubles(0.0, 0.0)
    compiler.matmul_kernel()(doubles(1.0, 2.0, 3.0, 4.0), doubles(5.0, 6.0), dest, 2, 2, 1)

    assert list(dest) == [17.0, 39.0]


def test_buffer_copy_is_independent():
    buffer = DoubleBuffer.from_content([[1.0, 2.0], [3.0, 4.0]])
    duplicate = buffer.copy()
    duplicate.values[0] = -1.0

    assert list(buffer.values) == [1.0, 2.0, 3.0, 4.0]
    assert duplicate.to_numpy().tolist() == [-1.0, 2.0, 3.0, 4.0]
