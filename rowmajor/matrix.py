"""A module for the dense, row-major matrix."""
from __future__ import annotations

import ctypes
import numbers
import sys
from typing import Callable, Iterable, Optional, TextIO

import numpy as np

from rowmajor.compiler import compiler
from rowmajor.compiler.buffer import DoubleBuffer
from rowmajor.compiler.types import Float64
from rowmajor.errors import InvalidRangeError, OutOfBoundsError, ShapeMismatchError
from rowmajor.transpose import transpose_in_place


class Matrix:
    """A matrix of doubles owning a flat, row-major buffer.

    Cell ``(row, col)`` lives at ``row * width + col``. Copies are always deep,
    and once `release` has been called every access to the cells raises
    `ReleasedMatrixError`.
    """

    def __init__(self, content: Iterable) -> None:
        content = (
            content
            if isinstance(content, np.ndarray)
            else np.asarray(content, Float64.numpy)
        )

        if content.ndim != 2:
            raise ShapeMismatchError(f"A matrix needs 2-D content, got shape {content.shape}.")

        self._height, self._width = content.shape
        self._buffer = DoubleBuffer.from_content(content)

    @classmethod
    def _allocate(cls, height: int, width: int, buffer: Optional[DoubleBuffer] = None) -> Matrix:
        if not isinstance(height, numbers.Integral) or not isinstance(width, numbers.Integral):
            raise ShapeMismatchError(f"Dimensions must be integers, got {height!r}x{width!r}.")

        if height < 0 or width < 0:
            raise ShapeMismatchError(f"Dimensions must be non-negative, got {height}x{width}.")

        out = cls.__new__(cls)
        out._height, out._width = height, width
        out._buffer = buffer if buffer is not None else DoubleBuffer(height * width)

        return out

    @classmethod
    def empty(cls, height: int, width: int) -> Matrix:
        """Allocate without promising anything about the contents."""
        return cls._allocate(height, width)

    @classmethod
    def zeros(cls, height: int, width: int) -> Matrix:
        out = cls._allocate(height, width)
        out.fill_scalar(0.0)

        return out

    @classmethod
    def repeated(cls, height: int, width: int, x: float) -> Matrix:
        out = cls._allocate(height, width)
        out.fill_scalar(x)

        return out

    @classmethod
    def ones(cls, height: int, width: int) -> Matrix:
        return cls.repeated(height, width, 1.0)

    @classmethod
    def uniform(
        cls,
        height: int,
        width: int,
        a: float,
        b: float,
        rng: Optional[np.random.Generator] = None,
    ) -> Matrix:
        out = cls._allocate(height, width)
        out.fill_uniform(a, b, rng)

        return out

    @classmethod
    def eye(cls, size: int) -> Matrix:
        out = cls.zeros(size, size)

        for i in range(size):
            out.set(i, i, 1.0)

        return out

    @classmethod
    def adopt(cls, values: ctypes.Array, height: int, width: int) -> Matrix:
        """Take ownership of a pre-sized ctypes ``c_double`` array.

        The caller must not touch `values` afterwards, the matrix owns it.
        """
        if len(values) != height * width:
            raise ShapeMismatchError(
                f"Buffer of {len(values)} values cannot hold a {height}x{width} matrix."
            )

        return cls._allocate(height, width, DoubleBuffer.adopt(values))

    @property
    def height(self) -> int:
        return self._height

    @property
    def width(self) -> int:
        return self._width

    @property
    def shape(self) -> tuple[int, int]:
        return self._height, self._width

    def __len__(self) -> int:
        return self._height * self._width

    def _offset(self, row: int, col: int) -> int:
        if not 0 <= row < self._height or not 0 <= col < self._width:
            raise OutOfBoundsError(f"Cell ({row}, {col}) is outside a {self._height}x{self._width} matrix.")

        return row * self._width + col

    def get(self, row: int, col: int) -> float:
        values = self._buffer.values
        return values[self._offset(row, col)]

    def set(self, row: int, col: int, value: float) -> None:
        values = self._buffer.values
        values[self._offset(row, col)] = value

    def __getitem__(self, key: tuple[int, int]) -> float:
        row, col = key
        return self.get(row, col)

    def __setitem__(self, key: tuple[int, int], value: float) -> None:
        row, col = key
        self.set(row, col, value)

    def copy(self) -> Matrix:
        return Matrix._allocate(self._height, self._width, self._buffer.copy())

    def __copy__(self) -> Matrix:
        return self.copy()

    def __deepcopy__(self, memo: dict) -> Matrix:
        return self.copy()

    @property
    def content(self) -> np.ndarray:
        return self._buffer.to_numpy().reshape(self.shape)

    def values(self) -> list[float]:
        return list(self._buffer.values)

    def fill_scalar(self, value: float) -> None:
        np.ctypeslib.as_array(self._buffer.values)[:] = value

    def fill_uniform(self, a: float, b: float, rng: Optional[np.random.Generator] = None) -> None:
        if not a < b:
            raise InvalidRangeError(f"Uniform range needs a < b, got [{a}, {b}).")

        values = self._buffer.values
        rng = rng if rng is not None else np.random.default_rng()

        # Cells stay inside [a, b) for huge and one-ulp ranges alike.
        u = rng.random(len(values))
        np.ctypeslib.as_array(values)[:] = np.clip(a * (1.0 - u) + b * u, a, np.nextafter(b, a))

    def _elementwise(self, other: Matrix, op: str) -> None:
        if self.shape != other.shape:
            raise ShapeMismatchError(f"Cannot combine {self.shape} with {other.shape} elementwise.")

        values = self._buffer.values
        compiler.elementwise_kernel(op)(values, other._buffer.values, len(values))

    def _scalar(self, x: float, op: str) -> None:
        values = self._buffer.values
        compiler.scalar_kernel(op)(values, float(x), len(values))

    def add(self, other: Matrix) -> None:
        self._elementwise(other, "+")

    def sub(self, other: Matrix) -> None:
        self._elementwise(other, "-")

    def add_scalar(self, x: float) -> None:
        self._scalar(x, "+")

    def sub_scalar(self, x: float) -> None:
        self._scalar(x, "-")

    def mul_scalar(self, x: float) -> None:
        self._scalar(x, "*")

    def pow_scalar(self, x: float) -> None:
        self._scalar(x, "**")

    def map(self, func: Callable[[float], float]) -> None:
        values = self._buffer.values

        for i in range(len(values)):
            values[i] = func(values[i])

    def transpose(self) -> None:
        """Transpose in place, swapping height and width."""
        transpose_in_place(self._buffer.values, self._height, self._width)
        self._height, self._width = self._width, self._height

    @property
    def T(self) -> Matrix:
        out = self.copy()
        out.transpose()

        return out

    def __matmul__(self, other: Matrix) -> Matrix:
        from rowmajor.linalg import matmul

        return matmul(self, other)

    def print(self, sink: Optional[TextIO] = None) -> None:
        """Dump one row per line, cells separated by a single space."""
        sink = sink if sink is not None else sys.stdout
        values = self._buffer.values

        for row in range(self._height):
            start = row * self._width
            sink.write(" ".join(f"{x:f}" for x in values[start:start + self._width]) + "\n")

    @property
    def released(self) -> bool:
        return self._buffer.released

    def release(self) -> None:
        self._buffer.release()

    def __enter__(self) -> Matrix:
        return self

    def __exit__(self, *exc_info) -> None:
        if not self.released:
            self.release()

    def __repr__(self) -> str:
        return f"Matrix<{self.shape}>"


def _build_inplace_op(elementwise: Optional[str], scalar: str):
    def inplace(self, other):
        if isinstance(other, Matrix):
            if elementwise is None:
                return NotImplemented
            getattr(self, elementwise)(other)
        elif isinstance(other, numbers.Real):
            getattr(self, scalar)(other)
        else:
            return NotImplemented

        return self

    return inplace


for name, (elementwise, scalar) in {
    "add": ("add", "add_scalar"),
    "sub": ("sub", "sub_scalar"),
    "mul": (None, "mul_scalar"),
    "pow": (None, "pow_scalar"),
}.items():
    setattr(Matrix, f"__i{name}__", _build_inplace_op(elementwise, scalar))
