"""A module containing the owned flat buffer of doubles."""
from __future__ import annotations

import ctypes
import logging
import weakref
from typing import Iterable, Optional

import numpy as np

from rowmajor.compiler.types import Float64
from rowmajor.errors import AliasingError, ReleasedMatrixError

logger = logging.getLogger(__name__)

# Addresses of adopted arrays whose owning buffer is still live.
_adopted: set[int] = set()


class DoubleBuffer:
    """Flat ctypes storage with a single owner and a single release."""

    dtype = Float64()

    def __init__(self, length: int) -> None:
        if length < 0:
            raise ValueError(f"Buffer length must be non-negative, got {length}.")

        # ctypes hands out zero-initialised storage.
        self._values: Optional[ctypes.Array] = (self.dtype.ctype * length)()
        self._disown: Optional[weakref.finalize] = None

    @classmethod
    def from_content(cls, content: Iterable) -> DoubleBuffer:
        flat: np.ndarray = np.ascontiguousarray(
            np.asarray(content, dtype=cls.dtype.numpy).reshape(-1)
        )
        out = cls(flat.size)

        ctypes.memmove(out.values, flat.ctypes.data, flat.nbytes)

        return out

    @classmethod
    def adopt(cls, values: ctypes.Array) -> DoubleBuffer:
        """Wrap an existing ctypes array of doubles without copying it."""
        if not isinstance(values, ctypes.Array) or values._type_ is not cls.dtype.ctype:
            raise TypeError("Only ctypes arrays of c_double can be adopted.")

        address = ctypes.addressof(values)
        if address in _adopted:
            raise AliasingError("This array is already owned by another matrix.")

        out = cls.__new__(cls)
        out._values = values

        _adopted.add(address)
        out._disown = weakref.finalize(out, _adopted.discard, address)

        return out

    @property
    def values(self) -> ctypes.Array:
        if self._values is None:
            raise ReleasedMatrixError("Buffer has already been released.")

        return self._values

    @property
    def released(self) -> bool:
        return self._values is None

    def __len__(self) -> int:
        return len(self.values)

    def copy(self) -> DoubleBuffer:
        source = self.values
        out = DoubleBuffer(len(source))

        ctypes.memmove(out.values, source, ctypes.sizeof(source))

        return out

    def release(self) -> None:
        values = self.values
        logger.debug("Releasing buffer of %d doubles", len(values))

        if self._disown is not None:
            self._disown()

        self._values = None

    def to_numpy(self) -> np.ndarray:
        return np.ctypeslib.as_array(self.values).copy()
