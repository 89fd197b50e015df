"""Internal type menu card."""
from __future__ import annotations

import ctypes
from abc import ABC, abstractmethod

import numpy as np
from llvmlite.ir import types as ir_types
from llvmlite.ir.types import Type


class DataType(ABC):
    """Generic data-type class."""

    @property
    @abstractmethod
    def llvm(self) -> Type:
        """Get corresponding LLVM type.

        Returns:
            Type: LLVMLite IR type.
        """

    @property
    @abstractmethod
    def numpy(self) -> np.dtype:
        """Get corresponding NumPy type.

        Returns:
            np.dtype: NumPy data-type.
        """

    @property
    @abstractmethod
    def ctype(self) -> type:
        """Get corresponding ctypes scalar type.

        Returns:
            type: ctypes simple type used for buffer storage.
        """


class Float64(DataType):
    llvm = ir_types.DoubleType()
    numpy = np.float64
    ctype = ctypes.c_double


class Index(DataType):
    llvm = ir_types.IntType(64)
    numpy = np.int64
    ctype = ctypes.c_int64
