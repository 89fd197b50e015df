"""Owned double buffers and the llvmlite JIT kernels that loop over them."""

from . import buffer, types, compiler

__all__: list[str] = ["buffer", "types", "compiler"]
