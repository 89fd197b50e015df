"""The compiler, turning flat-buffer loops into native kernels."""
from __future__ import annotations

import contextlib
import ctypes
import functools
import logging
from typing import Callable, Iterator

import llvmlite.binding as llvm
from llvmlite import ir

from rowmajor.compiler import ops
from rowmajor.compiler.types import Float64, Index

logger = logging.getLogger(__name__)

KERNEL_NAMES = {"+": "add", "-": "sub", "*": "mul", "**": "pow"}

_double = Float64.llvm
_double_ptr = ir.PointerType(_double)
_index = Index.llvm

_c_double_ptr = ctypes.POINTER(Float64.ctype)


@functools.lru_cache(maxsize=None)
def engine() -> llvm.ExecutionEngine:
    llvm.initialize_native_target()
    llvm.initialize_native_asmprinter()

    target_machine: llvm.TargetMachine = llvm.Target.from_default_triple().create_target_machine()
    logger.debug("Creating MCJIT engine for %s", target_machine.triple)

    return llvm.create_mcjit_compiler(llvm.parse_assembly(""), target_machine)


@contextlib.contextmanager
def counted_loop(builder: ir.IRBuilder, count: ir.Value, name: str) -> Iterator[ir.Value]:
    """Emit `for index in range(count)` around whatever the caller builds."""
    fn: ir.Function = builder.function
    one = ir.Constant(count.type, 1)

    current = builder.block
    builder.position_at_start(fn.entry_basic_block)
    slot = builder.alloca(count.type, name=f"{name}.slot")
    builder.position_at_end(current)

    builder.store(ir.Constant(count.type, 0), slot)

    cond_block = fn.append_basic_block(name=f"{name}.cond")
    body_block = fn.append_basic_block(name=f"{name}.body")
    end_block = fn.append_basic_block(name=f"{name}.end")

    builder.branch(cond_block)

    builder.position_at_end(cond_block)
    index = builder.load(slot, name=name)
    builder.cbranch(builder.icmp_unsigned("<", index, count), body_block, end_block)

    builder.position_at_end(body_block)
    yield index

    builder.store(builder.add(index, one), slot)
    builder.branch(cond_block)

    builder.position_at_end(end_block)


def _entry_slot(builder: ir.IRBuilder, typ: ir.Type, name: str) -> ir.Value:
    current = builder.block
    builder.position_at_start(builder.function.entry_basic_block)
    slot = builder.alloca(typ, name=name)
    builder.position_at_end(current)

    return slot


def _finalize(module: ir.Module, name: str, prototype) -> Callable:
    llvm_module = llvm.parse_assembly(str(module))
    llvm_module.verify()

    jit = engine()
    jit.add_module(llvm_module)
    jit.finalize_object()
    jit.run_static_constructors()

    logger.debug("Compiled kernel %s", name)

    return prototype(jit.get_function_address(name))


def _new_function(name: str, parameter_types: list[ir.Type]) -> tuple[ir.Function, ir.IRBuilder]:
    module: ir.Module = ir.Module(name=name)
    fn = ir.Function(module, ir.FunctionType(ir.VoidType(), parameter_types), name=name)

    builder = ir.IRBuilder(fn.append_basic_block(name="entry"))

    return fn, builder


@functools.lru_cache(maxsize=None)
def elementwise_kernel(op: str) -> Callable:
    """Compile `target[i] = target[i] <op> other[i]` for `i < length`."""
    name = f"elementwise_{KERNEL_NAMES[op]}"
    fn, builder = _new_function(name, [_double_ptr, _double_ptr, _index])
    target, other, length = fn.args

    with counted_loop(builder, length, "i") as i:
        target_ptr = builder.gep(target, [i])
        value = ops.LOOKUP[op](
            builder, builder.load(target_ptr), builder.load(builder.gep(other, [i]))
        )
        builder.store(value, target_ptr)

    builder.ret_void()

    prototype = ctypes.CFUNCTYPE(None, _c_double_ptr, _c_double_ptr, Index.ctype)
    return _finalize(fn.module, name, prototype)


@functools.lru_cache(maxsize=None)
def scalar_kernel(op: str) -> Callable:
    """Compile `target[i] = target[i] <op> scalar` for `i < length`."""
    name = f"scalar_{KERNEL_NAMES[op]}"
    fn, builder = _new_function(name, [_double_ptr, _double, _index])
    target, scalar, length = fn.args

    with counted_loop(builder, length, "i") as i:
        target_ptr = builder.gep(target, [i])
        builder.store(ops.LOOKUP[op](builder, builder.load(target_ptr), scalar), target_ptr)

    builder.ret_void()

    prototype = ctypes.CFUNCTYPE(None, _c_double_ptr, Float64.ctype, Index.ctype)
    return _finalize(fn.module, name, prototype)


@functools.lru_cache(maxsize=None)
def matmul_kernel() -> Callable:
    """Compile the naive triple loop writing `a (m x k) @ b (k x n)` into `dest`.

    Every cell gets its own accumulator starting at 0.0, summed over `t` from left
    to right, and no fast-math flags are set, so rounding is reproducible.
    """
    name = "matmul"
    fn, builder = _new_function(
        name, [_double_ptr, _double_ptr, _double_ptr, _index, _index, _index]
    )
    a, b, dest, m, k, n = fn.args

    accumulator = _entry_slot(builder, _double, "acc")

    with counted_loop(builder, m, "row") as row:
        with counted_loop(builder, n, "col") as col:
            builder.store(ir.Constant(_double, 0.0), accumulator)

            with counted_loop(builder, k, "t") as t:
                left = builder.load(builder.gep(a, [builder.add(builder.mul(row, k), t)]))
                right = builder.load(builder.gep(b, [builder.add(builder.mul(t, n), col)]))
                builder.store(
                    builder.fadd(builder.load(accumulator), builder.fmul(left, right)),
                    accumulator,
                )

            field = builder.add(builder.mul(row, n), col)
            builder.store(builder.load(accumulator), builder.gep(dest, [field]))

    builder.ret_void()

    prototype = ctypes.CFUNCTYPE(
        None, _c_double_ptr, _c_double_ptr, _c_double_ptr, Index.ctype, Index.ctype, Index.ctype
    )
    return _finalize(fn.module, name, prototype)
