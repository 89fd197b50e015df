"""A module containing basic operator mappings."""
from llvmlite import ir

from rowmajor.compiler.types import Float64

_double = Float64.llvm


def _pow(ir_builder: ir.IRBuilder, *args):
    pow_fn = ir_builder.module.declare_intrinsic(
        "llvm.pow", [_double], ir.FunctionType(_double, [_double, _double])
    )
    return ir_builder.call(pow_fn, args)


LOOKUP = {
    "+": lambda ir_builder, *args: ir_builder.fadd(*args),
    "-": lambda ir_builder, *args: ir_builder.fsub(*args),
    "*": lambda ir_builder, *args: ir_builder.fmul(*args),
    "**": _pow,
}
