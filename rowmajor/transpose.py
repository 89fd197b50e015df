"""In-place transposition of a row-major buffer.

Transposing an ``H x W`` buffer into a ``W x H`` buffer sends the value at flat
index ``i`` to ``(i * H) mod (H * W - 1)``, with the first and last index fixed.
Non-square matrices are rearranged by walking the cycles of that permutation,
carrying a single displaced value, while a bitset remembers which indices are done.
"""
from __future__ import annotations

import enum
import logging
from typing import MutableSequence

from rowmajor.bitset import WORD_BITS, Bitset, PackedBitset, WordBitset
from rowmajor.errors import ShapeMismatchError

logger = logging.getLogger(__name__)


class TransposeStrategy(enum.Enum):
    VECTOR = "vector"
    SQUARE = "square"
    SMALL_CYCLE = "small-cycle"
    LARGE_CYCLE = "large-cycle"


def select_strategy(height: int, width: int) -> TransposeStrategy:
    """Pick the transposition path for a shape; the first matching rule wins."""
    count = height * width

    if width == 1 or height == 1 or count == 0:
        return TransposeStrategy.VECTOR
    if width == height:
        return TransposeStrategy.SQUARE
    if count <= WORD_BITS:
        return TransposeStrategy.SMALL_CYCLE

    return TransposeStrategy.LARGE_CYCLE


def _transpose_square(values: MutableSequence[float], size: int) -> None:
    for row in range(size - 1):
        for col in range(row + 1, size):
            upper, lower = row * size + col, col * size + row
            values[upper], values[lower] = values[lower], values[upper]


def follow_cycles(values: MutableSequence[float], height: int, width: int, visited: Bitset) -> None:
    """Rotate every permutation cycle of the transpose by one step.

    `visited` must be empty and hold at least ``height * width - 1`` bits.
    """
    size = height * width - 1
    visited.add(0)

    start = 1
    while start < size:
        if start in visited:
            start += 1
            continue

        i = start
        carried = values[i]

        while True:
            following = (i * height) % size
            values[following], carried = carried, values[following]
            visited.add(i)
            i = following

            if i == start:
                break

        start += 1


def transpose_in_place(values: MutableSequence[float], height: int, width: int) -> TransposeStrategy:
    """Rearrange `values` from ``height x width`` into ``width x height`` order.

    Only the buffer is touched, the caller owns the dimensions and swaps them.
    """
    if len(values) != height * width:
        raise ShapeMismatchError(
            f"Buffer of {len(values)} values cannot hold a {height}x{width} matrix."
        )

    strategy = select_strategy(height, width)
    logger.debug("Transposing %dx%d via %s", height, width, strategy.value)

    if strategy is TransposeStrategy.SQUARE:
        _transpose_square(values, height)
    elif strategy is TransposeStrategy.SMALL_CYCLE:
        follow_cycles(values, height, width, WordBitset(height * width - 1))
    elif strategy is TransposeStrategy.LARGE_CYCLE:
        follow_cycles(values, height, width, PackedBitset(height * width - 1))

    return strategy
