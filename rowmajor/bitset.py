"""Visited-index sets for the cycle-following transpose."""
from __future__ import annotations

from typing import Protocol

import numpy as np

WORD_BITS = 64


class Bitset(Protocol):
    capacity: int

    def add(self, index: int) -> None:
        ...

    def __contains__(self, index: int) -> bool:
        ...


def _check(index: int, capacity: int) -> None:
    if not 0 <= index < capacity:
        raise IndexError(f"Bit {index} is outside a bitset of {capacity} bits.")


class WordBitset:
    """Bits kept inline in a single 64-bit word."""

    def __init__(self, capacity: int) -> None:
        if not 0 <= capacity <= WORD_BITS:
            raise ValueError(f"A single word holds at most {WORD_BITS} bits, not {capacity}.")

        self.capacity = capacity
        self._word = 0

    def add(self, index: int) -> None:
        _check(index, self.capacity)
        self._word |= 1 << index

    def __contains__(self, index: int) -> bool:
        _check(index, self.capacity)
        return (self._word >> index) & 1 == 1

    def __repr__(self) -> str:
        return f"WordBitset<{self._word:#018x}>"


class PackedBitset:
    """Bits packed into an array of unsigned 64-bit words."""

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError(f"Bitset capacity must be non-negative, got {capacity}.")

        self.capacity = capacity
        self._words: np.ndarray = np.zeros(capacity // WORD_BITS + 1, dtype=np.uint64)

    def add(self, index: int) -> None:
        _check(index, self.capacity)
        self._words[index // WORD_BITS] |= np.uint64(1) << np.uint64(index % WORD_BITS)

    def __contains__(self, index: int) -> bool:
        _check(index, self.capacity)
        word = self._words[index // WORD_BITS]
        return bool((word >> np.uint64(index % WORD_BITS)) & np.uint64(1))

    def __repr__(self) -> str:
        return f"PackedBitset<{self.capacity} bits, {self._words.size} words>"

