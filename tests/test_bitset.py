import pytest

from rowmajor.bitset import WORD_BITS, PackedBitset, WordBitset


@pytest.mark.parametrize("cls, capacity", [(WordBitset, 63), (WordBitset, 64), (PackedBitset, 200)])
def test_add_and_contains(cls, capacity):
    bits = cls(capacity)
    marked = {0, 1, capacity // 2, capacity - 1}

    for index in marked:
        bits.add(index)

    assert [i for i in range(capacity) if i in bits] == sorted(marked)


def test_packed_crosses_word_boundaries():
    bits = PackedBitset(3 * WORD_BITS)

    for index in (WORD_BITS - 1, WORD_BITS, 2 * WORD_BITS + 5):
        bits.add(index)

    assert WORD_BITS - 1 in bits
    assert WORD_BITS in bits
    assert WORD_BITS + 1 not in bits
    assert 2 * WORD_BITS + 5 in bits


def test_word_rejects_oversized_capacity():
    with pytest.raises(ValueError):
        WordBitset(WORD_BITS + 1)


@pytest.mark.parametrize("cls", [WordBitset, PackedBitset])
def test_out_of_range(cls):
    bits = cls(10)

    with pytest.raises(IndexError):
        bits.add(10)

    with pytest.raises(IndexError):
        -1 in bits
