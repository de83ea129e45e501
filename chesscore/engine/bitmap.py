from __future__ import annotations

from typing import Iterator


# Bitmaps are plain ints: bit i <=> square with linear index i (a1=0 .. h8=63).
MASK64 = 0xFFFFFFFFFFFFFFFF
EMPTY = 0


def bit(index: int) -> int:
    return 1 << index


def get_bit(bits: int, index: int) -> bool:
    return (bits >> index) & 1 == 1


def set_bit(bits: int, index: int) -> int:
    return bits | (1 << index)


def clear_bit(bits: int, index: int) -> int:
    return bits & ~(1 << index)


def toggle_bit(bits: int, index: int) -> int:
    return bits ^ (1 << index)


def invert(bits: int) -> int:
    """Bitwise NOT restricted to the 64 board bits."""
    return ~bits & MASK64


def shift_left(bits: int, n: int = 1) -> int:
    return (bits << n) & MASK64


def shift_right(bits: int, n: int = 1) -> int:
    return bits >> n


def lowest_set_index(bits: int) -> int:
    """Index of the least significant set bit (distance from a1), -1 if empty."""
    return (bits & -bits).bit_length() - 1


def highest_set_index(bits: int) -> int:
    """Index of the most significant set bit (63 minus distance from h8), -1 if empty."""
    return bits.bit_length() - 1


def count_bits(bits: int) -> int:
    return bin(bits).count("1")


def iter_indices(bits: int) -> Iterator[int]:
    """Yield the indices of all set bits, lowest first."""
    while bits:
        lsb = bits & -bits
        yield lsb.bit_length() - 1
        bits ^= lsb


def to_grid(bits: int) -> str:
    """Render a bitmap as an 8x8 grid, rank 8 on top ('x' set, '.' clear)."""
    rows = []
    for rank in range(7, -1, -1):
        rows.append("".join("x" if get_bit(bits, rank * 8 + f) else "." for f in range(8)))
    return "\n".join(rows)
