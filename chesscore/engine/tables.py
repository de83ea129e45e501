from __future__ import annotations

from enum import IntEnum
from typing import List, Tuple


class RayDirection(IntEnum):
    NORTH = 0
    NORTHEAST = 1
    EAST = 2
    SOUTHEAST = 3
    SOUTH = 4
    SOUTHWEST = 5
    WEST = 6
    NORTHWEST = 7

    @property
    def negative(self) -> bool:
        """True for directions that walk towards lower square indices."""
        return self in _NEGATIVE_DIRECTIONS

    @property
    def diagonal(self) -> bool:
        return self in _DIAGONAL_DIRECTIONS


_NEGATIVE_DIRECTIONS = frozenset(
    {RayDirection.SOUTH, RayDirection.SOUTHWEST, RayDirection.WEST, RayDirection.SOUTHEAST}
)
_DIAGONAL_DIRECTIONS = frozenset(
    {RayDirection.NORTHEAST, RayDirection.SOUTHEAST, RayDirection.SOUTHWEST, RayDirection.NORTHWEST}
)

# (file delta, rank delta) per direction
RAY_STEPS = {
    RayDirection.NORTH: (0, 1),
    RayDirection.NORTHEAST: (1, 1),
    RayDirection.EAST: (1, 0),
    RayDirection.SOUTHEAST: (1, -1),
    RayDirection.SOUTH: (0, -1),
    RayDirection.SOUTHWEST: (-1, -1),
    RayDirection.WEST: (-1, 0),
    RayDirection.NORTHWEST: (-1, 1),
}

ORTHOGONAL_DIRECTIONS: Tuple[RayDirection, ...] = (
    RayDirection.NORTH,
    RayDirection.EAST,
    RayDirection.SOUTH,
    RayDirection.WEST,
)
DIAGONAL_DIRECTIONS: Tuple[RayDirection, ...] = (
    RayDirection.NORTHEAST,
    RayDirection.SOUTHEAST,
    RayDirection.SOUTHWEST,
    RayDirection.NORTHWEST,
)
ALL_DIRECTIONS: Tuple[RayDirection, ...] = tuple(RayDirection)

KNIGHT_STEPS = ((-1, 2), (1, 2), (-2, 1), (2, 1), (-2, -1), (2, -1), (-1, -2), (1, -2))
KING_STEPS = ((-1, -1), (0, -1), (1, -1), (-1, 0), (1, 0), (-1, 1), (0, 1), (1, 1))


def _step_table(steps: Tuple[Tuple[int, int], ...]) -> List[int]:
    table = [0] * 64
    for sq in range(64):
        f, r = sq % 8, sq // 8
        mask = 0
        for df, dr in steps:
            tf, tr = f + df, r + dr
            if 0 <= tf < 8 and 0 <= tr < 8:
                mask |= 1 << (tr * 8 + tf)
        table[sq] = mask
    return table


def _ray_table(direction: RayDirection) -> List[int]:
    """Squares visible from each square along ``direction`` on an empty board."""
    df, dr = RAY_STEPS[direction]
    table = [0] * 64
    for sq in range(64):
        tf, tr = sq % 8, sq // 8
        mask = 0
        while True:
            tf += df
            tr += dr
            if not (0 <= tf < 8 and 0 <= tr < 8):
                break
            mask |= 1 << (tr * 8 + tf)
        table[sq] = mask
    return table


KNIGHT_TARGETS: Tuple[int, ...] = tuple(_step_table(KNIGHT_STEPS))
KING_TARGETS: Tuple[int, ...] = tuple(_step_table(KING_STEPS))
RAY_TARGETS: Tuple[Tuple[int, ...], ...] = tuple(tuple(_ray_table(d)) for d in RayDirection)

# Rank/file masks indexed 0..7 (rank 1 / file a first)
RANK_MASKS: Tuple[int, ...] = tuple(0xFF << (8 * r) for r in range(8))
FILE_MASKS: Tuple[int, ...] = tuple(0x0101010101010101 << f for f in range(8))
