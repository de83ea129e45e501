from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict

from .position import Position


logger = logging.getLogger(__name__)


class PerftMode(Enum):
    VERIFY = "verify"  # leaf nodes only, the classic correctness check
    BENCHMARK = "benchmark"  # also counts every interior node


@dataclass
class PerftCounter:
    mode: PerftMode = PerftMode.VERIFY
    leaf_nodes: int = 0
    total_nodes: int = 0

    def count_node(self) -> None:
        if self.mode is PerftMode.BENCHMARK:
            self.total_nodes += 1

    def count_leaf_node(self) -> None:
        self.leaf_nodes += 1


def perft(position: Position, depth: int) -> int:
    """Compute perft node count for ``position`` at ``depth``.

    Definition:
    - depth == 0 returns 1 (the current node).
    - depth > 0 returns the sum over all legal child positions' perft(depth-1).

    The position is walked with make/unmake and is left unchanged.
    """
    counter = PerftCounter()
    run_perft(position, depth, counter)
    logger.debug("perft depth=%d nodes=%d", depth, counter.leaf_nodes)
    return counter.leaf_nodes


def run_perft(position: Position, depth: int, counter: PerftCounter) -> None:
    if depth < 0:
        raise ValueError("depth must be >= 0")
    _walk(position, depth, counter)


def _walk(position: Position, depth: int, counter: PerftCounter) -> None:
    counter.count_node()
    if depth == 0:
        counter.count_leaf_node()
        return
    for move in position.all_legal_moves():
        position.make_move(move)
        _walk(position, depth - 1, counter)
        position.unmake_move(move)


def perft_divide(position: Position, depth: int) -> Dict[str, int]:
    """Return leaf counts per root move (keyed by UCI string) at ``depth``.

    Raises:
        ValueError: If ``depth`` is smaller than 1.
    """
    if depth < 1:
        raise ValueError("depth must be >= 1")
    result: Dict[str, int] = {}
    for move in position.all_legal_moves():
        position.make_move(move)
        result[move.to_uci()] = perft(position, depth - 1)
        position.unmake_move(move)
    return result
