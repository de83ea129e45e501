#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import logging
import os
import sys
import time

# Allow running this script directly via `python scripts/perft.py`
# by adding the repo root (which contains `chesscore/`) to sys.path.
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from chesscore.engine.fen import STARTPOS_FEN
from chesscore.engine.perft import PerftCounter, PerftMode, perft_divide, run_perft
from chesscore.engine.position import Position


def main() -> None:
    parser = argparse.ArgumentParser(description="Run perft on a given FEN and depth")
    parser.add_argument(
        "--fen", type=str, default=STARTPOS_FEN, help="FEN string (default: startpos)"
    )
    parser.add_argument("--depth", type=int, default=3, help="Perft depth (default: 3)")
    parser.add_argument(
        "--divide", action="store_true", help="Print leaf counts per root move"
    )
    parser.add_argument(
        "--benchmark",
        action="store_true",
        help="Count interior nodes too and report nodes per second over all of them",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    position = Position.from_fen(args.fen)
    start = time.perf_counter()
    if args.divide:
        divide = perft_divide(position, args.depth)
        dt = time.perf_counter() - start
        for uci in sorted(divide):
            print(f"{uci}: {divide[uci]}")
        nodes = sum(divide.values())
        print(f"moves={len(divide)} nodes={nodes} depth={args.depth} time_ms={int(dt*1000)}")
        return

    mode = PerftMode.BENCHMARK if args.benchmark else PerftMode.VERIFY
    counter = PerftCounter(mode=mode)
    run_perft(position, args.depth, counter)
    dt = time.perf_counter() - start
    searched = counter.total_nodes if args.benchmark else counter.leaf_nodes
    print(
        f"nodes={counter.leaf_nodes} depth={args.depth} time_ms={int(dt*1000)} "
        f"nps={int(searched/max(dt,1e-9))}"
    )


if __name__ == "__main__":
    main()
