#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import time
import os
import sys

# Allow running this script directly via `python scripts/perft.py`
# by adding src/ to sys.path.
SRC_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src")
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

from mimic_chess.engine.board import STARTPOS_PLACEMENT
from mimic_chess.engine.perft import perft
from mimic_chess.engine.state import DEFAULT_PROMOTION_POLICY, PROMOTION_POLICIES, GameState


def main() -> None:
    parser = argparse.ArgumentParser(description="Run Mimic Chess perft on a given FEN and depth")
    parser.add_argument(
        "--fen",
        type=str,
        default=f"{STARTPOS_PLACEMENT} w",
        help="Placement and side to move (default: startpos); no history, home-rank pieces unmoved",
    )
    parser.add_argument("--depth", type=int, default=3, help="Perft depth (default: 3)")
    parser.add_argument(
        "--promotion-policy", choices=PROMOTION_POLICIES, default=DEFAULT_PROMOTION_POLICY
    )
    args = parser.parse_args()

    state = GameState.from_fen(args.fen)
    start = time.perf_counter()
    nodes = perft(state, args.depth, promotion_policy=args.promotion_policy)
    dt = time.perf_counter() - start
    print(f"nodes={nodes} depth={args.depth} time_ms={int(dt*1000)} nps={int(nodes/max(dt,1e-9))}")


if __name__ == "__main__":
    main()
