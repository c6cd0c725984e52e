from __future__ import annotations

import argparse
from typing import List, Optional

import uvicorn

from ..engine.state import DEFAULT_PROMOTION_POLICY, PROMOTION_POLICIES
from ..protocol.http.app import create_app


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the Mimic Chess HTTP service")
    parser.add_argument("--host", type=str, default="0.0.0.0", help="Bind address")
    parser.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    parser.add_argument(
        "--promotion-policy",
        choices=PROMOTION_POLICIES,
        default=DEFAULT_PROMOTION_POLICY,
        help="Kind recorded for mimic logic after a promotion (default: queen)",
    )
    parser.add_argument("--log-level", type=str, default="info", help="Logging level")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    app = create_app(promotion_policy=args.promotion_policy, log_level=args.log_level)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


if __name__ == "__main__":
    main()
