"""Entry point of the bot."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from typing import Optional


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="mev-scalpel", description="Run the arbitrage bot.")
    parser.parse_args(argv)
    print("--- MEV SCALPEL BOT - STARTING ---")
    print("--- MEV SCALPEL BOT - SHUTTING DOWN (for now) ---")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())