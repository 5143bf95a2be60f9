"""Arbitrage cycle search and trade-size optimisation over Solana AMM pools."""

__version__ = "0.1.0"