"""Settings read from the environment and an optional .env file."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv


class ConfigError(Exception):
    """Raised when a required setting is missing."""


@dataclass(frozen=True)
class Config:
    """Everything the bot needs to start."""

    solana_rpc_url: str

    @classmethod
    def load(cls) -> Config:
        """Load a .env file if one is found, then read settings from the environment."""
        load_dotenv(find_dotenv(usecwd=True))
        url = os.environ.get("SOLANA_RPC_URL")
        if url is None:
            raise ConfigError("missing value for field solana_rpc_url")
        return cls(solana_rpc_url=url)