"""Trade Ledger — application configuration.

Loads .env variables into a typed config object.
Validates numeric variables on startup.
"""

import math
import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(frozen=True)
class Config:
    """Typed configuration loaded from environment variables."""

    db_path: str
    log_level: str
    api_host: str
    api_port: int
    default_capital: float  # INR, used when no capital record exists yet


def load_config(env_path: str | None = None) -> Config:
    """Load configuration from environment variables.

    Raises ``ValueError`` with a message naming the variable when a numeric
    variable cannot be parsed or is out of range.
    """
    load_dotenv(dotenv_path=env_path)

    api_port = _read_number("API_PORT", "8080", int)
    if not 1 <= api_port <= 65535:
        raise ValueError(f"API_PORT must be 1–65535, got {api_port}")

    default_capital = _read_number("DEFAULT_CAPITAL", "100000", float)
    if not math.isfinite(default_capital) or default_capital < 0:
        raise ValueError(
            f"DEFAULT_CAPITAL must be a finite non-negative number, got {default_capital}"
        )

    return Config(
        db_path=os.environ.get("DB_PATH", "data/tradeledger.db"),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        api_host=os.environ.get("API_HOST", "127.0.0.1"),
        api_port=api_port,
        default_capital=default_capital,
    )


def _read_number(name: str, default: str, cast):
    raw = os.environ.get(name, default)
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"Invalid value for {name}: {raw!r}") from None
