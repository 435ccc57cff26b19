"""Configuration management for the RRSP planner."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from functools import lru_cache
from typing import TypeVar

from dotenv import load_dotenv

T = TypeVar("T")


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment."""

    engine_version: str
    host: str
    port: int
    debug: bool
    log_level: str
    contribution_limit_rate: float
    tax_brackets_file: str | None

    @property
    def HOST(self) -> str:
        """Alias for host."""
        return self.host

    @property
    def PORT(self) -> int:
        """Alias for port."""
        return self.port

    @property
    def DEBUG(self) -> bool:
        """Alias for debug."""
        return self.debug

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment variables.

        Raises:
            ValueError: If a variable is set to a value of the wrong type,
                or LOG_LEVEL is not a logging level name.
        """
        load_dotenv()

        log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        if log_level not in logging.getLevelNamesMapping():
            raise ValueError(f"LOG_LEVEL={log_level!r} is not a logging level")

        return cls(
            engine_version=os.getenv("ENGINE_VERSION", "1.0.0"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=_env_number("PORT", "8000", int),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=log_level,
            contribution_limit_rate=_env_number("CONTRIBUTION_LIMIT_RATE", "0.18", float),
            tax_brackets_file=os.getenv("TAX_BRACKETS_FILE") or None,
        )


def _env_number(name: str, default: str, cast: Callable[[str], T]) -> T:
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{name}={raw!r} is not a valid {cast.__name__}") from None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()
