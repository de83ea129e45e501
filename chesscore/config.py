from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional


_ENV_PREFIX = "CHESSCORE_"


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the HTTP server and tooling.

    Values come from ``CHESSCORE_*`` environment variables when present.
    """

    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    max_perft_depth: int = 4

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``environ`` (defaults to ``os.environ``).

        Raises:
            ValueError: If a numeric variable does not hold an integer, or
                ``CHESSCORE_MAX_PERFT_DEPTH`` is negative.
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        port = _int_var(env, "PORT", defaults.port)
        max_depth = _int_var(env, "MAX_PERFT_DEPTH", defaults.max_perft_depth)
        if max_depth < 0:
            raise ValueError(f"{_ENV_PREFIX}MAX_PERFT_DEPTH must be >= 0")
        return cls(
            host=env.get(_ENV_PREFIX + "HOST", defaults.host),
            port=port,
            log_level=env.get(_ENV_PREFIX + "LOG_LEVEL", defaults.log_level).upper(),
            max_perft_depth=max_depth,
        )


def _int_var(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(_ENV_PREFIX + name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{_ENV_PREFIX}{name} must be an integer, got {raw!r}") from e
