from __future__ import annotations

import pytest

from chesscore.config import Settings


def test_defaults() -> None:
    s = Settings.from_env({})
    assert s == Settings()
    assert s.port == 8000
    assert s.log_level == "INFO"


def test_env_overrides() -> None:
    s = Settings.from_env(
        {
            "CHESSCORE_HOST": "127.0.0.1",
            "CHESSCORE_PORT": "9001",
            "CHESSCORE_LOG_LEVEL": "debug",
            "CHESSCORE_MAX_PERFT_DEPTH": "3",
        }
    )
    assert s.host == "127.0.0.1"
    assert s.port == 9001
    assert s.log_level == "DEBUG"
    assert s.max_perft_depth == 3


@pytest.mark.parametrize(
    "env",
    [
        {"CHESSCORE_PORT": "http"},
        {"CHESSCORE_MAX_PERFT_DEPTH": "-1"},
    ],
)
def test_invalid_values_raise(env: dict) -> None:
    with pytest.raises(ValueError):
        Settings.from_env(env)
