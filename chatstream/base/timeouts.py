"""Timeout configuration for stream sessions.

``get_timeout_config()`` returns a process-cached :class:`TimeoutConfig`
parsed from the environment. The cache is rebuilt when any of the variables
change so tests can adjust them with ``monkeypatch``.

Supported environment variables (all optional, seconds, must be > 0):
    CHATSTREAM_TIMEOUT_CONNECT_SECONDS
    CHATSTREAM_TIMEOUT_READ_SECONDS    idle time allowed between body reads
    CHATSTREAM_TIMEOUT_WRITE_SECONDS
    CHATSTREAM_TIMEOUT_POOL_SECONDS

The read timeout bounds a single wait for the next chunk, not the whole
stream; agents may stream for minutes.
"""
from __future__ import annotations

import os
from dataclasses import dataclass

import httpx

_ENV_VARS = (
    "CHATSTREAM_TIMEOUT_CONNECT_SECONDS",
    "CHATSTREAM_TIMEOUT_READ_SECONDS",
    "CHATSTREAM_TIMEOUT_WRITE_SECONDS",
    "CHATSTREAM_TIMEOUT_POOL_SECONDS",
)


@dataclass(frozen=True)
class TimeoutConfig:
    """Normalized timeout values (seconds)."""

    connect_seconds: float = 10.0
    read_seconds: float = 120.0
    write_seconds: float = 30.0
    pool_seconds: float = 10.0

    def to_httpx(self) -> httpx.Timeout:
        return httpx.Timeout(
            connect=self.connect_seconds,
            read=self.read_seconds,
            write=self.write_seconds,
            pool=self.pool_seconds,
        )


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Return the positive float in ``name`` or ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached ``TimeoutConfig``."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join(os.getenv(name, "") for name in _ENV_VARS)
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED
    defaults = TimeoutConfig()
    _CACHED = TimeoutConfig(
        connect_seconds=_parse_env_float("CHATSTREAM_TIMEOUT_CONNECT_SECONDS", defaults.connect_seconds),
        read_seconds=_parse_env_float("CHATSTREAM_TIMEOUT_READ_SECONDS", defaults.read_seconds),
        write_seconds=_parse_env_float("CHATSTREAM_TIMEOUT_WRITE_SECONDS", defaults.write_seconds),
        pool_seconds=_parse_env_float("CHATSTREAM_TIMEOUT_POOL_SECONDS", defaults.pool_seconds),
    )
    _ENV_GUARD = guard
    return _CACHED


__all__ = ["TimeoutConfig", "get_timeout_config"]
