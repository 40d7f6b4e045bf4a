"""
Normalized chat stream error codes (taxonomy).

Defines the `ErrorCode` enumeration shared by the stream session, decoders and
logging helpers. Values are lowercase snake_case and are considered a stable
public contract for logs and for callers inspecting ``SessionResult``.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    TRANSPORT = "transport"
    HTTP_STATUS = "http_status"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    PROTOCOL = "protocol"
    DECODE = "decode"
    SCHEMA = "schema"
    UNKNOWN = "unknown"

    @property
    def fatal(self) -> bool:
        """Whether an error of this category ends the stream session."""
        return self not in (ErrorCode.DECODE, ErrorCode.SCHEMA)


__all__ = ["ErrorCode"]
