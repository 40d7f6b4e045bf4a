"""
Structured chat stream error types.

``ChatStreamError`` carries a normalized `ErrorCode` plus a human readable
message. Fatal subclasses (``TransportError``, ``ProtocolError``) are raised
and end a session; non-fatal subclasses (``DecodeWarning``,
``SchemaParseError``) are collected on the session result instead of being
raised past the decode layer.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .error_code import ErrorCode


@dataclass
class ChatStreamError(Exception):
    """Represents a structured stream error with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable message. Surfaced verbatim to callers as the
            session error string, so it must never be empty.
        status: HTTP status code when the failure came from a response.
        raw: Optional original exception for diagnostics.
    """

    code: ErrorCode
    message: str
    status: Optional[int] = None
    raw: Optional[BaseException] = field(default=None, repr=False)

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message

    @property
    def fatal(self) -> bool:
        return self.code.fatal


@dataclass
class TransportError(ChatStreamError):
    """Request could not be sent, returned non-2xx, or the body was unreadable."""

    code: ErrorCode = ErrorCode.TRANSPORT
    message: str = "transport failure"

    @classmethod
    def for_status(cls, status: int) -> "TransportError":
        return cls(code=ErrorCode.HTTP_STATUS, message=f"HTTP error! status: {status}", status=status)


@dataclass
class ProtocolError(ChatStreamError):
    """A frame the decoder accepted could not be interpreted."""

    code: ErrorCode = ErrorCode.PROTOCOL
    message: str = "malformed frame"


@dataclass
class DecodeWarning(ChatStreamError):
    """Trailing buffered content was discarded at end of stream.

    ``discarded`` holds the dropped text so callers can inspect it; it is
    never merged into a delivered message.
    """

    code: ErrorCode = ErrorCode.DECODE
    message: str = "incomplete trailing frame discarded"
    discarded: str = ""


@dataclass
class SchemaParseError(ChatStreamError):
    """Accumulated form schema text was not a valid field-descriptor list."""

    code: ErrorCode = ErrorCode.SCHEMA
    message: str = "form schema could not be parsed"
    schema_text: str = ""


__all__ = [
    "ChatStreamError",
    "TransportError",
    "ProtocolError",
    "DecodeWarning",
    "SchemaParseError",
]
