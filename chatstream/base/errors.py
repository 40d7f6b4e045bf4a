"""Unified chat stream error taxonomy public surface.

Re-exports the implementations under ``chatstream.base.errors_parts`` so
callers have one stable import path.

Fatal (end the session, surfaced as ``SessionResult.error``):
    ``TransportError``, ``ProtocolError`` and anything else escaping the
    read loop.
Non-fatal (absorbed by the decode layer, surfaced as warnings):
    ``DecodeWarning``, ``SchemaParseError``.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.stream_error import (
    ChatStreamError,
    DecodeWarning,
    ProtocolError,
    SchemaParseError,
    TransportError,
)
from .errors_parts.classification import classify_exception, to_stream_error

__all__ = [
    "ErrorCode",
    "ChatStreamError",
    "TransportError",
    "ProtocolError",
    "DecodeWarning",
    "SchemaParseError",
    "classify_exception",
    "to_stream_error",
]
