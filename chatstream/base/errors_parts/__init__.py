"""Errors parts package public surface.

Prefer importing from `chatstream.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .stream_error import (
    ChatStreamError,
    DecodeWarning,
    ProtocolError,
    SchemaParseError,
    TransportError,
)
from .classification import classify_exception, to_stream_error

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
