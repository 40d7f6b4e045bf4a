"""
chatstream base package

Shared building blocks for the streaming pipeline:
- Errors: normalized ``ErrorCode`` taxonomy and structured exceptions
- Models: chat message snapshots, form schema, wire fragments, outbound DTO
- Logging, timeouts, cooperative cancellation and the HTTP client pool
"""

from .cancellation import CancellationToken, CancelledError
from .errors import (
    ChatStreamError,
    DecodeWarning,
    ErrorCode,
    ProtocolError,
    SchemaParseError,
    TransportError,
    classify_exception,
)
from .models import (
    ChatMessage,
    FormField,
    FormSchema,
    Frame,
    MessageFragment,
    OutboundMessage,
    parse_form_schema,
)
from .timeouts import TimeoutConfig, get_timeout_config

__all__ = [
    # Errors
    "ErrorCode",
    "ChatStreamError",
    "TransportError",
    "ProtocolError",
    "DecodeWarning",
    "SchemaParseError",
    "classify_exception",
    # Models
    "ChatMessage",
    "FormField",
    "FormSchema",
    "Frame",
    "MessageFragment",
    "OutboundMessage",
    "parse_form_schema",
    # Timeouts & Cancellation
    "TimeoutConfig",
    "get_timeout_config",
    "CancellationToken",
    "CancelledError",
]
