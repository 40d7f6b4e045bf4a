"""chatstream package

Client-side decode/assemble pipeline for a streaming chat UI.

Purpose:
    Turn the byte stream of an agent server's HTTP reply into immutable
    ``ChatMessage`` snapshots (delivered through a synchronous callback) and
    one final message, optionally carrying a dynamic form schema. Both the
    current sentinel-separated JSON protocol and the legacy inline-tag
    protocol are supported.

Public API (re-exported):
    - Version: ``__version__``
    - Calls: :func:`stream_chat`, :func:`astream_chat`, :func:`submit_form`
    - Session: :class:`StreamSession`, :class:`SessionResult`, :class:`SessionState`
    - Models: :class:`ChatMessage`, :class:`FormField`, :class:`OutboundMessage`
    - Config: :class:`ChatClientConfig`, :func:`load_config`
    - Exceptions: :class:`ChatStreamError`, :class:`ErrorCode`
"""

from .base.cancellation import CancellationToken
from .base.errors import ChatStreamError, ErrorCode
from .base.models import ChatMessage, FormField, OutboundMessage
from .base.protocol import ContentMode, ProtocolMode
from .config import ChatClientConfig, load_config
from .service.chat_api import (
    astream_chat,
    build_error_message,
    build_user_echo,
    stream_chat,
    submit_form,
)
from .streaming import SessionResult, SessionState, StreamSession, decode_body

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "stream_chat",
    "astream_chat",
    "submit_form",
    "build_user_echo",
    "build_error_message",
    "decode_body",
    "StreamSession",
    "SessionResult",
    "SessionState",
    "ChatMessage",
    "FormField",
    "OutboundMessage",
    "ChatClientConfig",
    "load_config",
    "ProtocolMode",
    "ContentMode",
    "CancellationToken",
    "ChatStreamError",
    "ErrorCode",
]
