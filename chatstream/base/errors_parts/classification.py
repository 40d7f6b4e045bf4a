"""
Error classification helpers mapping exceptions to normalized ErrorCode values.

Used by the stream session to turn whatever escaped the open/read loop
(``httpx`` failures, cancellation, decode-layer errors, callback bugs) into a
single ``ChatStreamError`` with a stable, non-empty message.
"""
from __future__ import annotations

import asyncio
from typing import Optional

import httpx

from ..cancellation_parts.cancelled_error import CancelledError
from .error_code import ErrorCode
from .stream_error import ChatStreamError, TransportError


def _extract_status(exc: BaseException) -> Optional[int]:
    """Attempt to extract an HTTP status code from an exception.

    Supported attribute shapes (checked in order):
    - ``exc.status``
    - ``exc.status_code``
    - ``exc.response.status_code``
    """
    for attr in ("status", "status_code"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


def classify_exception(exc: BaseException) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. ChatStreamError passthrough.
        2. Cooperative cancellation.
        3. Timeout exceptions (httpx and builtin).
        4. HTTP status carried on the exception.
        5. Other ``httpx`` transport/stream failures.
        6. ``UNKNOWN`` fallback.
    """
    if isinstance(exc, ChatStreamError):
        return exc.code
    if isinstance(exc, (CancelledError, asyncio.CancelledError)):
        return ErrorCode.CANCELLED
    if isinstance(exc, (httpx.TimeoutException, TimeoutError, asyncio.TimeoutError)):
        return ErrorCode.TIMEOUT
    if _extract_status(exc) is not None:
        return ErrorCode.HTTP_STATUS
    if isinstance(exc, (httpx.TransportError, httpx.StreamError, UnicodeDecodeError)):
        return ErrorCode.TRANSPORT
    return ErrorCode.UNKNOWN


def to_stream_error(exc: BaseException) -> ChatStreamError:
    """Wrap ``exc`` into a ``ChatStreamError`` (returned unchanged if already one)."""
    if isinstance(exc, ChatStreamError):
        return exc
    code = classify_exception(exc)
    status = _extract_status(exc)
    if code is ErrorCode.HTTP_STATUS and status is not None:
        err = TransportError.for_status(status)
        err.raw = exc
        return err
    message = str(exc).strip()
    if code is ErrorCode.CANCELLED:
        message = f"Stream cancelled: {message or 'operation cancelled'}"
    elif not message:
        message = exc.__class__.__name__
    return ChatStreamError(code=code, message=message, status=status, raw=exc)


__all__ = [
    "classify_exception",
    "to_stream_error",
    "_extract_status",
]
