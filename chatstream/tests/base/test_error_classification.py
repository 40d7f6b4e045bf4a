"""Unit tests for error classification and session error mapping."""
from __future__ import annotations

import asyncio

import httpx
import pytest

from chatstream.base.cancellation import CancelledError
from chatstream.base.errors import (
    ChatStreamError,
    DecodeWarning,
    ErrorCode,
    ProtocolError,
    SchemaParseError,
    TransportError,
    classify_exception,
    to_stream_error,
)


class _StatusError(Exception):
    def __init__(self, status_code: int) -> None:
        super().__init__(f"status {status_code}")
        self.status_code = status_code


class _Resp:
    status_code = 429


class _RespError(Exception):
    response = _Resp()


@pytest.mark.parametrize(
    "exc, expected",
    [
        (ProtocolError(message="x"), ErrorCode.PROTOCOL),
        (CancelledError("stop"), ErrorCode.CANCELLED),
        (asyncio.CancelledError(), ErrorCode.CANCELLED),
        (httpx.ReadTimeout("slow"), ErrorCode.TIMEOUT),
        (TimeoutError(), ErrorCode.TIMEOUT),
        (_StatusError(502), ErrorCode.HTTP_STATUS),
        (_RespError(), ErrorCode.HTTP_STATUS),
        (httpx.ConnectError("refused"), ErrorCode.TRANSPORT),
        (httpx.RemoteProtocolError("peer closed"), ErrorCode.TRANSPORT),
        (RuntimeError("boom"), ErrorCode.UNKNOWN),
    ],
)
def test_classify_exception(exc, expected):
    assert classify_exception(exc) is expected


def test_for_status_message_is_stable():
    err = TransportError.for_status(500)
    assert str(err) == "HTTP error! status: 500"
    assert err.status == 500
    assert err.code is ErrorCode.HTTP_STATUS
    assert err.fatal is True


def test_to_stream_error_passthrough_and_wrapping():
    original = ProtocolError(message="bad frame")
    assert to_stream_error(original) is original

    wrapped = to_stream_error(_StatusError(503))
    assert isinstance(wrapped, TransportError)
    assert wrapped.message == "HTTP error! status: 503"

    unknown = to_stream_error(ValueError())
    assert unknown.code is ErrorCode.UNKNOWN
    assert unknown.message == "ValueError"


def test_cancellation_messages():
    assert to_stream_error(CancelledError("user left")).message == "Stream cancelled: user left"
    assert to_stream_error(asyncio.CancelledError()).message == "Stream cancelled: operation cancelled"


def test_non_fatal_categories():
    assert DecodeWarning().fatal is False
    assert SchemaParseError().fatal is False
    assert ProtocolError().fatal is True
    assert isinstance(DecodeWarning(), ChatStreamError)
    assert isinstance(TransportError(), Exception)
