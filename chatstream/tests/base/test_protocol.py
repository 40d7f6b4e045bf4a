"""Protocol enum parsing and timestamp coercion."""
from __future__ import annotations

import pytest

from chatstream.base.protocol import ContentMode, ProtocolMode, coerce_timestamp


@pytest.mark.parametrize(
    "value,expected",
    [
        ("sentinel", ProtocolMode.SENTINEL_JSON),
        ("Sentinel-JSON", ProtocolMode.SENTINEL_JSON),
        ("current", ProtocolMode.SENTINEL_JSON),
        ("legacy", ProtocolMode.INLINE_TAG),
        ("inline-tag", ProtocolMode.INLINE_TAG),
        (ProtocolMode.INLINE_TAG, ProtocolMode.INLINE_TAG),
    ],
)
def test_protocol_mode_parse(value, expected):
    assert ProtocolMode.parse(value) is expected


def test_protocol_mode_parse_unknown():
    with pytest.raises(ValueError, match="unknown protocol mode"):
        ProtocolMode.parse("websocket")


def test_content_mode_parse():
    assert ContentMode.parse(" DELTA ") is ContentMode.DELTA
    assert ContentMode.parse(ContentMode.AUTO) is ContentMode.AUTO
    with pytest.raises(ValueError):
        ContentMode.parse("replace")


@pytest.mark.parametrize(
    "value,expected",
    [
        (1700000000000, 1700000000000),
        (1.5, 1),
        ("42", 42),
        ("1970-01-01T00:00:01Z", 1000),
        ("1970-01-01T00:00:02", 2000),
        ("1970-01-01T01:00:00+01:00", 0),
        (True, None),
        (None, None),
        ("", None),
        ("yesterday", None),
        ([1], None),
    ],
)
def test_coerce_timestamp(value, expected):
    assert coerce_timestamp(value) == expected
