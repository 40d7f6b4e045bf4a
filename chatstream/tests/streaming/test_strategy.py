"""Protocol strategy selection tests."""
from __future__ import annotations

import pytest

from chatstream.base.models import OutboundMessage
from chatstream.base.protocol import ContentMode, ProtocolMode
from chatstream.streaming import get_strategy
from chatstream.streaming.frame_decoder import InlineTagFrameDecoder, SentinelFrameDecoder
from chatstream.streaming.frame_interpreter import InlineTagInterpreter, JsonObjectInterpreter


@pytest.mark.parametrize("alias", ["sentinel", "current", "SENTINEL_JSON", ProtocolMode.SENTINEL_JSON])
def test_sentinel_aliases(alias):
    strategy = get_strategy(alias)
    assert strategy.mode is ProtocolMode.SENTINEL_JSON
    assert isinstance(strategy.new_decoder(), SentinelFrameDecoder)
    assert isinstance(strategy.new_interpreter(ContentMode.DELTA), JsonObjectInterpreter)


@pytest.mark.parametrize("alias", ["legacy", "inline", "inline-tag"])
def test_legacy_aliases(alias):
    strategy = get_strategy(alias)
    assert strategy.mode is ProtocolMode.INLINE_TAG
    assert isinstance(strategy.new_decoder(), InlineTagFrameDecoder)
    assert isinstance(strategy.new_interpreter(), InlineTagInterpreter)


def test_unknown_protocol_rejected():
    with pytest.raises(ValueError):
        get_strategy("carrier-pigeon")


def test_each_call_builds_fresh_stateful_parts():
    strategy = get_strategy("legacy")
    assert strategy.new_interpreter() is not strategy.new_interpreter()
    assert strategy.new_decoder() is not strategy.new_decoder()


def test_endpoints_and_bodies():
    msg = OutboundMessage(content="hi")
    current, legacy = get_strategy("current"), get_strategy("legacy")
    assert current.endpoint("a/b", "c?d") == "/api/chat/forward/a%2Fb/c%3Fd"
    assert legacy.endpoint("a", "c") == "/api/chat/a/c"
    assert current.body(msg) == {"role": "user", "content": "hi", "formSubmitted": False}
    assert legacy.body(msg) == {"message": {"role": "user", "content": "hi"}}
