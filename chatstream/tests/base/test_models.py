"""DTO tests: outbound request bodies, chat message serialization and frames."""
from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from chatstream.base.models import UNPARSED, ChatMessage, Frame, MessageFragment, OutboundMessage, parse_form_schema


def test_outbound_body_current_protocol():
    msg = OutboundMessage(content="hi")
    assert msg.to_body() == {"role": "user", "content": "hi", "formSubmitted": False}


def test_outbound_body_legacy_protocol_has_no_form_flag():
    msg = OutboundMessage(content="hi", formSubmitted=True)
    assert msg.to_body(legacy=True) == {"message": {"role": "user", "content": "hi"}}


def test_form_submission_serializes_pretty_json():
    msg = OutboundMessage.for_form_submission({"city": "Zürich", "n": 2})
    assert msg.form_submitted is True
    assert json.loads(msg.content) == {"city": "Zürich", "n": 2}
    assert "Zürich" in msg.content and "\n  " in msg.content


@pytest.mark.parametrize("content", ["", "   ", "\n\t"])
def test_blank_outbound_content_rejected(content):
    with pytest.raises(ValidationError):
        OutboundMessage(content=content)


def test_chat_message_to_dict():
    schema = parse_form_schema([{"name": "a", "label": "A", "type": "input"}])
    msg = ChatMessage(id="m1", role="assistant", content="x", timestamp=5, form_schema=schema, form_title="T")
    assert msg.to_dict() == {
        "id": "m1",
        "role": "assistant",
        "chatContent": "x",
        "timestamp": 5,
        "isStreaming": False,
        "formSchema": [{"name": "a", "label": "A", "type": "input"}],
        "formTitle": "T",
    }
    plain = ChatMessage(id="m2", role="user", content="y", is_streaming=True).to_dict()
    assert "formSchema" not in plain and plain["isStreaming"] is True


def test_frame_flags():
    assert Frame("  ").blank
    assert not Frame("  ", raw=True).blank
    assert Frame("{}", payload={}).parsed
    assert Frame("x").payload is UNPARSED and not Frame("x").parsed


def test_fragment_empty():
    assert MessageFragment().empty
    assert not MessageFragment(timestamp=0).empty
    assert not MessageFragment(content_delta=" ").empty
