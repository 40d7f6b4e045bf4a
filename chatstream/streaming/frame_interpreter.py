"""Frame interpreters: one complete frame in, one ``MessageFragment`` out.

``JsonObjectInterpreter`` serves the sentinel protocol and is stateless.
``InlineTagInterpreter`` serves the legacy protocol and carries the "inside a
form schema section" flag (plus an unclassified partial line) from frame to
frame, so a session must use a fresh instance.
"""
from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Optional, Protocol

from ..base.errors import ProtocolError, SchemaParseError
from ..base.models import ROLES, Frame, MessageFragment, parse_form_schema
from ..base.protocol import FORM_END_TAG, FORM_START_TAG, ContentMode, coerce_timestamp

_TIMESTAMP_KEYS = ("timestamp", "creationTime", "createdAt")
# lines split on "\n" only, terminator kept; "\r" stays part of the line
_LINE_RE = re.compile(r"[^\n]*\n|[^\n]+")


class FrameInterpreter(Protocol):
    """Strategy interface shared by both wire protocols."""

    def interpret(self, frame: Frame) -> MessageFragment: ...

    def flush(self) -> Optional[MessageFragment]: ...


def _payload_object(frame: Frame) -> Dict[str, Any]:
    """Return the frame's JSON object, raising ``ProtocolError`` otherwise."""
    if frame.parsed:
        payload = frame.payload
    else:
        try:
            payload = json.loads(frame.text)
        except ValueError as e:
            raise ProtocolError(message=f"frame is not valid JSON: {e}", raw=e) from e
    if not isinstance(payload, dict):
        raise ProtocolError(message=f"expected a JSON object frame, got {type(payload).__name__}")
    return payload


def _metadata(payload: Dict[str, Any]) -> MessageFragment:
    msg_id = payload.get("id")
    role = payload.get("role")
    timestamp = next(
        (ts for ts in (coerce_timestamp(payload.get(k)) for k in _TIMESTAMP_KEYS) if ts is not None),
        None,
    )
    title = payload.get("formTitle")
    return MessageFragment(
        id=str(msg_id) if msg_id not in (None, "") else None,
        role=role if role in ROLES else None,
        timestamp=timestamp,
        form_title=title if isinstance(title, str) and title else None,
    )


def _text_field(payload: Dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = payload.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            raise ProtocolError(message=f"field {key!r} must be a string, got {type(value).__name__}")
        return value
    return ""


class JsonObjectInterpreter:
    """Sentinel protocol: ``{id, role, chatContent, timestamp, formSchema?}``.

    ``formSchema`` is a JSON-encoded string (a plain list is tolerated). It is
    parsed right away and replaces any previously attached schema; a parse
    failure is recorded on the fragment as a non-fatal warning.
    """

    def __init__(self, content_mode: ContentMode = ContentMode.AUTO) -> None:
        self._content_mode = ContentMode.parse(content_mode)

    def interpret(self, frame: Frame) -> MessageFragment:
        payload = _payload_object(frame)
        fragment = _metadata(payload)
        fragment.content_delta = _text_field(payload, "chatContent", "content")
        fragment.content_is_cumulative = self._content_mode is ContentMode.AUTO

        schema = payload.get("formSchema")
        if schema is not None and schema != "":
            fragment.form_schema_raw = schema if isinstance(schema, str) else json.dumps(schema, ensure_ascii=False)
            fragment.form_schema_replaces = True
            try:
                fragment.form_schema = parse_form_schema(schema)
            except SchemaParseError as e:
                fragment.warnings.append(e)
        return fragment

    def flush(self) -> Optional[MessageFragment]:
        return None


class InlineTagInterpreter:
    """Legacy protocol: display text with an inline tagged schema section.

    Text is routed line by line; each line keeps its own line terminator.
    Lines between ``<dynamic_form_schema>`` and ``</dynamic_form_schema>`` go
    to ``form_schema_raw``; both tag lines are dropped. A trailing line
    without terminator that could still turn into a tag is held back until
    the next frame (or :meth:`flush`); any other partial line is emitted
    immediately so the UI sees text as it arrives, and the rest of that line
    in later frames is never taken for a tag.
    """

    def __init__(self, start_tag: str = FORM_START_TAG, end_tag: str = FORM_END_TAG) -> None:
        self._start_tag = start_tag
        self._end_tag = end_tag
        self._in_section = False
        self._held = ""
        self._mid_line = False

    @property
    def in_section(self) -> bool:
        return self._in_section

    def interpret(self, frame: Frame) -> MessageFragment:
        if frame.parsed:
            payload = _payload_object(frame)
            fragment = _metadata(payload)
            text = _text_field(payload, "content", "chatContent")
        else:
            fragment = MessageFragment()
            text = frame.text
        self._route(self._held + text, fragment, final=False)
        return fragment

    def flush(self) -> Optional[MessageFragment]:
        """Release a held-back partial line at end of stream."""
        if not self._held:
            return None
        fragment = MessageFragment()
        self._route(self._held, fragment, final=True)
        return None if fragment.empty else fragment

    def _route(self, text: str, fragment: MessageFragment, *, final: bool) -> None:
        self._held = ""
        content: List[str] = []
        schema: List[str] = []
        for line in _LINE_RE.findall(text):
            terminated = line.endswith("\n")
            continuation, self._mid_line = self._mid_line, not terminated
            if continuation:
                (schema if self._in_section else content).append(line)
                continue
            marker = line.strip()
            if not terminated and not final and self._could_be_tag(marker):
                self._held = line
                self._mid_line = False
                break
            if not self._in_section and marker == self._start_tag:
                self._in_section = True
                continue
            if self._in_section and marker == self._end_tag:
                self._in_section = False
                continue
            (schema if self._in_section else content).append(line)
        fragment.content_delta = "".join(content)
        if schema:
            fragment.form_schema_raw = "".join(schema)
            fragment.form_schema_replaces = False

    def _could_be_tag(self, marker: str) -> bool:
        if not marker:
            # leading whitespace of a possibly indented tag line
            return True
        tag = self._end_tag if self._in_section else self._start_tag
        return tag.startswith(marker)


__all__ = ["FrameInterpreter", "JsonObjectInterpreter", "InlineTagInterpreter"]
