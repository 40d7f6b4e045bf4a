"""Frame decoders: decoded response text in, complete frames out.

Both decoders are fed whole decoded text (the session owns the incremental
UTF-8 decoder) once per body read, and buffer whatever cannot be emitted yet.
Nothing buffered is ever emitted as a frame unless it parses; at end of
stream ``finalize`` either yields a last complete frame or discards the
remainder and reports it as a :class:`DecodeWarning`.
"""
from __future__ import annotations

import json
from typing import Any, List, Optional, Protocol, Tuple

from ..base.errors import DecodeWarning
from ..base.models import Frame
from ..base.protocol import CHUNK_SEPARATOR


class FrameDecoder(Protocol):
    """Strategy interface shared by both wire protocols."""

    warnings: List[DecodeWarning]

    def feed(self, text: str) -> List[Frame]: ...

    def finalize(self) -> Tuple[List[Frame], Optional[DecodeWarning]]: ...


def _try_parse(text: str) -> Tuple[bool, Any]:
    try:
        return True, json.loads(text)
    except ValueError:
        return False, None


def _discard(remainder: str) -> DecodeWarning:
    preview = remainder.strip()[:80]
    return DecodeWarning(
        message=f"discarded {len(remainder)} characters of incomplete trailing frame: {preview!r}",
        discarded=remainder,
    )


class SentinelFrameDecoder:
    """Splits text on the chunk separator and emits JSON-parseable segments.

    The trailing segment of every feed is held as pending input because the
    producer may have been cut off mid-frame. Complete segments that do not
    parse are carried forward and retried joined (with the separator restored)
    to the next segment; this keeps a frame whole when the separator occurs
    inside one of its string values.

    If a carried segment is followed by a segment that parses as a JSON object
    on its own, the carry is treated as corrupt: it is dropped with a
    warning so one bad frame cannot swallow the rest of the stream. A tail
    cut from inside a valid JSON string always contains that string's closing
    quote, so it never parses as an object by itself.
    """

    def __init__(self, separator: str = CHUNK_SEPARATOR) -> None:
        if not separator:
            raise ValueError("separator must be non-empty")
        self._separator = separator
        self._pending = ""
        self._carry: List[str] = []
        self.warnings: List[DecodeWarning] = []

    @property
    def buffered(self) -> str:
        """Text held back so far (carried segments plus pending tail)."""
        return self._separator.join([*self._carry, self._pending]) if self._carry else self._pending

    def feed(self, text: str) -> List[Frame]:
        if not text:
            return []
        segments = (self._pending + text).split(self._separator)
        self._pending = segments.pop()
        frames: List[Frame] = []
        for segment in segments:
            frame = self._resolve(segment)
            if frame is not None:
                frames.append(frame)
        return frames

    def finalize(self) -> Tuple[List[Frame], Optional[DecodeWarning]]:
        remainder = self.buffered
        self._carry.clear()
        self._pending = ""
        if not remainder.strip():
            return [], None
        ok, value = _try_parse(remainder)
        if ok:
            return [Frame(text=remainder, payload=value)], None
        return [], _discard(remainder)

    def _resolve(self, segment: str) -> Optional[Frame]:
        if not self._carry:
            if not segment.strip():
                return Frame(text=segment)
            ok, value = _try_parse(segment)
            if ok:
                return Frame(text=segment, payload=value)
            self._carry.append(segment)
            return None

        candidate = self._separator.join([*self._carry, segment])
        ok, value = _try_parse(candidate)
        if ok:
            self._carry.clear()
            return Frame(text=candidate, payload=value)

        alone_ok, alone = _try_parse(segment) if segment.strip() else (False, None)
        if alone_ok and isinstance(alone, dict):
            self.warnings.append(_discard(self._separator.join(self._carry)))
            self._carry.clear()
            return Frame(text=segment, payload=alone)
        self._carry.append(segment)
        return None


class InlineTagFrameDecoder:
    """Legacy protocol: each read is one frame.

    The first non-whitespace character of the body decides the stream kind,
    once per session:

    * ``{``: reads carry JSON objects (``{id, role, content, timestamp}``),
      normally one per read but possibly several back to back or cut
      mid-object. Objects are split with ``raw_decode`` and an incomplete tail
      is buffered until it completes. Whitespace between objects is dropped.
    * anything else: the body is plain text and every read is passed through
      as a raw frame, whitespace included.
    """

    def __init__(self) -> None:
        self._buffer = ""
        self._raw_stream: Optional[bool] = None
        self._json = json.JSONDecoder()
        self.warnings: List[DecodeWarning] = []

    @property
    def buffered(self) -> str:
        return self._buffer

    def feed(self, text: str) -> List[Frame]:
        if not text:
            return []
        buf = self._buffer + text
        self._buffer = ""
        if self._raw_stream is None:
            head = buf.lstrip()
            if not head:
                self._buffer = buf
                return []
            self._raw_stream = not head.startswith("{")
        if self._raw_stream:
            return [Frame(text=buf, raw=True)]
        return self._split_objects(buf)

    def finalize(self) -> Tuple[List[Frame], Optional[DecodeWarning]]:
        remainder, self._buffer = self._buffer, ""
        if not remainder.strip():
            return [], None
        ok, value = _try_parse(remainder)
        if ok:
            return [Frame(text=remainder, payload=value)], None
        return [], _discard(remainder)

    def _split_objects(self, buf: str) -> List[Frame]:
        frames: List[Frame] = []
        pos = 0
        while True:
            idx = pos
            while idx < len(buf) and buf[idx].isspace():
                idx += 1
            if idx >= len(buf):
                break
            if buf[idx] != "{":
                # stray text after the objects of this read
                frames.append(Frame(text=buf[idx:], raw=True))
                break
            try:
                value, end = self._json.raw_decode(buf, idx)
            except ValueError:
                self._buffer = buf[idx:]
                break
            frames.append(Frame(text=buf[idx:end], payload=value))
            pos = end
        return frames


__all__ = ["FrameDecoder", "SentinelFrameDecoder", "InlineTagFrameDecoder"]
