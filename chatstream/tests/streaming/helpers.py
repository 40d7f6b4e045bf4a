"""Wire-format builders and fake transports for streaming tests."""
from __future__ import annotations

import json
from typing import Any, AsyncIterator, Callable, Dict, Iterable, List, Optional, Sequence

import httpx

from chatstream.base.protocol import CHUNK_SEPARATOR, FORM_END_TAG, FORM_START_TAG
from chatstream.config import ChatClientConfig

SEP = CHUNK_SEPARATOR
BASE_URL = "http://agents.test"

FIELDS: List[Dict[str, Any]] = [
    {"name": "x", "label": "X", "type": "input"},
    {"name": "color", "label": "Color", "type": "select", "values": ["red", "blue"], "defaultValue": "red"},
    {"name": "cv", "label": "CV", "type": "file", "accept": ".pdf", "multiple": False, "required": True},
]


def sentinel_frame(
    content: str,
    *,
    msg_id: Optional[str] = "1",
    role: str = "assistant",
    timestamp: Any = 1000,
    form_schema: Any = None,
    **extra: Any,
) -> str:
    obj: Dict[str, Any] = {"id": msg_id, "role": role, "chatContent": content, "timestamp": timestamp}
    if form_schema is not None:
        obj["formSchema"] = form_schema if isinstance(form_schema, str) else json.dumps(form_schema)
    obj.update(extra)
    return json.dumps(obj, ensure_ascii=False)


def sentinel_body(*frames: str, trailing_separator: bool = True) -> str:
    body = SEP.join(frames)
    return body + SEP if trailing_separator else body


def legacy_object(content: str, *, msg_id: str = "1", role: str = "assistant", timestamp: Any = 1000) -> str:
    return json.dumps({"id": msg_id, "role": role, "content": content, "timestamp": timestamp}, ensure_ascii=False)


def tagged_section(fields: Sequence[Dict[str, Any]]) -> str:
    return f"{FORM_START_TAG}\n{json.dumps(list(fields))}\n{FORM_END_TAG}\n"


def split_bytes(data: bytes, *offsets: int) -> List[bytes]:
    """Split ``data`` at ``offsets``; empty pieces are dropped."""
    out: List[bytes] = []
    prev = 0
    for off in sorted(offsets):
        out.append(data[prev:off])
        prev = off
    out.append(data[prev:])
    return [c for c in out if c]


def _as_bytes(chunks: Iterable[Any]) -> List[bytes]:
    return [c.encode("utf-8") if isinstance(c, str) else c for c in chunks]


class Recorder:
    """Records requests seen by a fake transport."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


def sync_client(
    chunks: Iterable[Any] = (),
    *,
    status: int = 200,
    recorder: Optional[Recorder] = None,
    raise_exc: Optional[Exception] = None,
) -> httpx.Client:
    """``httpx.Client`` whose every POST streams ``chunks`` back as separate reads."""
    body = _as_bytes(chunks)

    def handler(request: httpx.Request) -> httpx.Response:
        if recorder is not None:
            recorder.requests.append(request)
        if raise_exc is not None:
            raise raise_exc
        return httpx.Response(status, content=iter(list(body)))

    return httpx.Client(transport=httpx.MockTransport(handler))


def async_client(
    chunks: Iterable[Any] = (),
    *,
    status: int = 200,
    recorder: Optional[Recorder] = None,
    on_chunk: Optional[Callable[[int], None]] = None,
) -> httpx.AsyncClient:
    """Async twin of :func:`sync_client`; ``on_chunk(i)`` runs before read ``i`` is served."""
    body = _as_bytes(chunks)

    async def stream() -> AsyncIterator[bytes]:
        for i, chunk in enumerate(body):
            if on_chunk is not None:
                on_chunk(i)
            yield chunk

    def handler(request: httpx.Request) -> httpx.Response:
        if recorder is not None:
            recorder.requests.append(request)
        return httpx.Response(status, content=stream())

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def config(**overrides: Any) -> ChatClientConfig:
    return ChatClientConfig(base_url=BASE_URL, **overrides)
