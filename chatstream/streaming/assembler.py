"""Message assembler: the single-writer accumulator of one stream session.

Rules applied per fragment:

* ``id``, ``role`` and ``timestamp``: the first non-empty value wins; later
  frames that resend (or change) them are ignored.
* content is append-only, so snapshot lengths never decrease. Cumulative
  fragments (sentinel protocol) contribute only their extension past what
  is already accumulated: nothing when they are a replay of a prefix, the
  whole value when they do not extend it.
* form schema text is replaced by replacing fragments (last write wins) and
  appended to by tagged-section fragments.

``finalize`` trims the content exactly once, fills in the timestamp (wall
clock) and id (uuid4) when the server never sent them, and parses schema text
that was not parsed yet. A schema that fails to parse is dropped with a
``SchemaParseError`` warning; the text content is still delivered.
"""
from __future__ import annotations

import time
import uuid
from typing import Callable, List, Optional

from ..base.errors import SchemaParseError
from ..base.models import ChatMessage, FormSchema, MessageFragment, Role, parse_form_schema


def _now_ms() -> int:
    return int(time.time() * 1000)


def _new_id() -> str:
    return str(uuid.uuid4())


class MessageAssembler:
    """Accumulates fragments into immutable ``ChatMessage`` snapshots."""

    def __init__(
        self,
        *,
        clock: Callable[[], int] = _now_ms,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._clock = clock
        self._id_factory = id_factory
        self._id = ""
        self._role: Optional[Role] = None
        self._timestamp: Optional[int] = None
        self._content = ""
        self._schema_text = ""
        self._schema: Optional[FormSchema] = None
        self._schema_failed_text: Optional[str] = None
        self._form_title: Optional[str] = None
        self._final: Optional[ChatMessage] = None
        # finalize-time schema failures; per-fragment ones are reported by the session
        self.warnings: List[SchemaParseError] = []

    @property
    def streaming(self) -> bool:
        return self._final is None

    @property
    def form_schema_text(self) -> str:
        return self._schema_text

    def apply(self, fragment: MessageFragment) -> ChatMessage:
        """Fold ``fragment`` into the running message and return a snapshot."""
        if self._final is not None:
            raise RuntimeError("message already finalized")
        if fragment.id and not self._id:
            self._id = fragment.id
        if fragment.role and self._role is None:
            self._role = fragment.role
        if fragment.timestamp is not None and self._timestamp is None:
            self._timestamp = fragment.timestamp
        if fragment.form_title:
            self._form_title = fragment.form_title
        self._content += self._increment(fragment)
        self._apply_schema(fragment)
        return self.snapshot()

    def snapshot(self) -> ChatMessage:
        if self._final is not None:
            return self._final
        return ChatMessage(
            id=self._id,
            role=self._role or "assistant",
            content=self._content,
            timestamp=self._timestamp,
            form_schema=self._schema,
            form_title=self._form_title,
            is_streaming=True,
        )

    def finalize(self) -> ChatMessage:
        """Produce the final message; repeated calls return the same object."""
        if self._final is not None:
            return self._final
        schema = self._schema
        if schema is None and self._schema_text.strip() and self._schema_text != self._schema_failed_text:
            try:
                schema = parse_form_schema(self._schema_text)
            except SchemaParseError as e:
                self.warnings.append(e)
        self._final = ChatMessage(
            id=self._id or self._id_factory(),
            role=self._role or "assistant",
            content=self._content.strip(),
            timestamp=self._timestamp if self._timestamp is not None else self._clock(),
            form_schema=schema,
            form_title=self._form_title if schema is not None else None,
            is_streaming=False,
        )
        return self._final

    def _increment(self, fragment: MessageFragment) -> str:
        delta = fragment.content_delta
        if not delta or not fragment.content_is_cumulative:
            return delta
        current = self._content
        if delta.startswith(current):
            return delta[len(current):]
        if current.startswith(delta):
            return ""
        return delta

    def _apply_schema(self, fragment: MessageFragment) -> None:
        raw = fragment.form_schema_raw
        if not raw:
            return
        if fragment.form_schema_replaces:
            self._schema_text = raw
            self._schema = fragment.form_schema
            self._schema_failed_text = raw if fragment.form_schema is None and fragment.warnings else None
        else:
            self._schema_text += raw
            self._schema = None


__all__ = ["MessageAssembler"]
