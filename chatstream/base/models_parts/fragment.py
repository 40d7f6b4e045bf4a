"""
Wire-level DTOs passed between the decode stages.

``Frame`` is what the frame decoder yields; ``MessageFragment`` is what a
frame interpreter turns it into and what the message assembler consumes.
Neither leaves a stream session.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

from ..errors import SchemaParseError
from .chat_message import Role
from .form_field import FormSchema

# sentinel for "decoder did not parse this frame"
UNPARSED: Any = object()


@dataclass(frozen=True)
class Frame:
    """One delimited unit of the wire protocol, before interpretation.

    ``payload`` is the already-decoded JSON value when the decoder parsed the
    frame, or :data:`UNPARSED` otherwise. ``raw`` marks legacy plain-text
    frames, whose whitespace is content and must not be skipped.
    """

    text: str
    payload: Any = UNPARSED
    raw: bool = False

    @property
    def parsed(self) -> bool:
        return self.payload is not UNPARSED

    @property
    def blank(self) -> bool:
        return not self.parsed and not self.raw and not self.text.strip()


@dataclass
class MessageFragment:
    """Structured delta decoded from one frame.

    Fields left as ``None``/empty mean "not carried by this frame"; the
    assembler keeps its previous values for them.

    ``content_is_cumulative`` marks frames whose content is the whole message
    so far rather than a delta. ``form_schema_replaces`` selects
    last-write-wins (sentinel protocol) over append (legacy tagged section)
    for ``form_schema_raw``.
    """

    id: Optional[str] = None
    role: Optional[Role] = None
    timestamp: Optional[int] = None
    content_delta: str = ""
    content_is_cumulative: bool = False
    form_schema_raw: Optional[str] = None
    form_schema_replaces: bool = False
    form_schema: Optional[FormSchema] = None
    form_title: Optional[str] = None
    is_final: bool = False
    warnings: List[SchemaParseError] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not (
            self.id
            or self.role
            or self.timestamp is not None
            or self.content_delta
            or self.form_schema_raw
            or self.form_title
        )


__all__ = ["Frame", "MessageFragment", "UNPARSED"]
