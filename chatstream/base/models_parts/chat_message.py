"""
Chat message value object delivered to the presentation layer.

Every snapshot handed to an ``on_fragment`` callback, and the final message of
a session, is a :class:`ChatMessage`. Instances are frozen, so a snapshot
that was already rendered can never change under the UI's feet; the
assembler builds a fresh one after every fragment.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional

from .form_field import FormSchema, schema_to_wire

Role = Literal["user", "assistant"]
ROLES = ("user", "assistant")


@dataclass(frozen=True)
class ChatMessage:
    """An immutable chat message (streaming snapshot or finalized).

    Attributes:
        id: Server-assigned message id (may be empty on early snapshots).
        role: ``"user"`` or ``"assistant"``.
        content: Display text. Append-only across snapshots; trimmed once on
            the finalized message.
        timestamp: Epoch milliseconds, ``None`` until known on snapshots.
        form_schema: Parsed form fields, or ``None`` when the message carries
            no (valid) form.
        form_title: Optional heading for the rendered form.
        is_streaming: ``True`` for snapshots, ``False`` only on the final message.
    """

    id: str
    role: Role
    content: str
    timestamp: Optional[int] = None
    form_schema: Optional[FormSchema] = None
    form_title: Optional[str] = None
    is_streaming: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase shape the UI store keeps."""
        data: Dict[str, Any] = {
            "id": self.id,
            "role": self.role,
            "chatContent": self.content,
            "timestamp": self.timestamp,
            "isStreaming": self.is_streaming,
        }
        if self.form_schema is not None:
            data["formSchema"] = schema_to_wire(self.form_schema)
        if self.form_title is not None:
            data["formTitle"] = self.form_title
        return data


__all__ = ["ChatMessage", "Role", "ROLES"]
