"""
Outbound message DTO (client -> agent server).

The current protocol posts the message object directly; the legacy protocol
wraps it as ``{"message": {...}}`` and has no ``formSubmitted`` flag.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OutboundMessage(BaseModel):
    """A user message (plain text or a submitted form) sent to an agent."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    role: Literal["user"] = "user"
    content: str
    form_submitted: bool = Field(default=False, alias="formSubmitted")

    @field_validator("content")
    @classmethod
    def _content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("content must be non-empty")
        return v

    @classmethod
    def for_form_submission(cls, form_data: Mapping[str, Any]) -> "OutboundMessage":
        """Build the message sent when the user submits a dynamic form."""
        return cls(content=json.dumps(dict(form_data), indent=2, ensure_ascii=False), form_submitted=True)

    def to_body(self, *, legacy: bool = False) -> Dict[str, Any]:
        """Return the JSON request body for the selected protocol."""
        if legacy:
            return {"message": {"role": self.role, "content": self.content}}
        return self.model_dump(by_alias=True)


__all__ = ["OutboundMessage"]
