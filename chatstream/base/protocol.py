"""Wire protocol constants and mode enums.

Kept in the base layer so that configuration and the streaming package can
both depend on it without importing each other.
"""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

CHUNK_SEPARATOR = "__CHUNK_SEPARATOR__"
FORM_START_TAG = "<dynamic_form_schema>"
FORM_END_TAG = "</dynamic_form_schema>"

CURRENT_PATH_TEMPLATE = "/api/chat/forward/{agent}/{conversation_id}"
LEGACY_PATH_TEMPLATE = "/api/chat/{agent}/{conversation_id}"


class ProtocolMode(str, Enum):
    """Selected once per stream session."""

    SENTINEL_JSON = "sentinel"
    INLINE_TAG = "inline_tag"

    @classmethod
    def parse(cls, value: "str | ProtocolMode") -> "ProtocolMode":
        """Accept enum values plus the ``current``/``legacy`` aliases."""
        if isinstance(value, ProtocolMode):
            return value
        key = str(value).strip().lower().replace("-", "_")
        aliases = {
            "sentinel": cls.SENTINEL_JSON,
            "sentinel_json": cls.SENTINEL_JSON,
            "current": cls.SENTINEL_JSON,
            "inline_tag": cls.INLINE_TAG,
            "inline": cls.INLINE_TAG,
            "legacy": cls.INLINE_TAG,
        }
        if key not in aliases:
            raise ValueError(f"unknown protocol mode: {value!r}")
        return aliases[key]


class ContentMode(str, Enum):
    """How sentinel-protocol ``chatContent`` values combine.

    AUTO treats each value as the whole message so far when it extends what
    was already accumulated, and as a delta otherwise. DELTA always appends.
    """

    AUTO = "auto"
    DELTA = "delta"

    @classmethod
    def parse(cls, value: "str | ContentMode") -> "ContentMode":
        if isinstance(value, ContentMode):
            return value
        return cls(str(value).strip().lower())


def coerce_timestamp(value: Any) -> Optional[int]:
    """Normalize a wire timestamp to epoch milliseconds.

    Accepts ints/floats (already ms), numeric strings and ISO-8601 strings.
    Returns ``None`` for anything else, including booleans.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        return int(float(text))
    except ValueError:
        pass
    try:
        dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


__all__ = [
    "CHUNK_SEPARATOR",
    "FORM_START_TAG",
    "FORM_END_TAG",
    "CURRENT_PATH_TEMPLATE",
    "LEGACY_PATH_TEMPLATE",
    "ProtocolMode",
    "ContentMode",
    "coerce_timestamp",
]
