"""Structured logging context for stream sessions.

``LogContext`` carries the fields every session log line shares (agent,
conversation, session and message ids, protocol). ``to_dict`` merges
``extra`` and prunes ``None`` values.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Structured context for stream session logging events."""

    agent: Optional[str] = None
    conversation_id: Optional[str] = None
    session_id: Optional[str] = None
    message_id: Optional[str] = None
    protocol: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra", {}) or {}
        data.update({k: v for k, v in extra.items() if v is not None})
        return {k: v for k, v in data.items() if v is not None}


__all__ = ["LogContext"]
