"""Session state machine values and the terminal result DTO."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..base.errors import ChatStreamError, ErrorCode
from ..base.models import ChatMessage
from .metrics import StreamMetrics


class SessionState(str, Enum):
    IDLE = "idle"
    OPENING = "opening"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def terminal(self) -> bool:
        return self in (SessionState.COMPLETED, SessionState.FAILED, SessionState.CANCELLED)


@dataclass
class SessionResult:
    """Outcome of one stream session.

    Exactly one of ``final_message`` (state ``COMPLETED``) and ``error``
    (``FAILED`` or ``CANCELLED``) is set. A failed session never returns the
    partial message; callers already saw it through ``on_fragment``.
    ``warnings`` holds the non-fatal decode and schema problems in the order
    they were observed.
    """

    state: SessionState
    final_message: Optional[ChatMessage] = None
    error: Optional[str] = None
    error_code: Optional[ErrorCode] = None
    warnings: List[ChatStreamError] = field(default_factory=list)
    metrics: StreamMetrics = field(default_factory=StreamMetrics)

    @property
    def ok(self) -> bool:
        return self.state is SessionState.COMPLETED and self.final_message is not None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"state": self.state.value}
        if self.final_message is not None:
            data["finalMessage"] = self.final_message.to_dict()
        if self.error is not None:
            data["error"] = self.error
            data["errorCode"] = self.error_code.value if self.error_code else None
        if self.warnings:
            data["warnings"] = [{"code": w.code.value, "message": w.message} for w in self.warnings]
        data["metrics"] = self.metrics.as_dict()
        return data


__all__ = ["SessionState", "SessionResult"]
