"""Stream session helper functions: structured logging and terminal results."""
from __future__ import annotations

import logging
import time
from typing import List, Optional

from ..base.errors import ChatStreamError, ErrorCode, to_stream_error
from ..base.logging import LogContext, normalized_log_event
from ..base.models import ChatMessage, Frame, MessageFragment
from .metrics import StreamMetrics
from .result import SessionResult, SessionState


def log_transition(
    logger: logging.Logger,
    ctx: LogContext,
    previous: SessionState,
    state: SessionState,
    metrics: StreamMetrics,
) -> None:
    normalized_log_event(
        logger,
        "session.state",
        ctx,
        phase="transition",
        state=state.value,
        emitted=metrics.snapshots,
        previous=previous.value,
        level=logging.DEBUG,
    )


def log_frame(logger: logging.Logger, ctx: LogContext, frame: Frame, fragment: MessageFragment, metrics: StreamMetrics) -> None:
    """Debug-level trace of one interpreted frame (content is never logged)."""
    normalized_log_event(
        logger,
        "session.frame",
        ctx,
        phase="stream",
        state=SessionState.STREAMING.value,
        emitted=metrics.snapshots,
        level=logging.DEBUG,
        frame_chars=len(frame.text),
        delta_chars=len(fragment.content_delta),
        cumulative=fragment.content_is_cumulative,
        has_schema=fragment.form_schema_raw is not None,
    )


def log_warning(logger: logging.Logger, ctx: LogContext, warning: ChatStreamError, metrics: StreamMetrics) -> None:
    event = "decode.warning" if warning.code is ErrorCode.DECODE else "schema.warning"
    normalized_log_event(
        logger,
        event,
        ctx,
        phase="decode",
        error_code=warning.code.value,
        emitted=metrics.snapshots,
        level=logging.WARNING,
        message=warning.message,
    )


def log_http_error(logger: logging.Logger, ctx: LogContext, status: int, url: str) -> None:
    normalized_log_event(
        logger,
        "session.http_error",
        ctx,
        phase="open",
        state=SessionState.OPENING.value,
        error_code=ErrorCode.HTTP_STATUS.value,
        emitted=0,
        level=logging.WARNING,
        status=status,
        url=url,
    )


def completed_result(
    *,
    logger: logging.Logger,
    ctx: LogContext,
    final: ChatMessage,
    warnings: List[ChatStreamError],
    metrics: StreamMetrics,
    t0: float,
) -> SessionResult:
    """Build the ``COMPLETED`` result and emit ``session.end``."""
    metrics.total_duration_ms = (time.perf_counter() - t0) * 1000.0
    metrics.warnings = len(warnings)
    normalized_log_event(
        logger,
        "session.end",
        ctx,
        phase="finalize",
        state=SessionState.COMPLETED.value,
        emitted=metrics.snapshots,
        content_chars=len(final.content),
        has_schema=final.form_schema is not None,
        **metrics.as_dict(),
    )
    return SessionResult(
        state=SessionState.COMPLETED,
        final_message=final,
        warnings=list(warnings),
        metrics=metrics,
    )


def failed_result(
    *,
    logger: logging.Logger,
    ctx: LogContext,
    exc: BaseException,
    warnings: List[ChatStreamError],
    metrics: StreamMetrics,
    t0: float,
    phase: str,
    cancel_reason: Optional[str] = None,
) -> SessionResult:
    """Map ``exc`` to a ``FAILED``/``CANCELLED`` result and emit ``session.error``.

    ``cancel_reason`` is set when the caller's token was cancelled; whatever
    exception the abandoned read raised is then reported as a cancellation.
    """
    err = to_stream_error(exc)
    if cancel_reason is not None and err.code is not ErrorCode.CANCELLED:
        err = ChatStreamError(code=ErrorCode.CANCELLED, message=f"Stream cancelled: {cancel_reason}", raw=exc)
    state = SessionState.CANCELLED if err.code is ErrorCode.CANCELLED else SessionState.FAILED
    metrics.total_duration_ms = (time.perf_counter() - t0) * 1000.0
    metrics.warnings = len(warnings)
    normalized_log_event(
        logger,
        "session.error",
        ctx,
        phase=phase,
        state=state.value,
        error_code=err.code.value,
        emitted=metrics.snapshots,
        level=logging.INFO if state is SessionState.CANCELLED else logging.ERROR,
        error=err.message[:260],
        status=err.status,
        total_duration_ms=metrics.total_duration_ms,
    )
    return SessionResult(
        state=state,
        error=err.message or err.code.value,
        error_code=err.code,
        warnings=list(warnings),
        metrics=metrics,
    )


__all__ = [
    "log_transition",
    "log_frame",
    "log_warning",
    "log_http_error",
    "completed_result",
    "failed_result",
]
