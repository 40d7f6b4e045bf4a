"""I/O-free decode pipeline shared by the sync and async session loops.

``StreamPipeline`` owns everything a session accumulates between reads: the
incremental UTF-8 decoder, the frame decoder, the interpreter and the
assembler. Callers push body bytes in with :meth:`StreamPipeline.feed_bytes`
and call :meth:`StreamPipeline.finish` once at end of body.
"""
from __future__ import annotations

import codecs
import logging
import time
from typing import Callable, Iterable, List, Optional, Union

from ..base.cancellation import CancellationToken
from ..base.errors import ChatStreamError
from ..base.logging import LogContext, get_logger
from ..base.models import ChatMessage, Frame, MessageFragment
from ..base.protocol import ContentMode, ProtocolMode
from .assembler import MessageAssembler
from .metrics import StreamMetrics
from .result import SessionResult
from .session_helpers import completed_result, failed_result, log_frame, log_warning
from .strategy import ProtocolStrategy, get_strategy

OnFragment = Callable[[ChatMessage], None]


class StreamPipeline:
    """Bytes in, ``on_fragment`` snapshots out, final message at the end.

    ``on_fragment`` runs synchronously for every applied fragment, in frame
    arrival order, and always before the next chunk is accepted. When a
    cancellation token is given it is checked right before each callback.
    """

    def __init__(
        self,
        strategy: ProtocolStrategy,
        *,
        content_mode: "str | ContentMode" = ContentMode.AUTO,
        on_fragment: Optional[OnFragment] = None,
        cancellation_token: Optional[CancellationToken] = None,
        assembler: Optional[MessageAssembler] = None,
        logger: Optional[logging.Logger] = None,
        ctx: Optional[LogContext] = None,
        metrics: Optional[StreamMetrics] = None,
    ) -> None:
        self.strategy = strategy
        self.decoder = strategy.new_decoder()
        self.interpreter = strategy.new_interpreter(ContentMode.parse(content_mode))
        self.assembler = assembler or MessageAssembler()
        self.ctx = ctx or LogContext(protocol=strategy.mode.value)
        self.metrics = metrics or StreamMetrics()
        self.warnings: List[ChatStreamError] = []
        self._text = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._on_fragment = on_fragment
        self._token = cancellation_token
        self._logger = logger or get_logger("chatstream.streaming")
        self._decoder_warnings_seen = 0
        self._t0 = time.perf_counter()

    def feed_bytes(self, data: bytes) -> None:
        if not data:
            return
        self.metrics.reads += 1
        self.metrics.bytes_received += len(data)
        self.feed_text(self._text.decode(data))

    def feed_text(self, text: str) -> None:
        frames = self.decoder.feed(text) if text else []
        self._collect_decoder_warnings()
        for frame in frames:
            self._dispatch(frame)

    def finish(self) -> ChatMessage:
        """Flush every stage and return the finalized message."""
        self.feed_text(self._text.decode(b"", final=True))
        frames, warning = self.decoder.finalize()
        self._collect_decoder_warnings()
        for frame in frames:
            self._dispatch(frame)
        if warning is not None:
            self._warn(warning)
        tail = self.interpreter.flush()
        if tail is not None:
            self._apply(tail)
        final = self.assembler.finalize()
        for w in self.assembler.warnings:
            self._warn(w)
        self.ctx.message_id = final.id
        return final

    def _collect_decoder_warnings(self) -> None:
        pending = self.decoder.warnings[self._decoder_warnings_seen:]
        self._decoder_warnings_seen = len(self.decoder.warnings)
        for w in pending:
            self._warn(w)

    def _dispatch(self, frame: Frame) -> None:
        self.metrics.frames += 1
        if frame.blank:
            self.metrics.blank_frames += 1
            return
        fragment = self.interpreter.interpret(frame)
        if self._logger.isEnabledFor(logging.DEBUG):
            log_frame(self._logger, self.ctx, frame, fragment, self.metrics)
        self._apply(fragment)

    def _apply(self, fragment: MessageFragment) -> None:
        for w in fragment.warnings:
            self._warn(w)
        if fragment.empty:
            return
        snapshot = self.assembler.apply(fragment)
        if snapshot.id and not self.ctx.message_id:
            self.ctx.message_id = snapshot.id
        if self._token is not None:
            self._token.raise_if_cancelled()
        if self._on_fragment is not None:
            self._on_fragment(snapshot)
        self.metrics.snapshots += 1
        if self.metrics.time_to_first_snapshot_ms is None:
            self.metrics.time_to_first_snapshot_ms = (time.perf_counter() - self._t0) * 1000.0

    def _warn(self, warning: ChatStreamError) -> None:
        self.warnings.append(warning)
        self.metrics.warnings = len(self.warnings)
        log_warning(self._logger, self.ctx, warning, self.metrics)


def decode_body(
    chunks: Iterable[Union[bytes, str]],
    mode: "str | ProtocolMode" = ProtocolMode.SENTINEL_JSON,
    *,
    content_mode: "str | ContentMode" = ContentMode.AUTO,
    on_fragment: Optional[OnFragment] = None,
    assembler: Optional[MessageAssembler] = None,
    logger: Optional[logging.Logger] = None,
) -> SessionResult:
    """Run an already captured response body through the decode pipeline.

    ``chunks`` are treated as successive body reads; ``str`` chunks are
    UTF-8 encoded first. Used for offline replay and by tests; there is no
    HTTP involved, so the result is ``COMPLETED`` or ``FAILED`` (protocol
    errors, callback errors).
    """
    log = logger or get_logger("chatstream.streaming")
    strategy = get_strategy(mode)
    pipeline = StreamPipeline(
        strategy,
        content_mode=content_mode,
        on_fragment=on_fragment,
        assembler=assembler,
        logger=log,
    )
    t0 = time.perf_counter()
    try:
        for chunk in chunks:
            pipeline.feed_bytes(chunk.encode("utf-8") if isinstance(chunk, str) else chunk)
        final = pipeline.finish()
    except Exception as e:
        return failed_result(
            logger=log,
            ctx=pipeline.ctx,
            exc=e,
            warnings=pipeline.warnings,
            metrics=pipeline.metrics,
            t0=t0,
            phase="decode",
        )
    return completed_result(
        logger=log,
        ctx=pipeline.ctx,
        final=final,
        warnings=pipeline.warnings,
        metrics=pipeline.metrics,
        t0=t0,
    )


__all__ = ["OnFragment", "StreamPipeline", "decode_body"]
