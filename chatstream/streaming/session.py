"""Stream session: one outbound message, one streamed assistant reply.

State machine::

    IDLE -> OPENING -> STREAMING -> COMPLETED
                 \\           \\-> FAILED | CANCELLED
                  \\-> FAILED | CANCELLED

``run`` drives the loop on a pooled ``httpx.Client``; ``arun`` is the
``httpx.AsyncClient`` twin. Both return a :class:`SessionResult` instead of
raising for transport, protocol or callback failures. A session object is
single use; sessions share no mutable state and may run concurrently.

Cancellation: the optional token is polled before every body read and before
every ``on_fragment`` callback. In ``run`` cancelling also closes the
in-flight response so a blocked read returns promptly. If the task running
``arun`` is itself cancelled, the session records ``CANCELLED`` and lets
``asyncio.CancelledError`` propagate.
"""
from __future__ import annotations

import asyncio
import time
import uuid
from typing import Any, Dict, Optional, Union

import httpx

from ..base.cancellation import CancellationToken
from ..base.errors import TransportError
from ..base.http import get_httpx_client, new_async_client
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.models import ChatMessage, OutboundMessage
from ..config import ChatClientConfig, load_config
from .assembler import MessageAssembler
from .pipeline import OnFragment, StreamPipeline
from .result import SessionResult, SessionState
from .session_helpers import completed_result, failed_result, log_http_error, log_transition
from .strategy import get_strategy

MessageInput = Union[str, OutboundMessage]


class StreamSession:
    """Runs a single chat stream and tracks its state."""

    def __init__(
        self,
        *,
        config: Optional[ChatClientConfig] = None,
        client: Optional[httpx.Client] = None,
        async_client: Optional[httpx.AsyncClient] = None,
        cancellation_token: Optional[CancellationToken] = None,
        assembler: Optional[MessageAssembler] = None,
    ) -> None:
        self.config = config or load_config()
        self.strategy = get_strategy(self.config.protocol)
        self.state = SessionState.IDLE
        self.result: Optional[SessionResult] = None
        self.session_id = uuid.uuid4().hex[:12]
        self.ctx = LogContext(session_id=self.session_id, protocol=self.strategy.mode.value)
        self._client = client
        self._async_client = async_client
        self._token = cancellation_token
        self._assembler = assembler
        self._logger = get_logger("chatstream.session", json_mode=self.config.json_logs)
        self._pipeline: Optional[StreamPipeline] = None
        self._t0 = 0.0
        self._phase = "open"

    @property
    def cancellation_token(self) -> Optional[CancellationToken]:
        return self._token

    def run(
        self,
        agent: str,
        conversation_id: str,
        message: MessageInput,
        on_fragment: Optional[OnFragment] = None,
    ) -> SessionResult:
        """Send ``message`` and stream the reply synchronously."""
        url, body = self._begin(agent, conversation_id, message, on_fragment)
        pipeline = self._pipeline
        assert pipeline is not None
        client = self._client or get_httpx_client(None)
        try:
            self._raise_if_cancelled()
            with client.stream("POST", url, json=body, headers=self._headers()) as response:
                unregister = self._token.on_cancel(lambda _reason: response.close()) if self._token else None
                try:
                    self._check_status(response, url)
                    self._transition(SessionState.STREAMING)
                    for chunk in response.iter_bytes():
                        self._raise_if_cancelled()
                        pipeline.feed_bytes(chunk)
                    self._raise_if_cancelled()
                    final = pipeline.finish()
                finally:
                    if unregister is not None:
                        unregister()
        except Exception as e:
            return self._fail(e)
        return self._complete(final)

    async def arun(
        self,
        agent: str,
        conversation_id: str,
        message: MessageInput,
        on_fragment: Optional[OnFragment] = None,
    ) -> SessionResult:
        """Async twin of :meth:`run`; the awaited body read is the only suspension point."""
        url, body = self._begin(agent, conversation_id, message, on_fragment)
        pipeline = self._pipeline
        assert pipeline is not None
        owns_client = self._async_client is None
        client = self._async_client or new_async_client(None)
        try:
            self._raise_if_cancelled()
            async with client.stream("POST", url, json=body, headers=self._headers()) as response:
                self._check_status(response, url)
                self._transition(SessionState.STREAMING)
                async for chunk in response.aiter_bytes():
                    self._raise_if_cancelled()
                    pipeline.feed_bytes(chunk)
                self._raise_if_cancelled()
                final = pipeline.finish()
        except asyncio.CancelledError as e:
            self._fail(e)
            raise
        except Exception as e:
            return self._fail(e)
        finally:
            if owns_client:
                await client.aclose()
        return self._complete(final)

    # ------------------------------------------------------------------ steps

    def _begin(
        self,
        agent: str,
        conversation_id: str,
        message: MessageInput,
        on_fragment: Optional[OnFragment],
    ) -> "tuple[str, Dict[str, Any]]":
        if self.state is not SessionState.IDLE:
            raise RuntimeError(f"stream session already used (state={self.state.value})")
        outbound = message if isinstance(message, OutboundMessage) else OutboundMessage(content=message)
        url = self.config.url_for(self.strategy.endpoint(agent, conversation_id))
        self.ctx.agent = agent
        self.ctx.conversation_id = conversation_id
        self._t0 = time.perf_counter()
        self._pipeline = StreamPipeline(
            self.strategy,
            content_mode=self.config.content_mode,
            on_fragment=on_fragment,
            cancellation_token=self._token,
            assembler=self._assembler,
            logger=self._logger,
            ctx=self.ctx,
        )
        self._transition(SessionState.OPENING)
        normalized_log_event(
            self._logger,
            "session.open",
            self.ctx,
            phase="open",
            state=self.state.value,
            emitted=0,
            url=url,
            form_submitted=outbound.form_submitted,
        )
        return url, self.strategy.body(outbound)

    def _headers(self) -> Dict[str, str]:
        return {"Accept": "*/*", **self.config.headers}

    def _check_status(self, response: httpx.Response, url: str) -> None:
        if not response.is_success:
            log_http_error(self._logger, self.ctx, response.status_code, url)
            raise TransportError.for_status(response.status_code)

    def _raise_if_cancelled(self) -> None:
        if self._token is not None:
            self._token.raise_if_cancelled()

    def _transition(self, state: SessionState) -> None:
        previous, self.state = self.state, state
        if state is SessionState.STREAMING:
            self._phase = "stream"
        metrics = self._pipeline.metrics if self._pipeline is not None else None
        if metrics is not None:
            log_transition(self._logger, self.ctx, previous, state, metrics)

    def _complete(self, final: ChatMessage) -> SessionResult:
        pipeline = self._pipeline
        assert pipeline is not None
        self._transition(SessionState.COMPLETED)
        self.result = completed_result(
            logger=self._logger,
            ctx=self.ctx,
            final=final,
            warnings=pipeline.warnings,
            metrics=pipeline.metrics,
            t0=self._t0,
        )
        return self.result

    def _fail(self, exc: BaseException) -> SessionResult:
        pipeline = self._pipeline
        assert pipeline is not None
        cancelled = self._token is not None and self._token.cancelled
        result = failed_result(
            logger=self._logger,
            ctx=self.ctx,
            exc=exc,
            warnings=pipeline.warnings,
            metrics=pipeline.metrics,
            t0=self._t0,
            phase=self._phase,
            cancel_reason=(self._token.reason or "operation cancelled") if cancelled else None,
        )
        self._transition(result.state)
        self.result = result
        return result


__all__ = ["StreamSession", "MessageInput"]
