"""
Caller-facing chat streaming API.

Purpose
-------
The single contract the presentation layer depends on: hand over an agent
id, a conversation id, an outbound message and a per-fragment callback; get
back a :class:`SessionResult` holding either the final message or a stable
error string. The callback always receives a full immutable
``ChatMessage`` snapshot, never a raw delta.

Also hosts the small message builders the UI uses around a stream (the
echoed user message and the assistant-side error message).

Fallback semantics
------------------
- Transport, protocol and callback failures never raise out of
  ``stream_chat``/``astream_chat``; they come back as ``result.error``.
- Invalid arguments (blank message, missing ids, a reused session) raise
  ``ValueError``/``RuntimeError`` immediately; those are caller bugs.
"""
from __future__ import annotations

import time
import uuid
from typing import Any, Mapping, Optional

import httpx

from ..base.cancellation import CancellationToken
from ..base.models import ChatMessage, OutboundMessage
from ..config import ChatClientConfig
from ..streaming import MessageInput, OnFragment, SessionResult, StreamSession

ERROR_PREFIX = "Error: "


def stream_chat(
    agent: str,
    conversation_id: str,
    message: MessageInput,
    on_fragment: Optional[OnFragment] = None,
    *,
    config: Optional[ChatClientConfig] = None,
    client: Optional[httpx.Client] = None,
    cancellation_token: Optional[CancellationToken] = None,
) -> SessionResult:
    """Stream one reply synchronously through a fresh :class:`StreamSession`."""
    session = StreamSession(config=config, client=client, cancellation_token=cancellation_token)
    return session.run(agent, conversation_id, message, on_fragment)


async def astream_chat(
    agent: str,
    conversation_id: str,
    message: MessageInput,
    on_fragment: Optional[OnFragment] = None,
    *,
    config: Optional[ChatClientConfig] = None,
    client: Optional[httpx.AsyncClient] = None,
    cancellation_token: Optional[CancellationToken] = None,
) -> SessionResult:
    """Async twin of :func:`stream_chat`."""
    session = StreamSession(config=config, async_client=client, cancellation_token=cancellation_token)
    return await session.arun(agent, conversation_id, message, on_fragment)


def submit_form(
    agent: str,
    conversation_id: str,
    form_data: Mapping[str, Any],
    on_fragment: Optional[OnFragment] = None,
    **kwargs: Any,
) -> SessionResult:
    """Send a filled-in dynamic form back to the agent and stream the reply."""
    return stream_chat(agent, conversation_id, OutboundMessage.for_form_submission(form_data), on_fragment, **kwargs)


def build_user_echo(message: MessageInput, *, timestamp: Optional[int] = None) -> ChatMessage:
    """Build the user-side message shown in the transcript before streaming.

    Form submissions are rendered as a fenced ``json`` block so the UI shows
    the submitted values verbatim.
    """
    outbound = message if isinstance(message, OutboundMessage) else OutboundMessage(content=message)
    content = outbound.content
    if outbound.form_submitted:
        content = f"```json\n{content}\n```"
    return ChatMessage(
        id=str(uuid.uuid4()),
        role="user",
        content=content,
        timestamp=timestamp if timestamp is not None else int(time.time() * 1000),
    )


def build_error_message(error: str, *, timestamp: Optional[int] = None) -> ChatMessage:
    """Build the assistant message rendered when a session failed."""
    return ChatMessage(
        id=str(uuid.uuid4()),
        role="assistant",
        content=f"{ERROR_PREFIX}{error or 'unknown error'}",
        timestamp=timestamp if timestamp is not None else int(time.time() * 1000),
    )


def message_for_result(result: SessionResult) -> ChatMessage:
    """Return what the transcript should keep for a finished session."""
    if result.final_message is not None:
        return result.final_message
    return build_error_message(result.error or "")


__all__ = [
    "stream_chat",
    "astream_chat",
    "submit_form",
    "build_user_echo",
    "build_error_message",
    "message_for_result",
    "ERROR_PREFIX",
]
