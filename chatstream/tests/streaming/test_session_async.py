"""Stream session tests for the async ``arun`` loop."""
from __future__ import annotations

import asyncio

import httpx

from chatstream.base.cancellation import CancellationToken
from chatstream.base.errors import ErrorCode
from chatstream.streaming import SessionState, StreamSession

from .helpers import SEP, Recorder, async_client, config, sentinel_body, sentinel_frame

CUMULATIVE_BODY = sentinel_body(sentinel_frame("Hi"), sentinel_frame("Hi there"))


def test_arun_split_reads():
    body = CUMULATIVE_BODY.encode("utf-8")
    rec = Recorder()
    seen = []

    async def main():
        async with async_client([body[:25], body[25:]], recorder=rec) as client:
            session = StreamSession(config=config(), async_client=client)
            return await session.arun("agent-1", "conv-1", "hello", seen.append)

    result = asyncio.run(main())
    assert [s.content for s in seen] == ["Hi", "Hi there"]
    assert result.ok and result.final_message.content == "Hi there"
    assert rec.last.url.path == "/api/chat/forward/agent-1/conv-1"


def test_arun_http_error():
    seen = []

    async def main():
        async with async_client([CUMULATIVE_BODY], status=404) as client:
            return await StreamSession(config=config(), async_client=client).arun("a", "c", "hello", seen.append)

    result = asyncio.run(main())
    assert result.error == "HTTP error! status: 404"
    assert result.state is SessionState.FAILED
    assert seen == []


def test_arun_token_cancelled_between_reads():
    token = CancellationToken()
    chunks = [sentinel_frame("Hi") + SEP, sentinel_frame("Hi there") + SEP]
    seen = []

    def cancel_before_second_read(i):
        if i == 1:
            token.cancel("navigated away")

    async def main():
        async with async_client(chunks, on_chunk=cancel_before_second_read) as client:
            session = StreamSession(config=config(), async_client=client, cancellation_token=token)
            return await session.arun("a", "c", "hello", seen.append)

    result = asyncio.run(main())
    assert [s.content for s in seen] == ["Hi"]
    assert result.state is SessionState.CANCELLED
    assert result.error_code is ErrorCode.CANCELLED
    assert result.error == "Stream cancelled: navigated away"


def test_concurrent_sessions_do_not_share_state():
    async def run_one(content):
        async with async_client([sentinel_body(sentinel_frame(content, msg_id=content))]) as client:
            return await StreamSession(config=config(), async_client=client).arun("a", content, "hello")

    async def main():
        return await asyncio.gather(*(run_one(c) for c in ("alpha", "beta", "gamma")))

    results = asyncio.run(main())
    assert [(r.final_message.id, r.final_message.content) for r in results] == [
        ("alpha", "alpha"),
        ("beta", "beta"),
        ("gamma", "gamma"),
    ]


def test_task_cancellation_marks_session_cancelled_and_propagates():
    started = []

    async def slow_body():
        yield (sentinel_frame("Hi") + SEP).encode("utf-8")
        started.append(True)
        await asyncio.sleep(10)
        yield b""

    def handler(request):
        return httpx.Response(200, content=slow_body())

    async def main():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            session = StreamSession(config=config(), async_client=client)
            task = asyncio.create_task(session.arun("a", "c", "hello"))
            while not started:
                await asyncio.sleep(0)
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                return session, True
            return session, False

    session, raised = asyncio.run(main())
    assert raised is True
    assert session.state is SessionState.CANCELLED
    assert session.result.error_code is ErrorCode.CANCELLED
