"""Unit tests for the shared httpx client pool.

Covers:
- Same key (base_url, purpose) returns the same instance.
- Different purpose or base_url yields different instances.
- Closed clients are replaced; async clients pick up the timeout policy.
"""
from __future__ import annotations

import asyncio

from chatstream.base.http import close_all_clients, get_httpx_client, new_async_client


def setup_function(_):
    close_all_clients()


def teardown_function(_):
    close_all_clients()


def test_same_key_returns_same_instance():
    c1 = get_httpx_client("https://agents.example.com", purpose="stream")
    c2 = get_httpx_client("https://agents.example.com", purpose="stream")
    assert c1 is c2, "Expected pooled client instances to be identical for same key"


def test_different_purpose_or_base_url_returns_different_instances():
    c1 = get_httpx_client("https://agents.example.com", purpose="stream")
    assert c1 is not get_httpx_client("https://agents.example.com", purpose="other")
    assert c1 is not get_httpx_client("https://agents.other.com", purpose="stream")


def test_closed_client_is_replaced():
    c1 = get_httpx_client(None)
    c1.close()
    c2 = get_httpx_client(None)
    assert c2 is not c1 and not c2.is_closed


def test_timeouts_follow_env(monkeypatch):
    monkeypatch.setenv("CHATSTREAM_TIMEOUT_READ_SECONDS", "7")
    client = get_httpx_client("https://agents.example.com", purpose="timeouts")
    assert client.timeout.read == 7.0

    async def build():
        async with new_async_client("https://agents.example.com", headers={"X-A": "1"}) as ac:
            return ac.timeout.read, ac.headers["x-a"]

    assert asyncio.run(build()) == (7.0, "1")
