"""Shared HTTP client pool for stream sessions.

Purpose:
    Reuse ``httpx.Client`` instances (and their connection pools) across
    synchronous stream sessions instead of allocating one per message.
    Timeouts derive from :func:`get_timeout_config`.

Lifecycle & cleanup:
    - Clients are cached by ``(base_url, purpose)``.
    - All clients are closed at interpreter exit via ``atexit``; tests call
      :func:`close_all_clients` explicitly.
    - Async sessions do not use this pool: an ``httpx.AsyncClient`` is bound
      to the event loop it was first used on, so ``StreamSession.arun``
      creates a session-scoped one unless the caller injects its own.
"""

from __future__ import annotations

import atexit
import threading
from typing import Dict, Mapping, Optional, Tuple

import httpx

from ..timeouts import get_timeout_config

_CLIENTS: Dict[Tuple[Optional[str], str], httpx.Client] = {}
_LOCK = threading.RLock()


def get_httpx_client(base_url: Optional[str], purpose: str = "stream") -> httpx.Client:
    """Return a pooled ``httpx.Client`` for the given base URL and purpose.

    Safe for concurrent use; creation per key is guarded by a re-entrant lock.
    """
    key = (base_url, purpose)
    client = _CLIENTS.get(key)
    if client is not None and not client.is_closed:
        return client

    with _LOCK:
        client = _CLIENTS.get(key)
        if client is not None and not client.is_closed:
            return client
        timeout = get_timeout_config().to_httpx()
        client = httpx.Client(base_url=base_url, timeout=timeout) if base_url else httpx.Client(timeout=timeout)
        _CLIENTS[key] = client
        return client


def new_async_client(
    base_url: Optional[str],
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> httpx.AsyncClient:
    """Build a fresh ``httpx.AsyncClient`` with the shared timeout policy."""
    kwargs = {"timeout": get_timeout_config().to_httpx(), "transport": transport, "headers": dict(headers or {})}
    if base_url:
        kwargs["base_url"] = base_url
    return httpx.AsyncClient(**kwargs)


def close_all_clients() -> None:
    """Close and clear all pooled HTTP clients."""
    with _LOCK:
        for c in _CLIENTS.values():
            try:
                c.close()
            except Exception:  # nosec B110 - shutdown path; nothing to recover
                pass
        _CLIENTS.clear()


atexit.register(close_all_clients)

__all__ = ["get_httpx_client", "new_async_client", "close_all_clients"]
