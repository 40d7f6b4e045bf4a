"""Cooperative cancellation token for stream sessions.

A session polls its token before every body read and before every
``on_fragment`` callback. Callers that need a faster release (a blocked read
on a slow server) can register ``on_cancel`` hooks; the session uses one to
close the in-flight response.
"""

from __future__ import annotations

import logging
from contextlib import suppress
from threading import Lock
from typing import Callable, List, Optional

from .cancelled_error import CancelledError
from .state import State

_log = logging.getLogger("chatstream.cancellation")


class CancellationToken:
    """A cooperative cancellation token with cascading children.

    Thread-safe for ``cancel`` from a UI thread while a session reads on
    another. A page-level parent can hand one child token to each session so
    that leaving the page abandons all of them at once.
    """

    def __init__(self, *, parent: "CancellationToken | None" = None) -> None:
        self._state = State()
        self._lock = Lock()
        self._children: List[CancellationToken] = []
        if parent is not None:
            parent.link_child(self)

    @property
    def cancelled(self) -> bool:  # noqa: D401 - short form
        """Whether cancellation has been requested."""
        return self._state.cancelled

    @property
    def reason(self) -> str | None:  # noqa: D401 - short form
        """Reason string supplied at cancel time (if any)."""
        return self._state.reason

    def cancel(self, reason: str | None = None) -> None:
        """Request cancellation, run ``on_cancel`` hooks, cascade to children.

        Idempotent: only the first call records a reason and fires hooks.
        """
        with self._lock:
            if self._state.cancelled:
                return
            self._state.cancelled = True
            self._state.reason = reason
            callbacks = list(self._state.callbacks)
            self._state.callbacks.clear()
            children = list(self._children)
        for cb in callbacks:
            self._run_callback(cb, reason)
        for child in children:
            child.cancel(reason)

    def on_cancel(self, callback: Callable[[Optional[str]], None]) -> Callable[[], None]:
        """Register ``callback(reason)``; returns a function that unregisters it.

        If the token is already cancelled the callback runs immediately.
        """
        with self._lock:
            if not self._state.cancelled:
                self._state.callbacks.append(callback)

                def _unregister() -> None:
                    with self._lock, suppress(ValueError):
                        self._state.callbacks.remove(callback)

                return _unregister
            reason = self._state.reason
        self._run_callback(callback, reason)
        return lambda: None

    def link_child(self, token: "CancellationToken") -> "CancellationToken":
        """Link a child token so parent cancellation cascades (returns child)."""
        with self._lock:
            self._children.append(token)
            should_cancel = self._state.cancelled
            reason = self._state.reason
        if should_cancel:
            token.cancel(reason)
        return token

    def raise_if_cancelled(self) -> None:
        """Raise ``CancelledError`` if token is cancelled."""
        if self._state.cancelled:
            raise CancelledError(self._state.reason or "operation cancelled")

    def child(self) -> "CancellationToken":
        """Create and link a child token (shortcut)."""
        return CancellationToken(parent=self)

    @staticmethod
    def _run_callback(cb: Callable[[Optional[str]], None], reason: Optional[str]) -> None:
        try:
            cb(reason)
        except Exception:  # remaining hooks still run
            _log.exception("cancellation hook failed")

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return (
            f"CancellationToken(cancelled={self._state.cancelled}, "
            f"reason={self._state.reason!r}, children={len(self._children)})"
        )


__all__ = ["CancellationToken"]
