"""Cancellation error type.

Raised by a stream session when it observes that its token was cancelled
(for example because the user switched conversations mid-stream).
"""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when a stream session is abandoned cooperatively.

    Distinct from ``asyncio.CancelledError``: this one is requested through a
    :class:`CancellationToken` and is mapped to ``ErrorCode.CANCELLED`` and a
    ``CANCELLED`` session state instead of propagating.
    """


__all__ = ["CancelledError"]
