"""Cooperative cancellation primitives (public API facade).

``CancellationToken`` lets a caller abandon an in-flight stream session;
``CancelledError`` is what the session raises internally when it notices.
"""

from .cancellation_parts.cancelled_error import CancelledError
from .cancellation_parts.cancellation_token import CancellationToken

__all__ = ["CancellationToken", "CancelledError"]
