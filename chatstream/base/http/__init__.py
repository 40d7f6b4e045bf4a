"""HTTP utilities package.

Exposes pooled sync ``httpx`` clients and an async client factory.
"""

from .client import close_all_clients, get_httpx_client, new_async_client

__all__ = ["get_httpx_client", "new_async_client", "close_all_clients"]
