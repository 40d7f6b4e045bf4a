"""chatstream.config.defaults
==========================

Central place for small, stable default values used by the client and its
CLI. These can be overridden via environment variables, an external config
file or explicit overrides (see :mod:`chatstream.config`).

Only plain constants live here; no I/O and no imports from other chatstream
packages besides the protocol enums.
"""

from __future__ import annotations

from ..base.protocol import ContentMode, ProtocolMode

# ---- Service / HTTP layer ----

# Agent server the UI talks to during local development.
DEFAULT_BASE_URL = "http://localhost:8000"
# Wire protocol spoken by current agent servers.
DEFAULT_PROTOCOL = ProtocolMode.SENTINEL_JSON
# How sentinel-protocol chatContent values combine.
DEFAULT_CONTENT_MODE = ContentMode.AUTO

# ---- Logging ----

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_JSON_LOGS = True

# ---- CLI Defaults ----

# Read size used when the decode subcommand replays a captured body.
CLI_DEFAULT_CHUNK_SIZE = 4096

__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_PROTOCOL",
    "DEFAULT_CONTENT_MODE",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_JSON_LOGS",
    "CLI_DEFAULT_CHUNK_SIZE",
]
