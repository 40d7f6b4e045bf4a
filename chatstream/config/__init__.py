"""Unified configuration layer for the chat stream client.

Goals
-----
* Centralize defaults (base URL, protocol, content mode, logging).
* Merge sources in a predictable order (later wins):
    1. Built-in defaults (:mod:`chatstream.config.defaults`)
    2. Optional external config file (JSON or YAML) pointed to by
       CHATSTREAM_CONFIG_FILE
    3. Environment variables
    4. In-code overrides passed to :func:`load_config`
* Provide a single call site: ``load_config(overrides=None)``.

Environment Variable Conventions
--------------------------------
CHATSTREAM_BASE_URL, CHATSTREAM_PROTOCOL, CHATSTREAM_CONTENT_MODE,
CHATSTREAM_LOG_LEVEL, CHATSTREAM_JSON_LOGS. Timeouts are configured
separately through :mod:`chatstream.base.timeouts`.

External Config File (Optional)
-------------------------------
JSON is tried first, then YAML. Keys may sit at the top level or under a
``chatstream`` section:

```
chatstream:
  base_url: https://agents.example.com
  protocol: legacy
  headers:
    X-Client: web
```
"""
from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from ..base.protocol import ContentMode, ProtocolMode
from .defaults import (
    DEFAULT_BASE_URL,
    DEFAULT_CONTENT_MODE,
    DEFAULT_JSON_LOGS,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PROTOCOL,
)

CONFIG_FILE_ENV = "CHATSTREAM_CONFIG_FILE"

ENV_FIELD_MAP = {
    "base_url": "CHATSTREAM_BASE_URL",
    "protocol": "CHATSTREAM_PROTOCOL",
    "content_mode": "CHATSTREAM_CONTENT_MODE",
    "log_level": "CHATSTREAM_LOG_LEVEL",
    "json_logs": "CHATSTREAM_JSON_LOGS",
}

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class ChatClientConfig:
    """Resolved client settings for one or more stream sessions."""

    base_url: str = DEFAULT_BASE_URL
    protocol: ProtocolMode = DEFAULT_PROTOCOL
    content_mode: ContentMode = DEFAULT_CONTENT_MODE
    headers: Mapping[str, str] = field(default_factory=dict)
    json_logs: bool = DEFAULT_JSON_LOGS
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self) -> None:
        # frozen: normalize through object.__setattr__
        object.__setattr__(self, "base_url", str(self.base_url).rstrip("/"))
        object.__setattr__(self, "protocol", ProtocolMode.parse(self.protocol))
        object.__setattr__(self, "content_mode", ContentMode.parse(self.content_mode))
        object.__setattr__(self, "headers", {str(k): str(v) for k, v in dict(self.headers or {}).items()})
        object.__setattr__(self, "json_logs", _as_bool(self.json_logs))
        object.__setattr__(self, "log_level", str(self.log_level).upper())
        if not self.base_url:
            raise ValueError("base_url must be non-empty")

    def url_for(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def with_overrides(self, **overrides: Any) -> "ChatClientConfig":
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUTHY:
        return True
    if text in _FALSY:
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _load_external_config() -> Dict[str, Any]:
    """Read the file named by CHATSTREAM_CONFIG_FILE (JSON first, then YAML).

    A missing variable or file yields ``{}``; a file that is neither valid
    JSON nor YAML raises ``ValueError``.
    """
    path = os.getenv(CONFIG_FILE_ENV)
    if not path:
        return {}
    p = Path(path).expanduser()
    if not p.exists():
        return {}
    text = p.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except ValueError:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"{CONFIG_FILE_ENV}={path} is neither JSON nor YAML: {e}") from e
    if not isinstance(data, dict):
        return {}
    section = data.get("chatstream")
    return dict(section) if isinstance(section, dict) else data


def _env_overrides() -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, var in ENV_FIELD_MAP.items():
        val = os.getenv(var)
        if val is not None and val.strip():
            out[key] = val.strip()
    return out


def load_config(overrides: Optional[Mapping[str, Any]] = None) -> ChatClientConfig:
    """Return the merged client configuration.

    Merge order (later wins): defaults -> external config -> env vars -> overrides.
    ``headers`` are merged key by key across sources; unknown keys are ignored.
    """
    known = set(ChatClientConfig.__dataclass_fields__)
    cfg: Dict[str, Any] = {}
    headers: Dict[str, str] = {}
    for source in (_load_external_config(), _env_overrides(), dict(overrides or {})):
        for key, value in source.items():
            if key not in known or value is None:
                continue
            if key == "headers":
                headers |= dict(value)
            else:
                cfg[key] = value
    return ChatClientConfig(headers=headers, **cfg)


__all__ = [
    "ChatClientConfig",
    "load_config",
    "CONFIG_FILE_ENV",
    "ENV_FIELD_MAP",
]
