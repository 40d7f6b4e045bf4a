"""Pytest configuration for the chatstream test suite.

- Strips ``CHATSTREAM_*`` variables from the environment for every test so
  the developer's shell cannot leak configuration into assertions.
- Closes pooled HTTP clients after the session.
- ``log_events`` captures structured events emitted on the ``chatstream``
  logger tree as parsed dicts.
"""

from __future__ import annotations

import json
import logging
import os
from contextlib import suppress
from typing import Any, Dict, Iterator, List

import pytest

from chatstream.base.http import close_all_clients
from chatstream.base.logging import BASE_LOGGER_NAME, get_logger


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith("CHATSTREAM_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture(scope="session", autouse=True)
def close_clients_after_session() -> Iterator[None]:
    yield
    with suppress(Exception):
        close_all_clients()


class _EventHandler(logging.Handler):
    """Collect JSON log messages as dicts (plain messages are skipped)."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.events: List[Dict[str, Any]] = []

    def emit(self, record: logging.LogRecord) -> None:
        with suppress(ValueError, TypeError):
            data = json.loads(record.getMessage())
            if isinstance(data, dict):
                data["_level"] = record.levelno
                self.events.append(data)


@pytest.fixture()
def log_events() -> Iterator[List[Dict[str, Any]]]:
    base = get_logger(BASE_LOGGER_NAME)
    previous = base.level
    base.setLevel(logging.DEBUG)
    handler = _EventHandler()
    base.addHandler(handler)
    try:
        yield handler.events
    finally:
        base.removeHandler(handler)
        base.setLevel(previous)
