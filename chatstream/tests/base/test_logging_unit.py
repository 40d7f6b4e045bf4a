"""Focused tests for chatstream.base.logging.

Covers:
- _parse_level string parsing
- normalized_log_event emits the required keys
- JsonFormatter hoists structured messages
- configure_logger attaches a rotating file handler and keeps its level
"""
from __future__ import annotations

import json
import logging

from chatstream.base.log_support import JsonFormatter, LogContext
from chatstream.base.logging import (
    BASE_LOGGER_NAME,
    REQUIRED_NORMALIZED_KEYS,
    _parse_level,  # type: ignore[attr-defined]
    configure_logger,
    get_logger,
    log_event,
    normalized_log_event,
)


class _ListHandler(logging.Handler):
    """Capture log records into a list for assertions."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.messages: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:  # pragma: no cover - exercised via tests
        self.messages.append(record.getMessage())


def _capture(name: str) -> tuple[logging.Logger, _ListHandler]:
    logger = get_logger(name)
    handler = _ListHandler()
    logger.handlers[:] = [handler]
    return logger, handler


def test_parse_level_variants():
    assert _parse_level(None) == logging.INFO
    assert _parse_level("debug") == logging.DEBUG
    assert _parse_level("WARN") == logging.WARNING
    assert _parse_level("unknown", default=logging.ERROR) == logging.ERROR


def test_normalized_log_event_emits_required_keys():
    logger, handler = _capture("chatstream.test.normalized")
    ctx = LogContext(agent="a", conversation_id="c", extra={"attempt": None, "tag": "t"})
    normalized_log_event(logger, "session.end", ctx, phase="finalize", emitted=3, phase_extra="kept", state_dup=None)

    payload = json.loads(handler.messages[-1])
    for key in REQUIRED_NORMALIZED_KEYS:
        assert key in payload
    assert payload["event"] == "session.end"
    assert payload["state"] is None and payload["emitted"] == 3
    assert payload["agent"] == "a" and payload["tag"] == "t"
    assert "attempt" not in payload and "state_dup" not in payload
    assert "error_code" not in payload


def test_extra_fields_never_clobber_normalized_keys():
    logger, handler = _capture("chatstream.test.clobber")
    normalized_log_event(logger, "x", None, phase="open", state="opening", error_code="transport", emitted=0)
    payload = json.loads(handler.messages[-1])
    assert payload["state"] == "opening" and payload["error_code"] == "transport"


def test_log_event_respects_level():
    configure_logger(level="INFO")
    logger, handler = _capture("chatstream.test.levels")
    log_event(logger, "debug.only", level=logging.DEBUG)
    assert handler.messages == []  # base logger defaults to INFO


def test_json_formatter_hoists_structured_message():
    record = logging.LogRecord("chatstream.x", logging.INFO, __file__, 1, json.dumps({"event": "e", "n": 1}), None, None)
    out = json.loads(JsonFormatter().format(record))
    assert out["event"] == "e" and out["n"] == 1
    assert "msg" not in out
    assert out["logger"] == "chatstream.x" and out["level"] == "INFO"


def test_json_formatter_keeps_plain_message():
    record = logging.LogRecord("chatstream.x", logging.WARNING, __file__, 1, "plain %s", ("text",), None)
    out = json.loads(JsonFormatter().format(record))
    assert out["msg"] == "plain text"


def test_configure_logger_file_handler_and_level_stick(tmp_path):
    path = tmp_path / "logs" / "chatstream.log"
    base = configure_logger(level="DEBUG", file_path=str(path))
    try:
        get_logger("chatstream.test.after_configure")
        assert base.level == logging.DEBUG
        log_event(get_logger("chatstream.test.file"), "to.file", level=logging.DEBUG)
        for h in base.handlers:
            h.flush()
        assert "to.file" in path.read_text(encoding="utf-8")
    finally:
        configure_logger(level="INFO", file_path=None)
    assert not any(getattr(h, "baseFilename", None) for h in logging.getLogger(BASE_LOGGER_NAME).handlers)


def test_env_level_overrides(monkeypatch):
    monkeypatch.setenv("CHATSTREAM_LOG_LEVEL", "ERROR")
    try:
        assert get_logger().level == logging.ERROR
    finally:
        monkeypatch.delenv("CHATSTREAM_LOG_LEVEL")
        configure_logger(level="INFO")
