"""CLI action handlers.

Purpose
-------
Subcommand handlers for chatstream-cli, keeping the entrypoint minimal. No
top-level side effects; safe to import in tests.

Output contract
---------------
- Each snapshot is printed to stdout as one JSON line
  (``{"type": "snapshot", ...}``) unless ``--quiet``.
- The session result is printed last as ``{"type": "result", ...}``.
- Usage and input errors go to stderr as JSON with exit code 2; a failed or
  cancelled session exits 1.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Dict, Iterator, Optional, TextIO

from ...base.logging import LogContext, configure_logger, get_logger, normalized_log_event
from ...base.models import ChatMessage, OutboundMessage
from ...config import load_config
from ...streaming import SessionResult, decode_body
from ..chat_api import stream_chat


def _emit(stream: TextIO, payload: Dict[str, Any]) -> None:
    stream.write(json.dumps(payload, ensure_ascii=False) + "\n")
    stream.flush()


def _snapshot_printer(args: argparse.Namespace, out: TextIO):
    def _on_fragment(snapshot: ChatMessage) -> None:
        if not args.quiet:
            _emit(out, {"type": "snapshot", **snapshot.to_dict()})

    return _on_fragment


def _finish(result: SessionResult, out: TextIO) -> int:
    _emit(out, {"type": "result", **result.to_dict()})
    return 0 if result.ok else 1


def _usage_error(message: str) -> int:
    _emit(sys.stderr, {"error": message})
    return 2


def _config_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    return {
        "base_url": getattr(args, "base_url", None),
        "protocol": args.protocol,
        "content_mode": args.content_mode,
        "log_level": args.log_level,
        "json_logs": False if args.plain_logs else None,
    }


def setup_logging(args: argparse.Namespace) -> None:
    cfg = load_config({"log_level": args.log_level, "json_logs": False if args.plain_logs else None})
    configure_logger(level=cfg.log_level, json_mode=cfg.json_logs)


def _read_chunks(path: str, chunk_size: int) -> Iterator[bytes]:
    if path == "-":
        src = sys.stdin.buffer
        while chunk := src.read(chunk_size):
            yield chunk
        return
    with open(path, "rb") as fh:
        while chunk := fh.read(chunk_size):
            yield chunk


def handle_send(args: argparse.Namespace, out: Optional[TextIO] = None) -> int:
    """Stream one live reply from an agent server.

    Exactly one of ``text`` and ``--form-json`` must be given. The form file
    must hold a JSON object; it is sent as a form submission.
    """
    out = out or sys.stdout
    if (args.text is None) == (args.form_json is None):
        return _usage_error("provide either TEXT or --form-json")
    try:
        if args.form_json is not None:
            with open(args.form_json, "r", encoding="utf-8") as fh:
                form = json.load(fh)
            if not isinstance(form, dict):
                return _usage_error("--form-json must contain a JSON object")
            message = OutboundMessage.for_form_submission(form)
        else:
            message = OutboundMessage(content=args.text)
        cfg = load_config(_config_overrides(args))
    except (OSError, ValueError) as e:
        return _usage_error(str(e))

    log = get_logger("chatstream.cli", json_mode=cfg.json_logs)
    normalized_log_event(
        log,
        "cli.send",
        LogContext(agent=args.agent, conversation_id=args.conversation, protocol=cfg.protocol.value),
        phase="start",
        base_url=cfg.base_url,
    )
    result = stream_chat(args.agent, args.conversation, message, _snapshot_printer(args, out), config=cfg)
    return _finish(result, out)


def handle_decode(args: argparse.Namespace, out: Optional[TextIO] = None) -> int:
    """Replay a captured body through the decode pipeline without network I/O."""
    out = out or sys.stdout
    try:
        cfg = load_config(_config_overrides(args))
        chunks = list(_read_chunks(args.file, args.chunk_size))
    except (OSError, ValueError) as e:
        return _usage_error(str(e))
    result = decode_body(
        chunks,
        cfg.protocol,
        content_mode=cfg.content_mode,
        on_fragment=_snapshot_printer(args, out),
    )
    return _finish(result, out)


__all__ = ["handle_send", "handle_decode", "setup_logging"]
