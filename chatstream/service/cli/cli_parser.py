"""CLI parser construction for chatstream-cli.

This module wires subparsers but contains no execution logic. Subcommand
handlers live in ``cli_actions``.
"""

from __future__ import annotations

import argparse

from ...base.protocol import ContentMode, ProtocolMode
from ...config.defaults import CLI_DEFAULT_CHUNK_SIZE

PROTOCOL_CHOICES = [m.value for m in ProtocolMode] + ["current", "legacy"]
CONTENT_MODE_CHOICES = [m.value for m in ContentMode]


def _positive_int(v: str) -> int:
    n = int(v)
    if n <= 0:
        raise argparse.ArgumentTypeError(f"must be > 0, got {v}")
    return n


def add_protocol_flags(parser: argparse.ArgumentParser) -> None:
    """Attach ``--protocol``/``--content-mode``; ``None`` means "use config"."""
    parser.add_argument("--protocol", choices=PROTOCOL_CHOICES, default=None)
    parser.add_argument("--content-mode", choices=CONTENT_MODE_CHOICES, default=None)


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level CLI parser and subcommands.

    Returns
    -------
    argparse.ArgumentParser
        Configured parser with ``send`` and ``decode`` subcommands. No I/O
        happens here.
    """
    p = argparse.ArgumentParser(prog="chatstream-cli", description="Chat stream client debugging CLI")
    p.add_argument("--log-level", default=None, help="override CHATSTREAM_LOG_LEVEL")
    p.add_argument("--plain-logs", action="store_true", help="plain text logs instead of JSON")
    sub = p.add_subparsers(dest="cmd", required=True)

    # send
    p_send = sub.add_parser("send", help="Send a message to an agent and stream the reply")
    p_send.add_argument("--agent", required=True)
    p_send.add_argument("--conversation", required=True)
    p_send.add_argument("--base-url", default=None)
    add_protocol_flags(p_send)
    p_send.add_argument("--form-json", metavar="FILE", default=None, help="submit the JSON object in FILE as form data")
    p_send.add_argument("--quiet", action="store_true", help="print only the final result")
    p_send.add_argument("text", nargs="?", default=None)

    # decode
    p_dec = sub.add_parser("decode", help="Replay a captured response body offline")
    p_dec.add_argument("file", help="captured body, '-' for stdin")
    add_protocol_flags(p_dec)
    p_dec.add_argument("--chunk-size", type=_positive_int, default=CLI_DEFAULT_CHUNK_SIZE)
    p_dec.add_argument("--quiet", action="store_true", help="print only the final result")

    return p


__all__ = ["build_parser", "add_protocol_flags", "PROTOCOL_CHOICES", "CONTENT_MODE_CHOICES"]
