"""chatstream debugging CLI (package entrypoint).

Wires argument parsing to the handlers in ``cli_actions``; performs no
streaming logic directly.

Public API re-exports:
- ``main``: CLI entrypoint callable
"""

from __future__ import annotations

import sys
from typing import Optional

from .cli_actions import handle_decode, handle_send, setup_logging
from .cli_parser import build_parser


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entrypoint.

    Parameters
    ----------
    argv: Optional[list[str]]
        Argument vector; when ``None`` uses ``sys.argv[1:]``.

    Returns
    -------
    int
        Process exit code (0 completed, 1 failed or cancelled session,
        2 usage error).
    """
    p = build_parser()
    args = p.parse_args(list(sys.argv[1:] if argv is None else argv))
    setup_logging(args)
    if args.cmd == "decode":
        return handle_decode(args)
    return handle_send(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
