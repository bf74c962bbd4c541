"""mssh CLI entry point."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List

from .commands import CommandRegistry, build_registry
from .context import DEFAULT_NAME, DEFAULT_TIMEOUT, ShellContext
from .errors import MsshError, QuitRequested
from .output import emit_error, emit_result
from .repl import ShellREPL
from .shortcuts import DEFAULT_SHORTCUT_FILE, ShortcutTable

LOG = logging.getLogger("mssh.cli")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Message Stream Shell")
    parser.add_argument(
        "--connect",
        metavar="ADDRESS",
        default=os.environ.get("MSSH_ADDRESS"),
        help="Connect to host:port on startup",
    )
    parser.add_argument("--name", default=os.environ.get("MSSH_NAME", DEFAULT_NAME), help="Local name (default mssh)")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT, help="Request timeout in seconds (default 2)")
    parser.add_argument(
        "--shortcuts",
        type=Path,
        default=Path(os.environ.get("MSSH_SHORTCUTS", DEFAULT_SHORTCUT_FILE)),
        help="Path to the shortcut definitions file",
    )
    parser.add_argument(
        "--history",
        type=Path,
        default=Path.home() / ".mssh-history",
        help="Path to command history file (prompt_toolkit mode)",
    )
    parser.add_argument("--log-level", default=os.environ.get("MSSH_LOG", "WARNING"), help="Logging level (default WARNING)")
    parser.add_argument(
        "-c",
        "--command",
        help="Execute a single line non-interactively (quote the line)",
    )
    return parser


def build_context(args: argparse.Namespace) -> ShellContext:
    shortcuts = ShortcutTable(str(args.shortcuts))
    ctx = ShellContext(name=args.name, timeout=max(0.0, args.timeout), shortcuts=shortcuts)
    try:
        shortcuts.load()
    except MsshError as exc:
        emit_error(f"loading shortcuts: {exc}")
    if args.connect:
        try:
            ctx.connect(args.connect)
            emit_result(f"Connected to: {args.connect}")
        except MsshError as exc:
            emit_error(exc)
    return ctx


def main(argv: List[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)
    ctx = build_context(args)
    registry = build_registry()
    if args.command:
        return _run_single_command(ctx, registry, args.command)
    repl = ShellREPL(ctx, registry, history_path=str(args.history))
    try:
        return repl.run()
    except KeyboardInterrupt:
        print()
        return 0
    finally:
        ctx.close()


def _run_single_command(ctx: ShellContext, registry: CommandRegistry, line: str) -> int:
    repl = ShellREPL(ctx, registry)
    try:
        repl.drain(line)
    except QuitRequested:
        return 0
    except MsshError as exc:
        emit_error(exc)
        return 1
    finally:
        ctx.close()
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
