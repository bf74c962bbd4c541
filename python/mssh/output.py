"""Output helpers for mssh."""

from __future__ import annotations

from typing import Iterable, Tuple

from .element import Element


def emit_result(message: str) -> None:
    """Emit an informational line to the operator."""
    print(message, flush=True)


def emit_error(message: object) -> None:
    print(f"error: {message}", flush=True)


def emit_packet(label: str, element: Element) -> None:
    """Echo an outgoing or incoming packet."""
    print(f"{label}: {element.render()}", flush=True)


def render_pairs(pairs: Iterable[Tuple[str, str]], *, separator: str = " -> ") -> None:
    rows = list(pairs)
    if not rows:
        return
    width = max(len(key) for key, _ in rows)
    for key, value in rows:
        print(f"  {key:<{width}}{separator}{value}")


__all__ = ["emit_result", "emit_error", "emit_packet", "render_pairs"]
