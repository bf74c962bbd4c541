"""
mssh - Message Stream Shell.

An interactive line-oriented client for issuing packets to a message-stream
peer.  Lines are routed by their leading marker:

    !command ...        control commands (connect, timeout, shortcut, ...)
    @shortcut args...   expand a stored shortcut and run the result
    ?type name=value    submit a Request and wait for its reply
    type name=value     send a one-way Message

Use ``python -m mssh`` or the ``mssh`` console script to launch the shell.
"""

from __future__ import annotations

from .cli import main

__all__ = ["main"]
__version__ = "0.1.0"
