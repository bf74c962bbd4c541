"""Unit tests for mssh control commands."""

from __future__ import annotations

import pytest

from mssh.element import Element
from mssh.errors import (
    NotConnected,
    ParseError,
    QuitRequested,
    RequestTimeout,
    TransportError,
    UnsupportedCommand,
)
from mssh.shortcuts import ShortcutTable


def test_registry_resolves_by_first_letter(registry):
    assert registry.get("c").name == "connect"
    assert registry.get("conn").name == "connect"
    assert registry.get("d").name == "disconnect"
    assert registry.get("Shortcut").name == "shortcut"
    assert registry.get("x") is None


def test_unsupported_command_lists_valid_set(ctx, registry):
    with pytest.raises(UnsupportedCommand) as excinfo:
        registry.dispatch(ctx, "xyzzy")
    message = str(excinfo.value)
    for name in ("!quit", "!connect", "!disconnect", "!timeout", "!shortcut", "!login"):
        assert name in message


def test_empty_command_is_unsupported(ctx, registry):
    with pytest.raises(UnsupportedCommand):
        registry.dispatch(ctx, "   ")


def test_quit_closes_connection(connected_ctx, registry, connector):
    with pytest.raises(QuitRequested):
        registry.dispatch(connected_ctx, "quit")
    assert connector.endpoints[0].closed
    assert connected_ctx.endpoint is None


def test_quit_when_disconnected(ctx, registry):
    with pytest.raises(QuitRequested):
        registry.dispatch(ctx, "q")


def test_timeout_sets_seconds(ctx, registry, capsys):
    registry.dispatch(ctx, "timeout 0.25")
    assert ctx.timeout == 0.25
    assert "0.25s" in capsys.readouterr().out
    registry.dispatch(ctx, "t")
    assert "Request timeout is 0.25s" in capsys.readouterr().out


@pytest.mark.parametrize("value", ["abc", "-1", "nan", "inf"])
def test_timeout_rejects_bad_values(ctx, registry, value):
    with pytest.raises(ParseError):
        registry.dispatch(ctx, f"timeout {value}")
    assert ctx.timeout == 2.0


def test_connect_dials_with_local_name(ctx, registry, connector, capsys):
    registry.dispatch(ctx, "name alice")
    registry.dispatch(ctx, "connect peer:4000")
    assert connector.dialed == ["peer:4000"]
    assert ctx.endpoint is connector.endpoints[0]
    assert ctx.endpoint.name == "alice"
    out = capsys.readouterr().out
    assert "Name set to alice" in out
    assert "Connected to: peer:4000" in out


def test_connect_requires_address(ctx, registry):
    with pytest.raises(ParseError):
        registry.dispatch(ctx, "connect")


def test_reconnect_closes_old_connection_first(connected_ctx, registry, connector):
    old = connector.endpoints[0]
    registry.dispatch(connected_ctx, "c other:5000")
    assert old.closed
    assert connected_ctx.endpoint is connector.endpoints[1]


def test_failed_reconnect_leaves_old_connection_closed(connected_ctx, registry, connector):
    old = connector.endpoints[0]
    connector.fail = TransportError("refused")
    with pytest.raises(TransportError):
        registry.dispatch(connected_ctx, "connect other:5000")
    assert old.closed
    assert connected_ctx.endpoint is None


def test_disconnect(connected_ctx, registry, connector, capsys):
    registry.dispatch(connected_ctx, "disconnect")
    assert connector.endpoints[0].closed
    assert not connected_ctx.connected
    assert "Disconnecting from:" in capsys.readouterr().out


def test_disconnect_when_not_connected(ctx, registry):
    with pytest.raises(NotConnected):
        registry.dispatch(ctx, "disconnect")


def test_shortcut_define_show_and_list(ctx, registry, shortcut_path, capsys):
    registry.dispatch(ctx, "shortcut foo bar baz")
    registry.dispatch(ctx, "shortcut foo")
    out = capsys.readouterr().out
    assert "Defined: foo -> bar baz" in out.splitlines()[-1]

    registry.dispatch(ctx, "shortcut abc  keep   spacing")
    capsys.readouterr()
    registry.dispatch(ctx, "s")
    lines = capsys.readouterr().out.splitlines()
    assert lines == ["  abc -> keep   spacing", "  foo -> bar baz"]

    reloaded = ShortcutTable(str(shortcut_path))
    reloaded.load()
    assert reloaded.get("foo") == "bar baz"


def test_shortcut_show_undefined(ctx, registry, capsys):
    registry.dispatch(ctx, "shortcut nope")
    assert "No definition for shortcut named: nope" in capsys.readouterr().out


def test_shortcut_list_empty(ctx, registry, capsys):
    registry.dispatch(ctx, "shortcut")
    assert "No shortcuts defined" in capsys.readouterr().out


def test_login_requires_connection(ctx, registry):
    with pytest.raises(NotConnected):
        registry.dispatch(ctx, "login")


def test_login_updates_peer_name(ctx, registry, connector, capsys):
    connector.replies.append(Element("Reply", {"Name": "server-1"}))
    ctx.name = "alice"
    registry.dispatch(ctx, "connect peer:4000")
    registry.dispatch(ctx, "login")
    request = connector.endpoints[0].submitted[0]
    assert request.name == "Request"
    assert request.attributes == {"Type": "_Login", "Name": "alice"}
    assert ctx.connected_to == "server-1"
    assert ctx.prompt == "[alice -> server-1]: "
    assert "Login reply" in capsys.readouterr().out


def test_login_timeout_keeps_peer_name(connected_ctx, registry, connector):
    connected_ctx.timeout = 0
    with pytest.raises(RequestTimeout):
        registry.dispatch(connected_ctx, "login")
    assert connected_ctx.connected_to == "-?-"
    assert connector.endpoints[0].futures[0].cancelled()
    assert not connector.endpoints[0].closed


def test_help_lists_commands(ctx, registry, capsys):
    registry.dispatch(ctx, "help")
    out = capsys.readouterr().out
    for name in registry.names():
        assert f"!{name}" in out
