"""Tests for the mssh command-line entry point."""

from __future__ import annotations

from mssh import cli


def _run(shortcuts, *argv):
    return cli.main(["--shortcuts", str(shortcuts), "--log-level", "ERROR", *argv])


def test_shortcut_definition_survives_restart(tmp_path, capsys):
    store = tmp_path / "shortcuts.txt"
    assert _run(store, "-c", "!shortcut foo bar baz") == 0
    assert store.read_text(encoding="utf-8") == "foo:bar baz\n"
    capsys.readouterr()
    assert _run(store, "-c", "!shortcut foo") == 0
    assert "Defined: foo -> bar baz" in capsys.readouterr().out


def test_single_command_runs_shortcut_expansion(tmp_path, capsys):
    store = tmp_path / "shortcuts.txt"
    store.write_text("greet:@?echo $1\necho:say $1\n", encoding="utf-8")
    assert _run(store, "-c", "@greet world") == 0
    out = capsys.readouterr().out
    assert "-> @?echo world" in out
    assert "?-> say world" in out


def test_single_command_error_exit_code(tmp_path, capsys):
    assert _run(tmp_path / "shortcuts.txt", "-c", "?ping") == 1
    assert "error: not connected" in capsys.readouterr().out


def test_quit_command_exit_code(tmp_path):
    assert _run(tmp_path / "shortcuts.txt", "-c", "!quit") == 0


def test_invalid_store_is_reported_not_fatal(tmp_path, capsys):
    store = tmp_path / "shortcuts.txt"
    store.write_text("ok:1\nbroken\n", encoding="utf-8")
    assert _run(store, "-c", "!shortcut ok") == 0
    out = capsys.readouterr().out
    assert "error: loading shortcuts" in out
    assert "Defined: ok -> 1" in out


def test_undecodable_store_is_reported_not_fatal(tmp_path, capsys):
    store = tmp_path / "shortcuts.txt"
    store.write_bytes(b"ok:fine\nbad:\xff\xfe\n")
    assert _run(store, "-c", "!shortcut") == 0
    out = capsys.readouterr().out
    assert "error: loading shortcuts" in out
    assert "No shortcuts defined" in out


def test_startup_connect_failure_is_reported(tmp_path, capsys):
    assert _run(tmp_path / "shortcuts.txt", "--connect", "bad-address", "-c", "!timeout 1") == 0
    assert "error: invalid address" in capsys.readouterr().out


def test_arg_parser_defaults(monkeypatch):
    monkeypatch.setenv("MSSH_NAME", "env-name")
    args = cli.build_arg_parser().parse_args([])
    assert args.name == "env-name"
    assert args.timeout == 2.0
    assert args.command is None
