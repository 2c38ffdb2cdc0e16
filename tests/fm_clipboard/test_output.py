"""Tests for CLI output formatting."""

import json

import pytest
import typer

from fm_clipboard.output import Output


class TestHumanOutput:
    """Human-readable mode."""

    def test_selections(self, capsys: pytest.CaptureFixture[str]):
        """Each path is printed with its operation."""
        Output(json_mode=False).print_selections(["/a"], ["/b c"])
        assert capsys.readouterr().out == "copy\t/a\ncut\t/b c\n"

    def test_error_goes_to_stderr(self, capsys: pytest.CaptureFixture[str]):
        """Errors are printed to stderr and exit with code 1."""
        with pytest.raises(typer.Exit) as exc_info:
            Output(json_mode=False).print_error_and_exit("sync_failed", "synchronization failed")
        assert exc_info.value.exit_code == 1
        assert capsys.readouterr().err == "Error: synchronization failed\n"

    def test_status_stopped(self, capsys: pytest.CaptureFixture[str]):
        """Stopped daemon status."""
        Output(json_mode=False).print_status(running=False, copied=0, cut=0)
        assert capsys.readouterr().out == "Daemon: stopped.\n"


class TestJsonOutput:
    """JSON envelope mode."""

    def test_selections(self, capsys: pytest.CaptureFixture[str]):
        """Selections are wrapped in an ok envelope."""
        Output(json_mode=True).print_selections(["/a"], [])
        assert json.loads(capsys.readouterr().out) == {"ok": True, "data": {"copied": ["/a"], "cut": []}}

    def test_error(self, capsys: pytest.CaptureFixture[str]):
        """Errors carry code and message."""
        with pytest.raises(typer.Exit):
            Output(json_mode=True).print_error_and_exit("bind_failed", "Cannot bind")
        assert json.loads(capsys.readouterr().out) == {"ok": False, "error": "bind_failed", "message": "Cannot bind"}

    def test_status_running(self, capsys: pytest.CaptureFixture[str]):
        """Running daemon status reports set sizes."""
        Output(json_mode=True).print_status(running=True, copied=2, cut=1)
        assert json.loads(capsys.readouterr().out)["data"] == {"running": True, "copied": 2, "cut": 1}
