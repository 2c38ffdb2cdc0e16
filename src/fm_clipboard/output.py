"""Structured output for CLI and JSON modes."""

# ruff: noqa: T201 — this module is the output layer; print() is its sole mechanism for producing CLI output.

import json
import sys
from typing import NoReturn

import typer


class Output:
    """Handles all CLI output in JSON or human-readable format."""

    def __init__(self, *, json_mode: bool) -> None:
        """Initialize output handler.

        Args:
            json_mode: If True, output JSON envelopes; otherwise human-readable text.

        """
        self._json_mode = json_mode

    def _success(self, data: dict[str, object], message: str) -> None:
        """Print a success result in JSON or human-readable format."""
        if self._json_mode:
            print(json.dumps({"ok": True, "data": data}))
        else:
            print(message)

    def print_error_and_exit(self, code: str, message: str) -> NoReturn:
        """Print an error in JSON or human-readable format and exit with code 1.

        Raises:
            typer.Exit: Always, with code 1.

        """
        if self._json_mode:
            print(json.dumps({"ok": False, "error": code, "message": message}))
        else:
            print(f"Error: {message}", file=sys.stderr)
        raise typer.Exit(code=1)

    # --- Selections ---

    def print_copied(self, paths: list[str]) -> None:
        """Print "copied" set update confirmation."""
        self._success({"copied": paths}, f"{len(paths)} path(s) marked as copied.")

    def print_cut(self, paths: list[str]) -> None:
        """Print "cut" set update confirmation."""
        self._success({"cut": paths}, f"{len(paths)} path(s) marked as cut.")

    def print_cleared(self) -> None:
        """Print selections cleared confirmation."""
        self._success({}, "Selections cleared.")

    def print_selections(self, copied: list[str], cut: list[str]) -> None:
        """Print both selection sets."""
        if self._json_mode:
            print(json.dumps({"ok": True, "data": {"copied": copied, "cut": cut}}))
            return
        for path in copied:
            print(f"copy\t{path}")
        for path in cut:
            print(f"cut\t{path}")

    def print_pasted(self, dest: str, count: int) -> None:
        """Print paste completion."""
        self._success({"dest": dest, "count": count}, f"Pasted {count} path(s) into {dest}.")

    # --- Daemon ---

    def print_stopped(self) -> None:
        """Print daemon stopped confirmation."""
        self._success({}, "Daemon stopped.")

    def print_status(self, *, running: bool, copied: int, cut: int) -> None:
        """Print daemon status."""
        if not running:
            self._success({"running": False}, "Daemon: stopped.")
            return
        self._success(
            {"running": True, "copied": copied, "cut": cut},
            f"Daemon: running, copied: {copied}, cut: {cut}.",
        )
