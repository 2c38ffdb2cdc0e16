"""Shared fixtures: short-lived config directories and an in-process daemon."""

import asyncio
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import pytest

from fm_clipboard.config import Config
from fm_clipboard.daemon.server import DaemonServer


@pytest.fixture
def short_dir() -> Iterator[Path]:
    """Temporary directory with a short path (Unix socket paths are limited to ~104 bytes)."""
    with tempfile.TemporaryDirectory(prefix="fmc-", dir="/tmp") as d:  # noqa: S108  # nosec B108
        yield Path(d)


@pytest.fixture
def cfg(short_dir: Path) -> Config:
    """Config with socket, lock and data files inside a temporary directory."""
    return Config(data_dir=short_dir / "data", sock_path=short_dir / "fm.sock", lock_path=short_dir / "fm.lock")


@contextmanager
def running(server: DaemonServer) -> Iterator[DaemonServer]:
    """Run a daemon server on a background thread for the duration of the block."""
    errors: list[BaseException] = []

    def target() -> None:
        try:
            asyncio.run(server.run(install_signal_handlers=False))
        except BaseException as e:  # noqa: BLE001
            errors.append(e)

    thread = threading.Thread(target=target, daemon=True)
    thread.start()
    assert server.started.wait(5.0), f"daemon did not start: {errors}"
    try:
        yield server
    finally:
        server.stop()
        thread.join(5.0)
    assert not errors, errors


@pytest.fixture
def daemon(cfg: Config) -> Iterator[DaemonServer]:
    """A running daemon bound to ``cfg.sock_path``."""
    with running(DaemonServer(cfg)) as server:
        yield server

