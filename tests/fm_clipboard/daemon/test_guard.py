"""Tests for singleton guards."""

import os
from pathlib import Path

import psutil
import pytest

from fm_clipboard.config import Config
from fm_clipboard.daemon import guard
from fm_clipboard.daemon.guard import LockGuard, ProcessScanGuard, count_instances, make_guard, matches_executable


class TestLockGuard:
    """Advisory lock on a file."""

    def test_first_acquire_wins(self, tmp_path: Path) -> None:
        """An unheld lock is acquired and records the pid."""
        lock = LockGuard(tmp_path / "fm.lock")
        assert lock.acquire() is True
        assert (tmp_path / "fm.lock").read_text() == str(os.getpid())
        lock.release()

    def test_second_acquire_fails(self, tmp_path: Path) -> None:
        """A second guard on the same file cannot acquire while the first holds it."""
        first = LockGuard(tmp_path / "fm.lock")
        second = LockGuard(tmp_path / "fm.lock")
        assert first.acquire() is True
        try:
            assert second.acquire() is False
        finally:
            first.release()

    def test_release_allows_reacquire(self, tmp_path: Path) -> None:
        """After release another guard can take the lock."""
        first = LockGuard(tmp_path / "fm.lock")
        second = LockGuard(tmp_path / "fm.lock")
        assert first.acquire() is True
        first.release()
        assert second.acquire() is True
        second.release()

    def test_acquire_is_reentrant(self, tmp_path: Path) -> None:
        """Acquiring twice on the same guard is a no-op."""
        lock = LockGuard(tmp_path / "fm.lock")
        assert lock.acquire() is True
        assert lock.acquire() is True
        lock.release()

    def test_release_without_acquire(self, tmp_path: Path) -> None:
        """Releasing an unacquired guard does nothing."""
        LockGuard(tmp_path / "fm.lock").release()


class TestProcessScan:
    """Process-table scan by executable name."""

    def test_count_unknown_name(self) -> None:
        """No process runs an executable with a random name."""
        assert count_instances("fm-clipd-definitely-not-running-7f3a") == 0

    def test_count_includes_self(self) -> None:
        """The current process is found by its own name."""
        assert count_instances(psutil.Process().name()) >= 1

    def test_single_instance_passes(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Only this process running: acquire succeeds."""
        monkeypatch.setattr(guard, "count_instances", lambda _name: 1)
        assert ProcessScanGuard().acquire() is True

    def test_second_instance_fails(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Another matching process running: acquire fails."""
        monkeypatch.setattr(guard, "count_instances", lambda _name: 2)
        assert ProcessScanGuard().acquire() is False


class TestMakeGuard:
    """Guard selection from configuration."""

    def test_lock_is_default(self, tmp_path: Path) -> None:
        """Default config uses the lock guard."""
        assert isinstance(make_guard(Config(data_dir=tmp_path)), LockGuard)

    def test_scan(self, tmp_path: Path) -> None:
        """guard = "scan" selects the process scan."""
        assert isinstance(make_guard(Config(data_dir=tmp_path, guard="scan")), ProcessScanGuard)


class FakeProcess:
    """Process stand-in with a fixed name and command line."""

    def __init__(self, name: str, cmdline: list[str], error: Exception | None = None) -> None:
        self._name = name
        self._cmdline = cmdline
        self._error = error

    def name(self) -> str:
        if self._error is not None:
            raise self._error
        return self._name

    def cmdline(self) -> list[str]:
        return self._cmdline


class TestMatchesExecutable:
    """Identifying daemon processes by name and command line."""

    @pytest.mark.parametrize(
        ("name", "cmdline"),
        [
            ("fm-clipd", ["fm-clipd"]),
            ("python3", ["/venv/bin/fm-clipd", "--data-dir", "/x"]),
            ("python3", ["/usr/bin/python3", "/venv/bin/fm-clipd"]),
            ("python3.12", ["python3.12", "fm-clipd", "--data-dir", "/x"]),
        ],
    )
    def test_daemon(self, name: str, cmdline: list[str]) -> None:
        assert matches_executable(FakeProcess(name, cmdline), "fm-clipd") is True  # type: ignore[arg-type]

    @pytest.mark.parametrize(
        ("name", "cmdline"),
        [
            ("less", ["less", "fm-clipd"]),
            ("pgrep", ["pgrep", "fm-clipd"]),
            ("fm-clip", ["/venv/bin/fm-clip", "copy", "/a"]),
            ("python3", ["/usr/bin/python3"]),
            ("kworker", []),
        ],
    )
    def test_not_daemon(self, name: str, cmdline: list[str]) -> None:
        """Commands that merely mention the daemon's name do not count."""
        assert matches_executable(FakeProcess(name, cmdline), "fm-clipd") is False  # type: ignore[arg-type]

    def test_access_denied(self) -> None:
        """Processes we may not inspect are skipped."""
        proc = FakeProcess("", [], error=psutil.AccessDenied(pid=1))
        assert matches_executable(proc, "fm-clipd") is False  # type: ignore[arg-type]
