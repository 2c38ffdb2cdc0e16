"""Singleton guards that keep a second daemon from starting.

Two strategies are available:

* ``LockGuard`` takes an exclusive advisory lock on a well-known file. The kernel
  arbitrates, so two daemons started at the same instant cannot both win.
* ``ProcessScanGuard`` counts running processes with the daemon's executable name.
  Two daemons started at nearly the same moment can both pass the check.
"""

import contextlib
import fcntl
import logging
import os
from pathlib import Path
from typing import IO, Protocol

import psutil

from fm_clipboard.config import DAEMON_EXECUTABLE, Config

logger = logging.getLogger(__name__)


class SingletonGuard(Protocol):
    """Startup check run before the daemon binds its socket."""

    def acquire(self) -> bool:
        """Return True if this process may run as the daemon."""
        ...

    def release(self) -> None:
        """Give up whatever acquire() took."""
        ...


class LockGuard:
    """Advisory ``flock`` on a lock file, held for the daemon's lifetime."""

    def __init__(self, lock_path: Path) -> None:
        """Initialize the guard.

        Args:
            lock_path: File to lock. Created if missing.

        """
        self._lock_path = lock_path
        self._file: IO[str] | None = None

    def acquire(self) -> bool:
        """Take the lock without blocking. Return False if another process holds it."""
        if self._file is not None:
            return True
        f = self._lock_path.open("a+")
        try:
            fcntl.flock(f, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError:
            f.close()
            logger.info("Lock %s is held by another daemon", self._lock_path)
            return False
        except BaseException:
            f.close()
            raise
        f.seek(0)
        f.truncate()
        f.write(str(os.getpid()))
        f.flush()
        self._file = f
        return True

    def release(self) -> None:
        """Drop the lock. The lock file itself is left in place."""
        if self._file is None:
            return
        with contextlib.suppress(OSError):
            fcntl.flock(self._file, fcntl.LOCK_UN)
        self._file.close()
        self._file = None


def matches_executable(proc: psutil.Process, name: str) -> bool:
    """Check whether a process runs the named executable.

    The script name in argv[1] only counts when argv[0] is a Python interpreter,
    so "less fm-clipd" or "pgrep fm-clipd" are not mistaken for the daemon.
    """
    try:
        if proc.name() == name:
            return True
        cmdline = proc.cmdline()
    except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
        return False
    if not cmdline:
        return False
    program = os.path.basename(cmdline[0])
    if program == name:
        return True
    return program.startswith("python") and len(cmdline) > 1 and os.path.basename(cmdline[1]) == name


def count_instances(name: str) -> int:
    """Count running processes whose executable name is ``name``."""
    return sum(1 for proc in psutil.process_iter() if matches_executable(proc, name))


class ProcessScanGuard:
    """Best-effort check of the process table for other daemon instances."""

    def __init__(self, executable: str = DAEMON_EXECUTABLE) -> None:
        """Initialize the guard.

        Args:
            executable: Executable name to look for, the daemon's own included.

        """
        self._executable = executable

    def acquire(self) -> bool:
        """Return False if more than one matching process (this one included) is running."""
        count = count_instances(self._executable)
        if count > 1:
            logger.info("Found %d running '%s' processes", count, self._executable)
            return False
        return True

    def release(self) -> None:
        """Nothing to release."""


def make_guard(cfg: Config) -> SingletonGuard:
    """Build the guard selected by configuration."""
    if cfg.guard == "scan":
        return ProcessScanGuard()
    return LockGuard(cfg.lock_path)
