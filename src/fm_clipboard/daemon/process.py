"""Locating, spawning and stopping the daemon process."""

import contextlib
import socket
import subprocess  # nosec B404
import time
from pathlib import Path

import psutil

from fm_clipboard.config import DAEMON_EXECUTABLE, Config
from fm_clipboard.daemon.guard import matches_executable

# Polling interval while waiting for a spawned daemon to bind its socket
_POLL_INTERVAL = 0.05
# Upper bound on how long a live, not-yet-listening daemon is waited for
_START_TIMEOUT = 5.0
# Grace period between SIGTERM and SIGKILL
_STOP_TIMEOUT = 3.0


def read_pid(pid_path: Path) -> int | None:
    """Read a PID from a file, returning None if missing, empty or invalid."""
    try:
        return int(pid_path.read_text().strip())
    except (ValueError, OSError):
        return None


def daemon_pid(cfg: Config) -> int | None:
    """PID of the running daemon, from its pid file or, failing that, the lock file it holds."""
    pid = read_pid(cfg.daemon_pid_path)
    if pid is None and cfg.guard == "lock":
        pid = read_pid(cfg.lock_path)
    return pid


def is_connectable(sock_path: Path) -> bool:
    """Check if the daemon socket is accepting connections."""
    try:
        with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as s:
            s.settimeout(1.0)
            s.connect(str(sock_path))
    except OSError:
        return False
    else:
        return True


def spawn_daemon(cfg: Config) -> subprocess.Popen[bytes]:
    """Launch the daemon as a detached background process."""
    # S603: args are controlled literals, "fm-clipd" is our own entry point
    return subprocess.Popen(  # noqa: S603  # nosec B603, B607
        [DAEMON_EXECUTABLE, "--data-dir", str(cfg.data_dir)],
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        stdin=subprocess.DEVNULL,
        start_new_session=True,
    )


def ensure_daemon(cfg: Config) -> None:
    """Make sure a daemon is listening on the socket, spawning one if needed.

    A spawned daemon that exits before binding (lost the singleton check, could not
    bind) is reported at once rather than waited out.

    Raises:
        RuntimeError: The daemon exited early or did not start listening in time.

    """
    if is_connectable(cfg.sock_path):
        return

    proc = spawn_daemon(cfg)
    deadline = time.monotonic() + _START_TIMEOUT
    while time.monotonic() < deadline:
        if is_connectable(cfg.sock_path):
            return
        code = proc.poll()
        if code is not None:
            # Another instance may have bound the socket between our check and the spawn
            if is_connectable(cfg.sock_path):
                return
            msg = f"Daemon exited with status {code} before listening on {cfg.sock_path}."
            raise RuntimeError(msg)
        time.sleep(_POLL_INTERVAL)

    msg = f"Daemon did not start listening on {cfg.sock_path} within {_START_TIMEOUT}s."
    raise RuntimeError(msg)


def find_daemon(cfg: Config) -> psutil.Process | None:
    """Return the running daemon process, or None if the recorded PID is not a daemon."""
    pid = daemon_pid(cfg)
    if pid is None:
        return None
    try:
        proc = psutil.Process(pid)
    except psutil.NoSuchProcess:
        return None
    return proc if matches_executable(proc, DAEMON_EXECUTABLE) else None


def stop_daemon(cfg: Config) -> bool:
    """Stop the daemon via SIGTERM, falling back to SIGKILL. Return True if a daemon was stopped.

    PIDs that do not belong to a daemon process are never signalled; their stale
    pid file is removed.
    """
    proc = find_daemon(cfg)
    if proc is None:
        with contextlib.suppress(OSError):
            cfg.daemon_pid_path.unlink()
        return False

    try:
        proc.terminate()
        proc.wait(timeout=_STOP_TIMEOUT)
    except psutil.NoSuchProcess:
        pass
    except psutil.TimeoutExpired:
        with contextlib.suppress(psutil.NoSuchProcess):
            proc.kill()
            proc.wait(timeout=_STOP_TIMEOUT)

    # A killed daemon leaves its socket and pid file behind
    for path in (cfg.daemon_pid_path, cfg.sock_path):
        with contextlib.suppress(OSError):
            path.unlink()
    return True
