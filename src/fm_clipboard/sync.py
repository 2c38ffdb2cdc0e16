"""Client-side view of the shared selections, kept in step with the daemon.

The UI layer owns one ``SelectionSync``, pulls the daemon's state with
``synchronize()`` before acting on it, and publishes full sets after the
user copies, cuts or pastes. Calls block and issue one request each.
"""

import logging
from collections.abc import Callable, Iterable

from fm_clipboard.daemon.client import DaemonClient
from fm_clipboard.daemon.protocol import ProtocolError, Response
from fm_clipboard.daemon.store import Selection

logger = logging.getLogger(__name__)


class SyncError(Exception):
    """Synchronization with the daemon failed."""

    def __init__(self, message: str = "synchronization failed") -> None:
        """Initialize with a human-readable message."""
        super().__init__(message)


class SelectionSync:
    """Local cache of the "copied" and "cut" sets backed by the daemon."""

    def __init__(self, client: DaemonClient) -> None:
        """Initialize with empty local caches.

        Args:
            client: Transport used for every exchange.

        """
        self._client = client
        self.copied: set[str] = set()
        self.cut: set[str] = set()

    def _call(self, name: str, fn: Callable[..., Response], *args: object) -> Response:
        """Run one client exchange, turning every failure into SyncError."""
        try:
            resp: Response = fn(*args)
        except (OSError, ProtocolError) as e:
            logger.warning("%s failed: %s", name, e)
            raise SyncError from e
        if not resp.ok:
            logger.warning("%s returned status %s", name, resp.status)
            raise SyncError(f"synchronization failed: daemon returned '{resp.status}' for {name}")
        return resp

    def synchronize(self) -> None:
        """Replace the local caches with the daemon's current sets.

        Raises:
            SyncError: Either exchange failed or did not report success.

        """
        copied = self._call("GetCopy", self._client.get_copy)
        self.copied = set(copied.files)
        cut = self._call("GetCut", self._client.get_cut)
        self.cut = set(cut.files)

    def publish_copied(self, paths: Iterable[str]) -> None:
        """Make ``paths`` the complete "copied" set, locally and in the daemon."""
        new_set = set(paths)
        self._call("Copy", self._client.copy, sorted(new_set))
        self.copied = new_set

    def publish_cut(self, paths: Iterable[str]) -> None:
        """Make ``paths`` the complete "cut" set, locally and in the daemon."""
        new_set = set(paths)
        self._call("Cut", self._client.cut, sorted(new_set))
        self.cut = new_set

    def publish_clear(self) -> None:
        """Empty both sets, locally and in the daemon."""
        self._call("Clear", self._client.clear)
        self.copied = set()
        self.cut = set()

    def add_copied(self, paths: Iterable[str]) -> None:
        """Add paths to the local "copied" set and publish the result."""
        self.publish_copied(self.copied | set(paths))

    def add_cut(self, paths: Iterable[str]) -> None:
        """Add paths to the local "cut" set and publish the result."""
        self.publish_cut(self.cut | set(paths))

    def paste_plan(self) -> list[tuple[Selection, str]]:
        """List the operations a paste should run, from the local caches.

        A path present in both sets is moved, not copied: "cut" wins.
        """
        plan = [(Selection.COPIED, path) for path in sorted(self.copied - self.cut)]
        plan.extend((Selection.CUT, path) for path in sorted(self.cut))
        return plan
