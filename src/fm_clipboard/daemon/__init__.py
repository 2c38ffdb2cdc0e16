"""Daemon subsystem: wire protocol, selection store, server, client, and process management."""

from fm_clipboard.daemon.client import DaemonClient as DaemonClient
from fm_clipboard.daemon.process import ensure_daemon as ensure_daemon
from fm_clipboard.daemon.process import is_connectable as is_connectable
from fm_clipboard.daemon.protocol import Response as Response
from fm_clipboard.daemon.store import Selection as Selection
