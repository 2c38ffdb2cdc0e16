"""Show daemon status."""

import typer

from fm_clipboard.app_context import use_context
from fm_clipboard.daemon.client import DaemonClient
from fm_clipboard.daemon.process import is_connectable
from fm_clipboard.sync import SelectionSync, SyncError


def status(ctx: typer.Context) -> None:
    """Show whether the daemon runs and how many paths each selection holds."""
    app = use_context(ctx)

    if not is_connectable(app.cfg.sock_path):
        app.out.print_status(running=False, copied=0, cut=0)
        return

    sync = SelectionSync(DaemonClient(app.cfg))
    try:
        sync.synchronize()
    except SyncError as e:
        app.out.print_error_and_exit("sync_failed", str(e))
    app.out.print_status(running=True, copied=len(sync.copied), cut=len(sync.cut))
