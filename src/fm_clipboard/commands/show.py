"""Show current selections."""

import typer

from fm_clipboard.app_context import use_context, use_sync
from fm_clipboard.sync import SyncError


def show(ctx: typer.Context) -> None:
    """Print the shared "copied" and "cut" sets."""
    app = use_context(ctx)
    sync = use_sync(app)
    try:
        sync.synchronize()
    except SyncError as e:
        app.out.print_error_and_exit("sync_failed", str(e))
    app.out.print_selections(sorted(sync.copied), sorted(sync.cut))
