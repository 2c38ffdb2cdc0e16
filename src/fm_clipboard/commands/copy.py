"""Mark paths as copied."""

import os

import typer

from fm_clipboard.app_context import use_context, use_sync
from fm_clipboard.sync import SyncError


def copy(
    ctx: typer.Context,
    paths: list[str] = typer.Argument(help="Paths to mark as copied"),
    *,
    append: bool = typer.Option(default=False, help="Add to the current selection instead of replacing it"),
) -> None:
    """Replace the shared "copied" set with PATHS."""
    app = use_context(ctx)
    sync = use_sync(app)
    absolute = [os.path.abspath(p) for p in paths]
    try:
        if append:
            sync.synchronize()
            sync.add_copied(absolute)
        else:
            sync.publish_copied(absolute)
    except SyncError as e:
        app.out.print_error_and_exit("sync_failed", str(e))
    app.out.print_copied(sorted(sync.copied))
