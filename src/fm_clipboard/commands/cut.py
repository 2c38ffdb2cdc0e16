"""Mark paths as cut."""

import os

import typer

from fm_clipboard.app_context import use_context, use_sync
from fm_clipboard.sync import SyncError


def cut(
    ctx: typer.Context,
    paths: list[str] = typer.Argument(help="Paths to mark as cut"),
    *,
    append: bool = typer.Option(default=False, help="Add to the current selection instead of replacing it"),
) -> None:
    """Replace the shared "cut" set with PATHS."""
    app = use_context(ctx)
    sync = use_sync(app)
    absolute = [os.path.abspath(p) for p in paths]
    try:
        if append:
            sync.synchronize()
            sync.add_cut(absolute)
        else:
            sync.publish_cut(absolute)
    except SyncError as e:
        app.out.print_error_and_exit("sync_failed", str(e))
    app.out.print_cut(sorted(sync.cut))
