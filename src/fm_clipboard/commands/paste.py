"""Paste selections into a directory via an external helper."""

import os
import subprocess  # nosec B404

import typer

from fm_clipboard.app_context import use_context, use_sync
from fm_clipboard.daemon.store import Selection
from fm_clipboard.sync import SyncError

_HELPER_ARG = {Selection.COPIED: "copy", Selection.CUT: "cut"}


def paste(
    ctx: typer.Context,
    dest: str = typer.Argument(help="Destination directory"),
    *,
    helper: str = typer.Option(default="fm-paste", help="Helper program invoked as: HELPER copy|cut PATH DEST"),
) -> None:
    """Run the paste helper for every selected path, then clear the selections."""
    app = use_context(ctx)
    sync = use_sync(app)
    dest = os.path.abspath(dest)
    try:
        sync.synchronize()
    except SyncError as e:
        app.out.print_error_and_exit("sync_failed", str(e))

    plan = sync.paste_plan()
    for which, path in plan:
        try:
            # S603: helper is chosen by the user invoking the command
            subprocess.run([helper, _HELPER_ARG[which], path, dest], check=True)  # noqa: S603  # nosec B603
        except (OSError, subprocess.CalledProcessError) as e:
            app.out.print_error_and_exit("paste_failed", f"{helper} failed for {path}: {e}")

    try:
        sync.publish_clear()
    except SyncError as e:
        app.out.print_error_and_exit("sync_failed", str(e))
    app.out.print_pasted(dest, len(plan))
