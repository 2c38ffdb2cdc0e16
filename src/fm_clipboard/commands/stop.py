"""Stop the daemon."""

import typer

from fm_clipboard.app_context import use_context
from fm_clipboard.daemon.process import is_connectable, stop_daemon


def stop(ctx: typer.Context) -> None:
    """Stop the daemon. Selections are not kept."""
    app = use_context(ctx)

    stop_daemon(app.cfg)

    if is_connectable(app.cfg.sock_path):
        app.out.print_error_and_exit("stop_failed", "Daemon is still running after stop attempt.")

    app.out.print_stopped()
