"""Application context shared across CLI commands."""

from dataclasses import dataclass

import typer

from fm_clipboard.config import Config
from fm_clipboard.daemon.client import DaemonClient
from fm_clipboard.daemon.process import ensure_daemon
from fm_clipboard.output import Output
from fm_clipboard.sync import SelectionSync


@dataclass(frozen=True, slots=True)
class AppContext:
    """Shared application state passed through Typer context."""

    out: Output
    cfg: Config


def use_context(ctx: typer.Context) -> AppContext:
    """Extract application context from Typer context."""
    result: AppContext = ctx.obj
    return result


def use_sync(app: AppContext) -> SelectionSync:
    """Start the daemon if needed and return a selection sync bound to it."""
    try:
        ensure_daemon(app.cfg)
    except RuntimeError as e:
        app.out.print_error_and_exit("daemon_unavailable", str(e))
    return SelectionSync(DaemonClient(app.cfg))
