"""Entry point of the fm-clipd daemon executable."""

from pathlib import Path
from typing import Annotated

import typer

from fm_clipboard.config import Config
from fm_clipboard.daemon.server import BindError, run_server
from fm_clipboard.log import setup_logging
from fm_clipboard.output import Output


def run_daemon(
    data_dir: Annotated[Path | None, typer.Option("--data-dir", help="Data directory path.")] = None,
) -> None:
    """Clipboard coordination daemon for fm."""
    cfg = Config.build(data_dir)
    cfg.data_dir.mkdir(parents=True, exist_ok=True)
    setup_logging(cfg.log_path, cfg.log_level)
    out = Output(json_mode=False)
    try:
        code = run_server(cfg)
    except BindError as e:
        out.print_error_and_exit("bind_failed", str(e))
    if code != 0:
        out.print_error_and_exit("already_running", "Another daemon instance is already running.")


def main() -> None:
    """Console script entry point for fm-clipd."""
    typer.run(run_daemon)
