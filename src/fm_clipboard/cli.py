"""CLI entry point for fm-clip."""

from pathlib import Path
from typing import Annotated

import typer
from mm_clikit import TyperPlus

from fm_clipboard.app_context import AppContext
from fm_clipboard.commands.clear import clear
from fm_clipboard.commands.copy import copy
from fm_clipboard.commands.cut import cut
from fm_clipboard.commands.paste import paste
from fm_clipboard.commands.show import show
from fm_clipboard.commands.status import status
from fm_clipboard.commands.stop import stop
from fm_clipboard.config import Config
from fm_clipboard.log import setup_logging
from fm_clipboard.output import Output

app = TyperPlus(package_name="fm-clipboard")


@app.callback()
def callback(
    ctx: typer.Context,
    *,
    json_output: Annotated[bool, typer.Option("--json", help="Output results as JSON.")] = False,
    data_dir: Annotated[Path | None, typer.Option("--data-dir", help="Data directory path.")] = None,
) -> None:
    """Shared copy/cut selections for fm file manager windows."""
    cfg = Config.build(data_dir)
    cfg.data_dir.mkdir(parents=True, exist_ok=True)
    setup_logging(cfg.log_path, cfg.log_level)
    ctx.obj = AppContext(out=Output(json_mode=json_output), cfg=cfg)


# Selections
app.command()(copy)
app.command()(cut)
app.command()(clear)
app.command(aliases=["s"])(show)
app.command()(paste)

# Daemon
app.command()(status)
app.command()(stop)
