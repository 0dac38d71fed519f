"""Command: re-run the cycle check on every change to the import tree."""

from __future__ import annotations

import shutil
from typing import TYPE_CHECKING

import click

from tscycles.commands._base import TscCommand

if TYPE_CHECKING:
    from tscycles.commands._context import AppContext
    from tscycles.services.result import ServiceResult


@click.command(
    cls=TscCommand,
    examples="""\
  tscycles watch src/index.ts
  tscycles -c tscycles.toml watch apps/web/src/main.tsx""",
)
@click.argument("entry", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def watch(app: AppContext, entry: str) -> None:
    """Watch the files of the import tree and re-check on change."""
    from tscycles.services.watch import WatchService

    interactive = not (app.settings.json_output or app.settings.quiet)

    def emit(result: ServiceResult) -> None:
        max_lines = None
        if interactive:
            click.clear()
            if app.settings.watch.truncate:
                max_lines = shutil.get_terminal_size().lines
        app.emit(result, max_lines=max_lines, exit_on_error=False)

    final = WatchService(app.project).run(entry, emit)
    if not final.ok:
        raise SystemExit(1)
