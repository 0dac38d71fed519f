"""Command: export the dependency graph of one entry file."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from tscycles.commands._base import TscCommand

if TYPE_CHECKING:
    from tscycles.commands._context import AppContext


@click.command(
    cls=TscCommand,
    examples="""\
  tscycles graph src/index.ts > deps.dot
  tscycles graph src/index.ts --format json
  tscycles graph src/index.ts | dot -Tsvg > deps.svg""",
)
@click.argument("entry", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["dot", "json"]),
    default="dot",
    help="Export format.",
)
@click.pass_obj
def graph(app: AppContext, entry: str, fmt: str) -> None:
    """Export the import graph as Graphviz DOT or node-link JSON."""
    from tscycles.services.export import ExportService

    app.emit(ExportService(app.project).export_graph(entry, fmt=fmt))
