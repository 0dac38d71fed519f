"""Command: show how one specifier resolves from one importing file."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from tscycles.commands._base import TscCommand

if TYPE_CHECKING:
    from tscycles.commands._context import AppContext


@click.command(
    cls=TscCommand,
    examples="""\
  tscycles resolve @utils/date --from packages/app/src/index.ts
  tscycles --json resolve ./worker?worker --from src/main.ts""",
)
@click.argument("specifier")
@click.option(
    "--from",
    "importer",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="File the import is written in.",
)
@click.pass_obj
def resolve(app: AppContext, specifier: str, importer: str) -> None:
    """Resolve SPECIFIER as if imported from --from. Exits 1 when unresolved."""
    from tscycles.services.resolve import ResolveService

    result = ResolveService(app.project).resolve(specifier, importer)
    app.emit(result)
    if not result.data.get("resolved"):
        raise SystemExit(1)
