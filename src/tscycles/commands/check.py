"""Command: detect import cycles reachable from one entry file."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from tscycles.commands._base import TscCommand

if TYPE_CHECKING:
    from tscycles.commands._context import AppContext


@click.command(
    cls=TscCommand,
    examples="""\
  tscycles check src/index.ts
  tscycles check apps/web/src/main.tsx -v
  tscycles --json check src/index.ts
  tscycles -q check src/index.ts""",
)
@click.argument("entry", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def check(app: AppContext, entry: str) -> None:
    """Detect and report import cycles. Exits 1 when cycles exist."""
    from tscycles.services.cycles import CycleService

    result = CycleService(app.project).check(entry)
    app.emit(result)
    if result.data.get("cycle_count", 0) > 0:
        raise SystemExit(1)
