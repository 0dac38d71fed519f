"""Root CLI group for tscycles with global flags and command registration."""

from __future__ import annotations

import click

from tscycles import __version__
from tscycles.commands import register_commands
from tscycles.commands._base import TscGroup
from tscycles.commands._context import AppContext
from tscycles.config.settings import TscyclesSettings


@click.group(
    cls=TscGroup,
    invoke_without_command=True,
    examples="""\
  tscycles check src/index.ts
  tscycles watch src/index.ts
  tscycles resolve @org/utils --from packages/app/src/index.ts
  tscycles graph src/index.ts --format json""",
)
@click.version_option(version=__version__, prog_name="tscycles")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug logging.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """tscycles — import cycle detection for TypeScript and JavaScript monorepos."""
    settings = TscyclesSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
