"""Subcommand modules for tscycles.

Provides register_commands() which uses deferred imports to keep
``tscycles --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the standalone commands on the root CLI group."""
    from tscycles.commands.check import check
    from tscycles.commands.graph import graph
    from tscycles.commands.resolve import resolve
    from tscycles.commands.watch import watch

    cli.add_command(check)
    cli.add_command(watch)
    cli.add_command(resolve)
    cli.add_command(graph)
