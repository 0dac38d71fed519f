"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy Project initialization and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from tscycles.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from tscycles.config.settings import TscyclesSettings
    from tscycles.infrastructure.project import Project
    from tscycles.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The project (and with it plugin discovery) is created lazily on first
    use so ``--help`` and ``--version`` stay fast.
    """

    def __init__(self, settings: TscyclesSettings) -> None:
        self.settings = settings
        self._project: Project | None = None

        from tscycles.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def project(self) -> Project:
        """The project instance (created lazily on first access)."""
        if self._project is None:
            from tscycles.infrastructure.project import Project

            self._project = Project(self.settings)
        return self._project

    def emit(
        self,
        result: ServiceResult,
        *,
        max_lines: int | None = None,
        exit_on_error: bool = True,
    ) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr and, unless *exit_on_error* is False,
          exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
            max_lines=max_lines,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            if output:
                click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output and not settings.quiet:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            if exit_on_error:
                raise SystemExit(1)
