"""Rich/JSON output helpers.

The CLI renders ServiceResult for humans (Rich output, colors, icons)
or machines (--json). The formatter layer adapts ServiceResult to the
requested output mode.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from tscycles.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from tscycles.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    """How one result should be shown."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    max_lines: int | None = None


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display.

    JSON wins over quiet; quiet wins over the Rich renderers.
    """
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose, max_lines=settings.max_lines)
