"""Rich Console factory and theme for tscycles output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

TSCYCLES_THEME = Theme(
    {
        "tscycles.ok": "bold green",
        "tscycles.error": "bold red",
        "tscycles.warning": "bold yellow",
        "tscycles.op": "bold cyan",
        "tscycles.key": "dim",
        "tscycles.path": "bold blue",
        "tscycles.root": "dim",
        "tscycles.marker": "bold red",
        "tscycles.gutter": "dim",
        "tscycles.context": "bright_black",
        "tscycles.truncated": "yellow",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=TSCYCLES_THEME,
        no_color=no_color,
        highlight=False,
        soft_wrap=True,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
