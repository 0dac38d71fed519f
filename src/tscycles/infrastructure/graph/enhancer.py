"""Attach the responsible import statement to every edge of a cycle.

For each consecutive pair ``(importer, importee)`` of a cycle the importer
is re-read and the first line that imports the edge's specifier is
captured together with the line before and after it. Pairs that cannot be
located are skipped with a warning; the cycle itself is always kept.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from tscycles.domain.graph import Cycle, DependencyNode, EnhancedCycle, EnhancedImport
from tscycles.domain.specifiers import strip_importer_suffix

log = structlog.get_logger(__name__)

type HasImport = Callable[[str, str], bool]


@dataclass
class EnhanceResult:
    cycles: list[EnhancedCycle]
    warnings: list[str] = field(default_factory=list)


class _SourceCache:
    """File lines, read at most once per enhancement pass."""

    def __init__(self) -> None:
        self._lines: dict[str, list[str] | None] = {}

    def lines(self, file: str) -> list[str] | None:
        if file not in self._lines:
            try:
                text = Path(strip_importer_suffix(file)).read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                log.warning("enhance_read_failed", file=file, error=str(exc))
                self._lines[file] = None
            else:
                # Newline only, matching the scanner's line numbers.
                lines = text.split("\n")
                if lines[-1] == "":
                    lines.pop()
                self._lines[file] = lines
        return self._lines[file]


def _enhance_edge(
    importer: DependencyNode,
    importee: DependencyNode,
    has_import: HasImport,
    sources: _SourceCache,
) -> EnhancedImport | str:
    """The import behind one edge, or a warning explaining why it is missing."""
    info = next((i for i in importer.imports if i.path == importee.file), None)
    if info is None:
        return f"No recorded import from {importer.file} to {importee.file}"

    lines = sources.lines(importer.file)
    if lines is None:
        return f"Could not re-read {importer.file} to locate '{info.specifier}'"

    for index, line in enumerate(lines):
        if has_import(line, info.specifier):
            return EnhancedImport(
                importer=importer.file,
                importee=importee.file,
                specifier=info.specifier,
                line_number=index + 1,
                line=line,
                context_before=lines[index - 1] if index > 0 else None,
                context_after=lines[index + 1] if index + 1 < len(lines) else None,
            )
    return f"No line in {importer.file} imports '{info.specifier}'"


def enhance_cycles(cycles: Sequence[Cycle], has_import: HasImport) -> EnhanceResult:
    """Locate the import statement for every edge of every cycle."""
    sources = _SourceCache()
    result = EnhanceResult(cycles=[])
    for cycle in cycles:
        enhanced = EnhancedCycle(cycle=list(cycle))
        for index, importer in enumerate(cycle):
            importee = cycle[(index + 1) % len(cycle)]
            if importer is importee:
                continue
            edge = _enhance_edge(importer, importee, has_import, sources)
            if isinstance(edge, str):
                log.warning("enhance_edge_missing", importer=importer.file, importee=importee.file)
                result.warnings.append(edge)
                continue
            enhanced.imports.append(edge)
        result.cycles.append(enhanced)
    return result
