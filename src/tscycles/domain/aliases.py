"""Path alias patterns from ``compilerOptions.paths``.

A pattern holds at most one ``*``. It matches a specifier that starts with
the text before the star and ends with the text after it; the captured
middle replaces the ``*`` in each target.
"""

from __future__ import annotations

import os.path
from collections.abc import Mapping, Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class PathMapping:
    """One ``paths`` entry with absolute targets."""

    pattern: str
    targets: tuple[str, ...]

    @property
    def prefix(self) -> str:
        star = self.pattern.find("*")
        return self.pattern if star == -1 else self.pattern[:star]

    @property
    def suffix(self) -> str:
        star = self.pattern.find("*")
        return "" if star == -1 else self.pattern[star + 1 :]

    @property
    def is_wildcard(self) -> bool:
        return "*" in self.pattern

    def match(self, specifier: str) -> str | None:
        """Return the text captured by ``*``, ``""`` for an exact hit, or None."""
        if not self.is_wildcard:
            return "" if specifier == self.pattern else None
        prefix, suffix = self.prefix, self.suffix
        if len(specifier) < len(prefix) + len(suffix):
            return None
        if not specifier.startswith(prefix) or not specifier.endswith(suffix):
            return None
        return specifier[len(prefix) : len(specifier) - len(suffix)]

    def candidates(self, captured: str) -> list[str]:
        """Rewrite the targets for a specifier whose wildcard captured *captured*."""
        return [target.replace("*", captured, 1) if "*" in target else target for target in self.targets]


def sort_by_prefix_length(mappings: Sequence[PathMapping]) -> list[PathMapping]:
    """Longest literal prefix first; ties keep declaration order."""
    return sorted(mappings, key=lambda m: len(m.prefix), reverse=True)


def build_mappings(paths: Mapping[str, tuple[str, Sequence[str]]]) -> list[PathMapping]:
    """Build sorted mappings from ``{pattern: (base_dir, targets)}``.

    Targets are joined onto *base_dir* (an absolute POSIX-style or native
    directory string) unless already absolute.
    """
    mappings = [
        PathMapping(
            pattern=pattern,
            targets=tuple(os.path.normpath(os.path.join(base, target)) for target in targets),
        )
        for pattern, (base, targets) in paths.items()
    ]
    return sort_by_prefix_length(mappings)
