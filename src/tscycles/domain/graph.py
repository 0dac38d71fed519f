"""Dependency graph value types.

A :class:`DependencyNode` exists once per absolute file path. Its status
only ever moves ``UNVISITED -> VISITING -> VISITED``; the builder owns the
transitions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum


class NodeStatus(IntEnum):
    UNVISITED = 0
    VISITING = 1
    VISITED = 2


@dataclass(frozen=True)
class ImportInfo:
    """A resolved edge: the specifier as written and the file it names."""

    specifier: str
    path: str


@dataclass(frozen=True)
class UnresolvedImport:
    """A specifier that could not be mapped to a file (edge dropped)."""

    importer: str
    specifier: str


@dataclass(eq=False)
class DependencyNode:
    """One file in the traversal. Compared by identity, keyed by ``file``."""

    file: str
    imports: list[ImportInfo] = field(default_factory=list)
    status: NodeStatus = NodeStatus.UNVISITED

    def advance(self, status: NodeStatus) -> None:
        """Move to *status*; moving backward is a programming error."""
        if status < self.status:
            msg = f"{self.file}: status cannot move from {self.status.name} to {status.name}"
            raise ValueError(msg)
        self.status = status


type DependencyTree = dict[str, DependencyNode]
type Cycle = list[DependencyNode]


@dataclass(frozen=True)
class EnhancedImport:
    """The import statement behind one cycle edge, with a line of context."""

    importer: str
    importee: str
    specifier: str
    line_number: int  # 1-based
    line: str
    context_before: str | None = None
    context_after: str | None = None


@dataclass
class EnhancedCycle:
    cycle: list[DependencyNode]
    imports: list[EnhancedImport] = field(default_factory=list)

    @property
    def files(self) -> list[str]:
        return [node.file for node in self.cycle]
