"""DependencyGraphBuilder — iterative three-colour DFS with cycle recording.

The traversal keeps an explicit stack of frames, one per file on the
current path, each remembering the index of the next import to follow:

- a frame whose imports are exhausted is marked VISITED and popped;
- an edge to a new file creates its node, marks it VISITING and pushes it;
- an edge to a VISITING file closes a cycle;
- an edge to a VISITED file is a shared dependency and is ignored.

Only the import lists are awaited. Specifiers of one file are resolved
concurrently, but the DFS itself advances one frame at a time so the
visiting/visited colouring (and therefore the cycle list) is deterministic.
"""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from tscycles.domain.graph import (
    Cycle,
    DependencyNode,
    DependencyTree,
    ImportInfo,
    NodeStatus,
    UnresolvedImport,
)
from tscycles.domain.specifiers import (
    is_absolute,
    is_in_skipped_dir,
    is_relative,
    is_supported_file,
    split_query,
    strip_importer_suffix,
)
from tscycles.infrastructure.resolvers import ResolutionStatus

if TYPE_CHECKING:
    from tscycles.infrastructure.project import Project
    from tscycles.infrastructure.resolvers import ResolverRegistry

log = structlog.get_logger(__name__)


@dataclass
class BuildResult:
    """Everything one traversal produced."""

    entry: str
    tree: DependencyTree
    cycles: list[Cycle]
    unresolved: list[UnresolvedImport] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class _Frame:
    node: DependencyNode
    next_index: int = 0


@dataclass
class _BuildState:
    registry: ResolverRegistry
    unresolved: list[UnresolvedImport] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class DependencyGraphBuilder:
    """Walk the import graph reachable from one entry file."""

    def __init__(self, project: Project) -> None:
        self._project = project

    async def build(self, entry: Path | str) -> BuildResult:
        entry_path = Path(entry).resolve()
        state = _BuildState(registry=self._project.registry_for(entry_path))
        state.warnings.extend(self._project.registry_warnings)

        entry_id = str(entry_path)
        root = DependencyNode(entry_id, await self._get_imports(entry_id, state))
        tree: DependencyTree = {entry_id: root}
        cycles: list[Cycle] = []

        root.advance(NodeStatus.VISITING)
        stack = [_Frame(root)]
        path = [root]

        while stack:
            frame = stack[-1]
            node = frame.node
            if frame.next_index >= len(node.imports):
                node.advance(NodeStatus.VISITED)
                stack.pop()
                path.pop()
                continue

            edge = node.imports[frame.next_index]
            frame.next_index += 1
            target = tree.get(edge.path)

            if target is None or target.status is NodeStatus.UNVISITED:
                if target is None:
                    target = DependencyNode(edge.path, await self._get_imports(edge.path, state))
                    tree[edge.path] = target
                target.advance(NodeStatus.VISITING)
                stack.append(_Frame(target))
                path.append(target)
            elif target.status is NodeStatus.VISITING:
                start = path.index(target)
                cycle = [*path[start:], target]
                cycles.append(cycle)
                log.debug("cycle_found", files=[n.file for n in cycle])

        if state.unresolved:
            state.warnings.append(
                f"{len(state.unresolved)} import(s) could not be resolved; "
                "cycles through them cannot be detected"
            )
        log.debug(
            "graph_built",
            entry=entry_id,
            files=len(tree),
            cycles=len(cycles),
            unresolved=len(state.unresolved),
        )
        return BuildResult(
            entry=entry_id,
            tree=tree,
            cycles=cycles,
            unresolved=state.unresolved,
            warnings=state.warnings,
        )

    # ------------------------------------------------------------------
    # Import fetching
    # ------------------------------------------------------------------

    async def _get_imports(self, file: str, state: _BuildState) -> list[ImportInfo]:
        """Resolved imports of *file*; empty for files outside the project."""
        source = strip_importer_suffix(file)
        skip_dirs = self._project.skip_dirs
        if is_in_skipped_dir(source, skip_dirs) or not is_supported_file(source):
            return []

        try:
            code = await asyncio.to_thread(Path(source).read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            log.warning("read_failed", file=source, error=str(exc))
            state.warnings.append(f"Could not read {source}: {exc}")
            return []
        try:
            scanned = self._project.scan(source, code)
        except Exception as exc:
            log.warning("scan_failed", file=source, error=str(exc), exc_info=True)
            state.warnings.append(f"Could not scan {source}: {exc}")
            return []

        targets = await asyncio.gather(
            *(self._resolve(item.specifier, file, state) for item in scanned)
        )

        imports: list[ImportInfo] = []
        for item, target in zip(scanned, targets, strict=True):
            if target is None:
                state.unresolved.append(UnresolvedImport(importer=file, specifier=item.specifier))
                log.debug("import_unresolved", importer=file, specifier=item.specifier)
                continue
            if is_in_skipped_dir(strip_importer_suffix(target), skip_dirs):
                continue
            imports.append(ImportInfo(specifier=item.specifier, path=target))
        return imports

    async def _resolve(self, specifier: str, importer: str, state: _BuildState) -> str | None:
        if is_absolute(specifier):
            return os.path.normpath(specifier)

        if not is_relative(specifier):
            resolution = await state.registry.resolve(specifier, importer)
            if resolution.status is ResolutionStatus.RESOLVED:
                return resolution.path
            if resolution.status is ResolutionStatus.UNRESOLVED:
                return None

        _bare, query = split_query(specifier)
        importer_dir = Path(strip_importer_suffix(importer)).parent
        found = await self._project.resolve_default(specifier, importer_dir)
        return str(found) + query if found is not None else None
