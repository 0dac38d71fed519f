"""GraphEngine — lazy-built NetworkX graph from a dependency tree.

Built on demand for export; cycle detection itself never needs it.
Parallel edges are kept (one per import statement), so the graph is a
``MultiDiGraph``.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import networkx as nx

from tscycles.domain.graph import Cycle, DependencyTree

type _Graph = nx.MultiDiGraph


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class GraphEngine:
    """Lazy-loading graph engine backed by a :class:`DependencyTree`."""

    def __init__(self, tree: DependencyTree, cycles: Sequence[Cycle] = ()) -> None:
        self._tree = tree
        self._cycles = cycles
        self._graph: _Graph | None = None

    @property
    def graph(self) -> _Graph:
        """Return the graph, building it from the tree on first access."""
        if self._graph is None:
            self._graph = self._build_from_tree()
        return self._graph

    def invalidate(self) -> None:
        """Clear the cached graph, forcing rebuild on next access."""
        self._graph = None

    def _build_from_tree(self) -> _Graph:
        """Add all nodes first (so leaf files are visible), then edges."""
        cycle_edges = {
            (a.file, b.file) for cycle in self._cycles for a, b in zip(cycle, cycle[1:])
        }
        g: _Graph = nx.MultiDiGraph()
        for file, node in self._tree.items():
            g.add_node(file, status=node.status.name.lower())
        for node in self._tree.values():
            for info in node.imports:
                g.add_edge(
                    node.file,
                    info.path,
                    specifier=info.specifier,
                    in_cycle=(node.file, info.path) in cycle_edges,
                )
        return g

    def cyclic_components(self) -> list[list[str]]:
        """Strongly connected groups of files that import each other, sorted."""
        components: list[list[str]] = []
        for component in nx.strongly_connected_components(self.graph):
            files = sorted(component)
            # A single file only counts when it imports itself.
            if len(files) > 1 or self.graph.has_edge(files[0], files[0]):
                components.append(files)
        return sorted(components)

    def to_node_link(self) -> dict[str, Any]:
        """Node-link JSON data (``nodes`` and ``edges`` lists)."""
        return nx.node_link_data(self.graph, edges="edges")

    def to_dot(self, relative_to: Path | None = None) -> str:
        """Render Graphviz DOT. Cycle edges are drawn red."""

        def label(file: str) -> str:
            if relative_to is None:
                return file
            return os.path.relpath(file, relative_to).replace(os.sep, "/")

        lines = ["digraph imports {", "  node [shape=box];"]
        for file in sorted(self.graph.nodes):
            lines.append(f"  {_quote(file)} [label={_quote(label(file))}];")
        for source, target, data in sorted(
            self.graph.edges(data=True), key=lambda e: (e[0], e[1], e[2]["specifier"])
        ):
            attrs = f"label={_quote(data['specifier'])}"
            if data["in_cycle"]:
                attrs += ", color=red"
            lines.append(f"  {_quote(source)} -> {_quote(target)} [{attrs}];")
        lines.append("}")
        return "\n".join(lines) + "\n"
