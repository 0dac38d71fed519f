"""ExportService — dependency graph export for Graphviz and JSON tools."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

from tscycles.infrastructure.graph.builder import DependencyGraphBuilder
from tscycles.infrastructure.graph.engine import GraphEngine
from tscycles.services.base import BaseService
from tscycles.services.result import ServiceError, ServiceResult

GRAPH_FORMATS = ("dot", "json")


class ExportService(BaseService):
    """Exports the file graph reachable from an entry."""

    def export_graph(self, entry: Path | str, *, fmt: str = "dot") -> ServiceResult:
        """Export the dependency graph of *entry*.

        Formats:
        - ``dot`` — Graphviz DOT language, cycle edges in red
        - ``json`` — node-link ``{"nodes": [...], "edges": [...]}``

        Returns the content as a string in ``data["content"]``.
        """
        if fmt not in GRAPH_FORMATS:
            return ServiceResult(
                ok=False,
                op="export_graph",
                error=ServiceError(
                    code="INVALID_FORMAT",
                    message=f"Unknown graph format: {fmt}",
                    detail={"format": fmt, "valid": list(GRAPH_FORMATS)},
                ),
            )
        entry = Path(entry)
        if (error := self._check_entry("export_graph", entry)) is not None:
            return error

        build = asyncio.run(DependencyGraphBuilder(self._project).build(entry))
        engine = GraphEngine(build.tree, build.cycles)
        if fmt == "dot":
            content = engine.to_dot(relative_to=self._project.workspace_root(entry))
        else:
            content = json.dumps(engine.to_node_link(), indent=2)

        payload: dict[str, Any] = {
            "format": fmt,
            "entry": build.entry,
            "content": content,
            "node_count": engine.graph.number_of_nodes(),
            "edge_count": engine.graph.number_of_edges(),
            "cycle_count": len(build.cycles),
            "cyclic_components": engine.cyclic_components(),
        }
        return ServiceResult(ok=True, op="export_graph", data=payload, warnings=build.warnings)
