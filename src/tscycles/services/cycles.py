"""CycleService — detect and describe import cycles from one entry file."""

from __future__ import annotations

import asyncio
import dataclasses
import time
from pathlib import Path
from typing import Any

from tscycles.domain.graph import EnhancedCycle
from tscycles.infrastructure.graph.builder import BuildResult, DependencyGraphBuilder
from tscycles.infrastructure.graph.enhancer import enhance_cycles
from tscycles.services.base import BaseService
from tscycles.services.result import ServiceResult


def _cycle_payload(cycle: EnhancedCycle) -> dict[str, Any]:
    return {
        "files": cycle.files,
        "imports": [dataclasses.asdict(item) for item in cycle.imports],
    }


class CycleService(BaseService):
    """Builds the dependency tree and reports the cycles in it."""

    def check(self, entry: Path | str) -> ServiceResult:
        """Report every import cycle reachable from *entry*.

        Cycles are data, not errors: the result is ``ok`` whenever the
        entry could be analysed, and ``data["cycle_count"]`` tells the
        caller whether any were found.
        """
        result, _build = asyncio.run(self.analyze(Path(entry)))
        return result

    async def analyze(self, entry: Path) -> tuple[ServiceResult, BuildResult | None]:
        """Like :meth:`check`, also returning the raw traversal for watch mode."""
        if (error := self._check_entry("check", entry)) is not None:
            return error, None

        started = time.perf_counter()
        build = await DependencyGraphBuilder(self._project).build(entry)
        enhanced = enhance_cycles(build.cycles, self._project.has_import)
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

        workspace_root = self._project.workspace_root(entry)
        result = ServiceResult(
            ok=True,
            op="check",
            data={
                "entry": build.entry,
                "workspace_root": str(workspace_root),
                "file_count": len(build.tree),
                "cycle_count": len(enhanced.cycles),
                "cycles": [_cycle_payload(cycle) for cycle in enhanced.cycles],
                "unresolved": [dataclasses.asdict(item) for item in build.unresolved],
            },
            warnings=[*build.warnings, *enhanced.warnings],
            meta={"duration_ms": elapsed_ms},
        )
        return result, build
