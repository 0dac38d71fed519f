"""Built-in ECMAScript plugin: regex import scanner and Node-style resolver.

Handles ES modules and CommonJS ``require`` in .js/.ts sources. Projects
with other module dialects install a plugin that implements the same
hooks; it is consulted before this one.
"""

from __future__ import annotations

from pathlib import Path

import pluggy

from tscycles.config.models import ResolveConfig
from tscycles.domain import imports
from tscycles.infrastructure.node_resolver import NodeResolver

hookimpl = pluggy.HookimplMarker("tscycles")


class EcmaScriptPlugin:
    """Default implementations of every tscycles hook."""

    def __init__(self, config: ResolveConfig | None = None) -> None:
        self._resolver = NodeResolver(config)

    @hookimpl
    def scan_imports(self, path: str, code: str) -> list[imports.ScannedImport]:
        return imports.scan_imports(code)

    @hookimpl
    def resolve_module(self, specifier: str, base_dir: Path) -> Path | None:
        return self._resolver.resolve(specifier, base_dir)

    @hookimpl
    def has_import(self, line: str, specifier: str) -> bool:
        return imports.has_import(line, specifier)
