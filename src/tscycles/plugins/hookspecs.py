"""Pluggy hook specifications for the collaborators the core delegates to.

All three hooks are ``firstresult``: pluggy calls the most recently
registered implementation first, so an installed plugin overrides the
built-in ECMAScript plugin simply by returning a non-None value.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from tscycles.domain.imports import ScannedImport

hookspec = pluggy.HookspecMarker("tscycles")


class TscyclesHookSpec:
    """Hook specifications for the tscycles plugin system."""

    @hookspec(firstresult=True)
    def scan_imports(self, path: str, code: str) -> list[ScannedImport] | None:
        """Return the runtime imports of *code* (the contents of *path*).

        Type-only declarations must be left out: they cannot form a
        runtime cycle.
        """

    @hookspec(firstresult=True)
    def resolve_module(self, specifier: str, base_dir: Path) -> Path | None:
        """Resolve *specifier* from *base_dir* by package-lookup rules.

        Return None when nothing is found; never raise for a missing module.
        """

    @hookspec(firstresult=True)
    def has_import(self, line: str, specifier: str) -> bool | None:
        """Whether *line* holds an import or re-export of *specifier*."""
