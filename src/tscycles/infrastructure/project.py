"""Project — the run state injected into every service.

A Project owns everything that is cached while detecting cycles: the
workspace-root lookups, parsed tsconfig files, the resolver registry and
its per-resolver specifier caches. Nothing is cached at module level, so
two Projects never share state and :meth:`Project.reset` is a complete
discard (used by watch mode before each rebuild).

Collaborators that understand module syntax are reached through the
plugin hooks, never imported directly.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from tscycles.infrastructure.resolvers import ResolverRegistry, build_registry
from tscycles.infrastructure.tsconfig import TSConfigLoader
from tscycles.infrastructure.workspace import WorkspaceLocator
from tscycles.plugins.manager import PluginManager

if TYPE_CHECKING:
    from tscycles.config.settings import TscyclesSettings
    from tscycles.domain.imports import ScannedImport

logger = logging.getLogger(__name__)


class Project:
    """Explicitly scoped state for one (or, in watch mode, one per rebuild) run."""

    def __init__(
        self,
        settings: TscyclesSettings,
        plugin_manager: PluginManager | None = None,
    ) -> None:
        self._settings = settings
        if plugin_manager is None:
            plugin_manager = PluginManager()
            plugin_manager.discover_and_load(resolve_config=settings.resolve)
        self._plugins = plugin_manager
        self._locator = WorkspaceLocator()
        self._loader = TSConfigLoader()
        self._registry: ResolverRegistry | None = None
        self._registry_root: Path | None = None
        self._registry_warnings: list[str] = []

    @property
    def settings(self) -> TscyclesSettings:
        return self._settings

    @property
    def plugins(self) -> PluginManager:
        return self._plugins

    @property
    def skip_dirs(self) -> frozenset[str]:
        return self._settings.skip_dirs

    @property
    def registry_warnings(self) -> list[str]:
        """Problems met while building the registry (malformed tsconfigs)."""
        return list(self._registry_warnings)

    @property
    def config_files(self) -> list[Path]:
        """tsconfig files loaded while building the registry."""
        return self._loader.loaded_files

    def workspace_root(self, start: Path) -> Path:
        return self._locator.find_workspace_root(start)

    def registry_for(self, entry: Path) -> ResolverRegistry:
        """The resolver registry, built from *entry*'s workspace on first use."""
        if self._registry is None:
            root = self.workspace_root(entry)
            self._registry_warnings = []
            self._registry = build_registry(
                root,
                self._loader,
                self._settings.scan,
                self.resolve_default,
                self._registry_warnings,
            )
            self._registry_root = root
        return self._registry

    # ------------------------------------------------------------------
    # Plugin-backed collaborators
    # ------------------------------------------------------------------

    async def resolve_default(self, specifier: str, base_dir: Path) -> Path | None:
        """Package-lookup resolution, run off the event loop."""
        return await asyncio.to_thread(
            self._plugins.hook.resolve_module,
            specifier=specifier,
            base_dir=base_dir,
        )

    def scan(self, path: str, code: str) -> list[ScannedImport]:
        return self._plugins.hook.scan_imports(path=path, code=code) or []

    def has_import(self, line: str, specifier: str) -> bool:
        return bool(self._plugins.hook.has_import(line=line, specifier=specifier))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Discard every cache; the next build starts from scratch."""
        self._locator.clear()
        self._loader.clear()
        self._registry = None
        self._registry_root = None
        self._registry_warnings = []
        logger.debug("Project state reset")
