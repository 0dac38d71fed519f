"""WatchService — re-run the cycle check whenever a file of the tree changes.

Each change discards the whole :class:`Project` state and rebuilds from
the same entry; nothing is invalidated incrementally.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable
from pathlib import Path

import watchfiles

from tscycles.config.discovery import iter_ancestors
from tscycles.domain.specifiers import strip_importer_suffix
from tscycles.infrastructure.graph.builder import BuildResult
from tscycles.services.base import BaseService
from tscycles.services.cycles import CycleService
from tscycles.services.result import ServiceResult

logger = logging.getLogger(__name__)

type Emit = Callable[[ServiceResult], None]


class WatchService(BaseService):
    """Long-running check loop driven by filesystem notifications."""

    def run(
        self,
        entry: Path | str,
        emit: Emit,
        *,
        stop_event: threading.Event | None = None,
        max_runs: int | None = None,
    ) -> ServiceResult:
        """Check *entry*, then re-check after every relevant change.

        Each check result is handed to *emit*. Returns when Ctrl-C is
        pressed, *stop_event* is set, *max_runs* checks have run, or the
        entry can no longer be analysed.
        """
        entry = Path(entry)
        runs = 0
        while True:
            result, build = asyncio.run(CycleService(self._project).analyze(entry))
            runs += 1
            emit(result)
            if build is None:
                return result
            if max_runs is not None and runs >= max_runs:
                break

            changed = self._wait_for_change(build, stop_event)
            if not changed:
                break
            logger.debug("Change detected in %s; rebuilding", ", ".join(sorted(changed)))
            self._project.reset()

        return ServiceResult(ok=True, op="watch", data={"entry": str(entry.resolve()), "runs": runs})

    def watched_files(self, build: BuildResult) -> set[str]:
        """Files whose change triggers a rebuild.

        That is the tree, every tsconfig already loaded, and the config
        names in each directory from a tree file up to the workspace root
        (so a config created there is picked up too).
        """
        files = {strip_importer_suffix(file) for file in build.tree}
        root = self._project.workspace_root(Path(build.entry))
        config_names = self._project.settings.scan.config_names

        directories: set[Path] = set()
        for file in files:
            for directory in iter_ancestors(Path(file).parent):
                directories.add(directory)
                if directory == root or not directory.is_relative_to(root):
                    break

        for directory in directories:
            files.update(str(directory / name) for name in config_names)
        files.update(str(path) for path in self._project.config_files)
        return files

    def _wait_for_change(
        self,
        build: BuildResult,
        stop_event: threading.Event | None,
    ) -> set[str] | None:
        """Block until a watched file changes; None when stopped."""
        files = self.watched_files(build)
        directories = sorted({str(Path(file).parent) for file in files if Path(file).parent.is_dir()})
        if not directories:
            return None

        def is_watched(_change: watchfiles.Change, path: str) -> bool:
            return path in files

        for changes in watchfiles.watch(
            *directories,
            watch_filter=is_watched,
            debounce=self._project.settings.watch.debounce_ms,
            stop_event=stop_event,
            recursive=False,
            raise_interrupt=False,
        ):
            return {path for _change, path in changes}
        return None
