"""Workspace root lookup and config file enumeration.

The workspace root bounds tsconfig discovery. It is the nearest ancestor
whose ``package.json`` declares ``workspaces`` (or that holds a
``pnpm-workspace.yaml``); without one, the nearest ancestor with any
``package.json``; without that, the starting directory itself.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable
from pathlib import Path

from tscycles.config.discovery import iter_ancestors

logger = logging.getLogger(__name__)

PACKAGE_MANIFEST = "package.json"
PNPM_WORKSPACE = "pnpm-workspace.yaml"


def has_package_json(directory: Path) -> bool:
    return (directory / PACKAGE_MANIFEST).is_file()


def declares_workspace(directory: Path) -> bool:
    """True when *directory* is the root of a multi-package workspace."""
    if (directory / PNPM_WORKSPACE).is_file():
        return True
    manifest = directory / PACKAGE_MANIFEST
    if not manifest.is_file():
        return False
    try:
        content = json.loads(manifest.read_text(encoding="utf-8")) or {}
    except (OSError, ValueError):
        logger.debug("Unreadable manifest %s", manifest, exc_info=True)
        return False
    return isinstance(content, dict) and content.get("workspaces") is not None


def find_package_root(start: Path) -> Path:
    """Nearest ancestor of *start* (inclusive) with a package.json, else *start*."""
    for directory in iter_ancestors(start):
        if has_package_json(directory):
            return directory
    return start


class WorkspaceLocator:
    """Workspace-root lookup with a per-input-path cache.

    The cache lives as long as the locator; a :class:`Project` owns one
    and drops it on ``reset()``.
    """

    def __init__(self) -> None:
        self._cache: dict[Path, Path] = {}

    def find_workspace_root(self, start: Path) -> Path:
        start = start.resolve()
        if start.is_file():
            start = start.parent
        cached = self._cache.get(start)
        if cached is not None:
            return cached

        root = next(
            (directory for directory in iter_ancestors(start) if declares_workspace(directory)),
            None,
        )
        if root is None:
            root = find_package_root(start)
        self._cache[start] = root
        return root

    def clear(self) -> None:
        self._cache.clear()


def find_config_files(root: Path, names: Iterable[str], skip_dirs: Iterable[str]) -> list[Path]:
    """Every file under *root* named one of *names*, sorted, skipping *skip_dirs*."""
    wanted = frozenset(names)
    skipped = frozenset(skip_dirs)
    found: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in skipped)
        found.extend(Path(dirpath) / name for name in sorted(filenames) if name in wanted)
    return found
