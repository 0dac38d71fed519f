"""Default module resolution — Node/Bun-style package lookup.

Turns a specifier plus a base directory into an absolute file path:

- relative and absolute specifiers probe the exact file, then each
  configured extension, then the TypeScript ``.js -> .ts`` convention,
  then the directory's ``package.json`` main fields and ``index`` files;
- bare specifiers walk up ``node_modules`` directories and honour the
  package's ``exports`` map (conditional and ``*`` subpaths) before its
  main fields.

Never raises for a missing module; returns None instead. Results are
symlink-resolved so workspace packages linked into ``node_modules`` map
to their real source files.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from tscycles.config.discovery import iter_ancestors
from tscycles.config.models import ResolveConfig
from tscycles.domain.specifiers import is_absolute, is_relative, split_query

logger = logging.getLogger(__name__)

# foo.js may be authored as foo.ts under TypeScript's ESM conventions.
_TS_SOURCE_FOR: dict[str, tuple[str, ...]] = {
    ".js": (".ts", ".tsx"),
    ".jsx": (".tsx",),
    ".mjs": (".mts",),
    ".cjs": (".cts",),
}


def split_package_name(specifier: str) -> tuple[str, str]:
    """Split ``"@scope/pkg/sub/path"`` into ``("@scope/pkg", "./sub/path")``.

    Examples:
        >>> split_package_name("lodash")
        ('lodash', '.')
        >>> split_package_name("@org/utils/a")
        ('@org/utils', './a')
    """
    parts = specifier.split("/")
    count = 2 if specifier.startswith("@") and len(parts) > 1 else 1
    name = "/".join(parts[:count])
    rest = "/".join(parts[count:])
    return name, f"./{rest}" if rest else "."


def _read_manifest(directory: Path) -> dict[str, Any]:
    manifest = directory / "package.json"
    if not manifest.is_file():
        return {}
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        logger.debug("Ignoring unreadable manifest %s", manifest, exc_info=True)
        return {}
    return data if isinstance(data, dict) else {}


class NodeResolver:
    """Resolve specifiers the way a bundler's default resolver does."""

    def __init__(self, config: ResolveConfig | None = None) -> None:
        self._config = config or ResolveConfig()
        self._conditions = frozenset(self._config.conditions)

    def resolve(self, specifier: str, base_dir: Path) -> Path | None:
        specifier, _query = split_query(specifier)
        if not specifier or specifier.startswith("node:"):
            return None
        if is_relative(specifier) or is_absolute(specifier):
            target = os.path.normpath(os.path.join(base_dir, specifier))
            found = self._resolve_path(target)
        else:
            found = self._resolve_package(specifier, base_dir)
        return Path(found).resolve() if found else None

    # ------------------------------------------------------------------
    # Files and directories
    # ------------------------------------------------------------------

    def _resolve_path(self, target: str) -> str | None:
        return self._resolve_file(target) or self._resolve_directory(target)

    def _resolve_file(self, target: str) -> str | None:
        if os.path.isfile(target):
            return target
        for ext in self._config.extensions:
            if os.path.isfile(target + ext):
                return target + ext
        stem, ext = os.path.splitext(target)
        for source_ext in _TS_SOURCE_FOR.get(ext, ()):
            if os.path.isfile(stem + source_ext):
                return stem + source_ext
        return None

    def _resolve_directory(self, target: str) -> str | None:
        if not os.path.isdir(target):
            return None
        manifest = _read_manifest(Path(target))
        for main_field in self._config.main_fields:
            entry = manifest.get(main_field)
            if isinstance(entry, str) and entry.strip("./"):
                found = self._resolve_file(os.path.normpath(os.path.join(target, entry)))
                found = found or self._resolve_index(os.path.join(target, entry))
                if found:
                    return found
        return self._resolve_index(target)

    def _resolve_index(self, directory: str) -> str | None:
        for ext in self._config.extensions:
            candidate = os.path.join(directory, f"index{ext}")
            if os.path.isfile(candidate):
                return candidate
        return None

    # ------------------------------------------------------------------
    # Packages
    # ------------------------------------------------------------------

    def _resolve_package(self, specifier: str, base_dir: Path) -> str | None:
        name, subpath = split_package_name(specifier)
        for directory in iter_ancestors(base_dir):
            package_dir = directory / "node_modules" / name
            if not package_dir.is_dir():
                continue
            manifest = _read_manifest(package_dir)
            exports = manifest.get("exports")
            if exports is not None:
                found = self._resolve_exports(package_dir, exports, subpath)
                if found:
                    return found
            if subpath == ".":
                found = self._resolve_directory(str(package_dir))
            else:
                found = self._resolve_path(os.path.normpath(os.path.join(package_dir, subpath)))
            if found:
                return found
        return None

    def _resolve_exports(self, package_dir: Path, exports: Any, subpath: str) -> str | None:
        if not isinstance(exports, dict) or not any(key.startswith(".") for key in exports):
            exports = {".": exports}

        target: str | None = None
        if subpath in exports:
            target = self._pick_condition(exports[subpath])
        else:
            for key, value in exports.items():
                if "*" not in key:
                    continue
                prefix, _, suffix = key.partition("*")
                if subpath.startswith(prefix) and subpath.endswith(suffix):
                    captured = subpath[len(prefix) : len(subpath) - len(suffix)]
                    picked = self._pick_condition(value)
                    target = picked.replace("*", captured) if picked else None
                    break
        if not target:
            return None
        return self._resolve_file(os.path.normpath(os.path.join(package_dir, target)))

    def _pick_condition(self, value: Any) -> str | None:
        """Select an ``exports`` target by condition, in declaration order."""
        if isinstance(value, str):
            return value
        if isinstance(value, list):
            for item in value:
                picked = self._pick_condition(item)
                if picked:
                    return picked
            return None
        if isinstance(value, dict):
            for condition, nested in value.items():
                if condition in self._conditions:
                    picked = self._pick_condition(nested)
                    if picked:
                        return picked
        return None
