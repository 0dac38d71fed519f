"""tsconfig.json loading with ``extends`` flattening.

Each loaded file becomes one :class:`ProjectConfig` holding absolute
paths and globs relative to its own directory, so nothing downstream has
to know about the ``extends`` chain that produced it.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from tscycles.config.discovery import iter_ancestors
from tscycles.domain import jsonc
from tscycles.domain.aliases import PathMapping, build_mappings
from tscycles.domain.globs import Includer
from tscycles.domain.specifiers import is_absolute, is_relative

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "tsconfig.json"

# pattern -> (directory the pattern was declared in, targets)
type PathsMap = dict[str, tuple[str, tuple[str, ...]]]


class TSConfigError(Exception):
    """A tsconfig file that cannot be read, parsed, or extended."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


@dataclass(frozen=True)
class ProjectConfig:
    """One tsconfig file after ``extends`` merging.

    ``include``, ``exclude`` and ``files`` are None when neither the file
    nor any config it extends declares them, and are relative to the
    directory of ``config_file`` otherwise.
    """

    config_file: Path
    base_url: Path | None = None
    paths: PathsMap | None = None
    include: tuple[str, ...] | None = None
    exclude: tuple[str, ...] | None = None
    files: tuple[str, ...] | None = None
    out_dir: Path | None = None
    references: tuple[Path, ...] = ()
    has_compiler_options: bool = False

    @property
    def directory(self) -> Path:
        return self.config_file.parent

    @property
    def is_extended_only(self) -> bool:
        """Both ``files`` and ``include`` explicitly empty: a pass-through."""
        return self.files == () and self.include == ()

    @property
    def creates_resolver(self) -> bool:
        return (
            not self.is_extended_only
            and self.has_compiler_options
            and (self.base_url is not None or self.paths is not None)
        )

    def mappings(self) -> list[PathMapping]:
        """Alias mappings, longest literal prefix first.

        Targets are relative to ``baseUrl`` when one is in effect, otherwise
        to the directory of the config that declared the pattern.
        """
        if not self.paths:
            return []
        return build_mappings(
            {
                pattern: (str(self.base_url) if self.base_url is not None else declared_in, targets)
                for pattern, (declared_in, targets) in self.paths.items()
            }
        )

    def includer(self) -> Includer:
        out_dir = None
        if self.out_dir is not None:
            out_dir = os.path.relpath(self.out_dir, self.directory).replace(os.sep, "/")
        return Includer(include=self.include, exclude=self.exclude, out_dir=out_dir, files=self.files)


def _rebase(patterns: tuple[str, ...] | None, source: Path, target: Path) -> tuple[str, ...] | None:
    """Re-express globs relative to *source* as globs relative to *target*."""
    if patterns is None or source == target:
        return patterns
    return tuple(
        os.path.relpath(os.path.normpath(os.path.join(source, pattern)), target).replace(os.sep, "/")
        for pattern in patterns
    )


def _string_list(raw: Mapping[str, Any], key: str, path: Path) -> tuple[str, ...] | None:
    if key not in raw:
        return None
    value = raw[key]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise TSConfigError(path, f"'{key}' must be a list of strings")
    return tuple(value)


class TSConfigLoader:
    """Parse tsconfig files, following ``extends``; caches by path."""

    def __init__(self) -> None:
        self._cache: dict[Path, ProjectConfig] = {}

    def load(self, path: Path) -> ProjectConfig:
        """Load *path* with its ``extends`` chain merged in.

        Raises:
            TSConfigError: on unreadable or malformed JSON, a missing
                ``extends`` target, or an ``extends`` loop.
        """
        return self._load(path.resolve(), ())

    @property
    def loaded_files(self) -> list[Path]:
        """Every config parsed so far, ``extends`` parents included."""
        return sorted(self._cache)

    def clear(self) -> None:
        self._cache.clear()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _load(self, path: Path, chain: tuple[Path, ...]) -> ProjectConfig:
        cached = self._cache.get(path)
        if cached is not None:
            return cached
        if path in chain:
            cycle = " -> ".join(str(p) for p in (*chain, path))
            raise TSConfigError(path, f"extends loop: {cycle}")

        raw = self._read(path)
        directory = path.parent
        parents = [self._load(parent, (*chain, path)) for parent in self._extends_targets(raw, path)]

        base_url: Path | None = None
        out_dir: Path | None = None
        paths: PathsMap | None = None
        include = exclude = files = None
        has_compiler_options = False
        for parent in parents:
            base_url = parent.base_url if parent.base_url is not None else base_url
            out_dir = parent.out_dir if parent.out_dir is not None else out_dir
            paths = parent.paths if parent.paths is not None else paths
            include = _rebase(parent.include, parent.directory, directory) or include
            exclude = _rebase(parent.exclude, parent.directory, directory) or exclude
            files = _rebase(parent.files, parent.directory, directory) or files
            has_compiler_options = has_compiler_options or parent.has_compiler_options

        options = raw.get("compilerOptions")
        if options is not None:
            if not isinstance(options, dict):
                raise TSConfigError(path, "'compilerOptions' must be an object")
            has_compiler_options = True
            if isinstance(options.get("baseUrl"), str):
                base_url = Path(os.path.normpath(directory / options["baseUrl"]))
            if isinstance(options.get("outDir"), str):
                out_dir = Path(os.path.normpath(directory / options["outDir"]))
            own_paths = options.get("paths")
            if own_paths is not None:
                paths = self._parse_paths(own_paths, path)

        own_include = _string_list(raw, "include", path)
        own_exclude = _string_list(raw, "exclude", path)
        own_files = _string_list(raw, "files", path)

        config = ProjectConfig(
            config_file=path,
            base_url=base_url,
            paths=paths,
            include=own_include if own_include is not None else include,
            exclude=own_exclude if own_exclude is not None else exclude,
            files=own_files if own_files is not None else files,
            out_dir=out_dir,
            references=self._references(raw, directory),
            has_compiler_options=has_compiler_options,
        )
        self._cache[path] = config
        logger.debug("Loaded tsconfig %s (extends %d)", path, len(parents))
        return config

    def _read(self, path: Path) -> dict[str, Any]:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise TSConfigError(path, f"cannot read ({exc.strerror or exc})") from exc
        try:
            raw = jsonc.loads(text)
        except json.JSONDecodeError as exc:
            raise TSConfigError(path, f"invalid JSON at line {exc.lineno}: {exc.msg}") from exc
        if not isinstance(raw, dict):
            raise TSConfigError(path, "top level must be an object")
        return raw

    def _extends_targets(self, raw: Mapping[str, Any], path: Path) -> list[Path]:
        extends = raw.get("extends")
        if extends is None:
            return []
        if isinstance(extends, str):
            extends = [extends]
        if not isinstance(extends, list) or not all(isinstance(item, str) for item in extends):
            raise TSConfigError(path, "'extends' must be a string or a list of strings")
        return [self._locate(specifier, path) for specifier in extends]

    def _locate(self, specifier: str, path: Path) -> Path:
        """Find the file an ``extends`` entry names."""
        directory = path.parent
        if is_relative(specifier) or is_absolute(specifier):
            candidates = [directory / specifier]
        else:
            candidates = [
                ancestor / "node_modules" / specifier for ancestor in iter_ancestors(directory)
            ]
        for base in candidates:
            for candidate in (base, base.with_name(base.name + ".json"), base / DEFAULT_CONFIG_NAME):
                if candidate.is_file():
                    return candidate.resolve()
        raise TSConfigError(path, f"cannot find extended config '{specifier}'")

    @staticmethod
    def _parse_paths(value: Any, path: Path) -> PathsMap:
        if not isinstance(value, dict):
            raise TSConfigError(path, "'compilerOptions.paths' must be an object")
        parsed: PathsMap = {}
        for pattern, targets in value.items():
            if not isinstance(targets, list) or not all(isinstance(t, str) for t in targets):
                raise TSConfigError(path, f"paths entry '{pattern}' must be a list of strings")
            if pattern.count("*") > 1:
                logger.warning("Ignoring paths pattern with more than one '*': %s in %s", pattern, path)
                continue
            parsed[pattern] = (str(path.parent), tuple(targets))
        return parsed

    @staticmethod
    def _references(raw: Mapping[str, Any], directory: Path) -> tuple[Path, ...]:
        references: list[Path] = []
        for entry in raw.get("references") or ():
            if not isinstance(entry, dict) or not isinstance(entry.get("path"), str):
                continue
            target = Path(os.path.normpath(directory / entry["path"]))
            if target.suffix != ".json":
                target = target / DEFAULT_CONFIG_NAME
            references.append(target)
        return tuple(references)
