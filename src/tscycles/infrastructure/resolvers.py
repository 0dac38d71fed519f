"""Directory-scoped resolution of ambiguous specifiers.

Every tsconfig that declares ``baseUrl`` or ``paths`` becomes a
:class:`ProjectResolver`. The :class:`ResolverRegistry` indexes them by
config directory and, for one importing file, asks them nearest-first.
The first resolver that *applies* to the importer decides the outcome,
resolved or not; ancestors are never consulted after that.
"""

from __future__ import annotations

import logging
import os
from collections import deque
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from tscycles.config.discovery import iter_ancestors
from tscycles.config.models import ScanConfig
from tscycles.domain.specifiers import is_supported_file, split_query, strip_importer_suffix
from tscycles.infrastructure.tsconfig import ProjectConfig, TSConfigError, TSConfigLoader
from tscycles.infrastructure.workspace import find_config_files

logger = logging.getLogger(__name__)

type DefaultResolve = Callable[[str, Path], Awaitable[Path | None]]


class ResolutionStatus(StrEnum):
    NOT_APPLICABLE = "not_applicable"
    UNRESOLVED = "unresolved"
    RESOLVED = "resolved"


@dataclass(frozen=True)
class Resolution:
    """Outcome of asking one resolver (or the whole registry)."""

    status: ResolutionStatus
    path: str | None = None
    source: Path | None = None  # tsconfig of the resolver that applied

    @classmethod
    def resolved(cls, path: str, source: Path | None = None) -> Resolution:
        return cls(ResolutionStatus.RESOLVED, path, source)

    @property
    def applicable(self) -> bool:
        return self.status is not ResolutionStatus.NOT_APPLICABLE


NOT_APPLICABLE = Resolution(ResolutionStatus.NOT_APPLICABLE)


class ProjectResolver:
    """Resolve specifiers for the files one tsconfig governs.

    Lookup order inside an applicable resolver: ``paths`` aliases (longest
    literal prefix first), then ``baseUrl``, then a plain package lookup
    from the importer's directory.
    """

    def __init__(self, config: ProjectConfig, default_resolve: DefaultResolve) -> None:
        self.config = config
        self._mappings = config.mappings()
        self._includer = config.includer()
        self._default_resolve = default_resolve
        self._cache: dict[str, str] = {}

    @property
    def directory(self) -> Path:
        return self.config.directory

    def applies_to(self, importer: str) -> bool:
        """Whether *importer* is a source file this config selects."""
        importer = strip_importer_suffix(importer)
        if not is_supported_file(importer):
            return False
        relative = os.path.relpath(importer, self.directory).replace(os.sep, "/")
        return self._includer(relative)

    async def resolve(self, specifier: str, importer: str) -> Resolution:
        if not self.applies_to(importer):
            return NOT_APPLICABLE

        bare, query = split_query(specifier)
        cached = self._cache.get(bare)
        if cached is None:
            found = await self._lookup(bare, Path(strip_importer_suffix(importer)).parent)
            if found is None:
                logger.debug("%s: '%s' unresolved under %s", importer, specifier, self.config.config_file)
                return Resolution(ResolutionStatus.UNRESOLVED, source=self.config.config_file)
            cached = self._cache[bare] = str(found)
        return Resolution.resolved(cached + query, self.config.config_file)

    async def _lookup(self, specifier: str, importer_dir: Path) -> Path | None:
        for mapping in self._mappings:
            captured = mapping.match(specifier)
            if captured is None:
                continue
            for candidate in mapping.candidates(captured):
                found = await self._default_resolve(candidate, importer_dir)
                if found is not None:
                    return found

        if self.config.base_url is not None:
            found = await self._default_resolve(os.path.join(self.config.base_url, specifier), importer_dir)
            if found is not None:
                return found

        return await self._default_resolve(specifier, importer_dir)

    def __repr__(self) -> str:
        return f"ProjectResolver({self.config.config_file})"


class ResolverRegistry:
    """Resolvers keyed by config directory, in discovery order."""

    def __init__(self, resolvers: dict[Path, list[ProjectResolver]] | None = None) -> None:
        self._resolvers = resolvers or {}

    def __len__(self) -> int:
        return sum(len(group) for group in self._resolvers.values())

    def __iter__(self) -> Iterator[ProjectResolver]:
        for group in self._resolvers.values():
            yield from group

    def resolvers_for(self, directory: Path) -> list[ProjectResolver]:
        return list(self._resolvers.get(directory, ()))

    async def resolve(self, specifier: str, importer: str) -> Resolution:
        """Ask resolvers from the importer's directory upward.

        Returns the first applicable outcome, or :data:`NOT_APPLICABLE`
        when no config anywhere governs *importer*.
        """
        start = Path(strip_importer_suffix(importer)).parent
        for directory in iter_ancestors(start):
            for resolver in self._resolvers.get(directory, ()):
                result = await resolver.resolve(specifier, importer)
                if result.applicable:
                    return result
        return NOT_APPLICABLE


def build_registry(
    root: Path,
    loader: TSConfigLoader,
    scan: ScanConfig,
    default_resolve: DefaultResolve,
    warnings: list[str] | None = None,
) -> ResolverRegistry:
    """Discover every config under *root* and build the registry.

    Configs that fail to load are skipped; their errors are appended to
    *warnings*. Solution-style configs queue the configs they reference.
    """
    queue = deque(find_config_files(root, scan.config_names, scan.skip_dirs))
    seen: set[Path] = set()
    resolvers: dict[Path, list[ProjectResolver]] = {}

    while queue:
        path = queue.popleft().resolve()
        if path in seen:
            continue
        seen.add(path)

        try:
            config = loader.load(path)
        except TSConfigError as exc:
            logger.warning("Skipping tsconfig: %s", exc)
            if warnings is not None:
                warnings.append(f"Skipped tsconfig {exc}")
            continue

        if config.is_extended_only:
            queue.extend(config.references)
            continue
        if not config.creates_resolver:
            continue
        resolvers.setdefault(config.directory, []).append(ProjectResolver(config, default_resolve))

    registry = ResolverRegistry(resolvers)
    logger.debug("Built %d resolver(s) from %d config(s) under %s", len(registry), len(seen), root)
    return registry
