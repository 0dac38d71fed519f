"""ResolveService — explain how one specifier resolves from one file."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from tscycles.domain.specifiers import is_absolute, is_relative, split_query
from tscycles.infrastructure.resolvers import ResolutionStatus
from tscycles.services.base import BaseService
from tscycles.services.result import ServiceResult


def _kind(specifier: str) -> str:
    if is_relative(specifier):
        return "relative"
    if is_absolute(specifier):
        return "absolute"
    return "ambiguous"


class ResolveService(BaseService):
    """Diagnostics for the resolver chain."""

    def resolve(self, specifier: str, importer: Path | str) -> ServiceResult:
        return asyncio.run(self._resolve(specifier, Path(importer)))

    async def _resolve(self, specifier: str, importer: Path) -> ServiceResult:
        if (error := self._check_entry("resolve", importer)) is not None:
            return error

        importer = importer.resolve()
        kind = _kind(specifier)
        data: dict[str, Any] = {
            "specifier": specifier,
            "importer": str(importer),
            "kind": kind,
            "resolved": False,
            "path": None,
            "via": None,
            "config": None,
        }

        if kind == "absolute":
            data.update(resolved=True, path=specifier, via="absolute")
            return ServiceResult(ok=True, op="resolve", data=data)

        if kind == "ambiguous":
            registry = self._project.registry_for(importer)
            resolution = await registry.resolve(specifier, str(importer))
            if resolution.applicable:
                data["config"] = str(resolution.source) if resolution.source else None
                data["via"] = "tsconfig"
                if resolution.status is ResolutionStatus.RESOLVED:
                    data.update(resolved=True, path=resolution.path)
                return ServiceResult(
                    ok=True,
                    op="resolve",
                    data=data,
                    warnings=self._project.registry_warnings,
                )

        _bare, query = split_query(specifier)
        found = await self._project.resolve_default(specifier, importer.parent)
        data["via"] = "default"
        if found is not None:
            data.update(resolved=True, path=str(found) + query)
        return ServiceResult(ok=True, op="resolve", data=data, warnings=self._project.registry_warnings)
