"""BaseService — foundation for all tscycles services.

Every service receives a :class:`Project` at construction time. The
Project owns the settings, plugin hooks and every resolution cache, so
services themselves stay stateless.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from tscycles.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from tscycles.infrastructure.project import Project


class BaseService:
    """Base for service-layer classes.

    Usage::

        class CycleService(BaseService):
            def check(self, entry: Path) -> ServiceResult:
                if (error := self._check_entry("check", entry)) is not None:
                    return error
                ...
    """

    def __init__(self, project: Project) -> None:
        self._project = project

    @staticmethod
    def _check_entry(op: str, entry: Path) -> ServiceResult | None:
        """Error result when *entry* is not a readable file, else None."""
        if not entry.is_file():
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="ENTRY_NOT_FOUND",
                    message=f"Entry file not found: {entry}",
                    detail={"entry": str(entry)},
                ),
            )
        if not os.access(entry, os.R_OK):
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="ENTRY_UNREADABLE",
                    message=f"Entry file is not readable: {entry}",
                    detail={"entry": str(entry)},
                ),
            )
        return None
