"""Shared pytest fixtures for tscycles tests.

Projects are written into ``tmp_path`` as small monorepos; nothing is
read from a real ``node_modules``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
import structlog
from click.testing import CliRunner

from tscycles.config.settings import TscyclesSettings
from tscycles.infrastructure.project import Project

type WriteTree = Callable[[dict[str, Any]], Path]


@pytest.fixture(autouse=True)
def _no_env_config(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's TSCYCLES_* environment out of the tests."""
    monkeypatch.delenv("TSCYCLES_CONFIG", raising=False)
    monkeypatch.delenv("TSCYCLES_VERBOSE", raising=False)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """CLI invocations reconfigure logging onto the runner's streams; undo that."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("tscycles").setLevel(logging.NOTSET)
    structlog.reset_defaults()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def write_tree(tmp_path: Path) -> WriteTree:
    """Write ``{relative path: content}`` under ``tmp_path``.

    Dict and list contents are serialized as JSON. Returns the resolved
    root so paths compare equal to the ones the resolver reports.
    """
    root = tmp_path.resolve()

    def _write(files: dict[str, Any]) -> Path:
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, (dict, list)):
                content = json.dumps(content, indent=2)
            path.write_text(content, encoding="utf-8")
        return root

    return _write


@pytest.fixture
def settings(tmp_path: Path) -> TscyclesSettings:
    return TscyclesSettings.from_cli(cwd=tmp_path)


@pytest.fixture
def project(settings: TscyclesSettings) -> Project:
    return Project(settings)
