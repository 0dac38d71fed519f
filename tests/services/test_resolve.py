"""Tests for ResolveService."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from tscycles.infrastructure.project import Project
from tscycles.services.resolve import ResolveService

TREE = {
    "package.json": {"name": "app"},
    "tsconfig.json": {"compilerOptions": {"paths": {"@/*": ["./src/*"], "@gone/*": ["./gone/*"]}}},
    "src/a.ts": "",
    "src/b.ts": "",
    "node_modules/lib/index.js": "",
}


@pytest.fixture
def root(write_tree: Callable[..., Path]) -> Path:
    return write_tree(TREE)


class TestResolve:
    def test_alias(self, project: Project, root: Path) -> None:
        result = ResolveService(project).resolve("@/b", root / "src/a.ts")
        assert result.ok
        assert result.data["kind"] == "ambiguous"
        assert result.data["resolved"] is True
        assert result.data["path"] == str(root / "src/b.ts")
        assert result.data["via"] == "tsconfig"
        assert result.data["config"] == str(root / "tsconfig.json")

    def test_alias_miss_is_final(self, project: Project, root: Path) -> None:
        result = ResolveService(project).resolve("@gone/x", root / "src/a.ts")
        assert result.ok
        assert result.data["resolved"] is False
        assert result.data["path"] is None
        assert result.data["via"] == "tsconfig"

    def test_package_through_governing_config(self, project: Project, root: Path) -> None:
        result = ResolveService(project).resolve("lib", root / "src/a.ts")
        assert result.data["path"] == str(root / "node_modules/lib/index.js")
        assert result.data["via"] == "tsconfig"

    def test_relative_uses_default(self, project: Project, root: Path) -> None:
        result = ResolveService(project).resolve("./b?raw", root / "src/a.ts")
        assert result.data["kind"] == "relative"
        assert result.data["via"] == "default"
        assert result.data["path"] == str(root / "src/b.ts") + "?raw"

    def test_absolute(self, project: Project, root: Path) -> None:
        target = str(root / "src/b.ts")
        result = ResolveService(project).resolve(target, root / "src/a.ts")
        assert result.data["kind"] == "absolute"
        assert result.data["path"] == target

    def test_ungoverned_falls_back_to_default(
        self, project: Project, write_tree: Callable[..., Path]
    ) -> None:
        root = write_tree({"package.json": {"name": "app"}, "a.ts": "", "node_modules/lib/index.js": ""})
        result = ResolveService(project).resolve("lib", root / "a.ts")
        assert result.data["via"] == "default"
        assert result.data["config"] is None
        assert result.data["resolved"] is True

    def test_missing_importer(self, project: Project, tmp_path: Path) -> None:
        result = ResolveService(project).resolve("./x", tmp_path / "nope.ts")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "ENTRY_NOT_FOUND"
