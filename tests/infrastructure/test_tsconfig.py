"""Tests for tsconfig loading and ``extends`` merging."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from tscycles.infrastructure.tsconfig import ProjectConfig, TSConfigError, TSConfigLoader


class TestParsing:
    def test_jsonc_with_comments_and_trailing_commas(self, write_tree: Callable[..., Path]) -> None:
        root = write_tree(
            {
                "tsconfig.json": """{
  // monorepo base
  "compilerOptions": {
    "baseUrl": ".", /* resolve from root */
    "paths": { "@app/*": ["src/*"], },
  },
}"""
            }
        )
        config = TSConfigLoader().load(root / "tsconfig.json")
        assert config.base_url == root
        assert config.paths == {"@app/*": (str(root), ("src/*",))}
        assert config.has_compiler_options

    def test_invalid_json(self, write_tree: Callable[..., Path]) -> None:
        root = write_tree({"tsconfig.json": '{"compilerOptions": {'})
        with pytest.raises(TSConfigError, match="invalid JSON"):
            TSConfigLoader().load(root / "tsconfig.json")

    def test_non_object_top_level(self, write_tree: Callable[..., Path]) -> None:
        root = write_tree({"tsconfig.json": "[]"})
        with pytest.raises(TSConfigError, match="object"):
            TSConfigLoader().load(root / "tsconfig.json")

    def test_paths_must_map_to_lists(self, write_tree: Callable[..., Path]) -> None:
        root = write_tree({"tsconfig.json": {"compilerOptions": {"paths": {"@a/*": "src/*"}}}})
        with pytest.raises(TSConfigError, match="@a/\\*"):
            TSConfigLoader().load(root / "tsconfig.json")

    def test_out_dir_and_file_lists(self, write_tree: Callable[..., Path]) -> None:
        root = write_tree(
            {
                "tsconfig.json": {
                    "compilerOptions": {"outDir": "dist"},
                    "include": ["src"],
                    "exclude": ["src/**/*.spec.ts"],
                    "files": ["main.ts"],
                }
            }
        )
        config = TSConfigLoader().load(root / "tsconfig.json")
        assert config.out_dir == root / "dist"
        assert config.include == ("src",)
        assert config.exclude == ("src/**/*.spec.ts",)
        assert config.files == ("main.ts",)


class TestExtends:
    def test_child_overrides_parent(self, write_tree: Callable[..., Path]) -> None:
        root = write_tree(
            {
                "tsconfig.base.json": {
                    "compilerOptions": {
                        "baseUrl": ".",
                        "paths": {"@shared/*": ["shared/*"], "@app/*": ["old/*"]},
                    },
                    "include": ["**/*.ts"],
                },
                "app/tsconfig.json": {
                    "extends": "../tsconfig.base",
                    "compilerOptions": {"paths": {"@app/*": ["src/*"]}},
                },
            }
        )
        config = TSConfigLoader().load(root / "app/tsconfig.json")
        assert config.base_url == root
        # A child that declares paths replaces the parent map whole.
        assert config.paths == {"@app/*": (str(root / "app"), ("src/*",))}
        # Inherited globs stay anchored to the parent's directory.
        assert config.include == ("../**/*.ts",)

    def test_paths_resolve_against_effective_base_url(self, write_tree: Callable[..., Path]) -> None:
        root = write_tree(
            {
                "tsconfig.base.json": {"compilerOptions": {"paths": {"@lib/*": ["lib/*"]}}},
                "app/tsconfig.json": {
                    "extends": "../tsconfig.base.json",
                    "compilerOptions": {"baseUrl": "src"},
                },
            }
        )
        config = TSConfigLoader().load(root / "app/tsconfig.json")
        [mapping] = config.mappings()
        assert mapping.targets == (str(root / "app/src/lib/*"),)

    def test_paths_without_base_url_use_declaring_directory(
        self, write_tree: Callable[..., Path]
    ) -> None:
        root = write_tree(
            {
                "tsconfig.base.json": {"compilerOptions": {"paths": {"@lib/*": ["lib/*"]}}},
                "app/tsconfig.json": {"extends": "../tsconfig.base.json"},
            }
        )
        [mapping] = TSConfigLoader().load(root / "app/tsconfig.json").mappings()
        assert mapping.targets == (str(root / "lib/*"),)

    def test_extends_list_later_entries_win(self, write_tree: Callable[..., Path]) -> None:
        root = write_tree(
            {
                "a.json": {"compilerOptions": {"baseUrl": "a"}},
                "b.json": {"compilerOptions": {"baseUrl": "b"}},
                "tsconfig.json": {"extends": ["./a.json", "./b.json"]},
            }
        )
        assert TSConfigLoader().load(root / "tsconfig.json").base_url == root / "b"

    def test_extends_package(self, write_tree: Callable[..., Path]) -> None:
        root = write_tree(
            {
                "node_modules/@org/tsconfig/tsconfig.json": {"compilerOptions": {"baseUrl": "."}},
                "node_modules/@org/tsconfig/strict.json": {"compilerOptions": {"outDir": "out"}},
                "app/tsconfig.json": {"extends": "@org/tsconfig"},
                "lib/tsconfig.json": {"extends": "@org/tsconfig/strict.json"},
            }
        )
        loader = TSConfigLoader()
        assert loader.load(root / "app/tsconfig.json").base_url == root / "node_modules/@org/tsconfig"
        assert loader.load(root / "lib/tsconfig.json").out_dir == root / "node_modules/@org/tsconfig/out"

    def test_missing_parent(self, write_tree: Callable[..., Path]) -> None:
        root = write_tree({"tsconfig.json": {"extends": "./nope.json"}})
        with pytest.raises(TSConfigError, match="nope.json"):
            TSConfigLoader().load(root / "tsconfig.json")

    def test_extends_loop(self, write_tree: Callable[..., Path]) -> None:
        root = write_tree(
            {
                "a.json": {"extends": "./b.json"},
                "b.json": {"extends": "./a.json"},
            }
        )
        with pytest.raises(TSConfigError, match="loop"):
            TSConfigLoader().load(root / "a.json")

    def test_shared_parent_parsed_once(self, write_tree: Callable[..., Path]) -> None:
        root = write_tree(
            {
                "base.json": {"compilerOptions": {"baseUrl": "."}},
                "a/tsconfig.json": {"extends": "../base.json"},
                "b/tsconfig.json": {"extends": "../base.json"},
            }
        )
        loader = TSConfigLoader()
        loader.load(root / "a/tsconfig.json")
        (root / "base.json").write_text("{ broken", encoding="utf-8")
        assert loader.load(root / "b/tsconfig.json").base_url == root

        loader.clear()
        with pytest.raises(TSConfigError):
            loader.load(root / "b/tsconfig.json")


class TestProjectConfig:
    def test_extended_only(self, write_tree: Callable[..., Path]) -> None:
        root = write_tree(
            {
                "tsconfig.json": {
                    "compilerOptions": {"baseUrl": "."},
                    "files": [],
                    "include": [],
                    "references": [{"path": "./app"}, {"path": "./lib/tsconfig.lib.json"}],
                }
            }
        )
        config = TSConfigLoader().load(root / "tsconfig.json")
        assert config.is_extended_only
        assert not config.creates_resolver
        assert config.references == (root / "app/tsconfig.json", root / "lib/tsconfig.lib.json")

    def test_resolver_needs_compiler_options_with_base_url_or_paths(self) -> None:
        path = Path("/r/tsconfig.json")
        assert not ProjectConfig(path).creates_resolver
        assert not ProjectConfig(path, has_compiler_options=True).creates_resolver
        assert ProjectConfig(path, base_url=Path("/r"), has_compiler_options=True).creates_resolver
        assert ProjectConfig(path, paths={}, has_compiler_options=True).creates_resolver

    def test_includer_excludes_out_dir(self) -> None:
        config = ProjectConfig(Path("/r/tsconfig.json"), out_dir=Path("/r/build"))
        includer = config.includer()
        assert includer("src/a.ts")
        assert not includer("build/a.js")
