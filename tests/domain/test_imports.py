"""Tests for the regex import scanner and the line predicate."""

import pytest

from tscycles.domain.imports import ScannedImport, has_import, is_type_only_clause, scan_imports


def specifiers(code: str) -> list[str]:
    return [item.specifier for item in scan_imports(code)]


class TestScanImports:
    @pytest.mark.parametrize(
        ("code", "expected"),
        [
            ("import './side-effect'", ["./side-effect"]),
            ("import a from './default'", ["./default"]),
            ("import * as ns from './namespace'", ["./namespace"]),
            ("import { a, b as c } from './named'", ["./named"]),
            ("import a, { b } from './mixed'", ["./mixed"]),
            ("import a, * as ns from './mixed-ns'", ["./mixed-ns"]),
            ("const m = await import('./dynamic')", ["./dynamic"]),
            ("export { a } from './reexport'", ["./reexport"]),
            ("export { default } from './default-reexport'", ["./default-reexport"]),
            ("export { default as A } from './default-as'", ["./default-as"]),
            ("export * from './star'", ["./star"]),
            ("export * as ns from './star-as'", ["./star-as"]),
            ('import x from "./double-quoted"', ["./double-quoted"]),
            ("const c = require('./cjs')", ["./cjs"]),
            ("import fs = require('./ts-cjs')", ["./ts-cjs"]),
        ],
    )
    def test_runtime_forms(self, code: str, expected: list[str]) -> None:
        assert specifiers(code) == expected

    @pytest.mark.parametrize(
        "code",
        [
            "import type { T } from './types'",
            "import type T from './types'",
            "import { type A, type B } from './types'",
            "export type { T } from './types'",
            "export type * from './types'",
        ],
    )
    def test_type_only_forms_ignored(self, code: str) -> None:
        assert specifiers(code) == []

    def test_partially_typed_named_import_is_runtime(self) -> None:
        assert specifiers("import { type A, b } from './mixed'") == ["./mixed"]

    def test_default_import_named_type_is_runtime(self) -> None:
        assert specifiers("import type from './type'") == ["./type"]
        assert specifiers("import type, { a } from './type'") == ["./type"]

    def test_multiple_declarations_on_one_line(self) -> None:
        code = "import a from './a'; import b from './b'; export * from './c'"
        assert specifiers(code) == ["./a", "./b", "./c"]

    def test_multiline_named_import(self) -> None:
        code = "import {\n  a,\n  b,\n} from './multi'\n"
        assert scan_imports(code) == [ScannedImport("./multi", line=4, column=7, kind="static")]

    def test_type_import_after_export_block_is_still_type_only(self) -> None:
        code = "export { a }\nimport type { T } from './types'\n"
        assert specifiers(code) == []

    def test_comments_ignored(self) -> None:
        code = "// import a from './line'\n/* import b from './block' */\nimport c from './real'"
        assert specifiers(code) == ["./real"]

    def test_comment_markers_in_strings_kept(self) -> None:
        code = "const url = 'http://example.com'\nimport c from './after-string'"
        assert specifiers(code) == ["./after-string"]

    def test_line_and_column(self) -> None:
        code = "const x = 1\n\nimport a from './a'\n"
        assert scan_imports(code) == [ScannedImport("./a", line=3, column=14, kind="static")]

    def test_source_order(self) -> None:
        code = "const l = import('./lazy')\nimport './first'\nexport { x } from './second'\n"
        assert specifiers(code) == ["./lazy", "./first", "./second"]

    def test_member_import_is_not_an_import(self) -> None:
        assert specifiers("loader.import('./nope')") == []

    def test_bare_and_aliased_specifiers(self) -> None:
        code = "import React from 'react'\nimport { u } from '@org/utils/u'\n"
        assert specifiers(code) == ["react", "@org/utils/u"]


class TestHasImport:
    def test_matches_exact_specifier(self) -> None:
        assert has_import("import { a } from './a'", "./a")

    def test_rejects_other_specifier(self) -> None:
        assert not has_import("import { a } from './ab'", "./a")

    def test_reexport(self) -> None:
        assert has_import("export * from './x'", "./x")

    def test_closing_line_of_multiline_import(self) -> None:
        assert has_import("} from './m'", "./m")
        assert has_import("  } from \"./m\";", "./m")

    def test_type_only_line(self) -> None:
        assert not has_import("import type { T } from './t'", "./t")

    def test_dynamic_and_require(self) -> None:
        assert has_import("const m = await import('./lazy')", "./lazy")
        assert has_import("const b = require('./b')", "./b")

    def test_commented_out(self) -> None:
        assert not has_import("// import a from './a'", "./a")


class TestTypeOnlyClause:
    @pytest.mark.parametrize("clause", ["type { A }", "type A", " { type A } ", "type * as T"])
    def test_type_only(self, clause: str) -> None:
        assert is_type_only_clause(clause)

    @pytest.mark.parametrize("clause", ["A", "{ A }", "type", "type, { A }", "{ type A, b }", "{}"])
    def test_runtime(self, clause: str) -> None:
        assert not is_type_only_clause(clause)
