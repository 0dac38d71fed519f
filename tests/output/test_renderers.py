"""Tests for operation-specific Rich renderers."""

from typing import Any

from tscycles.output.renderers import render_quiet, render_result
from tscycles.services.result import ServiceError, ServiceResult

# ── Helpers ───────────────────────────────────────────────────────────


def _ok(op: str, **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


def _err(op: str, code: str, message: str, **detail: object) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code=code, message=message, detail=dict(detail)),
    )


def _edge(importer: str, importee: str, spec: str, **extra: Any) -> dict[str, Any]:
    return {
        "importer": importer,
        "importee": importee,
        "specifier": spec,
        "line_number": extra.get("line_number", 1),
        "line": extra.get("line", f"import '{spec}';"),
        "context_before": extra.get("context_before"),
        "context_after": extra.get("context_after"),
    }


def _check(*cycles: dict[str, Any], **data: Any) -> ServiceResult:
    return _ok(
        "check",
        entry="/r/a.ts",
        workspace_root="/r",
        file_count=data.get("file_count", 2),
        cycle_count=len(cycles),
        cycles=list(cycles),
        unresolved=data.get("unresolved", []),
    )


AB_CYCLE = {
    "files": ["/r/a.ts", "/r/b.ts", "/r/a.ts"],
    "imports": [
        _edge(
            "/r/a.ts",
            "/r/b.ts",
            "./b",
            line_number=2,
            line="import { b } from './b';",
            context_before="// a",
        ),
        _edge("/r/b.ts", "/r/a.ts", "./a", context_after="export const b = a;"),
    ],
}


# ── Error rendering ──────────────────────────────────────────────────


class TestErrorRenderer:
    def test_basic_error(self) -> None:
        output = render_result(_err("check", "ENTRY_NOT_FOUND", "Entry file not found: x.ts"))
        assert output.startswith("ERROR")
        assert "check" in output
        assert "Entry file not found: x.ts" in output

    def test_verbose_shows_detail(self) -> None:
        output = render_result(_err("check", "ENTRY_NOT_FOUND", "Bad", entry="x.ts"), verbose=True)
        assert "detail" in output
        assert "entry: x.ts" in output

    def test_no_error_object(self) -> None:
        assert "Unknown error" in render_result(ServiceResult(ok=False, op="check"))


# ── Check renderer ───────────────────────────────────────────────────


class TestCheckRenderer:
    def test_no_cycles(self) -> None:
        lines = render_result(_check()).splitlines()
        assert lines == ["Workspace root: /r", "✔ No cycles detected"]

    def test_cycle_layout(self) -> None:
        lines = render_result(_check(AB_CYCLE)).splitlines()
        assert lines == [
            "Workspace root: /r",
            "✘ 1 cycle detected",
            "",
            "b.ts:1",
            "▸ 1 │ import './a';",
            "  2 │ export const b = a;",
            "    a.ts:2",
            "      1 │ // a",
            "    ▸ 2 │ import { b } from './b';",
        ]

    def test_plural(self) -> None:
        output = render_result(_check(AB_CYCLE, AB_CYCLE))
        assert "✘ 2 cycles detected" in output

    def test_cycle_without_located_imports(self) -> None:
        cycle = {"files": ["/r/a.ts", "/r/a.ts"], "imports": []}
        assert "a.ts -> a.ts" in render_result(_check(cycle))

    def test_truncation(self) -> None:
        cycle = {
            "files": ["/r/a.ts", "/r/b.ts", "/r/a.ts"],
            "imports": [_edge("/r/a.ts", "/r/b.ts", "./b"), _edge("/r/b.ts", "/r/a.ts", "./a")],
        }
        output = render_result(_check(cycle, cycle, cycle), max_lines=10)
        assert output.count("b.ts:1") == 1
        assert output.splitlines()[-1] == "...2 cycles truncated"

    def test_no_truncation_without_limit(self) -> None:
        output = render_result(_check(AB_CYCLE, AB_CYCLE, AB_CYCLE))
        assert "truncated" not in output
        assert output.count("b.ts:1") == 3

    def test_verbose_lists_unresolved(self) -> None:
        result = _check(unresolved=[{"importer": "/r/a.ts", "specifier": "@gone/x"}])
        output = render_result(result, verbose=True)
        assert "unresolved: 1" in output
        assert "a.ts: @gone/x" in output
        assert "files: 2" in output


# ── Other renderers ──────────────────────────────────────────────────


class TestResolveRenderer:
    def test_resolved(self) -> None:
        result = _ok(
            "resolve",
            specifier="@/b",
            importer="/r/a.ts",
            kind="ambiguous",
            resolved=True,
            path="/r/src/b.ts",
            via="tsconfig",
            config="/r/tsconfig.json",
        )
        output = render_result(result)
        assert output.splitlines()[0] == "✔ @/b → /r/src/b.ts"
        assert "via: tsconfig" in output
        assert "config: /r/tsconfig.json" in output

    def test_unresolved(self) -> None:
        result = _ok(
            "resolve",
            specifier="@gone/x",
            importer="/r/a.ts",
            kind="ambiguous",
            resolved=False,
            path=None,
            via="tsconfig",
            config=None,
        )
        output = render_result(result)
        assert output.splitlines()[0] == "✘ @gone/x unresolved"
        assert "config:" not in output


class TestExportRenderer:
    def test_content_is_verbatim(self) -> None:
        content = 'digraph imports {\n  "[a]" -> "[b]";\n}\n'
        assert render_result(_ok("export_graph", content=content)) == content.rstrip("\n")


class TestGenericRenderer:
    def test_unknown_op(self) -> None:
        output = render_result(_ok("watch", entry="/r/a.ts", runs=3))
        assert output.splitlines()[0].startswith("OK")
        assert "runs: 3" in output


# ── Quiet mode ───────────────────────────────────────────────────────


class TestRenderQuiet:
    def test_check_prints_chains(self) -> None:
        assert render_quiet(_check(AB_CYCLE)) == "a.ts -> b.ts -> a.ts"

    def test_check_without_cycles_is_empty(self) -> None:
        assert render_quiet(_check()) == ""

    def test_resolve_prints_path(self) -> None:
        assert render_quiet(_ok("resolve", path="/r/b.ts")) == "/r/b.ts"

    def test_error(self) -> None:
        assert render_quiet(_err("check", "X", "boom")) == "ERROR: check — boom"

    def test_other(self) -> None:
        assert render_quiet(_ok("watch")) == "OK: watch"
