"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
import os
from typing import TYPE_CHECKING, Any

from rich.text import Text

from tscycles.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from tscycles.services.result import ServiceResult

OK_ICON = "✔"
FAIL_ICON = "✘"
MARKER = "▸"


# ── Public API ────────────────────────────────────────────────────────


def render_result(
    result: ServiceResult,
    *,
    verbose: bool = False,
    max_lines: int | None = None,
) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.

    Args:
        max_lines: Truncate cycle listings to fit this many lines
            (watch mode passes the terminal height).
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose, max_lines=max_lines)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode.

    ``check`` prints one ``a -> b -> a`` line per cycle and nothing when
    the graph is acyclic.
    """
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if result.op == "check":
        root = result.data.get("workspace_root")
        return "\n".join(
            " -> ".join(_relative(file, root) for file in cycle["files"])
            for cycle in result.data.get("cycles", [])
        )
    if result.op == "resolve":
        return result.data.get("path") or ""
    if result.op == "export_graph":
        return result.data.get("content", "")

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _relative(path: str, root: str | None) -> str:
    if not root:
        return path
    return os.path.relpath(path, root).replace(os.sep, "/")


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="tscycles.ok")
    op = Text(f"  {result.op}", style="tscycles.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="tscycles.key")
    style = "tscycles.path" if key in ("path", "entry", "config") else ""
    console.print(k, Text(str(value), style=style), end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the meta block (verbose only)."""
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(Text(f"    {k}: {v}"))


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="tscycles.error")
    op = Text(f"  {result.op}", style="tscycles.op")
    sep = Text(" — ")
    console.print(label, op, sep, Text(msg))

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Check renderer ────────────────────────────────────────────────────


def _excerpt(item: dict[str, Any], indent: str) -> list[Text]:
    """Numbered code lines around one import, the import itself marked."""
    number = item["line_number"]
    rows: list[tuple[int, str, bool]] = []
    if item.get("context_before") is not None:
        rows.append((number - 1, item["context_before"], False))
    rows.append((number, item["line"], True))
    if item.get("context_after") is not None:
        rows.append((number + 1, item["context_after"], False))

    width = len(str(rows[-1][0]))
    lines: list[Text] = []
    for row_number, code, marked in rows:
        line = Text(indent)
        line.append(f"{MARKER} " if marked else "  ", style="tscycles.marker")
        line.append(f"{row_number:>{width}} │ ", style="tscycles.gutter")
        line.append(code, style="" if marked else "tscycles.context")
        lines.append(line)
    return lines


def _import_block(item: dict[str, Any], root: str | None, indent: str) -> list[Text]:
    header = Text(indent)
    header.append(_relative(item["importer"], root), style="tscycles.path")
    header.append(f":{item['line_number']}")
    return [header, *_excerpt(item, indent)]


def _cycle_block(cycle: dict[str, Any], root: str | None) -> list[Text]:
    """Closing edge first, the remaining edges indented below it."""
    imports = cycle.get("imports") or []
    if not imports:
        chain = " -> ".join(_relative(file, root) for file in cycle["files"])
        return [Text(chain, style="tscycles.path"), Text()]

    lines = _import_block(imports[-1], root, "")
    for item in imports[:-1]:
        lines.extend(_import_block(item, root, "    "))
    lines.append(Text())
    return lines


def _render_check(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    max_lines: int | None = None,
) -> None:
    """Render the cycle report: workspace root, status, then each cycle."""
    d = result.data
    root = d.get("workspace_root")
    count = d.get("cycle_count", 0)

    console.print(Text(f"Workspace root: {root}", style="tscycles.root"))
    if count == 0:
        console.print(Text(f"{OK_ICON} No cycles detected", style="tscycles.ok"))
    else:
        noun = "cycle" if count == 1 else "cycles"
        console.print(Text(f"{FAIL_ICON} {count} {noun} detected", style="tscycles.error"))
    console.print()

    blocks = [_cycle_block(cycle, root) for cycle in d.get("cycles", [])]
    budget = None if max_lines is None else max(max_lines - 4, 0)
    used = 0
    for shown, block in enumerate(blocks):
        if budget is not None and used + len(block) > budget:
            hidden = len(blocks) - shown
            console.print(Text(f"...{hidden} cycles truncated", style="tscycles.truncated"))
            break
        for line in block:
            console.print(line)
        used += len(block)

    if verbose:
        _field(console, "files", d.get("file_count", 0))
        unresolved = d.get("unresolved", [])
        _field(console, "unresolved", len(unresolved))
        for item in unresolved:
            console.print(Text(f"    {_relative(item['importer'], root)}: {item['specifier']}"))
        _render_meta(console, result)


# ── Resolve renderer ──────────────────────────────────────────────────


def _render_resolve(result: ServiceResult, console: Console, *, verbose: bool = False, **_: Any) -> None:
    d = result.data
    line = Text()
    if d.get("resolved"):
        line.append(f"{OK_ICON} ", style="tscycles.ok")
        line.append(d["specifier"])
        line.append(" → ")
        line.append(str(d["path"]), style="tscycles.path")
    else:
        line.append(f"{FAIL_ICON} ", style="tscycles.error")
        line.append(d["specifier"])
        line.append(" unresolved")
    console.print(line)
    for key in ("kind", "via", "config"):
        if d.get(key):
            _field(console, key, d[key])
    if verbose:
        _field(console, "importer", d["importer"])


# ── Export renderer ───────────────────────────────────────────────────


def _render_export_graph(
    result: ServiceResult, console: Console, *, verbose: bool = False, **_: Any
) -> None:
    """Write the exported document as-is so it can be piped."""
    console.out(result.data.get("content", ""), end="", highlight=False)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False, **_: Any) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "check": _render_check,
    "resolve": _render_resolve,
    "export_graph": _render_export_graph,
}
