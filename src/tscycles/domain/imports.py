"""Import scanning for JavaScript / TypeScript sources.

Pure functions, no filesystem access. The built-in ECMAScript plugin uses
:func:`scan_imports` to list a file's runtime dependencies and
:func:`has_import` to locate the statement behind a cycle edge.

Type-only declarations (``import type``, ``export type`` and named
imports whose every binding is ``type``-qualified) are skipped because
they are erased at compile time and cannot form a runtime cycle.
"""

from __future__ import annotations

import bisect
import re
from dataclasses import dataclass

_SPEC = r"(?P<q>['\"])(?P<spec>[^'\"\n]+)(?P=q)"

# import x from 'a' / import { a, b } from 'a' / export * from 'a' / ...
_FROM_PATTERN = re.compile(
    r"(?<![\w$.])(?P<kw>import|export)(?![\w$])"
    r"(?P<clause>(?:(?!\b(?:import|export)\b)[\w$*{},\s])*?)\bfrom\s*" + _SPEC
)
# import 'a'
_SIDE_EFFECT_PATTERN = re.compile(r"(?<![\w$.])import\s*" + _SPEC)
# import('a')
_DYNAMIC_PATTERN = re.compile(r"(?<![\w$.])import\s*\(\s*" + _SPEC + r"\s*[,)]")
# require('a') and TS ``import x = require('a')``
_REQUIRE_PATTERN = re.compile(r"(?<![\w$.])require\s*\(\s*" + _SPEC + r"\s*\)")

_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("static", _FROM_PATTERN),
    ("side_effect", _SIDE_EFFECT_PATTERN),
    ("dynamic", _DYNAMIC_PATTERN),
    ("require", _REQUIRE_PATTERN),
)

_TYPE_KEYWORD = re.compile(r"type(?![\w$])\s*(?P<rest>.*)$", re.DOTALL)
_INLINE_TYPE = re.compile(r"type\s")


@dataclass(frozen=True)
class ScannedImport:
    """One runtime import found in a source file."""

    specifier: str
    line: int  # 1-based
    column: int  # 0-based, position of the opening quote
    kind: str  # "static" | "side_effect" | "dynamic" | "require"


def strip_comments(code: str) -> str:
    """Blank out ``//`` and ``/* */`` comments, keeping offsets and newlines.

    String and template literals are skipped so ``"http://x"`` survives.
    """
    out = list(code)
    i = 0
    n = len(code)
    while i < n:
        char = code[i]
        if char in "'\"`":
            i += 1
            while i < n and code[i] != char:
                if code[i] == "\\":
                    i += 1
                elif char != "`" and code[i] == "\n":
                    break
                i += 1
            i += 1
        elif code.startswith("//", i):
            while i < n and code[i] != "\n":
                out[i] = " "
                i += 1
        elif code.startswith("/*", i):
            end = code.find("*/", i + 2)
            stop = n if end == -1 else end + 2
            for j in range(i, stop):
                if out[j] != "\n":
                    out[j] = " "
            i = stop
        else:
            i += 1
    return "".join(out)


def is_type_only_clause(clause: str) -> bool:
    """True when an import/export clause binds nothing at runtime.

    Examples:
        >>> is_type_only_clause("type { A }")
        True
        >>> is_type_only_clause("{ type A, type B }")
        True
        >>> is_type_only_clause("{ type A, b }")
        False
        >>> is_type_only_clause("type")  # default import named ``type``
        False
    """
    clause = clause.strip()
    match = _TYPE_KEYWORD.match(clause)
    if match:
        rest = match.group("rest")
        return bool(rest) and not rest.startswith(",")
    if clause.startswith("{") and clause.endswith("}"):
        names = [name.strip() for name in clause[1:-1].split(",") if name.strip()]
        return bool(names) and all(_INLINE_TYPE.match(name) for name in names)
    return False


def _iter_matches(code: str) -> list[tuple[int, str, str]]:
    """Return ``(offset, specifier, kind)`` for every runtime import in *code*."""
    found: dict[int, tuple[str, str]] = {}
    for kind, pattern in _PATTERNS:
        for match in pattern.finditer(code):
            if kind == "static" and is_type_only_clause(match.group("clause")):
                continue
            offset = match.start("q")
            found.setdefault(offset, (match.group("spec"), kind))
    return [(offset, spec, kind) for offset, (spec, kind) in sorted(found.items())]


def scan_imports(code: str) -> list[ScannedImport]:
    """List the runtime imports of *code* in source order.

    Recognizes side-effect, default, namespace, named, mixed, dynamic and
    ``require`` imports plus ``export ... from`` re-exports, including
    several declarations on one line and declarations spanning lines.
    """
    stripped = strip_comments(code)
    line_starts = [0] + [i + 1 for i, char in enumerate(stripped) if char == "\n"]
    results: list[ScannedImport] = []
    for offset, spec, kind in _iter_matches(stripped):
        line_index = bisect.bisect_right(line_starts, offset) - 1
        results.append(
            ScannedImport(
                specifier=spec,
                line=line_index + 1,
                column=offset - line_starts[line_index],
                kind=kind,
            )
        )
    return results


def has_import(line: str, specifier: str) -> bool:
    """Whether one source *line* imports or re-exports *specifier*.

    Also accepts the closing line of a multi-line named import
    (``} from 'specifier'``).
    """
    stripped = strip_comments(line)
    if any(spec == specifier for _offset, spec, _kind in _iter_matches(stripped)):
        return True
    closing = re.match(r"\s*\}\s*from\s*" + _SPEC, stripped)
    return closing is not None and closing.group("spec") == specifier
