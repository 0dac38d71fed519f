"""tsconfig ``include`` / ``exclude`` / ``files`` matching.

Patterns and tested paths are both relative to the config directory and
compared in POSIX form without a leading ``./``. Pattern semantics follow
tsconfig: ``**`` spans directories, ``*`` and ``?`` stay inside one
segment, and a pattern whose last segment has no wildcard names a
directory (everything below it) or, when it has an extension, a file.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from tscycles.domain.specifiers import has_file_extension, split_query

DEFAULT_INCLUDE: tuple[str, ...] = ("**/*",)
DEFAULT_EXCLUDE: tuple[str, ...] = ("**/node_modules",)


def normalize_relative(path: str) -> str:
    """POSIX separators, no leading ``./``."""
    path = path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path


def translate(pattern: str) -> str:
    """Translate a tsconfig glob into a regular expression (no anchors).

    Examples:
        >>> bool(re.fullmatch(translate("src/**/*.ts"), "src/a/b.ts"))
        True
        >>> bool(re.fullmatch(translate("src/*.ts"), "src/a/b.ts"))
        False
    """
    segments = normalize_relative(pattern).split("/")
    parts: list[str] = []
    for index, segment in enumerate(segments):
        last = index == len(segments) - 1
        if segment == "**":
            parts.append(".*" if last else "(?:[^/]*/)*")
            continue
        regex = "".join(
            "[^/]*" if c == "*" else "[^/]" if c == "?" else re.escape(c) for c in segment
        )
        parts.append(regex if last else regex + "/")
    return "".join(parts)


def compile_glob(pattern: str) -> re.Pattern[str]:
    return re.compile(translate(pattern))


def _expand(pattern: str) -> list[str]:
    """Expand one include/exclude entry into the globs it stands for."""
    pattern = normalize_relative(pattern)
    last_segment = pattern.rsplit("/", 1)[-1]
    if "*" in last_segment:
        return [pattern]
    globs = [f"{pattern.rstrip('/')}/**"]
    if has_file_extension(pattern):
        globs.append(pattern)
    return globs


def _compile_all(patterns: Iterable[str]) -> list[re.Pattern[str]]:
    return [compile_glob(glob) for pattern in patterns for glob in _expand(pattern)]


class Includer:
    """Decide whether a config-relative path is selected by a tsconfig.

    Args:
        include: ``include`` globs; ``None`` means the tsconfig default.
        exclude: ``exclude`` globs; ``None`` means the tsconfig default.
        out_dir: Output directory, relative to the config directory.
        files: Explicit ``files`` entries, matched exactly.
    """

    def __init__(
        self,
        include: Sequence[str] | None = None,
        exclude: Sequence[str] | None = None,
        out_dir: str | None = None,
        files: Sequence[str] | None = None,
    ) -> None:
        if include is None:
            include = () if files else DEFAULT_INCLUDE
        exclude_list = list(DEFAULT_EXCLUDE if exclude is None else exclude)
        if out_dir:
            exclude_list.append(out_dir)

        self._files = frozenset(normalize_relative(f) for f in files or ())
        self._includers = _compile_all(include)
        self._excluders = _compile_all(exclude_list)
        self._match_all = not (self._includers or self._excluders or self._files)

    def __call__(self, relative_path: str) -> bool:
        if self._match_all:
            return True
        path, _query = split_query(normalize_relative(relative_path))
        if path in self._files:
            return True
        if any(glob.fullmatch(path) for glob in self._excluders):
            return False
        return any(glob.fullmatch(path) for glob in self._includers)
