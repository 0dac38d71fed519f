"""Specifier classification — relative, absolute, or ambiguous.

Pure string rules shared by the resolver and the graph builder.
"""

from __future__ import annotations

import os
import re

# ./x, ../x, ".", ".."
_RELATIVE_PATTERN = re.compile(r"^\.\.?(/|$)")

# .js .jsx .ts .tsx .mjs .cjs .mts .cts (and the x-variants of m/c)
SUPPORTED_EXTENSION_PATTERN = re.compile(r"\.([mc]?[jt]sx?)$")

# Vite-style parameters such as ``?worker`` or ``?url``.
_QUERY_PATTERN = re.compile(r"\?.+$")

# Importer paths may carry either ``?query`` or ``#hash`` suffixes.
_IMPORTER_SUFFIX_PATTERN = re.compile(r"[#?].+$")

_FILE_EXTENSION_PATTERN = re.compile(r"\.\w+$")


def is_relative(specifier: str) -> bool:
    """True for ``./x``, ``../x``, ``.`` and ``..``."""
    return _RELATIVE_PATTERN.match(specifier) is not None


def is_absolute(specifier: str) -> bool:
    return os.path.isabs(specifier)


def is_ambiguous(specifier: str) -> bool:
    """True when *specifier* needs config-driven resolution.

    Examples:
        >>> is_ambiguous("@org/utils")
        True
        >>> is_ambiguous("./utils")
        False
        >>> is_ambiguous("/abs/utils.ts")
        False
    """
    return not is_relative(specifier) and not is_absolute(specifier)


def is_supported_file(path: str) -> bool:
    """Whether *path* (suffixes already stripped) is a scannable source file."""
    return SUPPORTED_EXTENSION_PATTERN.search(path) is not None


def has_file_extension(path: str) -> bool:
    return _FILE_EXTENSION_PATTERN.search(path) is not None


def split_query(specifier: str) -> tuple[str, str]:
    """Split ``"./worker?worker"`` into ``("./worker", "?worker")``.

    The second element is empty when no query is present.
    """
    match = _QUERY_PATTERN.search(specifier)
    if match is None:
        return specifier, ""
    return specifier[: match.start()], match.group(0)


def strip_importer_suffix(path: str) -> str:
    """Drop ``?query`` / ``#hash`` decorations from an importer path."""
    return _IMPORTER_SUFFIX_PATTERN.sub("", path)


def is_in_skipped_dir(path: str, skip_dirs: frozenset[str] | set[str]) -> bool:
    """True when any directory component of *path* is in *skip_dirs*."""
    parts = path.replace("\\", "/").split("/")
    return any(part in skip_dirs for part in parts[:-1])
