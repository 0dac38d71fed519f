"""JSON-with-comments decoding for tsconfig files.

tsconfig.json accepts ``//`` and ``/* */`` comments and trailing commas.
Both are removed outside string literals before handing the text to
:func:`json.loads`. Newlines inside block comments are kept so decode
errors still point at the right line.
"""

from __future__ import annotations

import json
from typing import Any


def strip_comments(text: str) -> str:
    """Remove line and block comments that are not inside a string."""
    out: list[str] = []
    i = 0
    n = len(text)
    in_string = False
    while i < n:
        char = text[i]
        if in_string:
            out.append(char)
            if char == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if char == '"':
                in_string = False
            i += 1
            continue

        if char == '"':
            in_string = True
            out.append(char)
            i += 1
        elif text.startswith("//", i):
            end = text.find("\n", i)
            i = n if end == -1 else end
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            stop = n if end == -1 else end + 2
            out.append("\n" * text.count("\n", i, stop))
            i = stop
        else:
            out.append(char)
            i += 1
    return "".join(out)


def strip_trailing_commas(text: str) -> str:
    """Remove commas directly followed (modulo whitespace) by ``}`` or ``]``."""
    out: list[str] = []
    i = 0
    n = len(text)
    in_string = False
    while i < n:
        char = text[i]
        if in_string:
            out.append(char)
            if char == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if char == '"':
                in_string = False
            i += 1
            continue

        if char == '"':
            in_string = True
        elif char == ",":
            j = i + 1
            while j < n and text[j].isspace():
                j += 1
            if j < n and text[j] in "}]":
                i += 1
                continue
        out.append(char)
        i += 1
    return "".join(out)


def loads(text: str) -> Any:
    """Decode JSONC *text*. An empty document decodes to ``{}``.

    Raises:
        json.JSONDecodeError: if the cleaned text is still not valid JSON.
    """
    cleaned = strip_trailing_commas(strip_comments(text)).strip()
    if not cleaned:
        return {}
    return json.loads(cleaned)
