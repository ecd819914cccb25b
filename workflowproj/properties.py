"""Line-oriented parser for Java-style application.properties files."""

from __future__ import annotations

import re
from typing import Dict, List, Tuple

from .errors import ValidationError

_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
RE_UNICODE_ESCAPE = re.compile(r"[0-9a-fA-F]{4}")


def _ends_with_continuation(line: str) -> bool:
    """True when the line ends in an odd number of backslashes."""
    count = len(line) - len(line.rstrip("\\"))
    return count % 2 == 1


def _logical_lines(text: str) -> List[Tuple[int, str]]:
    """
    Join continuation lines and drop blanks and comments.

    Returns:
        List of (1-based starting line number, logical line) tuples
    """
    result: List[Tuple[int, str]] = []
    lines = text.splitlines()
    i = 0
    while i < len(lines):
        start = i + 1
        line = lines[i].lstrip()
        i += 1

        if not line or line[0] in "#!":
            continue

        while _ends_with_continuation(line) and i < len(lines):
            line = line[:-1] + lines[i].lstrip()
            i += 1
        if _ends_with_continuation(line):
            line = line[:-1]

        result.append((start, line))
    return result


def _unescape(value: str, line_num: int) -> str:
    out: List[str] = []
    i = 0
    while i < len(value):
        ch = value[i]
        if ch != "\\" or i + 1 >= len(value):
            out.append(ch)
            i += 1
            continue

        nxt = value[i + 1]
        if nxt == "u":
            digits = value[i + 2 : i + 6]
            if not RE_UNICODE_ESCAPE.fullmatch(digits):
                raise ValidationError(f"Malformed \\u escape on line {line_num}")
            out.append(chr(int(digits, 16)))
            i += 6
            continue

        out.append(_ESCAPES.get(nxt, nxt))
        i += 2
    return "".join(out)


def _split_key_value(line: str) -> Tuple[str, str]:
    """Split on the first unescaped '=', ':' or whitespace."""
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == "\\":
            i += 2
            continue
        if ch in "=:" or ch.isspace():
            break
        i += 1

    key = line[:i]
    rest = line[i:].lstrip()
    if rest[:1] in ("=", ":") and (i >= len(line) or line[i].isspace()):
        rest = rest[1:].lstrip()
    elif i < len(line) and line[i] in "=:":
        rest = line[i + 1 :].lstrip()
    return key, rest


def parse_properties(text: str) -> Dict[str, str]:
    """
    Parse properties text into a flat key -> value mapping.

    Supports ``key=value``, ``key: value`` and ``key value`` separators,
    ``#``/``!`` comments, backslash continuations and the standard escapes.
    A key repeated later in the file overrides the earlier value.

    Args:
        text: Properties file content

    Returns:
        Dict of entries in first-seen key order

    Raises:
        ValidationError: If a line has an empty key or a malformed escape
    """
    entries: Dict[str, str] = {}
    for line_num, line in _logical_lines(text):
        raw_key, raw_value = _split_key_value(line)
        key = _unescape(raw_key, line_num)
        if not key:
            raise ValidationError(f"Malformed properties on line {line_num} (empty key): '{line}'")
        entries[key] = _unescape(raw_value, line_num)
    return entries
