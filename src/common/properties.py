"""Java ``.properties`` reader used for ``gradle.properties`` files."""
from __future__ import annotations

import logging
import os
import string
from typing import Dict, Iterable, List, Tuple

logger = logging.getLogger(__name__)

_SEPARATORS = ("=", ":")
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


def _logical_lines(raw_lines: Iterable[str]) -> List[str]:
    """Join backslash-continued lines and drop blanks and comments."""
    lines: List[str] = []
    pending = ""
    for raw in raw_lines:
        line = raw.rstrip("\r\n").lstrip()
        if not pending and (not line or line[0] in ("#", "!")):
            continue
        # An odd number of trailing backslashes continues the line
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            pending += line[:-1]
            continue
        lines.append(pending + line)
        pending = ""
    if pending:
        lines.append(pending)
    return lines


def _strip_trailing(text: str) -> str:
    """Trim trailing whitespace unless the last blank is escaped."""
    stripped = text.rstrip()
    if len(stripped) < len(text):
        backslashes = len(stripped) - len(stripped.rstrip("\\"))
        if backslashes % 2 == 1:
            return stripped + text[len(stripped)]
    return stripped


def _split_entry(line: str) -> Tuple[str, str]:
    """Split a logical line on the first unescaped separator, still escaped."""
    escaped = False
    for idx, char in enumerate(line):
        if escaped:
            escaped = False
            continue
        if char == "\\":
            escaped = True
            continue
        if char in _SEPARATORS or char.isspace():
            rest = line[idx:].lstrip()
            if rest and rest[0] in _SEPARATORS:
                rest = rest[1:]
            return line[:idx], _strip_trailing(rest.lstrip())
    return _strip_trailing(line), ""


def unescape(text: str) -> str:
    """Decode ``\\t``, ``\\n``, ``\\r``, ``\\f``, ``\\uXXXX`` and ``\\x`` -> ``x``.

    Raises:
        ValueError: on a ``\\u`` escape without four hex digits.
    """
    out: List[str] = []
    idx = 0
    while idx < len(text):
        char = text[idx]
        if char != "\\" or idx + 1 >= len(text):
            out.append(char)
            idx += 1
            continue
        nxt = text[idx + 1]
        if nxt == "u":
            digits = text[idx + 2:idx + 6]
            if len(digits) != 4 or any(c not in string.hexdigits for c in digits):
                raise ValueError(f"Malformed \\uXXXX escape in '{text}'")
            out.append(chr(int(digits, 16)))
            idx += 6
            continue
        out.append(_ESCAPES.get(nxt, nxt))
        idx += 2
    return "".join(out)


def parse_properties(text: str) -> Dict[str, str]:
    """Parse properties text into a dict; later keys win.

    Raises:
        ValueError: on a malformed unicode escape.
    """
    props: Dict[str, str] = {}
    for line in _logical_lines(text.splitlines()):
        key, value = _split_entry(line)
        if key:
            props[unescape(key)] = unescape(value)
    return props


def load_properties(path: str) -> Dict[str, str]:
    """Load a properties file, returning an empty dict when it does not exist."""
    if not os.path.isfile(path):
        logger.debug("Properties file not found: %s", path)
        return {}
    with open(path, "r", encoding="utf-8") as fh:
        return parse_properties(fh.read())
