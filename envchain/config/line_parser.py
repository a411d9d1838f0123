"""Parses single lines of a .env file into (key, value) pairs.

Supports:
- Comments (lines starting with # or ;) and section headers ([name]), both skipped
- Quoted values: text up to the next unescaped matching quote; \\" and \\\\ are the
  only escapes, every other backslash is kept
- Brace lists: {a,b,c} becomes ["a", "b", "c"]
- Bare numeric literals coerced to int/float; all other bare text stays a string
- Inline comments after bare values are NOT stripped (to keep values predictable)
"""

from __future__ import annotations

import re
from typing import Union

ConfigValue = Union[str, int, float, list[str]]

_SKIP_PREFIXES = ("#", ";", "[")
_QUOTES = ('"', "'")

# Decimal literals only; identifiers such as inf, nan or True never match
_NUMBER_RE = re.compile(
    r"[+-]?(?:\d(?:_?\d)*(?:\.(?:\d(?:_?\d)*)?)?|\.\d(?:_?\d)*)(?:[eE][+-]?\d(?:_?\d)*)?"
)


def parse_line(line: str) -> tuple[str, ConfigValue] | None:
    """Return the (key, value) pair on *line*, or None when it carries no value."""
    line = line.strip()
    if not line or line.startswith(_SKIP_PREFIXES):
        return None
    if "=" not in line:
        return None

    key, _, text = line.partition("=")
    key = key.strip()
    text = text.strip()
    if not key or not text or text.startswith(("#", ";")):
        return None

    return key, parse_value(text)


def parse_value(text: str) -> ConfigValue:
    """Interpret the right-hand side of an assignment."""
    if text[0] in _QUOTES:
        return _read_quoted(text)
    if text[0] == "{":
        return _read_list(text)
    return coerce_number(text)


def coerce_number(text: str) -> ConfigValue:
    if not _NUMBER_RE.fullmatch(text):
        return text
    try:
        if any(c in text for c in ".eE"):
            return float(text)
        return int(text)
    except ValueError:
        # Digit runs past the int conversion limit
        return text


def _read_quoted(text: str) -> str:
    quote = text[0]
    chars: list[str] = []
    i = 1
    while i < len(text):
        ch = text[i]
        if ch == "\\" and text[i + 1 : i + 2] in (quote, "\\"):
            chars.append(text[i + 1])
            i += 2
            continue
        if ch == quote:
            break
        chars.append(ch)
        i += 1
    return "".join(chars)


def _read_list(text: str) -> list[str]:
    body, _, _ = text[1:].partition("}")
    if not body.strip():
        return []
    return [item.strip() for item in body.split(",")]
