"""Expansion of $NAME and ${NAME} references inside configuration values.

``${NAME:modifier}`` is accepted; the modifier is captured but has no effect.
Undefined references expand to an empty string.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Optional

from envchain.config.env_loader import ConfigMap
from envchain.config.line_parser import ConfigValue

REFERENCE_RE = re.compile(
    r"\$(?:\{(?P<braced>[A-Za-z_]\w*)(?::(?P<modifier>[^}]*))?\}|(?P<bare>[A-Za-z_]\w*))"
)

# Resolves one referenced name; None leaves the reference as written
Lookup = Callable[[str], Optional[ConfigValue]]


@dataclass(frozen=True)
class Reference:
    name: str
    modifier: str | None
    text: str


def find_references(text: str) -> list[Reference]:
    return [
        Reference(m.group("braced") or m.group("bare"), m.group("modifier"), m.group(0))
        for m in REFERENCE_RE.finditer(text)
    ]


def referenced_names(values: Iterable[ConfigValue]) -> set[str]:
    """Every name referenced from the string values (or list items) given."""
    names: set[str] = set()
    for value in values:
        for text in _strings(value):
            names.update(ref.name for ref in find_references(text))
    return names


def format_value(value: ConfigValue | None) -> str:
    """Render a value for substitution into text."""
    if value is None:
        return ""
    if isinstance(value, list):
        return ",".join(str(item) for item in value)
    return str(value)


def expand(text: str, lookup: Lookup, allow_interpolation: bool = True) -> str:
    """Substitute each reference in *text* with ``lookup(name)``.

    With ``allow_interpolation`` false the text is returned unchanged. Each
    distinct name is looked up once per call.
    """
    if not allow_interpolation or "$" not in text:
        return text
    resolved: dict[str, str | None] = {}

    def _replace(match: re.Match[str]) -> str:
        name = match.group("braced") or match.group("bare")
        if name not in resolved:
            value = lookup(name)
            resolved[name] = None if value is None else format_value(value)
        replacement = resolved[name]
        return match.group(0) if replacement is None else replacement

    return REFERENCE_RE.sub(_replace, text)


def expand_value(value: ConfigValue, lookup: Lookup, allow_interpolation: bool = True) -> ConfigValue:
    """Expand a string, or each item of a list; numbers pass through."""
    if isinstance(value, str):
        return expand(value, lookup, allow_interpolation)
    if isinstance(value, list):
        return [
            expand(item, lookup, allow_interpolation) if isinstance(item, str) else item
            for item in value
        ]
    return value


def expand_mapping(values: ConfigMap, lookup: Lookup) -> ConfigMap:
    """Expand every value of *values*, following references between its keys.

    Names defined in *values* are resolved from it (recursively expanded);
    other names go to *lookup*. A reference back into the chain currently
    being expanded is left as written.
    """
    return _MappingExpander(values, lookup).run()


class _MappingExpander:
    def __init__(self, values: ConfigMap, lookup: Lookup) -> None:
        self._values = values
        self._lookup = lookup
        self._done: dict[str, ConfigValue] = {}
        self._stack: list[str] = []
        self._hit_cycle = False

    def run(self) -> ConfigMap:
        return {key: self._expand_key(key) for key in self._values}

    def _expand_key(self, key: str) -> ConfigValue:
        if key in self._done:
            return self._done[key]
        outer_hit = self._hit_cycle
        self._hit_cycle = False
        self._stack.append(key)
        try:
            result = expand_value(self._values[key], self._resolve)
        finally:
            self._stack.pop()
        # Results that depended on a broken cycle vary with the entry point
        if not self._hit_cycle:
            self._done[key] = result
        self._hit_cycle = self._hit_cycle or outer_hit
        return result

    def _resolve(self, name: str) -> ConfigValue | None:
        if name in self._stack:
            self._hit_cycle = True
            return None
        if name in self._values:
            return self._expand_key(name)
        return self._lookup(name)


def _strings(value: ConfigValue) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [item for item in value if isinstance(item, str)]
    return []
