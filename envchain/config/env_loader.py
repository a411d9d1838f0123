"""Loads whole .env files into a key -> value mapping.

Each line goes through ``parse_line``; later assignments of the same key win.
A missing file yields an empty mapping so callers can keep searching.
"""

from __future__ import annotations

from pathlib import Path

from envchain.config.line_parser import ConfigValue, parse_line
from envchain.errors import SourceUnavailableError

ConfigMap = dict[str, ConfigValue]


def load_env_file(path: Path | str) -> ConfigMap:
    """Parse *path* and return its assignments. Returns empty dict if file is missing."""
    env_file = Path(path)
    if not env_file.is_file():
        return {}
    try:
        # utf-8-sig tolerates a leading BOM from Windows editors
        text = env_file.read_text(encoding="utf-8-sig")
    except FileNotFoundError:
        return {}
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceUnavailableError(env_file, str(exc)) from exc
    return parse_env_text(text)


def parse_env_text(text: str) -> ConfigMap:
    result: ConfigMap = {}
    for line in text.splitlines():
        pair = parse_line(line)
        if pair is not None:
            key, value = pair
            result[key] = value
    return result
