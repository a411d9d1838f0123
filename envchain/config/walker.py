"""Upward search for the nearest .env file, like project-root discovery."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from envchain.config.env_cache import EnvFileCache
from envchain.config.env_loader import ConfigMap

DEFAULT_FILENAME = ".env"


def iter_search_dirs(start_dir: Path | str) -> Iterator[Path]:
    """Yield *start_dir* and each parent up to the filesystem root.

    The walk follows the physical path (symlinks resolved) and stops at the
    root (parent == self) or at a directory already visited.
    """
    start = Path(start_dir).expanduser()
    try:
        current = start.resolve()
    except (OSError, RuntimeError):
        current = start.absolute()
    visited: set[Path] = set()
    while current not in visited:
        visited.add(current)
        yield current
        parent = current.parent
        if parent == current:
            return
        current = parent


def find_env_file(start_dir: Path | str, filename: str = DEFAULT_FILENAME) -> Path | None:
    for directory in iter_search_dirs(start_dir):
        candidate = directory / filename
        if candidate.is_file():
            return candidate
    return None


class EnvFileWalker:
    """Finds the nearest env file above a directory and loads it through the cache."""

    def __init__(self, cache: EnvFileCache, filename: str = DEFAULT_FILENAME) -> None:
        self.cache = cache
        self.filename = filename

    def locate(self, start_dir: Path | str) -> Path | None:
        return find_env_file(start_dir, self.filename)

    def find(self, start_dir: Path | str) -> ConfigMap:
        """Return the parsed nearest file, or an empty mapping if there is none."""
        path = self.locate(start_dir)
        if path is None:
            return {}
        return self.cache.get(path)
