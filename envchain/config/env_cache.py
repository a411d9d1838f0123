"""Process-wide cache of parsed .env files keyed by resolved path."""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from envchain.config import env_loader
from envchain.config.env_loader import ConfigMap
from envchain.errors import SourceUnavailableError
from envchain.services.logger.interface import LoggingInterface


class CachePolicy(str, Enum):
    LOAD_ONCE = "once"
    MTIME = "mtime"

    @classmethod
    def from_name(cls, name: str) -> CachePolicy:
        try:
            return cls(name.strip().lower())
        except ValueError:
            available = ", ".join(p.value for p in cls)
            raise ValueError(
                f"Unknown cache policy: '{name}' (available: {available})"
            ) from None


@dataclass(frozen=True)
class FileCacheEntry:
    path: Path
    modified_ns: int
    values: ConfigMap


class EnvFileCache:
    """Memoizes ``load_env_file`` results.

    Under ``LOAD_ONCE`` the first successful load of a path is authoritative for
    the lifetime of the cache. Under ``MTIME`` a newer modification time on the
    file forces a reload. Entries are immutable and replaced wholesale, so
    readers never see a half-built mapping; only population takes the lock.
    """

    def __init__(
        self,
        policy: CachePolicy = CachePolicy.LOAD_ONCE,
        logger: LoggingInterface | None = None,
    ) -> None:
        self.policy = policy
        self._log = logger
        self._entries: dict[Path, FileCacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, path: Path | str) -> ConfigMap:
        """Return the parsed contents of *path*, loading it when needed.

        Missing files are not cached and yield an empty mapping. Unreadable
        files raise ``SourceUnavailableError``.
        """
        resolved = Path(path).resolve()
        entry = self._entries.get(resolved)

        if entry is not None and self.policy is CachePolicy.LOAD_ONCE:
            return entry.values

        modified_ns = _modified_ns(resolved)
        if modified_ns is None:
            if entry is not None:
                self.invalidate(resolved)
            return {}
        if entry is not None and entry.modified_ns >= modified_ns:
            return entry.values

        with self._lock:
            current = self._entries.get(resolved)
            if current is not None and current.modified_ns >= modified_ns:
                return current.values
            values = env_loader.load_env_file(resolved)
            self._entries[resolved] = FileCacheEntry(resolved, modified_ns, values)

        if self._log:
            reason = "reload" if entry is not None else "load"
            self._log.info(
                f"Cached {resolved}", action=reason, keys=len(values), policy=self.policy.value
            )
        return values

    def entry(self, path: Path | str) -> FileCacheEntry | None:
        return self._entries.get(Path(path).resolve())

    def invalidate(self, path: Path | str) -> bool:
        """Drop the entry for *path*. Returns True if one was cached."""
        with self._lock:
            return self._entries.pop(Path(path).resolve(), None) is not None

    def reset(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


def _modified_ns(path: Path) -> int | None:
    try:
        stat = os.stat(path)
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise SourceUnavailableError(path, str(exc)) from exc
    return stat.st_mtime_ns
