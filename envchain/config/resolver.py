"""Resolves configuration keys across the environment, .env files and preferences.

Priority, first non-empty value wins:

1. system environment (``SecretsInterface``)
2. nearest .env file above the start directory, or a pinned file
3. preference store, group ``env`` by default

The system environment comes first because it is the standard override
mechanism for deployed services. The key ``*`` returns the whole .env file
instead, with every cross-reference expanded.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any, TextIO

from envchain.config.env_cache import EnvFileCache
from envchain.config.env_loader import ConfigMap
from envchain.config.interpolation import expand_mapping, expand_value, referenced_names
from envchain.config.line_parser import ConfigValue
from envchain.config.walker import DEFAULT_FILENAME, EnvFileWalker
from envchain.errors import MissingConfigurationError, SourceUnavailableError
from envchain.services.logger.factory import LoggerFactory
from envchain.services.logger.interface import LoggingInterface
from envchain.services.preferences.interface import PreferenceStoreInterface
from envchain.services.secrets.interface import SecretsInterface

WILDCARD = "*"


class _Missing:
    def __repr__(self) -> str:
        return "<missing>"


MISSING: Any = _Missing()


class EnvResolver:
    def __init__(
        self,
        secrets: SecretsInterface,
        preferences: PreferenceStoreInterface,
        cache: EnvFileCache | None = None,
        logger: LoggingInterface | None = None,
        start_dir: Path | str | None = None,
        env_file: Path | str | None = None,
        filename: str = DEFAULT_FILENAME,
        pref_group: str = "env",
    ) -> None:
        self.secrets = secrets
        self.preferences = preferences
        self.log = logger if logger is not None else LoggerFactory(secrets=secrets).create()
        self.cache = cache if cache is not None else EnvFileCache(logger=self.log)
        self.walker = EnvFileWalker(self.cache, filename)
        self.start_dir = Path(start_dir) if start_dir is not None else None
        self.env_file = Path(env_file) if env_file is not None else None
        self.pref_group = pref_group

    def env(self, key: str, default: Any = MISSING, *, interpolate: bool = True) -> Any:
        """Resolve *key*, returning *default* when no source defines it.

        Raises ``MissingConfigurationError`` when the key is undefined and no
        default was given. With ``interpolate`` the winning value has its
        ``$NAME`` references expanded; nested lookups never interpolate.
        """
        if key == WILDCARD:
            return self.env_all(interpolate=interpolate)

        value = self._lookup(key, interpolate)
        if value is not None:
            return value
        if default is not MISSING:
            self.log.debug(f"{key} undefined, using default", key=key)
            return default
        raise MissingConfigurationError(key)

    def env_all(self, *, interpolate: bool = True) -> ConfigMap:
        """Return a private copy of the nearest .env mapping.

        With ``interpolate``, names referenced from the file but not defined in
        it are resolved through the full chain, without interpolation, and
        added. The file's own values are expanded transitively against the
        file and those added names.
        """
        try:
            values = dict(self.file_values())
        except SourceUnavailableError as exc:
            self.log.warn("env file unavailable", path=str(exc.path), reason=exc.reason)
            return {}
        if not interpolate:
            return values

        # Appended names stay as resolved, like any nested lookup
        appended = {
            name: self._nested_lookup(name)
            for name in sorted(referenced_names(values.values()) - values.keys())
        }
        expanded = expand_mapping(values, appended.get)
        expanded.update(appended)
        return expanded

    def show(
        self,
        key: str,
        default: Any = MISSING,
        *,
        interpolate: bool = True,
        stream: TextIO | None = None,
    ) -> None:
        """Print the value of *key*; a missing key prints nothing and never raises."""
        out = stream or sys.stdout
        try:
            value = self.env(key, default, interpolate=interpolate)
        except MissingConfigurationError:
            self.log.debug(f"{key} undefined, nothing to show", key=key)
            return
        if key == WILDCARD:
            for name in sorted(value):
                print(f"{name}={format_display(value[name])}", file=out)
        else:
            print(format_display(value), file=out)

    def file_values(self) -> ConfigMap:
        if self.env_file is not None:
            return self.cache.get(self.env_file)
        return self.walker.find(self._search_dir())

    # ── Sources ───────────────────────────────────────────────────────────

    def _lookup(self, key: str, interpolate: bool) -> ConfigValue | None:
        for source, read in self._sources():
            try:
                value = read(key)
            except SourceUnavailableError as exc:
                self.log.warn(
                    f"{source} unavailable, skipping", key=key, path=str(exc.path), reason=exc.reason
                )
                continue
            if not _is_empty(value):
                self.log.debug(f"{key} resolved", key=key, source=source)
                return expand_value(value, self._nested_lookup, interpolate)
        return None

    def _sources(self) -> list[tuple[str, Callable[[str], Any]]]:
        return [
            ("environment", self.secrets.get),
            ("env file", lambda key: self.file_values().get(key)),
            ("preferences", lambda key: self.preferences.get(self.pref_group, key)),
        ]

    def _nested_lookup(self, name: str) -> ConfigValue:
        return self.env(name, "", interpolate=False)

    def _search_dir(self) -> Path:
        return self.start_dir if self.start_dir is not None else Path.cwd()


def format_display(value: Any) -> str:
    """Render a value the way it would be written in a .env file."""
    if isinstance(value, list):
        return "{" + ",".join(str(item) for item in value) + "}"
    return str(value)


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, (str, list)) and len(value) == 0
