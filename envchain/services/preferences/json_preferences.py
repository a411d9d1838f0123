"""Preference store persisted as a JSON document on local disk.

Layout: ``{"<group>": {"<key>": <value>, ...}, ...}``. Writes go through a
temp file and ``os.replace`` so a crashed write never leaves a torn file.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from envchain.errors import SourceUnavailableError
from envchain.services.preferences.interface import PreferenceStoreInterface
from envchain.services.secrets.interface import SecretsInterface

DEFAULT_PREFS_PATH = Path("~/.envchain/preferences.json")


class JsonPreferences(PreferenceStoreInterface):
    def __init__(self, path: Path | str | None = None) -> None:
        self._path = Path(path or DEFAULT_PREFS_PATH).expanduser()

    @classmethod
    def from_secrets(cls, secrets: SecretsInterface) -> JsonPreferences:
        return cls(secrets.get_or_default("ENVCHAIN_PREFS_PATH", str(DEFAULT_PREFS_PATH)))

    @property
    def path(self) -> Path:
        return self._path

    def get(self, group: str, key: str) -> Any | None:
        return self._read().get(group, {}).get(key)

    def set(self, group: str, key: str, value: Any) -> None:
        data = self._read()
        data.setdefault(group, {})[key] = value
        self._write(data)

    def remove(self, group: str, key: str) -> bool:
        data = self._read()
        values = data.get(group)
        if values is None or key not in values:
            return False
        del values[key]
        if not values:
            del data[group]
        self._write(data)
        return True

    def groups(self) -> dict[str, dict[str, Any]]:
        return self._read()

    def _read(self) -> dict[str, dict[str, Any]]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise SourceUnavailableError(self._path, str(exc)) from exc
        try:
            data = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError as exc:
            raise SourceUnavailableError(self._path, f"invalid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise SourceUnavailableError(self._path, "top level must be a JSON object")
        return {g: v for g, v in data.items() if isinstance(v, dict)}

    def _write(self, data: dict[str, dict[str, Any]]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
                f.write("\n")
            os.replace(tmp, self._path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise
