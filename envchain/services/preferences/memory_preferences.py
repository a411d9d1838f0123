from __future__ import annotations

from typing import Any

from envchain.services.preferences.interface import PreferenceStoreInterface


class MemoryPreferences(PreferenceStoreInterface):
    """In-memory preference store for unit testing and throwaway sessions."""

    def __init__(self, initial: dict[str, dict[str, Any]] | None = None) -> None:
        self._groups: dict[str, dict[str, Any]] = {
            group: dict(values) for group, values in (initial or {}).items()
        }

    def get(self, group: str, key: str) -> Any | None:
        return self._groups.get(group, {}).get(key)

    def set(self, group: str, key: str, value: Any) -> None:
        self._groups.setdefault(group, {})[key] = value

    def remove(self, group: str, key: str) -> bool:
        values = self._groups.get(group)
        if values is None or key not in values:
            return False
        del values[key]
        if not values:
            del self._groups[group]
        return True

    def groups(self) -> dict[str, dict[str, Any]]:
        return {group: dict(values) for group, values in self._groups.items()}
