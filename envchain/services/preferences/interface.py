from abc import ABC, abstractmethod
from typing import Any


class PreferenceStoreInterface(ABC):
    """Persistent values grouped by name, e.g. group "env", key "DB_HOST"."""

    @abstractmethod
    def get(self, group: str, key: str) -> Any | None:
        """Return the stored value, or None if the group or key is absent."""
        ...

    @abstractmethod
    def set(self, group: str, key: str, value: Any) -> None: ...

    @abstractmethod
    def remove(self, group: str, key: str) -> bool:
        """Delete a key. Returns True if deleted, False if it didn't exist."""
        ...

    @abstractmethod
    def groups(self) -> dict[str, dict[str, Any]]:
        """Snapshot of every group and its keys."""
        ...

    def has(self, group: str, key: str) -> bool:
        return self.get(group, key) is not None
