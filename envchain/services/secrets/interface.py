from abc import ABC, abstractmethod


class SecretsInterface(ABC):
    """Read access to process-level environment values."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Get a value by key. Returns None if unset or empty."""
        ...

    @abstractmethod
    def get_or_default(self, key: str, default: str) -> str:
        """Get a value, returning default if unset or empty."""
        ...
