from __future__ import annotations

from pathlib import Path


class EnvChainError(Exception):
    """Base class for configuration resolution errors."""


class MissingConfigurationError(EnvChainError, KeyError):
    """No source defines the key and the caller gave no default."""

    def __init__(self, key: str) -> None:
        super().__init__(f"missing required configuration: {key}")
        self.key = key

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable
        return self.args[0]


class SourceUnavailableError(EnvChainError):
    """A configuration source exists but could not be read."""

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"Cannot read {path}: {reason}")
        self.path = Path(path)
        self.reason = reason
