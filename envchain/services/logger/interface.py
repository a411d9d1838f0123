from abc import ABC, abstractmethod
from typing import Any

LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")


class LoggingInterface(ABC):
    """Structured logging: a message plus keyword context."""

    @abstractmethod
    def info(self, msg: str, **ctx: Any) -> None: ...

    @abstractmethod
    def warn(self, msg: str, **ctx: Any) -> None: ...

    @abstractmethod
    def error(self, msg: str, **ctx: Any) -> None: ...

    @abstractmethod
    def debug(self, msg: str, **ctx: Any) -> None: ...


def level_rank(level: str) -> int:
    """Position of *level* in LEVELS; unknown names rank as INFO."""
    name = level.strip().upper()
    if name == "WARNING":
        name = "WARN"
    return LEVELS.index(name) if name in LEVELS else LEVELS.index("INFO")
