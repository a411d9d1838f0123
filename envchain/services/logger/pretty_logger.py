from __future__ import annotations

import os
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

from envchain.services.logger.interface import LoggingInterface, level_rank
from envchain.services.secrets.interface import SecretsInterface

_COLORS = {
    "INFO": "\033[32m",   # green
    "WARN": "\033[33m",   # yellow
    "ERROR": "\033[31m",  # red
    "DEBUG": "\033[36m",  # cyan
}
_RESET = "\033[0m"


class PrettyLogger(LoggingInterface):
    """Human-readable stderr logger, colorized when attached to a terminal.

    Entries below ``level`` (default: $LOG_LEVEL, else WARN) are dropped so a
    plain ``envchain KEY`` lookup prints nothing but the value.
    """

    def __init__(self, level: str | None = None, stream: TextIO | None = None) -> None:
        self._threshold = level_rank(level or os.environ.get("LOG_LEVEL", "WARN"))
        self._stream = stream

    @classmethod
    def from_secrets(cls, secrets: SecretsInterface) -> PrettyLogger:
        return cls(level=secrets.get_or_default("LOG_LEVEL", "WARN"))

    def info(self, msg: str, **ctx: Any) -> None:
        self._log("INFO", msg, ctx)

    def warn(self, msg: str, **ctx: Any) -> None:
        self._log("WARN", msg, ctx)

    def error(self, msg: str, **ctx: Any) -> None:
        self._log("ERROR", msg, ctx)

    def debug(self, msg: str, **ctx: Any) -> None:
        self._log("DEBUG", msg, ctx)

    def _log(self, level: str, msg: str, ctx: dict[str, Any]) -> None:
        if level_rank(level) < self._threshold:
            return
        stream = self._stream or sys.stderr
        ts = datetime.now(timezone.utc).strftime("%H:%M:%S")
        extra = "  " + " ".join(f"{k}={v}" for k, v in ctx.items()) if ctx else ""
        if stream.isatty():
            color = _COLORS.get(level, "")
            print(f"{color}{ts} [{level}]{_RESET} {msg}{extra}", file=stream)
        else:
            print(f"{ts} [{level}] {msg}{extra}", file=stream)
