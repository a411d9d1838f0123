"""Loki logger: ships structured JSON log lines to Grafana Loki's HTTP push API.

Entries are buffered and pushed in batches, from a background thread and
whenever the buffer reaches ``_FLUSH_THRESHOLD``.
"""

from __future__ import annotations

import atexit
import json
import threading
import time
from typing import Any

import requests

from envchain.services.logger.interface import LoggingInterface, level_rank
from envchain.services.secrets.interface import SecretsInterface

_DEFAULT_LOKI_URL = "http://localhost:3100"
_FLUSH_INTERVAL = 1.0  # seconds
_FLUSH_THRESHOLD = 100  # entries
_PUSH_TIMEOUT = 5  # seconds


class LokiLogger(LoggingInterface):
    """Structured logger that pushes to Grafana Loki via HTTP."""

    def __init__(
        self,
        secrets: SecretsInterface | None = None,
        flush_interval: float | None = _FLUSH_INTERVAL,
    ) -> None:
        if secrets is None:
            from envchain.services.secrets.env_secrets import EnvSecrets

            secrets = EnvSecrets()
        base_url = secrets.get_or_default("LOKI_URL", _DEFAULT_LOKI_URL).rstrip("/")
        self._push_url = f"{base_url}/loki/api/v1/push"
        self._labels = {
            "service": secrets.get_or_default("LOKI_SERVICE", "envchain"),
            "environment": secrets.get_or_default("LOKI_ENVIRONMENT", "development"),
        }
        self._threshold = level_rank(secrets.get_or_default("LOKI_LEVEL", "INFO"))

        self._buffer: list[tuple[str, str, str]] = []
        self._lock = threading.Lock()
        self._closed = False

        self._thread: threading.Thread | None = None
        if flush_interval:
            self._thread = threading.Thread(
                target=self._flush_loop, args=(flush_interval,), daemon=True
            )
            self._thread.start()
        atexit.register(self.close)

    @classmethod
    def from_secrets(cls, secrets: SecretsInterface) -> LokiLogger:
        return cls(secrets=secrets)

    def info(self, msg: str, **ctx: Any) -> None:
        self._append("INFO", msg, ctx)

    def warn(self, msg: str, **ctx: Any) -> None:
        self._append("WARN", msg, ctx)

    def error(self, msg: str, **ctx: Any) -> None:
        self._append("ERROR", msg, ctx)

    def debug(self, msg: str, **ctx: Any) -> None:
        self._append("DEBUG", msg, ctx)

    def close(self) -> None:
        """Flush remaining entries and stop the background thread."""
        self._closed = True
        self.flush()

    def flush(self) -> None:
        with self._lock:
            entries = self._buffer[:]
            self._buffer.clear()
        self._push(entries)

    # ── Internal ──────────────────────────────────────────────────────────

    def _append(self, level: str, msg: str, ctx: dict[str, Any]) -> None:
        if level_rank(level) < self._threshold:
            return
        ts_ns = str(time.time_ns())
        line = json.dumps({"msg": msg, **ctx}, default=str)
        with self._lock:
            self._buffer.append((level, ts_ns, line))
            full = len(self._buffer) >= _FLUSH_THRESHOLD
        if full:
            self.flush()

    def _flush_loop(self, interval: float) -> None:
        while not self._closed:
            time.sleep(interval)
            self.flush()

    def _push(self, entries: list[tuple[str, str, str]]) -> None:
        if not entries:
            return

        # One Loki stream per level
        streams: dict[str, list[list[str]]] = {}
        for level, ts_ns, line in entries:
            streams.setdefault(level, []).append([ts_ns, line])

        payload = {
            "streams": [
                {"stream": {**self._labels, "level": level}, "values": values}
                for level, values in streams.items()
            ]
        }

        try:
            requests.post(self._push_url, json=payload, timeout=_PUSH_TIMEOUT)
        except requests.RequestException:
            # Dropped: a log sink outage must not break configuration lookups
            pass
