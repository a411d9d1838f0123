from __future__ import annotations

import importlib

from envchain.services.logger.interface import LoggingInterface
from envchain.services.secrets.interface import SecretsInterface

# Lazy paths so the loki implementation only imports requests when selected
_REGISTRY: dict[str, str] = {
    "pretty": "envchain.services.logger.pretty_logger.PrettyLogger",
    "memory": "envchain.services.logger.memory_logger.MemoryLogger",
    "loki": "envchain.services.logger.loki_logger.LokiLogger",
}


class LoggerFactory:
    """Factory that creates and caches logger instances by implementation name.

    Loggers that read settings get *secrets*, so overrides reach them too.
    """

    def __init__(
        self, default_impl: str = "pretty", secrets: SecretsInterface | None = None
    ) -> None:
        _check_known(default_impl)
        self._default_impl = default_impl
        self._secrets = secrets
        self._instances: dict[str, LoggingInterface] = {}

    @property
    def default_impl(self) -> str:
        return self._default_impl

    def create(self, impl_name: str | None = None) -> LoggingInterface:
        """Return a logger instance, creating one if not yet cached."""
        name = impl_name or self._default_impl
        if name not in self._instances:
            _check_known(name)
            module_path, class_name = _REGISTRY[name].rsplit(".", 1)
            cls = getattr(importlib.import_module(module_path), class_name)
            from_secrets = getattr(cls, "from_secrets", None)
            if from_secrets is not None and self._secrets is not None:
                self._instances[name] = from_secrets(self._secrets)
            else:
                self._instances[name] = cls()
        return self._instances[name]


def _check_known(name: str) -> None:
    if name not in _REGISTRY:
        raise ValueError(
            f"Unknown logger implementation: '{name}' "
            f"(available: {', '.join(_REGISTRY)})"
        )
