from __future__ import annotations

import os
from collections.abc import Mapping

from envchain.services.secrets.interface import SecretsInterface


class EnvSecrets(SecretsInterface):
    """Reads the system environment, with optional overrides layered on top.

    The environment is read live on every lookup (not snapshotted) so that
    changes made by the host process after construction are visible. An empty
    value counts as undefined.
    """

    def __init__(
        self,
        overrides: dict[str, str] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._environ = os.environ if environ is None else environ
        self._overrides = dict(overrides or {})

    def get(self, key: str) -> str | None:
        if key in self._overrides:
            value = self._overrides[key]
        else:
            value = self._environ.get(key)
        return value or None

    def get_or_default(self, key: str, default: str) -> str:
        value = self.get(key)
        return default if value is None else value
