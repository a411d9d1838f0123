"""Root-level pytest fixtures: isolated resolvers over temporary project trees."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from envchain.config import api
from envchain.config.env_cache import CachePolicy, EnvFileCache
from envchain.config.resolver import EnvResolver
from envchain.services.logger.memory_logger import MemoryLogger
from envchain.services.preferences.memory_preferences import MemoryPreferences
from envchain.services.secrets.env_secrets import EnvSecrets


@pytest.fixture(autouse=True)
def _isolate_process_state(monkeypatch: pytest.MonkeyPatch):
    """Keep the shared resolver and ENVCHAIN_* settings from leaking between tests."""
    for name in list(os.environ):
        if name.startswith(("ENVCHAIN_", "LOKI_")) or name in ("LOG_IMPL", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
    api.reset()
    yield
    api.reset()


@pytest.fixture
def make_resolver(tmp_path: Path):
    """Build a resolver whose system environment is only the given mapping."""

    def _make(
        environ: dict[str, str] | None = None,
        prefs: dict[str, dict] | None = None,
        policy: CachePolicy = CachePolicy.LOAD_ONCE,
        start_dir: Path | None = None,
        **kwargs,
    ) -> EnvResolver:
        logger = MemoryLogger()
        return EnvResolver(
            secrets=EnvSecrets(environ=environ or {}),
            preferences=MemoryPreferences(prefs),
            cache=EnvFileCache(policy=policy, logger=logger),
            logger=logger,
            start_dir=start_dir or tmp_path,
            **kwargs,
        )

    return _make


@pytest.fixture
def touch_later():
    """Rewrite a file and push its mtime forward so the change is always visible."""

    def _touch(path: Path, text: str) -> None:
        before = path.stat().st_mtime_ns
        path.write_text(text)
        later = before + 2_000_000_000
        os.utime(path, ns=(later, later))

    return _touch
