"""Process-wide convenience entry points.

    from envchain.config.api import env

    db_host = env("DATABASE_HOST", "127.0.0.1")
    s3_pass = env("S3_PASSWORD")        # raises MissingConfigurationError if undefined
    everything = env("*")               # whole nearest .env, references expanded

The shared resolver is built lazily from the environment on first use; call
``reset()`` to drop it together with its file cache.
"""

from __future__ import annotations

import threading
from typing import Any

from envchain.config.context import ResolverConfig
from envchain.config.env_cache import EnvFileCache
from envchain.config.resolver import MISSING, EnvResolver
from envchain.services.logger.factory import LoggerFactory
from envchain.services.logger.interface import LoggingInterface
from envchain.services.preferences.interface import PreferenceStoreInterface
from envchain.services.registry import create_implementation
from envchain.services.secrets.env_secrets import EnvSecrets
from envchain.services.secrets.interface import SecretsInterface

_default: EnvResolver | None = None
_default_lock = threading.Lock()


def build_resolver(
    secrets: SecretsInterface | None = None,
    config: ResolverConfig | None = None,
    logger: LoggingInterface | None = None,
    preferences: PreferenceStoreInterface | None = None,
) -> EnvResolver:
    """Wire a resolver from settings, filling in anything not passed explicitly."""
    secrets = secrets or EnvSecrets()
    config = config or ResolverConfig.from_secrets(secrets)
    if logger is None:
        logger = LoggerFactory(default_impl=config.log_impl, secrets=secrets).create()
    if preferences is None:
        preferences = create_implementation("prefs", config.prefs_impl, secrets)

    return EnvResolver(
        secrets=secrets,
        preferences=preferences,
        cache=EnvFileCache(policy=config.cache_policy, logger=logger),
        logger=logger,
        env_file=config.env_file,
        filename=config.filename,
        pref_group=config.pref_group,
    )


def default_resolver() -> EnvResolver:
    global _default
    with _default_lock:
        if _default is None:
            _default = build_resolver()
        return _default


def set_default_resolver(resolver: EnvResolver | None) -> None:
    global _default
    with _default_lock:
        _default = resolver


def reset() -> None:
    """Forget the shared resolver and everything it cached."""
    global _default
    with _default_lock:
        if _default is not None:
            _default.cache.reset()
        _default = None


def env(key: str, default: Any = MISSING, *, interpolate: bool = True) -> Any:
    return default_resolver().env(key, default, interpolate=interpolate)


def show(key: str, default: Any = MISSING, *, interpolate: bool = True) -> None:
    default_resolver().show(key, default, interpolate=interpolate)
