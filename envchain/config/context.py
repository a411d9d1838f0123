from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from envchain.config.env_cache import CachePolicy
from envchain.config.walker import DEFAULT_FILENAME
from envchain.services.secrets.interface import SecretsInterface


@dataclass(frozen=True)
class ResolverConfig:
    """Settings for building a resolver, read from the environment."""

    cache_policy: CachePolicy = CachePolicy.LOAD_ONCE
    prefs_impl: str = "json"
    pref_group: str = "env"
    filename: str = DEFAULT_FILENAME
    env_file: Path | None = None
    log_impl: str = "pretty"

    @classmethod
    def from_secrets(cls, secrets: SecretsInterface) -> ResolverConfig:
        env_file = secrets.get("ENVCHAIN_ENV_FILE")
        return cls(
            cache_policy=CachePolicy.from_name(
                secrets.get_or_default("ENVCHAIN_CACHE_POLICY", CachePolicy.LOAD_ONCE.value)
            ),
            prefs_impl=secrets.get_or_default("ENVCHAIN_PREFS", "json"),
            pref_group=secrets.get_or_default("ENVCHAIN_PREF_GROUP", "env"),
            filename=secrets.get_or_default("ENVCHAIN_FILENAME", DEFAULT_FILENAME),
            env_file=Path(env_file).expanduser() if env_file else None,
            log_impl=secrets.get_or_default("LOG_IMPL", "pretty"),
        )
