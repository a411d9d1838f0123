import pytest

from envchain.services.secrets.env_secrets import EnvSecrets


def test_get_returns_value():
    secrets = EnvSecrets(overrides={"MY_KEY": "my_value"})
    assert secrets.get("MY_KEY") == "my_value"


def test_get_returns_none_for_missing():
    secrets = EnvSecrets(environ={})
    assert secrets.get("NONEXISTENT_KEY_12345") is None


def test_empty_value_counts_as_undefined():
    secrets = EnvSecrets(environ={"BLANK": ""})
    assert secrets.get("BLANK") is None
    assert secrets.get_or_default("BLANK", "fallback") == "fallback"


def test_get_or_default_returns_value():
    secrets = EnvSecrets(overrides={"MY_KEY": "my_value"})
    assert secrets.get_or_default("MY_KEY", "fallback") == "my_value"


def test_get_or_default_returns_default_for_missing():
    secrets = EnvSecrets(environ={})
    assert secrets.get_or_default("NONEXISTENT_KEY_12345", "fallback") == "fallback"


def test_overrides_take_precedence(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("MY_KEY", "from_env")
    secrets = EnvSecrets(overrides={"MY_KEY": "from_override"})
    assert secrets.get("MY_KEY") == "from_override"


def test_reads_process_environment_live(monkeypatch: pytest.MonkeyPatch):
    secrets = EnvSecrets()
    monkeypatch.setenv("ENVCHAIN_LATE_KEY", "late")
    assert secrets.get("ENVCHAIN_LATE_KEY") == "late"
