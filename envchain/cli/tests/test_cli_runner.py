import io
from pathlib import Path

import pytest

from envchain.cli.runner import build_from_args, parse_args, run, run_cli
from envchain.config.env_cache import CachePolicy
from envchain.services.logger.interface import level_rank
from envchain.services.logger.memory_logger import MemoryLogger
from envchain.services.logger.pretty_logger import PrettyLogger
from envchain.services.preferences.memory_preferences import MemoryPreferences


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("ENVCHAIN_PREFS", "memory")
    monkeypatch.setenv("LOG_IMPL", "memory")
    (tmp_path / ".env").write_text("CLI_HOST=db\nCLI_URL=http://$CLI_HOST\nCLI_LIST={a,b}\n")
    sub = tmp_path / "sub"
    sub.mkdir()
    return tmp_path


def run_capture(argv: list[str]) -> tuple[int, str]:
    out = io.StringIO()
    code = run(argv, out=out)
    return code, out.getvalue()


def test_prints_resolved_value(project: Path):
    code, output = run_capture(["CLI_URL", "--start-dir", str(project / "sub")])
    assert code == 0
    assert output == "http://db\n"


def test_no_interpolate(project: Path):
    _, output = run_capture(["CLI_URL", "--no-interpolate", "--start-dir", str(project)])
    assert output == "http://$CLI_HOST\n"


def test_list_value_display(project: Path):
    _, output = run_capture(["CLI_LIST", "--start-dir", str(project)])
    assert output == "{a,b}\n"


def test_missing_key_prints_nothing_and_succeeds(project: Path):
    code, output = run_capture(["CLI_NOPE", "--start-dir", str(project)])
    assert code == 0
    assert output == ""


def test_default_is_printed(project: Path):
    _, output = run_capture(["CLI_NOPE", "fallback", "--start-dir", str(project)])
    assert output == "fallback\n"


def test_env_override_wins(project: Path):
    _, output = run_capture(
        ["CLI_URL", "--env", '{"CLI_HOST": "override"}', "--start-dir", str(project)]
    )
    assert output == "http://override\n"


def test_wildcard_listing(project: Path):
    _, output = run_capture(["*", "--start-dir", str(project)])
    assert output.splitlines() == ["CLI_HOST=db", "CLI_LIST={a,b}", "CLI_URL=http://db"]


def test_pinned_env_file(project: Path, tmp_path: Path):
    other = tmp_path / "other.env"
    other.write_text("CLI_HOST=pinned\n")
    _, output = run_capture(["CLI_HOST", "--env-file", str(other), "--start-dir", str(project)])
    assert output == "pinned\n"


def test_help(project: Path):
    code, output = run_capture(["--help"])
    assert code == 0
    assert "--no-interpolate" in output


def test_build_from_args_applies_flags(project: Path):
    args = parse_args(["KEY", "--cache", "mtime", "--prefs", "memory", "--log", "memory", "--group", "g"])
    resolver = build_from_args(args)
    assert resolver.cache.policy is CachePolicy.MTIME
    assert isinstance(resolver.preferences, MemoryPreferences)
    assert isinstance(resolver.log, MemoryLogger)
    assert resolver.pref_group == "g"


def test_env_overrides_reach_the_logger(project: Path):
    args = parse_args(["KEY", "--log", "pretty", "--env", '{"LOG_LEVEL": "DEBUG"}'])
    resolver = build_from_args(args)
    assert isinstance(resolver.log, PrettyLogger)
    assert resolver.log._threshold == level_rank("DEBUG")


@pytest.mark.parametrize(
    "argv, message",
    [
        ([], "Usage"),
        (["A", "B", "C"], "Usage"),
        (["A", "--bogus"], "Unknown flag: --bogus"),
        (["A", "--log"], "requires a value"),
        (["A", "--env", "[1]"], "must be a JSON object"),
        (["A", "--env", '{"K": 1}'], "string values"),
    ],
)
def test_bad_arguments(argv, message):
    with pytest.raises(ValueError, match=message):
        parse_args(argv)


def test_run_cli_exits_with_error(capsys: pytest.CaptureFixture[str]):
    with pytest.raises(SystemExit) as exc_info:
        run_cli(["A", "--cache", "sometimes"])
    assert exc_info.value.code == 1
    assert "Error: Unknown cache policy" in capsys.readouterr().err


def test_run_cli_exits_zero(project: Path, capsys: pytest.CaptureFixture[str]):
    with pytest.raises(SystemExit) as exc_info:
        run_cli(["CLI_HOST", "--start-dir", str(project)])
    assert exc_info.value.code == 0
    assert capsys.readouterr().out == "db\n"
