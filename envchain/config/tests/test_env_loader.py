from pathlib import Path

import pytest

from envchain.config.env_loader import load_env_file, parse_env_text
from envchain.errors import SourceUnavailableError


def test_load_valid_env_file(tmp_path: Path):
    (tmp_path / ".env").write_text("KEY1=value1\nKEY2=2\n")
    assert load_env_file(tmp_path / ".env") == {"KEY1": "value1", "KEY2": 2}


def test_load_missing_file_returns_empty(tmp_path: Path):
    assert load_env_file(tmp_path / "nonexistent.env") == {}


def test_directory_is_not_a_file(tmp_path: Path):
    (tmp_path / ".env").mkdir()
    assert load_env_file(tmp_path / ".env") == {}


def test_comments_sections_and_blank_lines(tmp_path: Path):
    (tmp_path / ".env").write_text("# a comment\n\n[database]\nKEY=val\n  ; another\n")
    assert load_env_file(tmp_path / ".env") == {"KEY": "val"}


def test_quoted_values(tmp_path: Path):
    (tmp_path / ".env").write_text("SINGLE='hello'\nDOUBLE=\"world\"\n")
    assert load_env_file(tmp_path / ".env") == {"SINGLE": "hello", "DOUBLE": "world"}


def test_last_assignment_wins():
    assert parse_env_text("A=1\nB=2\nA=3\n") == {"A": 3, "B": 2}


def test_malformed_lines_do_not_abort_the_file():
    text = "GOOD=1\nthis line is garbage\n=no key\nBROKEN='unterminated\nALSO_GOOD=yes\n"
    assert parse_env_text(text) == {"GOOD": 1, "BROKEN": "unterminated", "ALSO_GOOD": "yes"}


def test_windows_line_endings():
    assert parse_env_text("A=1\r\nB=two\r\n") == {"A": 1, "B": "two"}


def test_byte_order_mark_is_ignored(tmp_path: Path):
    (tmp_path / ".env").write_bytes("\ufeffKEY=value\n".encode("utf-8"))
    assert load_env_file(tmp_path / ".env") == {"KEY": "value"}


def test_undecodable_file_is_source_unavailable(tmp_path: Path):
    path = tmp_path / ".env"
    path.write_bytes(b"KEY=\xff\xfe\xfa\n")
    with pytest.raises(SourceUnavailableError) as exc_info:
        load_env_file(path)
    assert exc_info.value.path == path
