import os

import pytest

from voxquery.cli.env import extract_env_files, load_env_files, parse_env_file_text


def test_extract_env_files_supports_both_forms():
    env_files, argv = extract_env_files(
        ["tools", "query", "SHOW TABLES", "--env-file", ".env", "--env-file=extra.env"]
    )
    assert env_files == [".env", "extra.env"]
    assert argv == ["tools", "query", "SHOW TABLES"]


def test_extract_env_files_errors_on_missing_value():
    with pytest.raises(SystemExit):
        extract_env_files(["tools", "--env-file"])


def test_parse_env_file_text_handles_comments_and_quotes():
    parsed = parse_env_file_text(
        """
        # comment
        DB_HOST=localhost
        DB_USER=game # trailing comment
        DB_PASS="a # not a comment"
        export GEMINI_API_KEY=abc
        """
    )
    assert parsed["DB_HOST"] == "localhost"
    assert parsed["DB_USER"] == "game"
    assert parsed["DB_PASS"] == "a # not a comment"
    assert parsed["GEMINI_API_KEY"] == "abc"


def test_load_env_files_overrides_in_order(tmp_path, monkeypatch):
    monkeypatch.setenv("DB_NAME", "old")
    monkeypatch.setenv("DB_HOST", "placeholder")
    one = tmp_path / "one.env"
    two = tmp_path / "two.env"
    one.write_text("DB_NAME=first\nDB_HOST=from_one\n", encoding="utf-8")
    two.write_text("DB_NAME=second\n", encoding="utf-8")

    loaded = load_env_files([one, two], override=True)
    assert loaded["DB_NAME"] == "second"
    assert os.environ["DB_NAME"] == "second"
    assert os.environ["DB_HOST"] == "from_one"


def test_relative_sounds_dir_resolves_against_env_file(tmp_path, monkeypatch):
    monkeypatch.setenv("VOXQUERY_SOUNDS_DIR", "placeholder")
    env_file = tmp_path / "app.env"
    env_file.write_text("VOXQUERY_SOUNDS_DIR=sounds\n", encoding="utf-8")

    loaded = load_env_files([env_file])
    assert loaded["VOXQUERY_SOUNDS_DIR"] == str((tmp_path / "sounds").resolve())


def test_missing_env_file_exits(tmp_path):
    with pytest.raises(SystemExit):
        load_env_files([tmp_path / "missing.env"])


def test_parse_env_file_text_strips_comments_after_quoted_values():
    parsed = parse_env_file_text(
        """
        GEMINI_API_KEY='abc' # rotated monthly
        DB_NAME=#unset
        DB_PASS=p#w
        not a line
        """
    )
    assert parsed == {"GEMINI_API_KEY": "abc", "DB_NAME": "", "DB_PASS": "p#w"}
