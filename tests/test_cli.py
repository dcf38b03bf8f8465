#!/usr/bin/env python
import logging

import pytest

from lrulog.cli import main, EXIT_OK, EXIT_ERROR, EXIT_CORRUPT
from lrulog.cache.namespace import CacheNamespace
from dev_tools.log_control import setup_logging
from dev_tools.log_damage import write_raw

log_control = setup_logging()
logger = logging.getLogger("test_code")


@pytest.fixture
def home(tmp_path, monkeypatch):
    home = (tmp_path / "home").resolve()
    (home / "src" / "app").mkdir(parents=True)
    (home / "notes.txt").write_text("notes")
    monkeypatch.setenv("HOME", str(home))
    return home


def run(capsys, *argv):
    code = main(list(argv))
    out, err = capsys.readouterr()
    return code, out.splitlines(), err


def test_put_then_get(capsys, data_dir, home, tmp_path):
    outside = tmp_path / "elsewhere"
    outside.mkdir()
    for path in [home / "src", home, home / "src" / "app", outside, home / "src"]:
        code, _, _ = run(capsys, "put", str(path))
        assert code == EXIT_OK
    code, lines, err = run(capsys, "get")
    assert code == EXIT_OK
    assert lines == ["~/src", str(outside.resolve()), "~/src/app", "~"]
    code, lines, _ = run(capsys, "get", "-n", "2", "--absolute")
    assert lines == [str(home / "src"), str(outside.resolve())]


def test_files_and_dirs_are_separate(capsys, data_dir, home):
    run(capsys, "put", str(home / "notes.txt"))
    run(capsys, "put", str(home / "src"))
    assert run(capsys, "get", "--kind", "file")[1] == ["~/notes.txt"]
    assert run(capsys, "get", "--kind", "dir")[1] == ["~/src"]
    code, lines, _ = run(capsys, "caches")
    assert lines == ["dirs", "files"]


def test_put_missing_path(capsys, data_dir, home):
    code, _, err = run(capsys, "put", str(home / "gone"))
    assert code == EXIT_ERROR
    assert "does not exist" in err
    assert run(capsys, "get")[1] == []


def test_raw_entries(capsys, data_dir, home):
    assert run(capsys, "put", "--raw", "hello")[0] == EXIT_ERROR
    assert run(capsys, "put", "--raw", "--cache", "words", "hello")[0] == EXIT_OK
    assert run(capsys, "put", "--raw", "--cache", "words", "[bold]world")[0] == EXIT_OK
    assert run(capsys, "put", "--raw", "--cache", "words", "hello")[0] == EXIT_OK
    assert run(capsys, "get", "--cache", "words")[1] == ["hello", "[bold]world"]
    code, _, err = run(capsys, "put", "--raw", "--cache", "words", "x" * 70000)
    assert code == EXIT_ERROR
    assert "exceeds" in err


def test_bad_cache_name(capsys, data_dir, home):
    code, _, err = run(capsys, "put", "--raw", "--cache", "../up", "x")
    assert code == EXIT_ERROR
    assert "invalid cache name" in err


def test_clear(capsys, data_dir, home):
    run(capsys, "put", str(home / "src"))
    assert run(capsys, "clear")[0] == EXIT_OK
    assert run(capsys, "get")[1] == []


def test_damaged_log(capsys, data_dir, home):
    """
    Recovered entries are still printed, the damage is reported on stderr,
    and only --strict turns it into a failing exit status.
    """
    path = CacheNamespace(data_dir).resolve("dirs")
    write_raw(path, b"\xee\xee")
    run(capsys, "put", str(home / "src"))
    code, lines, err = run(capsys, "get")
    assert code == EXIT_OK
    assert lines == ["~/src"]
    assert "corrupt log" in err
    code, lines, err = run(capsys, "get", "--strict")
    assert code == EXIT_CORRUPT
    assert lines == ["~/src"]


def test_stats(capsys, data_dir, home):
    run(capsys, "put", str(home / "src"))
    run(capsys, "put", str(home / "src"))
    code, lines, _ = run(capsys, "stats")
    assert code == EXIT_OK
    text = "\n".join(lines)
    assert "entries" in text
    assert "duplicates" in text


def test_data_dir_flag(capsys, tmp_path, home, monkeypatch):
    monkeypatch.delenv("LRULOG_DATA_DIR", raising=False)
    target = tmp_path / "flagged"
    assert run(capsys, "--data-dir", str(target), "--no-lock", "put", str(home))[0] == EXIT_OK
    assert (target / "dirs.log").exists()
    assert run(capsys, "-d", str(target), "get")[1] == ["~"]


def test_negative_limit(capsys, data_dir, home):
    code, _, err = run(capsys, "get", "-n", "-1")
    assert code == EXIT_ERROR
    assert "limit" in err


def test_raw_records_print_as_stored(capsys, data_dir, home):
    """
    Records that only differ as path spellings are still distinct records,
    and records outside the path caches are never abbreviated.
    """
    for entry in ["a", "a/", "a//", "./a", ""]:
        assert run(capsys, "put", "--raw", "--cache", "words", entry)[0] == EXIT_OK
    assert run(capsys, "get", "--cache", "words")[1] == ["", "./a", "a//", "a/", "a"]
    run(capsys, "put", "--raw", "--cache", "words", str(home / "src"))
    assert run(capsys, "get", "--cache", "words", "-n", "1")[1] == [str(home / "src")]
    run(capsys, "put", "--raw", "--cache", "dirs", str(home / "src") + "/")
    run(capsys, "put", "--raw", "--cache", "dirs", str(home / "src"))
    assert run(capsys, "get", "--cache", "dirs")[1] == ["~/src", "~/src/"]
