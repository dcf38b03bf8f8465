#!/usr/bin/env python
import logging

import pytest

from lrulog.api.errors import CorruptLog
from lrulog.api.types import RecentEntries
from lrulog.cache.lru_view import most_recent
from lrulog.log.writer import LogWriter
from dev_tools.log_control import setup_logging
from dev_tools.log_damage import write_raw, overwrite_last_footer

log_control = setup_logging()
logger = logging.getLogger("test_code")


def fill(path, records):
    LogWriter().append_many(path, records)


def test_reverse_order_recovery(tmp_path):
    path = tmp_path / "order.log"
    records = [f"/r{i}".encode() for i in range(1, 11)]
    fill(path, records)
    result = most_recent(path, len(records))
    assert result == list(reversed(records))
    assert result.clean


def test_dedup_keeps_newest_position(tmp_path):
    path = tmp_path / "dedup.log"
    fill(path, [b"a", b"b", b"a"])
    assert most_recent(path, 10) == [b"a", b"b"]
    fill(path, [b"b"])
    assert most_recent(path, 10) == [b"b", b"a"]
    assert most_recent(path) == [b"b", b"a"]


def test_limit_truncation(tmp_path):
    path = tmp_path / "limit.log"
    fill(path, [b"e5", b"e4", b"e3", b"e2", b"e1"])
    assert most_recent(path, 3) == [b"e1", b"e2", b"e3"]
    assert most_recent(path, 1) == [b"e1"]
    assert most_recent(path, 0) == []
    assert most_recent(path, 99) == [b"e1", b"e2", b"e3", b"e4", b"e5"]
    with pytest.raises(ValueError):
        most_recent(path, -1)


def test_limit_counts_distinct_records(tmp_path):
    """ Duplicates in the tail don't use up the limit. """
    path = tmp_path / "dups.log"
    fill(path, [b"c", b"b", b"a", b"a", b"a", b"a"])
    assert most_recent(path, 2) == [b"a", b"b"]


def test_unknown_log_is_empty(tmp_path):
    result = most_recent(tmp_path / "never_written.log", 5)
    assert isinstance(result, RecentEntries)
    assert len(result) == 0
    assert result.clean


def test_corruption_isolation(tmp_path):
    """
    A damaged footer deep in the file stops the scan, but the records
    recovered from the undamaged tail are returned along with the
    corruption instead of being thrown away.
    """
    path = tmp_path / "damaged.log"
    write_raw(path, b"\xff\xff")
    fill(path, [b"c", b"d", b"c"])
    result = most_recent(path, 10)
    assert result == [b"c", b"d"]
    assert not result.clean
    assert isinstance(result.corruption, CorruptLog)
    assert result.corruption.offset == 2
    assert result.corruption.declared_length == 0xFFFF
    assert result.corruption.entries_read == 3
    with pytest.raises(CorruptLog) as excinfo:
        result.raise_if_corrupt()
    assert excinfo.value.recovered == [b"c", b"d"]


def test_damaged_last_footer(tmp_path):
    """ If the newest footer is the broken one nothing can be recovered, but that is signalled. """
    path = tmp_path / "last.log"
    fill(path, [b"a", b"b"])
    overwrite_last_footer(path, 40000)
    result = most_recent(path, 10)
    assert result == []
    assert result.corruption is not None
    assert result.corruption.entries_read == 0


def test_limit_met_before_damage_is_clean(tmp_path):
    path = tmp_path / "early.log"
    write_raw(path, b"\xff\xff")
    fill(path, [b"a", b"b"])
    assert most_recent(path, 2).clean
    assert not most_recent(path, 3).clean


def test_strict_mode_raises_with_partial_result(tmp_path):
    path = tmp_path / "strict.log"
    write_raw(path, b"\xff\xff")
    fill(path, [b"x", b"y"])
    with pytest.raises(CorruptLog) as excinfo:
        most_recent(path, 10, strict=True)
    assert excinfo.value.recovered == [b"y", b"x"]
    assert most_recent(path, 1, strict=True) == [b"y"]
