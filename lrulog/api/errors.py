"""
Exceptions raised by the log storage engine and the cache layer built on it.

All of them derive from LruLogError so callers can catch the whole family
with one clause. Lower level OSError exceptions are always chained, so the
original errno and message survive in ``__cause__``.
"""
import os
from typing import Optional, List


class LruLogError(Exception):
    """ Base class for everything raised by lrulog """


class RecordTooLarge(LruLogError):
    """
    Record length does not fit in the two byte length footer. Raised at
    encode time, before anything touches the log file.
    """

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"record of {size} bytes exceeds the {limit} byte limit")


class LogIOError(LruLogError):
    """ Wraps an OSError from opening, reading, writing, seeking or locking a log file """

    def __init__(self, path: os.PathLike, message: str):
        self.path = path
        super().__init__(f"{message}: '{path}'")


class CorruptLog(LruLogError):
    """
    The backward scan found a structural inconsistency, usually a footer that
    declares a payload longer than the bytes left in front of it. This happens
    when a write was torn or the file was modified by something else.

    Attributes:
        path: the log file
        offset: cursor position when the damage was found, the footer sits
                in the two bytes just before it
        declared_length: the length the damaged footer claims, None when the
                problem was a short read
        entries_read: number of entries cleanly read before the damage
        recovered: distinct records gathered before the damage, filled in by
                   the view builder when running in strict mode
    """

    def __init__(self, path: os.PathLike, offset: int, declared_length: Optional[int] = None,
                 entries_read: int = 0, reason: Optional[str] = None):
        self.path = path
        self.offset = offset
        self.declared_length = declared_length
        self.entries_read = entries_read
        self.recovered: List[bytes] = []
        if reason is None:
            reason = (f"footer before offset {offset} declares {declared_length} bytes"
                      f" but only {max(offset - 2, 0)} precede it")
        super().__init__(f"corrupt log '{path}' after {entries_read} entries: {reason}")


class InvalidCacheName(LruLogError):
    """ Cache name cannot be mapped safely onto a file name """

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"invalid cache name {name!r}, use letters, digits, '_', '-' and '.'"
                         " and do not start with '.'")
