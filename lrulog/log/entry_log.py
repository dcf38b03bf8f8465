import os
import logging
from pathlib import Path
from typing import Optional, Iterable

from lrulog.api.errors import LogIOError, CorruptLog
from lrulog.api.types import RecentEntries, LogStats
from lrulog.log.reader import ReverseReader
from lrulog.log.writer import LogWriter
from lrulog.cache.lru_view import most_recent

logger = logging.getLogger('EntryLog')


class EntryLog:
    """
    Handle on one cache log file. Holds no open file between calls, every
    method opens what it needs and closes it before returning, so a fresh
    call always sees what is on disk right now.

    WARNING: nothing here checks that the file at ``path`` really is a log
    file. A foreign file will usually show up as CorruptLog on read.
    """

    def __init__(self, path: os.PathLike, writer: Optional[LogWriter] = None):
        self.path = Path(path)
        self.writer = writer if writer is not None else LogWriter()

    def load(self) -> "EntryLog":
        """ Create the parent directory and an empty log file if they are missing. """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise LogIOError(self.path.parent, f"could not create directory ({e.strerror})") from e
        try:
            self.path.touch(exist_ok=True)
        except OSError as e:
            raise LogIOError(self.path, f"could not open log file ({e.strerror})") from e
        return self

    def append(self, record) -> int:
        return self.writer.append(self.path, record)

    def append_many(self, records: Iterable) -> int:
        return self.writer.append_many(self.path, records)

    def iter_reverse(self) -> ReverseReader:
        return ReverseReader(self.path)

    def most_recent(self, limit: Optional[int] = None, strict: bool = False) -> RecentEntries:
        return most_recent(self.path, limit, strict=strict)

    def size(self) -> int:
        try:
            return self.path.stat().st_size
        except FileNotFoundError:
            return 0
        except OSError as e:
            raise LogIOError(self.path, f"could not stat log file ({e.strerror})") from e

    def clear(self) -> None:
        """ Truncate the log to zero length. A missing file stays missing. """
        try:
            with open(self.path, 'r+b') as f:
                f.truncate(0)
        except FileNotFoundError:
            return
        except OSError as e:
            raise LogIOError(self.path, f"could not clear log file ({e.strerror})") from e
        logger.info("cleared %s", self.path)

    def sync(self) -> None:
        """ Flush anything the OS still holds for this file to disk. """
        try:
            fd = os.open(self.path, os.O_RDONLY)
        except FileNotFoundError:
            return
        except OSError as e:
            raise LogIOError(self.path, f"could not open log file ({e.strerror})") from e
        try:
            os.fsync(fd)
        except OSError as e:
            raise LogIOError(self.path, f"could not sync log file ({e.strerror})") from e
        finally:
            os.close(fd)

    def get_stats(self) -> LogStats:
        size = self.size()
        seen = set()
        clean = True
        corrupt_offset = None
        with ReverseReader(self.path) as reader:
            try:
                for record in reader:
                    seen.add(record)
            except CorruptLog as e:
                clean = False
                corrupt_offset = e.offset
            entry_count = reader.entries_read
        return LogStats(path=self.path, size_bytes=size, entry_count=entry_count,
                        distinct_count=len(seen), clean=clean, corrupt_offset=corrupt_offset)
