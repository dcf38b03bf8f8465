"""
Backward scanner for cache log files.

The reader captures the file length when it opens and walks a cursor from
there toward offset 0, one entry per step::

    |   /|0x01|0x00|   /|   b|   a|   r|0x04|0x00|
                                                  ^ cursor starts here
    |   /|0x01|0x00|   /|   b|   a|   r|0x04|0x00|
                   ^ after the first step, "/bar" returned
    |   /|0x01|0x00|   /|   b|   a|   r|0x04|0x00|
    ^ after the second step, "/" returned, cursor < 2 so the next step ends

Only the bytes of the entries actually stepped over are read, so asking for
the newest few records of a large log stays cheap. Entries appended after the
reader opened are not seen.
"""
import os
import logging
from pathlib import Path
from typing import Optional

from lrulog.api.errors import CorruptLog, LogIOError
from lrulog.api.types import ReaderState
from lrulog.log.codec import FOOTER_SIZE, decode_footer

logger = logging.getLogger('LogReader')


class ReverseReader:

    def __init__(self, path: os.PathLike):
        self.path = Path(path)
        self.file = None
        self.cursor = 0
        self.entries_read = 0
        self.state = ReaderState.exhausted
        try:
            self.file = open(self.path, 'rb')
        except FileNotFoundError:
            # no prior put, this is just an empty cache
            logger.debug("no log file at %s, treating as empty", self.path)
            return
        except OSError as e:
            raise LogIOError(self.path, f"could not open log file for read ({e.strerror})") from e
        try:
            self.cursor = os.fstat(self.file.fileno()).st_size
        except OSError as e:
            self.close()
            raise LogIOError(self.path, f"could not stat log file ({e.strerror})") from e
        self.state = ReaderState.ready
        logger.debug("opened %s for reverse scan, %d bytes", self.path, self.cursor)

    @property
    def remaining(self) -> int:
        """ Number of bytes between the start of the file and the cursor """
        return self.cursor

    def next_entry(self) -> Optional[bytes]:
        """
        Step the cursor back over one entry and return its record, or None
        once the start of the file is reached.

        Raises:
            CorruptLog: the footer in front of the cursor declares more bytes
                        than exist before it, or the file shrank underneath us.
                        The reader is finished after this.
            LogIOError: any other read failure
        """
        if self.state != ReaderState.ready:
            return None
        if self.cursor < FOOTER_SIZE:
            # 0 is a clean end, a single stray byte is treated the same way
            self._finish(ReaderState.exhausted)
            return None
        footer_pos = self.cursor - FOOTER_SIZE
        length = decode_footer(self._read_at(footer_pos, FOOTER_SIZE))
        if length > footer_pos:
            self._finish(ReaderState.corrupt)
            logger.warning("corrupt log %s, footer at %d declares %d bytes, %d entries read",
                           self.path, footer_pos, length, self.entries_read)
            raise CorruptLog(self.path, self.cursor, declared_length=length,
                             entries_read=self.entries_read)
        start = footer_pos - length
        record = self._read_at(start, length)
        self.cursor = start
        self.entries_read += 1
        return record

    def _read_at(self, offset: int, size: int) -> bytes:
        try:
            self.file.seek(offset)
            data = self.file.read(size)
        except OSError as e:
            self._finish(ReaderState.corrupt)
            raise LogIOError(self.path, f"could not read log file ({e.strerror})") from e
        if len(data) != size:
            self._finish(ReaderState.corrupt)
            raise CorruptLog(self.path, self.cursor, entries_read=self.entries_read,
                             reason=f"short read at offset {offset}, wanted {size} bytes got {len(data)}")
        return data

    def _finish(self, state: ReaderState) -> None:
        self.state = state
        self.close()

    def close(self) -> None:
        if self.file is not None:
            self.file.close()
            self.file = None

    def __iter__(self):
        return self

    def __next__(self) -> bytes:
        record = self.next_entry()
        if record is None:
            raise StopIteration
        return record

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
