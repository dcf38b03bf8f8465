import os
import fcntl
import logging
from pathlib import Path
from typing import Iterable

from lrulog.api.errors import LogIOError
from lrulog.log.codec import encode, FOOTER_SIZE

logger = logging.getLogger('LogWriter')


class LogWriter:
    """
    Blind appender for cache log files. Each call opens the file with
    O_APPEND, hands the whole encoded entry to the kernel in one write, and
    closes it again. Existing contents are never read.

    Args:
        lock: hold an advisory exclusive flock on the file while writing, so
              that other lrulog writers on the same machine are serialized
        sync: fsync after the write
    """

    def __init__(self, lock: bool = True, sync: bool = False):
        self.lock = lock
        self.sync = sync

    def append(self, path: os.PathLike, record) -> int:
        # encode first so an oversized record never opens the file
        data = encode(record)
        self._write(Path(path), data)
        logger.debug("appended %d byte record to %s", len(data) - FOOTER_SIZE, path)
        return len(data)

    def append_many(self, path: os.PathLike, records: Iterable) -> int:
        encoded = [encode(record) for record in records]
        if not encoded:
            return 0
        data = b''.join(encoded)
        self._write(Path(path), data)
        logger.debug("appended %d records, %d bytes to %s", len(encoded), len(data), path)
        return len(data)

    def _write(self, path: Path, data: bytes) -> None:
        try:
            fd = os.open(path, os.O_WRONLY | os.O_APPEND | os.O_CREAT, 0o644)
        except OSError as e:
            raise LogIOError(path, f"could not open log file for append ({e.strerror})") from e
        try:
            if self.lock:
                fcntl.flock(fd, fcntl.LOCK_EX)
            view = memoryview(data)
            written = os.write(fd, view)
            while written < len(data):
                logger.warning("short write to %s, %d of %d bytes, writing remainder",
                               path, written, len(data))
                written += os.write(fd, view[written:])
            if self.sync:
                os.fsync(fd)
        except OSError as e:
            raise LogIOError(path, f"could not append to log file ({e.strerror})") from e
        finally:
            # closing the descriptor drops the flock too
            os.close(fd)


def append(path: os.PathLike, record) -> int:
    """ Append one record using a default writer. """
    return LogWriter().append(path, record)
