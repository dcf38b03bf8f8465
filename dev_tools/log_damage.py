"""
Helpers for building broken log files in tests. Each one damages the log in
a way that can really happen: a write torn part way through, a stray byte
appended by something else, a footer overwritten.
"""
import os
import struct
from pathlib import Path

from lrulog.log.codec import FOOTER_SIZE


def write_raw(path: os.PathLike, data: bytes) -> None:
    with open(path, 'ab') as f:
        f.write(data)


def append_bad_footer(path: os.PathLike, payload: bytes, declared_length: int) -> None:
    """ Append an entry whose footer lies about the payload length """
    write_raw(path, payload + struct.pack('<H', declared_length))


def chop_tail(path: os.PathLike, count: int) -> None:
    """ Remove ``count`` bytes from the end of the file, like a torn write """
    size = Path(path).stat().st_size
    with open(path, 'r+b') as f:
        f.truncate(max(size - count, 0))


def overwrite_last_footer(path: os.PathLike, declared_length: int) -> None:
    size = Path(path).stat().st_size
    with open(path, 'r+b') as f:
        f.seek(size - FOOTER_SIZE)
        f.write(struct.pack('<H', declared_length))
