"""
On disk framing for a single cache entry.

An encoded entry is the record bytes followed by a two byte little-endian
length footer::

    |   /|   b|   a|   r|0x04|0x00|
     record payload     footer

Putting the length after the payload lets a reader that is walking the file
backward find the size of the previous entry at a fixed offset from its
cursor. There is no header, no separator and no checksum.
"""
import struct

from lrulog.api.errors import RecordTooLarge, CorruptLog

FOOTER = struct.Struct('<H')
FOOTER_SIZE = FOOTER.size
MAX_RECORD_SIZE = 0xFFFF


def as_bytes(record) -> bytes:
    if isinstance(record, str):
        raise TypeError("records are bytes, encode text before storing it")
    if not isinstance(record, (bytes, bytearray, memoryview)):
        raise TypeError(f"records are bytes, got {type(record).__name__}")
    return bytes(record)


def check_size(record) -> None:
    if len(record) > MAX_RECORD_SIZE:
        raise RecordTooLarge(len(record), MAX_RECORD_SIZE)


def encoded_size(record) -> int:
    return len(record) + FOOTER_SIZE


def encode(record) -> bytes:
    """
    Frame one record for appending to a log file.

    Args:
        record: bytes-like payload, at most MAX_RECORD_SIZE bytes

    Raises:
        RecordTooLarge: when the payload does not fit in the footer
        TypeError: when given anything but bytes, bytearray or memoryview
    """
    data = as_bytes(record)
    check_size(data)
    return data + FOOTER.pack(len(data))


def decode_footer(footer: bytes) -> int:
    """ Every two byte value is a valid length, so this only checks the width. """
    if len(footer) != FOOTER_SIZE:
        raise ValueError(f"footer must be exactly {FOOTER_SIZE} bytes, got {len(footer)}")
    return FOOTER.unpack(footer)[0]


def decode(entry: bytes) -> bytes:
    """ Strip the footer from one complete encoded entry. """
    if len(entry) < FOOTER_SIZE:
        raise CorruptLog("<buffer>", len(entry), entries_read=0,
                         reason=f"entry of {len(entry)} bytes has no room for a footer")
    length = decode_footer(entry[-FOOTER_SIZE:])
    if length != len(entry) - FOOTER_SIZE:
        raise CorruptLog("<buffer>", len(entry), declared_length=length, entries_read=0,
                         reason=f"footer declares {length} bytes but payload has {len(entry) - FOOTER_SIZE}")
    return bytes(entry[:-FOOTER_SIZE])
