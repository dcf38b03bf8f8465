from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List, Iterator
from enum import Enum

from lrulog.api.errors import CorruptLog


class ReaderState(str, Enum):

    """ Cursor still has bytes in front of it, more entries may follow """
    ready = "READY"

    """ Cursor reached the start of the file (or a residual byte), clean end """
    exhausted = "EXHAUSTED"

    """ A footer pointed before the start of the file, scan abandoned """
    corrupt = "CORRUPT"

    def __str__(self):
        return self.value


class PathKind(str, Enum):

    """ Regular file """
    file = "FILE"

    """ Directory """
    dir = "DIR"

    """ Anything else the filesystem can hold, sockets, fifos, devices """
    other = "OTHER"

    def __str__(self):
        return self.value


class RecentEntries:
    """
    Result of a most-recent-first lookup. Behaves like a read only sequence
    of distinct records, and remembers whether the scan that produced it
    ended cleanly.
    """

    def __init__(self, records: Optional[List[bytes]] = None, corruption: Optional[CorruptLog] = None):
        self.records = records if records is not None else []
        self.corruption = corruption

    @property
    def clean(self) -> bool:
        return self.corruption is None

    def raise_if_corrupt(self) -> None:
        if self.corruption is not None:
            self.corruption.recovered = list(self.records)
            raise self.corruption

    def __len__(self):
        return len(self.records)

    def __iter__(self) -> Iterator[bytes]:
        return iter(self.records)

    def __getitem__(self, index):
        return self.records[index]

    def __eq__(self, other):
        if isinstance(other, RecentEntries):
            return self.records == other.records and self.clean == other.clean
        if isinstance(other, list):
            return self.records == other
        return NotImplemented

    def __repr__(self):
        status = "clean" if self.clean else f"corrupt at {self.corruption.offset}"
        return f"RecentEntries({len(self.records)} records, {status})"


@dataclass
class LogStats:
    """
    Statistics about one cache log file, computed by a full backward scan.

    Attributes:
        path (Path): location of the log file
        size_bytes (int): file length, 0 if the file does not exist
        entry_count (int): number of entries cleanly read, duplicates included
        distinct_count (int): number of distinct records among them
        clean (bool): False if the scan hit a damaged footer
        corrupt_offset (Optional[int]): cursor offset where the damage was found
    """
    path: Path
    size_bytes: int
    entry_count: int
    distinct_count: int
    clean: bool = field(default=True)
    corrupt_offset: Optional[int] = field(default=None)

    @property
    def duplicate_count(self) -> int:
        return self.entry_count - self.distinct_count
