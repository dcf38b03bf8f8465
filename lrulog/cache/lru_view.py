import os
import logging
from typing import Optional

from lrulog.api.errors import CorruptLog
from lrulog.api.types import RecentEntries
from lrulog.log.reader import ReverseReader

logger = logging.getLogger('LRUView')


def most_recent(path: os.PathLike, limit: Optional[int] = None, strict: bool = False) -> RecentEntries:
    """
    Build the most-recent-first list of distinct records in a log file.

    Duplicates are resolved at read time: the newest write of a record
    decides its position and older copies are skipped. The scan stops as
    soon as ``limit`` distinct records are found, so only the tail of the
    file that is needed gets read.

    Args:
        path: the cache log file, a missing file is an empty cache
        limit: maximum number of records to return, None for no limit
        strict: raise CorruptLog instead of returning a partial result

    Returns:
        RecentEntries holding the records, and the CorruptLog condition if
        the scan ran into a damaged entry before satisfying the limit.
    """
    if limit is not None:
        if limit < 0:
            raise ValueError(f"limit must not be negative, got {limit}")
        if limit == 0:
            return RecentEntries()
    seen = set()
    records = []
    corruption = None
    with ReverseReader(path) as reader:
        try:
            for record in reader:
                if record in seen:
                    continue
                seen.add(record)
                records.append(record)
                if limit is not None and len(records) >= limit:
                    break
        except CorruptLog as e:
            corruption = e
    logger.debug("%s: %d distinct records from %d entries", path, len(records), reader.entries_read)
    result = RecentEntries(records, corruption)
    if strict:
        result.raise_if_corrupt()
    return result
