"""
lrulog - persistent most-recently-used entry caches on append-only logs.

Each named cache is one log file. Writing an entry appends it to the end of
the file, reading walks the file backward from the end and returns distinct
entries, newest first, stopping as soon as enough have been found. Old
duplicates are never rewritten or removed, the newest write simply wins.

Key Components:
- EntryCache: put/get over named caches in a data directory
- EntryLog: one log file, append, reverse iteration, clear, sync, stats
- ReverseReader: the cursor driven backward scan
- PathRecorder: canonicalizes and classifies paths into file and dir caches

Example usage:
    from lrulog import EntryCache, CacheConfig

    cache = EntryCache(CacheConfig(data_dir="/tmp/lrulog"))
    cache.put("dirs", b"/home/me/src")
    cache.put("dirs", b"/etc")
    recent = cache.get("dirs", limit=10)
    # [b"/etc", b"/home/me/src"]
"""

__version__ = "0.1.0"
__author__ = "lrulog Contributors"
__license__ = "MIT"

from .api.errors import LruLogError, RecordTooLarge, LogIOError, CorruptLog, InvalidCacheName
from .api.types import RecentEntries, LogStats, ReaderState, PathKind
from .api.cache_api import EntryCacheAPI
from .api.cache_config import CacheConfig
from .log.codec import encode, decode, decode_footer, MAX_RECORD_SIZE, FOOTER_SIZE
from .log.writer import LogWriter
from .log.reader import ReverseReader
from .log.entry_log import EntryLog
from .cache.lru_view import most_recent
from .cache.namespace import CacheNamespace
from .cache.entry_cache import EntryCache
from .records.paths import PathRecorder

__all__ = [
    # Main interfaces
    "EntryCacheAPI",
    "EntryCache",
    "CacheConfig",

    # Storage engine
    "EntryLog",
    "LogWriter",
    "ReverseReader",
    "most_recent",
    "CacheNamespace",
    "encode",
    "decode",
    "decode_footer",
    "MAX_RECORD_SIZE",
    "FOOTER_SIZE",

    # Records
    "PathRecorder",

    # Types and enums
    "RecentEntries",
    "LogStats",
    "ReaderState",
    "PathKind",

    # Errors
    "LruLogError",
    "RecordTooLarge",
    "LogIOError",
    "CorruptLog",
    "InvalidCacheName",

    # Package metadata
    "__version__",
    "__author__",
    "__license__",
]
