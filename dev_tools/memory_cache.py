import logging
from pathlib import Path
from typing import Optional, List, Dict

from lrulog.api.cache_api import EntryCacheAPI
from lrulog.api.types import RecentEntries, LogStats
from lrulog.cache.namespace import CacheNamespace
from lrulog.log.codec import as_bytes, check_size, encoded_size

logger = logging.getLogger('MemoryCache')


class MemoryCache(EntryCacheAPI):
    """
    Reference implementation of EntryCacheAPI that keeps every write in a
    list per cache. Same semantics as the file backed cache, so tests can
    run a sequence of operations against both and compare.
    """

    def __init__(self):
        self.caches: Dict[str, List[bytes]] = {}

    def put(self, cache_name: str, record: bytes) -> None:
        CacheNamespace.validate(cache_name)
        record = as_bytes(record)
        check_size(record)
        self.caches.setdefault(cache_name, []).append(record)
        logger.debug("cache '%s' now has %d writes", cache_name, len(self.caches[cache_name]))

    def get(self, cache_name: str, limit: Optional[int] = None, strict: bool = False) -> RecentEntries:
        CacheNamespace.validate(cache_name)
        if limit is not None and limit < 0:
            raise ValueError(f"limit must not be negative, got {limit}")
        result = []
        for record in reversed(self.caches.get(cache_name, [])):
            if limit is not None and len(result) >= limit:
                break
            if record not in result:
                result.append(record)
        return RecentEntries(result)

    def clear(self, cache_name: str) -> None:
        CacheNamespace.validate(cache_name)
        if cache_name in self.caches:
            self.caches[cache_name] = []

    def list_caches(self) -> List[str]:
        return sorted(self.caches)

    def get_stats(self, cache_name: str) -> LogStats:
        writes = self.caches.get(cache_name, [])
        return LogStats(path=Path(f"<memory>/{cache_name}"),
                        size_bytes=sum(encoded_size(r) for r in writes),
                        entry_count=len(writes),
                        distinct_count=len(set(writes)))
