import logging
from typing import Optional, List

from lrulog.api.cache_api import EntryCacheAPI
from lrulog.api.cache_config import CacheConfig
from lrulog.api.types import RecentEntries, LogStats
from lrulog.cache.namespace import CacheNamespace
from lrulog.log.entry_log import EntryLog
from lrulog.log.writer import LogWriter

logger = logging.getLogger('EntryCache')


class EntryCache(EntryCacheAPI):
    """
    File backed implementation of EntryCacheAPI, one append-only log per
    cache name under the configured data directory.
    """

    def __init__(self, config: Optional[CacheConfig] = None):
        self.config = config if config is not None else CacheConfig.from_env()
        self.namespace = CacheNamespace(self.config.data_dir)
        self.writer = LogWriter(lock=self.config.lock_writes, sync=self.config.sync_writes)

    def _log(self, cache_name: str, create: bool) -> EntryLog:
        return EntryLog(self.namespace.resolve(cache_name, create=create), writer=self.writer)

    def put(self, cache_name: str, record: bytes) -> None:
        self._log(cache_name, create=True).append(record)

    def put_many(self, cache_name: str, records) -> None:
        self._log(cache_name, create=True).append_many(records)

    def get(self, cache_name: str, limit: Optional[int] = None, strict: bool = False) -> RecentEntries:
        if limit is None:
            limit = self.config.default_limit
        result = self._log(cache_name, create=False).most_recent(limit, strict=strict)
        if not result.clean:
            logger.info("cache '%s' log is damaged, returning %d records recovered before offset %d",
                        cache_name, len(result), result.corruption.offset)
        return result

    def clear(self, cache_name: str) -> None:
        self._log(cache_name, create=False).clear()

    def list_caches(self) -> List[str]:
        return self.namespace.list_caches()

    def get_stats(self, cache_name: str) -> LogStats:
        return self._log(cache_name, create=False).get_stats()
