"""
Definitions for the API of the named entry caches.

"""
import abc
from typing import Optional, List

from lrulog.api.types import RecentEntries, LogStats


class EntryCacheAPI(abc.ABC):
    """
    Abstract base class defining the interface for a persistent LRU entry cache.

    A cache is a named, ordered collection of opaque byte records. Writing a
    record makes it the most recent one, whether or not it was already
    present. Reading returns distinct records, most recent first.

    ## Record Semantics

    - Records are compared byte for byte, two records with identical bytes
      are the same entry
    - Records are 0 to 65535 bytes long, larger ones are rejected with
      RecordTooLarge and nothing is stored
    - The empty record is legal

    ## Method Behavior

    - `put(cache_name, record)`: Makes `record` the most recent entry of the
                                 named cache, creating the cache if needed
    - `get(cache_name, limit, strict)`: Returns up to `limit` distinct records,
                                 most recent first. An unknown cache returns an
                                 empty result. If the backing store is damaged,
                                 the records recovered before the damage are
                                 returned with the corruption attached, or with
                                 `strict` the CorruptLog is raised
    - `clear(cache_name)`: Empties the named cache, no-op for unknown caches
    - `list_caches()`: Names of caches that have backing storage
    - `get_stats(cache_name)`: Size and entry counts for the named cache

    ## Error Conditions

    Implementations raise:
    - RecordTooLarge for oversized records
    - InvalidCacheName for names that cannot be stored
    - LogIOError for storage failures
    - CorruptLog only from `get` in strict mode
    """

    @abc.abstractmethod
    def put(self, cache_name: str, record: bytes) -> None:  # pragma: no cover abstract
        raise NotImplementedError

    @abc.abstractmethod
    def get(self, cache_name: str, limit: Optional[int] = None,
            strict: bool = False) -> RecentEntries:  # pragma: no cover abstract
        raise NotImplementedError

    @abc.abstractmethod
    def clear(self, cache_name: str) -> None:  # pragma: no cover abstract
        raise NotImplementedError

    @abc.abstractmethod
    def list_caches(self) -> List[str]:  # pragma: no cover abstract
        raise NotImplementedError

    @abc.abstractmethod
    def get_stats(self, cache_name: str) -> LogStats:  # pragma: no cover abstract
        raise NotImplementedError
