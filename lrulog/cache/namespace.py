import os
import re
import logging
from pathlib import Path
from typing import List

from lrulog.api.errors import InvalidCacheName, LogIOError

logger = logging.getLogger('CacheNamespace')

LOG_SUFFIX = ".log"
_NAME_RE = re.compile(r'^[A-Za-z0-9_][A-Za-z0-9_.-]*$')


class CacheNamespace:
    """
    Maps cache names to log files inside one data directory. The mapping
    is fixed, ``<data_dir>/<name>.log``, so every process agrees on it.
    """

    def __init__(self, data_dir: os.PathLike):
        self.data_dir = Path(data_dir)

    @staticmethod
    def validate(cache_name: str) -> str:
        if not isinstance(cache_name, str) or not _NAME_RE.match(cache_name):
            raise InvalidCacheName(cache_name)
        return cache_name

    def resolve(self, cache_name: str, create: bool = True) -> Path:
        """
        Return the log file path for ``cache_name``. With ``create`` the data
        directory is made if it is missing, the file itself is left to the
        first append.
        """
        self.validate(cache_name)
        if create:
            try:
                self.data_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise LogIOError(self.data_dir, f"could not create data directory ({e.strerror})") from e
        return self.data_dir / f"{cache_name}{LOG_SUFFIX}"

    def list_caches(self) -> List[str]:
        if not self.data_dir.is_dir():
            return []
        names = []
        for path in self.data_dir.iterdir():
            if path.suffix == LOG_SUFFIX and path.is_file() and _NAME_RE.match(path.stem):
                names.append(path.stem)
        return sorted(names)
