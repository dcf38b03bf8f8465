"""
Turns filesystem paths into cache records and back.

The storage engine only sees bytes. This module is the producer that feeds
it: paths are canonicalized (symlinks, ``~`` and relative segments
resolved), classified as file or directory to pick a cache, and encoded with
the filesystem encoding so that any path the OS accepts survives the round
trip. On the way out records are rendered relative to the home directory.
"""
import os
import stat
import logging
from pathlib import Path
from typing import Optional, Tuple, Union

from lrulog.api.cache_api import EntryCacheAPI
from lrulog.api.types import PathKind, RecentEntries

logger = logging.getLogger('PathRecords')

CACHE_NAMES = {
    PathKind.file: "files",
    PathKind.dir: "dirs",
    PathKind.other: "other",
}


def canonicalize(path: Union[str, os.PathLike]) -> Path:
    """ Absolute path with every symlink resolved, the path must exist """
    return Path(path).expanduser().resolve(strict=True)


def classify(path: Union[str, os.PathLike]) -> PathKind:
    mode = os.stat(path).st_mode
    if stat.S_ISDIR(mode):
        return PathKind.dir
    if stat.S_ISREG(mode):
        return PathKind.file
    return PathKind.other


def cache_for(kind: PathKind) -> str:
    return CACHE_NAMES[PathKind(kind)]


def to_record(path: Union[str, os.PathLike]) -> bytes:
    return os.fsencode(path)


def from_record(record: bytes) -> str:
    return os.fsdecode(record)


def home_dir() -> Path:
    home = Path.home()
    try:
        return home.resolve(strict=True)
    except OSError:
        return home


def is_path_cache(cache_name: str) -> bool:
    return cache_name in CACHE_NAMES.values()


def display(record: bytes, home: Optional[Path] = None) -> str:
    """
    Render a record for people, with the home directory shown as ``~``.
    Only the leading home prefix is replaced, the rest of the record is
    left as stored, so records that differ on disk still print differently.
    Records that are not under home come back unchanged.
    """
    text = from_record(record)
    if home is None:
        home = home_dir()
    prefix = str(home)
    if text == prefix:
        return "~"
    if not prefix.endswith(os.sep):
        prefix += os.sep
    if text.startswith(prefix):
        return "~/" + text[len(prefix):]
    return text


class PathRecorder:
    """ Records visited paths into a cache, one cache per kind of path. """

    def __init__(self, cache: EntryCacheAPI):
        self.cache = cache

    def record_path(self, path: Union[str, os.PathLike],
                    cache_name: Optional[str] = None) -> Optional[Tuple[str, bytes]]:
        """
        Canonicalize ``path``, classify it and append it to the matching
        cache, or to ``cache_name`` when one is given. Paths that do not
        exist, or cannot be resolved, are skipped and None is returned.
        """
        try:
            canon = canonicalize(path)
            kind = classify(canon)
        except (OSError, RuntimeError) as e:
            # RuntimeError is how pathlib reports a symlink loop on older pythons
            logger.info("skipping %s, cannot canonicalize: %s", path, e)
            return None
        if cache_name is None:
            cache_name = cache_for(kind)
        record = to_record(canon)
        self.cache.put(cache_name, record)
        logger.debug("recorded %s in cache '%s'", canon, cache_name)
        return cache_name, record

    def recent(self, kind: PathKind = PathKind.dir, limit: Optional[int] = None,
               strict: bool = False) -> RecentEntries:
        return self.cache.get(cache_for(kind), limit, strict=strict)
