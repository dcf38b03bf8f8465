"""
Configuration class for setting up an instance of the class::`EntryCache` class.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import os

APP_NAME = "lrulog"


def default_data_dir() -> Path:
    """ The local data directory for the current user, plus the app name """
    if "LRULOG_DATA_DIR" in os.environ:
        return Path(os.environ["LRULOG_DATA_DIR"]).expanduser()
    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg, APP_NAME)
    return Path.home() / ".local" / "share" / APP_NAME


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    value = value.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"environment variable {name} must be a boolean, got {value!r}")


@dataclass
class CacheConfig:
    """
    Runtime configuration for the entry cache on the local machine.

    Args:
        data_dir:
            Directory holding one log file per cache name, created on
            first write
        default_limit:
            Number of records a get returns when the caller gives no limit,
            None means return every distinct record in the log
        lock_writes:
            Take an advisory exclusive flock on the log file around each
            append. Serializes writers that use this library, readers never
            lock. Defaults to True
        sync_writes:
            fsync the log file after each append, defaults to False
    """
    data_dir: os.PathLike = field(default_factory=default_data_dir)
    default_limit: Optional[int] = field(default=None)
    lock_writes: bool = field(default=True)
    sync_writes: bool = field(default=False)

    def __post_init__(self):
        self.data_dir = Path(self.data_dir)
        if self.default_limit is not None and self.default_limit < 0:
            raise ValueError(f"default_limit must not be negative, got {self.default_limit}")

    @classmethod
    def from_env(cls, **overrides):
        """
        Build a config from LRULOG_* environment variables. Keyword
        arguments that are not None win over the environment.
        """
        kwargs = dict(data_dir=default_data_dir(),
                      lock_writes=_env_bool("LRULOG_LOCK_WRITES", True),
                      sync_writes=_env_bool("LRULOG_SYNC_WRITES", False))
        limit = os.environ.get("LRULOG_DEFAULT_LIMIT")
        if limit:
            kwargs['default_limit'] = int(limit)
        for key, value in overrides.items():
            if value is not None:
                kwargs[key] = value
        return cls(**kwargs)
