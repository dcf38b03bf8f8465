"""
pytest configuration for the lrulog tests.

This file is automatically loaded by pytest and provides
shared fixtures and configuration for all tests.
"""
import os
import pytest

from lrulog.api.cache_config import CacheConfig
from lrulog.cache.entry_cache import EntryCache

# Set ipdb as the default breakpoint() debugger
# This makes breakpoint() use ipdb.set_trace instead of pdb.set_trace
os.environ['PYTHONBREAKPOINT'] = 'ipdb.set_trace'


@pytest.fixture(scope="session", autouse=True)
def configure_breakpoint():
    """
    Automatically configure ipdb as the breakpoint debugger for all tests.

    Usage in tests:
        def test_something():
            breakpoint()  # This will use ipdb instead of pdb
            assert True
    """
    os.environ['PYTHONBREAKPOINT'] = 'ipdb.set_trace'
    yield


@pytest.fixture
def log_path(tmp_path):
    """ Location for a single log file, not created yet """
    return tmp_path / "logs" / "test.log"


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """ Empty data directory, also exported so code reading the environment finds it """
    path = tmp_path / "data"
    monkeypatch.setenv("LRULOG_DATA_DIR", str(path))
    return path


@pytest.fixture
def cache(data_dir):
    return EntryCache(CacheConfig(data_dir=data_dir))
