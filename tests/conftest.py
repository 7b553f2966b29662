"""Configuration file for pytest containing shared fixtures.

This module provides fixtures that can be used across multiple test files:
- cache: A fresh in-memory entry cache
- adapter: A files adapter over that cache with permissions enabled
- dir_url: Builds the ``dirbuf://`` url of a directory on disk
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from dirbuf.drivers.cache import MemoryEntryCache
from dirbuf.drivers.files import FilesAdapter
from dirbuf.kernel.config import clear_config_cache
from dirbuf.kernel.utils.paths import os_to_posix_path
from dirbuf.kernel.utils.urls import addslash


@pytest.fixture
def cache() -> MemoryEntryCache:
    return MemoryEntryCache()


@pytest.fixture
def adapter(cache: MemoryEntryCache) -> FilesAdapter:
    return FilesAdapter(cache, permissions=True)


@pytest.fixture
def dir_url() -> Callable[[Path], str]:
    """Fixture returning a function that turns a directory path into a url."""

    def _dir_url(path: Path) -> str:
        return "dirbuf://" + addslash(os_to_posix_path(str(path)))

    return _dir_url


@pytest.fixture(autouse=True)
def _fresh_config_cache():
    clear_config_cache()
    yield
    clear_config_cache()
