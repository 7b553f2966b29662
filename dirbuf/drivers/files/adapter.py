"""Local filesystem adapter.

Lets a directory be edited as a list of entries: ``alist`` populates the
entry cache, ``render_action``/``aperform_action`` preview and apply the
mutations produced from an edited listing.

Example
-------
.. code-block:: python

    cache = MemoryEntryCache()
    adapter = FilesAdapter(cache)
    entries = await adapter.alist_all("dirbuf:///tmp/", ["size", "mtime"])
    await adapter.aperform_action(CreateAction(url="dirbuf:///tmp/new.txt"))
"""

from __future__ import annotations

import os
import stat as stat_module
from collections.abc import AsyncIterator, Sequence
from typing import TYPE_CHECKING

from dirbuf.drivers.files import actions, fsops
from dirbuf.drivers.files.columns import build_file_columns
from dirbuf.drivers.files.lister import DirectoryLister
from dirbuf.drivers.registry import AdapterRegistry
from dirbuf.kernel.columns import get_metadata_fetcher
from dirbuf.kernel.config.models import DEFAULT_BATCH_SIZE, DEFAULT_SCHEME
from dirbuf.kernel.exceptions import FilesystemError
from dirbuf.kernel.utils.paths import IS_WINDOWS, os_to_posix_path, posix_to_os_path
from dirbuf.kernel.utils.urls import addslash, parse_url

if TYPE_CHECKING:
    from dirbuf.kernel.config.models import FilesConfig
    from dirbuf.kernel.domain.actions import Action
    from dirbuf.kernel.domain.entry import Entry
    from dirbuf.kernel.ports.adapter import AdapterLookup
    from dirbuf.kernel.ports.cache import EntryCache
    from dirbuf.kernel.ports.columns import Column, ColumnDef


class FilesAdapter:
    """Adapter for the local filesystem.

    Parameters
    ----------
    cache : EntryCache
        Where listings are stored.
    registry : AdapterLookup | None
        Used to check that move/copy destinations belong to this adapter.
        When omitted, a private registry is created with this adapter
        registered under ``scheme``.
    scheme : str
        Scheme to register under when no registry is given.
    batch_size : int
        Entries read per batch while listing.
    permissions : bool | None
        Enable the editable permissions column; None means "on for POSIX".
    time_format : str | None
        Default strftime format of the time columns.
    """

    name = "files"

    def __init__(
        self,
        cache: EntryCache,
        registry: AdapterLookup | None = None,
        *,
        scheme: str = DEFAULT_SCHEME,
        batch_size: int = DEFAULT_BATCH_SIZE,
        permissions: bool | None = None,
        time_format: str | None = None,
    ) -> None:
        self.cache = cache
        if registry is None:
            registry = AdapterRegistry()
            registry.register(scheme, self)
        self.registry = registry
        self.permissions_enabled = (not IS_WINDOWS) if permissions is None else permissions
        self._columns = build_file_columns(
            permissions_enabled=self.permissions_enabled, time_format=time_format
        )
        self._lister = DirectoryLister(cache, batch_size)

    @classmethod
    def from_config(
        cls,
        config: FilesConfig,
        cache: EntryCache,
        registry: AdapterLookup | None = None,
        scheme: str = DEFAULT_SCHEME,
    ) -> FilesAdapter:
        return cls(
            cache,
            registry,
            scheme=scheme,
            batch_size=config.batch_size,
            permissions=config.permissions_enabled,
            time_format=config.time_format,
        )

    # --- Columns ---

    def get_column(self, name: str) -> Column | None:
        return self._columns.get(name)

    def columns(self) -> list[str]:
        return list(self._columns)

    # --- Urls ---

    def owns(self, url: str) -> bool:
        """True when ``url`` is handled by this very adapter instance."""
        return self.registry.get_adapter_by_scheme(url) is self

    async def anormalize_url(self, url: str) -> str:
        """Canonical directory url: absolute, symlinks resolved, trailing ``/``."""
        scheme, path = parse_url(url)
        os_path = os.path.abspath(os.path.expanduser(posix_to_os_path(path)))
        try:
            real_path = await fsops.realpath(os_path)
        except OSError:
            real_path = os_path
        return scheme + addslash(os_to_posix_path(real_path))

    def url_to_buffer_name(self, url: str) -> str:
        _, path = parse_url(url)
        return posix_to_os_path(path)

    # --- Listing ---

    def alist(self, url: str, column_defs: Sequence[ColumnDef]) -> AsyncIterator[list[Entry]]:
        """List ``url`` into the cache, yielding each stored batch.

        Raises
        ------
        ListingError
            On a terminal failure; a missing directory lists as empty.
        """
        return self._lister.alist(url, get_metadata_fetcher(self, column_defs))

    async def alist_all(self, url: str, column_defs: Sequence[ColumnDef] = ()) -> list[Entry]:
        """List ``url`` to completion and return every stored entry."""
        entries: list[Entry] = []
        async for batch in self.alist(url, column_defs):
            entries.extend(batch)
        return entries

    async def ais_modifiable(self, url: str) -> bool:
        """Whether the current user may write into the directory at ``url``.

        A directory that doesn't exist yet counts as modifiable.
        """
        _, path = parse_url(url)
        try:
            st = await fsops.stat(posix_to_os_path(path))
        except FileNotFoundError:
            return True
        except OSError as e:
            raise FilesystemError.from_os_error(path, e) from e

        # Can't do permission checks without POSIX permission bits
        if IS_WINDOWS:
            return True

        if os.getuid() == st.st_uid:
            return bool(st.st_mode & stat_module.S_IWUSR)
        if os.getgid() == st.st_gid:
            return bool(st.st_mode & stat_module.S_IWGRP)
        return bool(st.st_mode & stat_module.S_IWOTH)

    # --- Actions ---

    def render_action(self, action: Action) -> str:
        return actions.render_action(self, action)

    async def aperform_action(self, action: Action) -> None:
        await actions.aperform_action(self, action)


__all__ = ["FilesAdapter"]
