"""Directory lister for the files adapter.

Opens a directory, reads it in batches, and for every entry of a batch
concurrently fetches the requested metadata (plus link data for symlinks)
before storing it in the entry cache. The next batch is only read once
every entry of the current batch has settled.

Example
-------
.. code-block:: python

    lister = DirectoryLister(cache, batch_size=100)
    async for batch in lister.alist("dirbuf:///tmp/", fetch_meta):
        print([entry.name for entry in batch])
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import suppress
from typing import TYPE_CHECKING

from dirbuf.drivers.files import fsops
from dirbuf.drivers.files.symlinks import read_link_data
from dirbuf.kernel.config.models import DEFAULT_BATCH_SIZE
from dirbuf.kernel.domain.entry import Entry, EntryType
from dirbuf.kernel.exceptions import DirbufError, ListingError, ValidationError
from dirbuf.kernel.logging import get_logger
from dirbuf.kernel.utils.paths import join, posix_to_os_path
from dirbuf.kernel.utils.urls import parse_url

if TYPE_CHECKING:
    from dirbuf.drivers.files.fsops import DirHandle, RawEntry
    from dirbuf.kernel.ports.cache import EntryCache
    from dirbuf.kernel.ports.columns import MetadataFetcher

logger = get_logger(__name__)


class DirectoryLister:
    """Streams a directory into an entry cache batch by batch.

    Parameters
    ----------
    cache : EntryCache
        Receives ``begin_update``/``store_entry``/``end_update`` signals.
    batch_size : int
        Number of raw entries requested from the OS per read.
    """

    def __init__(self, cache: EntryCache, batch_size: int = DEFAULT_BATCH_SIZE) -> None:
        if batch_size < 1:
            raise ValidationError("batch_size", "must be positive", value=batch_size)
        self._cache = cache
        self.batch_size = batch_size

    async def alist(self, url: str, fetch_meta: MetadataFetcher) -> AsyncIterator[list[Entry]]:
        """List ``url``, yielding the entries of each batch once stored.

        A directory that doesn't exist is an empty, successful listing.
        ``end_update`` runs exactly once however the listing ends, including
        when the consumer stops early and closes the generator (wrap it in
        :func:`contextlib.aclosing` to make that deterministic).

        Raises
        ------
        ListingError
            If opening, reading or closing the directory fails, or any
            entry's metadata or link data can't be fetched.
        """
        _, path = parse_url(url)
        directory = posix_to_os_path(path)
        self._cache.begin_update(url)
        logger.debug("Listing {url}", url=url)
        try:
            handle = await self._aopen(url, directory)
            if handle is None:
                return
            exhausted = False
            try:
                while batch := await self._aread_batch(url, handle):
                    yield await self._aprocess_batch(url, directory, batch, fetch_meta)
                exhausted = True
            finally:
                if not exhausted:
                    # The error already propagating takes precedence
                    with suppress(OSError):
                        await fsops.close_dir(handle)
            await self._aclose(url, handle)
        finally:
            self._cache.end_update(url)
            logger.debug("Finished listing {url}", url=url)

    async def _aopen(self, url: str, directory: str) -> DirHandle | None:
        try:
            return await fsops.open_dir(directory)
        except FileNotFoundError:
            # A not-yet-created directory can still be browsed and edited
            return None
        except OSError as e:
            raise ListingError.from_os_error(url, e) from e

    async def _aread_batch(self, url: str, handle: DirHandle) -> list[RawEntry]:
        try:
            return await fsops.read_batch(handle, self.batch_size)
        except OSError as e:
            raise ListingError.from_os_error(url, e) from e

    async def _aclose(self, url: str, handle: DirHandle) -> None:
        try:
            await fsops.close_dir(handle)
        except OSError as e:
            raise ListingError.from_os_error(url, e) from e

    async def _aprocess_batch(
        self,
        url: str,
        directory: str,
        batch: list[RawEntry],
        fetch_meta: MetadataFetcher,
    ) -> list[Entry]:
        """Resolve and store every entry of ``batch``, then report the first failure."""
        results = await asyncio.gather(
            *(
                self._aresolve_entry(url, directory, name, entry_type, fetch_meta)
                for name, entry_type in batch
            ),
            return_exceptions=True,
        )
        entries: list[Entry] = []
        for (name, _), result in zip(batch, results, strict=True):
            if isinstance(result, OSError):
                raise ListingError.from_os_error(join(directory, name), result) from result
            if isinstance(result, ListingError):
                raise result
            if isinstance(result, DirbufError):
                raise ListingError(url, str(result)) from result
            if isinstance(result, BaseException):
                raise result
            entries.append(result)
        return entries

    async def _aresolve_entry(
        self,
        url: str,
        directory: str,
        name: str,
        entry_type: EntryType,
        fetch_meta: MetadataFetcher,
    ) -> Entry:
        entry = self._cache.create_entry(url, name, entry_type)
        await fetch_meta(url, entry)
        if entry_type == EntryType.LINK:
            link, link_stat = await read_link_data(join(directory, name))
            entry.meta["link"] = link
            entry.meta["link_stat"] = link_stat
        self._cache.store_entry(url, entry)
        return entry


__all__ = ["DirectoryLister"]
