"""In-process entry cache.

Entries are stored per parent directory url. A listing writes into a
pending generation opened by ``begin_update``; ``end_update`` publishes it,
replacing the previous listing of that directory. Entries stored before a
failed listing still get published, so a failed refresh keeps whatever was
read before the fault.

Example
-------
.. code-block:: python

    cache = MemoryEntryCache()
    adapter = FilesAdapter(cache=cache)
    await adapter.alist_all("dirbuf:///tmp/", ["size"])
    cache.list_url("dirbuf:///tmp/")
"""

from __future__ import annotations

import itertools

from dirbuf.kernel.domain.entry import Entry, EntryType
from dirbuf.kernel.exceptions import ValidationError
from dirbuf.kernel.logging import get_logger
from dirbuf.kernel.utils.urls import addslash

logger = get_logger(__name__)


class MemoryEntryCache:
    """Dictionary-backed implementation of the EntryCache port.

    Entry ids are stable per (parent url, name) for the lifetime of the
    cache.
    """

    def __init__(self) -> None:
        self._next_id = itertools.count(1)
        self._ids: dict[tuple[str, str], int] = {}
        self._entries_by_id: dict[int, Entry] = {}
        self._parent_by_id: dict[int, str] = {}
        self._directories: dict[str, dict[str, Entry]] = {}
        self._pending: dict[str, dict[str, Entry]] = {}

    def begin_update(self, url: str) -> None:
        url = addslash(url)
        if url in self._pending:
            raise ValidationError("url", "an update is already in progress", value=url)
        self._pending[url] = {}

    def end_update(self, url: str) -> None:
        url = addslash(url)
        pending = self._pending.pop(url, None)
        if pending is None:
            raise ValidationError("url", "no update in progress", value=url)
        self._directories[url] = pending
        logger.debug("Published {count} entries for {url}", count=len(pending), url=url)

    def create_entry(self, url: str, name: str, entry_type: EntryType) -> Entry:
        key = (addslash(url), name)
        entry_id = self._ids.get(key)
        if entry_id is None:
            entry_id = next(self._next_id)
            self._ids[key] = entry_id
        return Entry(id=entry_id, name=name, type=entry_type)

    def store_entry(self, url: str, entry: Entry) -> None:
        url = addslash(url)
        target = self._pending.get(url)
        if target is None:
            target = self._directories.setdefault(url, {})
        target[entry.name] = entry
        self._entries_by_id[entry.id] = entry
        self._parent_by_id[entry.id] = url

    # --- Queries ---

    def list_url(self, url: str) -> dict[str, Entry]:
        """Return the published entries of ``url`` by name (a copy)."""
        return dict(self._directories.get(addslash(url), {}))

    def get_entry_by_id(self, entry_id: int) -> Entry | None:
        return self._entries_by_id.get(entry_id)

    def get_parent_url(self, entry_id: int) -> str | None:
        return self._parent_by_id.get(entry_id)

    def is_updating(self, url: str) -> bool:
        return addslash(url) in self._pending

    def clear(self) -> None:
        self._directories.clear()
        self._pending.clear()
        self._entries_by_id.clear()
        self._parent_by_id.clear()


__all__ = ["MemoryEntryCache"]
