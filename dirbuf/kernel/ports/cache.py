"""Entry cache port: per-directory store of listed entries.

Listings bracket their writes with :meth:`EntryCache.begin_update` and
:meth:`EntryCache.end_update`. Every ``store_entry`` for a directory happens
between the two, and ``end_update`` is the last signal a listing sends for
that directory whether it succeeded or failed.

Drivers
-------
- ``MemoryEntryCache``: in-process dictionaries.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from dirbuf.kernel.domain.entry import Entry, EntryType


@runtime_checkable
class EntryCache(Protocol):
    """Stores enumerated entries keyed by their parent directory url."""

    @abstractmethod
    def begin_update(self, url: str) -> None:
        """Mark the start of a listing of ``url``."""
        ...

    @abstractmethod
    def end_update(self, url: str) -> None:
        """Mark the end of a listing of ``url`` (success or failure)."""
        ...

    @abstractmethod
    def create_entry(self, url: str, name: str, entry_type: EntryType) -> Entry:
        """Create an entry for ``name`` under ``url`` without storing it.

        Args
        ----
            url: Parent directory url.
            name: Base name of the entry.
            entry_type: File, directory or link.

        Returns
        -------
            A fresh entry with an empty ``meta`` mapping.
        """
        ...

    @abstractmethod
    def store_entry(self, url: str, entry: Entry) -> None:
        """Store a fully populated entry under ``url``."""
        ...


__all__ = ["EntryCache"]
