"""Adapter port: the backend responsible for one url scheme.

An adapter lists directories into an :class:`~dirbuf.kernel.ports.cache.EntryCache`
and turns actions into previews and real mutations. The registry maps
schemes to adapters; move/copy are only valid between urls owned by the
same adapter.

Drivers
-------
- ``FilesAdapter``: the local filesystem.
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import AsyncIterator, Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from dirbuf.kernel.domain.actions import Action
    from dirbuf.kernel.domain.entry import Entry
    from dirbuf.kernel.ports.columns import Column, ColumnDef


@runtime_checkable
class Adapter(Protocol):
    """Backend for a url scheme."""

    name: str

    @abstractmethod
    def get_column(self, name: str) -> Column | None:
        """Return the column called ``name``, or None if unsupported."""
        ...

    @abstractmethod
    async def anormalize_url(self, url: str) -> str:
        """Resolve ``url`` to its canonical directory form."""
        ...

    @abstractmethod
    def alist(self, url: str, column_defs: Sequence[ColumnDef]) -> AsyncIterator[list[Entry]]:
        """List the directory at ``url``, yielding each stored batch.

        Raises
        ------
        ListingError
            On any terminal failure; a missing directory is an empty listing.
        """
        ...

    @abstractmethod
    async def ais_modifiable(self, url: str) -> bool:
        """True when the directory at ``url`` may be edited."""
        ...

    @abstractmethod
    def render_action(self, action: Action) -> str:
        """One-line preview of ``action``."""
        ...

    @abstractmethod
    async def aperform_action(self, action: Action) -> None:
        """Apply ``action``, raising ``FilesystemError`` on failure."""
        ...


@runtime_checkable
class AdapterLookup(Protocol):
    """Resolves the adapter owning a url."""

    @abstractmethod
    def get_adapter_by_scheme(self, url: str) -> Adapter | None:
        """Return the adapter for ``url``'s scheme, or None."""
        ...


__all__ = ["Adapter", "AdapterLookup"]
