"""Column port: how an adapter exposes per-entry metadata.

A column names the metadata fields it needs (``meta_fields``) and knows how
to render and parse its value. Editable columns additionally compare a
parsed value against an entry and render/perform the resulting
``ChangeAction``.
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Awaitable, Callable, Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from dirbuf.kernel.domain.actions import ChangeAction
    from dirbuf.kernel.domain.entry import Entry

# (parent_url, entry) -> value stored in entry.meta[field]
MetaFieldFetcher = Callable[[str, "Entry"], Awaitable[Any]]

# (parent_url, entry) -> None; fills every requested meta field on entry
MetadataFetcher = Callable[[str, "Entry"], Awaitable[None]]

# A column is requested by name, optionally with render/parse options
ColumnDef = str | tuple[str, Mapping[str, Any]]


@runtime_checkable
class Column(Protocol):
    """A displayable, parseable column of a directory listing."""

    meta_fields: Mapping[str, MetaFieldFetcher]

    @abstractmethod
    def render(self, entry: Entry, conf: Mapping[str, Any] | None = None) -> str:
        """Render the column value of ``entry``; empty when unknown."""
        ...

    @abstractmethod
    def parse(self, line: str, conf: Mapping[str, Any] | None = None) -> tuple[Any, str] | None:
        """Parse the column value off the start of ``line``.

        Returns
        -------
            ``(value, rest_of_line)``, or None when the line doesn't match.
        """
        ...


@runtime_checkable
class EditableColumn(Column, Protocol):
    """A column whose value can be changed by editing the listing."""

    @abstractmethod
    def compare(self, entry: Entry, parsed_value: Any) -> bool:
        """True when ``parsed_value`` differs from the entry's current value."""
        ...

    @abstractmethod
    def render_action(self, action: ChangeAction) -> str:
        """One-line preview of a change to this column."""
        ...

    @abstractmethod
    async def aperform_action(self, action: ChangeAction) -> None:
        """Apply a change to this column, raising ``FilesystemError`` on failure."""
        ...


def split_column_def(column_def: ColumnDef) -> tuple[str, Mapping[str, Any]]:
    """Normalize a column def to ``(name, options)``."""
    if isinstance(column_def, str):
        return column_def, {}
    name, options = column_def
    return name, options or {}


__all__ = [
    "Column",
    "ColumnDef",
    "EditableColumn",
    "MetaFieldFetcher",
    "MetadataFetcher",
    "split_column_def",
]
