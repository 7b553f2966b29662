"""Port interfaces for dirbuf."""

from dirbuf.kernel.ports.adapter import Adapter, AdapterLookup
from dirbuf.kernel.ports.cache import EntryCache
from dirbuf.kernel.ports.columns import (
    Column,
    ColumnDef,
    EditableColumn,
    MetadataFetcher,
    MetaFieldFetcher,
    split_column_def,
)

__all__ = [
    "Adapter",
    "AdapterLookup",
    "Column",
    "ColumnDef",
    "EditableColumn",
    "EntryCache",
    "MetaFieldFetcher",
    "MetadataFetcher",
    "split_column_def",
]
