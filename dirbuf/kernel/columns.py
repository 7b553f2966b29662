"""Builds metadata fetchers from requested column names.

Columns declare the meta fields they depend on; several columns may share a
field (all stat-based columns share ``stat``), which is then fetched once
per entry.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import TYPE_CHECKING

from dirbuf.kernel.ports.columns import split_column_def

if TYPE_CHECKING:
    from dirbuf.kernel.domain.entry import Entry
    from dirbuf.kernel.ports.adapter import Adapter
    from dirbuf.kernel.ports.columns import ColumnDef, MetadataFetcher, MetaFieldFetcher


async def _fetch_nothing(parent_url: str, entry: Entry) -> None:
    return None


def collect_meta_fields(
    adapter: Adapter, column_defs: Sequence[ColumnDef]
) -> dict[str, MetaFieldFetcher]:
    """Merge the distinct meta fields of the requested columns.

    Column names the adapter doesn't know are ignored.
    """
    fields: dict[str, MetaFieldFetcher] = {}
    for column_def in column_defs:
        name, _ = split_column_def(column_def)
        column = adapter.get_column(name)
        if column is None:
            continue
        for key, fetcher in column.meta_fields.items():
            fields.setdefault(key, fetcher)
    return fields


def get_metadata_fetcher(adapter: Adapter, column_defs: Sequence[ColumnDef]) -> MetadataFetcher:
    """Return an async function filling ``entry.meta`` for the requested columns.

    The returned fetcher runs every field fetch concurrently, waits for all
    of them, then raises the first failure (in field order) if any failed.
    """
    fields = collect_meta_fields(adapter, column_defs)
    if not fields:
        return _fetch_nothing

    async def fetch_meta(parent_url: str, entry: Entry) -> None:
        values = await asyncio.gather(
            *(fetcher(parent_url, entry) for fetcher in fields.values()),
            return_exceptions=True,
        )
        for key, value in zip(fields, values, strict=True):
            if isinstance(value, BaseException):
                raise value
            entry.meta[key] = value

    return fetch_meta


__all__ = ["collect_meta_fields", "get_metadata_fetcher"]
