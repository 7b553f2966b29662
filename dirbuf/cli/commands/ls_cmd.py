"""Listing commands for the dirbuf CLI."""

import asyncio

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from dirbuf.cli.utils import build_adapter, get_config, print_output, to_url
from dirbuf.drivers.files import FilesAdapter
from dirbuf.kernel.domain.entry import Entry, EntryType
from dirbuf.kernel.exceptions import DirbufError

console = Console()


def _display_name(entry: Entry) -> str:
    if entry.type == EntryType.DIRECTORY:
        return f"{entry.name}/"
    if entry.type == EntryType.LINK and entry.link is not None:
        return f"{entry.name} -> {entry.link}"
    return entry.name


def _sort_key(entry: Entry) -> tuple[bool, str]:
    return (entry.type != EntryType.DIRECTORY, entry.name)


async def _alist(adapter: FilesAdapter, url: str, columns: list[str]) -> tuple[str, list[Entry]]:
    url = await adapter.anormalize_url(url)
    entries = await adapter.alist_all(url, columns)
    return url, sorted(entries, key=_sort_key)


def ls(
    ctx: typer.Context,
    path: str = typer.Argument(".", help="Directory path or url to list"),
    column: list[str] | None = typer.Option(
        None, "--column", "-c", help="Column to show (repeatable); defaults to the configured set"
    ),
) -> None:
    """List a directory."""
    config = get_config(ctx)
    _, adapter = build_adapter(config)

    columns = list(column) if column else list(config.files.columns)
    unknown = [name for name in columns if adapter.get_column(name) is None]
    if unknown:
        console.print(
            f"[red]Unknown column(s):[/red] {', '.join(unknown)}. "
            f"Available: {', '.join(adapter.columns())}"
        )
        raise typer.Exit(2)

    try:
        url, entries = asyncio.run(_alist(adapter, to_url(path, config.scheme), columns))
    except DirbufError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e

    rows = [
        [adapter.get_column(name).render(entry) for name in columns]  # type: ignore[union-attr]
        for entry in entries
    ]

    if ctx.obj and ctx.obj.get("output_format") == "json":
        print_output(
            [
                {"name": entry.name, "type": str(entry.type), **dict(zip(columns, row, strict=True))}
                for entry, row in zip(entries, rows, strict=True)
            ],
            ctx,
        )
        return

    table = Table(title=adapter.url_to_buffer_name(url))
    for name in columns:
        table.add_column(name, style="cyan", justify="right" if name == "size" else "left")
    table.add_column("name", style="bold")
    for entry, row in zip(entries, rows, strict=True):
        table.add_row(*row, escape(_display_name(entry)))
    console.print(table)


def normalize(
    ctx: typer.Context,
    path: str = typer.Argument(".", help="Directory path or url"),
) -> None:
    """Print the canonical url of a directory."""
    config = get_config(ctx)
    _, adapter = build_adapter(config)
    url = asyncio.run(adapter.anormalize_url(to_url(path, config.scheme)))
    print_output(url, ctx)
