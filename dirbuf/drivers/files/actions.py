"""Action rendering and execution for the files adapter.

``render_action`` produces the one-line preview shown before mutations are
applied; ``aperform_action`` applies one action to the real filesystem.
Move and copy are only valid between urls owned by the same adapter.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager, suppress
from typing import TYPE_CHECKING

from dirbuf.drivers.files import fsops
from dirbuf.kernel.domain.actions import (
    Action,
    ChangeAction,
    CopyAction,
    CreateAction,
    DeleteAction,
    MoveAction,
)
from dirbuf.kernel.domain.entry import EntryType
from dirbuf.kernel.exceptions import AdapterInvariantError, CrossAdapterError, FilesystemError
from dirbuf.kernel.logging import get_logger
from dirbuf.kernel.ports.columns import EditableColumn
from dirbuf.kernel.utils.paths import posix_to_os_path, to_short_os_path
from dirbuf.kernel.utils.urls import parse_url

if TYPE_CHECKING:
    from dirbuf.drivers.files.adapter import FilesAdapter

logger = get_logger(__name__)


def _os_path(url: str) -> str:
    _, path = parse_url(url)
    return posix_to_os_path(path)


def _short_path(url: str, entry_type: EntryType) -> str:
    _, path = parse_url(url)
    return to_short_os_path(path, entry_type)


@contextmanager
def _reported(path: str) -> Iterator[None]:
    """Translate ``OSError`` raised inside the block into ``FilesystemError``."""
    try:
        yield
    except OSError as e:
        raise FilesystemError.from_os_error(path, e) from e


def _editable_column(adapter: FilesAdapter, name: str) -> EditableColumn | None:
    column = adapter.get_column(name)
    if isinstance(column, EditableColumn):
        return column
    return None


def render_action(adapter: FilesAdapter, action: Action) -> str:
    """One-line preview of ``action``.

    Raises
    ------
    AdapterInvariantError
        For a cross-adapter move/copy, a change to a column that isn't
        editable, or an unknown action; upstream checks exclude all three.
    """
    match action:
        case CreateAction():
            line = f"CREATE {_short_path(action.url, action.entry_type)}"
            if action.link:
                line += f" -> {posix_to_os_path(action.link)}"
            return line
        case DeleteAction():
            return f"DELETE {_short_path(action.url, action.entry_type)}"
        case MoveAction() | CopyAction():
            if not adapter.owns(action.dest_url):
                raise AdapterInvariantError(
                    "files adapter doesn't support cross-adapter move/copy "
                    f"({action.src_url} -> {action.dest_url})"
                )
            return (
                f"  {action.type.upper()} {_short_path(action.src_url, action.entry_type)}"
                f" -> {_short_path(action.dest_url, action.entry_type)}"
            )
        case ChangeAction():
            column = _editable_column(adapter, action.column)
            if column is None:
                raise AdapterInvariantError(f"Column '{action.column}' is not editable")
            return column.render_action(action)
        case _:
            raise AdapterInvariantError(f"Bad action type: {getattr(action, 'type', action)!r}")


async def aperform_action(adapter: FilesAdapter, action: Action) -> None:
    """Apply ``action`` to the filesystem.

    Raises
    ------
    FilesystemError
        If the action fails, is cross-adapter, or is not recognized.
    """
    logger.debug("Performing {type} action", type=getattr(action, "type", "?"))
    match action:
        case CreateAction():
            await _acreate(action)
        case DeleteAction():
            path = _os_path(action.url)
            with _reported(path):
                await fsops.recursive_delete(action.entry_type, path)
        case MoveAction() | CopyAction():
            if not adapter.owns(action.dest_url):
                raise CrossAdapterError(action.src_url, action.dest_url, action.type)
            src_path = _os_path(action.src_url)
            dest_path = _os_path(action.dest_url)
            transfer = fsops.recursive_move if action.type == "move" else fsops.recursive_copy
            with _reported(src_path):
                await transfer(action.entry_type, src_path, dest_path)
        case ChangeAction():
            column = _editable_column(adapter, action.column)
            if column is None:
                raise FilesystemError(action.url, f"column '{action.column}' is not editable")
            await column.aperform_action(action)
        case _:
            raise FilesystemError(
                str(getattr(action, "url", "")),
                f"Bad action type: {getattr(action, 'type', type(action).__name__)}",
            )


async def _acreate(action: CreateAction) -> None:
    path = _os_path(action.url)
    with _reported(path):
        if action.entry_type == EntryType.DIRECTORY:
            # Creating an existing directory is a no-op
            with suppress(FileExistsError):
                await fsops.mkdir(path, fsops.DIRECTORY_MODE)
        elif action.entry_type == EntryType.LINK and action.link:
            await fsops.symlink(posix_to_os_path(action.link), path)
        else:
            await fsops.touch(path)


__all__ = ["aperform_action", "render_action"]
