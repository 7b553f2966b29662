"""Awaitable filesystem primitives for the files adapter.

Every call runs the blocking syscall on the event loop's executor through
``aiofiles``. Calls aiofiles doesn't provide are wrapped with
:func:`aiofiles.os.wrap`. All functions raise ``OSError``; callers
translate it into dirbuf errors.
"""

from __future__ import annotations

import errno
import itertools
import os
import shutil
from collections.abc import Iterator

import aiofiles
import aiofiles.os
import aiofiles.ospath
from aiofiles.os import wrap

from dirbuf.kernel.domain.entry import EntryType
from dirbuf.kernel.utils.paths import IS_WINDOWS

DIRECTORY_MODE = 0o755

# Open os.scandir() iterator
DirHandle = Iterator[os.DirEntry[str]]

# Raw directory entry as read from the OS
RawEntry = tuple[str, EntryType]


def _entry_type(dirent: os.DirEntry[str]) -> EntryType:
    if dirent.is_symlink():
        return EntryType.LINK
    if dirent.is_dir(follow_symlinks=False):
        return EntryType.DIRECTORY
    return EntryType.FILE


def _read_batch_sync(handle: DirHandle, size: int) -> list[RawEntry]:
    return [(dirent.name, _entry_type(dirent)) for dirent in itertools.islice(handle, size)]


def _close_sync(handle: DirHandle) -> None:
    handle.close()  # type: ignore[attr-defined]


read_batch = wrap(_read_batch_sync)
close_dir = wrap(_close_sync)
chmod = wrap(os.chmod)
realpath = wrap(os.path.realpath)
lexists = wrap(os.path.lexists)
_rmtree = wrap(shutil.rmtree)
_copytree = wrap(shutil.copytree)
_copy2 = wrap(shutil.copy2)


async def open_dir(path: str) -> DirHandle:
    return await aiofiles.os.scandir(path)


async def stat(path: str, *, follow_symlinks: bool = True) -> os.stat_result:
    return await aiofiles.os.stat(path, follow_symlinks=follow_symlinks)


async def readlink(path: str) -> str:
    return await aiofiles.os.readlink(path)


async def mkdir(path: str, mode: int = DIRECTORY_MODE) -> None:
    await aiofiles.os.mkdir(path, mode)


async def symlink(target: str, path: str) -> None:
    # Windows needs to know up front whether the link points at a directory
    target_is_directory = IS_WINDOWS and await aiofiles.ospath.isdir(target)
    await aiofiles.os.symlink(target, path, target_is_directory=target_is_directory)


async def touch(path: str) -> None:
    """Create ``path`` as an empty file if it doesn't exist."""
    async with aiofiles.open(path, "a"):
        pass


async def recursive_delete(entry_type: EntryType, path: str) -> None:
    if entry_type == EntryType.DIRECTORY:
        await _rmtree(path)
    else:
        await aiofiles.os.remove(path)


async def recursive_copy(entry_type: EntryType, src: str, dest: str) -> None:
    """Copy ``src`` to ``dest``; refuses to overwrite an existing ``dest``."""
    if await lexists(dest):
        raise FileExistsError(errno.EEXIST, os.strerror(errno.EEXIST), dest)
    if entry_type == EntryType.DIRECTORY:
        await _copytree(src, dest, symlinks=True)
    elif entry_type == EntryType.LINK:
        await aiofiles.os.symlink(await readlink(src), dest)
    else:
        await _copy2(src, dest)


async def recursive_move(entry_type: EntryType, src: str, dest: str) -> None:
    """Rename ``src`` to ``dest``, copying then deleting across devices."""
    try:
        await aiofiles.os.rename(src, dest)
    except OSError as e:
        if e.errno != errno.EXDEV:
            raise
        await recursive_copy(entry_type, src, dest)
        await recursive_delete(entry_type, src)
