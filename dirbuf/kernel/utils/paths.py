"""Translation between logical (posix-style) paths and OS paths.

Logical paths always use ``/``. On Windows a drive path ``C:\\Users`` is
written logically as ``/C/Users``.
"""

from __future__ import annotations

import os
import re

from dirbuf.kernel.domain.entry import EntryType
from dirbuf.kernel.utils.urls import addslash

IS_WINDOWS = os.name == "nt"
SEP = "\\" if IS_WINDOWS else "/"

_WINDOWS_ABS = re.compile(r"^[a-zA-Z]:\\")
_POSIX_DRIVE = re.compile(r"^/([a-zA-Z])/?")
_OS_DRIVE = re.compile(r"^([a-zA-Z]):")


def is_absolute(path: str) -> bool:
    if IS_WINDOWS:
        return bool(_WINDOWS_ABS.match(path))
    return path.startswith("/")


def join(directory: str, name: str) -> str:
    """Join with the OS separator without normalizing either side."""
    if directory.endswith(SEP):
        return directory + name
    return directory + SEP + name


def dirname(path: str) -> str:
    return os.path.dirname(path.rstrip(SEP)) or SEP


def posix_to_os_path(path: str) -> str:
    if IS_WINDOWS:
        if _POSIX_DRIVE.match(path):
            path = _POSIX_DRIVE.sub(lambda m: f"{m.group(1)}:\\", path, count=1)
        return path.replace("/", "\\")
    return path


def os_to_posix_path(path: str) -> str:
    if IS_WINDOWS:
        path = _OS_DRIVE.sub(lambda m: f"/{m.group(1)}", path, count=1)
        return path.replace("\\", "/")
    return path


def is_subpath(root: str, candidate: str) -> bool:
    """True when ``candidate`` is ``root`` or lies beneath it."""
    if not candidate.startswith(root):
        return False
    if len(candidate) == len(root) or root.endswith(SEP):
        return True
    return candidate[len(root)] == SEP


def shorten_path(path: str, relative_to: str | None = None) -> str:
    """Abbreviate an OS path for display.

    Returns the path relative to ``relative_to`` (default: cwd) when it lies
    beneath it, or ``~``-collapsed when it lies under the home directory,
    whichever is shorter; otherwise the path unchanged.
    """
    if relative_to is None:
        relative_to = os.getcwd()
    relpath: str | None = None
    if is_subpath(relative_to, path):
        start = len(relative_to) if relative_to.endswith(SEP) else len(relative_to) + 1
        relpath = path[start:] or "."

    home_dir = os.path.expanduser("~")
    if home_dir != "~" and is_subpath(home_dir, path):
        homepath = "~" + path[len(home_dir) :]
        if relpath is None or len(homepath) < len(relpath):
            return homepath
    return relpath if relpath is not None else path


def to_short_os_path(path: str, entry_type: EntryType | str | None = None) -> str:
    """Render a logical path for previews; directories get a trailing separator."""
    shortpath = shorten_path(posix_to_os_path(path))
    if entry_type == EntryType.DIRECTORY:
        shortpath = addslash(shortpath, SEP)
    return shortpath


__all__ = [
    "IS_WINDOWS",
    "SEP",
    "dirname",
    "is_absolute",
    "is_subpath",
    "join",
    "os_to_posix_path",
    "posix_to_os_path",
    "shorten_path",
    "to_short_os_path",
]
