"""Domain models for directory entries.

An :class:`Entry` is one filesystem object inside a listing. Its ``meta``
mapping starts empty and is filled as metadata fetches resolve
(``stat``, ``link``, ``link_stat``).
"""

from __future__ import annotations

import os
import stat as stat_module
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Only the low 12 mode bits are user-editable permission bits
PERMISSION_MASK = (1 << 12) - 1


class EntryType(StrEnum):
    """Type of a directory entry."""

    FILE = "file"
    DIRECTORY = "directory"
    LINK = "link"


class Stat(BaseModel):
    """OS-level metadata snapshot of a path.

    Attributes
    ----------
    size : int
        Size in bytes.
    mode : int
        Full numeric mode; the low 12 bits are permission bits.
    uid, gid : int
        Owner user and group ids.
    mtime, atime, ctime : float
        Seconds since the epoch, with sub-second precision.
    birthtime : float | None
        Creation time, or None where the OS does not report one.
    """

    model_config = ConfigDict(frozen=True)

    size: int = Field(ge=0)
    mode: int
    uid: int = 0
    gid: int = 0
    mtime: float = 0.0
    atime: float = 0.0
    ctime: float = 0.0
    birthtime: float | None = None

    @classmethod
    def from_os(cls, st: os.stat_result) -> Stat:
        """Build from an ``os.stat_result``."""
        return cls(
            size=st.st_size,
            mode=st.st_mode,
            uid=st.st_uid,
            gid=st.st_gid,
            mtime=st.st_mtime,
            atime=st.st_atime,
            ctime=st.st_ctime,
            birthtime=getattr(st, "st_birthtime", None),
        )

    @property
    def permissions(self) -> int:
        """The low 12 bits of ``mode``."""
        return self.mode & PERMISSION_MASK

    @property
    def is_dir(self) -> bool:
        return stat_module.S_ISDIR(self.mode)


class Entry(BaseModel):
    """A single entry in a directory listing.

    ``id`` is assigned by the entry cache and is stable for the same
    parent and name across refreshes.
    """

    id: int
    name: str
    type: EntryType
    meta: dict[str, Any] = Field(default_factory=dict)

    @property
    def stat(self) -> Stat | None:
        return self.meta.get("stat")

    @property
    def link(self) -> str | None:
        return self.meta.get("link")

    @property
    def link_stat(self) -> Stat | None:
        return self.meta.get("link_stat")


__all__ = ["PERMISSION_MASK", "Entry", "EntryType", "Stat"]
