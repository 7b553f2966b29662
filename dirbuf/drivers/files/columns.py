"""Columns of the files adapter.

All columns here are backed by one ``stat`` meta field. ``permissions`` is
the only editable column; it is left out when the permissions capability is
off (e.g. on Windows).
"""

from __future__ import annotations

import re
import time
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from dirbuf.drivers.files import fsops
from dirbuf.kernel.domain.actions import ChangeAction
from dirbuf.kernel.domain.entry import Entry, EntryType, Stat
from dirbuf.kernel.exceptions import FilesystemError
from dirbuf.kernel.ports.columns import Column, MetaFieldFetcher
from dirbuf.kernel.utils import permissions
from dirbuf.kernel.utils.paths import join, posix_to_os_path, to_short_os_path
from dirbuf.kernel.utils.urls import parse_url

TIME_KEYS = ("ctime", "mtime", "atime", "birthtime")

_SIZE_PATTERN = re.compile(r"^(\d+\S*)\s+(.*)$", re.DOTALL)
_DEFAULT_TIME_PATTERN = r"\S+\s+\d+\s+\d\d:?\d\d"
_FORMAT_DIRECTIVE = re.compile(r"%.")


async def fetch_stat(parent_url: str, entry: Entry) -> Stat:
    """Stat ``entry`` inside the directory ``parent_url``.

    Follows symlinks; a link whose target is missing falls back to the
    link's own lstat.
    """
    _, path = parse_url(parent_url)
    entry_path = join(posix_to_os_path(path), entry.name)
    try:
        st = await fsops.stat(entry_path)
    except FileNotFoundError:
        if entry.type != EntryType.LINK:
            raise
        st = await fsops.stat(entry_path, follow_symlinks=False)
    return Stat.from_os(st)


STAT_META_FIELDS: Mapping[str, MetaFieldFetcher] = {"stat": fetch_stat}


def format_size(size: int) -> str:
    if size >= 1e9:
        return f"{size / 1e9:.1f}G"
    if size >= 1e6:
        return f"{size / 1e6:.1f}M"
    if size >= 1e3:
        return f"{size / 1e3:.1f}k"
    return f"{size:d}"


class SizeColumn:
    """Human-readable size in bytes (``999``, ``1.5k``, ``2.5M``, ``3.2G``)."""

    meta_fields = STAT_META_FIELDS

    def render(self, entry: Entry, conf: Mapping[str, Any] | None = None) -> str:
        if entry.stat is None:
            return ""
        return format_size(entry.stat.size)

    def parse(self, line: str, conf: Mapping[str, Any] | None = None) -> tuple[str, str] | None:
        match = _SIZE_PATTERN.match(line)
        if match is None:
            return None
        return match.group(1), match.group(2)


class PermissionsColumn:
    """Editable ``rwxr-xr-x`` column over the low 12 mode bits."""

    meta_fields = STAT_META_FIELDS

    def render(self, entry: Entry, conf: Mapping[str, Any] | None = None) -> str:
        if entry.stat is None:
            return ""
        return permissions.mode_to_str(entry.stat.mode)

    def parse(self, line: str, conf: Mapping[str, Any] | None = None) -> tuple[int, str] | None:
        return permissions.parse(line)

    def compare(self, entry: Entry, parsed_value: Any) -> bool:
        if parsed_value is None or entry.stat is None:
            return False
        return permissions.has_changed(entry.stat.mode, parsed_value)

    def render_action(self, action: ChangeAction) -> str:
        _, path = parse_url(action.url)
        return (
            f"CHMOD {permissions.mode_to_octal_str(action.value)} "
            f"{to_short_os_path(path, action.entry_type)}"
        )

    async def aperform_action(self, action: ChangeAction) -> None:
        _, path = parse_url(action.url)
        path = posix_to_os_path(path)
        try:
            st = await fsops.stat(path)
            mode = permissions.apply_permissions(st.st_mode, action.value)
            await fsops.chmod(path, mode)
        except OSError as e:
            raise FilesystemError.from_os_error(path, e) from e
        except (TypeError, ValueError) as e:
            raise FilesystemError(path, f"invalid mode {action.value!r}") from e


def _time_pattern(fmt: str | None) -> re.Pattern[str]:
    if fmt:
        literals = _FORMAT_DIRECTIVE.split(fmt)
        pattern = r"\S+".join(re.escape(literal) for literal in literals)
    else:
        pattern = _DEFAULT_TIME_PATTERN
    return re.compile(rf"^({pattern})\s+(.+)$", re.DOTALL)


class TimeColumn:
    """One of the stat timestamps, rendered like ``ls -l``.

    ``conf["format"]`` (strftime) overrides the default of ``%b %d %H:%M``
    for the current year and ``%b %d %Y`` otherwise.
    """

    meta_fields = STAT_META_FIELDS

    def __init__(self, key: str, default_format: str | None = None) -> None:
        if key not in TIME_KEYS:
            raise ValueError(f"Unknown time column: {key!r}")
        self.key = key
        self.default_format = default_format

    def _format(self, conf: Mapping[str, Any] | None) -> str | None:
        return (conf or {}).get("format") or self.default_format

    def render(self, entry: Entry, conf: Mapping[str, Any] | None = None) -> str:
        if entry.stat is None:
            return ""
        seconds = getattr(entry.stat, self.key)
        if seconds is None:
            return ""
        local = time.localtime(seconds)
        if fmt := self._format(conf):
            return time.strftime(fmt, local)
        if local.tm_year != datetime.now().year:
            return time.strftime("%b %d %Y", local)
        return time.strftime("%b %d %H:%M", local)

    def parse(self, line: str, conf: Mapping[str, Any] | None = None) -> tuple[str, str] | None:
        match = _time_pattern(self._format(conf)).match(line)
        if match is None:
            return None
        return match.group(1), match.group(2)


def build_file_columns(
    *, permissions_enabled: bool, time_format: str | None = None
) -> dict[str, Column]:
    """Column table of the files adapter."""
    columns: dict[str, Column] = {"size": SizeColumn()}
    if permissions_enabled:
        columns["permissions"] = PermissionsColumn()
    for key in TIME_KEYS:
        columns[key] = TimeColumn(key, time_format)
    return columns


__all__ = [
    "STAT_META_FIELDS",
    "TIME_KEYS",
    "PermissionsColumn",
    "SizeColumn",
    "TimeColumn",
    "build_file_columns",
    "fetch_stat",
    "format_size",
]
