"""Symlink resolution for listed entries."""

from __future__ import annotations

from dirbuf.drivers.files import fsops
from dirbuf.kernel.domain.entry import Stat
from dirbuf.kernel.utils.paths import dirname, is_absolute, join


async def read_link_data(path: str) -> tuple[str, Stat | None]:
    """Read the target of the symlink at ``path`` and stat what it points to.

    Relative targets are resolved against the directory containing the link.
    A target that can't be stat'ed (dangling link, permission denied) yields
    ``(target, None)``; only failing to read the link itself raises.

    Raises
    ------
    OSError
        If the link can't be read.
    """
    link = await fsops.readlink(path)
    stat_path = link if is_absolute(link) else join(dirname(path), link)
    try:
        link_stat = Stat.from_os(await fsops.stat(stat_path))
    except OSError:
        return link, None
    return link, link_stat


__all__ = ["read_link_data"]
