"""dirbuf: edit a directory as a list of lines.

Each line of a listing is a filesystem entry; edits to the listing become
create, delete, move, copy and permission-change actions that an adapter
previews and applies.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("dirbuf")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"  # Fallback for source checkouts

from dirbuf.drivers.cache import MemoryEntryCache
from dirbuf.drivers.files import FilesAdapter
from dirbuf.drivers.registry import AdapterRegistry
from dirbuf.kernel.domain import (
    ChangeAction,
    CopyAction,
    CreateAction,
    DeleteAction,
    Entry,
    EntryType,
    MoveAction,
    Stat,
)
from dirbuf.kernel.exceptions import DirbufError, FilesystemError, ListingError
from dirbuf.kernel.mutator import aperform_actions, render_actions

__all__ = [
    "AdapterRegistry",
    "ChangeAction",
    "CopyAction",
    "CreateAction",
    "DeleteAction",
    "DirbufError",
    "Entry",
    "EntryType",
    "FilesAdapter",
    "FilesystemError",
    "ListingError",
    "MemoryEntryCache",
    "MoveAction",
    "Stat",
    "__version__",
    "aperform_actions",
    "render_actions",
]
