"""Domain models for dirbuf."""

from dirbuf.kernel.domain.actions import (
    Action,
    ChangeAction,
    CopyAction,
    CreateAction,
    DeleteAction,
    MoveAction,
    action_url,
    parse_action,
    parse_actions,
)
from dirbuf.kernel.domain.entry import PERMISSION_MASK, Entry, EntryType, Stat

__all__ = [
    "PERMISSION_MASK",
    "Action",
    "ChangeAction",
    "CopyAction",
    "CreateAction",
    "DeleteAction",
    "Entry",
    "EntryType",
    "MoveAction",
    "Stat",
    "action_url",
    "parse_action",
    "parse_actions",
]
