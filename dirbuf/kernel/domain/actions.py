"""Domain models for filesystem mutations.

Actions are produced upstream from a diff of the edited listing and are
consumed one at a time by an adapter's renderer and executor. ``Action`` is
a discriminated union on ``type`` so renderers and executors can ``match``
on the concrete class.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator
from pydantic import ValidationError as PydanticValidationError

from dirbuf.kernel.domain.entry import PERMISSION_MASK, EntryType
from dirbuf.kernel.exceptions import ValidationError
from dirbuf.kernel.utils import permissions


class _BaseAction(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    entry_type: EntryType = EntryType.FILE


class CreateAction(_BaseAction):
    """Create a file, directory or symlink at ``url``."""

    type: Literal["create"] = "create"
    url: str
    link: str | None = None


class DeleteAction(_BaseAction):
    """Recursively delete ``url``."""

    type: Literal["delete"] = "delete"
    url: str


class MoveAction(_BaseAction):
    """Recursively move ``src_url`` to ``dest_url``."""

    type: Literal["move"] = "move"
    src_url: str
    dest_url: str


class CopyAction(_BaseAction):
    """Recursively copy ``src_url`` to ``dest_url``."""

    type: Literal["copy"] = "copy"
    src_url: str
    dest_url: str


class ChangeAction(_BaseAction):
    """Change the value of an editable ``column`` of ``url``.

    For ``column="permissions"`` the value is the new 12-bit mode.
    """

    type: Literal["change"] = "change"
    url: str
    column: str
    value: Any

    @model_validator(mode="before")
    @classmethod
    def _validate_permissions(cls, data: Any) -> Any:
        if not isinstance(data, Mapping) or data.get("column") != "permissions":
            return data
        value = data.get("value")
        if isinstance(value, str):
            value = permissions.parse_mode(value)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError("value", "mode must be an integer", value=value)
        if not 0 <= value <= PERMISSION_MASK:
            raise ValidationError("value", "mode must fit in 12 bits", value=value)
        return {**data, "value": value}

    @classmethod
    def chmod(cls, url: str, mode: int, entry_type: EntryType = EntryType.FILE) -> ChangeAction:
        """Shorthand for a permissions change."""
        return cls(url=url, column="permissions", value=mode, entry_type=entry_type)


Action = Annotated[
    CreateAction | DeleteAction | MoveAction | CopyAction | ChangeAction,
    Field(discriminator="type"),
]

_action_adapter: TypeAdapter[Action] = TypeAdapter(Action)


def parse_action(data: Mapping[str, Any]) -> Action:
    """Validate a plain mapping (e.g. loaded from YAML) into an action.

    Raises
    ------
    ValidationError
        If the mapping is not a known, well-formed action.
    """
    try:
        return _action_adapter.validate_python(dict(data))
    except PydanticValidationError as e:
        raise ValidationError("action", str(e).splitlines()[0], value=dict(data)) from e


def parse_actions(items: Iterable[Mapping[str, Any]]) -> list[Action]:
    return [parse_action(item) for item in items]


def action_url(action: Action) -> str:
    """The url that decides which adapter owns the action."""
    match action:
        case MoveAction() | CopyAction():
            return action.src_url
        case _:
            return action.url


__all__ = [
    "Action",
    "ChangeAction",
    "CopyAction",
    "CreateAction",
    "DeleteAction",
    "MoveAction",
    "action_url",
    "parse_action",
    "parse_actions",
]
