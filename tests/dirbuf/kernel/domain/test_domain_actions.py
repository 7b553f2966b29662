"""Tests for action models and parsing."""

from __future__ import annotations

import pytest

from dirbuf.kernel.domain.actions import (
    ChangeAction,
    CopyAction,
    CreateAction,
    DeleteAction,
    MoveAction,
    action_url,
    parse_action,
    parse_actions,
)
from dirbuf.kernel.domain.entry import EntryType
from dirbuf.kernel.exceptions import PermissionParseError, ValidationError


class TestParseAction:
    def test_parses_each_type(self) -> None:
        actions = parse_actions([
            {"type": "create", "url": "dirbuf:///a/", "entry_type": "directory"},
            {"type": "delete", "url": "dirbuf:///b"},
            {"type": "move", "src_url": "dirbuf:///c", "dest_url": "dirbuf:///d"},
            {"type": "copy", "src_url": "dirbuf:///e", "dest_url": "dirbuf:///f"},
            {"type": "change", "url": "dirbuf:///g", "column": "permissions", "value": 0o644},
        ])
        assert [type(a) for a in actions] == [
            CreateAction,
            DeleteAction,
            MoveAction,
            CopyAction,
            ChangeAction,
        ]
        assert actions[0].entry_type == EntryType.DIRECTORY
        assert actions[1].entry_type == EntryType.FILE

    def test_create_link(self) -> None:
        action = parse_action({
            "type": "create",
            "url": "dirbuf:///tmp/l",
            "entry_type": "link",
            "link": "target",
        })
        assert isinstance(action, CreateAction)
        assert action.link == "target"

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(ValidationError, match="action"):
            parse_action({"type": "rename", "url": "dirbuf:///x"})

    def test_missing_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            parse_action({"type": "move", "src_url": "dirbuf:///x"})

    def test_extra_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            parse_action({"type": "delete", "url": "dirbuf:///x", "force": True})


class TestChmod:
    def test_builds_permissions_change(self) -> None:
        action = ChangeAction.chmod("dirbuf:///x", 0o755)
        assert action.column == "permissions"
        assert action.value == 0o755

    @pytest.mark.parametrize("mode", [-1, 0o10000])
    def test_rejects_modes_outside_twelve_bits(self, mode: int) -> None:
        with pytest.raises(ValidationError, match="12 bits"):
            ChangeAction.chmod("dirbuf:///x", mode)


class TestPermissionValue:
    @staticmethod
    def _change(value) -> dict:
        return {"type": "change", "url": "dirbuf:///x", "column": "permissions", "value": value}

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("rw-r--r--", 0o644), ("0755", 0o755), ("-rwsr-xr-x", 0o4755), (0o600, 0o600)],
    )
    def test_accepts_symbolic_octal_and_int(self, value, expected: int) -> None:
        assert parse_action(self._change(value)).value == expected

    def test_malformed_string(self) -> None:
        with pytest.raises(PermissionParseError):
            parse_action(self._change("rwx"))

    @pytest.mark.parametrize("value", [70000, -1])
    def test_out_of_range_int(self, value: int) -> None:
        with pytest.raises(ValidationError, match="12 bits"):
            parse_action(self._change(value))

    @pytest.mark.parametrize("value", [None, True, 7.5, [0o644]])
    def test_non_integer_value(self, value) -> None:
        with pytest.raises(ValidationError, match="integer"):
            parse_action(self._change(value))

    def test_other_columns_keep_their_value(self) -> None:
        action = parse_action(
            {"type": "change", "url": "dirbuf:///x", "column": "owner", "value": "root"}
        )
        assert action.value == "root"


class TestActionUrl:
    def test_move_and_copy_use_source(self) -> None:
        assert action_url(MoveAction(src_url="dirbuf:///a", dest_url="ssh://b")) == "dirbuf:///a"
        assert action_url(CopyAction(src_url="dirbuf:///a", dest_url="ssh://b")) == "dirbuf:///a"

    def test_other_actions_use_url(self) -> None:
        assert action_url(DeleteAction(url="dirbuf:///a")) == "dirbuf:///a"
