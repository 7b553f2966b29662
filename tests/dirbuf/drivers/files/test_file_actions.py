"""Tests for rendering and performing files adapter actions."""

from __future__ import annotations

import os
import stat as stat_module

import pytest

from dirbuf.drivers.cache import MemoryEntryCache
from dirbuf.drivers.files import FilesAdapter
from dirbuf.drivers.registry import AdapterRegistry
from dirbuf.kernel.domain.actions import (
    ChangeAction,
    CopyAction,
    CreateAction,
    DeleteAction,
    MoveAction,
)
from dirbuf.kernel.domain.entry import EntryType
from dirbuf.kernel.exceptions import (
    AdapterInvariantError,
    CrossAdapterError,
    FilesystemError,
)
from dirbuf.kernel.utils.paths import IS_WINDOWS

pytestmark = pytest.mark.skipif(IS_WINDOWS, reason="POSIX paths in rendered previews")


@pytest.fixture
def workdir(tmp_path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def registry(adapter: FilesAdapter) -> AdapterRegistry:
    """Registry holding the files adapter plus a second, foreign adapter."""
    registry = adapter.registry
    registry.register("other://", FilesAdapter(MemoryEntryCache(), registry))
    return registry


def url(path) -> str:
    return f"dirbuf://{path}"


class TestRender:
    def test_create(self, adapter: FilesAdapter, workdir) -> None:
        assert adapter.render_action(CreateAction(url=url(workdir / "a.txt"))) == "CREATE a.txt"

    def test_create_directory(self, adapter: FilesAdapter, workdir) -> None:
        action = CreateAction(url=url(workdir / "sub"), entry_type=EntryType.DIRECTORY)
        assert adapter.render_action(action) == "CREATE sub/"

    def test_create_link(self, adapter: FilesAdapter, workdir) -> None:
        action = CreateAction(url=url(workdir / "l"), entry_type=EntryType.LINK, link="../x")
        assert adapter.render_action(action) == "CREATE l -> ../x"

    def test_delete(self, adapter: FilesAdapter, workdir) -> None:
        action = DeleteAction(url=url(workdir / "old"), entry_type=EntryType.DIRECTORY)
        assert adapter.render_action(action) == "DELETE old/"

    def test_move_and_copy(self, adapter: FilesAdapter, workdir) -> None:
        move = MoveAction(src_url=url(workdir / "a"), dest_url=url(workdir / "b"))
        copy = CopyAction(src_url=url(workdir / "a"), dest_url=url(workdir / "c"))
        assert adapter.render_action(move) == "  MOVE a -> b"
        assert adapter.render_action(copy) == "  COPY a -> c"

    def test_chmod(self, adapter: FilesAdapter, workdir) -> None:
        action = ChangeAction.chmod(url(workdir / "run.sh"), 0o755)
        assert adapter.render_action(action) == "CHMOD 755 run.sh"

    def test_cross_adapter_move_is_invariant_violation(
        self, adapter: FilesAdapter, registry: AdapterRegistry, workdir
    ) -> None:
        action = MoveAction(src_url=url(workdir / "a"), dest_url="other:///b")
        with pytest.raises(AdapterInvariantError, match="cross-adapter"):
            adapter.render_action(action)

    def test_change_of_read_only_column(self, adapter: FilesAdapter, workdir) -> None:
        action = ChangeAction(url=url(workdir / "a"), column="size", value=1)
        with pytest.raises(AdapterInvariantError, match="not editable"):
            adapter.render_action(action)

    def test_unknown_action(self, adapter: FilesAdapter) -> None:
        with pytest.raises(AdapterInvariantError, match="Bad action type"):
            adapter.render_action(object())  # type: ignore[arg-type]


class TestCreate:
    @pytest.mark.asyncio
    async def test_file_is_idempotent(self, adapter: FilesAdapter, tmp_path) -> None:
        path = tmp_path / "a.txt"
        path.write_text("keep")
        await adapter.aperform_action(CreateAction(url=url(path)))
        assert path.read_text() == "keep"

    @pytest.mark.asyncio
    async def test_new_file(self, adapter: FilesAdapter, tmp_path) -> None:
        await adapter.aperform_action(CreateAction(url=url(tmp_path / "new.txt")))
        assert (tmp_path / "new.txt").read_text() == ""

    @pytest.mark.asyncio
    async def test_directory_is_idempotent(self, adapter: FilesAdapter, tmp_path) -> None:
        action = CreateAction(url=url(tmp_path / "sub"), entry_type=EntryType.DIRECTORY)
        await adapter.aperform_action(action)
        await adapter.aperform_action(action)
        assert (tmp_path / "sub").is_dir()
        assert stat_module.S_IMODE(os.stat(tmp_path / "sub").st_mode) & 0o700 == 0o700

    @pytest.mark.asyncio
    async def test_link(self, adapter: FilesAdapter, tmp_path) -> None:
        action = CreateAction(url=url(tmp_path / "l"), entry_type=EntryType.LINK, link="target")
        await adapter.aperform_action(action)
        assert os.readlink(tmp_path / "l") == "target"

    @pytest.mark.asyncio
    async def test_missing_parent_fails(self, adapter: FilesAdapter, tmp_path) -> None:
        with pytest.raises(FilesystemError, match="ENOENT"):
            await adapter.aperform_action(CreateAction(url=url(tmp_path / "no" / "a.txt")))


class TestDelete:
    @pytest.mark.asyncio
    async def test_file(self, adapter: FilesAdapter, tmp_path) -> None:
        (tmp_path / "a").write_text("")
        await adapter.aperform_action(DeleteAction(url=url(tmp_path / "a")))
        assert not (tmp_path / "a").exists()

    @pytest.mark.asyncio
    async def test_directory_recursively(self, adapter: FilesAdapter, tmp_path) -> None:
        (tmp_path / "d" / "e").mkdir(parents=True)
        (tmp_path / "d" / "e" / "f").write_text("")
        await adapter.aperform_action(
            DeleteAction(url=url(tmp_path / "d"), entry_type=EntryType.DIRECTORY)
        )
        assert not (tmp_path / "d").exists()

    @pytest.mark.asyncio
    async def test_link_removes_link_only(self, adapter: FilesAdapter, tmp_path) -> None:
        (tmp_path / "target").mkdir()
        os.symlink("target", tmp_path / "l")
        await adapter.aperform_action(DeleteAction(url=url(tmp_path / "l"), entry_type="link"))
        assert not os.path.lexists(tmp_path / "l")
        assert (tmp_path / "target").is_dir()

    @pytest.mark.asyncio
    async def test_missing_fails(self, adapter: FilesAdapter, tmp_path) -> None:
        with pytest.raises(FilesystemError, match="ENOENT"):
            await adapter.aperform_action(DeleteAction(url=url(tmp_path / "gone")))


class TestMoveCopy:
    @pytest.mark.asyncio
    async def test_move(self, adapter: FilesAdapter, tmp_path) -> None:
        (tmp_path / "a").write_text("data")
        await adapter.aperform_action(
            MoveAction(src_url=url(tmp_path / "a"), dest_url=url(tmp_path / "b"))
        )
        assert not (tmp_path / "a").exists()
        assert (tmp_path / "b").read_text() == "data"

    @pytest.mark.asyncio
    async def test_copy_directory(self, adapter: FilesAdapter, tmp_path) -> None:
        (tmp_path / "d").mkdir()
        (tmp_path / "d" / "f").write_text("data")
        os.symlink("f", tmp_path / "d" / "l")
        await adapter.aperform_action(
            CopyAction(
                src_url=url(tmp_path / "d"),
                dest_url=url(tmp_path / "d2"),
                entry_type=EntryType.DIRECTORY,
            )
        )
        assert (tmp_path / "d" / "f").exists()
        assert (tmp_path / "d2" / "f").read_text() == "data"
        assert os.readlink(tmp_path / "d2" / "l") == "f"

    @pytest.mark.asyncio
    async def test_copy_link_copies_the_link(self, adapter: FilesAdapter, tmp_path) -> None:
        os.symlink("somewhere", tmp_path / "l")
        await adapter.aperform_action(
            CopyAction(
                src_url=url(tmp_path / "l"),
                dest_url=url(tmp_path / "l2"),
                entry_type=EntryType.LINK,
            )
        )
        assert os.readlink(tmp_path / "l2") == "somewhere"

    @pytest.mark.asyncio
    async def test_copy_refuses_existing_destination(
        self, adapter: FilesAdapter, tmp_path
    ) -> None:
        (tmp_path / "a").write_text("new")
        (tmp_path / "b").write_text("old")
        with pytest.raises(FilesystemError, match="EEXIST"):
            await adapter.aperform_action(
                CopyAction(src_url=url(tmp_path / "a"), dest_url=url(tmp_path / "b"))
            )
        assert (tmp_path / "b").read_text() == "old"

    @pytest.mark.parametrize(("action_cls", "name"), [(MoveAction, "move"), (CopyAction, "copy")])
    @pytest.mark.asyncio
    async def test_cross_adapter_fails_without_touching_disk(
        self, adapter: FilesAdapter, registry: AdapterRegistry, tmp_path, action_cls, name: str
    ) -> None:
        (tmp_path / "a").write_text("data")
        with pytest.raises(CrossAdapterError, match=f"cross-adapter {name}"):
            await adapter.aperform_action(
                action_cls(src_url=url(tmp_path / "a"), dest_url=f"other://{tmp_path}/b")
            )
        assert (tmp_path / "a").read_text() == "data"
        assert not (tmp_path / "b").exists()


class TestChange:
    @pytest.mark.asyncio
    async def test_chmod(self, adapter: FilesAdapter, tmp_path) -> None:
        (tmp_path / "a").write_text("")
        await adapter.aperform_action(ChangeAction.chmod(url(tmp_path / "a"), 0o600))
        assert stat_module.S_IMODE(os.stat(tmp_path / "a").st_mode) == 0o600

    @pytest.mark.parametrize("value", ["rwx", 70000, None])
    @pytest.mark.asyncio
    async def test_chmod_with_unvalidated_value_is_reported(
        self, adapter: FilesAdapter, tmp_path, value
    ) -> None:
        (tmp_path / "a").write_text("")
        os.chmod(tmp_path / "a", 0o644)
        action = ChangeAction.model_construct(
            url=url(tmp_path / "a"), column="permissions", value=value
        )
        with pytest.raises(FilesystemError, match="invalid mode"):
            await adapter.aperform_action(action)
        assert stat_module.S_IMODE(os.stat(tmp_path / "a").st_mode) == 0o644

    @pytest.mark.asyncio
    async def test_chmod_without_permissions_capability(self, tmp_path) -> None:
        adapter = FilesAdapter(MemoryEntryCache(), permissions=False)
        (tmp_path / "a").write_text("")
        with pytest.raises(FilesystemError, match="not editable"):
            await adapter.aperform_action(ChangeAction.chmod(url(tmp_path / "a"), 0o600))

    @pytest.mark.asyncio
    async def test_unknown_action(self, adapter: FilesAdapter) -> None:
        with pytest.raises(FilesystemError, match="Bad action type"):
            await adapter.aperform_action(object())  # type: ignore[arg-type]
