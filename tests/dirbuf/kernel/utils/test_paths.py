"""Tests for logical/OS path translation and display helpers."""

from __future__ import annotations

import os

import pytest

from dirbuf.kernel.domain.entry import EntryType
from dirbuf.kernel.utils import paths

posix_only = pytest.mark.skipif(paths.IS_WINDOWS, reason="POSIX path semantics")


@posix_only
class TestPosixTranslation:
    def test_paths_are_unchanged(self) -> None:
        assert paths.posix_to_os_path("/home/me") == "/home/me"
        assert paths.os_to_posix_path("/home/me") == "/home/me"

    def test_is_absolute(self) -> None:
        assert paths.is_absolute("/tmp")
        assert not paths.is_absolute("tmp/x")

    def test_join_and_dirname(self) -> None:
        assert paths.join("/tmp", "a") == "/tmp/a"
        assert paths.join("/tmp/", "a") == "/tmp/a"
        assert paths.dirname("/tmp/a") == "/tmp"
        assert paths.dirname("/a") == "/"

    def test_is_subpath(self) -> None:
        assert paths.is_subpath("/tmp", "/tmp/a")
        assert paths.is_subpath("/tmp", "/tmp")
        assert paths.is_subpath("/tmp/", "/tmp/a")
        assert not paths.is_subpath("/tmp", "/tmpfoo")


@posix_only
class TestShortenPath:
    def test_relative_to_directory(self) -> None:
        assert paths.shorten_path("/work/proj/src/a.py", "/work/proj") == "src/a.py"

    def test_same_directory_is_dot(self) -> None:
        assert paths.shorten_path("/work/proj", "/work/proj") == "."

    def test_home_collapse(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOME", "/home/me")
        assert paths.shorten_path("/home/me/notes.txt", "/elsewhere") == "~/notes.txt"

    def test_picks_shorter_form(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOME", "/home/me")
        assert paths.shorten_path("/home/me/a/b/c.txt", "/home/me/a/b") == "c.txt"

    def test_outside_both_is_unchanged(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOME", "/home/me")
        assert paths.shorten_path("/opt/x", "/work") == "/opt/x"

    def test_defaults_to_cwd(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        assert paths.shorten_path(os.path.join(str(tmp_path), "f")) == "f"


@posix_only
class TestToShortOsPath:
    def test_directory_gets_separator(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        assert paths.to_short_os_path(f"{tmp_path}/sub", EntryType.DIRECTORY) == "sub/"
        assert paths.to_short_os_path(f"{tmp_path}/sub/", EntryType.DIRECTORY) == "sub/"

    def test_file_unchanged(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        assert paths.to_short_os_path(f"{tmp_path}/f.txt", EntryType.FILE) == "f.txt"
