"""Tests for url helpers."""

from __future__ import annotations

import pytest

from dirbuf.kernel.exceptions import ValidationError
from dirbuf.kernel.utils.urls import addslash, get_scheme, join_url, parse_url


class TestParseUrl:
    def test_splits_scheme_and_path(self) -> None:
        assert parse_url("dirbuf:///home/me/") == ("dirbuf://", "/home/me/")

    def test_empty_path(self) -> None:
        assert parse_url("dirbuf://") == ("dirbuf://", "")

    def test_missing_scheme(self) -> None:
        with pytest.raises(ValidationError, match="url"):
            parse_url("/home/me")

    def test_get_scheme(self) -> None:
        assert get_scheme("ssh://host/x") == "ssh://"
        assert get_scheme("/plain/path") is None


class TestAddslash:
    def test_adds_once(self) -> None:
        assert addslash("/tmp") == "/tmp/"
        assert addslash("/tmp/") == "/tmp/"

    def test_custom_separator(self) -> None:
        assert addslash("C:\\tmp", "\\") == "C:\\tmp\\"

    def test_join_url(self) -> None:
        assert join_url("dirbuf:///tmp", "a.txt") == "dirbuf:///tmp/a.txt"
        assert join_url("dirbuf:///tmp/", "a.txt") == "dirbuf:///tmp/a.txt"
