"""Tests for the dirbuf exception hierarchy."""

from __future__ import annotations

import errno

import pytest

from dirbuf.kernel.domain.actions import DeleteAction
from dirbuf.kernel.exceptions import (
    ActionFailedError,
    AdapterInvariantError,
    ConfigurationError,
    CrossAdapterError,
    DirbufError,
    FilesystemError,
    ListingError,
    PermissionParseError,
    ResourceNotFoundError,
    ValidationError,
)


class TestDirbufError:
    """Tests for DirbufError base exception."""

    def test_basic_creation(self) -> None:
        error = DirbufError("Something went wrong")
        assert str(error) == "Something went wrong"

    def test_can_be_caught_as_exception(self) -> None:
        with pytest.raises(DirbufError):
            raise DirbufError("test")


class TestConfigurationError:
    def test_message_and_attributes(self) -> None:
        error = ConfigurationError("files.batch_size", "must be positive")
        assert "files.batch_size" in str(error)
        assert "must be positive" in str(error)
        assert error.component == "files.batch_size"
        assert error.reason == "must be positive"
        assert isinstance(error, DirbufError)


class TestValidationError:
    def test_with_value(self) -> None:
        error = ValidationError("batch_size", "must be positive", value=-1)
        assert "(got -1)" in str(error)
        assert error.value == -1

    def test_without_value(self) -> None:
        error = ValidationError("url", "expected a scheme")
        assert str(error) == "Validation failed for 'url': expected a scheme"

    def test_permission_parse_error_is_validation_error(self) -> None:
        error = PermissionParseError("rwz")
        assert isinstance(error, ValidationError)
        assert error.text == "rwz"
        assert "'rwz'" in str(error)


class TestResourceNotFoundError:
    def test_lists_available(self) -> None:
        error = ResourceNotFoundError("adapter", "ssh://", ["dirbuf://"])
        assert str(error) == "Adapter 'ssh://' not found. Available: dirbuf://"

    def test_truncates_long_available_list(self) -> None:
        error = ResourceNotFoundError("column", "x", [f"c{i}" for i in range(8)])
        assert "... and 3 more" in str(error)


class TestFilesystemError:
    def test_from_os_error_keeps_errno_name(self) -> None:
        os_error = FileNotFoundError(errno.ENOENT, "No such file or directory")
        error = FilesystemError.from_os_error("/tmp/missing", os_error)
        assert error.path == "/tmp/missing"
        assert error.reason == "ENOENT: No such file or directory"

    def test_from_os_error_without_errno(self) -> None:
        error = FilesystemError.from_os_error("/x", OSError("boom"))
        assert error.reason == "boom"

    def test_listing_error_from_os_error_keeps_subclass(self) -> None:
        error = ListingError.from_os_error("dirbuf:///x/", PermissionError(errno.EACCES, "denied"))
        assert isinstance(error, ListingError)
        assert isinstance(error, FilesystemError)

    def test_cross_adapter_error(self) -> None:
        error = CrossAdapterError("dirbuf:///a", "ssh://host/b", "move")
        assert isinstance(error, FilesystemError)
        assert "cross-adapter move from dirbuf:///a" in str(error)
        assert error.dest == "ssh://host/b"


class TestAdapterInvariantError:
    def test_is_not_a_filesystem_error(self) -> None:
        error = AdapterInvariantError("Bad action type: 'rename'")
        assert not isinstance(error, FilesystemError)
        assert error.reason == "Bad action type: 'rename'"


class TestActionFailedError:
    def test_message_is_one_based(self) -> None:
        action = DeleteAction(url="dirbuf:///tmp/x")
        cause = FilesystemError("/tmp/x", "ENOENT: No such file or directory")
        error = ActionFailedError(2, action, cause)
        assert error.index == 2
        assert error.cause is cause
        assert str(error).startswith("Action #3 (delete) failed:")
