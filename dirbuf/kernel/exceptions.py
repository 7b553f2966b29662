"""Core exception hierarchy for dirbuf.

All dirbuf exceptions inherit from DirbufError for easy exception handling.
Reported failures (I/O errors, refused actions, malformed input) are
``FilesystemError`` / ``ValidationError`` subclasses; ``AdapterInvariantError``
marks a broken internal invariant and is never expected in correct operation.
"""

from __future__ import annotations

import errno
from typing import Any

# ============================================================================
# Base Exception
# ============================================================================


class DirbufError(Exception):
    """Base exception for all dirbuf errors.

    Catch this to handle all dirbuf errors.
    """

    pass


# ============================================================================
# Configuration & Validation Errors
# ============================================================================


class ConfigurationError(DirbufError):
    """Raised when configuration is invalid or missing.

    Examples
    --------
    Example usage::

        raise ConfigurationError("files.batch_size", "must be positive")
    """

    def __init__(self, component: str, reason: str) -> None:
        """Initialize configuration error.

        Args
        ----
            component: Name of the component with invalid configuration
            reason: Explanation of what's wrong
        """
        super().__init__(f"Configuration error in '{component}': {reason}")
        self.component = component
        self.reason = reason


class ValidationError(DirbufError):
    """Raised when data validation fails.

    Examples
    --------
    Example usage::

        raise ValidationError("batch_size", "must be positive", value=-1)
    """

    def __init__(self, field: str, constraint: str, value: object = None) -> None:
        """Initialize validation error.

        Args
        ----
            field: Name of the field that failed validation
            constraint: Description of the validation constraint
            value: The invalid value (optional)
        """
        if value is not None:
            msg = f"Validation failed for '{field}': {constraint} (got {value!r})"
        else:
            msg = f"Validation failed for '{field}': {constraint}"
        super().__init__(msg)
        self.field = field
        self.constraint = constraint
        self.value = value


class PermissionParseError(ValidationError):
    """Raised when a permission string cannot be parsed into a mode."""

    def __init__(self, text: str) -> None:
        super().__init__("permissions", "expected 'rwxr-xr-x' or octal form", value=text)
        self.text = text


# ============================================================================
# Resource Errors
# ============================================================================


class ResourceNotFoundError(DirbufError):
    """Raised when a required resource cannot be found.

    Examples
    --------
    Example usage::

        raise ResourceNotFoundError("adapter", "ssh://", ["dirbuf://"])
    """

    def __init__(
        self, resource_type: str, resource_id: str, available: list[str] | None = None
    ) -> None:
        """Initialize resource not found error.

        Args
        ----
            resource_type: Type of resource (e.g., "adapter", "column")
            resource_id: Identifier of the missing resource
            available: List of available resources (optional)
        """
        msg = f"{resource_type.title()} '{resource_id}' not found"
        if available:
            msg += f". Available: {', '.join(available[:5])}"
            if len(available) > 5:
                msg += f" ... and {len(available) - 5} more"
        super().__init__(msg)
        self.resource_type = resource_type
        self.resource_id = resource_id
        self.available = available


# ============================================================================
# Filesystem Errors
# ============================================================================


class FilesystemError(DirbufError):
    """Raised when a filesystem operation or action fails.

    Examples
    --------
    Example usage::

        raise FilesystemError("/tmp/foo", "No such file or directory")
    """

    def __init__(self, path: str, reason: str) -> None:
        """Initialize filesystem error.

        Args
        ----
            path: The path (or url) that caused the error
            reason: Explanation of what went wrong
        """
        super().__init__(f"Filesystem error at '{path}': {reason}")
        self.path = path
        self.reason = reason

    @classmethod
    def from_os_error(cls, path: str, err: OSError) -> FilesystemError:
        """Build from an ``OSError``, keeping its errno name in the reason."""
        reason = err.strerror or str(err)
        if err.errno is not None:
            reason = f"{errno.errorcode.get(err.errno, err.errno)}: {reason}"
        return cls(path, reason)


class ListingError(FilesystemError):
    """Raised when a directory listing terminates with an error."""


class CrossAdapterError(FilesystemError):
    """Raised when a move/copy crosses into a different adapter."""

    def __init__(self, src: str, dest: str, action: str) -> None:
        super().__init__(dest, f"files adapter doesn't support cross-adapter {action} from {src}")
        self.src = src
        self.dest = dest
        self.action = action


# ============================================================================
# Invariant Errors
# ============================================================================


class AdapterInvariantError(DirbufError):
    """Raised when an internal invariant is broken (programming error).

    The render path raises this for cross-adapter move/copy and unknown
    action types. Callers should not catch it to recover.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


# ============================================================================
# Mutation Errors
# ============================================================================


class ActionFailedError(DirbufError):
    """Raised when one action of a batch fails; later actions are not run."""

    def __init__(self, index: int, action: Any, cause: Exception) -> None:
        self.index = index
        self.action = action
        self.cause = cause
        super().__init__(f"Action #{index + 1} ({getattr(action, 'type', '?')}) failed: {cause}")


__all__ = [
    # Base
    "DirbufError",
    # Configuration & Validation
    "ConfigurationError",
    "ValidationError",
    "PermissionParseError",
    # Resource
    "ResourceNotFoundError",
    # Filesystem
    "FilesystemError",
    "ListingError",
    "CrossAdapterError",
    # Invariant
    "AdapterInvariantError",
    # Mutation
    "ActionFailedError",
]
