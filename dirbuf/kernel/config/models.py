"""Configuration data models for dirbuf."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from dirbuf.kernel.exceptions import ConfigurationError
from dirbuf.kernel.utils.paths import IS_WINDOWS

DEFAULT_SCHEME = "dirbuf://"
DEFAULT_BATCH_SIZE = 100


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Logging configuration for dirbuf.

    Attributes
    ----------
    level : str, default="WARNING"
        Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    format : str, default="structured"
        Output format (console, json, structured, rich)
    output_file : str | None, default=None
        Optional file path to write logs to
    use_color : bool, default=True
        Use ANSI color codes (auto-disabled for non-TTY)
    include_timestamp : bool, default=True
        Include timestamp in log output

    Examples
    --------
    TOML configuration:

    ```toml
    [tool.dirbuf.logging]
    level = "DEBUG"
    format = "rich"
    ```

    Environment variable overrides:

    ```bash
    export DIRBUF_LOG_LEVEL=DEBUG
    export DIRBUF_LOG_FORMAT=json
    ```
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["console", "json", "structured", "rich"] = "structured"
    output_file: str | None = None
    use_color: bool = True
    include_timestamp: bool = True


@dataclass(frozen=True, slots=True)
class FilesConfig:
    """Settings of the local files adapter.

    Attributes
    ----------
    batch_size : int
        Number of directory entries read per batch while listing
    columns : list[str]
        Columns requested by default (``dirbuf ls`` without ``-c``)
    permissions : bool | None
        Enable the permissions column; None means "on for POSIX systems"
    time_format : str | None
        strftime format for the time columns; None uses the ls-style default
    """

    batch_size: int = DEFAULT_BATCH_SIZE
    columns: list[str] = field(default_factory=lambda: ["size", "permissions", "mtime"])
    permissions: bool | None = None
    time_format: str | None = None

    def __post_init__(self) -> None:
        if self.batch_size < 1:
            raise ConfigurationError("files.batch_size", f"must be positive, got {self.batch_size}")

    @property
    def permissions_enabled(self) -> bool:
        if self.permissions is None:
            return not IS_WINDOWS
        return self.permissions


@dataclass(slots=True)
class DirbufConfig:
    """Complete dirbuf configuration.

    Examples
    --------
    TOML configuration in pyproject.toml:

    ```toml
    [tool.dirbuf]
    scheme = "dirbuf://"

    [tool.dirbuf.files]
    batch_size = 200
    columns = ["size", "mtime"]
    time_format = "%Y-%m-%d %H:%M"

    [tool.dirbuf.logging]
    level = "DEBUG"
    ```
    """

    scheme: str = DEFAULT_SCHEME
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    files: FilesConfig = field(default_factory=FilesConfig)

    def __post_init__(self) -> None:
        if not self.scheme.endswith("://"):
            raise ConfigurationError("scheme", f"must end with '://', got {self.scheme!r}")


__all__ = [
    "DEFAULT_BATCH_SIZE",
    "DEFAULT_SCHEME",
    "DirbufConfig",
    "FilesConfig",
    "LoggingConfig",
]
