"""Configuration loader for dirbuf.

Supports two config sources:

1. **kind: Config YAML**: loaded via explicit path or ``DIRBUF_CONFIG_PATH``.
2. **pyproject.toml [tool.dirbuf]**: auto-discovery fallback.
"""

from __future__ import annotations

import os
import re
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any, cast

import yaml

from dirbuf.kernel.config.models import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_SCHEME,
    DirbufConfig,
    FilesConfig,
    LoggingConfig,
)
from dirbuf.kernel.exceptions import ConfigurationError
from dirbuf.kernel.logging import get_logger

_TRUTHY_VALUES = frozenset({"true", "1", "yes", "on", "enabled"})
_FALSY_VALUES = frozenset({"false", "0", "no", "off", "disabled"})

logger = get_logger(__name__)


def _parse_bool_env(value: str) -> bool:
    """Parse boolean from environment variable value.

    Raises
    ------
    ValueError
        If value is not a recognized boolean string
    """
    normalized = value.lower().strip()
    if normalized in _TRUTHY_VALUES:
        return True
    if normalized in _FALSY_VALUES:
        return False
    expected = _TRUTHY_VALUES | _FALSY_VALUES
    raise ValueError(f"Invalid boolean value: {value!r}. Expected one of: {expected}")


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigurationError(name, f"must be a mapping, got {type(section).__name__}")
    return section


@lru_cache(maxsize=32)
def _load_and_parse_cached(path_str: str) -> DirbufConfig:
    """Cached configuration loader."""
    loader = ConfigLoader()
    return loader._load_and_parse(Path(path_str))


class ConfigLoader:
    """Loads and processes dirbuf configuration files."""

    ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

    def load_config_file(self, path: str | Path | None = None) -> DirbufConfig:
        """Load configuration from YAML or pyproject.toml.

        Parameters
        ----------
        path : str | Path | None
            Path to config file. If None, searches using discovery order.

        Returns
        -------
        DirbufConfig
            Parsed configuration with environment variables substituted
        """
        config_path = self._find_config_file(path)
        return _load_and_parse_cached(str(config_path.absolute()))

    def _load_and_parse(self, config_path: Path) -> DirbufConfig:
        logger.debug("Loading configuration from {path}", path=config_path)

        if config_path.suffix in (".yaml", ".yml"):
            return self._load_yaml_config(config_path)
        return self._load_toml_config(config_path)

    def _load_yaml_config(self, config_path: Path) -> DirbufConfig:
        """Load and parse a kind: Config YAML file.

        Raises
        ------
        ConfigurationError
            If the YAML file is not a valid kind: Config manifest
        """
        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            raise ConfigurationError(
                config_path.name, f"expected a mapping, got {type(data).__name__}"
            )

        kind = data.get("kind")
        if kind != "Config":
            raise ConfigurationError(
                config_path.name, f"YAML config must use 'kind: Config', got 'kind: {kind}'"
            )

        spec = data.get("spec", {})
        if not isinstance(spec, dict):
            raise ConfigurationError(config_path.name, "'spec' must be a mapping")

        return self._parse_config(self._substitute_env_vars(spec))

    def _load_toml_config(self, config_path: Path) -> DirbufConfig:
        with config_path.open("rb") as f:
            data = tomllib.load(f)

        if "tool" in data and "dirbuf" in data.get("tool", {}):
            dirbuf_data = data["tool"]["dirbuf"]
        elif config_path.name == "pyproject.toml":
            logger.warning("No [tool.dirbuf] section found in pyproject.toml, using defaults")
            return get_default_config()
        else:
            dirbuf_data = data

        return self._parse_config(self._substitute_env_vars(dirbuf_data))

    def _find_config_file(self, path: str | Path | None) -> Path:
        """Find configuration file.

        Discovery order:
        1. Explicit path argument
        2. ``DIRBUF_CONFIG_PATH`` env var
        3. ``pyproject.toml`` with ``[tool.dirbuf]`` in CWD or a parent

        Raises
        ------
        FileNotFoundError
            If no configuration file is found
        """
        if path:
            config_path = Path(path)
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return config_path

        if env_path := os.getenv("DIRBUF_CONFIG_PATH"):
            config_path = Path(env_path)
            if config_path.exists():
                logger.debug("Using config from DIRBUF_CONFIG_PATH: {}", config_path)
                return config_path
            logger.warning("DIRBUF_CONFIG_PATH set but file not found: {}", config_path)

        current = Path.cwd()
        while True:
            pyproject = current / "pyproject.toml"
            if pyproject.exists():
                with pyproject.open("rb") as f:
                    data = tomllib.load(f)
                if "dirbuf" in data.get("tool", {}):
                    return pyproject
            if current == current.parent:
                break
            current = current.parent

        raise FileNotFoundError(
            "No configuration file found. Provide a kind: Config YAML path, "
            "set DIRBUF_CONFIG_PATH, or add [tool.dirbuf] to pyproject.toml"
        )

    def _substitute_env_vars(self, data: Any) -> Any:
        """Recursively replace ``${VAR}`` placeholders with environment values.

        Unset variables keep their placeholder.
        """
        if isinstance(data, str):

            def replacer(match: re.Match[str]) -> str:
                value = os.environ.get(match.group(1))
                return match.group(0) if value is None else value

            return self.ENV_VAR_PATTERN.sub(replacer, data)

        if isinstance(data, dict):
            return {key: self._substitute_env_vars(value) for key, value in data.items()}

        if isinstance(data, list):
            return [self._substitute_env_vars(item) for item in data]

        return data

    def _parse_config(self, data: dict[str, Any]) -> DirbufConfig:
        """Parse format-agnostic configuration data into DirbufConfig."""
        try:
            return DirbufConfig(
                scheme=data.get("scheme", DEFAULT_SCHEME),
                logging=self._parse_logging_config(_section(data, "logging")),
                files=self._parse_files_config(_section(data, "files")),
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError("config", str(e)) from e

    def _parse_files_config(self, files_data: dict[str, Any]) -> FilesConfig:
        defaults = FilesConfig()
        batch_size = files_data.get("batch_size", DEFAULT_BATCH_SIZE)
        if not isinstance(batch_size, int) or isinstance(batch_size, bool):
            raise ConfigurationError("files.batch_size", f"must be an integer, got {batch_size!r}")
        columns = files_data.get("columns", defaults.columns)
        if not isinstance(columns, list) or not all(isinstance(c, str) for c in columns):
            raise ConfigurationError("files.columns", "must be a list of column names")
        return FilesConfig(
            batch_size=batch_size,
            columns=columns,
            permissions=files_data.get("permissions"),
            time_format=files_data.get("time_format"),
        )

    def _parse_logging_config(self, logging_data: dict[str, Any]) -> LoggingConfig:
        """Parse logging configuration with environment variable overrides.

        Environment variables take precedence over config file values:
        - DIRBUF_LOG_LEVEL: Log level
        - DIRBUF_LOG_FORMAT: Output format
        - DIRBUF_LOG_FILE: Optional file path for log output
        - DIRBUF_LOG_COLOR: Use color output (true/false)
        """
        level = logging_data.get("level", "WARNING")
        format_type = logging_data.get("format", "structured")
        output_file = logging_data.get("output_file")
        use_color = logging_data.get("use_color", True)
        include_timestamp = logging_data.get("include_timestamp", True)

        if env_level := os.getenv("DIRBUF_LOG_LEVEL"):
            level = env_level.upper()

        if env_format := os.getenv("DIRBUF_LOG_FORMAT"):
            format_type = env_format.lower()

        if env_file := os.getenv("DIRBUF_LOG_FILE"):
            output_file = env_file

        if env_color := os.getenv("DIRBUF_LOG_COLOR"):
            try:
                use_color = _parse_bool_env(env_color)
            except ValueError as e:
                logger.warning("Invalid DIRBUF_LOG_COLOR value: {}", e)

        return LoggingConfig(
            level=cast("Any", level.upper()),
            format=cast("Any", format_type),
            output_file=output_file,
            use_color=use_color,
            include_timestamp=include_timestamp,
        )


def load_config(path: str | Path | None = None) -> DirbufConfig:
    """Load configuration, falling back to defaults when no file is found."""
    try:
        return ConfigLoader().load_config_file(path)
    except FileNotFoundError:
        if path:
            raise
        return get_default_config()


def get_default_config() -> DirbufConfig:
    return DirbufConfig()


def clear_config_cache() -> None:
    _load_and_parse_cached.cache_clear()


__all__ = [
    "ConfigLoader",
    "clear_config_cache",
    "get_default_config",
    "load_config",
]
