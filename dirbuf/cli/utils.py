"""CLI helper utilities for dirbuf commands."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Protocol

import typer
import yaml
from rich.console import Console

from dirbuf.drivers.cache import MemoryEntryCache
from dirbuf.drivers.files import FilesAdapter
from dirbuf.drivers.registry import AdapterRegistry
from dirbuf.kernel.config.models import DirbufConfig
from dirbuf.kernel.domain.actions import Action, parse_actions
from dirbuf.kernel.exceptions import ValidationError
from dirbuf.kernel.utils.paths import os_to_posix_path
from dirbuf.kernel.utils.permissions import parse_mode
from dirbuf.kernel.utils.urls import get_scheme

_URL_KEYS = ("url", "src_url", "dest_url")


class ContextProtocol(Protocol):
    """Protocol for common interface between Click and Typer contexts."""

    @property
    def obj(self) -> dict[str, Any] | None: ...


console = Console()


def get_config(ctx: ContextProtocol | None) -> DirbufConfig:
    obj = getattr(ctx, "obj", None)
    if isinstance(obj, dict) and isinstance(obj.get("config"), DirbufConfig):
        return obj["config"]
    return DirbufConfig()


def print_output(obj: Any, ctx: ContextProtocol | None = None) -> None:
    """Print ``obj`` according to ``ctx.obj['output_format']``.

    If ctx is None or no format specified, pretty-print using rich.console.
    """
    fmt = None
    ctx_obj = getattr(ctx, "obj", None)
    if isinstance(ctx_obj, dict):
        fmt = ctx_obj.get("output_format")

    if fmt == "json":
        typer.echo(json.dumps(obj, default=str, indent=2))
    elif fmt == "yaml":
        typer.echo(yaml.safe_dump(obj, sort_keys=False))
    elif isinstance(obj, (str, int, float)):
        typer.echo(str(obj))
    else:
        console.print(obj)


def build_adapter(config: DirbufConfig) -> tuple[AdapterRegistry, FilesAdapter]:
    """Registry with a files adapter registered under the configured scheme."""
    registry = AdapterRegistry()
    adapter = FilesAdapter.from_config(config.files, MemoryEntryCache(), registry, config.scheme)
    registry.register(config.scheme, adapter)
    return registry, adapter


def to_url(path_or_url: str, scheme: str) -> str:
    """Turn a plain OS path into a url; urls pass through unchanged."""
    if get_scheme(path_or_url) is not None:
        return path_or_url
    return scheme + os_to_posix_path(os.path.abspath(os.path.expanduser(path_or_url)))


def load_actions_file(path: Path, scheme: str) -> list[Action]:
    """Load actions from YAML: a list of mappings or ``{actions: [...]}``.

    Plain paths in ``url``/``src_url``/``dest_url`` are converted to urls, and
    a permissions change may give its value as ``rw-r--r--``, ``"644"`` or an
    unquoted ``644`` (its decimal digits are read as octal).

    Raises
    ------
    ValidationError
        If the file isn't a list of valid actions.
    """
    with path.open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValidationError("actions", f"invalid YAML: {e}", value=str(path)) from e

    if isinstance(data, dict):
        data = data.get("actions")
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise ValidationError("actions", "expected a list of action mappings", value=str(path))

    return parse_actions(_prepare_item(item, scheme) for item in data)


def _prepare_item(item: dict[str, Any], scheme: str) -> dict[str, Any]:
    prepared = {
        key: to_url(value, scheme) if key in _URL_KEYS and isinstance(value, str) else value
        for key, value in item.items()
    }
    value = prepared.get("value")
    if prepared.get("column") != "permissions" or isinstance(value, bool):
        return prepared
    if isinstance(value, str):
        prepared["value"] = parse_mode(value)
    elif isinstance(value, int):
        # Unquoted YAML ``755`` loads as a decimal int; read its digits as octal
        prepared["value"] = parse_mode(f"{value:03d}")
    return prepared
