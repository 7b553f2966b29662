"""Logical location identifiers.

A url is ``<scheme>://<posix path>``, e.g. ``dirbuf:///home/me/src/``.
Directory urls carry a trailing ``/``.
"""

from __future__ import annotations

import re

from dirbuf.kernel.exceptions import ValidationError

_URL_PATTERN = re.compile(r"^(.*://)(.*)$", re.DOTALL)


def parse_url(url: str) -> tuple[str, str]:
    """Split a url into ``(scheme, path)``; the scheme keeps its ``://``.

    Raises
    ------
    ValidationError
        If ``url`` has no scheme.
    """
    match = _URL_PATTERN.match(url)
    if match is None:
        raise ValidationError("url", "expected '<scheme>://<path>'", value=url)
    return match.group(1), match.group(2)


def get_scheme(url: str) -> str | None:
    match = _URL_PATTERN.match(url)
    return match.group(1) if match else None


def addslash(path: str, sep: str = "/") -> str:
    """Append ``sep`` unless ``path`` already ends with it."""
    if not path.endswith(sep):
        return path + sep
    return path


def join_url(parent_url: str, name: str) -> str:
    return addslash(parent_url) + name


__all__ = ["addslash", "get_scheme", "join_url", "parse_url"]
