"""Permission string codec.

Converts the low 12 bits of a file mode to the familiar ``rwxr-x---`` form
and back. Setuid, setgid and sticky bits are folded into the execute slots
(``s``/``S`` and ``t``/``T``) so every 12-bit value has exactly one string.
"""

from __future__ import annotations

import re

from dirbuf.kernel.domain.entry import PERMISSION_MASK
from dirbuf.kernel.exceptions import PermissionParseError

_SYMBOLIC = r"[r-][w-][xsS-][r-][w-][xsS-][r-][w-][xtT-]"
_LINE_PATTERN = re.compile(rf"^({_SYMBOLIC})\s+(.*)$", re.DOTALL)
_SYMBOLIC_PATTERN = re.compile(rf"^[-dlbcps]?({_SYMBOLIC})$")
_OCTAL_PATTERN = re.compile(r"^(?:0o)?([0-7]{3,4})$")

# (read, write, execute, special bit, special char when executable)
_TRIPLES = (
    (0o400, 0o200, 0o100, 0o4000, "s"),
    (0o040, 0o020, 0o010, 0o2000, "s"),
    (0o004, 0o002, 0o001, 0o1000, "t"),
)


def mode_to_str(mode: int) -> str:
    """Render the permission bits of ``mode`` as a 9-character string."""
    chars: list[str] = []
    for read, write, execute, special, special_char in _TRIPLES:
        chars.append("r" if mode & read else "-")
        chars.append("w" if mode & write else "-")
        if mode & special:
            chars.append(special_char if mode & execute else special_char.upper())
        else:
            chars.append("x" if mode & execute else "-")
    return "".join(chars)


def mode_to_octal_str(mode: int) -> str:
    return f"{mode & PERMISSION_MASK:03o}"


def _symbolic_to_mode(text: str) -> int:
    mode = 0
    for i, (read, write, execute, special, _) in enumerate(_TRIPLES):
        r, w, x = text[i * 3 : i * 3 + 3]
        if r == "r":
            mode |= read
        if w == "w":
            mode |= write
        if x in ("x", "s", "t"):
            mode |= execute
        if x in ("s", "S", "t", "T"):
            mode |= special
    return mode


def parse(line: str) -> tuple[int, str] | None:
    """Parse a leading permission column off ``line``.

    Returns ``(mode, rest_of_line)`` or None when the line does not start
    with a permission string.
    """
    match = _LINE_PATTERN.match(line)
    if match is None:
        return None
    return _symbolic_to_mode(match.group(1)), match.group(2)


def parse_mode(text: str) -> int:
    """Parse a symbolic (``rwxr-xr-x``, optionally type-prefixed) or octal string.

    Raises
    ------
    PermissionParseError
        If ``text`` is neither form.
    """
    value = text.strip()
    if match := _SYMBOLIC_PATTERN.match(value):
        return _symbolic_to_mode(match.group(1))
    if match := _OCTAL_PATTERN.match(value):
        return int(match.group(1), 8)
    raise PermissionParseError(text)


def has_changed(old_mode: int, new_permissions: int) -> bool:
    """Compare only the low 12 bits of ``old_mode`` against a parsed value."""
    return (old_mode & PERMISSION_MASK) != new_permissions


def apply_permissions(old_mode: int, new_permissions: int) -> int:
    """Replace the low 12 bits of ``old_mode``, keeping type and higher bits.

    Raises
    ------
    ValueError
        If ``new_permissions`` does not fit in 12 bits.
    """
    if not 0 <= new_permissions <= PERMISSION_MASK:
        raise ValueError(f"mode {new_permissions!r} does not fit in 12 bits")
    return (old_mode & ~PERMISSION_MASK) | (new_permissions & PERMISSION_MASK)


__all__ = [
    "apply_permissions",
    "has_changed",
    "mode_to_octal_str",
    "mode_to_str",
    "parse",
    "parse_mode",
]
