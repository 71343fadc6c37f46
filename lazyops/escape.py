"""Shell escaping contract and command-line assembly for shell-strategy ops.

``escape_filename`` returns ``None`` for paths that cannot be embedded in a
POSIX shell command (NUL bytes, empty paths). ``build_command`` only joins
tokens that were escaped already.
"""

from __future__ import annotations

import os
import shlex
from collections.abc import Iterable


def escape_filename(path: str | os.PathLike[str]) -> str | None:
    """Quote ``path`` for ``sh`` or return ``None`` when it is unrepresentable.

    Relative paths starting with ``-`` gain a ``./`` prefix so commands never
    mistake them for options.
    """
    raw = os.fspath(path)
    if not raw or "\0" in raw:
        return None
    if raw.startswith("-"):
        raw = "./" + raw
    return shlex.quote(raw)


def escape_paths(*paths: str | os.PathLike[str]) -> list[str] | None:
    """Escape every path, or return ``None`` if any one of them fails."""
    escaped: list[str] = []
    for path in paths:
        token = escape_filename(path)
        if token is None:
            return None
        escaped.append(token)
    return escaped


def build_command(parts: Iterable[str]) -> str:
    """Join template tokens and escaped paths, dropping empty optional flags."""
    return " ".join(part for part in parts if part)
