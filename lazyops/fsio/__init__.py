"""I/O primitive set for native-strategy operations.

This package contains non-UI filesystem actions:
- the ``IoArgs`` bundle and conflict-resolution policy
- one primitive per atomic action (remove, copy, move, link, mkdir, rmdir, mkfile)
"""

from __future__ import annotations

from .types import DEFAULT_DIR_MODE, ConflictPolicy, IoArgs
from .primitives import Primitive, cp, ln, mkdir, mkfile, mv, rm, rmdir

__all__ = [
    "DEFAULT_DIR_MODE",
    "ConflictPolicy",
    "IoArgs",
    "Primitive",
    "cp",
    "ln",
    "mkdir",
    "mkfile",
    "mv",
    "rm",
    "rmdir",
]
