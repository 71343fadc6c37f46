"""Operation kinds, their descriptions, and dispatcher status codes.

The kind set is closed and platform dependent: POSIX builds expose the
chmod kinds while other targets expose attribute add/subtract kinds.
"""

from __future__ import annotations

import os
from enum import Enum

IS_POSIX = os.name != "nt"

OP_OK = 0
OP_FAILED = -1
OP_CANCELLED = -2
# Deletion declined by the user; callers must not record it in undo history.
SKIP_UNDO_REDO_OPERATION = -3


class OperationKind(Enum):
    """Closed set of file actions the dispatcher can perform."""

    NONE = "none"
    USR = "usr"
    REMOVE = "remove"
    REMOVESL = "removesl"
    COPY = "copy"
    COPYF = "copyf"
    MOVE = "move"
    MOVEF = "movef"
    MOVETMP1 = "movetmp1"
    MOVETMP2 = "movetmp2"
    MOVETMP3 = "movetmp3"
    MOVETMP4 = "movetmp4"
    CHOWN = "chown"
    CHGRP = "chgrp"
    if IS_POSIX:
        CHMOD = "chmod"
        CHMODR = "chmodr"
    else:
        ADDATTR = "addattr"
        SUBATTR = "subattr"
    SYMLINK = "symlink"
    SYMLINK2 = "symlink2"
    MKDIR = "mkdir"
    RMDIR = "rmdir"
    MKFILE = "mkfile"


_DESCRIPTIONS: dict[str, str] = {
    "none": "None",
    "usr": "Usr",
    "remove": "Deleting",
    "removesl": "Deleting",
    "copy": "Copying",
    "copyf": "Copying",
    "move": "Moving",
    "movef": "Moving",
    "movetmp1": "Moving",
    "movetmp2": "Moving",
    "movetmp3": "Moving",
    "movetmp4": "Moving",
    "chown": "Chown",
    "chgrp": "Chgrp",
    "chmod": "Chmod",
    "chmodr": "Chmod",
    "addattr": "Attr",
    "subattr": "Attr",
    "symlink": "Symlink",
    "symlink2": "Symlink",
    "mkdir": "Mkdir",
    "rmdir": "Rmdir",
    "mkfile": "Mkfile",
}

OPERATION_DESCRIPTIONS: dict[OperationKind, str] = {
    kind: _DESCRIPTIONS[kind.value] for kind in OperationKind
}

MOVE_KINDS = frozenset(
    {
        OperationKind.MOVE,
        OperationKind.MOVEF,
        OperationKind.MOVETMP1,
        OperationKind.MOVETMP2,
        OperationKind.MOVETMP3,
        OperationKind.MOVETMP4,
    }
)


def describe(kind: OperationKind) -> str:
    """Return the human-readable progress label for ``kind``."""
    return OPERATION_DESCRIPTIONS[kind]


def parse_kind(name: str) -> OperationKind:
    """Resolve a kind from its value or member name, case-insensitively.

    Raises ``ValueError`` for names outside this platform's kind set.
    """
    normalized = name.strip().lower()
    for kind in OperationKind:
        if kind.value == normalized or kind.name.lower() == normalized:
            return kind
    raise ValueError(f"unknown operation kind: {name!r}")


__all__ = [
    "IS_POSIX",
    "MOVE_KINDS",
    "OP_CANCELLED",
    "OP_FAILED",
    "OP_OK",
    "OPERATION_DESCRIPTIONS",
    "OperationKind",
    "SKIP_UNDO_REDO_OPERATION",
    "describe",
    "parse_kind",
]
