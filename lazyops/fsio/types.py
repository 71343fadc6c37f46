"""Argument bundle and policies shared by the I/O primitives."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ..cancellation import CancellationState
from ..estimator import ProgressEstimator

DEFAULT_DIR_MODE = 0o755


class ConflictPolicy(Enum):
    """What to do when a destination path already exists."""

    REPLACE_FILES = "replace"
    KEEP_EXISTING = "keep"


@dataclass
class IoArgs:
    """Inputs for one primitive call.

    ``src`` is the primary path. ``dst`` is the secondary path for two-path
    primitives (copy/move destination, symlink location). ``mode`` doubles as
    the permission mode for ``mkdir``.
    """

    src: Path
    dst: Path | None = None
    mode: int | None = None
    crs: ConflictPolicy = ConflictPolicy.KEEP_EXISTING
    process_parents: bool = False
    estim: ProgressEstimator | None = None
    cancellable: bool = False
    cancellation: CancellationState | None = None

    def cancelled(self) -> bool:
        """Poll point used once per processed entry."""
        if not self.cancellable or self.cancellation is None:
            return False
        return self.cancellation.cancelled()

    def report(self, path: Path, size: int = 0) -> None:
        if self.estim is not None:
            self.estim.update(path, size)
