"""Expected-vs-done progress accumulator for one operation batch.

``calculate`` grows the expected totals as paths are enqueued; primitives
report completed items through ``update``.
"""

from __future__ import annotations

import os
from pathlib import Path


class ProgressEstimator:
    """Accumulate item and byte counts for a batch of file actions."""

    def __init__(self) -> None:
        self.total_items = 0
        self.total_bytes = 0
        self.current_item = 0
        self.current_bytes = 0
        self.item: Path | None = None
        self.released = False

    def calculate(self, path: str | os.PathLike[str]) -> None:
        """Add every entry under ``path`` (itself included) to expected totals.

        Symlinks are counted but never followed. Unreadable directories still
        count as one item.
        """
        root = Path(path)
        try:
            st = root.lstat()
        except OSError:
            return
        self.total_items += 1
        if not root.is_dir() or root.is_symlink():
            self.total_bytes += int(st.st_size)
            return

        for dirpath, dirnames, filenames in os.walk(root):
            self.total_items += len(dirnames)
            for name in filenames:
                try:
                    child_st = os.lstat(os.path.join(dirpath, name))
                except OSError:
                    continue
                self.total_items += 1
                self.total_bytes += int(child_st.st_size)

    def update(self, path: str | os.PathLike[str], size: int = 0) -> None:
        """Record one completed item of ``size`` bytes."""
        if self.released:
            return
        self.item = Path(path)
        self.current_item += 1
        self.current_bytes += max(0, int(size))

    def progress_percent(self) -> int:
        """Return done/expected as an integer percentage clamped to 0..100."""
        if self.total_bytes > 0:
            ratio = self.current_bytes / self.total_bytes
        elif self.total_items > 0:
            ratio = self.current_item / self.total_items
        else:
            return 0
        return max(0, min(100, int(ratio * 100)))

    def release(self) -> None:
        self.released = True
