"""Bookkeeping for files relocated into and out of the trash directory.

The ledger maps each trashed path to the location it came from so that
restores and listings stay in sync with moves done by the dispatcher.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class TrashEntry:
    """One trashed item: where it lives now and where it came from."""

    trash_path: Path
    original_path: Path


def _normalize(path: str | os.PathLike[str]) -> Path:
    return Path(os.path.abspath(os.fspath(path)))


class TrashLedger:
    """In-memory trash registry rooted at ``trash_dir``."""

    def __init__(self, trash_dir: str | os.PathLike[str]) -> None:
        self.trash_dir = _normalize(trash_dir)
        self._entries: dict[Path, TrashEntry] = {}

    def is_under_trash(self, path: str | os.PathLike[str]) -> bool:
        """Return whether ``path`` is strictly inside the trash directory."""
        candidate = _normalize(path)
        return candidate != self.trash_dir and candidate.is_relative_to(self.trash_dir)

    def add_to_trash(self, original_path: str | os.PathLike[str], trash_path: str | os.PathLike[str]) -> None:
        entry = TrashEntry(trash_path=_normalize(trash_path), original_path=_normalize(original_path))
        self._entries[entry.trash_path] = entry

    def remove_from_trash(self, trash_path: str | os.PathLike[str]) -> bool:
        """Forget ``trash_path``; returns ``False`` when it was not listed."""
        return self._entries.pop(_normalize(trash_path), None) is not None

    def __contains__(self, trash_path: object) -> bool:
        if not isinstance(trash_path, (str, os.PathLike)):
            return False
        return _normalize(trash_path) in self._entries

    def entries(self) -> list[TrashEntry]:
        return sorted(self._entries.values(), key=lambda entry: str(entry.trash_path))

    def to_state(self) -> list[dict[str, str]]:
        """Serialize entries for session-state persistence."""
        return [
            {"trash_path": str(entry.trash_path), "original_path": str(entry.original_path)}
            for entry in self.entries()
        ]

    def load_state(self, raw_entries: object) -> None:
        """Restore entries from ``to_state`` output, dropping malformed items."""
        if not isinstance(raw_entries, list):
            return
        for raw in raw_entries:
            if not isinstance(raw, dict):
                continue
            trash_path = raw.get("trash_path")
            original_path = raw.get("original_path")
            if not isinstance(trash_path, str) or not isinstance(original_path, str):
                continue
            if not trash_path or not original_path:
                continue
            self.add_to_trash(original_path, trash_path)
