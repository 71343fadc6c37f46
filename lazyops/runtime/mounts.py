"""Virtual filesystem mounts owned by this process.

Archive or remote mounts made while browsing are recorded here so the
shutdown path can unmount them before the process exits.
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

from ..log import get_logger

logger = get_logger(__name__)


def _unmount_command(mount_point: Path) -> list[str]:
    """Prefer ``fusermount -u``; fall back to plain ``umount``."""
    if shutil.which("fusermount") is not None:
        return ["fusermount", "-u", str(mount_point)]
    return ["umount", str(mount_point)]


class MountRegistry:
    def __init__(self, timeout_seconds: float = 5.0) -> None:
        self._mount_points: list[Path] = []
        self.timeout_seconds = timeout_seconds

    def add(self, mount_point: Path) -> None:
        self._mount_points.append(Path(mount_point))

    def mount_points(self) -> list[Path]:
        return list(self._mount_points)

    def unmount_all(self) -> int:
        """Unmount every recorded mount point, newest first.

        Returns the number of failed unmounts; failures are logged and the
        remaining mounts are still attempted.
        """
        failures = 0
        while self._mount_points:
            mount_point = self._mount_points.pop()
            try:
                proc = subprocess.run(
                    _unmount_command(mount_point),
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.PIPE,
                    text=True,
                    encoding="utf-8",
                    errors="replace",
                    check=False,
                    timeout=self.timeout_seconds,
                )
            except (OSError, subprocess.TimeoutExpired) as exc:
                logger.error("Unmounting %s failed: %s", mount_point, exc)
                failures += 1
                continue
            if proc.returncode != 0:
                logger.error("Unmounting %s failed: %s", mount_point, proc.stderr.strip())
                failures += 1
        return failures
