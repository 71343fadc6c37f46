"""File attribute bitmask access for non-POSIX targets."""

from __future__ import annotations

import errno
import os


def get_file_attributes(path: str | os.PathLike[str]) -> int:
    """Return the attribute bitmask of ``path`` (``st_file_attributes``)."""
    st = os.stat(path, follow_symlinks=False)
    attributes = getattr(st, "st_file_attributes", None)
    if attributes is None:
        raise OSError(errno.ENOTSUP, "file attributes are not supported", os.fspath(path))
    return int(attributes)


def set_file_attributes(path: str | os.PathLike[str], attributes: int) -> None:
    """Write ``attributes`` back with ``SetFileAttributesW``."""
    if os.name != "nt":
        raise OSError(errno.ENOTSUP, "file attributes are not supported", os.fspath(path))

    import ctypes

    if not ctypes.windll.kernel32.SetFileAttributesW(os.fspath(path), attributes):
        raise ctypes.WinError()


def combine_attributes(current: int, mask: int, add: bool) -> int:
    """Union ``mask`` into ``current`` or clear its bits."""
    return current | mask if add else current & ~mask
