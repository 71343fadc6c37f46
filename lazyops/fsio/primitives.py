"""In-process filesystem primitives used by the native strategy.

Each primitive takes an ``IoArgs`` bundle and returns ``OP_OK``,
``OP_FAILED`` (OS error, logged with errno) or ``OP_CANCELLED``. Recursive
walks poll cancellation once per entry; partial results are left on disk.
"""

from __future__ import annotations

import errno
import os
import shutil
from collections.abc import Callable
from pathlib import Path

from ..kinds import OP_CANCELLED, OP_FAILED, OP_OK
from ..log import get_logger
from .types import DEFAULT_DIR_MODE, ConflictPolicy, IoArgs

logger = get_logger(__name__)

Primitive = Callable[[IoArgs], int]


def _is_real_dir(path: Path) -> bool:
    return path.is_dir() and not path.is_symlink()


def _lsize(path: Path) -> int:
    try:
        return int(path.lstat().st_size)
    except OSError:
        return 0


def _same_entry(first: Path, second: Path) -> bool:
    """Whether both paths lstat to the same device and inode."""
    try:
        a = os.lstat(first)
        b = os.lstat(second)
    except OSError:
        return False
    return (a.st_dev, a.st_ino) == (b.st_dev, b.st_ino)


def _same_file_error(path: Path) -> FileExistsError:
    return FileExistsError(errno.EEXIST, "source and destination are the same file", str(path))


def _run_guarded(name: str, args: IoArgs, body: Callable[[], int]) -> int:
    """Run ``body`` and map ``OSError`` to a logged ``OP_FAILED``."""
    try:
        status = body()
    except OSError as exc:
        logger.error(
            "%s failed for %s: [errno %s] %s",
            name,
            exc.filename or args.src,
            exc.errno,
            exc.strerror,
        )
        return OP_FAILED
    if status == OP_CANCELLED:
        logger.info("%s cancelled at %s", name, args.src)
    return status


def _remove_tree(path: Path, args: IoArgs) -> int:
    if args.cancelled():
        return OP_CANCELLED
    if _is_real_dir(path):
        with os.scandir(path) as it:
            children = sorted(Path(entry.path) for entry in it)
        for child in children:
            status = _remove_tree(child, args)
            if status != OP_OK:
                return status
        os.rmdir(path)
        args.report(path)
        return OP_OK
    size = _lsize(path)
    os.unlink(path)
    args.report(path, size)
    return OP_OK


def _clear_destination(path: Path, args: IoArgs) -> int:
    """Make room at ``path`` according to the conflict policy."""
    if not os.path.lexists(path):
        return OP_OK
    if args.crs is not ConflictPolicy.REPLACE_FILES:
        raise FileExistsError(errno.EEXIST, os.strerror(errno.EEXIST), str(path))
    if _is_real_dir(path):
        return _remove_tree(path, args)
    os.unlink(path)
    return OP_OK


def _copy_tree(src: Path, dst: Path, args: IoArgs) -> int:
    if args.cancelled():
        return OP_CANCELLED
    if _same_entry(src, dst):
        raise _same_file_error(dst)

    if src.is_symlink():
        status = _clear_destination(dst, args)
        if status != OP_OK:
            return status
        os.symlink(os.readlink(src), dst)
        args.report(src)
        return OP_OK

    if src.is_dir():
        if os.path.lexists(dst) and not _is_real_dir(dst):
            status = _clear_destination(dst, args)
            if status != OP_OK:
                return status
        dst.mkdir(exist_ok=True)
        with os.scandir(src) as it:
            names = sorted(entry.name for entry in it)
        for name in names:
            status = _copy_tree(src / name, dst / name, args)
            if status != OP_OK:
                return status
        shutil.copystat(src, dst, follow_symlinks=False)
        args.report(src)
        return OP_OK

    if _is_real_dir(dst):
        status = _clear_destination(dst, args)
        if status != OP_OK:
            return status
    shutil.copy2(src, dst, follow_symlinks=False)
    args.report(src, _lsize(src))
    return OP_OK


def rm(args: IoArgs) -> int:
    """Remove a file, symlink or whole directory tree."""

    def body() -> int:
        if not os.path.lexists(args.src):
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(args.src))
        return _remove_tree(args.src, args)

    return _run_guarded("rm", args, body)


def cp(args: IoArgs) -> int:
    """Copy ``src`` to ``dst`` recursively, preserving mode and timestamps.

    With ``KEEP_EXISTING`` an existing top-level destination fails the copy
    before anything is written.
    """
    assert args.dst is not None, "cp requires a destination"

    def body() -> int:
        if os.path.lexists(args.dst) and args.crs is not ConflictPolicy.REPLACE_FILES:
            raise FileExistsError(errno.EEXIST, os.strerror(errno.EEXIST), str(args.dst))
        return _copy_tree(args.src, args.dst, args)

    return _run_guarded("cp", args, body)


def mv(args: IoArgs) -> int:
    """Move ``src`` to ``dst``, falling back to copy+remove across devices."""
    assert args.dst is not None, "mv requires a destination"

    def body() -> int:
        if not os.path.lexists(args.src):
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(args.src))
        # A destination sharing the source inode is never cleared first.
        if not _same_entry(args.src, args.dst):
            status = _clear_destination(args.dst, args)
            if status != OP_OK:
                return status
        if args.cancelled():
            return OP_CANCELLED
        size = _lsize(args.src)
        try:
            os.rename(args.src, args.dst)
        except OSError as exc:
            if exc.errno != errno.EXDEV:
                raise
            status = _copy_tree(args.src, args.dst, args)
            if status != OP_OK:
                return status
            return _remove_tree(args.src, args)
        args.report(args.src, size)
        return OP_OK

    return _run_guarded("mv", args, body)


def ln(args: IoArgs) -> int:
    """Create a symlink at ``dst`` pointing to ``src``."""
    assert args.dst is not None, "ln requires a link path"

    def body() -> int:
        if _same_entry(args.src, args.dst):
            raise _same_file_error(args.dst)
        status = _clear_destination(args.dst, args)
        if status != OP_OK:
            return status
        os.symlink(args.src, args.dst)
        return OP_OK

    return _run_guarded("ln", args, body)


def mkdir(args: IoArgs) -> int:
    """Create a directory; ``process_parents`` behaves like ``mkdir -p``."""
    mode = DEFAULT_DIR_MODE if args.mode is None else args.mode

    def body() -> int:
        if args.process_parents:
            os.makedirs(args.src, mode=mode, exist_ok=True)
        else:
            os.mkdir(args.src, mode)
        return OP_OK

    return _run_guarded("mkdir", args, body)


def rmdir(args: IoArgs) -> int:
    def body() -> int:
        os.rmdir(args.src)
        return OP_OK

    return _run_guarded("rmdir", args, body)


def mkfile(args: IoArgs) -> int:
    """Create an empty file, failing if anything already exists at ``src``."""

    def body() -> int:
        fd = os.open(args.src, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o666)
        os.close(fd)
        return OP_OK

    return _run_guarded("mkfile", args, body)
