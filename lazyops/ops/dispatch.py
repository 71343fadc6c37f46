"""Operation dispatch table.

Maps every ``OperationKind`` to one handler. Handlers either build a shell
command from escaped paths and wait on it, or fill an ``IoArgs`` bundle and
call the matching native primitive. The table is checked for completeness
when this module is imported.
"""

from __future__ import annotations

import os
import shlex
import sys
from collections.abc import Callable, Iterable
from pathlib import Path

from ..escape import build_command, escape_paths
from ..fsio import DEFAULT_DIR_MODE, ConflictPolicy, IoArgs, Primitive, cp, ln, mkdir, mkfile, mv, rm, rmdir
from ..kinds import IS_POSIX, OP_FAILED, OP_OK, SKIP_UNDO_REDO_OPERATION, OperationKind, describe
from ..log import get_logger
from ..session import OperationSession
from .attributes import combine_attributes, get_file_attributes, set_file_attributes
from .context import OpsContext

logger = get_logger(__name__)

NO_CLOBBER = "-n"
PRESERVE_FLAGS = "--preserve=mode,timestamps" if sys.platform.startswith("linux") else "-p"
REMOVE_PROMPT_TITLE = "Permanent deletion"
REMOVE_PROMPT_MESSAGE = (
    "Are you sure? If you are undoing a command and want to see file names, "
    "use the undo list."
)

PathArg = str | os.PathLike[str]
Handler = Callable[[OperationSession | None, object, Path, Path | None], int]

_HANDLER_NAMES: dict[OperationKind, str] = {
    OperationKind.NONE: "_op_none",
    OperationKind.USR: "_op_none",
    OperationKind.REMOVE: "_op_remove",
    OperationKind.REMOVESL: "_op_removesl",
    OperationKind.COPY: "_op_copy",
    OperationKind.COPYF: "_op_copyf",
    OperationKind.MOVE: "_op_move",
    OperationKind.MOVEF: "_op_movef",
    OperationKind.MOVETMP1: "_op_move",
    OperationKind.MOVETMP2: "_op_move",
    OperationKind.MOVETMP3: "_op_move",
    OperationKind.MOVETMP4: "_op_move",
    OperationKind.CHOWN: "_op_chown",
    OperationKind.CHGRP: "_op_chgrp",
    OperationKind.SYMLINK: "_op_symlink",
    OperationKind.SYMLINK2: "_op_symlink",
    OperationKind.MKDIR: "_op_mkdir",
    OperationKind.RMDIR: "_op_rmdir",
    OperationKind.MKFILE: "_op_mkfile",
}
if IS_POSIX:
    _HANDLER_NAMES[OperationKind.CHMOD] = "_op_chmod"
    _HANDLER_NAMES[OperationKind.CHMODR] = "_op_chmodr"
else:
    _HANDLER_NAMES[OperationKind.ADDATTR] = "_op_addattr"
    _HANDLER_NAMES[OperationKind.SUBATTR] = "_op_subattr"


def _as_id(data: object) -> int | None:
    """Return ``data`` as a non-negative integer id or mask, ``None`` if it is not one."""
    if isinstance(data, bool):
        return None
    if isinstance(data, int):
        return data if data >= 0 else None
    if isinstance(data, str) and data.strip().isdigit():
        return int(data.strip())
    return None


def _as_mode(data: object) -> str | None:
    if isinstance(data, bool) or data is None:
        return None
    mode = str(data).strip()
    return mode or None


def _bad_argument(name: str, what: str, data: object, src: Path) -> int:
    logger.error("%s of %s needs a %s, got %r", name, src, what, data)
    return OP_FAILED


class OperationDispatcher:
    """Perform operation kinds against an ``OpsContext``.

    ``data`` follows one convention across handlers: ``None`` marks the call
    as the user's interactively cancellable one, otherwise it carries the
    kind's auxiliary value (uid, gid, mode string, attribute mask, or any
    non-``None`` value meaning "create parents" for ``MKDIR``).
    """

    def __init__(self, context: OpsContext) -> None:
        self.context = context
        self._handlers: dict[OperationKind, Handler] = {
            kind: getattr(self, name) for kind, name in _HANDLER_NAMES.items()
        }

    @staticmethod
    def describe(kind: OperationKind) -> str:
        return describe(kind)

    def perform(
        self,
        kind: OperationKind,
        session: OperationSession | None,
        data: object,
        src: PathArg,
        dst: PathArg | None = None,
    ) -> int:
        """Run one operation; returns a status code, never raises for OS errors."""
        handler = self._handlers[kind]
        return handler(session, data, Path(src), None if dst is None else Path(dst))

    def _use_shell(self) -> bool:
        return IS_POSIX and not self.context.config.use_system_calls

    def _run_shell(self, name: str, parts: Iterable[str], cancellable: bool) -> int:
        command = build_command(parts)
        logger.info('Running %s command: "%s"', name, command)
        return self.context.runner.run_and_wait_for_errors(command, cancellable)

    def _exec_io_op(self, session: OperationSession | None, func: Primitive, args: IoArgs) -> int:
        """Call ``func`` inside a cancellation region when the call is cancellable."""
        args.estim = None if session is None else session.estim
        args.cancellation = self.context.cancellation
        with self.context.cancellation.region(args.cancellable):
            return func(args)

    def _update_trash(self, src: Path, dst: Path) -> None:
        trash = self.context.trash
        if trash.is_under_trash(dst):
            trash.add_to_trash(src, dst)
        elif trash.is_under_trash(src):
            trash.remove_from_trash(src)

    def _op_none(self, session, data, src, dst) -> int:
        return OP_OK

    def _op_remove(self, session, data, src, dst) -> int:
        context = self.context
        if context.config.confirm_deletion and not context.confirmation.confirmed:
            context.confirmation.confirmed = bool(context.ask(REMOVE_PROMPT_TITLE, REMOVE_PROMPT_MESSAGE))
            if not context.confirmation.confirmed:
                logger.info("Permanent deletion of %s declined", src)
                return SKIP_UNDO_REDO_OPERATION
        return self._op_removesl(session, data, src, dst)

    def _op_removesl(self, session, data, src, dst) -> int:
        cancellable = data is None
        if self._use_shell():
            escaped = escape_paths(src)
            if escaped is None:
                return OP_FAILED
            return self._run_shell("rm", ["rm", "-rf", *escaped], cancellable)

        return self._exec_io_op(session, rm, IoArgs(src=src, cancellable=cancellable))

    def _op_copy(self, session, data, src, dst) -> int:
        return self._cp(session, data, src, dst, overwrite=False)

    def _op_copyf(self, session, data, src, dst) -> int:
        return self._cp(session, data, src, dst, overwrite=True)

    def _cp(self, session, data, src: Path, dst: Path | None, overwrite: bool) -> int:
        if dst is None:
            return OP_FAILED
        cancellable = data is None
        if self._use_shell():
            escaped = escape_paths(src, dst)
            if escaped is None:
                return OP_FAILED
            parts = ["cp", "" if overwrite else NO_CLOBBER, "-R", PRESERVE_FLAGS, *escaped]
            return self._run_shell("cp", parts, cancellable)

        args = IoArgs(src=src, dst=dst, crs=ConflictPolicy.REPLACE_FILES, cancellable=cancellable)
        return self._exec_io_op(session, cp, args)

    def _op_move(self, session, data, src, dst) -> int:
        return self._mv(session, data, src, dst, overwrite=False)

    def _op_movef(self, session, data, src, dst) -> int:
        return self._mv(session, data, src, dst, overwrite=True)

    def _mv(self, session, data, src: Path, dst: Path | None, overwrite: bool) -> int:
        if dst is None:
            return OP_FAILED
        cancellable = data is None
        if self._use_shell():
            # mv -n is not reliable everywhere, so refuse before spawning.
            if not overwrite and os.path.lexists(dst):
                logger.error("Not moving %s: destination %s exists", src, dst)
                return OP_FAILED
            escaped = escape_paths(src, dst)
            if escaped is None:
                return OP_FAILED
            parts = ["mv", "" if overwrite else NO_CLOBBER, *escaped]
            result = self._run_shell("mv", parts, cancellable)
        else:
            args = IoArgs(src=src, dst=dst, crs=ConflictPolicy.REPLACE_FILES, cancellable=cancellable)
            result = self._exec_io_op(session, mv, args)

        if result != OP_OK:
            return result
        self._update_trash(src, dst)
        return OP_OK

    def _op_chown(self, session, data, src, dst) -> int:
        if not IS_POSIX:
            return OP_FAILED
        uid = _as_id(data)
        if uid is None:
            return _bad_argument("chown", "uid", data, src)
        escaped = escape_paths(src)
        if escaped is None:
            return OP_FAILED
        return self._run_shell("chown", ["chown", "-fR", str(uid), *escaped], True)

    def _op_chgrp(self, session, data, src, dst) -> int:
        if not IS_POSIX:
            return OP_FAILED
        gid = _as_id(data)
        if gid is None:
            return _bad_argument("chgrp", "gid", data, src)
        escaped = escape_paths(src)
        if escaped is None:
            return OP_FAILED
        return self._run_shell("chgrp", ["chown", "-fR", f":{gid}", *escaped], True)

    def _op_chmod(self, session, data, src, dst) -> int:
        mode = _as_mode(data)
        if mode is None:
            return _bad_argument("chmod", "mode", data, src)
        escaped = escape_paths(src)
        if escaped is None:
            return OP_FAILED
        return self._run_shell("chmod", ["chmod", shlex.quote(mode), *escaped], True)

    def _op_chmodr(self, session, data, src, dst) -> int:
        """Start ``chmod -R`` detached; unlike its siblings it does not wait."""
        mode = _as_mode(data)
        if mode is None:
            return _bad_argument("chmodr", "mode", data, src)
        escaped = escape_paths(src)
        if escaped is None:
            return OP_FAILED
        command = build_command(["chmod", "-R", shlex.quote(mode), *escaped])
        logger.info('Starting chmod job: "%s"', command)
        job = self.context.runner.start_background_job(command)
        return OP_FAILED if job is None else OP_OK

    def _op_addattr(self, session, data, src, dst) -> int:
        mask = _as_id(data)
        if mask is None:
            return _bad_argument("addattr", "attribute mask", data, src)
        return self._change_attributes(src, mask, add=True)

    def _op_subattr(self, session, data, src, dst) -> int:
        mask = _as_id(data)
        if mask is None:
            return _bad_argument("subattr", "attribute mask", data, src)
        return self._change_attributes(src, mask, add=False)

    def _change_attributes(self, src: Path, mask: int, add: bool) -> int:
        try:
            current = get_file_attributes(src)
            set_file_attributes(src, combine_attributes(current, mask, add))
        except OSError as exc:
            code = getattr(exc, "winerror", None) or exc.errno
            logger.error("Changing attributes of %s failed: [error %s] %s", src, code, exc.strerror)
            return OP_FAILED
        return OP_OK

    def _op_symlink(self, session, data, src, dst) -> int:
        if dst is None:
            return OP_FAILED
        if self._use_shell():
            escaped = escape_paths(src, dst)
            if escaped is None:
                return OP_FAILED
            return self._run_shell("ln", ["ln", "-s", *escaped], True)

        return self._exec_io_op(session, ln, IoArgs(src=src, dst=dst, crs=ConflictPolicy.REPLACE_FILES))

    def _op_mkdir(self, session, data, src, dst) -> int:
        if self._use_shell():
            escaped = escape_paths(src)
            if escaped is None:
                return OP_FAILED
            return self._run_shell("mkdir", ["mkdir", "" if data is None else "-p", *escaped], True)

        args = IoArgs(src=src, process_parents=data is not None, mode=DEFAULT_DIR_MODE)
        return self._exec_io_op(session, mkdir, args)

    def _op_rmdir(self, session, data, src, dst) -> int:
        if self._use_shell():
            escaped = escape_paths(src)
            if escaped is None:
                return OP_FAILED
            return self._run_shell("rmdir", ["rmdir", *escaped], True)

        return self._exec_io_op(session, rmdir, IoArgs(src=src))

    def _op_mkfile(self, session, data, src, dst) -> int:
        if self._use_shell():
            escaped = escape_paths(src)
            if escaped is None:
                return OP_FAILED
            return self._run_shell("touch", ["touch", *escaped], True)

        return self._exec_io_op(session, mkfile, IoArgs(src=src))


def _verify_handler_table() -> None:
    """Fail at import time unless every kind has exactly one bound handler."""
    missing = [kind.name for kind in OperationKind if kind not in _HANDLER_NAMES]
    unknown = [name for name in _HANDLER_NAMES.values() if not callable(getattr(OperationDispatcher, name, None))]
    if missing or unknown:
        raise RuntimeError(f"incomplete operation table: missing={missing} unknown={unknown}")


_verify_handler_table()
