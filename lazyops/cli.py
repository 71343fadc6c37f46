"""Command-line front door for lazyops.

Parses one operation request, wires the runtime (config, logging, signals),
and runs it as a single-item session. Exit status reflects the outcome.
"""

from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path

from .config import load_ops_config
from .confirmation import always_confirm, prompt_yes_no
from .estimator import ProgressEstimator
from .kinds import (
    OP_CANCELLED,
    OP_FAILED,
    OP_OK,
    OPERATION_DESCRIPTIONS,
    SKIP_UNDO_REDO_OPERATION,
    OperationKind,
    parse_kind,
)
from .log import DEFAULT_LOG_PATH, setup_logging
from .session import OperationSession

EXIT_FAILED = 1
EXIT_CANCELLED = 130

STATUS_LABELS = {
    OP_OK: "done",
    OP_FAILED: "failed",
    OP_CANCELLED: "cancelled",
    SKIP_UNDO_REDO_OPERATION: "skipped",
}

TWO_PATH_KINDS = frozenset(
    {
        OperationKind.COPY,
        OperationKind.COPYF,
        OperationKind.MOVE,
        OperationKind.MOVEF,
        OperationKind.MOVETMP1,
        OperationKind.MOVETMP2,
        OperationKind.MOVETMP3,
        OperationKind.MOVETMP4,
        OperationKind.SYMLINK,
        OperationKind.SYMLINK2,
    }
)


def _nonnegative_int(value: str) -> int:
    """argparse type for ids and masks (decimal, ``0x`` or ``0o`` prefixes)."""
    try:
        parsed = int(value, 0)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def _required(value: object, flag: str, kind: OperationKind) -> object:
    if value is None:
        raise SystemExit(f"{kind.value} requires {flag}.")
    return value


def operation_data(kind: OperationKind, args: argparse.Namespace) -> object:
    """Build the dispatcher's auxiliary ``data`` value for ``kind``.

    ``None`` keeps the call interactively cancellable.
    """
    if kind is OperationKind.CHOWN:
        return _required(args.uid, "--uid", kind)
    if kind is OperationKind.CHGRP:
        return _required(args.gid, "--gid", kind)
    if kind.value in {"chmod", "chmodr"}:
        return _required(args.mode, "--mode", kind)
    if kind.value in {"addattr", "subattr"}:
        return _required(args.mask, "--mask", kind)
    if kind is OperationKind.MKDIR:
        return True if args.parents else None
    return None


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Perform one file operation the way the file manager does."
    )
    parser.add_argument("kind", nargs="?", help="Operation kind (see --list-kinds).")
    parser.add_argument("src", nargs="?", help="Source path.")
    parser.add_argument("dst", nargs="?", help="Destination path for two-path kinds.")
    parser.add_argument("--list-kinds", action="store_true", help="List operation kinds and exit.")
    strategy = parser.add_mutually_exclusive_group()
    strategy.add_argument("--native", action="store_true", help="Use in-process filesystem calls.")
    strategy.add_argument("--shell", action="store_true", help="Use external commands (POSIX only).")
    parser.add_argument("--yes", action="store_true", help="Do not ask before permanent deletion.")
    parser.add_argument("--uid", type=_nonnegative_int, default=None, help="Owner id for chown.")
    parser.add_argument("--gid", type=_nonnegative_int, default=None, help="Group id for chgrp.")
    parser.add_argument("--mode", default=None, help="Mode string for chmod/chmodr (e.g. 644, u+x).")
    parser.add_argument("--mask", type=_nonnegative_int, default=None, help="Attribute mask for addattr/subattr.")
    parser.add_argument("--parents", action="store_true", help="Create missing parent directories for mkdir.")
    parser.add_argument("--log-level", default=None, help="Console log level (default from config).")
    parser.add_argument(
        "--log-file",
        nargs="?",
        const=str(DEFAULT_LOG_PATH),
        default=None,
        help=f"Also log to a rotating file (default: {DEFAULT_LOG_PATH}).",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and perform one operation.

    Exits with status 1 on failure and 130 on cancellation; a declined
    deletion prompt is not an error.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.list_kinds:
        for kind in OperationKind:
            sys.stdout.write(f"{kind.value:<10} {OPERATION_DESCRIPTIONS[kind]}\n")
        return

    if args.kind is None or args.src is None:
        parser.error("kind and src are required")
    try:
        kind = parse_kind(args.kind)
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc
    if kind in TWO_PATH_KINDS and args.dst is None:
        raise SystemExit(f"{kind.value} requires a destination path.")
    data = operation_data(kind, args)

    config = load_ops_config()
    if args.native or args.shell:
        config = dataclasses.replace(config, use_system_calls=args.native)
    setup_logging(args.log_level or config.log_level, args.log_file)

    from .runtime import bootstrap_runtime

    runtime = bootstrap_runtime(config, ask=always_confirm if args.yes else prompt_yes_no)

    src = Path(args.src).absolute()
    dst = None if args.dst is None else Path(args.dst).absolute()
    with OperationSession(kind, ProgressEstimator()) as session:
        session.enqueue(src)
        status = runtime.dispatcher.perform(kind, session, data, src, dst)
        session.advance(status == OP_OK)
        target = str(src) if dst is None else f"{src} -> {dst}"
        sys.stdout.write(f"{session.describe()} {target}: {STATUS_LABELS.get(status, 'failed')}\n")

    runtime.persist_state()
    if status == OP_CANCELLED:
        raise SystemExit(EXIT_CANCELLED)
    if status not in (OP_OK, SKIP_UNDO_REDO_OPERATION):
        raise SystemExit(EXIT_FAILED)


if __name__ == "__main__":
    main()
