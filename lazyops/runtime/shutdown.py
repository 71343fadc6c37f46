"""Non-returning shutdown path for termination signals.

Steps run in a fixed order: restore the terminal, clear the title override,
unmount virtual filesystems, persist session state, print one diagnostic
line, then exit immediately without unwinding in-flight operations.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from typing import NoReturn, TextIO

from ..log import get_logger

logger = get_logger(__name__)

PROGRAM_NAME = "lazyops"
SHUTDOWN_EXIT_CODE = 1


class ShutdownSequencer:
    """Unwind UI state and terminate the process from signal context."""

    def __init__(
        self,
        restore_terminal: Callable[[], None],
        clear_title: Callable[[], None],
        unmount_all: Callable[[], object],
        persist_state: Callable[[], None],
        stdout: TextIO | None = None,
        exit_process: Callable[[int], object] = os._exit,
    ) -> None:
        self._steps: list[tuple[str, Callable[[], object]]] = [
            ("restore terminal", restore_terminal),
            ("clear terminal title", clear_title),
            ("unmount virtual filesystems", unmount_all),
            ("persist session state", persist_state),
        ]
        self._stdout = stdout
        self._exit_process = exit_process

    def shutdown(self, signum: int, description: str) -> NoReturn:
        logger.warning("Shutting down on signal %d (%s)", signum, description)
        for label, step in self._steps:
            try:
                step()
            except Exception:
                logger.exception("Shutdown step failed: %s", label)

        stdout = sys.stdout if self._stdout is None else self._stdout
        stdout.write(f"{PROGRAM_NAME} killed by signal: {signum} ({description}).\n")
        stdout.flush()
        self._exit_process(SHUTDOWN_EXIT_CODE)
        # Only reachable with an injected exit function that returns.
        raise SystemExit(SHUTDOWN_EXIT_CODE)
