"""Asynchronous signal routing for the file-operation core.

Handlers stay minimal: they flip flags on the cancellation and screen state,
reap registered children without blocking, or hand off to the shutdown
sequencer. Real work happens later in the main context.
"""

from __future__ import annotations

import os
import signal
import warnings
from collections.abc import Callable

from ..background import ChildRegistry
from ..cancellation import CancellationState
from ..log import get_logger
from .screen import SAVE_MSG_PINNED, SAVE_MSG_TRANSIENT, ScreenState

logger = get_logger(__name__)

HANDLED_SIGNAL_NAMES = ("SIGCHLD", "SIGHUP", "SIGINT", "SIGQUIT", "SIGCONT", "SIGTERM", "SIGWINCH")
IGNORED_SIGNAL_NAMES = ("SIGUSR1", "SIGUSR2", "SIGALRM", "SIGTSTP")
TERMINATION_SIGNAL_NAMES = ("SIGHUP", "SIGQUIT", "SIGTERM")

# Windows console control events (wincon.h).
CTRL_C_EVENT = 0
CTRL_BREAK_EVENT = 1
CTRL_CLOSE_EVENT = 2
CTRL_LOGOFF_EVENT = 5
CTRL_SHUTDOWN_EVENT = 6

_CONSOLE_SHUTDOWN_EVENTS = {
    CTRL_CLOSE_EVENT: "Ctrl-C",
    CTRL_LOGOFF_EVENT: "Logoff",
    CTRL_SHUTDOWN_EVENT: "Shutdown",
}

ShutdownCallback = Callable[[int, str], object]


def _signal_number(name: str) -> int | None:
    value = getattr(signal, name, None)
    return None if value is None else int(value)


def describe_signal(signum: int) -> str:
    """Return the platform's description of ``signum``."""
    try:
        description = signal.strsignal(signum)
    except ValueError:
        description = None
    if description:
        return description
    try:
        return signal.Signals(signum).name
    except ValueError:
        return f"signal {signum}"


class SignalRouter:
    """Install OS signal handlers and route each signal to its handoff."""

    def __init__(
        self,
        cancellation: CancellationState,
        children: ChildRegistry,
        screen: ScreenState,
        shutdown: ShutdownCallback,
        reinstate_interrupt_toggles: bool = False,
    ) -> None:
        self.cancellation = cancellation
        self.children = children
        self.screen = screen
        self.shutdown = shutdown
        self.reinstate_interrupt_toggles = reinstate_interrupt_toggles
        self.installed = False
        self._console_handler = None
        self._termination_signals = {
            number for number in map(_signal_number, TERMINATION_SIGNAL_NAMES) if number is not None
        }

    def install(self) -> None:
        """Register handlers once; later calls are no-ops.

        Assumes a shell with job control: terminal signals the shell wanted
        ignored become handled here.
        """
        if self.installed:
            return
        if os.name == "nt":
            self._install_console_handler()
            signal.signal(signal.SIGINT, signal.SIG_IGN)
        else:
            for name in HANDLED_SIGNAL_NAMES:
                signum = _signal_number(name)
                signal.signal(signum, self.handle_signal)
                signal.siginterrupt(signum, False)
            for name in IGNORED_SIGNAL_NAMES:
                signal.signal(_signal_number(name), signal.SIG_IGN)
        self.installed = True

    def _install_console_handler(self) -> None:
        import ctypes

        handler_type = ctypes.WINFUNCTYPE(ctypes.c_int, ctypes.c_uint)
        self._console_handler = handler_type(lambda event: int(self.handle_console_event(event)))
        if not ctypes.windll.kernel32.SetConsoleCtrlHandler(self._console_handler, True):
            logger.error("SetConsoleCtrlHandler failed: [error %s]", ctypes.GetLastError())

    def handle_signal(self, signum: int, frame=None) -> None:
        if signum == _signal_number("SIGINT"):
            self.cancellation.request()
        elif signum == _signal_number("SIGCHLD"):
            self.children.reap()
        elif signum == _signal_number("SIGWINCH"):
            self._on_resize()
        elif signum == _signal_number("SIGCONT"):
            self.screen.restore_prog_mode()
            self.screen.schedule_redraw()
        elif signum in self._termination_signals:
            self.shutdown(signum, describe_signal(signum))

    def _on_resize(self) -> None:
        if self.screen.save_msg != SAVE_MSG_PINNED:
            self.screen.save_msg = SAVE_MSG_TRANSIENT
        if self.screen.drawn:
            self.screen.schedule_redraw()
        else:
            self.screen.mark_full_update()

    def handle_console_event(self, event: int) -> bool:
        """Dispatch a console control event; always reports it as handled."""
        if event in (CTRL_C_EVENT, CTRL_BREAK_EVENT):
            self.cancellation.request()
        elif event in _CONSOLE_SHUTDOWN_EVENTS:
            self.shutdown(event, _CONSOLE_SHUTDOWN_EVENTS[event])
        return True

    def interrupt_restart_off(self) -> None:
        """Let SIGINT interrupt system calls while an external process is awaited.

        Disabled: returns immediately unless ``reinstate_interrupt_toggles``
        is configured.
        """
        if not self.reinstate_interrupt_toggles:
            return
        warnings.warn(
            "interrupt-restart toggles are reinstated: SIGINT now interrupts blocking waits",
            RuntimeWarning,
            stacklevel=2,
        )
        signal.siginterrupt(signal.SIGINT, True)

    def interrupt_restart_on(self) -> None:
        """Restore restart-on-signal for SIGINT after an external-process wait.

        Disabled like ``interrupt_restart_off``.
        """
        if not self.reinstate_interrupt_toggles:
            return
        warnings.warn(
            "interrupt-restart toggles are reinstated: SIGINT restarts system calls again",
            RuntimeWarning,
            stacklevel=2,
        )
        signal.siginterrupt(signal.SIGINT, False)
