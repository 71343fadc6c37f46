"""Composition root wiring the dispatcher, signal router and shutdown path.

``bootstrap_runtime`` builds one ``OpsRuntime`` from configuration; the CLI
and embedding code only talk to the objects it returns.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from functools import partial

from ..config import OpsConfig, load_session_state, save_session_state
from ..confirmation import AskUser, prompt_yes_no
from ..ops import OperationDispatcher, OpsContext, create_context
from .mounts import MountRegistry
from .screen import ScreenState
from .shutdown import ShutdownSequencer
from .signals import SignalRouter
from .terminal import TerminalController


def persist_session(context: OpsContext) -> None:
    """Write the state worth keeping across restarts (trash bookkeeping)."""
    save_session_state({"trash": context.trash.to_state()})


@dataclass
class OpsRuntime:
    """Long-lived objects for one file-manager process."""

    context: OpsContext
    dispatcher: OperationDispatcher
    screen: ScreenState
    terminal: TerminalController
    mounts: MountRegistry
    shutdown: ShutdownSequencer
    router: SignalRouter

    def persist_state(self) -> None:
        persist_session(self.context)


def bootstrap_runtime(
    config: OpsConfig,
    ask: AskUser = prompt_yes_no,
    stdin_fd: int | None = None,
    stdout_fd: int | None = None,
    install_signals: bool = True,
) -> OpsRuntime:
    """Create and connect runtime collaborators.

    Trash bookkeeping is restored from the last persisted session. Signal
    handlers are installed unless ``install_signals`` is false.
    """
    context = create_context(config, ask=ask)
    context.trash.load_state(load_session_state().get("trash"))

    terminal = TerminalController(
        sys.stdin.fileno() if stdin_fd is None else stdin_fd,
        sys.stdout.fileno() if stdout_fd is None else stdout_fd,
    )
    screen = ScreenState(
        restore_terminal=terminal.reset_prog_mode,
        is_drawn=lambda: terminal.in_prog_mode,
    )
    mounts = MountRegistry()

    shutdown = ShutdownSequencer(
        restore_terminal=terminal.leave_prog_mode,
        clear_title=terminal.clear_title,
        unmount_all=mounts.unmount_all,
        persist_state=partial(persist_session, context),
    )
    router = SignalRouter(
        context.cancellation,
        context.children,
        screen,
        shutdown.shutdown,
        reinstate_interrupt_toggles=config.reinstate_interrupt_toggles,
    )
    context.runner.before_wait = router.interrupt_restart_off
    context.runner.after_wait = router.interrupt_restart_on

    runtime = OpsRuntime(
        context=context,
        dispatcher=OperationDispatcher(context),
        screen=screen,
        terminal=terminal,
        mounts=mounts,
        shutdown=shutdown,
        router=router,
    )
    if install_signals:
        router.install()
    return runtime
