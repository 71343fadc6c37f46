"""External-process execution for shell-strategy operations.

Blocking commands are waited on with cancellation polling and their stderr is
treated as failure. Detached jobs are tracked in a ``ChildRegistry`` that the
SIGCHLD handler reaps and notifies.
"""

from __future__ import annotations

import os
import signal
import subprocess
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass

from .cancellation import CancellationState
from .kinds import OP_CANCELLED, OP_FAILED, OP_OK
from .log import get_logger

logger = get_logger(__name__)

# Exit code reported for children terminated by a signal rather than exit().
KILLED_BY_SIGNAL = -1
WAIT_POLL_SECONDS = 0.05

ExitCallback = Callable[[int, int], None]


def decode_wait_status(status: int) -> int | None:
    """Map a raw ``waitpid`` status to an exit code, ``None`` if still running."""
    if os.WIFEXITED(status):
        return os.WEXITSTATUS(status)
    if os.WIFSIGNALED(status):
        return KILLED_BY_SIGNAL
    return None


def _terminate(process: subprocess.Popen) -> None:
    """Ask the child and anything it spawned to exit."""
    if os.name != "posix":
        process.terminate()
        return
    try:
        os.killpg(process.pid, signal.SIGTERM)
    except ProcessLookupError:
        pass


class ChildRegistry:
    """Pending background children keyed by pid.

    ``notify_exited`` only appends to a deque, so it may run from a signal
    handler. ``dispatch_pending`` drains the deque and fires each pid's
    callback exactly once.
    """

    def __init__(self) -> None:
        self._callbacks: dict[int, ExitCallback] = {}
        self._exited: deque[tuple[int, int]] = deque()

    def register(self, pid: int, callback: ExitCallback) -> None:
        self._callbacks[pid] = callback

    def __contains__(self, pid: object) -> bool:
        return pid in self._callbacks

    def pids(self) -> list[int]:
        return list(self._callbacks)

    def notify_exited(self, pid: int, exit_code: int) -> None:
        self._exited.append((pid, exit_code))

    def dispatch_pending(self) -> int:
        """Invoke callbacks for exited children; returns how many fired."""
        fired = 0
        while self._exited:
            pid, exit_code = self._exited.popleft()
            callback = self._callbacks.pop(pid, None)
            if callback is None:
                continue
            callback(pid, exit_code)
            fired += 1
        return fired

    def reap(self) -> int:
        """Collect every registered child that has exited, without blocking.

        Only registered pids are waited on so ``subprocess`` keeps ownership
        of the children it spawned for blocking commands.
        """
        for pid in list(self._callbacks):
            try:
                waited_pid, status = os.waitpid(pid, os.WNOHANG)
            except ChildProcessError:
                continue
            if waited_pid == 0:
                continue
            exit_code = decode_wait_status(status)
            if exit_code is not None:
                self.notify_exited(pid, exit_code)
        return self.dispatch_pending()


@dataclass
class BackgroundJob:
    """Detached command started without waiting for completion."""

    command: str
    process: subprocess.Popen
    exit_code: int | None = None

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def finished(self) -> bool:
        return self.exit_code is not None


class BackgroundRunner:
    """Spawn shell commands, either waiting for errors or fire-and-forget."""

    def __init__(
        self,
        cancellation: CancellationState,
        children: ChildRegistry,
        before_wait: Callable[[], None] | None = None,
        after_wait: Callable[[], None] | None = None,
        poll_seconds: float = WAIT_POLL_SECONDS,
    ) -> None:
        self.cancellation = cancellation
        self.children = children
        self.before_wait = before_wait
        self.after_wait = after_wait
        self.poll_seconds = poll_seconds
        self.jobs: list[BackgroundJob] = []

    def run_and_wait_for_errors(self, command: str, cancellable: bool) -> int:
        """Run ``command`` through ``sh`` and block until it exits.

        A non-zero exit or any stderr output is a failure. When ``cancellable``
        the wait opens a cancellation region; a request terminates the child,
        which is still waited for before ``OP_CANCELLED`` is returned.
        """
        try:
            process = subprocess.Popen(
                command,
                shell=True,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                start_new_session=os.name == "posix",
            )
        except OSError as exc:
            logger.error("Failed to start %r: [errno %s] %s", command, exc.errno, exc.strerror)
            return OP_FAILED

        cancelled = False
        with self.cancellation.region(cancellable):
            if self.before_wait is not None:
                self.before_wait()
            try:
                while True:
                    try:
                        _stdout, stderr = process.communicate(timeout=self.poll_seconds)
                        break
                    except subprocess.TimeoutExpired:
                        if cancellable and self.cancellation.cancelled():
                            logger.info("Cancelling %r (pid %d)", command, process.pid)
                            _terminate(process)
                            _stdout, stderr = process.communicate()
                            cancelled = True
                            break
            finally:
                if self.after_wait is not None:
                    self.after_wait()

        if cancelled:
            return OP_CANCELLED
        errors = (stderr or "").strip()
        if process.returncode != 0 or errors:
            logger.error(
                "Command %r failed with exit code %s: %s",
                command,
                process.returncode,
                errors or "<no stderr>",
            )
            return OP_FAILED
        return OP_OK

    def start_background_job(
        self,
        command: str,
        on_finished: ExitCallback | None = None,
    ) -> BackgroundJob | None:
        """Start ``command`` detached and return its job handle.

        Completion is reported through the child registry when SIGCHLD is
        routed there. Returns ``None`` when the command cannot be spawned.
        """
        try:
            process = subprocess.Popen(
                command,
                shell=True,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            logger.error("Failed to start background job %r: [errno %s] %s", command, exc.errno, exc.strerror)
            return None

        job = BackgroundJob(command=command, process=process)
        self.jobs.append(job)

        def finished(pid: int, exit_code: int) -> None:
            job.exit_code = exit_code
            # The pid is already reaped; keep Popen from waiting on it again.
            job.process.returncode = exit_code
            logger.info("Background job %r (pid %d) finished with %d", command, pid, exit_code)
            if on_finished is not None:
                on_finished(pid, exit_code)

        self.children.register(process.pid, finished)
        # The child may have exited before it was registered.
        if os.name != "nt":
            self.children.reap()
        return job
