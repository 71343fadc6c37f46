"""Terminal control helpers for the file-manager session.

Owns raw/cooked mode transitions, alternate-screen switching, and the window
title override. Shutdown and SIGCONT handling go through this controller.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty


class TerminalController:
    """Manage terminal mode transitions and the title override."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state and bind stdin/stdout file descriptors.

        A non-tty stdin leaves nothing to restore; mode switches then only
        emit escape sequences.
        """
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        try:
            self._saved_tty_state = termios.tcgetattr(stdin_fd)
        except termios.error:
            self._saved_tty_state = None
        self._prog_mode = False
        self._title_set = False

    @property
    def in_prog_mode(self) -> bool:
        return self._prog_mode

    def enable_prog_mode(self) -> None:
        """Enter raw alternate-screen mode used while the UI is drawn."""
        if self._saved_tty_state is not None:
            tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        # Enter alternate screen and hide cursor.
        os.write(self.stdout_fd, b"\x1b[?1049h\x1b[?25l")
        self._prog_mode = True

    def restore_cooked_mode(self) -> None:
        """Restore the saved terminal state and the main screen buffer."""
        # Show cursor and restore the main screen buffer.
        os.write(self.stdout_fd, b"\x1b[?25h\x1b[?1049l")
        self._prog_mode = False
        if self._saved_tty_state is not None:
            termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    def leave_prog_mode(self) -> None:
        """Restore cooked mode only when program mode is active."""
        if self._prog_mode:
            self.restore_cooked_mode()

    def reset_prog_mode(self) -> None:
        """Re-apply program mode after the process was stopped and resumed."""
        if self._prog_mode:
            self.enable_prog_mode()

    def set_title(self, title: str) -> None:
        cleaned = "".join(ch for ch in title if ch.isprintable())
        os.write(self.stdout_fd, f"\x1b]2;{cleaned}\x07".encode("utf-8", errors="replace"))
        self._title_set = True

    def clear_title(self) -> None:
        """Drop our title override; no-op when none was set."""
        if not self._title_set:
            return
        os.write(self.stdout_fd, b"\x1b]2;\x07")
        self._title_set = False

    @contextlib.contextmanager
    def prog_mode(self):
        """Context manager that brackets code with prog/cooked mode switches."""
        try:
            self.enable_prog_mode()
            yield
        finally:
            self.restore_cooked_mode()
