"""Redraw bookkeeping written by signal handlers and read by the main loop."""

from __future__ import annotations

from collections.abc import Callable

# Status message persistence levels: 0 transient, 1 kept once, 2 pinned.
SAVE_MSG_TRANSIENT = 0
SAVE_MSG_PINNED = 2


class ScreenState:
    """Flags describing what the UI must do at its next safe point.

    Setters only assign attributes so they can run from signal handlers.
    ``take_redraw`` and ``take_full_update`` read-and-clear from the main
    context. With ``is_drawn`` the drawn state is read live from the terminal
    instead of the stored flag.
    """

    def __init__(
        self,
        restore_terminal: Callable[[], None] | None = None,
        is_drawn: Callable[[], bool] | None = None,
    ) -> None:
        self._drawn = False
        self.redraw_scheduled = False
        self.need_full_update = False
        self.save_msg = SAVE_MSG_TRANSIENT
        self._restore_terminal = restore_terminal
        self._is_drawn = is_drawn

    @property
    def drawn(self) -> bool:
        if self._is_drawn is not None:
            return bool(self._is_drawn())
        return self._drawn

    @drawn.setter
    def drawn(self, value: bool) -> None:
        self._drawn = bool(value)

    def schedule_redraw(self) -> None:
        self.redraw_scheduled = True

    def mark_full_update(self) -> None:
        self.need_full_update = True

    def restore_prog_mode(self) -> None:
        if self._restore_terminal is not None:
            self._restore_terminal()

    def take_redraw(self) -> bool:
        scheduled = self.redraw_scheduled
        self.redraw_scheduled = False
        return scheduled

    def take_full_update(self) -> bool:
        needed = self.need_full_update
        self.need_full_update = False
        return needed
