"""Cooperative cancellation flag shared by signal handlers and long operations.

A region is entered with ``enable`` and left with ``disable``; the outermost
``enable`` starts a fresh region and clears any stale request. ``request`` only
assigns an attribute, which keeps it safe to call from a signal handler.
"""

from __future__ import annotations

import contextlib


class CancellationState:
    """Process-wide cancellation request plus cancellable-region depth."""

    def __init__(self) -> None:
        self._depth = 0
        self._requested = False

    @property
    def active(self) -> bool:
        """Whether a cancellable region is currently open."""
        return self._depth > 0

    @property
    def requested(self) -> bool:
        return self._requested

    def enable(self) -> None:
        if self._depth == 0:
            self._requested = False
        self._depth += 1

    def disable(self) -> None:
        """Leave one region level; a pending request stays set."""
        if self._depth == 0:
            raise RuntimeError("cancellation disabled more times than enabled")
        self._depth -= 1

    def request(self) -> None:
        self._requested = True

    def cancelled(self) -> bool:
        """Poll point: true when a request arrived inside an open region."""
        return self._depth > 0 and self._requested

    @contextlib.contextmanager
    def region(self, enabled: bool = True):
        """Bracket a block with ``enable``/``disable`` when ``enabled``."""
        if not enabled:
            yield self
            return
        self.enable()
        try:
            yield self
        finally:
            self.disable()
