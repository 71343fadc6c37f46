"""Process-level runtime: signals, shutdown, terminal and screen state.

Imports are lazy so that importing ``lazyops.runtime`` does not pull in
``termios`` on platforms that lack it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .app import OpsRuntime


def bootstrap_runtime(*args, **kwargs):
    """Lazily import the composition root to avoid package-import cycles."""
    from .app import bootstrap_runtime as _bootstrap_runtime

    return _bootstrap_runtime(*args, **kwargs)


def __getattr__(name: str):
    if name == "OpsRuntime":
        from . import app as _app

        return _app.OpsRuntime
    if name == "SignalRouter":
        from . import signals as _signals

        return _signals.SignalRouter
    if name == "ShutdownSequencer":
        from . import shutdown as _shutdown

        return _shutdown.ShutdownSequencer
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "OpsRuntime",
    "ShutdownSequencer",
    "SignalRouter",
    "bootstrap_runtime",
]
