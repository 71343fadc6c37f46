"""Operation dispatch: the entry point from abstract requests to file actions.

This package contains:
- ``OpsContext`` carrying configuration and shared flags through each call
- ``OperationDispatcher`` with one handler per operation kind
- attribute-mask helpers for targets without POSIX permissions
"""

from __future__ import annotations

from .context import OpsContext, create_context
from .dispatch import NO_CLOBBER, PRESERVE_FLAGS, OperationDispatcher

__all__ = [
    "NO_CLOBBER",
    "PRESERVE_FLAGS",
    "OperationDispatcher",
    "OpsContext",
    "create_context",
]
