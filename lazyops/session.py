"""Per-batch operation counters.

An ``OperationSession`` lives for one user-requested batch of file actions.
Items are enqueued before execution and advanced once each completes.
"""

from __future__ import annotations

import os

from .estimator import ProgressEstimator
from .kinds import OperationKind, describe


class SessionInvariantError(AssertionError):
    """Raised when processed/succeeded counters overtake what was enqueued."""


class OperationSession:
    """Track enqueued, processed and succeeded counts for one batch."""

    def __init__(self, main_op: OperationKind, estimator: ProgressEstimator | None = None) -> None:
        self.main_op = main_op
        self.total = 0
        self.current = 0
        self.succeeded = 0
        self.estim = estimator

    def describe(self) -> str:
        return describe(self.main_op)

    def enqueue(self, path: str | os.PathLike[str]) -> None:
        """Account for one more item and grow the estimator's expectations."""
        self.total += 1
        if self.estim is not None:
            self.estim.calculate(path)

    def advance(self, succeeded: bool) -> None:
        """Mark one enqueued item processed.

        Raises ``SessionInvariantError`` when called more times than
        ``enqueue``; the counters are left unchanged in that case.
        """
        if self.current + 1 > self.total:
            raise SessionInvariantError(
                f"Current and total are out of sync: {self.current + 1} > {self.total}"
            )
        self.current += 1
        if succeeded:
            self.succeeded += 1

    @property
    def failed(self) -> int:
        return self.current - self.succeeded

    @property
    def finished(self) -> bool:
        return self.current == self.total

    def release(self) -> None:
        """Release the owned estimator; safe to call repeatedly."""
        if self.estim is not None:
            self.estim.release()
            self.estim = None

    def __enter__(self) -> "OperationSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
