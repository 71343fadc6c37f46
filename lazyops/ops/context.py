"""Explicit state threaded through every dispatched operation.

Replaces process-wide globals: configuration, cancellation, confirmation,
trash ledger and the background runner all travel in one ``OpsContext``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from ..background import BackgroundRunner, ChildRegistry
from ..cancellation import CancellationState
from ..config import OpsConfig
from ..confirmation import AskUser, ConfirmationState, prompt_yes_no
from ..trash import TrashLedger


@dataclass
class OpsContext:
    """Collaborators and shared flags consulted by ``OperationDispatcher``."""

    config: OpsConfig
    cancellation: CancellationState
    runner: BackgroundRunner
    trash: TrashLedger
    confirmation: ConfirmationState = field(default_factory=ConfirmationState)
    ask: AskUser = prompt_yes_no

    @property
    def children(self) -> ChildRegistry:
        return self.runner.children


def create_context(
    config: OpsConfig | None = None,
    ask: AskUser = prompt_yes_no,
    before_wait: Callable[[], None] | None = None,
    after_wait: Callable[[], None] | None = None,
) -> OpsContext:
    """Wire a fresh context with its own cancellation flag and child registry.

    ``before_wait``/``after_wait`` bracket every blocking external-process
    wait (the interrupt-restart toggles of the signal layer).
    """
    config = OpsConfig() if config is None else config
    cancellation = CancellationState()
    runner = BackgroundRunner(
        cancellation,
        ChildRegistry(),
        before_wait=before_wait,
        after_wait=after_wait,
    )
    return OpsContext(
        config=config,
        cancellation=cancellation,
        runner=runner,
        trash=TrashLedger(config.trash_dir),
        ask=ask,
    )
