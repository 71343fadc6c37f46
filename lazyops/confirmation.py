"""Session-wide confirmation of destructive actions.

``ConfirmationState`` remembers a granted permanent-deletion prompt so a
multi-item batch asks only once. ``prompt_yes_no`` is the default terminal asker.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from typing import TextIO

AskUser = Callable[[str, str], bool]


class ConfirmationState:
    def __init__(self) -> None:
        self.confirmed = False

    def reset(self) -> None:
        self.confirmed = False


def prompt_yes_no(
    title: str,
    message: str,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> bool:
    """Ask a yes/no question on the terminal; anything but ``y``/``yes`` declines.

    End of input counts as a decline.
    """
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout
    stdout.write(f"{title}: {message} [y/N] ")
    stdout.flush()
    answer = stdin.readline()
    if not answer:
        return False
    return answer.strip().lower() in {"y", "yes"}


def always_confirm(title: str, message: str) -> bool:
    return True
