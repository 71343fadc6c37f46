"""Tests for the termination-signal shutdown path."""

from __future__ import annotations

import io
import unittest
from unittest import mock

from lazyops.runtime.shutdown import SHUTDOWN_EXIT_CODE, ShutdownSequencer


class ShutdownSequencerTests(unittest.TestCase):
    def _sequencer(self, calls: list[str], **overrides) -> tuple[ShutdownSequencer, io.StringIO, mock.Mock]:
        stdout = io.StringIO()
        exit_mock = mock.Mock(side_effect=lambda code: calls.append(f"exit {code}"))
        steps = {
            "restore_terminal": lambda: calls.append("restore"),
            "clear_title": lambda: calls.append("title"),
            "unmount_all": lambda: calls.append("unmount"),
            "persist_state": lambda: calls.append("persist"),
        }
        steps.update(overrides)
        return ShutdownSequencer(stdout=stdout, exit_process=exit_mock, **steps), stdout, exit_mock

    def test_steps_run_in_order_then_exit(self) -> None:
        calls: list[str] = []
        sequencer, stdout, exit_mock = self._sequencer(calls)

        with self.assertRaises(SystemExit) as raised:
            sequencer.shutdown(15, "Terminated")

        self.assertEqual(calls, ["restore", "title", "unmount", "persist", "exit 1"])
        exit_mock.assert_called_once_with(SHUTDOWN_EXIT_CODE)
        self.assertEqual(raised.exception.code, SHUTDOWN_EXIT_CODE)
        self.assertEqual(stdout.getvalue(), "lazyops killed by signal: 15 (Terminated).\n")

    def test_failing_step_does_not_stop_the_sequence(self) -> None:
        calls: list[str] = []

        def broken_unmount() -> None:
            raise OSError("busy")

        sequencer, stdout, exit_mock = self._sequencer(calls, unmount_all=broken_unmount)

        with self.assertLogs("lazyops.runtime.shutdown", level="ERROR") as logs, self.assertRaises(SystemExit):
            sequencer.shutdown(1, "Hangup")

        self.assertEqual(calls, ["restore", "title", "persist", "exit 1"])
        self.assertIn("unmount virtual filesystems", logs.output[0])
        self.assertIn("(Hangup)", stdout.getvalue())
        exit_mock.assert_called_once()


if __name__ == "__main__":
    unittest.main()
