"""Tests for batch counters and their invariants."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from lazyops.estimator import ProgressEstimator
from lazyops.kinds import OperationKind
from lazyops.session import OperationSession, SessionInvariantError


class OperationSessionTests(unittest.TestCase):
    def test_enqueue_then_advance_succeeded_n_times(self) -> None:
        session = OperationSession(OperationKind.COPY)
        for index in range(5):
            session.enqueue(f"/tmp/item-{index}")
        for _ in range(5):
            session.advance(True)

        self.assertEqual(session.total, 5)
        self.assertEqual(session.current, 5)
        self.assertEqual(session.succeeded, 5)
        self.assertTrue(session.finished)
        self.assertEqual(session.failed, 0)

    def test_failed_items_are_processed_but_not_succeeded(self) -> None:
        session = OperationSession(OperationKind.REMOVE)
        session.enqueue("/tmp/a")
        session.enqueue("/tmp/b")
        session.advance(True)
        session.advance(False)

        self.assertEqual(session.current, 2)
        self.assertEqual(session.succeeded, 1)
        self.assertEqual(session.failed, 1)

    def test_advancing_past_enqueued_is_detected(self) -> None:
        session = OperationSession(OperationKind.MOVE)
        session.enqueue("/tmp/a")
        session.advance(True)

        with self.assertRaises(SessionInvariantError):
            session.advance(True)
        self.assertEqual(session.current, 1)
        self.assertEqual(session.succeeded, 1)

    def test_advance_without_enqueue_is_detected(self) -> None:
        with self.assertRaises(AssertionError):
            OperationSession(OperationKind.MKDIR).advance(False)

    def test_enqueue_feeds_estimator(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "a.txt").write_bytes(b"12345")
            estimator = ProgressEstimator()
            session = OperationSession(OperationKind.COPY, estimator)
            session.enqueue(root / "a.txt")

            self.assertEqual(estimator.total_items, 1)
            self.assertEqual(estimator.total_bytes, 5)

    def test_release_frees_owned_estimator_once(self) -> None:
        estimator = ProgressEstimator()
        with OperationSession(OperationKind.COPY, estimator) as session:
            self.assertIs(session.estim, estimator)
        self.assertTrue(estimator.released)
        self.assertIsNone(session.estim)
        session.release()

    def test_describe_uses_main_operation(self) -> None:
        self.assertEqual(OperationSession(OperationKind.COPYF).describe(), "Copying")


if __name__ == "__main__":
    unittest.main()
