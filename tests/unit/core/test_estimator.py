"""Tests for progress accumulation."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from lazyops.estimator import ProgressEstimator


class ProgressEstimatorTests(unittest.TestCase):
    def test_calculate_counts_tree_items_and_bytes(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp) / "tree"
            (root / "sub").mkdir(parents=True)
            (root / "a.bin").write_bytes(b"x" * 10)
            (root / "sub" / "b.bin").write_bytes(b"y" * 7)

            estimator = ProgressEstimator()
            estimator.calculate(root)

            # root, sub, a.bin, b.bin
            self.assertEqual(estimator.total_items, 4)
            self.assertEqual(estimator.total_bytes, 17)

    def test_calculate_ignores_missing_paths(self) -> None:
        estimator = ProgressEstimator()
        estimator.calculate("/nonexistent/lazyops/path")
        self.assertEqual(estimator.total_items, 0)

    def test_update_and_percent(self) -> None:
        estimator = ProgressEstimator()
        estimator.total_bytes = 200
        estimator.update("/tmp/a", 50)
        self.assertEqual(estimator.current_item, 1)
        self.assertEqual(estimator.item, Path("/tmp/a"))
        self.assertEqual(estimator.progress_percent(), 25)

    def test_percent_falls_back_to_items_and_clamps(self) -> None:
        estimator = ProgressEstimator()
        self.assertEqual(estimator.progress_percent(), 0)
        estimator.total_items = 2
        estimator.update("/tmp/a")
        self.assertEqual(estimator.progress_percent(), 50)
        estimator.update("/tmp/b")
        estimator.update("/tmp/c")
        self.assertEqual(estimator.progress_percent(), 100)

    def test_released_estimator_ignores_updates(self) -> None:
        estimator = ProgressEstimator()
        estimator.release()
        estimator.update("/tmp/a", 10)
        self.assertEqual(estimator.current_item, 0)


if __name__ == "__main__":
    unittest.main()
