from __future__ import annotations

import io
import unittest

from lazyops.confirmation import ConfirmationState, always_confirm, prompt_yes_no


class ConfirmationTests(unittest.TestCase):
    def test_prompt_accepts_yes_variants(self) -> None:
        for answer in ("y\n", "YES\n", " yes \n"):
            out = io.StringIO()
            self.assertTrue(prompt_yes_no("Permanent deletion", "Sure?", io.StringIO(answer), out))
            self.assertEqual(out.getvalue(), "Permanent deletion: Sure? [y/N] ")

    def test_prompt_declines_by_default_and_on_eof(self) -> None:
        self.assertFalse(prompt_yes_no("t", "m", io.StringIO("\n"), io.StringIO()))
        self.assertFalse(prompt_yes_no("t", "m", io.StringIO("nope\n"), io.StringIO()))
        self.assertFalse(prompt_yes_no("t", "m", io.StringIO(""), io.StringIO()))

    def test_state_reset(self) -> None:
        state = ConfirmationState()
        state.confirmed = True
        state.reset()
        self.assertFalse(state.confirmed)
        self.assertTrue(always_confirm("t", "m"))


if __name__ == "__main__":
    unittest.main()
