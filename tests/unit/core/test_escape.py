"""Tests for the escaping contract and command assembly.

Escaped tokens must survive a round trip through ``shlex.split`` unchanged,
which is what ``sh`` will see.
"""

from __future__ import annotations

import shlex
import unittest
from pathlib import Path

from lazyops.escape import build_command, escape_filename, escape_paths


class EscapeTests(unittest.TestCase):
    def test_special_characters_survive_shell_splitting(self) -> None:
        for raw in ["/tmp/plain", "/tmp/with space", "/tmp/it's", "/tmp/$HOME;rm -rf /", "/tmp/new\nline"]:
            escaped = escape_filename(raw)
            self.assertIsNotNone(escaped)
            self.assertEqual(shlex.split(escaped), [raw])

    def test_leading_dash_gets_dot_slash_prefix(self) -> None:
        self.assertEqual(escape_filename("-rf"), "./-rf")

    def test_unrepresentable_paths_fail(self) -> None:
        self.assertIsNone(escape_filename(""))
        self.assertIsNone(escape_filename("/tmp/a\0b"))

    def test_accepts_path_objects(self) -> None:
        self.assertEqual(escape_filename(Path("/tmp/a b")), "'/tmp/a b'")

    def test_escape_paths_fails_as_a_whole(self) -> None:
        self.assertEqual(escape_paths("/a", "/b c"), ["/a", "'/b c'"])
        self.assertIsNone(escape_paths("/a", "bad\0"))

    def test_build_command_drops_empty_flags(self) -> None:
        self.assertEqual(build_command(["mv", "", "/a", "'/b c'"]), "mv /a '/b c'")


if __name__ == "__main__":
    unittest.main()
