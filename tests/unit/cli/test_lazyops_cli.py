"""Command-line behavior: argument validation, strategy override, exit codes."""

from __future__ import annotations

import io
import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazyops import cli
from lazyops.kinds import OP_CANCELLED, OP_FAILED, OperationKind
from lazyops.runtime import app


class CliTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.tmp = Path(self._tmp.name)
        self.config_path = self.tmp / "config.json"
        self.config_path.write_text(
            json.dumps({"trash_dir": str(self.tmp / "Trash"), "confirm_deletion": True}),
            encoding="utf-8",
        )
        self.bootstrapped: list[app.OpsRuntime] = []
        real_bootstrap = app.bootstrap_runtime

        def quiet_bootstrap(config, ask):
            with mock.patch("lazyops.runtime.terminal.termios.tcgetattr", return_value=[0]):
                runtime = real_bootstrap(config, ask=ask, stdin_fd=0, stdout_fd=1, install_signals=False)
            self.bootstrapped.append(runtime)
            return runtime

        for patcher in (
            mock.patch("lazyops.config.CONFIG_PATH", self.config_path),
            mock.patch("lazyops.config.SESSION_STATE_PATH", self.tmp / "session.json"),
            mock.patch("lazyops.cli.setup_logging"),
            mock.patch("lazyops.runtime.app.bootstrap_runtime", side_effect=quiet_bootstrap),
        ):
            patcher.start()
            self.addCleanup(patcher.stop)

    def run_cli(self, *argv: str) -> str:
        stdout = io.StringIO()
        with mock.patch("sys.stdout", stdout):
            cli.main(list(argv))
        return stdout.getvalue()


class CliListingTests(CliTestCase):
    def test_list_kinds_prints_every_kind(self) -> None:
        output = self.run_cli("--list-kinds")
        lines = output.splitlines()
        self.assertEqual(len(lines), len(OperationKind))
        self.assertTrue(any(line.startswith("movef") and line.endswith("Moving") for line in lines))
        self.assertEqual(self.bootstrapped, [])


class CliValidationTests(CliTestCase):
    def test_unknown_kind_exits_with_message(self) -> None:
        with self.assertRaises(SystemExit) as raised:
            self.run_cli("shred", str(self.tmp))
        self.assertIn("shred", str(raised.exception.code))

    def test_two_path_kind_requires_destination(self) -> None:
        with self.assertRaises(SystemExit) as raised:
            self.run_cli("copy", str(self.tmp / "a"))
        self.assertEqual(raised.exception.code, "copy requires a destination path.")

    def test_chown_requires_uid(self) -> None:
        with self.assertRaises(SystemExit) as raised:
            self.run_cli("chown", str(self.tmp))
        self.assertEqual(raised.exception.code, "chown requires --uid.")

    def test_operation_data_conventions(self) -> None:
        parser = cli._build_parser()
        args = parser.parse_args(["mkdir", "x", "--parents", "--uid", "0x10"])
        self.assertIs(cli.operation_data(OperationKind.MKDIR, args), True)
        self.assertEqual(cli.operation_data(OperationKind.CHOWN, args), 16)
        self.assertIsNone(cli.operation_data(OperationKind.REMOVE, args))

    def test_strategy_flags_are_exclusive(self) -> None:
        with mock.patch("sys.stderr", io.StringIO()), self.assertRaises(SystemExit) as raised:
            self.run_cli("--native", "--shell", "mkdir", str(self.tmp / "d"))
        self.assertEqual(raised.exception.code, 2)


class CliOperationTests(CliTestCase):
    def test_native_mkdir_with_parents(self) -> None:
        target = self.tmp / "a" / "b"
        output = self.run_cli("--native", "mkdir", str(target), "--parents")

        self.assertTrue(target.is_dir())
        self.assertEqual(output, f"Mkdir {target}: done\n")
        self.assertTrue(self.bootstrapped[0].context.config.use_system_calls)

    def test_native_copy(self) -> None:
        src = self.tmp / "src.txt"
        src.write_text("payload", encoding="utf-8")
        dst = self.tmp / "dst.txt"

        output = self.run_cli("--native", "copy", str(src), str(dst))

        self.assertEqual(dst.read_text(encoding="utf-8"), "payload")
        self.assertEqual(output, f"Copying {src} -> {dst}: done\n")

    def test_yes_skips_deletion_prompt_and_persists_session(self) -> None:
        victim = self.tmp / "victim"
        victim.mkdir()
        with mock.patch("lazyops.cli.prompt_yes_no") as prompt_mock:
            self.run_cli("--native", "--yes", "remove", str(victim))

        prompt_mock.assert_not_called()
        self.assertFalse(victim.exists())
        self.assertTrue((self.tmp / "session.json").exists())

    def test_declined_deletion_is_not_an_error(self) -> None:
        victim = self.tmp / "victim.txt"
        victim.write_text("keep", encoding="utf-8")
        with mock.patch("lazyops.cli.prompt_yes_no", return_value=False):
            output = self.run_cli("--native", "remove", str(victim))

        self.assertTrue(victim.exists())
        self.assertEqual(output, f"Deleting {victim}: skipped\n")

    def test_failure_exits_with_status_one(self) -> None:
        with self.assertRaises(SystemExit) as raised:
            self.run_cli("--native", "rmdir", str(self.tmp / "missing"))
        self.assertEqual(raised.exception.code, cli.EXIT_FAILED)

    def test_cancellation_exits_with_status_130(self) -> None:
        with mock.patch(
            "lazyops.ops.dispatch.OperationDispatcher.perform", return_value=OP_CANCELLED
        ), self.assertRaises(SystemExit) as raised:
            self.run_cli("--native", "removesl", str(self.tmp / "x"))
        self.assertEqual(raised.exception.code, cli.EXIT_CANCELLED)

    def test_failed_status_is_reported(self) -> None:
        with mock.patch("lazyops.ops.dispatch.OperationDispatcher.perform", return_value=OP_FAILED):
            stdout = io.StringIO()
            with mock.patch("sys.stdout", stdout), self.assertRaises(SystemExit):
                cli.main(["--native", "mkfile", str(self.tmp / "f")])
        self.assertTrue(stdout.getvalue().endswith(": failed\n"))


if __name__ == "__main__":
    unittest.main()
