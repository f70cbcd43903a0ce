from __future__ import annotations

import io
import sys
import unittest
from contextlib import redirect_stderr

from cd_ci_glue.common import (
    CiGlueError,
    ExternalCommandFailure,
    MissingCredential,
    cmd_exit_status,
    redact,
    run_cmd,
    warn,
)


class RunCmdTests(unittest.TestCase):
    def test_returns_stdout(self) -> None:
        out = run_cmd([sys.executable, "-c", "print('hello')"])
        self.assertEqual(out.strip(), "hello")

    def test_feeds_stdin(self) -> None:
        out = run_cmd(
            [sys.executable, "-c", "import sys; print(sys.stdin.read().upper())"],
            stdin_text="secret",
        )
        self.assertEqual(out.strip(), "SECRET")

    def test_failure_message_is_redacted(self) -> None:
        script = "import sys; sys.stderr.write('bad token tok-123'); sys.exit(3)"
        with self.assertRaises(ExternalCommandFailure) as ctx:
            run_cmd([sys.executable, "-c", script, "tok-123"], secrets=("tok-123",))
        message = str(ctx.exception)
        self.assertNotIn("tok-123", message)
        self.assertIn("bad token ***", message)
        self.assertIsNone(ctx.exception.__cause__)

    def test_missing_executable_is_command_failure(self) -> None:
        with self.assertRaises(ExternalCommandFailure):
            run_cmd(["definitely-not-a-real-binary-xyz"])

    def test_exit_status(self) -> None:
        self.assertEqual(cmd_exit_status([sys.executable, "-c", "raise SystemExit(1)"]), 1)


class HelperTests(unittest.TestCase):
    def test_redact_ignores_empty_secrets(self) -> None:
        self.assertEqual(redact("abc", ("", "b")), "a***c")

    def test_warn_formats_block(self) -> None:
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            warn("first", "second")
        self.assertEqual(stderr.getvalue(), "WARNING: first\n         second\n\n")

    def test_error_kinds_share_base_class(self) -> None:
        self.assertTrue(issubclass(MissingCredential, CiGlueError))
        self.assertTrue(issubclass(ExternalCommandFailure, CiGlueError))


if __name__ == "__main__":
    unittest.main()
