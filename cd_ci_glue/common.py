"""
Script: cd_ci_glue/common.py
What: Shared helpers used by all `cd_ci_glue` modules.
Doing: Defines the error hierarchy, wraps command execution, and prints warnings.
Why: Avoids duplicated subprocess and error-reporting code.
Goal: Keep failure messages consistent and free of secrets across all operations.
"""

from __future__ import annotations

import subprocess
import sys
from typing import Sequence


REDACTED = "***"


class CiGlueError(RuntimeError):
    """Raised when a pipeline helper hits a known error condition."""


class MissingCredential(CiGlueError):
    """A credential or token environment variable is not set."""


class InvalidArgument(CiGlueError):
    """An operation was called with an empty or unusable argument."""


class AuthenticationFailure(CiGlueError):
    """The registry refused the credentials or returned no session token."""


class ExternalCommandFailure(CiGlueError):
    """An external tool or HTTP request failed."""


def warn(*lines: str) -> None:
    """
    Print a non-fatal warning block to stderr.

    The first line gets a `WARNING:` prefix and the rest are indented under it,
    followed by one blank line so consecutive warnings stay readable in CI logs.
    """
    if not lines:
        return
    print(f"WARNING: {lines[0]}", file=sys.stderr)
    for line in lines[1:]:
        print(f"         {line}", file=sys.stderr)
    print("", file=sys.stderr)


def redact(text: str, secrets: Sequence[str]) -> str:
    """Replace every non-empty secret in `text` with `***`."""
    for secret in secrets:
        if secret:
            text = text.replace(secret, REDACTED)
    return text


def run_cmd(
    args: Sequence[str],
    *,
    capture_output: bool = True,
    cwd: str | None = None,
    stdin_text: str | None = None,
    secrets: Sequence[str] = (),
) -> str:
    """
    Run a command and return stdout, raising a readable error on failure.

    `secrets` are masked in the error message (command line and output), so
    tokens embedded in URLs never reach the CI log.
    """
    try:
        result = subprocess.run(
            list(args),
            check=True,
            text=True,
            capture_output=capture_output,
            cwd=cwd,
            input=stdin_text,
        )
    except subprocess.CalledProcessError as exc:
        stderr = (exc.stderr or "").strip()
        stdout = (exc.stdout or "").strip()
        details = stderr or stdout or f"exit status {exc.returncode}"
        message = f"Command failed: {' '.join(args)}\n{details}"
        # `from None`: the original exception repr carries the raw arguments.
        raise ExternalCommandFailure(redact(message, secrets)) from None
    except OSError as exc:
        # Executable missing or cwd not accessible.
        message = f"Could not run command: {' '.join(args)}\n{exc}"
        raise ExternalCommandFailure(redact(message, secrets)) from None

    if not capture_output:
        return ""
    return result.stdout


def cmd_exit_status(args: Sequence[str], *, cwd: str | None = None) -> int:
    """Run a command for its exit status only (output is discarded)."""
    try:
        result = subprocess.run(list(args), capture_output=True, text=True, cwd=cwd)
    except OSError as exc:
        raise ExternalCommandFailure(f"Could not run command: {' '.join(args)}\n{exc}") from None
    return result.returncode
