"""
Script: cd_ci_glue/vcs.py
What: Version-control operations used by the documentation workflow.
Doing: Defines the `VcsClient` interface and a `GitCli` implementation that shells out to `git`.
Why: Every call takes the workspace path explicitly, so nothing changes the process working directory.
Goal: Let the workflow run against real git in pipelines and an in-memory fake in tests.
"""

from __future__ import annotations

from typing import Protocol, Sequence

from cd_ci_glue.common import ExternalCommandFailure, cmd_exit_status, run_cmd


class VcsClient(Protocol):
    def clone(self, url: str, destination: str) -> None: ...

    def set_identity(self, workspace: str, name: str, email: str) -> None: ...

    def checkout_branch(self, workspace: str, branch: str) -> None: ...

    def remove_all_tracked(self, workspace: str) -> None: ...

    def stage_all(self, workspace: str) -> None: ...

    def has_staged_changes(self, workspace: str) -> bool: ...

    def commit(self, workspace: str, message: str) -> None: ...

    def push(self, workspace: str) -> None: ...


class GitCli:
    """
    `VcsClient` backed by the `git` executable.

    `secrets` are masked in error messages; pass the token embedded in clone
    URLs so a failed clone or push does not print it.
    """

    def __init__(self, secrets: Sequence[str] = ()):
        self.secrets = tuple(secrets)

    def _git(self, workspace: str | None, *args: str) -> str:
        return run_cmd(["git", *args], cwd=workspace, secrets=self.secrets)

    def clone(self, url: str, destination: str) -> None:
        self._git(None, "clone", "-q", url, destination)

    def set_identity(self, workspace: str, name: str, email: str) -> None:
        # --local keeps the identity inside this clone only.
        self._git(workspace, "config", "--local", "user.email", email)
        self._git(workspace, "config", "--local", "user.name", name)

    def checkout_branch(self, workspace: str, branch: str) -> None:
        self._git(workspace, "checkout", "-q", branch)

    def remove_all_tracked(self, workspace: str) -> None:
        self._git(workspace, "rm", "-r", "-q", "--ignore-unmatch", ".")

    def stage_all(self, workspace: str) -> None:
        self._git(workspace, "add", "-A", ".")

    def has_staged_changes(self, workspace: str) -> bool:
        # `git diff --cached --quiet` exits 1 when the index differs from HEAD.
        # On an unborn branch there is no HEAD, so compare against the empty tree.
        if cmd_exit_status(["git", "rev-parse", "--verify", "-q", "HEAD"], cwd=workspace) != 0:
            return bool(self._git(workspace, "ls-files", "--cached").strip())
        status = cmd_exit_status(["git", "diff", "--cached", "--quiet"], cwd=workspace)
        if status not in (0, 1):
            raise ExternalCommandFailure(
                f"Command failed: git diff --cached --quiet (exit status {status}) in {workspace}"
            )
        return status == 1

    def commit(self, workspace: str, message: str) -> None:
        self._git(workspace, "commit", "-q", "-m", message)

    def push(self, workspace: str) -> None:
        # Push the checked-out branch to the branch of the same name on origin.
        self._git(workspace, "push", "-q", "origin", "HEAD")
