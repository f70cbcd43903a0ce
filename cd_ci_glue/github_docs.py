"""
Script: cd_ci_glue/github_docs.py
What: Prepares and commits GitHub documentation checkouts (wiki repo or `gh-pages` branch).
Doing: Clones into a fresh temp directory, hands that path to the caller, then stages, commits and pushes whatever the caller wrote there.
Why: Doc generators only need a directory to write into; the git plumbing lives here.
Goal: One prepare/commit cycle per workspace, where "nothing changed" is a normal successful outcome.
"""

from __future__ import annotations

import enum
import shutil
import sys
import tempfile
from pathlib import Path

from cd_ci_glue.common import CiGlueError, InvalidArgument, warn
from cd_ci_glue.config import GlueConfig
from cd_ci_glue.vcs import GitCli, VcsClient


GITHUB_HOST = "github.com"
WIKI_SUFFIX = ".wiki.git"
PAGES_BRANCH = "gh-pages"
COMMIT_USER_NAME = "Travis CI"
COMMIT_USER_EMAIL = "support@travis-ci.org"
COMMIT_MESSAGE = "Automated documentation update"
WORKSPACE_PREFIX = "cd-ci-glue-"


class CommitOutcome(enum.Enum):
    NOTHING_TO_COMMIT = "nothing-to-commit"
    PUSHED = "pushed"


def clone_url(token: str, repository: str) -> str:
    """Authenticated HTTPS clone URL, e.g. `https://<token>@github.com/madworx/docshell`."""
    return f"https://{token}@{GITHUB_HOST}/{repository}"


def prepare(
    config: GlueConfig,
    repository: str,
    branch: str | None = None,
    vcs: VcsClient | None = None,
    operation: str = "prepare",
) -> str:
    """
    Clone `repository` into a new temporary directory and return its path.

    The clone gets a local commit identity and, when `branch` is given, that
    branch checked out. The caller owns the directory from here on; it is not
    deleted after a successful prepare. `operation` names the command in
    credential errors.
    """
    (token,) = config.require("github_token", operation=operation)
    if not repository:
        raise InvalidArgument("Argument 1 (repository name, e.g. madworx/docshell) not set. Aborting.")

    vcs = vcs or GitCli(secrets=(token,))
    workspace = tempfile.mkdtemp(prefix=WORKSPACE_PREFIX)
    try:
        vcs.clone(clone_url(token, repository), workspace)
        vcs.set_identity(workspace, COMMIT_USER_NAME, COMMIT_USER_EMAIL)
        if branch:
            vcs.checkout_branch(workspace, branch)
    except CiGlueError:
        # A half-prepared clone is not a usable handle; don't leave it behind.
        shutil.rmtree(workspace, ignore_errors=True)
        raise

    print(f"Prepared {repository} in {workspace}", file=sys.stderr)
    return workspace


def prepare_wiki(config: GlueConfig, repository: str, vcs: VcsClient | None = None) -> str:
    """
    Prepare the wiki repository of `repository` with all existing pages removed.

    The caller regenerates the full wiki; pages it doesn't write again get
    deleted on commit.
    """
    (token,) = config.require("github_token", operation="github-wiki-prepare")
    if not repository:
        raise InvalidArgument("Argument 1 (repository name, e.g. madworx/docshell) not set. Aborting.")
    vcs = vcs or GitCli(secrets=(token,))
    workspace = prepare(
        config, f"{repository}{WIKI_SUFFIX}", vcs=vcs, operation="github-wiki-prepare"
    )
    try:
        vcs.remove_all_tracked(workspace)
    except CiGlueError as exc:
        # An empty wiki has nothing to remove.
        warn(f"Could not clear existing wiki pages in {workspace}.", str(exc))
    return workspace


def prepare_pages(config: GlueConfig, repository: str, vcs: VcsClient | None = None) -> str:
    return prepare(
        config, repository, branch=PAGES_BRANCH, vcs=vcs, operation="github-pages-prepare"
    )


def commit(workspace: str, vcs: VcsClient | None = None) -> CommitOutcome:
    """
    Stage everything in `workspace`, commit it and push.

    When the working tree has no changes, returns `NOTHING_TO_COMMIT`
    without committing or pushing.
    """
    if not workspace:
        raise InvalidArgument("Argument 1 (temporary directory) not set. Aborting.")
    if not Path(workspace).is_dir():
        raise InvalidArgument(f"Workspace directory {workspace} does not exist or is not a directory.")

    vcs = vcs or GitCli()
    vcs.stage_all(workspace)
    if not vcs.has_staged_changes(workspace):
        print(f"No documentation changes in {workspace}; nothing to commit.")
        return CommitOutcome.NOTHING_TO_COMMIT

    vcs.commit(workspace, COMMIT_MESSAGE)
    vcs.push(workspace)
    print(f"Pushed documentation update from {workspace}")
    return CommitOutcome.PUSHED


def commit_wiki(workspace: str, vcs: VcsClient | None = None) -> CommitOutcome:
    """Deprecated: use `commit`, which handles wiki and pages checkouts alike."""
    warn("github-wiki-commit is deprecated.", "Use github-doc-commit instead.")
    return commit(workspace, vcs=vcs)
