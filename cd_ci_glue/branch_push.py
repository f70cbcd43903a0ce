"""
Script: cd_ci_glue/branch_push.py
What: Tells whether the current build was triggered by a push to one branch.
Doing: Compares the CI event type and branch name from `GlueConfig`.
Why: Pipelines only publish images and docs for pushes to selected branches.
Goal: Give scripts a predicate that never aborts the build.
"""

from __future__ import annotations

from cd_ci_glue.common import warn
from cd_ci_glue.config import GlueConfig


PUSH_EVENT = "push"
MASTER_BRANCH = "master"


def is_branch_push(config: GlueConfig, branch_name: str) -> bool:
    """
    True only for a push event on exactly `branch_name` (case-sensitive).

    Missing CI variables produce a warning and count as "not a push".
    """
    if config.event_type is None:
        warn(
            "CI environment variable TRAVIS_EVENT_TYPE not set.",
            "Unable to identify if this commit is related to PR or merge.",
        )
    if config.branch is None:
        warn(
            "CI environment variable TRAVIS_BRANCH not set.",
            f"We'll assume this isn't related to a push on the `{branch_name}' branch.",
        )
    return config.event_type == PUSH_EVENT and config.branch == branch_name


def is_master_push(config: GlueConfig) -> bool:
    return is_branch_push(config, MASTER_BRANCH)
