from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from cd_ci_glue.branch_push import is_branch_push, is_master_push
from cd_ci_glue.common import CiGlueError
from cd_ci_glue.config import GlueConfig
from cd_ci_glue.dockerhub import push_image, set_description
from cd_ci_glue.github_docs import commit, commit_wiki, prepare_pages, prepare_wiki
from cd_ci_glue.vcs import GitCli


@dataclass(frozen=True)
class Command:
    """One CLI command: handler plus the names of its positional arguments."""

    handler: Callable[..., int]
    arguments: tuple[str, ...] = ()
    help: str = ""


def _git_for(config: GlueConfig) -> GitCli:
    return GitCli(secrets=(config.github_token,) if config.github_token else ())


def _is_branch_push(config: GlueConfig, branch: str) -> int:
    return 0 if is_branch_push(config, branch) else 1


def _is_master_push(config: GlueConfig) -> int:
    return 0 if is_master_push(config) else 1


def _dockerhub_push_image(config: GlueConfig, image: str) -> int:
    push_image(config, image)
    return 0


def _dockerhub_set_description(config: GlueConfig, repository: str, description_file: str) -> int:
    set_description(config, repository, description_file)
    return 0


def _github_wiki_prepare(config: GlueConfig, repository: str) -> int:
    # stdout carries only the path so scripts can use `DIR=$(... github-wiki-prepare ...)`.
    print(prepare_wiki(config, repository, vcs=_git_for(config)))
    return 0


def _github_pages_prepare(config: GlueConfig, repository: str) -> int:
    print(prepare_pages(config, repository, vcs=_git_for(config)))
    return 0


def _github_doc_commit(config: GlueConfig, workspace: str) -> int:
    commit(workspace, vcs=_git_for(config))
    return 0


def _github_wiki_commit(config: GlueConfig, workspace: str) -> int:
    commit_wiki(workspace, vcs=_git_for(config))
    return 0


def command_map() -> dict[str, Command]:
    """
    Map CLI command names to handlers.

    Handlers take the config followed by their positional arguments and
    return the process exit code.
    """
    return {
        "is-branch-push": Command(
            _is_branch_push, ("branch",), "Exit 0 if this build is a push to BRANCH."
        ),
        "is-master-push": Command(_is_master_push, (), "Exit 0 if this build is a push to master."),
        "dockerhub-push-image": Command(
            _dockerhub_push_image, ("image",), "Log in to Docker Hub and push IMAGE."
        ),
        "dockerhub-set-description": Command(
            _dockerhub_set_description,
            ("repository", "description_file"),
            "Set a Docker Hub repository's full description from a file.",
        ),
        "github-wiki-prepare": Command(
            _github_wiki_prepare, ("repository",), "Clone the wiki of REPOSITORY and print its path."
        ),
        "github-pages-prepare": Command(
            _github_pages_prepare,
            ("repository",),
            "Clone the gh-pages branch of REPOSITORY and print its path.",
        ),
        "github-doc-commit": Command(
            _github_doc_commit, ("workspace",), "Commit and push a prepared documentation directory."
        ),
        "github-wiki-commit": Command(
            _github_wiki_commit, ("workspace",), "Deprecated alias of github-doc-commit."
        ),
    }


def build_parser(commands: Mapping[str, Command]) -> argparse.ArgumentParser:
    """Build argument parser with one sub-command per registered command."""
    parser = argparse.ArgumentParser(
        prog="python3 -m cd_ci_glue.cli",
        description="Run one CI/CD glue command.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    for name in sorted(commands):
        command = commands[name]
        sub = subparsers.add_parser(name, help=command.help, description=command.help)
        for argument in command.arguments:
            sub.add_argument(argument)
    return parser


def run_command(
    command: str,
    arguments: Mapping[str, str],
    commands: Mapping[str, Command],
    config: GlueConfig,
) -> int:
    """
    Run one registered command and return its exit code.

    `commands` and `config` are passed in to keep this function easy to test.
    """
    target = commands[command]
    values = [arguments[name] for name in target.arguments]
    return target.handler(config, *values)


def main(argv: list[str] | None = None) -> None:
    # Build command registry once so parser and dispatcher use the same keys.
    commands = command_map()
    parser = build_parser(commands)
    args = parser.parse_args(argv)
    # The environment is read here and nowhere else.
    config = GlueConfig.from_env()

    try:
        exit_code = run_command(args.command, vars(args), commands, config)
    except CiGlueError as exc:
        # Keep failures short and readable in pipeline logs.
        print(f"FATAL: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
