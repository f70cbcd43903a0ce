"""
Script: cd_ci_glue/config.py
What: Holds the pipeline settings every operation needs.
Doing: Reads CI environment variables once into a frozen `GlueConfig`.
Why: Core logic receives explicit values instead of reading `os.environ` itself.
Goal: Make credential checks and predicates testable without touching the real environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from cd_ci_glue.common import MissingCredential


DEFAULT_DOCKERHUB_URL = "https://hub.docker.com/v2"

# Config field -> environment variable that feeds it.
ENV_NAMES = {
    "event_type": "TRAVIS_EVENT_TYPE",
    "branch": "TRAVIS_BRANCH",
    "docker_username": "DOCKER_USERNAME",
    "docker_password": "DOCKER_PASSWORD",
    "github_token": "GH_TOKEN",
}


@dataclass(frozen=True)
class GlueConfig:
    """
    Values sourced from the build environment.

    `None` means "variable not set". An empty string is kept as-is: for
    credentials only presence is checked, as the pipeline may legitimately
    export an empty value.
    """

    event_type: str | None = None
    branch: str | None = None
    docker_username: str | None = None
    docker_password: str | None = None
    github_token: str | None = None
    dockerhub_url: str = DEFAULT_DOCKERHUB_URL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "GlueConfig":
        env = os.environ if environ is None else environ
        values = {field: env.get(name) for field, name in ENV_NAMES.items()}
        dockerhub_url = env.get("_DOCKERHUB_URL") or DEFAULT_DOCKERHUB_URL
        return cls(dockerhub_url=dockerhub_url, **values)

    def require(self, *fields: str, operation: str) -> tuple[str, ...]:
        """
        Return the named credential values, or raise if any is unset.

        All missing variables are reported together so one failed run shows
        everything that needs fixing.
        """
        missing = [ENV_NAMES[field] for field in fields if getattr(self, field) is None]
        if missing:
            raise MissingCredential(
                f"{operation}: environment variable(s) {', '.join(missing)} not set. Aborting."
            )
        return tuple(getattr(self, field) for field in fields)
