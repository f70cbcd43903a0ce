"""
Script: cd_ci_glue/dockerhub.py
What: Publishes images and repository descriptions to Docker Hub.
Doing: Logs in with `docker login --password-stdin` and pushes, or logs in to the Hub HTTP API and PATCHes the description.
Why: Image publication and README sync used to be copy-pasted shell snippets in every pipeline.
Goal: Fail before any network call when inputs or credentials are missing, and never leak the password.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Protocol

import requests

from cd_ci_glue.common import (
    AuthenticationFailure,
    ExternalCommandFailure,
    InvalidArgument,
    run_cmd,
)
from cd_ci_glue.config import GlueConfig


REQUEST_TIMEOUT_S = 30.0


@dataclass(frozen=True)
class HttpResponse:
    status_code: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        return json.loads(self.text)


class HttpTransport(Protocol):
    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        body: str,
    ) -> HttpResponse: ...


class RequestsTransport:
    """`HttpTransport` backed by a `requests.Session`."""

    def __init__(self, timeout_s: float = REQUEST_TIMEOUT_S, session: requests.Session | None = None):
        self._timeout = float(timeout_s)
        self._http = session or requests.Session()

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        body: str,
    ) -> HttpResponse:
        try:
            resp = self._http.request(
                method,
                url,
                headers=dict(headers),
                data=body.encode("utf-8"),
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise ExternalCommandFailure(f"{method} {url} failed: {exc}") from exc
        return HttpResponse(status_code=resp.status_code, text=resp.text)

    def close(self) -> None:
        self._http.close()


class DockerHubApi:
    """Thin wrapper around the two Docker Hub v2 endpoints we use."""

    def __init__(self, base_url: str, transport: HttpTransport | None = None):
        self.base_url = base_url.rstrip("/")
        self.transport = transport or RequestsTransport()

    def close(self) -> None:
        close = getattr(self.transport, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "DockerHubApi":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def login(self, username: str, password: str) -> str:
        """Return a JWT session token for the given credentials."""
        resp = self.transport.request(
            "POST",
            f"{self.base_url}/users/login/",
            headers={"Content-Type": "application/json"},
            body=json.dumps({"username": username, "password": password}),
        )
        if not resp.ok:
            raise AuthenticationFailure(
                f"Unable to logon to Docker Hub (HTTP {resp.status_code}). "
                "DOCKER_USERNAME and/or DOCKER_PASSWORD incorrectly set. Aborting."
            )
        try:
            token = resp.json().get("token")
        except (ValueError, AttributeError):
            token = None
        if not token:
            raise AuthenticationFailure(
                "Unable to logon to Docker Hub using provided credentials: no token in response. "
                "DOCKER_USERNAME and/or DOCKER_PASSWORD incorrectly set. Aborting."
            )
        return str(token)

    def update_full_description(self, repository: str, token: str, payload: str) -> None:
        url = f"{self.base_url}/repositories/{repository}/"
        resp = self.transport.request(
            "PATCH",
            url,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"JWT {token}",
            },
            body=payload,
        )
        # Body is discarded; the status alone decides the outcome.
        if not resp.ok:
            raise ExternalCommandFailure(
                f"Docker Hub rejected description update for {repository} (HTTP {resp.status_code})"
            )


class DockerClient(Protocol):
    def login(self, username: str, password: str) -> None: ...

    def push(self, image: str) -> None: ...


class DockerCli:
    """`DockerClient` that shells out to the `docker` executable."""

    def login(self, username: str, password: str) -> None:
        # Password goes through stdin so it never shows up in `ps` or logs.
        run_cmd(
            ["docker", "login", "-u", username, "--password-stdin"],
            stdin_text=password,
            secrets=(password,),
        )

    def push(self, image: str) -> None:
        run_cmd(["docker", "push", image], capture_output=False)


def build_description_payload(text: str) -> str:
    """
    Build the PATCH body `{"full_description": "<text>"}`.

    `json.dumps` escapes backslashes, quotes, newlines and other control
    characters, so any README content yields a valid JSON document.
    """
    return json.dumps({"full_description": text})


def push_image(config: GlueConfig, image: str, docker: DockerClient | None = None) -> None:
    """
    Log in to Docker Hub and push `image` (for example `madworx/docshell:latest`).

    The image must already be built and tagged locally; the reference is passed
    to `docker push` verbatim.
    """
    username, password = config.require(
        "docker_username", "docker_password", operation="dockerhub-push-image"
    )
    docker = docker or DockerCli()
    docker.login(username, password)
    docker.push(image)
    print(f"Pushed image {image}")


def read_description(path: Path) -> str:
    """
    Return the file's full contents as text, byte for byte.

    Bytes are read as-is so CRLF line endings survive. Files that are not
    valid UTF-8 are decoded as Latin-1, which maps every byte to one character.
    """
    raw = path.read_bytes()
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw.decode("latin-1")


def _check_description_file(description_file: str) -> Path:
    path = Path(description_file) if description_file else None
    if path is None or not path.is_file() or not os.access(path, os.R_OK):
        raise InvalidArgument(
            "Argument 2 (file name containing description) missing, "
            f"or doesn't point to a readable file: {description_file!r}. Aborting."
        )
    return path


def _publish_description(
    api: DockerHubApi, username: str, password: str, repository: str, payload: str
) -> None:
    print("Logging onto Docker hub...")
    token = api.login(username, password)

    print(f"Setting Docker hub description of image {repository} ...")
    api.update_full_description(repository, token, payload)


def set_description(
    config: GlueConfig,
    repository: str,
    description_file: str,
    api: DockerHubApi | None = None,
) -> None:
    """Replace the full description of a Docker Hub repository with a file's contents."""
    if not repository:
        raise InvalidArgument("Missing argument 1 (repository name, e.g. madworx/docshell). Aborting.")
    path = _check_description_file(description_file)
    username, password = config.require(
        "docker_username", "docker_password", operation="dockerhub-set-description"
    )

    try:
        description = read_description(path)
    except OSError as exc:
        raise InvalidArgument(f"Could not read description file {path}: {exc}") from exc
    payload = build_description_payload(description)

    if api is None:
        with DockerHubApi(config.dockerhub_url) as owned_api:
            _publish_description(owned_api, username, password, repository, payload)
    else:
        _publish_description(api, username, password, repository, payload)
    print(f"Updated description of {repository} from {path}")
