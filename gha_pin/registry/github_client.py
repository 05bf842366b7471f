"""
Thin GitHub REST API client: releases, git refs and tag objects.

Authentication is optional. A token is taken from GITHUB_TOKEN, GH_TOKEN or
the GitHub CLI (`gh auth token`), in that order; without one the client runs
unauthenticated with GitHub's lower rate limit.
"""

import logging
import os
import subprocess
import time
from typing import Any, Optional

import requests

from gha_pin import __version__
from gha_pin.config import DEFAULT_API_URL, DEFAULT_TIMEOUT
from gha_pin.errors import RateLimitError, RegistryError, ReleaseNotFoundError

logger = logging.getLogger(__name__)

TOKEN_ENV_VARS = ("GITHUB_TOKEN", "GH_TOKEN")


def _token_from_gh_cli() -> str:
    try:
        output = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            check=True,
            timeout=10,
        ).stdout
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("gh CLI token unavailable: %s", e)
        return ""
    return output.strip()


def get_github_token() -> tuple[str, str]:
    """
    Find a GitHub token.

    Returns:
        (token, source) where source names where the token came from.
        Both are empty strings when no token is available.
    """
    for name in TOKEN_ENV_VARS:
        token = os.environ.get(name, "").strip()
        if token:
            return token, name

    token = _token_from_gh_cli()
    if token:
        return token, "gh CLI"

    return "", ""


class GitHubClient:
    """Blocking GitHub API client; one instance per run."""

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.authenticated = bool(token)
        self.session = session or requests.Session()
        self._headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": f"gha-pin/{__version__}",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            self._headers["Authorization"] = f"Bearer {token}"

    def _get(self, path: str) -> Optional[Any]:
        """GET an API path. Returns parsed JSON, or None on 404."""
        url = f"{self.api_url}{path}"
        t0 = time.monotonic()
        try:
            response = self.session.get(url, headers=self._headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("GitHub API request failed: GET %s: %s", path, e)
            raise RegistryError(f"GET {path} failed: {e}") from e

        elapsed_ms = (time.monotonic() - t0) * 1000
        logger.debug("GET %s -> %d in %.0fms", path, response.status_code, elapsed_ms)

        if response.status_code == 404:
            return None
        if response.status_code == 429 or (
            response.status_code == 403
            and response.headers.get("X-RateLimit-Remaining") == "0"
        ):
            reset = response.headers.get("X-RateLimit-Reset")
            raise RateLimitError(int(reset) if reset and reset.isdigit() else None)
        if not response.ok:
            raise RegistryError(f"GET {path} returned HTTP {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise RegistryError(f"GET {path} returned invalid JSON: {e}") from e

    def get_latest_release(self, owner: str, repo: str) -> dict[str, Any]:
        """Latest non-prerelease, non-draft release of owner/repo."""
        release = self._get(f"/repos/{owner}/{repo}/releases/latest")
        if not isinstance(release, dict):
            raise ReleaseNotFoundError(owner, repo)
        return release

    def get_ref(self, owner: str, repo: str, ref: str) -> Optional[dict[str, Any]]:
        """A single git ref such as "tags/v4" or "heads/main", or None."""
        data = self._get(f"/repos/{owner}/{repo}/git/ref/{ref}")
        return data if isinstance(data, dict) else None

    def get_tag(self, owner: str, repo: str, sha: str) -> Optional[dict[str, Any]]:
        """An annotated tag object by its SHA, or None."""
        data = self._get(f"/repos/{owner}/{repo}/git/tags/{sha}")
        return data if isinstance(data, dict) else None
