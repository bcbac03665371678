"""
github_client.py

Responsibility: Isolate all direct GitHub REST API interaction.

Only used to look up repository metadata (description, license) that the local
README does not carry. Everything else stays offline.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import requests

logger = logging.getLogger(__name__)


class GitHubError(RuntimeError):
    pass


@dataclass(frozen=True)
class RepoInfo:
    owner: str
    name: str
    description: str
    html_url: str
    clone_url: str
    license_name: str = ""
    default_branch: str = "main"


class GitHubClient:
    def __init__(self, token: str | None = None, api_base: str = "https://api.github.com") -> None:
        self._token = (token or "").strip()
        self._api_base = api_base.rstrip("/")

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "greadme",
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _request(self, method: str, path: str) -> Any:
        url = f"{self._api_base}{path}"
        try:
            r = requests.request(method, url, headers=self._headers(), timeout=30)
        except requests.RequestException as e:
            raise GitHubError(f"GitHub API request failed {method} {path}: {e}") from e
        if r.status_code >= 400:
            try:
                payload = r.json()
            except ValueError:
                payload = {"message": r.text}
            raise GitHubError(f"GitHub API error {r.status_code} {method} {path}: {payload.get('message', payload)}")
        return r.json()

    def get_repo(self, owner: str, name: str) -> RepoInfo | None:
        """
        Return RepoInfo if the repo exists and is accessible; otherwise None.
        """
        try:
            data = self._request("GET", f"/repos/{owner}/{name}")
        except GitHubError as e:
            if "error 404" in str(e).lower():
                logger.info("GitHub repository %s/%s not found", owner, name)
                return None
            raise

        license_data = data.get("license") or {}
        return RepoInfo(
            owner=owner,
            name=name,
            description=str(data.get("description") or ""),
            html_url=data["html_url"],
            clone_url=data["clone_url"],
            license_name=str(license_data.get("name") or ""),
            default_branch=data.get("default_branch") or "main",
        )
