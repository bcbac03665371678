"""
git_info.py

Responsibility: Derive project metadata (org / repo) from the local git remote.

Only `git config --get remote.origin.url` is run; nothing is written.
"""

from __future__ import annotations

import re
import subprocess
from dataclasses import dataclass
from pathlib import Path


class GitMetadataError(RuntimeError):
    pass


@dataclass(frozen=True)
class GitMetadata:
    org: str
    repo: str
    remote_url: str = ""
    host: str = "github.com"

    @property
    def slug(self) -> str:
        return f"{self.org}/{self.repo}"

    @property
    def clone_url(self) -> str:
        return f"https://{self.host}/{self.slug}.git"


# git@github.com:org/repo.git
_SCP_RE = re.compile(r"^[\w.-]+@(?P<host>[\w.-]+):(?P<path>.+)$")
# https://github.com/org/repo.git, ssh://git@github.com/org/repo.git
_URL_RE = re.compile(r"^(?:https?|ssh|git)://(?:[^@/]+@)?(?P<host>[\w.-]+)(?::\d+)?/(?P<path>.+)$")


def parse_remote_url(url: str) -> GitMetadata:
    """
    Split a git remote URL into org and repo name.
    """
    raw = url.strip()
    m = _SCP_RE.match(raw) or _URL_RE.match(raw)
    if not m:
        raise GitMetadataError(f"Unrecognized git remote URL: {raw!r}")

    path = m.group("path").strip("/")
    if path.endswith(".git"):
        path = path[: -len(".git")]
    parts = [p for p in path.split("/") if p]
    if len(parts) < 2:
        raise GitMetadataError(f"Git remote URL has no org/repo path: {raw!r}")

    return GitMetadata(org=parts[-2], repo=parts[-1], remote_url=raw, host=m.group("host"))


def read_git_metadata(cwd: str | Path = ".") -> GitMetadata:
    """
    Read the `origin` remote of the repository at `cwd`.
    """
    cmd = ["git", "config", "--get", "remote.origin.url"]
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            check=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
    except OSError as e:
        raise GitMetadataError(f"Cannot run git in {cwd}: {e}") from e
    except subprocess.CalledProcessError as e:
        raise GitMetadataError(f"Command failed: {' '.join(cmd)}\n\n{e.stdout}") from e

    return parse_remote_url(proc.stdout)
