"""Schemas for the GitHub repository a jj repo pushes to."""

import re

from pydantic import Field

from .base import SchemaBase

# git@github.com:owner/name.git, ssh://git@github.com/owner/name, https://github.com/owner/name.git
_REMOTE_URL = re.compile(
    r"^(?:[\w+.-]+://)?(?:[^@/]+@)?[^/:]+[:/](?P<owner>[^/]+)/(?P<name>[^/]+?)(?:\.git)?/?$"
)


class RepositoryRef(SchemaBase):
    """Owner and name of a GitHub repository."""

    owner: str = Field(min_length=1, description="GitHub org or user")
    name: str = Field(min_length=1, description="Repository name")

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name


def parse_repo_string(repo: str) -> tuple[str, str]:
    """Split an 'owner/name' string.

    Raises:
        ValueError: If the string is not in owner/name format
    """
    owner, sep, name = repo.strip().partition("/")
    if not sep or not owner or not name or "/" in name:
        raise ValueError(f"Repository must be in owner/name format, got {repo!r}")
    return owner, name


def parse_remote_url(url: str) -> RepositoryRef:
    """Parse a git remote URL into a RepositoryRef.

    Examples:
        >>> parse_remote_url("git@github.com:martinvonz/jj.git").full_name
        'martinvonz/jj'

    Raises:
        ValueError: If the URL does not name an owner/repository
    """
    match = _REMOTE_URL.match(url.strip())
    if match is None:
        raise ValueError(f"Cannot determine GitHub repository from remote URL {url!r}")
    return RepositoryRef(owner=match["owner"], name=match["name"])
